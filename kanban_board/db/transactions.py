from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from kanban_board.core.exceptions import persistence_error
from kanban_board.core.locks import container_locks


@asynccontextmanager
async def container_transaction(
    db: AsyncSession,
    kind: str,
    container_id: int,
    operation: str,
) -> AsyncIterator[AsyncSession]:
    """Serialize a read-then-write on one container and commit it atomically.

    Everything executed inside the block (neighbour lookup and the position
    write) is committed once on exit, or rolled back on any error.
    """
    async with container_locks.hold(kind, container_id):
        # Reads must come from a snapshot taken inside the critical section
        if db.in_transaction():
            await db.commit()
        try:
            yield db
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            raise persistence_error(operation, e) from e
        except Exception:
            await db.rollback()
            raise
