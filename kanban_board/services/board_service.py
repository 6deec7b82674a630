from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError

from kanban_board.core.exceptions import NotFoundError, persistence_error, require_text
from kanban_board.db.base import utcnow
from kanban_board.models.board import Board
from kanban_board.logs import debug_logger


class BoardService:
    """CRUD operations service for Board model"""

    @staticmethod
    async def create(
        db: AsyncSession,
        name: str,
        description: Optional[str] = None
    ) -> Board:
        """Create a new board"""
        board = Board(
            name=require_text(name, "name"),
            description=description
        )
        db.add(board)
        try:
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            raise persistence_error("create board", e) from e
        await db.refresh(board)
        debug_logger.info(f"Created board {board.id} '{board.name}'")
        return board

    @staticmethod
    async def get_by_id(
        db: AsyncSession,
        board_id: int
    ) -> Board:
        """Get board by id"""
        query = select(Board).where(Board.id == board_id).execution_options(populate_existing=True)
        result = await db.execute(query)
        board = result.scalars().first()
        if board is None:
            raise NotFoundError(f"Board {board_id} not found")
        return board

    @staticmethod
    async def get_by_name(
        db: AsyncSession,
        name: str
    ) -> Optional[Board]:
        query = select(Board).where(Board.name == name).order_by(Board.id).limit(1)
        result = await db.execute(query)
        return result.scalars().first()

    @staticmethod
    async def get_all(db: AsyncSession) -> List[Board]:
        """Get all boards, newest first"""
        query = select(Board).order_by(Board.created_at.desc(), Board.id.desc())
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def update(
        db: AsyncSession,
        board_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None
    ) -> Board:
        """Update a board's details"""
        await BoardService.get_by_id(db, board_id)

        update_data = {}
        if name is not None:
            update_data["name"] = require_text(name, "name")
        if description is not None:
            update_data["description"] = description

        if not update_data:
            return await BoardService.get_by_id(db, board_id)

        update_data["updated_at"] = utcnow()

        try:
            stmt = update(Board).where(Board.id == board_id).values(**update_data)
            await db.execute(stmt)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            raise persistence_error(f"update board {board_id}", e) from e

        return await BoardService.get_by_id(db, board_id)

