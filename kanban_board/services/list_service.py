from typing import List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func
from sqlalchemy.exc import SQLAlchemyError

from kanban_board.core.exceptions import NotFoundError, persistence_error, require_position, require_text
from kanban_board.db.base import utcnow
from kanban_board.db.transactions import container_transaction
from kanban_board.models.board import Board
from kanban_board.models.board_list import BoardList, DEFAULT_LIST_COLOR
from kanban_board.services.position_allocator import append_position
from kanban_board.logs import debug_logger, log_function

BOARD_CONTAINER = "board"


class ListService:
    """Persistence and sibling lookups for lists, scoped to their board"""

    @staticmethod
    @log_function()
    async def create(
        db: AsyncSession,
        board_id: int,
        name: str,
        color: Optional[str] = None,
        position: Optional[float] = None
    ) -> BoardList:
        """Create a list; without a position it goes after the last list of the board"""
        name = require_text(name, "name")
        position = require_position(position)

        async with container_transaction(db, BOARD_CONTAINER, board_id, "create list"):
            await ListService.lock_board(db, board_id)

            if position is None:
                position = append_position(await ListService.max_position(db, board_id))

            board_list = BoardList(
                board_id=board_id,
                name=name,
                color=color or DEFAULT_LIST_COLOR,
                position=position
            )
            db.add(board_list)
            await db.flush()

        debug_logger.info(f"Created list {board_list.id} on board {board_id} at position {position}")
        return board_list

    @staticmethod
    async def lock_board(
        db: AsyncSession,
        board_id: int
    ) -> None:
        """Row-lock the owning board (where supported) and check it exists"""
        query = select(Board.id).where(Board.id == board_id).with_for_update()
        result = await db.execute(query)
        if result.scalar() is None:
            raise NotFoundError(f"Board {board_id} not found")

    @staticmethod
    async def get_by_id(
        db: AsyncSession,
        list_id: int
    ) -> BoardList:
        """Get list by id"""
        query = select(BoardList).where(BoardList.id == list_id).execution_options(populate_existing=True)
        result = await db.execute(query)
        board_list = result.scalars().first()
        if board_list is None:
            raise NotFoundError(f"List {list_id} not found")
        return board_list

    @staticmethod
    async def get_by_board_id(
        db: AsyncSession,
        board_id: int
    ) -> List[BoardList]:
        """Get all lists of a board ordered by position"""
        query = (
            select(BoardList)
            .where(BoardList.board_id == board_id)
            .order_by(BoardList.position, BoardList.id)
            .execution_options(populate_existing=True)
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def get_by_board_and_name(
        db: AsyncSession,
        board_id: int,
        name: str
    ) -> Optional[BoardList]:
        query = (
            select(BoardList)
            .where(BoardList.board_id == board_id, BoardList.name == name)
            .order_by(BoardList.position, BoardList.id)
            .limit(1)
        )
        result = await db.execute(query)
        return result.scalars().first()

    @staticmethod
    async def max_position(
        db: AsyncSession,
        board_id: int
    ) -> Optional[float]:
        query = select(func.max(BoardList.position)).where(BoardList.board_id == board_id)
        result = await db.execute(query)
        return result.scalar()

    @staticmethod
    async def get_ordered_ids(
        db: AsyncSession,
        board_id: int
    ) -> List[int]:
        """Ids of the board's lists in display order"""
        query = select(BoardList.id).where(
            BoardList.board_id == board_id
        ).order_by(BoardList.position, BoardList.id)
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def get_adjacent_positions(
        db: AsyncSession,
        board_id: int,
        target_position: float,
        exclude_id: Optional[int] = None
    ) -> Tuple[Optional[float], Optional[float]]:
        """Closest sibling positions strictly below and strictly above the target"""
        prev_query = select(func.max(BoardList.position)).where(
            BoardList.board_id == board_id,
            BoardList.position < target_position
        )
        next_query = select(func.min(BoardList.position)).where(
            BoardList.board_id == board_id,
            BoardList.position > target_position
        )
        if exclude_id is not None:
            prev_query = prev_query.where(BoardList.id != exclude_id)
            next_query = next_query.where(BoardList.id != exclude_id)

        prev = (await db.execute(prev_query)).scalar()
        next = (await db.execute(next_query)).scalar()
        return prev, next

    @staticmethod
    async def update_position(
        db: AsyncSession,
        list_id: int,
        position: float
    ) -> None:
        """Write only the position; the caller owns the transaction"""
        stmt = update(BoardList).where(BoardList.id == list_id).values(
            position=position,
            updated_at=utcnow()
        )
        result = await db.execute(stmt)
        if result.rowcount == 0:
            raise NotFoundError(f"List {list_id} not found")

    @staticmethod
    @log_function()
    async def update(
        db: AsyncSession,
        list_id: int,
        name: Optional[str] = None,
        color: Optional[str] = None,
        position: Optional[float] = None
    ) -> BoardList:
        """Update a list's details; an explicit position is stored verbatim"""
        await ListService.get_by_id(db, list_id)

        update_data = {}
        if name is not None:
            update_data["name"] = require_text(name, "name")
        if color is not None:
            update_data["color"] = color
        if position is not None:
            update_data["position"] = require_position(position)

        if not update_data:
            return await ListService.get_by_id(db, list_id)

        update_data["updated_at"] = utcnow()

        try:
            stmt = update(BoardList).where(BoardList.id == list_id).values(**update_data)
            await db.execute(stmt)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            raise persistence_error(f"update list {list_id}", e) from e

        return await ListService.get_by_id(db, list_id)
