from typing import List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload
from datetime import datetime

from kanban_board.core import get_settings
from kanban_board.core.exceptions import NotFoundError, persistence_error, require_position, require_text
from kanban_board.db.base import utcnow
from kanban_board.db.transactions import container_transaction
from kanban_board.models.board_list import BoardList
from kanban_board.models.card import Card
from kanban_board.services.board_service import BoardService
from kanban_board.services.list_service import ListService
from kanban_board.services.position_allocator import append_position
from kanban_board.logs import debug_logger, log_function

LIST_CONTAINER = "list"


class CardService:
    """CRUD operations service for Card model"""

    @staticmethod
    @log_function()
    async def create(
        db: AsyncSession,
        list_id: int,
        title: str,
        description: Optional[str] = None,
        color: Optional[str] = None,
        due_date: Optional[datetime] = None,
        position: Optional[float] = None
    ) -> Card:
        """Create a new card; without a position it goes after the last card of the list"""
        title = require_text(title, "title")
        position = require_position(position)

        async with container_transaction(db, LIST_CONTAINER, list_id, "create card"):
            await CardService.lock_list(db, list_id)

            if position is None:
                position = append_position(await CardService.max_position(db, list_id))

            card = Card(
                list_id=list_id,
                title=title,
                description=description,
                color=color,
                due_date=due_date,
                position=position,
                archived=False
            )
            db.add(card)
            await db.flush()

        debug_logger.info(f"Created card {card.id} in list {list_id} at position {position}")
        return card

    @staticmethod
    async def lock_list(
        db: AsyncSession,
        list_id: int
    ) -> BoardList:
        """Row-lock the owning list (where supported) and check it exists"""
        query = select(BoardList).where(BoardList.id == list_id).with_for_update()
        result = await db.execute(query)
        board_list = result.scalars().first()
        if board_list is None:
            raise NotFoundError(f"List {list_id} not found")
        return board_list

    @staticmethod
    async def get_by_id(
        db: AsyncSession,
        card_id: int,
        load_relations: bool = False
    ) -> Card:
        """Get a card by ID, optionally with comments and labels attached"""
        query = select(Card).where(Card.id == card_id).execution_options(populate_existing=True)

        if load_relations:
            query = query.options(
                selectinload(Card.comments),
                selectinload(Card.labels)
            )

        result = await db.execute(query)
        card = result.scalars().first()
        if card is None:
            raise NotFoundError(f"Card {card_id} not found")
        return card

    @staticmethod
    async def get_by_list_id(
        db: AsyncSession,
        list_id: int,
        include_archived: bool = False
    ) -> List[Card]:
        """Get the cards of a list ordered by position"""
        query = select(Card).where(Card.list_id == list_id)

        if not include_archived:
            query = query.where(Card.archived.is_(False))

        query = query.order_by(Card.position, Card.id).execution_options(populate_existing=True)
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def max_position(
        db: AsyncSession,
        list_id: int
    ) -> Optional[float]:
        # Archived cards keep their slot, so they count towards the maximum
        query = select(func.max(Card.position)).where(Card.list_id == list_id)
        result = await db.execute(query)
        return result.scalar()

    @staticmethod
    async def get_adjacent_positions(
        db: AsyncSession,
        list_id: int,
        target_position: float,
        exclude_id: Optional[int] = None
    ) -> Tuple[Optional[float], Optional[float]]:
        """Closest sibling positions strictly below and strictly above the target"""
        prev_query = select(func.max(Card.position)).where(
            Card.list_id == list_id,
            Card.position < target_position
        )
        next_query = select(func.min(Card.position)).where(
            Card.list_id == list_id,
            Card.position > target_position
        )
        if exclude_id is not None:
            prev_query = prev_query.where(Card.id != exclude_id)
            next_query = next_query.where(Card.id != exclude_id)

        prev = (await db.execute(prev_query)).scalar()
        next = (await db.execute(next_query)).scalar()
        return prev, next

    @staticmethod
    async def get_ordered_ids(
        db: AsyncSession,
        list_id: int
    ) -> List[int]:
        """Ids of every card in the list, archived included, in display order"""
        query = select(Card.id).where(
            Card.list_id == list_id
        ).order_by(Card.position, Card.id)
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def write_move(
        db: AsyncSession,
        card_id: int,
        list_id: int,
        position: float
    ) -> None:
        """Change list reference and position in one statement; caller owns the transaction"""
        stmt = update(Card).where(Card.id == card_id).values(
            list_id=list_id,
            position=position,
            updated_at=utcnow()
        )
        result = await db.execute(stmt)
        if result.rowcount == 0:
            raise NotFoundError(f"Card {card_id} not found")

    @staticmethod
    @log_function()
    async def update(
        db: AsyncSession,
        card_id: int,
        title: Optional[str] = None,
        description: Optional[str] = None,
        color: Optional[str] = None,
        due_date: Optional[datetime] = None
    ) -> Card:
        """Update a card's details; position and list changes go through moves"""
        debug_logger.debug(f"Updating card {card_id}")
        await CardService.get_by_id(db, card_id)

        update_data = {}
        if title is not None:
            update_data["title"] = require_text(title, "title")
        if description is not None:
            update_data["description"] = description
        if color is not None:
            update_data["color"] = color
        if due_date is not None:
            update_data["due_date"] = due_date

        if update_data:
            update_data["updated_at"] = utcnow()
            debug_logger.debug(f"Card {card_id} fields to update: {update_data}")
            try:
                stmt = update(Card).where(Card.id == card_id).values(**update_data)
                await db.execute(stmt)
                await db.commit()
            except SQLAlchemyError as e:
                await db.rollback()
                raise persistence_error(f"update card {card_id}", e) from e

        return await CardService.get_by_id(db, card_id, load_relations=True)

    @staticmethod
    @log_function()
    async def quick_create(
        db: AsyncSession,
        title: str,
        board_name: Optional[str] = None,
        list_name: Optional[str] = None,
        description: Optional[str] = None,
        color: Optional[str] = None
    ) -> Card:
        """Create a card by board and list name, falling back to the first board and list"""
        settings = get_settings()
        board_name = board_name or settings.DEFAULT_BOARD_NAME
        list_name = list_name or settings.DEFAULT_LIST_NAME

        board = await BoardService.get_by_name(db, board_name)
        if board is None:
            boards = await BoardService.get_all(db)
            if not boards:
                raise NotFoundError("No boards available. Please create a board first.")
            board = boards[0]

        board_list = await ListService.get_by_board_and_name(db, board.id, list_name)
        if board_list is None:
            lists = await ListService.get_by_board_id(db, board.id)
            if not lists:
                raise NotFoundError("No lists available in the board. Please create a list first.")
            board_list = lists[0]

        debug_logger.debug(f"Quick card '{title}' goes to list {board_list.id} on board {board.id}")
        return await CardService.create(
            db,
            list_id=board_list.id,
            title=title,
            description=description,
            color=color
        )
