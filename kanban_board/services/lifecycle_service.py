from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete
from sqlalchemy.exc import SQLAlchemyError

from kanban_board.core.exceptions import persistence_error
from kanban_board.db.base import utcnow
from kanban_board.models.board import Board
from kanban_board.models.board_list import BoardList
from kanban_board.models.card import Card, Comment
from kanban_board.models.label import card_labels
from kanban_board.services.board_service import BoardService
from kanban_board.services.card_service import CardService
from kanban_board.services.list_service import ListService
from kanban_board.logs import debug_logger, log_function


class LifecycleService:
    """Archival flags and cascading deletes"""

    @staticmethod
    async def _set_archived(
        db: AsyncSession,
        card_id: int,
        archived: bool
    ) -> Card:
        await CardService.get_by_id(db, card_id)
        try:
            stmt = update(Card).where(Card.id == card_id).values(
                archived=archived,
                updated_at=utcnow()
            )
            await db.execute(stmt)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            action = "archive" if archived else "unarchive"
            raise persistence_error(f"{action} card {card_id}", e) from e

        return await CardService.get_by_id(db, card_id, load_relations=True)

    @staticmethod
    @log_function()
    async def archive(db: AsyncSession, card_id: int) -> Card:
        """Hide a card from default listings without touching its position"""
        return await LifecycleService._set_archived(db, card_id, True)

    @staticmethod
    @log_function()
    async def unarchive(db: AsyncSession, card_id: int) -> Card:
        """Bring an archived card back into its old slot"""
        return await LifecycleService._set_archived(db, card_id, False)

    @staticmethod
    async def _delete_cards(db: AsyncSession, card_ids) -> None:
        # Deepest dependents first
        await db.execute(delete(card_labels).where(card_labels.c.card_id.in_(card_ids)))
        await db.execute(delete(Comment).where(Comment.card_id.in_(card_ids)))
        await db.execute(delete(Card).where(Card.id.in_(card_ids)))

    @staticmethod
    @log_function()
    async def delete_card(db: AsyncSession, card_id: int) -> None:
        """Delete a card with its comments and label associations"""
        await CardService.get_by_id(db, card_id)
        try:
            await LifecycleService._delete_cards(db, [card_id])
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            raise persistence_error(f"delete card {card_id}", e) from e
        debug_logger.info(f"Deleted card {card_id}")

    @staticmethod
    @log_function()
    async def delete_list(db: AsyncSession, list_id: int) -> None:
        """Delete a list and everything on it"""
        await ListService.get_by_id(db, list_id)
        card_ids = select(Card.id).where(Card.list_id == list_id)
        try:
            await LifecycleService._delete_cards(db, card_ids)
            await db.execute(delete(BoardList).where(BoardList.id == list_id))
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            raise persistence_error(f"delete list {list_id}", e) from e
        debug_logger.info(f"Deleted list {list_id}")

    @staticmethod
    @log_function()
    async def delete_board(db: AsyncSession, board_id: int) -> None:
        """Delete a board with its lists, cards, comments and label associations"""
        await BoardService.get_by_id(db, board_id)
        list_ids = select(BoardList.id).where(BoardList.board_id == board_id)
        card_ids = select(Card.id).where(Card.list_id.in_(list_ids))
        try:
            await LifecycleService._delete_cards(db, card_ids)
            await db.execute(delete(BoardList).where(BoardList.board_id == board_id))
            await db.execute(delete(Board).where(Board.id == board_id))
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            raise persistence_error(f"delete board {board_id}", e) from e
        debug_logger.info(f"Deleted board {board_id}")
