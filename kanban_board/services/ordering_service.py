from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import update

from kanban_board.core import get_settings
from kanban_board.core.exceptions import InvalidReferenceError, NotFoundError, require_position
from kanban_board.db.base import utcnow
from kanban_board.db.transactions import container_transaction
from kanban_board.models.board_list import BoardList
from kanban_board.models.card import Card
from kanban_board.services.card_service import CardService, LIST_CONTAINER
from kanban_board.services.list_service import ListService, BOARD_CONTAINER
from kanban_board.services.position_allocator import (
    allocate_position,
    gap_is_exhausted,
    respaced_positions,
)
from kanban_board.logs import debug_logger, log_function


class OrderingService:
    """Moves and respacing for lists within a board and cards within a list.

    Every neighbour lookup happens under the container lock in the same
    transaction as the position write, so two concurrent moves into one
    container never read the same pair of neighbours.
    """

    @staticmethod
    @log_function()
    async def move_list(
        db: AsyncSession,
        list_id: int,
        target_position: float
    ) -> BoardList:
        """Place a list between the siblings around ``target_position``"""
        require_position(target_position, "target_position")
        board_list = await ListService.get_by_id(db, list_id)
        board_id = board_list.board_id
        min_gap = get_settings().POSITION_MIN_GAP

        async with container_transaction(db, BOARD_CONTAINER, board_id, f"move list {list_id}"):
            await ListService.lock_board(db, board_id)

            prev, next = await ListService.get_adjacent_positions(
                db, board_id, target_position, exclude_id=list_id
            )
            if prev is None:
                prev = 0.0
            if next is None:
                next = prev + 2.0

            position = allocate_position(prev, next)
            await ListService.update_position(db, list_id, position)
            debug_logger.debug(f"List {list_id}: neighbours ({prev}, {next}) -> {position}")

            if gap_is_exhausted(prev, position, next, min_gap):
                debug_logger.warning(f"Position gap exhausted on board {board_id}, respacing lists")
                await OrderingService._respace_lists(db, board_id)

        return await ListService.get_by_id(db, list_id)

    @staticmethod
    @log_function()
    async def move_card(
        db: AsyncSession,
        card_id: int,
        target_list_id: int,
        position: float
    ) -> Card:
        """Put a card into ``target_list_id`` at the caller-computed position.

        The position is stored as given, ties with siblings included; the
        target list is respaced only when the gap to a neighbour is exhausted.
        """
        require_position(position)
        await CardService.get_by_id(db, card_id)
        try:
            await ListService.get_by_id(db, target_list_id)
        except NotFoundError as e:
            raise InvalidReferenceError(f"Target list {target_list_id} does not exist") from e

        min_gap = get_settings().POSITION_MIN_GAP

        async with container_transaction(db, LIST_CONTAINER, target_list_id, f"move card {card_id}"):
            await CardService.lock_list(db, target_list_id)
            await CardService.write_move(db, card_id, target_list_id, position)

            prev, next = await CardService.get_adjacent_positions(
                db, target_list_id, position, exclude_id=card_id
            )
            if gap_is_exhausted(prev, position, next, min_gap):
                debug_logger.warning(f"Position gap exhausted in list {target_list_id}, respacing cards")
                await OrderingService._respace_cards(db, target_list_id)

        return await CardService.get_by_id(db, card_id, load_relations=True)

    @staticmethod
    @log_function()
    async def respace_lists(
        db: AsyncSession,
        board_id: int
    ) -> List[BoardList]:
        """Reassign 1.0 .. n to the lists of a board, keeping their order"""
        async with container_transaction(db, BOARD_CONTAINER, board_id, f"respace lists of board {board_id}"):
            await ListService.lock_board(db, board_id)
            await OrderingService._respace_lists(db, board_id)

        return await ListService.get_by_board_id(db, board_id)

    @staticmethod
    @log_function()
    async def respace_cards(
        db: AsyncSession,
        list_id: int
    ) -> List[Card]:
        """Reassign 1.0 .. n to every card of a list, archived ones included"""
        async with container_transaction(db, LIST_CONTAINER, list_id, f"respace cards of list {list_id}"):
            await CardService.lock_list(db, list_id)
            await OrderingService._respace_cards(db, list_id)

        return await CardService.get_by_list_id(db, list_id, include_archived=True)

    @staticmethod
    async def _respace_lists(db: AsyncSession, board_id: int) -> None:
        ids = await ListService.get_ordered_ids(db, board_id)

        now = utcnow()
        for list_id, position in zip(ids, respaced_positions(len(ids))):
            # Scoped to the board so a row that left it is never renumbered
            await db.execute(
                update(BoardList)
                .where(BoardList.id == list_id, BoardList.board_id == board_id)
                .values(position=position, updated_at=now)
            )
        debug_logger.info(f"Respaced {len(ids)} lists on board {board_id}")

    @staticmethod
    async def _respace_cards(db: AsyncSession, list_id: int) -> None:
        ids = await CardService.get_ordered_ids(db, list_id)

        for card_id, position in zip(ids, respaced_positions(len(ids))):
            await db.execute(
                update(Card)
                .where(Card.id == card_id, Card.list_id == list_id)
                .values(position=position)
            )
        debug_logger.info(f"Respaced {len(ids)} cards in list {list_id}")
