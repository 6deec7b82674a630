from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_

from kanban_board.models.board_list import BoardList
from kanban_board.models.card import Card
from kanban_board.models.label import card_labels
from kanban_board.schemas.card import CardSearchFilters
from kanban_board.logs import debug_logger


class SearchService:
    """Card search across boards, lists and labels"""

    @staticmethod
    async def search_cards(
        db: AsyncSession,
        filters: CardSearchFilters
    ) -> List[Card]:
        """Cards matching every given filter, newest first.

        ``query`` is a case-insensitive substring match on title or
        description; the other filters are exact. Unset filters are ignored.
        """
        query = select(Card).outerjoin(BoardList, Card.list_id == BoardList.id)

        if filters.query:
            pattern = f"%{filters.query}%"
            query = query.where(or_(Card.title.ilike(pattern), Card.description.ilike(pattern)))

        if filters.board_id is not None:
            query = query.where(BoardList.board_id == filters.board_id)

        if filters.list_id is not None:
            query = query.where(Card.list_id == filters.list_id)

        if filters.archived is not None:
            query = query.where(Card.archived.is_(filters.archived))

        if filters.label_id is not None:
            query = query.outerjoin(card_labels, Card.id == card_labels.c.card_id).where(
                card_labels.c.label_id == filters.label_id
            )

        query = query.distinct().order_by(Card.created_at.desc(), Card.id.desc())

        result = await db.execute(query)
        cards = list(result.scalars().all())
        debug_logger.debug(f"Card search {filters.model_dump(exclude_none=True)} matched {len(cards)} cards")
        return cards
