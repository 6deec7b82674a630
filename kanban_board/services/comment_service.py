from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from kanban_board.core.exceptions import persistence_error, require_text
from kanban_board.models.card import Comment
from kanban_board.services.card_service import CardService


class CommentService:
    """Comments are append-only; they disappear only with their card"""

    @staticmethod
    async def add(
        db: AsyncSession,
        card_id: int,
        content: str
    ) -> Comment:
        """Add a comment to an existing card"""
        content = require_text(content, "content")
        await CardService.get_by_id(db, card_id)

        comment = Comment(
            card_id=card_id,
            content=content
        )
        db.add(comment)
        try:
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            raise persistence_error(f"add comment to card {card_id}", e) from e
        await db.refresh(comment)
        return comment

    @staticmethod
    async def get_by_card_id(
        db: AsyncSession,
        card_id: int
    ) -> List[Comment]:
        """Get all comments of a card, newest first"""
        await CardService.get_by_id(db, card_id)

        query = select(Comment).where(
            Comment.card_id == card_id
        ).order_by(Comment.created_at.desc(), Comment.id.desc())

        result = await db.execute(query)
        return list(result.scalars().all())
