from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from kanban_board.db.database import get_async_session
from kanban_board.services.comment_service import CommentService
from kanban_board.schemas.comment import CommentCreate, CommentResponse

router = APIRouter(
    prefix="/cards/{card_id}/comments",
    tags=["comments"],
)


@router.post("", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def add_comment(
    card_id: int,
    comment_create: CommentCreate,
    db: AsyncSession = Depends(get_async_session),
):
    """Add a comment to a card"""
    return await CommentService.add(
        db=db,
        card_id=card_id,
        content=comment_create.content
    )


@router.get("", response_model=List[CommentResponse])
async def get_comments(
    card_id: int,
    db: AsyncSession = Depends(get_async_session),
):
    """Get all comments of a card, newest first"""
    return await CommentService.get_by_card_id(db=db, card_id=card_id)
