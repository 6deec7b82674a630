from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from kanban_board.db.database import get_async_session
from kanban_board.services.card_service import CardService
from kanban_board.services.lifecycle_service import LifecycleService
from kanban_board.services.ordering_service import OrderingService
from kanban_board.services.search_service import SearchService
from kanban_board.schemas.card import (
    CardResponse,
    CardDetailResponse,
    CardUpdate,
    CardMove,
    CardQuickCreate,
    CardSearchFilters
)
from kanban_board.logs import api_logger

router = APIRouter(
    prefix="/cards",
    tags=["cards"],
)

# Top-level alias of GET /cards
search_router = APIRouter(
    prefix="/search",
    tags=["cards"],
)


@search_router.get("", response_model=List[CardResponse])
@router.get("", response_model=List[CardResponse])
async def search_cards(
    query: Optional[str] = Query(None, description="Substring of title or description"),
    board_id: Optional[int] = Query(None),
    list_id: Optional[int] = Query(None),
    archived: Optional[bool] = Query(None),
    label_id: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_async_session),
):
    """Search cards; all given filters must match"""
    filters = CardSearchFilters(
        query=query,
        board_id=board_id,
        list_id=list_id,
        archived=archived,
        label_id=label_id
    )
    return await SearchService.search_cards(db=db, filters=filters)


@router.post("/quick", response_model=CardResponse, status_code=status.HTTP_201_CREATED)
async def quick_create_card(
    card_create: CardQuickCreate,
    db: AsyncSession = Depends(get_async_session),
):
    """Create a card by board and list name, for bots and scripts"""
    card = await CardService.quick_create(
        db=db,
        title=card_create.title,
        board_name=card_create.board_name,
        list_name=card_create.list_name,
        description=card_create.description,
        color=card_create.color
    )
    api_logger.info(f"Quick card {card.id} created in list {card.list_id}")
    return card


@router.get("/{card_id}", response_model=CardDetailResponse)
async def get_card(
    card_id: int,
    db: AsyncSession = Depends(get_async_session),
):
    """Get a card with its comments and labels"""
    return await CardService.get_by_id(db=db, card_id=card_id, load_relations=True)


@router.put("/{card_id}", response_model=CardDetailResponse)
async def update_card(
    card_id: int,
    card_update: CardUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    """Update card details"""
    return await CardService.update(
        db=db,
        card_id=card_id,
        title=card_update.title,
        description=card_update.description,
        color=card_update.color,
        due_date=card_update.due_date
    )


@router.patch("/{card_id}/move", response_model=CardDetailResponse)
async def move_card(
    card_id: int,
    card_move: CardMove,
    db: AsyncSession = Depends(get_async_session),
):
    """Move a card into a list at the position computed by the client"""
    return await OrderingService.move_card(
        db=db,
        card_id=card_id,
        target_list_id=card_move.list_id,
        position=card_move.position
    )


@router.post("/{card_id}/archive", response_model=CardDetailResponse)
async def archive_card(
    card_id: int,
    db: AsyncSession = Depends(get_async_session),
):
    """Archive a card"""
    return await LifecycleService.archive(db=db, card_id=card_id)


@router.post("/{card_id}/unarchive", response_model=CardDetailResponse)
async def unarchive_card(
    card_id: int,
    db: AsyncSession = Depends(get_async_session),
):
    """Restore an archived card"""
    return await LifecycleService.unarchive(db=db, card_id=card_id)


@router.delete("/{card_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_card(
    card_id: int,
    db: AsyncSession = Depends(get_async_session),
):
    """Delete a card with its comments and label links"""
    await LifecycleService.delete_card(db=db, card_id=card_id)
