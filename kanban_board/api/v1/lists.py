from typing import List
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from kanban_board.db.database import get_async_session
from kanban_board.services.list_service import ListService
from kanban_board.services.card_service import CardService
from kanban_board.services.lifecycle_service import LifecycleService
from kanban_board.services.ordering_service import OrderingService
from kanban_board.schemas.board_list import ListResponse, ListUpdate, ListMove
from kanban_board.schemas.card import CardCreate, CardResponse

router = APIRouter(
    prefix="/lists",
    tags=["lists"],
)


@router.get("/{list_id}", response_model=ListResponse)
async def get_list(
    list_id: int,
    db: AsyncSession = Depends(get_async_session),
):
    """Get a specific list by ID"""
    return await ListService.get_by_id(db=db, list_id=list_id)


@router.put("/{list_id}", response_model=ListResponse)
async def update_list(
    list_id: int,
    list_update: ListUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    """Update a list's name, colour or raw position"""
    return await ListService.update(
        db=db,
        list_id=list_id,
        name=list_update.name,
        color=list_update.color,
        position=list_update.position
    )


@router.patch("/{list_id}/move", response_model=ListResponse)
async def move_list(
    list_id: int,
    list_move: ListMove,
    db: AsyncSession = Depends(get_async_session),
):
    """Move a list to where it was dropped; the final position is computed from its neighbours"""
    return await OrderingService.move_list(
        db=db,
        list_id=list_id,
        target_position=list_move.position
    )


@router.delete("/{list_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_list(
    list_id: int,
    db: AsyncSession = Depends(get_async_session),
):
    """Delete a list together with its cards"""
    await LifecycleService.delete_list(db=db, list_id=list_id)


@router.get("/{list_id}/cards", response_model=List[CardResponse])
async def get_list_cards(
    list_id: int,
    archived: bool = Query(False, description="Include archived cards"),
    db: AsyncSession = Depends(get_async_session),
):
    """Get the cards of a list ordered by position"""
    await ListService.get_by_id(db=db, list_id=list_id)
    return await CardService.get_by_list_id(
        db=db,
        list_id=list_id,
        include_archived=archived
    )


@router.post("/{list_id}/cards", response_model=CardResponse, status_code=status.HTTP_201_CREATED)
async def create_list_card(
    list_id: int,
    card_create: CardCreate,
    db: AsyncSession = Depends(get_async_session),
):
    """Create a card in a list; appended at the end unless a position is given"""
    return await CardService.create(
        db=db,
        list_id=list_id,
        title=card_create.title,
        description=card_create.description,
        color=card_create.color,
        due_date=card_create.due_date,
        position=card_create.position
    )


@router.post("/{list_id}/cards/respace", response_model=List[CardResponse])
async def respace_list_cards(
    list_id: int,
    db: AsyncSession = Depends(get_async_session),
):
    """Renumber every card of a list to 1, 2, 3, ... keeping their order"""
    return await OrderingService.respace_cards(db=db, list_id=list_id)
