from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from kanban_board.db.database import get_async_session
from kanban_board.services.label_service import LabelService
from kanban_board.schemas.label import LabelCreate, LabelUpdate, LabelResponse

router = APIRouter(
    prefix="/labels",
    tags=["labels"],
)

card_labels_router = APIRouter(
    prefix="/cards/{card_id}/labels",
    tags=["labels"],
)


@router.post("", response_model=LabelResponse, status_code=status.HTTP_201_CREATED)
async def create_label(
    label_create: LabelCreate,
    db: AsyncSession = Depends(get_async_session),
):
    """Create a new label"""
    return await LabelService.create(
        db=db,
        name=label_create.name,
        color=label_create.color
    )


@router.get("", response_model=List[LabelResponse])
async def get_labels(
    db: AsyncSession = Depends(get_async_session),
):
    """Get all labels ordered by name"""
    return await LabelService.get_all(db=db)


@router.get("/{label_id}", response_model=LabelResponse)
async def get_label(
    label_id: int,
    db: AsyncSession = Depends(get_async_session),
):
    """Get a specific label by ID"""
    return await LabelService.get_by_id(db=db, label_id=label_id)


@router.put("/{label_id}", response_model=LabelResponse)
async def update_label(
    label_id: int,
    label_update: LabelUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    """Update a label"""
    return await LabelService.update(
        db=db,
        label_id=label_id,
        name=label_update.name,
        color=label_update.color
    )


@router.delete("/{label_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_label(
    label_id: int,
    db: AsyncSession = Depends(get_async_session),
):
    """Delete a label and detach it from every card"""
    await LabelService.delete(db=db, label_id=label_id)


@card_labels_router.get("", response_model=List[LabelResponse])
async def get_card_labels(
    card_id: int,
    db: AsyncSession = Depends(get_async_session),
):
    """Get the labels attached to a card"""
    return await LabelService.get_card_labels(db=db, card_id=card_id)


@card_labels_router.post("/{label_id}", status_code=status.HTTP_200_OK)
async def assign_label(
    card_id: int,
    label_id: int,
    db: AsyncSession = Depends(get_async_session),
):
    """Attach a label to a card"""
    await LabelService.assign_to_card(db=db, card_id=card_id, label_id=label_id)
    return {"message": "Label assigned to card"}


@card_labels_router.delete("/{label_id}", status_code=status.HTTP_200_OK)
async def remove_label(
    card_id: int,
    label_id: int,
    db: AsyncSession = Depends(get_async_session),
):
    """Detach a label from a card"""
    await LabelService.remove_from_card(db=db, card_id=card_id, label_id=label_id)
    return {"message": "Label removed from card"}
