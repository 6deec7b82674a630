from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from kanban_board.db.database import get_async_session
from kanban_board.services.board_service import BoardService
from kanban_board.services.list_service import ListService
from kanban_board.services.lifecycle_service import LifecycleService
from kanban_board.services.ordering_service import OrderingService
from kanban_board.schemas.board import (
    BoardCreate,
    BoardResponse,
    BoardUpdate,
    BoardCompleteResponse
)
from kanban_board.schemas.board_list import ListCreate, ListResponse
from kanban_board.logs import api_logger

router = APIRouter(
    prefix="/boards",
    tags=["boards"],
)


@router.post("", response_model=BoardResponse, status_code=status.HTTP_201_CREATED)
async def create_board(
    board_create: BoardCreate,
    db: AsyncSession = Depends(get_async_session),
):
    """Create a new board"""
    board = await BoardService.create(
        db=db,
        name=board_create.name,
        description=board_create.description
    )
    api_logger.info(f"Board {board.id} created")
    return board


@router.get("", response_model=List[BoardResponse])
async def get_boards(
    db: AsyncSession = Depends(get_async_session),
):
    """Get all boards, newest first"""
    return await BoardService.get_all(db=db)


@router.get("/{board_id}", response_model=BoardCompleteResponse)
async def get_board(
    board_id: int,
    db: AsyncSession = Depends(get_async_session),
):
    """Get a board with its lists in display order"""
    board = await BoardService.get_by_id(db=db, board_id=board_id)
    lists = await ListService.get_by_board_id(db=db, board_id=board_id)

    return BoardCompleteResponse(
        **BoardResponse.model_validate(board).model_dump(),
        lists=[ListResponse.model_validate(board_list) for board_list in lists]
    )


@router.put("/{board_id}", response_model=BoardResponse)
async def update_board(
    board_id: int,
    board_update: BoardUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    """Update board name or description"""
    return await BoardService.update(
        db=db,
        board_id=board_id,
        name=board_update.name,
        description=board_update.description
    )


@router.delete("/{board_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_board(
    board_id: int,
    db: AsyncSession = Depends(get_async_session),
):
    """Delete a board with all of its lists and cards"""
    await LifecycleService.delete_board(db=db, board_id=board_id)


@router.get("/{board_id}/lists", response_model=List[ListResponse])
async def get_board_lists(
    board_id: int,
    db: AsyncSession = Depends(get_async_session),
):
    """Get the lists of a board ordered by position"""
    await BoardService.get_by_id(db=db, board_id=board_id)
    return await ListService.get_by_board_id(db=db, board_id=board_id)


@router.post("/{board_id}/lists", response_model=ListResponse, status_code=status.HTTP_201_CREATED)
async def create_board_list(
    board_id: int,
    list_create: ListCreate,
    db: AsyncSession = Depends(get_async_session),
):
    """Create a list on a board; appended after the last list unless a position is given"""
    return await ListService.create(
        db=db,
        board_id=board_id,
        name=list_create.name,
        color=list_create.color,
        position=list_create.position
    )


@router.post("/{board_id}/lists/respace", response_model=List[ListResponse])
async def respace_board_lists(
    board_id: int,
    db: AsyncSession = Depends(get_async_session),
):
    """Renumber the lists of a board to 1, 2, 3, ... keeping their order"""
    return await OrderingService.respace_lists(db=db, board_id=board_id)
