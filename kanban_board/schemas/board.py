from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from kanban_board.schemas.board_list import ListResponse


class BoardBase(BaseModel):
    """Base schema for board data"""
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None


class BoardCreate(BoardBase):
    """Schema for board creation"""
    pass


class BoardUpdate(BaseModel):
    """Schema for board update"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None


class BoardResponse(BoardBase):
    """Schema for board response"""
    id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class BoardCompleteResponse(BoardResponse):
    """Board together with its lists in display order"""
    lists: List[ListResponse] = []
