from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from kanban_board.schemas.comment import CommentResponse
from kanban_board.schemas.label import LabelResponse


def _naive_utc(value):
    if isinstance(value, str) and value.endswith('Z'):
        # fromisoformat on older interpreters rejects the trailing Z
        value = datetime.fromisoformat(value.replace('Z', '+00:00'))
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.replace(tzinfo=None) - value.utcoffset()
    return value


class CardBase(BaseModel):
    """Base schema for card data"""
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    color: Optional[str] = Field(None, max_length=32)
    due_date: Optional[datetime] = None

    @field_validator('due_date', mode='before')
    @classmethod
    def parse_due_date(cls, value):
        return _naive_utc(value)


class CardCreate(CardBase):
    """Schema for card creation; position is appended after the last card when omitted"""
    position: Optional[float] = Field(None, allow_inf_nan=False)


class CardUpdate(BaseModel):
    """Schema for card update"""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    color: Optional[str] = Field(None, max_length=32)
    due_date: Optional[datetime] = None

    @field_validator('due_date', mode='before')
    @classmethod
    def parse_due_date(cls, value):
        return _naive_utc(value)


class CardMove(BaseModel):
    """Schema for moving a card; the position is computed by the caller"""
    list_id: int
    position: float = Field(..., allow_inf_nan=False)


class CardQuickCreate(BaseModel):
    """Schema for creating a card by board and list name"""
    title: str = Field(..., min_length=1, max_length=255)
    board_name: Optional[str] = None
    list_name: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = Field(None, max_length=32)


class CardSearchFilters(BaseModel):
    """All supplied filters are combined with AND"""
    query: Optional[str] = None
    board_id: Optional[int] = None
    list_id: Optional[int] = None
    archived: Optional[bool] = None
    label_id: Optional[int] = None


class CardResponse(BaseModel):
    """Schema for card response"""
    id: int
    list_id: int
    title: str
    description: Optional[str] = None
    color: Optional[str] = None
    due_date: Optional[datetime] = None
    position: float
    archived: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CardDetailResponse(CardResponse):
    """Single card with its comments (newest first) and labels"""
    comments: List[CommentResponse] = []
    labels: List[LabelResponse] = []
