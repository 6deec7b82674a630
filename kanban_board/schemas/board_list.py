from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class ListBase(BaseModel):
    """Base schema for list data"""
    name: str = Field(..., min_length=1, max_length=255)
    color: Optional[str] = Field(None, max_length=32)


class ListCreate(ListBase):
    """Schema for list creation; position is appended after the last list when omitted"""
    position: Optional[float] = Field(None, allow_inf_nan=False)


class ListUpdate(BaseModel):
    """Schema for list update"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    color: Optional[str] = Field(None, max_length=32)
    position: Optional[float] = Field(None, allow_inf_nan=False)


class ListMove(BaseModel):
    """Where the drag landed; real neighbours are resolved server-side"""
    position: float = Field(..., allow_inf_nan=False)


class ListResponse(BaseModel):
    """Schema for list response"""
    id: int
    board_id: int
    name: str
    color: str
    position: float
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
