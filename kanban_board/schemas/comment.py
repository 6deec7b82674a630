from datetime import datetime
from pydantic import BaseModel, Field


class CommentCreate(BaseModel):
    """Schema for comment creation"""
    content: str = Field(..., min_length=1)


class CommentResponse(BaseModel):
    """Schema for comment response"""
    id: int
    card_id: int
    content: str
    created_at: datetime

    class Config:
        from_attributes = True
