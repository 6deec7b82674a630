from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class LabelBase(BaseModel):
    """Base label schema"""
    name: str = Field(..., min_length=1, max_length=50, description="Unique label name")
    color: str = Field(..., min_length=1, max_length=32, description="Label colour (hex)")


class LabelCreate(LabelBase):
    """Schema for label creation"""
    pass


class LabelUpdate(BaseModel):
    """Schema for label update"""
    name: Optional[str] = Field(None, min_length=1, max_length=50, description="Unique label name")
    color: Optional[str] = Field(None, min_length=1, max_length=32, description="Label colour (hex)")


class LabelResponse(LabelBase):
    """Schema for label response"""
    id: int = Field(..., description="Label identifier")
    created_at: datetime

    class Config:
        from_attributes = True
