from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


class ReviewCreate(BaseModel):
    """Request to review a place; range is checked by the route (400)"""
    rating: int = Field(..., description="Integer rating 1-5")
    comment: Optional[str] = Field(None, description="Free-text comment")


class ReviewRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    place_id: int
    user_id: str
    user_name: Optional[str] = None
    rating: int
    comment: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
