from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, Dict, List
from datetime import datetime

from easytrip.places.models import RESERVED_CUSTOM_KEYS


class PlaceBase(BaseModel):
    name: str
    description: Optional[str] = None
    location: str
    district: Optional[str] = None
    state: Optional[str] = None
    locality: Optional[str] = None
    pin_code: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    themes: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    custom_keys: Dict[str, str] = Field(default_factory=dict)

    @field_validator("themes", "tags", mode="before")
    @classmethod
    def _none_as_empty_list(cls, value):
        return value or []

    @field_validator("custom_keys", mode="before")
    @classmethod
    def _displayable_custom_keys(cls, value):
        # audit entries duplicated into custom_keys are never shown
        return {
            str(k): "" if v is None else str(v)
            for k, v in (value or {}).items()
            if k not in RESERVED_CUSTOM_KEYS
        }


class PlaceRead(PlaceBase):
    """Place as returned by the API and parsed back by the client"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    primary_image_url: Optional[str] = None
    image_url: Optional[str] = None
    rating_count: int = 0
    rating_sum: int = 0
    average_rating: Optional[float] = None
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PlaceImageRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    place_id: int
    image_url: Optional[str] = None
    caption: Optional[str] = None
    display_order: int = 0
    created_at: Optional[datetime] = None
