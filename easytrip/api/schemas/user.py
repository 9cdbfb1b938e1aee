#!/usr/bin/env python3
"""Pydantic schemas for profile and admin management"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    firebase_uid: str
    email: Optional[str] = None
    name: Optional[str] = None
    photo_url: Optional[str] = None
    is_admin: bool = False
    created_at: Optional[datetime] = None


class ProfileUpdate(BaseModel):
    """Profile fields a user may edit; omitted fields are kept"""
    name: Optional[str] = Field(None, description="Display name")
    photo_url: Optional[str] = Field(None, description="Avatar URL")


class AdminCheckResponse(BaseModel):
    uid: str
    is_admin: bool


class AdminGrant(BaseModel):
    email: str = Field(..., description="Email of an existing user")
