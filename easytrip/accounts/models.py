from sqlalchemy import Column, Integer, Text, Boolean, DateTime
from sqlalchemy.sql import func
from easytrip.core.db import Base


class User(Base):
    """Local mirror of an authenticated account"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    firebase_uid = Column(Text, nullable=False, unique=True, index=True)
    email = Column(Text, nullable=True, index=True)
    name = Column(Text, nullable=True)
    photo_url = Column(Text, nullable=True)
    is_admin = Column(Boolean, nullable=False, default=False, server_default="false")
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<User(id={self.id}, uid='{self.firebase_uid}', email='{self.email}')>"
