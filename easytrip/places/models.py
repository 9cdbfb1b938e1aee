from sqlalchemy import Column, Integer, String, Text, Float, DateTime, JSON, CheckConstraint, ForeignKey
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from easytrip.core.db import Base
from easytrip.places.services.ratings import average_rating

# JSONB on PostgreSQL, plain JSON elsewhere
JsonType = JSON().with_variant(JSONB(), "postgresql")

# custom_keys entries that duplicate audit columns and are never displayed
RESERVED_CUSTOM_KEYS = frozenset({
    "created_by", "created_at", "updated_by", "updated_at",
    "created_by_name", "updated_by_name", "previous_update",
})


class Place(Base):
    __tablename__ = "places"
    __table_args__ = (
        CheckConstraint("rating_count >= 0", name="ck_places_rating_count_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)

    # Descriptive
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    location = Column(Text, nullable=False)
    district = Column(Text, nullable=True)
    state = Column(Text, nullable=True)
    locality = Column(Text, nullable=True)
    pin_code = Column(String(16), nullable=True)

    # Geo (both or neither expected, not enforced)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    # Classification
    themes = Column(JsonType, nullable=False, default=list)
    tags = Column(JsonType, nullable=False, default=list)
    custom_keys = Column(JsonType, nullable=False, default=dict)

    # Media
    primary_image_url = Column(Text, nullable=True)

    # Rating aggregate; the average is always derived
    rating_count = Column(Integer, nullable=False, default=0, server_default="0")
    rating_sum = Column(Integer, nullable=False, default=0, server_default="0")

    # Audit
    created_by = Column(Text, nullable=True)
    updated_by = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    images = relationship(
        "PlaceImage",
        back_populates="place",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    reviews = relationship(
        "PlaceReview",
        back_populates="place",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def average_rating(self):
        return average_rating(self.rating_sum or 0, self.rating_count or 0)

    @property
    def image_url(self) -> str:
        """Primary image URL, or the API route that serves a fallback/placeholder."""
        return self.primary_image_url or f"/api/places/{self.id}/image"

    def display_custom_keys(self) -> dict:
        """custom_keys without the reserved audit entries, in stored order."""
        return {
            key: value
            for key, value in (self.custom_keys or {}).items()
            if key not in RESERVED_CUSTOM_KEYS
        }

    def __repr__(self):
        return f"<Place(id={self.id}, name='{self.name}', location='{self.location}')>"


class PlaceImage(Base):
    """Secondary images of a place"""
    __tablename__ = "place_images"

    id = Column(Integer, primary_key=True, index=True)
    place_id = Column(Integer, ForeignKey("places.id", ondelete="CASCADE"), nullable=False, index=True)
    image_url = Column(Text, nullable=True)
    caption = Column(Text, nullable=True)
    display_order = Column(Integer, nullable=False, default=0, server_default="0")
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    place = relationship("Place", back_populates="images")


class PlaceReview(Base):
    """One user's rating and comment for a place"""
    __tablename__ = "place_reviews"
    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_place_reviews_rating_range"),
    )

    id = Column(Integer, primary_key=True, index=True)
    place_id = Column(Integer, ForeignKey("places.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Text, nullable=False)
    user_name = Column(Text, nullable=True)  # denormalized at submission time
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    place = relationship("Place", back_populates="reviews")
