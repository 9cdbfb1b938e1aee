#!/usr/bin/env python3
"""Review store: reviews plus the place rating counters they feed"""

import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from easytrip.places.models import Place, PlaceReview

logger = logging.getLogger(__name__)

MIN_REVIEW_RATING = 1
MAX_REVIEW_RATING = 5


def validate_rating(rating) -> int:
    """
    Raises:
        ValueError: rating is not an integer in 1..5
    """
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise ValueError("rating must be an integer")
    if rating < MIN_REVIEW_RATING or rating > MAX_REVIEW_RATING:
        raise ValueError(f"rating must be between {MIN_REVIEW_RATING} and {MAX_REVIEW_RATING}")
    return rating


class ReviewStore:
    def __init__(self, db: Session):
        self.db = db

    def list_for_place(self, place_id: int) -> List[PlaceReview]:
        """Reviews of a place, newest first"""
        return (
            self.db.query(PlaceReview)
            .filter(PlaceReview.place_id == place_id)
            .order_by(PlaceReview.created_at.desc(), PlaceReview.id.desc())
            .all()
        )

    def submit(
        self,
        place_id: int,
        user_id: str,
        user_name: Optional[str],
        rating: int,
        comment: Optional[str] = None,
    ) -> Optional[PlaceReview]:
        """
        Store a review and fold its rating into the place aggregate.

        The counter increment is a single UPDATE evaluated by the database,
        so concurrent submissions never lose an increment. Review and
        counters commit together or not at all. Returns None when the
        place does not exist.
        """
        rating = validate_rating(rating)
        try:
            updated = (
                self.db.query(Place)
                .filter(Place.id == place_id)
                .update(
                    {
                        Place.rating_count: Place.rating_count + 1,
                        Place.rating_sum: Place.rating_sum + rating,
                        # rating changes are not content edits
                        Place.updated_at: Place.updated_at,
                    },
                    synchronize_session=False,
                )
            )
            if not updated:
                self.db.rollback()
                return None

            review = PlaceReview(
                place_id=place_id,
                user_id=user_id,
                user_name=user_name,
                rating=rating,
                comment=comment,
            )
            self.db.add(review)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"Review submission failed for place {place_id}")
            raise

        self.db.refresh(review)
        logger.info(f"Review {review.id} added to place {place_id} (rating={rating})")
        return review


def create_review_store(db: Session) -> ReviewStore:
    """Factory function to create ReviewStore instance"""
    return ReviewStore(db)
