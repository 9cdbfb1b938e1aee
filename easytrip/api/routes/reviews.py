import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List

from easytrip.core.db import get_db
from easytrip.core.security import Caller, get_current_caller
from easytrip.places.services.place_store import create_place_store
from easytrip.places.services.review_store import create_review_store, validate_rating
from easytrip.api.schemas.review import ReviewCreate, ReviewRead

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/places/{place_id}/reviews", response_model=List[ReviewRead])
def get_place_reviews(place_id: int, db: Session = Depends(get_db)):
    """Reviews of a place, newest first"""
    if not create_place_store(db).get_by_id(place_id):
        raise HTTPException(status_code=404, detail="Place not found")
    return create_review_store(db).list_for_place(place_id)


@router.post("/places/{place_id}/reviews", response_model=ReviewRead, status_code=201)
def create_place_review(
    place_id: int,
    body: ReviewCreate,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_caller),
):
    """Add a review and update the place rating aggregate atomically"""
    try:
        rating = validate_rating(body.rating)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    comment = body.comment.strip() if body.comment else None
    review = create_review_store(db).submit(
        place_id,
        user_id=caller.uid,
        user_name=caller.name,
        rating=rating,
        comment=comment or None,
    )
    if review is None:
        raise HTTPException(status_code=404, detail="Place not found")
    return review
