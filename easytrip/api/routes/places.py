import html
import logging
from fastapi import APIRouter, Depends, HTTPException, Query, Response
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session
from typing import Dict, List, Optional

from easytrip.core.db import get_db
from easytrip.places.services import vocabulary
from easytrip.places.services.filters import FilterCriteria, parse_list_param
from easytrip.places.services.place_store import create_place_store
from easytrip.api.schemas.place import PlaceRead, PlaceImageRead

logger = logging.getLogger(__name__)

router = APIRouter()

PLACEHOLDER_SVG = """<svg width="400" height="300" xmlns="http://www.w3.org/2000/svg">
  <rect width="100%" height="100%" fill="#f5f5f5" stroke="#e0e0e0" stroke-width="2"/>
  <text x="50%" y="45%" font-family="Arial, sans-serif" font-size="16" text-anchor="middle" fill="#666">No Image Available</text>
  <text x="50%" y="60%" font-family="Arial, sans-serif" font-size="12" text-anchor="middle" fill="#999">Place ID: {place_id}</text>
</svg>"""


def _placeholder(place_id: str) -> Response:
    logger.info(f"Serving SVG placeholder for place: {place_id}")
    return Response(
        content=PLACEHOLDER_SVG.format(place_id=html.escape(place_id)),
        media_type="image/svg+xml",
        headers={"Cache-Control": "public, max-age=3600"},
    )


@router.get("/places", response_model=List[PlaceRead])
def get_places(db: Session = Depends(get_db)):
    """All places, newest first"""
    return create_place_store(db).get_all()


@router.get("/places/search", response_model=List[PlaceRead])
def search_places(
    searchTerm: Optional[str] = Query(None, description="Substring of name or description"),
    location: Optional[str] = Query(None, description="Exact location (case-insensitive)"),
    district: Optional[str] = Query(None, description="Exact district (case-insensitive)"),
    state: Optional[str] = Query(None, description="Exact state (case-insensitive)"),
    tags: Optional[List[str]] = Query(None, description="Repeated or JSON-encoded array"),
    themes: Optional[List[str]] = Query(None, description="Repeated or JSON-encoded array"),
    minRating: Optional[float] = Query(None, description="Minimum average rating, 0-5"),
    season: Optional[str] = Query(None, description="summer | monsoon | winter | any"),
    sort: Optional[str] = Query(None, description="newest | rating | name | popular"),
    db: Session = Depends(get_db),
):
    """Filtered and ordered places; same rules as the client-side fallback"""
    try:
        criteria = FilterCriteria(
            search_term=searchTerm,
            location=location,
            district=district,
            state=state,
            tags=parse_list_param(tags),
            themes=parse_list_param(themes),
            min_rating=minRating or 0,
            season=season,
        ).normalized()
        results = create_place_store(db).search(criteria, sort)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(f"Search {criteria.to_query_params()} sort={sort or 'newest'}: {len(results)} results")
    return results


@router.get("/places/locations", response_model=List[str])
def get_locations(db: Session = Depends(get_db)):
    return create_place_store(db).distinct_locations()


@router.get("/places/districts", response_model=List[str])
def get_districts(db: Session = Depends(get_db)):
    return create_place_store(db).distinct_districts()


@router.get("/places/states", response_model=List[str])
def get_states(db: Session = Depends(get_db)):
    return create_place_store(db).distinct_states()


@router.get("/places/tags", response_model=List[str])
def get_tags(db: Session = Depends(get_db)):
    return create_place_store(db).distinct_tags()


@router.get("/places/themes", response_model=List[str])
def get_themes():
    """Theme vocabulary offered by the browse filters"""
    return vocabulary.get_themes()


@router.get("/places/seasons", response_model=Dict[str, List[str]])
def get_seasons():
    return vocabulary.get_season_months()


@router.get("/places/{place_id}", response_model=PlaceRead)
def get_place(place_id: int, db: Session = Depends(get_db)):
    place = create_place_store(db).get_by_id(place_id)
    if not place:
        raise HTTPException(status_code=404, detail="Place not found")
    return place


@router.get("/places/{place_id}/related", response_model=List[PlaceRead])
def get_related_places(place_id: int, db: Session = Depends(get_db)):
    """Up to four places sharing a theme, or the same location when untagged"""
    store = create_place_store(db)
    place = store.get_by_id(place_id)
    if not place:
        raise HTTPException(status_code=404, detail="Place not found")
    return store.related(place)


@router.get("/places/{place_id}/images", response_model=List[PlaceImageRead])
def get_place_images(place_id: int, db: Session = Depends(get_db)):
    store = create_place_store(db)
    if not store.get_by_id(place_id):
        raise HTTPException(status_code=404, detail="Place not found")
    return store.images(place_id)


@router.get("/places/{place_id}/image", response_class=Response)
@router.get("/places/{place_id}/images/{image_id}", response_class=Response)
def get_place_image(place_id: str, image_id: Optional[str] = None, db: Session = Depends(get_db)):
    """
    Redirect to the best stored image: the requested one, else the primary
    image, else the first gallery image. Falls back to an SVG placeholder,
    never to an error.
    """
    if not place_id.isdigit():
        return _placeholder(place_id)

    store = create_place_store(db)
    place = store.get_by_id(int(place_id))
    if not place:
        return _placeholder(place_id)

    if image_id and image_id.isdigit():
        image = store.image(place.id, int(image_id))
        if image and image.image_url:
            return RedirectResponse(image.image_url, status_code=302)

    if place.primary_image_url:
        return RedirectResponse(place.primary_image_url, status_code=302)

    for image in store.images(place.id):
        if image.image_url:
            return RedirectResponse(image.image_url, status_code=302)

    return _placeholder(place_id)
