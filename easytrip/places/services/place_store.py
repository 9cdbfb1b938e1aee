#!/usr/bin/env python3
"""Place store: CRUD and predicate reads over the places table"""

import logging
from typing import Any, Dict, List, Optional, Union

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from easytrip.places.models import Place, PlaceImage
from easytrip.places.services.filters import FilterCriteria
from easytrip.places.services.search import order_places
from easytrip.places.services.sorting import SortKey, sort_places

logger = logging.getLogger(__name__)

RELATED_PLACES_LIMIT = 4

# Columns an admin may write; anything else in a payload is ignored
WRITABLE_FIELDS = (
    "name", "description", "location", "district", "state", "locality", "pin_code",
    "latitude", "longitude", "primary_image_url", "themes", "tags", "custom_keys",
)


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class PlaceStore:
    """Place persistence; business rules live in the pipeline services"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, fields: Dict[str, Any], created_by: Optional[str] = None) -> Place:
        """Insert a place and return it with generated columns loaded"""
        values = {k: v for k, v in fields.items() if k in WRITABLE_FIELDS}
        values.setdefault("themes", [])
        values.setdefault("tags", [])
        values.setdefault("custom_keys", {})
        place = Place(**values, created_by=created_by, updated_by=created_by)
        self.db.add(place)
        self.db.commit()
        self.db.refresh(place)
        logger.info(f"Place created: id={place.id}, name={place.name}")
        return place

    def get_by_id(self, place_id: int) -> Optional[Place]:
        return self.db.query(Place).filter(Place.id == place_id).first()

    def get_all(self) -> List[Place]:
        """All places, newest first"""
        return sort_places(self.db.query(Place).all(), SortKey.NEWEST)

    def update(self, place_id: int, fields: Dict[str, Any], updated_by: Optional[str] = None) -> Optional[Place]:
        """
        Partial update: keys missing from `fields` keep their stored value.

        Returns None when the place does not exist.
        """
        place = self.get_by_id(place_id)
        if not place:
            return None
        for key, value in fields.items():
            if key in WRITABLE_FIELDS:
                setattr(place, key, value)
        place.updated_by = updated_by
        place.updated_at = func.now()
        self.db.add(place)
        self.db.commit()
        self.db.refresh(place)
        return place

    def set_primary_image(self, place_id: int, url: str) -> Optional[Place]:
        """Attach an uploaded image URL without touching audit fields"""
        place = self.get_by_id(place_id)
        if not place:
            return None
        place.primary_image_url = url
        self.db.commit()
        self.db.refresh(place)
        return place

    def delete(self, place_id: int) -> bool:
        """Hard delete; images and reviews go with the place"""
        place = self.get_by_id(place_id)
        if not place:
            return False
        self.db.delete(place)
        self.db.commit()
        return True

    def search(self, criteria: FilterCriteria, sort: Union[str, SortKey, None] = SortKey.NEWEST) -> List[Place]:
        """
        Ordered places matching criteria.

        Text facets narrow the query in SQL; the shared predicate and
        comparator then produce the final list, so the result equals the
        in-memory pipeline over the same rows.
        """
        criteria = criteria.normalized()
        query = self.db.query(Place)

        if criteria.search_term:
            pattern = f"%{_escape_like(criteria.search_term)}%"
            query = query.filter(or_(
                Place.name.ilike(pattern, escape="\\"),
                Place.description.ilike(pattern, escape="\\"),
            ))
        if criteria.location:
            query = query.filter(func.lower(func.trim(Place.location)) == criteria.location.lower())
        if criteria.district:
            query = query.filter(func.lower(func.trim(Place.district)) == criteria.district.lower())
        if criteria.state:
            query = query.filter(func.lower(func.trim(Place.state)) == criteria.state.lower())
        if criteria.min_rating > 0:
            query = query.filter(Place.rating_count > 0)

        return order_places(query.all(), criteria, sort)

    def related(self, place: Place, limit: int = RELATED_PLACES_LIMIT) -> List[Place]:
        """Places sharing a theme with `place`, else its location; newest first"""
        if place.themes:
            criteria = FilterCriteria(themes=list(place.themes))
        elif place.location:
            criteria = FilterCriteria(location=place.location)
        else:
            return []
        results = [p for p in self.search(criteria) if p.id != place.id]
        return results[:limit]

    def images(self, place_id: int) -> List[PlaceImage]:
        return (
            self.db.query(PlaceImage)
            .filter(PlaceImage.place_id == place_id)
            .order_by(PlaceImage.display_order, PlaceImage.created_at, PlaceImage.id)
            .all()
        )

    def image(self, place_id: int, image_id: int) -> Optional[PlaceImage]:
        return (
            self.db.query(PlaceImage)
            .filter(PlaceImage.id == image_id, PlaceImage.place_id == place_id)
            .first()
        )

    def _distinct(self, column) -> List[str]:
        rows = self.db.query(column).filter(column.isnot(None)).distinct().all()
        return sorted({row[0] for row in rows if row[0]})

    def distinct_locations(self) -> List[str]:
        return self._distinct(Place.location)

    def distinct_districts(self) -> List[str]:
        return self._distinct(Place.district)

    def distinct_states(self) -> List[str]:
        return self._distinct(Place.state)

    def distinct_tags(self) -> List[str]:
        tags = set()
        for (place_tags,) in self.db.query(Place.tags).all():
            tags.update(t for t in (place_tags or []) if t)
        return sorted(tags)


def create_place_store(db: Session) -> PlaceStore:
    """Factory function to create PlaceStore instance"""
    return PlaceStore(db)
