#!/usr/bin/env python3
"""Admin API endpoints for place management"""

import json
import logging
import os
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from sqlalchemy.orm import Session

from easytrip.core.config import settings
from easytrip.core.db import get_db
from easytrip.core.security import Caller, require_admin
from easytrip.places.services.image_host import ImageUploadError, S3ImageHost, get_image_host
from easytrip.places.services.place_store import create_place_store
from easytrip.api.schemas.place import PlaceRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])

OPTIONAL_TEXT_FIELDS = ("description", "district", "state", "locality", "pin_code")


def _parse_json_field(name: str, raw: Optional[str], expected: type):
    """
    Decode a JSON-encoded multipart field.

    Raises:
        HTTPException: 400 when the value is not valid JSON of the expected shape
    """
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        raise HTTPException(status_code=400, detail=f"{name} must be valid JSON")
    if not isinstance(value, expected):
        raise HTTPException(status_code=400, detail=f"{name} must be a JSON {expected.__name__}")
    if expected is list:
        return [str(item).strip() for item in value if str(item).strip()]
    return {str(k): "" if v is None else str(v) for k, v in value.items()}


def _parse_coordinate(name: str, raw: str) -> Optional[float]:
    raw = raw.strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"{name} must be a number")


def _collect_fields(form: Dict[str, Optional[str]]) -> Dict[str, Any]:
    """Turn submitted form values into store fields; absent keys are omitted"""
    fields: Dict[str, Any] = {}
    for key in ("name", "location"):
        value = form.get(key)
        if value is not None and value.strip():
            fields[key] = value.strip()
    for key in OPTIONAL_TEXT_FIELDS:
        value = form.get(key)
        if value is not None:
            fields[key] = value.strip() or None
    for key in ("latitude", "longitude"):
        value = form.get(key)
        if value is not None:
            fields[key] = _parse_coordinate(key, value)
    for key, expected in (("themes", list), ("tags", list), ("custom_keys", dict)):
        value = form.get(key)
        if value is not None and value.strip():
            fields[key] = _parse_json_field(key, value, expected)
    return fields


async def _read_upload(image: Optional[UploadFile]) -> Optional[Tuple[bytes, str]]:
    """Validate an uploaded image before anything is written"""
    if image is None or not image.filename:
        return None
    if not (image.content_type or "").startswith("image/"):
        raise HTTPException(status_code=400, detail="image must be an image file")
    data = await image.read()
    if len(data) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=400,
            detail=f"image exceeds the upload limit of {settings.max_upload_bytes} bytes",
        )
    if not data:
        raise HTTPException(status_code=400, detail="image is empty")
    return data, image.filename


def _stage_upload(data: bytes, filename: str) -> str:
    os.makedirs(settings.upload_tmp_dir, exist_ok=True)
    _, ext = os.path.splitext(filename)
    path = os.path.join(settings.upload_tmp_dir, f"{uuid.uuid4().hex}{ext.lower()}")
    with open(path, "wb") as f:
        f.write(data)
    return path


def _attach_image(db: Session, image_host: S3ImageHost, place_id: int,
                  upload: Tuple[bytes, str], extra_tags=()) -> None:
    """Upload after the place row exists; failures leave the place imageless"""
    data, filename = upload
    try:
        path = _stage_upload(data, filename)
        result = image_host.upload(
            path,
            folder=f"{settings.image_folder}/places/{place_id}",
            public_id=f"place_{place_id}_primary_{int(time.time() * 1000)}",
            tags=["place", f"id_{place_id}", "primary", *extra_tags],
        )
    except (ImageUploadError, OSError) as e:
        logger.error(f"Image upload failed for place {place_id}, continuing without image: {e}")
        return
    create_place_store(db).set_primary_image(place_id, result.url)
    logger.info(f"Place {place_id} primary image set to {result.url}")


@router.post("/places", response_model=PlaceRead, status_code=201)
async def create_place(
    name: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    district: Optional[str] = Form(None),
    state: Optional[str] = Form(None),
    locality: Optional[str] = Form(None),
    pin_code: Optional[str] = Form(None),
    latitude: Optional[str] = Form(None),
    longitude: Optional[str] = Form(None),
    themes: Optional[str] = Form(None, description="JSON array"),
    tags: Optional[str] = Form(None, description="JSON array"),
    custom_keys: Optional[str] = Form(None, description="JSON object"),
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    image_host: S3ImageHost = Depends(get_image_host),
    caller: Caller = Depends(require_admin),
):
    """Create a place, then attach its image if one was sent"""
    fields = _collect_fields(dict(
        name=name, location=location, description=description, district=district,
        state=state, locality=locality, pin_code=pin_code, latitude=latitude,
        longitude=longitude, themes=themes, tags=tags, custom_keys=custom_keys,
    ))
    if "name" not in fields or "location" not in fields:
        raise HTTPException(status_code=400, detail="Name and location are required")
    upload = await _read_upload(image)

    store = create_place_store(db)
    place = store.create(fields, created_by=caller.uid)
    logger.info(f"Place {place.id} created by {caller.name} ({caller.uid}), image={'yes' if upload else 'no'}")

    if upload:
        _attach_image(db, image_host, place.id, upload)
        place = store.get_by_id(place.id)
    return place


@router.put("/places/{place_id}", response_model=PlaceRead)
async def update_place(
    place_id: int,
    name: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    district: Optional[str] = Form(None),
    state: Optional[str] = Form(None),
    locality: Optional[str] = Form(None),
    pin_code: Optional[str] = Form(None),
    latitude: Optional[str] = Form(None),
    longitude: Optional[str] = Form(None),
    themes: Optional[str] = Form(None, description="JSON array"),
    tags: Optional[str] = Form(None, description="JSON array"),
    custom_keys: Optional[str] = Form(None, description="JSON object"),
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    image_host: S3ImageHost = Depends(get_image_host),
    caller: Caller = Depends(require_admin),
):
    """Partial update; a new image replaces the primary one only if its upload succeeds"""
    store = create_place_store(db)
    if not store.get_by_id(place_id):
        raise HTTPException(status_code=404, detail="Place not found")

    fields = _collect_fields(dict(
        name=name, location=location, description=description, district=district,
        state=state, locality=locality, pin_code=pin_code, latitude=latitude,
        longitude=longitude, themes=themes, tags=tags, custom_keys=custom_keys,
    ))
    upload = await _read_upload(image)

    place = store.update(place_id, fields, updated_by=caller.uid)
    logger.info(f"Place {place_id} updated by {caller.name} ({caller.uid}): {sorted(fields)}")

    if upload:
        _attach_image(db, image_host, place_id, upload, extra_tags=("updated",))
        place = store.get_by_id(place_id)
    return place


@router.delete("/places/{place_id}")
def delete_place(
    place_id: int,
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_admin),
):
    """Hard delete a place with its images and reviews"""
    store = create_place_store(db)
    place = store.get_by_id(place_id)
    if not place:
        raise HTTPException(status_code=404, detail="Place not found")
    name = place.name
    store.delete(place_id)
    logger.info(f"Place {place_id} deleted by {caller.name} ({caller.uid})")
    return {
        "message": "Place deleted successfully",
        "id": place_id,
        "name": name,
        "deleted_by": caller.uid,
        "deleted_at": datetime.now(timezone.utc).isoformat(),
    }
