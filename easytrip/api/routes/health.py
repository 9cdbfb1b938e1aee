"""Health check endpoint exposed by the public API."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from easytrip.core.config import settings
from easytrip.core.db import get_db
from easytrip.places.services.image_host import S3ImageHost, get_image_host

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("", summary="Aggregated component status")
def health(
    db: Session = Depends(get_db),
    image_host: S3ImageHost = Depends(get_image_host),
) -> dict[str, object]:
    try:
        db.execute(text("SELECT 1"))
        db_status = "connected"
    except SQLAlchemyError as exc:
        logger.error("Health check database probe failed: %s", exc)
        db_status = "disconnected"
    return {
        "status": "ok" if db_status == "connected" else "degraded",
        "timestamp": _utc_timestamp(),
        "environment": settings.environment,
        "database": db_status,
        "image_host": "configured" if image_host.is_configured() else "not configured",
    }
