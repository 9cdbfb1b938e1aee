#!/usr/bin/env python3
"""
Run the EasyTrip API server
"""
import uvicorn

from easytrip.core.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "easytrip.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=not settings.is_production,
        log_level=settings.log_level.lower()
    )
