from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from easytrip.api.routes import (
    health,
    places,
    reviews,
    auth,
    admin_places,
    admins,
)
from easytrip.core.config import settings
from easytrip.core.db import Base, engine, mask_dsn
# models must be imported so their tables are registered on Base.metadata
from easytrip.accounts import models as account_models  # noqa: F401
from easytrip.places import models as place_models  # noqa: F401

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="EasyTrip API",
    description="API for browsing, searching and reviewing travel destinations",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed input is a client error (400) naming the offending field"""
    problems = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path"))
        problems.append(f"{field or 'request'}: {error.get('msg')}")
    return JSONResponse(status_code=400, content={"detail": "; ".join(problems)})


# Include routers
app.include_router(health.router, prefix="/api")
app.include_router(places.router, prefix="/api", tags=["places"])
app.include_router(reviews.router, prefix="/api", tags=["reviews"])
app.include_router(auth.router, prefix="/api")
app.include_router(admin_places.router)
app.include_router(admins.router)


@app.on_event("startup")
def create_tables_for_local_use():
    logger.info("startup complete (env=%s, db=%s)", settings.environment, mask_dsn(engine.url))
    if settings.auto_create_tables:
        logger.info("AUTO_CREATE_TABLES set, creating missing tables")
        Base.metadata.create_all(bind=engine)


@app.get("/")
async def root():
    return {"message": "EasyTrip API", "version": "1.0.0"}
