# backend/tutorhub/main.py
"""
TutorHub scheduling API.

Mounts the v1 routers under /api/v1. Route order matters: fixed segments
under /sessions (availability, bookings, tutor, suggested-slots) are
registered before the /sessions/{session_id} catch-all.
"""

from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator, Dict

from fastapi import APIRouter, FastAPI

from . import __version__, models  # noqa: F401
from .core.config import settings
from .database import Base, engine
from .errors import register_error_handlers
from .routes.v1 import (
    admin as admin_v1,
    availability as availability_v1,
    bookings as bookings_v1,
    prometheus as prometheus_v1,
    rooms as rooms_v1,
    session_requests as session_requests_v1,
    sessions as sessions_v1,
)

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)

API_TITLE = "TutorHub Scheduling API"
API_DESCRIPTION = "Tutor availability, class sessions, bookings and live-room access"


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup/shutdown."""
    logger.info("TutorHub API starting up...")
    logger.info(f"Environment: {settings.environment}")
    if settings.is_sqlite:
        # Local development database; production schemas are managed externally
        Base.metadata.create_all(bind=engine)
    if not settings.livekit_enabled:
        logger.warning("LiveKit disabled: room tokens are issued by the fake client")
    yield
    logger.info("TutorHub API shutting down...")


app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=app_lifespan,
)
register_error_handlers(app)

api_v1 = APIRouter(prefix="/api/v1")

# Mount v1 routes
api_v1.include_router(availability_v1.router, prefix="/sessions/availability")
api_v1.include_router(bookings_v1.router, prefix="/sessions")
api_v1.include_router(rooms_v1.router, prefix="/sessions")
api_v1.include_router(sessions_v1.router, prefix="/sessions")
api_v1.include_router(session_requests_v1.router, prefix="/session-requests")
api_v1.include_router(admin_v1.router, prefix="/admin")
api_v1.include_router(prometheus_v1.router, prefix="/metrics")

app.include_router(api_v1)


@app.get("/health", include_in_schema=False)
def health_check() -> Dict[str, str]:
    return {"status": "healthy", "service": "tutorhub", "version": __version__}
