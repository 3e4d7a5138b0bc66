# backend/tutorhub/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

This module provides factory functions that create service instances
with their required dependencies properly injected.
"""

import logging
from typing import Union

from fastapi import Depends
from sqlalchemy.orm import Session

from ...core.config import settings
from ...integrations.livekit_client import FakeLiveKitClient, LiveKitClient
from ...services.availability_service import AvailabilityService
from ...services.booking_service import BookingService
from ...services.room_access_service import RoomAccessService
from ...services.session_request_service import SessionRequestService
from ...services.session_service import SessionService
from ...services.slot_suggestion_service import SlotSuggestionService
from .database import get_db

logger = logging.getLogger(__name__)


def get_availability_service(db: Session = Depends(get_db)) -> AvailabilityService:
    return AvailabilityService(db)


def get_session_service(
    db: Session = Depends(get_db),
    availability_service: AvailabilityService = Depends(get_availability_service),
) -> SessionService:
    return SessionService(db, availability_service)


def get_slot_suggestion_service(
    db: Session = Depends(get_db),
    availability_service: AvailabilityService = Depends(get_availability_service),
) -> SlotSuggestionService:
    return SlotSuggestionService(db, availability_service)


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    return BookingService(db)


def get_session_request_service(
    db: Session = Depends(get_db),
    session_service: SessionService = Depends(get_session_service),
    booking_service: BookingService = Depends(get_booking_service),
) -> SessionRequestService:
    return SessionRequestService(db, session_service, booking_service)


def get_livekit_client() -> Union[LiveKitClient, FakeLiveKitClient]:
    """Room-token provider: the real LiveKit signer when enabled, else the fake."""
    if not settings.livekit_enabled:
        return FakeLiveKitClient(ws_url=settings.livekit_ws_url)
    return LiveKitClient(
        api_key=settings.livekit_api_key,
        api_secret=settings.livekit_api_secret,
        ws_url=settings.livekit_ws_url,
    )


def get_room_access_service(
    db: Session = Depends(get_db),
    livekit_client: Union[LiveKitClient, FakeLiveKitClient] = Depends(get_livekit_client),
) -> RoomAccessService:
    return RoomAccessService(db, livekit_client)
