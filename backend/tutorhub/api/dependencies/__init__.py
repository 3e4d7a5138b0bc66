"""FastAPI dependencies: database session, caller identity, services."""

from .auth import Principal, get_current_principal, require_admin, require_role, require_student, require_tutor
from .database import get_db
from .services import (
    get_availability_service,
    get_booking_service,
    get_livekit_client,
    get_room_access_service,
    get_session_request_service,
    get_session_service,
    get_slot_suggestion_service,
)

__all__ = [
    "Principal",
    "get_availability_service",
    "get_booking_service",
    "get_current_principal",
    "get_db",
    "get_livekit_client",
    "get_room_access_service",
    "get_session_request_service",
    "get_session_service",
    "get_slot_suggestion_service",
    "require_admin",
    "require_role",
    "require_student",
    "require_tutor",
]
