# backend/tutorhub/services/__init__.py
"""
Service layer for the scheduling core.

Services hold the business rules and own transactions; routes call them
from a worker thread.
"""

from .availability_service import AvailabilityService
from .base import BaseService
from .booking_service import BookingService
from .room_access_service import RoomAccessService
from .session_request_service import SessionRequestService
from .session_service import SessionService
from .slot_suggestion_service import SlotSuggestionService

__all__ = [
    "AvailabilityService",
    "BaseService",
    "BookingService",
    "RoomAccessService",
    "SessionRequestService",
    "SessionService",
    "SlotSuggestionService",
]
