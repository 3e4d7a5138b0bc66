# backend/tutorhub/repositories/__init__.py
"""
Repository layer for the scheduling core.

Repositories encapsulate query construction and never commit; services own
the transaction boundary.
"""

from .availability_repository import AvailabilityRepository
from .base_repository import BaseRepository
from .booking_repository import BookingRepository
from .course_repository import CourseRepository
from .factory import RepositoryFactory
from .session_repository import SessionRepository
from .session_request_repository import AddSessionRequestRepository, RescheduleRequestRepository

__all__ = [
    "AddSessionRequestRepository",
    "AvailabilityRepository",
    "BaseRepository",
    "BookingRepository",
    "CourseRepository",
    "RepositoryFactory",
    "RescheduleRequestRepository",
    "SessionRepository",
]
