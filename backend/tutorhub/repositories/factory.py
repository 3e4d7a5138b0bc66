# backend/tutorhub/repositories/factory.py
"""
Repository Factory for the scheduling core.

Provides centralized creation of repository instances,
ensuring consistent initialization and dependency injection.
"""

from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

# Avoid circular imports
if TYPE_CHECKING:
    from .availability_repository import AvailabilityRepository
    from .booking_repository import BookingRepository
    from .course_repository import CourseRepository
    from .session_repository import SessionRepository
    from .session_request_repository import (
        AddSessionRequestRepository,
        RescheduleRequestRepository,
    )


class RepositoryFactory:
    """
    Factory class for creating repository instances.

    Centralizes repository creation to ensure consistent initialization
    and makes it easy to swap implementations if needed.
    """

    @staticmethod
    def create_availability_repository(db: Session) -> "AvailabilityRepository":
        """Create repository for availability windows."""
        from .availability_repository import AvailabilityRepository

        return AvailabilityRepository(db)

    @staticmethod
    def create_session_repository(db: Session) -> "SessionRepository":
        """Create repository for class sessions."""
        from .session_repository import SessionRepository

        return SessionRepository(db)

    @staticmethod
    def create_booking_repository(db: Session) -> "BookingRepository":
        """Create repository for session bookings."""
        from .booking_repository import BookingRepository

        return BookingRepository(db)

    @staticmethod
    def create_course_repository(db: Session) -> "CourseRepository":
        """Create repository for course, enrollment and profile lookups."""
        from .course_repository import CourseRepository

        return CourseRepository(db)

    @staticmethod
    def create_reschedule_request_repository(db: Session) -> "RescheduleRequestRepository":
        from .session_request_repository import RescheduleRequestRepository

        return RescheduleRequestRepository(db)

    @staticmethod
    def create_add_session_request_repository(db: Session) -> "AddSessionRequestRepository":
        from .session_request_repository import AddSessionRequestRepository

        return AddSessionRequestRepository(db)
