# backend/tutorhub/services/booking_service.py
"""
Booking Service for the scheduling core.

Handles the student seat ledger of each session:
- Direct bookings by actively enrolled students
- Capacity enforcement against the course's max_students
- Booking cancellation (terminal per session/student pair)
- Fan-out: bulk booking of every active student into every live session

Capacity is counted after the session row is locked, and the
(session, student) unique constraint settles any race on the pair.
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.exceptions import (
    BookingConflictException,
    CapacityExceededException,
    ForbiddenException,
    InvalidStateException,
    NotFoundException,
)
from ..models.booking import BookingStatus, SessionBooking
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)


class BookingService(BaseService):
    """Service for session bookings."""

    def __init__(self, db: Session):
        super().__init__(db)
        self.repository = RepositoryFactory.create_booking_repository(db)
        self.session_repository = RepositoryFactory.create_session_repository(db)
        self.course_repository = RepositoryFactory.create_course_repository(db)

    @BaseService.measure_operation("book_session")
    def book_session(self, session_id: str, student_id: str) -> SessionBooking:
        """
        Book a seat in a session for an enrolled student.

        Raises:
            NotFoundException: session missing
            InvalidStateException: student has no active enrollment in the course
            BookingConflictException: a booking row already exists for the pair
            CapacityExceededException: the course's seat limit is reached
        """
        session = self.session_repository.get_by_id(session_id)
        if session is None:
            raise NotFoundException("Session not found")

        if self.course_repository.get_active_enrollment(session.course_id, student_id) is None:
            raise InvalidStateException(
                "You must be actively enrolled in this course to book its sessions",
                details={"course_id": session.course_id},
            )

        with self.transaction():
            # Serialise seat counting per session
            session = self.session_repository.get_by_id(session_id, for_update=True)

            if self.repository.get_for_pair(session_id, student_id) is not None:
                raise BookingConflictException()

            max_students: Optional[int] = session.course.max_students if session.course else None
            if max_students is not None:
                confirmed = self.repository.count_confirmed(session_id)
                if confirmed >= max_students:
                    raise CapacityExceededException(max_students, confirmed)

            try:
                booking = self.repository.insert_booking(session_id, student_id, self._now())
            except IntegrityError:
                self.logger.info(
                    "Concurrent booking detected for session %s student %s", session_id, student_id
                )
                raise BookingConflictException()

        prometheus_metrics.inc_bookings_created("student")
        self.log_operation("book_session", session_id=session_id, student_id=student_id)
        return booking

    @BaseService.measure_operation("cancel_booking")
    def cancel_booking(self, booking_id: str, student_id: str) -> SessionBooking:
        """
        Cancel a student's own booking.

        Raises:
            NotFoundException: booking missing
            ForbiddenException: booking belongs to another student
            InvalidStateException: booking already cancelled
        """
        booking = self.repository.get_by_id(booking_id)
        if booking is None:
            raise NotFoundException("Booking not found")
        if booking.student_id != student_id:
            raise ForbiddenException("You can only cancel your own bookings")
        if booking.status == BookingStatus.CANCELLED:
            raise InvalidStateException("Booking is already cancelled")

        with self.transaction():
            booking.cancel(self._now())
            self.repository.flush()

        self.log_operation("cancel_booking", booking_id=booking_id, student_id=student_id)
        return booking

    @BaseService.measure_operation("list_student_bookings")
    def list_student_bookings(self, student_id: str) -> List[SessionBooking]:
        """A student's bookings, newest first."""
        return self.repository.get_student_bookings(student_id)

    @BaseService.measure_operation("fan_out_bookings")
    def fan_out_bookings(self, course_id: str) -> int:
        """
        Book every actively enrolled student into every non-cancelled session.

        Existing pairs in any status are skipped, so repeated calls insert
        nothing new.

        Returns:
            Number of bookings inserted
        """
        with self.transaction():
            created = self.fan_out_in_transaction(course_id)
        return created

    def fan_out_in_transaction(self, course_id: str) -> int:
        """Fan-out body; the caller owns the transaction."""
        student_ids = self.course_repository.get_active_student_ids(course_id)
        sessions = self.session_repository.get_active_for_course(course_id)
        if not student_ids or not sessions:
            return 0

        existing = self.repository.get_existing_pairs([s.id for s in sessions])
        now = self._now()
        created = 0
        for session in sessions:
            for student_id in student_ids:
                if (session.id, student_id) in existing:
                    continue
                try:
                    with self.db.begin_nested():
                        self.repository.insert_booking(session.id, student_id, now)
                except IntegrityError:
                    # Booked concurrently; the savepoint rollback keeps the rest
                    self.logger.debug(
                        "Skipping already-booked pair session=%s student=%s", session.id, student_id
                    )
                    continue
                existing.add((session.id, student_id))
                created += 1

        prometheus_metrics.inc_bookings_created("fan_out", created)
        self.log_operation("fan_out_bookings", course_id=course_id, bookings_created=created)
        return created
