# backend/tutorhub/services/session_service.py
"""
Session Service for the scheduling core.

Owns the tutor calendar: creation, duplication, completion and cancellation
of class sessions.

Invariants:
    - A tutor never has two non-cancelled sessions whose [start, end) overlap.
    - When a tutor declares at least one availability window, every directly
      created session lies inside one of them (tutor-local time).

The overlap check and the insert run inside one transaction while the
tutor row is locked, so concurrent creates for one tutor are serialised.
"""

from datetime import datetime
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import (
    ActiveEnrollmentException,
    ForbiddenException,
    InvalidRangeException,
    InvalidStateException,
    NotFoundException,
    OutsideAvailabilityException,
    SessionConflictException,
)
from ..core.timezone_utils import ensure_utc
from ..models.course import Course, CourseStatus
from ..models.session import ClassSession, SessionStatus
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.factory import RepositoryFactory
from .availability_service import AvailabilityService
from .base import BaseService

logger = logging.getLogger(__name__)


class SessionService(BaseService):
    """Service for the tutor session calendar."""

    def __init__(self, db: Session, availability_service: Optional[AvailabilityService] = None):
        super().__init__(db)
        self.repository = RepositoryFactory.create_session_repository(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)
        self.course_repository = RepositoryFactory.create_course_repository(db)
        self.availability_service = availability_service or AvailabilityService(db)

    @BaseService.measure_operation("create_session")
    def create_session(
        self,
        course_id: str,
        tutor_id: str,
        start_time: datetime,
        end_time: datetime,
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> ClassSession:
        """
        Schedule a session on a draft course.

        Raises:
            NotFoundException: course missing or not owned by the tutor
            InvalidStateException: course is no longer a draft
            InvalidRangeException: start >= end, or start in the past
            SessionConflictException: overlaps another session of the tutor
            OutsideAvailabilityException: outside every declared window
        """
        course = self.course_repository.get_course_for_tutor(course_id, tutor_id)
        if course is None:
            raise NotFoundException("Course not found or not owned by you")

        with self.transaction():
            session = self._schedule(course, tutor_id, start_time, end_time, title, description)

        prometheus_metrics.inc_sessions_created("direct")
        self.log_operation(
            "create_session", session_id=session.id, course_id=course_id, tutor_id=tutor_id
        )
        return session

    @BaseService.measure_operation("duplicate_session")
    def duplicate_session(
        self,
        session_id: str,
        tutor_id: str,
        start_time: datetime,
        end_time: datetime,
    ) -> ClassSession:
        """
        Copy an existing session to a new time.

        The copy keeps course, title and description and passes through every
        check of ``create_session``. Bookings are not copied.
        """
        source = self._get_owned_session(session_id, tutor_id)
        course = self.course_repository.get_course_for_tutor(source.course_id, tutor_id)
        if course is None:
            raise NotFoundException("Course not found or not owned by you")

        with self.transaction():
            session = self._schedule(
                course, tutor_id, start_time, end_time, source.title, source.description
            )

        prometheus_metrics.inc_sessions_created("duplicate")
        self.log_operation("duplicate_session", source_id=session_id, session_id=session.id)
        return session

    @BaseService.measure_operation("cancel_session")
    def cancel_session(self, session_id: str, tutor_id: str) -> ClassSession:
        """
        Cancel a session and every confirmed booking in it.

        Raises:
            NotFoundException: session missing
            ForbiddenException: session belongs to another tutor
            InvalidStateException: session already CANCELLED or COMPLETED
            ActiveEnrollmentException: the course has actively enrolled students
        """
        session = self._get_owned_session(session_id, tutor_id)
        if not session.is_cancellable:
            raise InvalidStateException(
                f"Session is already {SessionStatus(session.status).value.lower()}",
                details={"status": SessionStatus(session.status).value},
            )
        if self.course_repository.has_active_enrollment(session.course_id):
            raise ActiveEnrollmentException(session.course_id)

        now = self._now()
        with self.transaction():
            bookings = self.booking_repository.get_confirmed_for_session(session.id)
            for booking in bookings:
                booking.cancel(now)
            session.cancel()
            self.repository.flush()

        self.log_operation(
            "cancel_session", session_id=session_id, cancelled_bookings=len(bookings)
        )
        return session

    @BaseService.measure_operation("complete_session")
    def complete_session(self, session_id: str, tutor_id: str) -> ClassSession:
        """Mark an in-progress session completed."""
        session = self._get_owned_session(session_id, tutor_id)
        if session.status != SessionStatus.IN_PROGRESS:
            raise InvalidStateException(
                "Only a session in progress can be completed",
                details={"status": SessionStatus(session.status).value},
            )

        with self.transaction():
            session.complete()
            self.repository.flush()
        return session

    @BaseService.measure_operation("get_session")
    def get_session(self, session_id: str) -> ClassSession:
        session = self.repository.get_with_details(session_id)
        if session is None:
            raise NotFoundException("Session not found")
        return session

    @BaseService.measure_operation("list_sessions_by_course")
    def list_sessions_by_course(self, course_id: str) -> List[ClassSession]:
        return self.repository.get_by_course(course_id)

    @BaseService.measure_operation("list_sessions_by_tutor")
    def list_sessions_by_tutor(self, tutor_id: str) -> List[ClassSession]:
        return self.repository.get_by_tutor(tutor_id)

    # Calendar writes shared with the request workflow

    def insert_approved_session(
        self,
        course: Course,
        start_time: datetime,
        end_time: datetime,
        title: Optional[str],
        description: Optional[str],
    ) -> ClassSession:
        """
        Insert a session approved by an admin. Caller owns the transaction.

        Approval is authoritative: no conflict or availability gate runs, but a
        clash with the tutor's calendar is logged.
        """
        start_time, end_time = ensure_utc(start_time), ensure_utc(end_time)
        self.course_repository.get_tutor(course.tutor_id, for_update=True)
        clashes = self.repository.find_overlapping(course.tutor_id, start_time, end_time)
        if clashes:
            self.logger.warning(
                "Approved session for course %s overlaps %d existing session(s) of tutor %s",
                course.id,
                len(clashes),
                course.tutor_id,
            )
        session = self.repository.create(
            course_id=course.id,
            tutor_id=course.tutor_id,
            start_time=start_time,
            end_time=end_time,
            title=title,
            description=description,
            status=SessionStatus.SCHEDULED,
            created_at=self._now(),
        )
        prometheus_metrics.inc_sessions_created("approved_request")
        return session

    # Private helpers

    def _get_owned_session(self, session_id: str, tutor_id: str) -> ClassSession:
        session = self.repository.get_by_id(session_id)
        if session is None:
            raise NotFoundException("Session not found")
        if session.tutor_id != tutor_id:
            raise ForbiddenException("You can only manage your own sessions")
        return session

    def _schedule(
        self,
        course: Course,
        tutor_id: str,
        start_time: datetime,
        end_time: datetime,
        title: Optional[str],
        description: Optional[str],
    ) -> ClassSession:
        """Run the creation gates and insert. Must be called inside a transaction."""
        if course.status != CourseStatus.DRAFT:
            raise InvalidStateException(
                "Sessions can only be added to draft courses. "
                "Use an Add Session request for published courses.",
                details={"course_status": CourseStatus(course.status).value},
            )

        start_time, end_time = ensure_utc(start_time), ensure_utc(end_time)
        if start_time >= end_time:
            raise InvalidRangeException("Start time must be before end time")
        if start_time < self._now():
            raise InvalidRangeException("Cannot schedule a session in the past")

        # Serialise check-then-insert per tutor
        self.course_repository.get_tutor(tutor_id, for_update=True)

        clashes = self.repository.find_overlapping(tutor_id, start_time, end_time)
        if clashes:
            raise SessionConflictException(
                details={"conflicting_session_ids": [clash.id for clash in clashes]}
            )

        if not self.availability_service.fits_availability(tutor_id, start_time, end_time):
            raise OutsideAvailabilityException(
                "Session time is outside your available hours",
                details={"timezone": self.availability_service.tutor_timezone(tutor_id)},
            )

        return self.repository.create(
            course_id=course.id,
            tutor_id=tutor_id,
            start_time=start_time,
            end_time=end_time,
            title=title,
            description=description,
            status=SessionStatus.SCHEDULED,
            created_at=self._now(),
        )
