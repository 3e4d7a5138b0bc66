# backend/tutorhub/services/session_request_service.py
"""
Session Request Service for the scheduling core.

Once a course is published and has active students, its calendar is only
changed through admin-reviewed requests:

    RescheduleRequest:  move one existing session
    AddSessionRequest:  add one session, then fan-out bookings

Both follow PENDING -> APPROVED | REJECTED. Reviewing a request that is no
longer pending is reported as not found.
"""

from datetime import datetime
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import (
    InvalidRangeException,
    InvalidStateException,
    NotFoundException,
)
from ..core.timezone_utils import ensure_utc
from ..models.course import Course, CourseStatus
from ..models.session_request import (
    REVIEW_OUTCOMES,
    AddSessionRequest,
    RequestStatus,
    RescheduleRequest,
)
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.factory import RepositoryFactory
from .base import BaseService
from .booking_service import BookingService
from .session_service import SessionService

logger = logging.getLogger(__name__)


class SessionRequestService(BaseService):
    """Tutor submission and admin review of calendar change requests."""

    def __init__(
        self,
        db: Session,
        session_service: Optional[SessionService] = None,
        booking_service: Optional[BookingService] = None,
    ):
        super().__init__(db)
        self.reschedule_repository = RepositoryFactory.create_reschedule_request_repository(db)
        self.add_session_repository = RepositoryFactory.create_add_session_request_repository(db)
        self.session_repository = RepositoryFactory.create_session_repository(db)
        self.course_repository = RepositoryFactory.create_course_repository(db)
        self.session_service = session_service or SessionService(db)
        self.booking_service = booking_service or BookingService(db)

    # Tutor submissions

    @BaseService.measure_operation("create_reschedule_request")
    def create_reschedule_request(
        self,
        tutor_id: str,
        session_id: str,
        requested_start_time: datetime,
        requested_end_time: datetime,
        reason: str,
    ) -> RescheduleRequest:
        """
        Ask an admin to move one of the tutor's sessions.

        Raises:
            NotFoundException: session missing or not the tutor's
            InvalidStateException: course not published, or nobody is enrolled
            InvalidRangeException: requested start is not before requested end
        """
        session = self.session_repository.get_by_id(session_id)
        if session is None or session.tutor_id != tutor_id:
            raise NotFoundException("Session not found or not owned by you")

        self._ensure_live_course(session.course)
        requested_start_time = ensure_utc(requested_start_time)
        requested_end_time = ensure_utc(requested_end_time)
        self._ensure_range(requested_start_time, requested_end_time)

        with self.transaction():
            request = self.reschedule_repository.create(
                session_id=session_id,
                requested_start_time=requested_start_time,
                requested_end_time=requested_end_time,
                reason=reason,
                requested_by_tutor_id=tutor_id,
                status=RequestStatus.PENDING,
                created_at=self._now(),
            )

        self.log_operation("create_reschedule_request", request_id=request.id, session_id=session_id)
        return request

    @BaseService.measure_operation("create_add_session_request")
    def create_add_session_request(
        self,
        tutor_id: str,
        course_id: str,
        start_time: datetime,
        end_time: datetime,
        reason: str,
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> AddSessionRequest:
        """Ask an admin to add a session to a published course."""
        course = self.course_repository.get_course_for_tutor(course_id, tutor_id)
        if course is None:
            raise NotFoundException("Course not found or not owned by you")

        self._ensure_live_course(course)
        start_time, end_time = ensure_utc(start_time), ensure_utc(end_time)
        self._ensure_range(start_time, end_time)

        with self.transaction():
            request = self.add_session_repository.create(
                course_id=course_id,
                start_time=start_time,
                end_time=end_time,
                title=title,
                description=description,
                reason=reason,
                requested_by_tutor_id=tutor_id,
                status=RequestStatus.PENDING,
                created_at=self._now(),
            )

        self.log_operation("create_add_session_request", request_id=request.id, course_id=course_id)
        return request

    @BaseService.measure_operation("list_reschedule_requests_for_tutor")
    def list_reschedule_requests_for_tutor(self, tutor_id: str) -> List[RescheduleRequest]:
        return self.reschedule_repository.get_for_tutor(tutor_id)

    @BaseService.measure_operation("list_add_session_requests_for_tutor")
    def list_add_session_requests_for_tutor(self, tutor_id: str) -> List[AddSessionRequest]:
        return self.add_session_repository.get_for_tutor(tutor_id)

    # Admin review

    @BaseService.measure_operation("list_pending_reschedule_requests")
    def list_pending_reschedule_requests(self) -> List[RescheduleRequest]:
        return self.reschedule_repository.get_pending()

    @BaseService.measure_operation("list_pending_add_session_requests")
    def list_pending_add_session_requests(self) -> List[AddSessionRequest]:
        return self.add_session_repository.get_pending()

    @BaseService.measure_operation("review_reschedule_request")
    def review_reschedule_request(
        self,
        request_id: str,
        admin_id: str,
        status: RequestStatus,
        admin_note: Optional[str] = None,
    ) -> RescheduleRequest:
        """
        Approve or reject a pending reschedule request.

        Approval overwrites the target session's times as requested. Admin
        approval is authoritative, so overlap and availability gates are not
        re-run; a resulting overlap is logged.
        """
        status = self._ensure_outcome(status)

        with self.transaction():
            request = self.reschedule_repository.get_pending_request(request_id)
            if request is None:
                raise NotFoundException("Request not found or already processed")

            self._record_review(request, admin_id, status, admin_note)

            if status == RequestStatus.APPROVED:
                session = self.session_repository.get_by_id(request.session_id, for_update=True)
                if session is None:
                    raise NotFoundException("Session not found")
                clashes = self.session_repository.find_overlapping(
                    session.tutor_id,
                    request.requested_start_time,
                    request.requested_end_time,
                    exclude_session_id=session.id,
                )
                if clashes:
                    self.logger.warning(
                        "Approved reschedule %s overlaps %d session(s) of tutor %s",
                        request.id,
                        len(clashes),
                        session.tutor_id,
                    )
                session.start_time = request.requested_start_time
                session.end_time = request.requested_end_time
                self.session_repository.flush()

        prometheus_metrics.inc_request_reviewed("reschedule", status.value)
        self.log_operation(
            "review_reschedule_request", request_id=request_id, outcome=status.value
        )
        return request

    @BaseService.measure_operation("review_add_session_request")
    def review_add_session_request(
        self,
        request_id: str,
        admin_id: str,
        status: RequestStatus,
        admin_note: Optional[str] = None,
    ) -> AddSessionRequest:
        """
        Approve or reject a pending add-session request.

        Approval creates the session and books every active student into it.
        """
        status = self._ensure_outcome(status)

        with self.transaction():
            request = self.add_session_repository.get_pending_request(request_id)
            if request is None:
                raise NotFoundException("Request not found or already processed")

            self._record_review(request, admin_id, status, admin_note)

            if status == RequestStatus.APPROVED:
                course = self.course_repository.get_by_id(request.course_id)
                if course is None:
                    raise NotFoundException("Course not found")
                session = self.session_service.insert_approved_session(
                    course,
                    request.start_time,
                    request.end_time,
                    request.title,
                    request.description,
                )
                booked = self.booking_service.fan_out_in_transaction(course.id)
                self.logger.info(
                    "Add-session request %s created session %s with %d booking(s)",
                    request.id,
                    session.id,
                    booked,
                )

        prometheus_metrics.inc_request_reviewed("add_session", status.value)
        self.log_operation(
            "review_add_session_request", request_id=request_id, outcome=status.value
        )
        return request

    # Private helpers

    def _ensure_live_course(self, course: Optional[Course]) -> None:
        if course is None:
            raise NotFoundException("Course not found")
        if course.status != CourseStatus.PUBLISHED:
            raise InvalidStateException(
                "Requests can only be submitted for published courses",
                details={"course_status": CourseStatus(course.status).value},
            )
        if not self.course_repository.has_active_enrollment(course.id):
            raise InvalidStateException(
                "Requests are only needed once students are enrolled. "
                "Edit the course directly instead.",
                details={"course_id": course.id},
            )

    @staticmethod
    def _ensure_range(start_time: datetime, end_time: datetime) -> None:
        if start_time >= end_time:
            raise InvalidRangeException("Start time must be before end time")

    @staticmethod
    def _ensure_outcome(status: RequestStatus) -> RequestStatus:
        try:
            outcome = RequestStatus(status)
        except ValueError:
            outcome = None
        if outcome not in REVIEW_OUTCOMES:
            raise InvalidStateException(
                "Review status must be APPROVED or REJECTED",
                details={"status": str(status)},
            )
        return outcome

    def _record_review(
        self,
        request,
        admin_id: str,
        status: RequestStatus,
        admin_note: Optional[str],
    ) -> None:
        request.status = status
        request.reviewed_by_admin_id = admin_id
        request.reviewed_at = self._now()
        request.admin_note = admin_note
