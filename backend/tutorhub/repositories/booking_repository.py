# backend/tutorhub/repositories/booking_repository.py
"""
Booking Repository for the scheduling core.

Data access for session bookings. Uniqueness per (session, student) is
enforced by the ``uq_session_booking_student`` constraint; callers that race
on it receive the raw ``IntegrityError`` from ``insert_booking`` so they can
map it to a domain conflict.
"""

from datetime import datetime
import logging
from typing import List, Optional, Set, Tuple, cast

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ..core.exceptions import RepositoryException
from ..models.booking import BookingStatus, SessionBooking
from ..models.session import ClassSession
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class BookingRepository(BaseRepository[SessionBooking]):
    """Repository for session bookings."""

    def __init__(self, db: Session):
        super().__init__(db, SessionBooking)
        self.logger = logging.getLogger(__name__)

    def insert_booking(
        self, session_id: str, student_id: str, booked_at: datetime
    ) -> SessionBooking:
        """
        Insert a CONFIRMED booking and flush.

        Raises:
            IntegrityError: the pair already exists (left to the caller)
        """
        booking = SessionBooking(
            session_id=session_id,
            student_id=student_id,
            status=BookingStatus.CONFIRMED,
            booked_at=booked_at,
        )
        self.db.add(booking)
        self.db.flush()
        return booking

    def get_for_pair(self, session_id: str, student_id: str) -> Optional[SessionBooking]:
        """Booking for (session, student) in any status."""
        try:
            result = (
                self.db.query(SessionBooking)
                .filter(
                    SessionBooking.session_id == session_id,
                    SessionBooking.student_id == student_id,
                )
                .first()
            )
            return cast(Optional[SessionBooking], result)
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting booking for pair: {str(e)}")
            raise RepositoryException(f"Failed to get booking: {str(e)}")

    def count_confirmed(self, session_id: str) -> int:
        """Number of CONFIRMED bookings for a session."""
        query = self.db.query(func.count(SessionBooking.id)).filter(
            SessionBooking.session_id == session_id,
            SessionBooking.status == BookingStatus.CONFIRMED,
        )
        return int(self._execute_scalar(query) or 0)

    def get_confirmed_for_session(self, session_id: str) -> List[SessionBooking]:
        query = self._build_query().filter(
            SessionBooking.session_id == session_id,
            SessionBooking.status == BookingStatus.CONFIRMED,
        )
        return self._execute_query(query)

    def has_confirmed_booking(self, session_id: str, student_id: str) -> bool:
        """True if the student holds a CONFIRMED booking for the session."""
        booking = self.get_for_pair(session_id, student_id)
        return booking is not None and booking.status == BookingStatus.CONFIRMED

    def get_student_bookings(self, student_id: str) -> List[SessionBooking]:
        """A student's bookings, newest first, session and course loaded."""
        query = (
            self._build_query()
            .options(joinedload(SessionBooking.session).joinedload(ClassSession.course))
            .filter(SessionBooking.student_id == student_id)
            .order_by(SessionBooking.booked_at.desc())
        )
        return self._execute_query(query)

    def get_existing_pairs(self, session_ids: List[str]) -> Set[Tuple[str, str]]:
        """(session_id, student_id) pairs that already have a booking row."""
        if not session_ids:
            return set()
        try:
            rows = (
                self.db.query(SessionBooking.session_id, SessionBooking.student_id)
                .filter(SessionBooking.session_id.in_(session_ids))
                .all()
            )
            return {(row.session_id, row.student_id) for row in rows}
        except SQLAlchemyError as e:
            self.logger.error(f"Error loading existing booking pairs: {str(e)}")
            raise RepositoryException(f"Failed to load bookings: {str(e)}")
