# backend/tutorhub/repositories/session_repository.py
"""
Session Repository for the scheduling core.

Calendar queries for class sessions: overlap detection against a tutor's
non-cancelled sessions and the listing views with eager-loaded bookings.
"""

from datetime import datetime
import logging
from typing import List, Optional, cast

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload

from ..core.exceptions import RepositoryException
from ..models.session import ClassSession, SessionStatus
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class SessionRepository(BaseRepository[ClassSession]):
    """Repository for class sessions."""

    def __init__(self, db: Session):
        super().__init__(db, ClassSession)
        self.logger = logging.getLogger(__name__)

    # Conflict queries

    def find_overlapping(
        self,
        tutor_id: str,
        start_time: datetime,
        end_time: datetime,
        exclude_session_id: Optional[str] = None,
    ) -> List[ClassSession]:
        """
        Non-cancelled sessions of the tutor that overlap [start_time, end_time).

        Touching endpoints are not an overlap.

        Args:
            tutor_id: The tutor to check
            start_time: Candidate start (UTC)
            end_time: Candidate end (UTC)
            exclude_session_id: Optional session to ignore (e.g. the one being moved)
        """
        try:
            query = self.db.query(ClassSession).filter(
                ClassSession.tutor_id == tutor_id,
                ClassSession.status != SessionStatus.CANCELLED,
                ClassSession.start_time < end_time,
                ClassSession.end_time > start_time,
            )
            if exclude_session_id:
                query = query.filter(ClassSession.id != exclude_session_id)
            return cast(List[ClassSession], query.order_by(ClassSession.start_time).all())
        except SQLAlchemyError as e:
            self.logger.error(f"Error checking session overlap: {str(e)}")
            raise RepositoryException(f"Failed to check overlap: {str(e)}")

    def get_tutor_sessions_in_range(
        self, tutor_id: str, range_start: datetime, range_end: datetime
    ) -> List[ClassSession]:
        """Non-cancelled sessions of the tutor touching the range, by start time."""
        return self.find_overlapping(tutor_id, range_start, range_end)

    # Listing views

    def get_by_course(self, course_id: str) -> List[ClassSession]:
        """Sessions of a course by start time, bookings eagerly loaded."""
        query = (
            self._build_query()
            .options(selectinload(ClassSession.bookings))
            .filter(ClassSession.course_id == course_id)
            .order_by(ClassSession.start_time)
        )
        return self._execute_query(query)

    def get_by_tutor(self, tutor_id: str) -> List[ClassSession]:
        """Sessions of a tutor by start time, course and bookings eagerly loaded."""
        query = (
            self._build_query()
            .options(
                joinedload(ClassSession.course),
                selectinload(ClassSession.bookings),
            )
            .filter(ClassSession.tutor_id == tutor_id)
            .order_by(ClassSession.start_time)
        )
        return self._execute_query(query)

    def get_with_details(self, session_id: str) -> Optional[ClassSession]:
        """Session with its course and bookings loaded."""
        try:
            result = (
                self._build_query()
                .options(
                    joinedload(ClassSession.course),
                    selectinload(ClassSession.bookings),
                )
                .filter(ClassSession.id == session_id)
                .first()
            )
            return cast(Optional[ClassSession], result)
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting session {session_id}: {str(e)}")
            raise RepositoryException(f"Failed to get session: {str(e)}")

    def get_active_for_course(self, course_id: str) -> List[ClassSession]:
        """Non-cancelled sessions of a course, by start time."""
        query = (
            self._build_query()
            .filter(
                ClassSession.course_id == course_id,
                ClassSession.status != SessionStatus.CANCELLED,
            )
            .order_by(ClassSession.start_time)
        )
        return self._execute_query(query)
