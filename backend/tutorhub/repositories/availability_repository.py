# backend/tutorhub/repositories/availability_repository.py
"""
Availability Repository for the scheduling core.

Data access for recurring weekly availability windows. Windows are returned
as stored; overlapping windows are never merged here.
"""

import logging
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.enums import DayOfWeek
from ..core.exceptions import RepositoryException
from ..models.availability import TutorAvailability
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class AvailabilityRepository(BaseRepository[TutorAvailability]):
    """Repository for tutor availability windows."""

    def __init__(self, db: Session):
        super().__init__(db, TutorAvailability)
        self.logger = logging.getLogger(__name__)

    def get_active_for_tutor(self, tutor_id: str) -> List[TutorAvailability]:
        """
        Get all active windows for a tutor, ordered by weekday then start time.

        The weekday column stores names, so calendar order is applied here
        rather than in SQL.
        """
        try:
            windows = (
                self.db.query(TutorAvailability)
                .filter(
                    TutorAvailability.tutor_id == tutor_id,
                    TutorAvailability.is_available.is_(True),
                )
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting availability for tutor {tutor_id}: {str(e)}")
            raise RepositoryException(f"Failed to get availability: {str(e)}")

        return sorted(windows, key=lambda w: (DayOfWeek(w.day_of_week).index, w.start_time))

