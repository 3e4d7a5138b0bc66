# backend/tutorhub/services/availability_service.py
"""
Availability Service for the scheduling core.

Manages tutor recurring weekly availability windows and answers the
containment question used by the session registry and slot engine:
"does this absolute interval fall inside one of the tutor's windows?"

Windows are expressed in the tutor's local time ("HH:mm" on a weekday).
Overlapping windows on the same day are legal; each is matched on its own.
"""

from datetime import datetime, timedelta
import logging
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.enums import DayOfWeek
from ..core.exceptions import ForbiddenException, InvalidRangeException, NotFoundException
from ..core.timezone_utils import local_day_and_time, time_le, window_contains
from ..models.availability import TutorAvailability
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)

END_OF_DAY = "24:00"


def interval_fits_windows(
    windows: Iterable[TutorAvailability],
    start: datetime,
    end: datetime,
    tz_name: Optional[str],
) -> bool:
    """
    True if the local [start, end) lies inside some window on start's local weekday.

    An interval ending exactly at the next local midnight is read as ending at
    "24:00" on its start day. Anything spilling further into the next day
    never fits.
    """
    if end - start >= timedelta(days=1):
        return False

    start_day, local_start = local_day_and_time(start, tz_name)
    end_day, local_end = local_day_and_time(end, tz_name)
    if end_day != start_day:
        if local_end != "00:00":
            return False
        local_end = END_OF_DAY

    return any(
        DayOfWeek(window.day_of_week) == start_day
        and window_contains(window.start_time, window.end_time, local_start, local_end)
        for window in windows
    )


class AvailabilityService(BaseService):
    """Service for tutor availability windows."""

    def __init__(self, db: Session):
        super().__init__(db)
        self.repository = RepositoryFactory.create_availability_repository(db)
        self.course_repository = RepositoryFactory.create_course_repository(db)

    @BaseService.measure_operation("create_availability")
    def create_availability(
        self,
        tutor_id: str,
        day_of_week: DayOfWeek,
        start_time: str,
        end_time: str,
    ) -> TutorAvailability:
        """
        Add a recurring weekly window for a tutor.

        Args:
            tutor_id: Owner of the window
            day_of_week: Weekday the window applies to
            start_time: Local "HH:mm" start
            end_time: Local "HH:mm" end

        Raises:
            InvalidRangeException: start_time is not before end_time
        """
        if time_le(end_time, start_time):
            raise InvalidRangeException(
                "Start time must be before end time",
                details={"start_time": start_time, "end_time": end_time},
            )

        self.log_operation(
            "create_availability", tutor_id=tutor_id, day_of_week=str(day_of_week)
        )
        with self.transaction():
            window = self.repository.create(
                tutor_id=tutor_id,
                day_of_week=DayOfWeek(day_of_week),
                start_time=start_time,
                end_time=end_time,
                is_available=True,
                created_at=self._now(),
            )
        return window

    @BaseService.measure_operation("list_availability")
    def list_active(self, tutor_id: str) -> List[TutorAvailability]:
        """All active windows of a tutor ordered by weekday then start time."""
        return self.repository.get_active_for_tutor(tutor_id)

    @BaseService.measure_operation("delete_availability")
    def delete_availability(self, window_id: str, tutor_id: str) -> TutorAvailability:
        """
        Remove a window owned by the tutor.

        Raises:
            NotFoundException: no such window
            ForbiddenException: window belongs to another tutor
        """
        window = self.repository.get_by_id(window_id)
        if window is None:
            raise NotFoundException("Availability slot not found")
        if window.tutor_id != tutor_id:
            raise ForbiddenException("You can only delete your own availability")

        with self.transaction():
            self.repository.delete(window)

        self.log_operation("delete_availability", tutor_id=tutor_id, window_id=window_id)
        return window

    def tutor_timezone(self, tutor_id: str) -> str:
        """IANA zone used to project the tutor's sessions onto windows."""
        tutor = self.course_repository.get_tutor(tutor_id)
        if tutor is not None and tutor.timezone:
            return str(tutor.timezone)
        return settings.default_timezone

    def fits_availability(self, tutor_id: str, start: datetime, end: datetime) -> bool:
        """
        Containment check for one interval.

        A tutor with zero active windows is unconstrained.
        """
        windows = self.repository.get_active_for_tutor(tutor_id)
        if not windows:
            return True
        return interval_fits_windows(windows, start, end, self.tutor_timezone(tutor_id))
