# backend/tutorhub/services/slot_suggestion_service.py
"""
Slot Suggestion Service for the scheduling core.

Enumerates candidate session times for a tutor by stepping a fixed-length
window through a requested range. A candidate is offered when it starts in
the future, lies inside one of the tutor's availability windows, and clashes
with none of the tutor's non-cancelled sessions.

Read-only: nothing here takes locks, so a suggestion can be gone by the time
the tutor tries to create it. ``SessionService.create_session`` re-checks.
"""

from datetime import datetime, timedelta
import logging
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.timezone_utils import ensure_utc, iter_slot_starts, overlaps
from ..repositories.factory import RepositoryFactory
from .availability_service import AvailabilityService, interval_fits_windows
from .base import BaseService

logger = logging.getLogger(__name__)


class SlotSuggestionService(BaseService):
    """Greedy first-fit slot enumeration."""

    def __init__(self, db: Session, availability_service: Optional[AvailabilityService] = None):
        super().__init__(db)
        self.availability_repository = RepositoryFactory.create_availability_repository(db)
        self.session_repository = RepositoryFactory.create_session_repository(db)
        self.course_repository = RepositoryFactory.create_course_repository(db)
        self.availability_service = availability_service or AvailabilityService(db)

    @BaseService.measure_operation("suggest_slots")
    def suggest_slots(
        self,
        tutor_id: str,
        course_id: str,
        range_start: datetime,
        range_end: datetime,
        duration_minutes: int = 60,
        max_results: Optional[int] = None,
    ) -> List[Dict[str, datetime]]:
        """
        Suggest free slots for a tutor within [range_start, range_end).

        Args:
            tutor_id: Tutor whose calendar is searched
            course_id: Course the slots are for; must belong to the tutor
            range_start: Start of the search range
            range_end: End of the search range
            duration_minutes: Length of every candidate slot
            max_results: Cap on returned slots (defaults to settings)

        Returns:
            Chronological list of {"start", "end"} UTC datetimes. Empty when the
            course is not the tutor's, the tutor has no windows, or the
            arguments describe an empty search.
        """
        limit = max_results if max_results is not None else settings.max_suggested_slots
        if duration_minutes <= 0 or limit <= 0:
            return []

        range_start, range_end = ensure_utc(range_start), ensure_utc(range_end)
        if range_start >= range_end:
            return []

        if self.course_repository.get_course_for_tutor(course_id, tutor_id) is None:
            return []

        windows = self.availability_repository.get_active_for_tutor(tutor_id)
        if not windows:
            return []

        tz_name = self.availability_service.tutor_timezone(tutor_id)
        busy = self.session_repository.get_tutor_sessions_in_range(
            tutor_id, range_start, range_end
        )
        now = self._now()
        duration = timedelta(minutes=duration_minutes)
        stride = timedelta(minutes=settings.slot_stride_minutes)

        slots: List[Dict[str, datetime]] = []
        for slot_start in iter_slot_starts(range_start, range_end, duration, stride):
            slot_end = slot_start + duration
            if slot_start < now:
                continue
            if not interval_fits_windows(windows, slot_start, slot_end, tz_name):
                continue
            if any(overlaps(slot_start, slot_end, s.start_time, s.end_time) for s in busy):
                continue
            slots.append({"start": slot_start, "end": slot_end})
            if len(slots) >= limit:
                break

        self.logger.debug(
            "Suggested %d slot(s) for tutor %s in %s..%s", len(slots), tutor_id, range_start, range_end
        )
        return slots
