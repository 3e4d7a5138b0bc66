# backend/tutorhub/core/enums.py
"""
Core enums for the TutorHub scheduling core.

Closed value sets shared across models, schemas and services. Unknown values
are rejected at the schema boundary.
"""

from enum import Enum


class RoleName(str, Enum):
    """Caller roles supplied by the identity layer."""

    ADMIN = "admin"
    TUTOR = "tutor"
    STUDENT = "student"


class DayOfWeek(str, Enum):
    """Civil day of week used by recurring availability windows."""

    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"

    @classmethod
    def from_weekday(cls, weekday: int) -> "DayOfWeek":
        """Map ``datetime.weekday()`` (Monday == 0) to a DayOfWeek."""
        return _WEEKDAY_ORDER[weekday]

    @property
    def index(self) -> int:
        return _WEEKDAY_ORDER.index(self)


_WEEKDAY_ORDER = [
    DayOfWeek.MONDAY,
    DayOfWeek.TUESDAY,
    DayOfWeek.WEDNESDAY,
    DayOfWeek.THURSDAY,
    DayOfWeek.FRIDAY,
    DayOfWeek.SATURDAY,
    DayOfWeek.SUNDAY,
]
