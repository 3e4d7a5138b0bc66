# backend/tutorhub/schemas/availability.py
"""
Availability schemas.

Windows are recurring weekly ranges in the tutor's local time. Times travel
as zero-padded 24h "HH:mm" strings. An end of "24:00" closes a window at
local midnight. The ordering of start and end is checked by the service so
that it reports the domain error.
"""

import datetime
from typing import Optional

from pydantic import Field

from ..core.enums import DayOfWeek
from ._strict_base import StandardizedModel, StrictRequestModel

HHMM_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"
# A window may close at the end of the day
END_HHMM_PATTERN = r"^(([01]\d|2[0-3]):[0-5]\d|24:00)$"


class AvailabilityCreate(StrictRequestModel):
    """Schema for adding a weekly availability window."""

    day_of_week: DayOfWeek
    start_time: str = Field(..., pattern=HHMM_PATTERN, examples=["09:00"])
    end_time: str = Field(..., pattern=END_HHMM_PATTERN, examples=["12:00"])


class AvailabilityResponse(StandardizedModel):
    id: str
    tutor_id: str
    day_of_week: DayOfWeek
    start_time: str
    end_time: str
    is_available: bool
    created_at: Optional[datetime.datetime] = None
