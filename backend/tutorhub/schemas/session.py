# backend/tutorhub/schemas/session.py
"""
Class session schemas.

Instants are absolute; values without an offset are read as UTC.
"""

import datetime
from typing import List, Optional

from pydantic import Field

from ..models.course import CourseStatus
from ..models.session import SessionStatus
from ._strict_base import StandardizedModel, StrictRequestModel
from .booking import BookingResponse


class SessionCreate(StrictRequestModel):
    """Schema for scheduling a session on a draft course."""

    course_id: str
    start_time: datetime.datetime
    end_time: datetime.datetime
    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None


class SessionDuplicate(StrictRequestModel):
    """New times for a copy of an existing session."""

    start_time: datetime.datetime
    end_time: datetime.datetime


class SessionCourseSummary(StandardizedModel):
    id: str
    title: str
    status: CourseStatus


class SessionResponse(StandardizedModel):
    id: str
    course_id: str
    tutor_id: str
    start_time: datetime.datetime
    end_time: datetime.datetime
    title: Optional[str] = None
    description: Optional[str] = None
    status: SessionStatus
    meeting_url: Optional[str] = None
    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None


class SessionDetailResponse(SessionResponse):
    """Session with its bookings, used by the listing views."""

    bookings: List[BookingResponse] = Field(default_factory=list)


class TutorSessionResponse(SessionDetailResponse):
    course: Optional[SessionCourseSummary] = None


class SuggestedSlot(StandardizedModel):
    start: datetime.datetime
    end: datetime.datetime


class SuggestedSlotsResponse(StandardizedModel):
    slots: List[SuggestedSlot]
    duration_minutes: int
