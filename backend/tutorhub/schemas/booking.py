# backend/tutorhub/schemas/booking.py
"""Booking schemas."""

import datetime
from typing import Optional

from ..models.booking import BookingStatus
from ..models.session import SessionStatus
from ._strict_base import StandardizedModel


class BookingResponse(StandardizedModel):
    id: str
    session_id: str
    student_id: str
    status: BookingStatus
    booked_at: datetime.datetime
    cancelled_at: Optional[datetime.datetime] = None


class BookedCourseSummary(StandardizedModel):
    id: str
    title: str


class BookedSessionSummary(StandardizedModel):
    id: str
    course_id: str
    start_time: datetime.datetime
    end_time: datetime.datetime
    title: Optional[str] = None
    status: SessionStatus
    course: Optional[BookedCourseSummary] = None


class StudentBookingResponse(BookingResponse):
    """A student's booking with the session it belongs to."""

    session: BookedSessionSummary


class FanOutResponse(StandardizedModel):
    course_id: str
    created: int
