# backend/tutorhub/schemas/session_request.py
"""Reschedule and add-session request schemas."""

import datetime
from typing import Optional

from pydantic import Field

from ..models.session_request import RequestStatus
from ._strict_base import StandardizedModel, StrictRequestModel

REASON_MIN_LENGTH = 10


class RescheduleRequestCreate(StrictRequestModel):
    session_id: str
    requested_start_time: datetime.datetime
    requested_end_time: datetime.datetime
    reason: str = Field(..., min_length=REASON_MIN_LENGTH)


class AddSessionRequestCreate(StrictRequestModel):
    course_id: str
    start_time: datetime.datetime
    end_time: datetime.datetime
    reason: str = Field(..., min_length=REASON_MIN_LENGTH)
    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None


class RequestReview(StrictRequestModel):
    """Admin decision. Only APPROVED or REJECTED are accepted by the service."""

    status: RequestStatus
    admin_note: Optional[str] = None


class _ReviewFields(StandardizedModel):
    status: RequestStatus
    reviewed_by_admin_id: Optional[str] = None
    reviewed_at: Optional[datetime.datetime] = None
    admin_note: Optional[str] = None
    created_at: Optional[datetime.datetime] = None


class RescheduleRequestResponse(_ReviewFields):
    id: str
    session_id: str
    requested_start_time: datetime.datetime
    requested_end_time: datetime.datetime
    reason: str
    requested_by_tutor_id: str


class AddSessionRequestResponse(_ReviewFields):
    id: str
    course_id: str
    start_time: datetime.datetime
    end_time: datetime.datetime
    title: Optional[str] = None
    description: Optional[str] = None
    reason: str
    requested_by_tutor_id: str
