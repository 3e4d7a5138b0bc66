"""
Tutor-initiated change requests that need admin review.

Once a course is published and has active students, tutors no longer edit its
calendar directly. They submit a RescheduleRequest (move one session) or an
AddSessionRequest (add a session); an admin approves or rejects it.

Lifecycle for both: PENDING -> APPROVED | REJECTED (terminal).
"""

from enum import Enum

from sqlalchemy import CheckConstraint, Column, ForeignKey, Index, String, Text
from sqlalchemy.orm import declared_attr, relationship
from sqlalchemy.sql import func

from ..core.ulid_helper import generate_ulid
from ..database import Base
from .base_enum import create_safe_enum
from .types import UTCDateTime


class RequestStatus(str, Enum):
    """Review state shared by both request types."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


REVIEW_OUTCOMES = frozenset({RequestStatus.APPROVED, RequestStatus.REJECTED})


class ReviewFieldsMixin:
    """Columns recording the admin review."""

    @declared_attr
    def status(cls):
        return Column(
            create_safe_enum(RequestStatus, f"{cls.__tablename__}_status"),
            nullable=False,
            default=RequestStatus.PENDING,
            index=True,
        )

    reviewed_by_admin_id = Column(String(26), nullable=True)
    reviewed_at = Column(UTCDateTime, nullable=True)
    admin_note = Column(Text, nullable=True)
    created_at = Column(UTCDateTime, nullable=False, server_default=func.now())


class RescheduleRequest(ReviewFieldsMixin, Base):
    """Proposal to move an existing session to new times."""

    __tablename__ = "reschedule_requests"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    session_id = Column(String(26), ForeignKey("sessions.id"), nullable=False)
    requested_start_time = Column(UTCDateTime, nullable=False)
    requested_end_time = Column(UTCDateTime, nullable=False)
    reason = Column(Text, nullable=False)
    requested_by_tutor_id = Column(String(26), ForeignKey("tutors.id"), nullable=False)

    session = relationship("ClassSession")

    __table_args__ = (
        CheckConstraint(
            "requested_start_time < requested_end_time",
            name="ck_reschedule_requests_time_order",
        ),
        Index("idx_reschedule_requests_tutor", "requested_by_tutor_id"),
    )

    def __repr__(self) -> str:
        return f"<RescheduleRequest {self.id} session={self.session_id} {self.status}>"


class AddSessionRequest(ReviewFieldsMixin, Base):
    """Proposal to add a new session to a published course."""

    __tablename__ = "add_session_requests"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    course_id = Column(String(26), ForeignKey("courses.id"), nullable=False)
    start_time = Column(UTCDateTime, nullable=False)
    end_time = Column(UTCDateTime, nullable=False)
    title = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    reason = Column(Text, nullable=False)
    requested_by_tutor_id = Column(String(26), ForeignKey("tutors.id"), nullable=False)

    course = relationship("Course")

    __table_args__ = (
        CheckConstraint("start_time < end_time", name="ck_add_session_requests_time_order"),
        Index("idx_add_session_requests_tutor", "requested_by_tutor_id"),
    )

    def __repr__(self) -> str:
        return f"<AddSessionRequest {self.id} course={self.course_id} {self.status}>"
