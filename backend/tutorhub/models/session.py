"""
Class session model.

A session is one scheduled block of teaching time for a course, owned by one
tutor. Times are absolute instants stored in UTC.

Lifecycle:
    SCHEDULED -> IN_PROGRESS -> COMPLETED
    SCHEDULED / IN_PROGRESS -> CANCELLED (terminal)
"""

from enum import Enum
import logging

from sqlalchemy import CheckConstraint, Column, ForeignKey, Index, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.ulid_helper import generate_ulid
from ..database import Base
from .base_enum import create_safe_enum
from .types import UTCDateTime

logger = logging.getLogger(__name__)


class SessionStatus(str, Enum):
    """Session lifecycle statuses."""

    SCHEDULED = "SCHEDULED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


CANCELLABLE_SESSION_STATUSES = frozenset({SessionStatus.SCHEDULED, SessionStatus.IN_PROGRESS})


class ClassSession(Base):
    """
    One scheduled teaching block of a course.

    ``meeting_url`` holds the stable live-room name, assigned on first join
    and reused by every participant.
    """

    __tablename__ = "sessions"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    course_id = Column(String(26), ForeignKey("courses.id"), nullable=False, index=True)
    tutor_id = Column(String(26), ForeignKey("tutors.id"), nullable=False)
    start_time = Column(UTCDateTime, nullable=False)
    end_time = Column(UTCDateTime, nullable=False)
    title = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    status = Column(
        create_safe_enum(SessionStatus, "session_status"),
        nullable=False,
        default=SessionStatus.SCHEDULED,
        index=True,
    )
    meeting_url = Column(String(255), nullable=True)

    created_at = Column(UTCDateTime, server_default=func.now())
    updated_at = Column(UTCDateTime, onupdate=func.now())

    course = relationship("Course", back_populates="sessions")
    tutor = relationship("Tutor")
    bookings = relationship(
        "SessionBooking",
        back_populates="session",
        order_by="SessionBooking.booked_at",
    )

    __table_args__ = (
        CheckConstraint("start_time < end_time", name="ck_sessions_time_order"),
        Index("idx_sessions_tutor_window", "tutor_id", "start_time", "end_time"),
    )

    def cancel(self) -> None:
        """Mark this session cancelled."""
        self.status = SessionStatus.CANCELLED
        logger.info(f"Session {self.id} cancelled")

    def start(self) -> None:
        """Mark this session as started (first tutor join)."""
        self.status = SessionStatus.IN_PROGRESS
        logger.info(f"Session {self.id} marked in progress")

    def complete(self) -> None:
        """Mark this session completed."""
        self.status = SessionStatus.COMPLETED
        logger.info(f"Session {self.id} marked as completed")

    @property
    def is_cancellable(self) -> bool:
        return self.status in CANCELLABLE_SESSION_STATUSES

    def __repr__(self) -> str:
        return (
            f"<ClassSession {self.id}: course={self.course_id}, tutor={self.tutor_id}, "
            f"{self.start_time}-{self.end_time}, status={self.status}>"
        )
