"""
Session booking model.

A booking is a student's claim on a seat within a session. At most one row
exists per (session, student); cancellation is a status change, so a
cancelled row keeps blocking a second booking for the same pair.
"""

from datetime import datetime, timezone
from enum import Enum
import logging
from typing import Optional

from sqlalchemy import Column, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.ulid_helper import generate_ulid
from ..database import Base
from .base_enum import create_safe_enum
from .types import UTCDateTime

logger = logging.getLogger(__name__)


class BookingStatus(str, Enum):
    """Booking lifecycle statuses."""

    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"


class SessionBooking(Base):
    """A student's confirmed or cancelled seat in a session."""

    __tablename__ = "session_bookings"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    session_id = Column(String(26), ForeignKey("sessions.id"), nullable=False)
    student_id = Column(String(26), ForeignKey("students.id"), nullable=False, index=True)
    status = Column(
        create_safe_enum(BookingStatus, "booking_status"),
        nullable=False,
        default=BookingStatus.CONFIRMED,
    )
    booked_at = Column(UTCDateTime, nullable=False, server_default=func.now())
    cancelled_at = Column(UTCDateTime, nullable=True)

    session = relationship("ClassSession", back_populates="bookings")
    student = relationship("Student")

    __table_args__ = (
        UniqueConstraint("session_id", "student_id", name="uq_session_booking_student"),
        Index("idx_session_bookings_session_status", "session_id", "status"),
    )

    def cancel(self, when: Optional[datetime] = None) -> None:
        """Cancel this booking."""
        self.status = BookingStatus.CANCELLED
        self.cancelled_at = when or datetime.now(timezone.utc)
        logger.info(f"Booking {self.id} cancelled")

    @property
    def is_confirmed(self) -> bool:
        return self.status == BookingStatus.CONFIRMED

    def __repr__(self) -> str:
        return (
            f"<SessionBooking {self.id}: session={self.session_id}, "
            f"student={self.student_id}, status={self.status}>"
        )
