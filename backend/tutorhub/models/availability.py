"""
Availability models for the scheduling core.

Classes:
    TutorAvailability: A recurring weekly window (day of week + local HH:mm range)
        during which a tutor accepts sessions. Windows are matched independently;
        overlapping or redundant windows are legal and never merged.
"""

from sqlalchemy import Boolean, CheckConstraint, Column, ForeignKey, Index, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.enums import DayOfWeek
from ..core.ulid_helper import generate_ulid
from ..database import Base
from .base_enum import create_safe_enum
from .types import UTCDateTime


class TutorAvailability(Base):
    """Recurring weekly availability window in the tutor's local time."""

    __tablename__ = "tutor_availability"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    tutor_id = Column(String(26), ForeignKey("tutors.id", ondelete="CASCADE"), nullable=False)
    day_of_week = Column(create_safe_enum(DayOfWeek, "day_of_week"), nullable=False)
    start_time = Column(String(5), nullable=False)  # "HH:mm"
    end_time = Column(String(5), nullable=False)  # "HH:mm"
    is_available = Column(Boolean, nullable=False, default=True)
    created_at = Column(UTCDateTime, server_default=func.now())

    tutor = relationship("Tutor", back_populates="availability")

    __table_args__ = (
        CheckConstraint("start_time < end_time", name="ck_tutor_availability_time_order"),
        Index("idx_tutor_availability_tutor_day", "tutor_id", "day_of_week"),
    )

    def __repr__(self) -> str:
        return f"<TutorAvailability {self.day_of_week} {self.start_time}-{self.end_time}>"
