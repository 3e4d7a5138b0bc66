"""
Tutor and student identity rows.

Owned by the accounts layer; the scheduling core only reads them (timezone for
availability matching, display names for live-room tokens).
"""

from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from ..core.ulid_helper import generate_ulid
from ..database import Base


class Tutor(Base):
    """Tutor profile as seen by the scheduling core."""

    __tablename__ = "tutors"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    name = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    timezone = Column(String(64), nullable=False, default="UTC")

    courses = relationship("Course", back_populates="tutor")
    availability = relationship("TutorAvailability", back_populates="tutor")

    def __repr__(self) -> str:
        return f"<Tutor {self.id} tz={self.timezone}>"


class Student(Base):
    """Student profile as seen by the scheduling core."""

    __tablename__ = "students"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    name = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<Student {self.id}>"
