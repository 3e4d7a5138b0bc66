"""
Course catalog and enrollment rows.

These tables belong to the catalog/enrollment CRUD layer. The scheduling core
reads them by id (ownership, publish state, capacity, active students) and
never mutates them.
"""

from enum import Enum

from sqlalchemy import Column, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.ulid_helper import generate_ulid
from ..database import Base
from .base_enum import create_safe_enum
from .types import UTCDateTime


class CourseStatus(str, Enum):
    """Course lifecycle. Sessions may be added directly only while DRAFT."""

    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"


class EnrollmentStatus(str, Enum):
    """Enrollment lifecycle. STARTED is the "active" state."""

    PENDING = "PENDING"
    STARTED = "STARTED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class Course(Base):
    """Course owned by one tutor."""

    __tablename__ = "courses"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    tutor_id = Column(String(26), ForeignKey("tutors.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    status = Column(
        create_safe_enum(CourseStatus, "course_status"),
        nullable=False,
        default=CourseStatus.DRAFT,
    )
    max_students = Column(Integer, nullable=True)

    tutor = relationship("Tutor", back_populates="courses")
    enrollments = relationship("CourseEnrollment", back_populates="course")
    sessions = relationship("ClassSession", back_populates="course")

    def __repr__(self) -> str:
        return f"<Course {self.id} status={self.status}>"


class CourseEnrollment(Base):
    """A student's enrollment in a course."""

    __tablename__ = "course_enrollments"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    course_id = Column(String(26), ForeignKey("courses.id"), nullable=False, index=True)
    student_id = Column(String(26), ForeignKey("students.id"), nullable=False, index=True)
    status = Column(
        create_safe_enum(EnrollmentStatus, "enrollment_status"),
        nullable=False,
        default=EnrollmentStatus.PENDING,
    )
    date_enrolled = Column(UTCDateTime, server_default=func.now())

    course = relationship("Course", back_populates="enrollments")
    student = relationship("Student")

    __table_args__ = (
        UniqueConstraint("course_id", "student_id", name="uq_course_enrollment_student"),
    )

    def __repr__(self) -> str:
        return f"<CourseEnrollment course={self.course_id} student={self.student_id} {self.status}>"
