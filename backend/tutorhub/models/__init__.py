"""
SQLAlchemy models for the scheduling core.

Importing this package registers every table on ``Base.metadata``.
"""

from .availability import TutorAvailability
from .booking import BookingStatus, SessionBooking
from .course import Course, CourseEnrollment, CourseStatus, EnrollmentStatus
from .session import ClassSession, SessionStatus
from .session_request import AddSessionRequest, RequestStatus, RescheduleRequest
from .tutor import Student, Tutor

__all__ = [
    "AddSessionRequest",
    "BookingStatus",
    "ClassSession",
    "Course",
    "CourseEnrollment",
    "CourseStatus",
    "EnrollmentStatus",
    "RequestStatus",
    "RescheduleRequest",
    "SessionBooking",
    "SessionStatus",
    "Student",
    "Tutor",
    "TutorAvailability",
]
