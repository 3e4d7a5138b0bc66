# backend/tests/factories.py
"""Row factories and time helpers shared by the test suite."""

from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

import jwt
from sqlalchemy.orm import Session

from tutorhub.core.config import settings
from tutorhub.core.enums import DayOfWeek
from tutorhub.models import (
    BookingStatus,
    ClassSession,
    Course,
    CourseEnrollment,
    CourseStatus,
    EnrollmentStatus,
    SessionBooking,
    SessionStatus,
    Student,
    Tutor,
    TutorAvailability,
)

# Monday 2030-01-07 is the reference teaching day; the default clock sits on
# the Sunday before it.
MONDAY = datetime(2030, 1, 7, tzinfo=timezone.utc)
DEFAULT_NOW = datetime(2030, 1, 6, 12, 0, tzinfo=timezone.utc)


def monday_at(hour: int, minute: int = 0) -> datetime:
    return MONDAY + timedelta(hours=hour, minutes=minute)


def create_tutor(db: Session, name: str = "Tara Tutor", tz: str = "UTC") -> Tutor:
    tutor = Tutor(name=name, email=f"{name.split()[0].lower()}@example.com", timezone=tz)
    db.add(tutor)
    db.commit()
    return tutor


def create_student(db: Session, name: str = "Sam Student") -> Student:
    student = Student(name=name, email=f"{name.split()[0].lower()}@example.com")
    db.add(student)
    db.commit()
    return student


def create_course(
    db: Session,
    tutor: Tutor,
    status: CourseStatus = CourseStatus.DRAFT,
    max_students: Optional[int] = None,
    title: str = "Algebra Foundations",
) -> Course:
    course = Course(tutor_id=tutor.id, title=title, status=status, max_students=max_students)
    db.add(course)
    db.commit()
    return course


def enroll(
    db: Session,
    course: Course,
    student: Student,
    status: EnrollmentStatus = EnrollmentStatus.STARTED,
) -> CourseEnrollment:
    enrollment = CourseEnrollment(course_id=course.id, student_id=student.id, status=status)
    db.add(enrollment)
    db.commit()
    return enrollment


def add_window(
    db: Session,
    tutor: Tutor,
    day: DayOfWeek = DayOfWeek.MONDAY,
    start: str = "09:00",
    end: str = "12:00",
) -> TutorAvailability:
    window = TutorAvailability(tutor_id=tutor.id, day_of_week=day, start_time=start, end_time=end)
    db.add(window)
    db.commit()
    return window


def add_session(
    db: Session,
    course: Course,
    start: datetime,
    end: datetime,
    status: SessionStatus = SessionStatus.SCHEDULED,
    title: Optional[str] = None,
) -> ClassSession:
    session = ClassSession(
        course_id=course.id,
        tutor_id=course.tutor_id,
        start_time=start,
        end_time=end,
        status=status,
        title=title,
    )
    db.add(session)
    db.commit()
    return session


def add_booking(
    db: Session,
    session: ClassSession,
    student: Student,
    status: BookingStatus = BookingStatus.CONFIRMED,
    booked_at: Optional[datetime] = None,
) -> SessionBooking:
    booking = SessionBooking(
        session_id=session.id,
        student_id=student.id,
        status=status,
        booked_at=booked_at or DEFAULT_NOW,
    )
    db.add(booking)
    db.commit()
    return booking


def auth_headers(user_id: str, role: str) -> Dict[str, str]:
    token = jwt.encode(
        {"sub": user_id, "role": role, "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
        settings.secret_key.get_secret_value(),
        algorithm=settings.algorithm,
    )
    return {"Authorization": f"Bearer {token}"}


