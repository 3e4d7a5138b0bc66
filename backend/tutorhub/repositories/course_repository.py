# backend/tutorhub/repositories/course_repository.py
"""
Course Repository for the scheduling core.

Read-only lookups against tables owned by the catalog and accounts layers:
courses, enrollments, tutors and students. Also provides the per-tutor row
lock used to serialise calendar writes.
"""

import logging
from typing import List, Optional, cast

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.course import Course, CourseEnrollment, EnrollmentStatus
from ..models.tutor import Student, Tutor
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class CourseRepository(BaseRepository[Course]):
    """Repository for course ownership, publish state and enrollment queries."""

    def __init__(self, db: Session):
        super().__init__(db, Course)
        self.logger = logging.getLogger(__name__)

    def get_course_for_tutor(self, course_id: str, tutor_id: str) -> Optional[Course]:
        """Course by id, only if owned by the tutor."""
        try:
            result = (
                self.db.query(Course)
                .filter(Course.id == course_id, Course.tutor_id == tutor_id)
                .first()
            )
            return cast(Optional[Course], result)
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting course {course_id} for tutor: {str(e)}")
            raise RepositoryException(f"Failed to get course: {str(e)}")

    def has_active_enrollment(self, course_id: str) -> bool:
        """True if at least one student is actively enrolled (STARTED)."""
        try:
            return (
                self.db.query(CourseEnrollment.id)
                .filter(
                    CourseEnrollment.course_id == course_id,
                    CourseEnrollment.status == EnrollmentStatus.STARTED,
                )
                .first()
                is not None
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error checking enrollments for course {course_id}: {str(e)}")
            raise RepositoryException(f"Failed to check enrollments: {str(e)}")

    def get_active_enrollment(self, course_id: str, student_id: str) -> Optional[CourseEnrollment]:
        """The student's STARTED enrollment in the course, if any."""
        try:
            result = (
                self.db.query(CourseEnrollment)
                .filter(
                    CourseEnrollment.course_id == course_id,
                    CourseEnrollment.student_id == student_id,
                    CourseEnrollment.status == EnrollmentStatus.STARTED,
                )
                .first()
            )
            return cast(Optional[CourseEnrollment], result)
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting enrollment: {str(e)}")
            raise RepositoryException(f"Failed to get enrollment: {str(e)}")

    def get_active_student_ids(self, course_id: str) -> List[str]:
        """Ids of students with a STARTED enrollment in the course."""
        try:
            rows = (
                self.db.query(CourseEnrollment.student_id)
                .filter(
                    CourseEnrollment.course_id == course_id,
                    CourseEnrollment.status == EnrollmentStatus.STARTED,
                )
                .order_by(CourseEnrollment.date_enrolled)
                .all()
            )
            return [row.student_id for row in rows]
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing active students for {course_id}: {str(e)}")
            raise RepositoryException(f"Failed to list active students: {str(e)}")

    def get_tutor(self, tutor_id: str, for_update: bool = False) -> Optional[Tutor]:
        """
        Tutor by id.

        With ``for_update`` the tutor row stays locked until the transaction
        ends, which serialises overlap-check-then-insert per tutor.
        """
        try:
            query = self.db.query(Tutor).filter(Tutor.id == tutor_id)
            if for_update:
                query = query.with_for_update()
            return cast(Optional[Tutor], query.first())
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting tutor {tutor_id}: {str(e)}")
            raise RepositoryException(f"Failed to get tutor: {str(e)}")

    def get_student(self, student_id: str) -> Optional[Student]:
        try:
            return cast(
                Optional[Student],
                self.db.query(Student).filter(Student.id == student_id).first(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting student {student_id}: {str(e)}")
            raise RepositoryException(f"Failed to get student: {str(e)}")
