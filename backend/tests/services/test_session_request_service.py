# backend/tests/services/test_session_request_service.py
"""Tests for the reschedule / add-session request workflow."""

from datetime import timedelta
import logging

import pytest

from tests.factories import (
    DEFAULT_NOW,
    add_booking,
    add_session,
    add_window,
    create_course,
    create_student,
    enroll,
    monday_at,
)
from tutorhub.core.exceptions import InvalidRangeException, InvalidStateException, NotFoundException
from tutorhub.models import (
    BookingStatus,
    ClassSession,
    CourseStatus,
    RequestStatus,
    SessionBooking,
    SessionStatus,
)
from tutorhub.services.session_request_service import SessionRequestService

ADMIN_ID = "01HADMIN000000000000000000"
REASON = "Public holiday on the original date"


@pytest.fixture
def service(db):
    return SessionRequestService(db)


@pytest.fixture
def live_session(db, published_course):
    return add_session(db, published_course, monday_at(9), monday_at(10))


def submit_reschedule(service, tutor, session, start=None, end=None):
    return service.create_reschedule_request(
        tutor.id, session.id, start or monday_at(14), end or monday_at(15), REASON
    )


def submit_add_session(service, tutor, course, start=None, end=None):
    return service.create_add_session_request(
        tutor.id,
        course.id,
        start or monday_at(16),
        end or monday_at(17),
        REASON,
        title="Bonus review",
        description="Exam prep",
    )


class TestSubmission:
    def test_reschedule_request_is_pending(self, service, tutor, live_session):
        request = submit_reschedule(service, tutor, live_session)

        assert request.status == RequestStatus.PENDING
        assert request.requested_by_tutor_id == tutor.id
        assert request.requested_start_time == monday_at(14)
        assert request.reviewed_at is None

    def test_reschedule_for_other_tutors_session(self, service, other_tutor, live_session):
        with pytest.raises(NotFoundException):
            submit_reschedule(service, other_tutor, live_session)

    def test_reschedule_on_draft_course(self, service, tutor, draft_course, db):
        session = add_session(db, draft_course, monday_at(9), monday_at(10))

        with pytest.raises(InvalidStateException):
            submit_reschedule(service, tutor, session)

    def test_reschedule_without_active_students(self, service, tutor, db):
        course = create_course(db, tutor, status=CourseStatus.PUBLISHED)
        session = add_session(db, course, monday_at(9), monday_at(10))

        with pytest.raises(InvalidStateException):
            submit_reschedule(service, tutor, session)

    def test_reschedule_inverted_range(self, service, tutor, live_session):
        with pytest.raises(InvalidRangeException):
            submit_reschedule(service, tutor, live_session, monday_at(15), monday_at(14))

    def test_add_session_request_is_pending(self, service, tutor, published_course):
        request = submit_add_session(service, tutor, published_course)

        assert request.status == RequestStatus.PENDING
        assert (request.title, request.description) == ("Bonus review", "Exam prep")

    def test_add_session_for_other_tutors_course(self, service, other_tutor, published_course):
        with pytest.raises(NotFoundException):
            submit_add_session(service, other_tutor, published_course)

    def test_add_session_on_draft_course(self, service, tutor, draft_course):
        with pytest.raises(InvalidStateException):
            submit_add_session(service, tutor, draft_course)

    def test_tutor_listing_is_newest_first(self, service, tutor, live_session, clock):
        first = submit_reschedule(service, tutor, live_session)
        clock.advance(minutes=5)
        second = submit_reschedule(service, tutor, live_session, monday_at(18), monday_at(19))

        assert [r.id for r in service.list_reschedule_requests_for_tutor(tutor.id)] == [
            second.id,
            first.id,
        ]

    def test_pending_queue_is_oldest_first(self, service, tutor, published_course, clock):
        first = submit_add_session(service, tutor, published_course)
        clock.advance(minutes=5)
        second = submit_add_session(service, tutor, published_course)
        service.review_add_session_request(second.id, ADMIN_ID, RequestStatus.REJECTED)
        clock.advance(minutes=5)
        third = submit_add_session(service, tutor, published_course)

        assert [r.id for r in service.list_pending_add_session_requests()] == [first.id, third.id]


class TestRescheduleReview:
    def test_approval_moves_only_the_target_session(
        self, service, tutor, published_course, live_session, db, clock
    ):
        untouched = add_session(db, published_course, monday_at(11), monday_at(12))
        request = submit_reschedule(service, tutor, live_session)
        clock.advance(hours=1)

        reviewed = service.review_reschedule_request(
            request.id, ADMIN_ID, RequestStatus.APPROVED, "ok"
        )

        assert reviewed.status == RequestStatus.APPROVED
        assert reviewed.reviewed_by_admin_id == ADMIN_ID
        assert reviewed.admin_note == "ok"
        assert reviewed.reviewed_at == DEFAULT_NOW + timedelta(hours=1)
        db.refresh(live_session)
        db.refresh(untouched)
        assert (live_session.start_time, live_session.end_time) == (monday_at(14), monday_at(15))
        assert (untouched.start_time, untouched.end_time) == (monday_at(11), monday_at(12))

    def test_approval_is_authoritative_over_overlaps(
        self, service, tutor, published_course, live_session, db
    ):
        add_session(db, published_course, monday_at(14), monday_at(15))
        request = submit_reschedule(service, tutor, live_session)

        service.review_reschedule_request(request.id, ADMIN_ID, RequestStatus.APPROVED)

        db.refresh(live_session)
        assert live_session.start_time == monday_at(14)

    def test_approval_keeps_bookings(self, service, tutor, live_session, student, db):
        booking = add_booking(db, live_session, student)
        request = submit_reschedule(service, tutor, live_session)

        service.review_reschedule_request(request.id, ADMIN_ID, RequestStatus.APPROVED)

        db.refresh(booking)
        assert booking.status == BookingStatus.CONFIRMED

    def test_rejection_leaves_session_alone(self, service, tutor, live_session, db):
        request = submit_reschedule(service, tutor, live_session)

        reviewed = service.review_reschedule_request(
            request.id, ADMIN_ID, RequestStatus.REJECTED, "not this week"
        )

        assert reviewed.status == RequestStatus.REJECTED
        db.refresh(live_session)
        assert live_session.start_time == monday_at(9)

    def test_second_review_is_not_found(self, service, tutor, live_session):
        request = submit_reschedule(service, tutor, live_session)
        service.review_reschedule_request(request.id, ADMIN_ID, RequestStatus.REJECTED)

        with pytest.raises(NotFoundException):
            service.review_reschedule_request(request.id, ADMIN_ID, RequestStatus.APPROVED)

    def test_pending_is_not_a_review_outcome(self, service, tutor, live_session):
        request = submit_reschedule(service, tutor, live_session)

        with pytest.raises(InvalidStateException):
            service.review_reschedule_request(request.id, ADMIN_ID, RequestStatus.PENDING)

    def test_unknown_status_is_checked_before_lookup(self, service):
        with pytest.raises(InvalidStateException):
            service.review_reschedule_request("01HZZZZZZZZZZZZZZZZZZZZZZZ", ADMIN_ID, "MAYBE")


class TestAddSessionReview:
    def test_approval_creates_session_and_books_students(
        self, service, tutor, published_course, student, db
    ):
        extra = create_student(db, name="Eve Extra")
        enroll(db, published_course, extra)
        request = submit_add_session(service, tutor, published_course)

        service.review_add_session_request(request.id, ADMIN_ID, RequestStatus.APPROVED)

        created = (
            db.query(ClassSession)
            .filter_by(course_id=published_course.id, start_time=monday_at(16))
            .one()
        )
        assert created.status == SessionStatus.SCHEDULED
        assert (created.title, created.description) == ("Bonus review", "Exam prep")
        booked = {b.student_id for b in db.query(SessionBooking).filter_by(session_id=created.id)}
        assert booked == {student.id, extra.id}

    def test_approval_fans_out_into_existing_sessions_too(
        self, service, tutor, published_course, live_session, student, db
    ):
        request = submit_add_session(service, tutor, published_course)

        service.review_add_session_request(request.id, ADMIN_ID, RequestStatus.APPROVED)

        assert db.query(SessionBooking).filter_by(session_id=live_session.id).count() == 1
        assert db.query(SessionBooking).filter_by(student_id=student.id).count() == 2

    def test_approval_ignores_availability(self, service, tutor, published_course, db):
        add_window(db, tutor, start="09:00", end="10:00")
        request = submit_add_session(service, tutor, published_course)

        service.review_add_session_request(request.id, ADMIN_ID, RequestStatus.APPROVED)

        assert db.query(ClassSession).filter_by(start_time=monday_at(16)).count() == 1

    def test_rejection_has_no_side_effects(self, service, tutor, published_course, db):
        request = submit_add_session(service, tutor, published_course)

        reviewed = service.review_add_session_request(request.id, ADMIN_ID, RequestStatus.REJECTED)

        assert reviewed.status == RequestStatus.REJECTED
        assert db.query(ClassSession).count() == 0
        assert db.query(SessionBooking).count() == 0

    def test_second_review_is_not_found(self, service, tutor, published_course, db):
        request = submit_add_session(service, tutor, published_course)
        service.review_add_session_request(request.id, ADMIN_ID, RequestStatus.APPROVED)

        with pytest.raises(NotFoundException):
            service.review_add_session_request(request.id, ADMIN_ID, RequestStatus.APPROVED)
        assert db.query(ClassSession).count() == 1

    def test_approval_commits_with_info_logging_enabled(
        self, service, tutor, published_course, student, db, caplog
    ):
        request = submit_add_session(service, tutor, published_course)

        with caplog.at_level(logging.INFO):
            reviewed = service.review_add_session_request(
                request.id, ADMIN_ID, RequestStatus.APPROVED
            )

        assert reviewed.status == RequestStatus.APPROVED
        db.expire_all()
        assert db.query(ClassSession).count() == 1
        assert db.query(SessionBooking).filter_by(student_id=student.id).count() == 1
