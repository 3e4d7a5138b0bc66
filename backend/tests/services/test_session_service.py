# backend/tests/services/test_session_service.py
"""Tests for SessionService: creation gates, duplication and cancellation."""

from datetime import timedelta

from hypothesis import HealthCheck, given, settings, strategies as st
import pytest

from tests.factories import (
    DEFAULT_NOW,
    add_booking,
    add_session,
    add_window,
    create_course,
    monday_at,
)
from tutorhub.core.exceptions import (
    ActiveEnrollmentException,
    ForbiddenException,
    InvalidRangeException,
    InvalidStateException,
    NotFoundException,
    OutsideAvailabilityException,
    SessionConflictException,
)
from tutorhub.core.timezone_utils import overlaps
from tutorhub.models import BookingStatus, ClassSession, CourseStatus, SessionStatus
from tutorhub.services.session_service import SessionService


@pytest.fixture
def service(db):
    return SessionService(db)


class TestCreateSession:
    def test_creates_scheduled_session(self, service, tutor, draft_course, db):
        session = service.create_session(
            draft_course.id, tutor.id, monday_at(9), monday_at(10), title="Intro"
        )

        stored = db.query(ClassSession).filter_by(id=session.id).one()
        assert stored.status == SessionStatus.SCHEDULED
        assert stored.tutor_id == tutor.id
        assert stored.course_id == draft_course.id
        assert stored.title == "Intro"
        assert stored.meeting_url is None

    def test_unknown_course(self, service, tutor):
        with pytest.raises(NotFoundException):
            service.create_session("01HZZZZZZZZZZZZZZZZZZZZZZZ", tutor.id, monday_at(9), monday_at(10))

    def test_other_tutors_course_is_not_found(self, service, other_tutor, draft_course):
        with pytest.raises(NotFoundException):
            service.create_session(draft_course.id, other_tutor.id, monday_at(9), monday_at(10))

    @pytest.mark.parametrize("status", [CourseStatus.PUBLISHED, CourseStatus.ARCHIVED])
    def test_only_draft_courses_accept_sessions(self, service, tutor, db, status):
        course = create_course(db, tutor, status=status)

        with pytest.raises(InvalidStateException):
            service.create_session(course.id, tutor.id, monday_at(9), monday_at(10))

    @pytest.mark.parametrize(
        "start, end",
        [
            (monday_at(10), monday_at(9)),
            (monday_at(10), monday_at(10)),
        ],
    )
    def test_rejects_empty_or_inverted_range(self, service, tutor, draft_course, start, end):
        with pytest.raises(InvalidRangeException):
            service.create_session(draft_course.id, tutor.id, start, end)

    def test_rejects_start_in_the_past(self, service, tutor, draft_course):
        start = DEFAULT_NOW - timedelta(hours=1)

        with pytest.raises(InvalidRangeException):
            service.create_session(draft_course.id, tutor.id, start, start + timedelta(hours=1))

    def test_past_check_follows_the_clock(self, service, tutor, draft_course, clock):
        clock.set(monday_at(9, 30))

        with pytest.raises(InvalidRangeException):
            service.create_session(draft_course.id, tutor.id, monday_at(9), monday_at(10))


class TestAvailabilityGate:
    def test_zero_windows_is_unconstrained(self, service, tutor, draft_course):
        session = service.create_session(draft_course.id, tutor.id, monday_at(2), monday_at(3))

        assert session.id is not None

    def test_outside_window(self, service, tutor, draft_course, db):
        add_window(db, tutor, start="09:00", end="12:00")

        with pytest.raises(OutsideAvailabilityException) as exc_info:
            service.create_session(draft_course.id, tutor.id, monday_at(8), monday_at(9))
        assert exc_info.value.details["timezone"] == "UTC"

    def test_inside_window_then_overlap(self, service, tutor, draft_course, db):
        add_window(db, tutor, start="09:00", end="12:00")

        service.create_session(draft_course.id, tutor.id, monday_at(9), monday_at(10))

        with pytest.raises(SessionConflictException):
            service.create_session(draft_course.id, tutor.id, monday_at(9, 30), monday_at(10, 30))

    def test_straddling_window_end(self, service, tutor, draft_course, db):
        add_window(db, tutor, start="09:00", end="12:00")

        with pytest.raises(OutsideAvailabilityException):
            service.create_session(draft_course.id, tutor.id, monday_at(11, 30), monday_at(12, 30))

    def test_conflict_is_reported_before_availability(self, service, tutor, draft_course, db):
        add_window(db, tutor, start="09:00", end="12:00")
        add_session(db, draft_course, monday_at(12), monday_at(14))

        with pytest.raises(SessionConflictException):
            service.create_session(draft_course.id, tutor.id, monday_at(13), monday_at(15))


class TestOverlap:
    @pytest.mark.parametrize(
        "start, end, clashes",
        [
            (monday_at(9), monday_at(10), False),
            (monday_at(11), monday_at(12), False),
            (monday_at(9, 30), monday_at(10, 30), True),
            (monday_at(10, 30), monday_at(11, 30), True),
            (monday_at(10, 15), monday_at(10, 45), True),
            (monday_at(9), monday_at(12), True),
            (monday_at(10), monday_at(11), True),
        ],
    )
    def test_half_open_overlap(self, service, tutor, draft_course, db, start, end, clashes):
        add_session(db, draft_course, monday_at(10), monday_at(11))

        if clashes:
            with pytest.raises(SessionConflictException):
                service.create_session(draft_course.id, tutor.id, start, end)
        else:
            assert service.create_session(draft_course.id, tutor.id, start, end).id

    def test_conflict_names_the_clashing_session(self, service, tutor, draft_course, db):
        existing = add_session(db, draft_course, monday_at(10), monday_at(11))

        with pytest.raises(SessionConflictException) as exc_info:
            service.create_session(draft_course.id, tutor.id, monday_at(10), monday_at(11))
        assert exc_info.value.details["conflicting_session_ids"] == [existing.id]
        assert exc_info.value.code == "SESSION_CONFLICT"

    def test_cancelled_session_does_not_block(self, service, tutor, draft_course, db):
        add_session(db, draft_course, monday_at(10), monday_at(11), status=SessionStatus.CANCELLED)

        assert service.create_session(draft_course.id, tutor.id, monday_at(10), monday_at(11)).id

    def test_overlap_is_checked_across_courses(self, service, tutor, draft_course, db):
        other_course = create_course(db, tutor, title="Calculus")
        add_session(db, other_course, monday_at(10), monday_at(11))

        with pytest.raises(SessionConflictException):
            service.create_session(draft_course.id, tutor.id, monday_at(10), monday_at(11))

    def test_other_tutors_sessions_do_not_block(self, service, tutor, other_tutor, draft_course, db):
        foreign_course = create_course(db, other_tutor)
        add_session(db, foreign_course, monday_at(10), monday_at(11))

        assert service.create_session(draft_course.id, tutor.id, monday_at(10), monday_at(11)).id


class TestDuplicateSession:
    def test_copies_title_and_description_but_not_bookings(
        self, service, tutor, draft_course, student, db
    ):
        source = add_session(db, draft_course, monday_at(9), monday_at(10), title="Week 1")
        source.description = "Warm-up"
        db.commit()
        add_booking(db, source, student)

        copy = service.duplicate_session(source.id, tutor.id, monday_at(14), monday_at(15))

        assert copy.id != source.id
        assert copy.course_id == draft_course.id
        assert (copy.title, copy.description) == ("Week 1", "Warm-up")
        assert copy.status == SessionStatus.SCHEDULED
        db.refresh(copy)
        assert copy.bookings == []

    def test_duplicate_runs_the_overlap_gate(self, service, tutor, draft_course, db):
        source = add_session(db, draft_course, monday_at(9), monday_at(10))

        with pytest.raises(SessionConflictException):
            service.duplicate_session(source.id, tutor.id, monday_at(9, 30), monday_at(10, 30))

    def test_duplicate_other_tutors_session(self, service, other_tutor, draft_course, db):
        source = add_session(db, draft_course, monday_at(9), monday_at(10))

        with pytest.raises(ForbiddenException):
            service.duplicate_session(source.id, other_tutor.id, monday_at(14), monday_at(15))

    def test_duplicate_into_published_course(self, service, tutor, published_course, db):
        source = add_session(db, published_course, monday_at(9), monday_at(10))

        with pytest.raises(InvalidStateException):
            service.duplicate_session(source.id, tutor.id, monday_at(14), monday_at(15))


class TestCancelSession:
    def test_cancels_confirmed_bookings(
        self, service, tutor, draft_course, student, other_student, db, clock
    ):
        session = add_session(db, draft_course, monday_at(9), monday_at(10))
        kept = add_booking(db, session, student)
        already = add_booking(db, session, other_student, status=BookingStatus.CANCELLED)
        clock.set(DEFAULT_NOW + timedelta(minutes=5))

        cancelled = service.cancel_session(session.id, tutor.id)

        assert cancelled.status == SessionStatus.CANCELLED
        db.refresh(kept)
        db.refresh(already)
        assert kept.status == BookingStatus.CANCELLED
        assert kept.cancelled_at == DEFAULT_NOW + timedelta(minutes=5)
        assert already.cancelled_at is None

    def test_cancelled_slot_can_be_reused(self, service, tutor, draft_course, db):
        session = add_session(db, draft_course, monday_at(9), monday_at(10))
        service.cancel_session(session.id, tutor.id)

        assert service.create_session(draft_course.id, tutor.id, monday_at(9), monday_at(10)).id

    @pytest.mark.parametrize("status", [SessionStatus.CANCELLED, SessionStatus.COMPLETED])
    def test_terminal_sessions_cannot_be_cancelled(self, service, tutor, draft_course, db, status):
        session = add_session(db, draft_course, monday_at(9), monday_at(10), status=status)

        with pytest.raises(InvalidStateException):
            service.cancel_session(session.id, tutor.id)

    def test_active_enrollment_blocks_cancel(self, service, tutor, published_course, db):
        session = add_session(db, published_course, monday_at(9), monday_at(10))

        with pytest.raises(ActiveEnrollmentException) as exc_info:
            service.cancel_session(session.id, tutor.id)
        assert exc_info.value.details == {"course_id": published_course.id}
        db.refresh(session)
        assert session.status == SessionStatus.SCHEDULED

    def test_cancel_other_tutors_session(self, service, other_tutor, draft_course, db):
        session = add_session(db, draft_course, monday_at(9), monday_at(10))

        with pytest.raises(ForbiddenException):
            service.cancel_session(session.id, other_tutor.id)

    def test_cancel_missing_session(self, service, tutor):
        with pytest.raises(NotFoundException):
            service.cancel_session("01HZZZZZZZZZZZZZZZZZZZZZZZ", tutor.id)


class TestCompleteAndRead:
    def test_complete_in_progress_session(self, service, tutor, draft_course, db):
        session = add_session(
            db, draft_course, monday_at(9), monday_at(10), status=SessionStatus.IN_PROGRESS
        )

        assert service.complete_session(session.id, tutor.id).status == SessionStatus.COMPLETED

    def test_complete_requires_in_progress(self, service, tutor, draft_course, db):
        session = add_session(db, draft_course, monday_at(9), monday_at(10))

        with pytest.raises(InvalidStateException):
            service.complete_session(session.id, tutor.id)

    def test_get_session_not_found(self, service):
        with pytest.raises(NotFoundException):
            service.get_session("01HZZZZZZZZZZZZZZZZZZZZZZZ")

    def test_lists_by_course_and_tutor(self, service, tutor, other_tutor, draft_course, db):
        late = add_session(db, draft_course, monday_at(14), monday_at(15))
        early = add_session(db, draft_course, monday_at(9), monday_at(10))
        add_session(db, create_course(db, other_tutor), monday_at(9), monday_at(10))

        assert [s.id for s in service.list_sessions_by_course(draft_course.id)] == [
            early.id,
            late.id,
        ]
        assert {s.id for s in service.list_sessions_by_tutor(tutor.id)} == {early.id, late.id}


# Quarter-hour offsets from Monday 00:00 and lengths of 15 minutes to 3 hours
quarter_hour_intervals = st.lists(
    st.tuples(st.integers(min_value=0, max_value=95), st.integers(min_value=1, max_value=12)),
    min_size=1,
    max_size=10,
)


class TestNoDoubleBooking:
    @settings(
        max_examples=60,
        deadline=None,
        suppress_health_check=[HealthCheck.function_scoped_fixture],
    )
    @given(intervals=quarter_hour_intervals)
    def test_rejects_exactly_the_overlapping_intervals(
        self, service, tutor, draft_course, db, intervals
    ):
        db.query(ClassSession).delete()
        db.commit()
        db.expire_all()

        accepted = []
        for offset, length in intervals:
            start = monday_at(0) + timedelta(minutes=15 * offset)
            end = start + timedelta(minutes=15 * length)
            clashes = any(overlaps(start, end, s, e) for s, e in accepted)

            if clashes:
                with pytest.raises(SessionConflictException):
                    service.create_session(draft_course.id, tutor.id, start, end)
            else:
                service.create_session(draft_course.id, tutor.id, start, end)
                accepted.append((start, end))

        stored = (
            db.query(ClassSession)
            .filter(ClassSession.status != SessionStatus.CANCELLED)
            .order_by(ClassSession.start_time)
            .all()
        )
        assert [(s.start_time, s.end_time) for s in stored] == sorted(accepted)
        for i, first in enumerate(stored):
            for second in stored[i + 1 :]:
                assert not overlaps(
                    first.start_time, first.end_time, second.start_time, second.end_time
                )
