"""RoomAccessService: live-class room gate.

Decides whether a caller may join the live room of a session right now,
assigns the session's stable room name on first join, flips the session to
IN_PROGRESS when the tutor arrives after the start, and asks the room-token
provider for a participant token.
"""

from __future__ import annotations

from datetime import timedelta
import logging
import math
from typing import Any, Optional, Union

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.exceptions import (
    ForbiddenException,
    NotFoundException,
    ServiceException,
    TooEarlyException,
    TooLateException,
)
from ..integrations.livekit_client import FakeLiveKitClient, LiveKitClient, LiveKitError
from ..models.session import SessionStatus
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)

TUTOR_ROLE = "tutor"
STUDENT_ROLE = "student"


def room_name_for(session_id: str) -> str:
    return f"session-{session_id}"


class RoomAccessService(BaseService):
    """Service layer for live-room access."""

    def __init__(
        self,
        db: Session,
        livekit_client: Union[LiveKitClient, FakeLiveKitClient],
    ) -> None:
        super().__init__(db)
        self.livekit_client = livekit_client
        self.session_repository = RepositoryFactory.create_session_repository(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)
        self.course_repository = RepositoryFactory.create_course_repository(db)

    @BaseService.measure_operation("authorize_room")
    def authorize_room(self, session_id: str, caller_id: str) -> dict[str, Any]:
        """Authorize a caller for the session's live room.

        The room is open from ``room_join_window_minutes`` before the start
        until the same margin after the end. The tutor always qualifies; a
        student needs a CONFIRMED booking.

        Raises:
            NotFoundException: session missing
            TooEarlyException: join window not open yet
            TooLateException: join window closed
            ForbiddenException: caller is neither the tutor nor a booked student
            ServiceException: the token provider failed
        """
        session = self.session_repository.get_with_details(session_id)
        if session is None:
            raise NotFoundException("Session not found")

        now = self._now()
        margin = timedelta(minutes=settings.room_join_window_minutes)
        opens_at = session.start_time - margin
        if now < opens_at:
            minutes_remaining = math.ceil((opens_at - now).total_seconds() / 60)
            raise TooEarlyException(minutes_remaining)
        if now > session.end_time + margin:
            raise TooLateException()

        participant_name: Optional[str]
        if session.tutor_id == caller_id:
            role = TUTOR_ROLE
            tutor = self.course_repository.get_tutor(caller_id)
            participant_name = (tutor.name if tutor else None) or "Tutor"
        else:
            if not self.booking_repository.has_confirmed_booking(session_id, caller_id):
                raise ForbiddenException("You need an active booking to join this session")
            role = STUDENT_ROLE
            student = self.course_repository.get_student(caller_id)
            participant_name = (student.name or student.email) if student else None

        with self.transaction():
            locked = self.session_repository.get_by_id(session_id, for_update=True)
            if not locked.meeting_url:
                locked.meeting_url = room_name_for(locked.id)
                self.logger.info("Assigned room %s to session %s", locked.meeting_url, locked.id)
            if (
                role == TUTOR_ROLE
                and locked.status == SessionStatus.SCHEDULED
                and now >= locked.start_time
            ):
                locked.start()
            self.session_repository.flush()
            session = locked

        room_name = session.meeting_url
        try:
            token = self.livekit_client.create_participant_token(
                room_name=room_name,
                identity=f"{role}-{caller_id}",
                name=participant_name,
                metadata={"session_id": session.id, "role": role},
                can_publish=True,
                ttl_seconds=settings.room_token_ttl_seconds,
            )
            url = self.livekit_client.websocket_url
        except LiveKitError as e:
            logger.error(
                "LiveKit token generation failed for session %s caller %s: %s",
                session_id,
                caller_id,
                e.message,
            )
            raise ServiceException(f"Live room token generation failed: {e.message}")

        prometheus_metrics.inc_room_token_issued(role)
        self.log_operation("authorize_room", session_id=session_id, role=role)

        return {
            "token": token,
            "url": url,
            "room_name": room_name,
            "participant": {"role": role, "name": participant_name},
            "session": {
                "id": session.id,
                "title": session.title or (session.course.title if session.course else None),
                "start_time": session.start_time,
                "end_time": session.end_time,
                "status": SessionStatus(session.status).value,
            },
        }
