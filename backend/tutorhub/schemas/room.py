"""Live-room access schemas."""

import datetime
from typing import Literal, Optional

from ._strict_base import StandardizedModel


class RoomParticipant(StandardizedModel):
    role: Literal["tutor", "student"]
    name: Optional[str] = None


class RoomSessionSummary(StandardizedModel):
    id: str
    title: Optional[str] = None
    start_time: datetime.datetime
    end_time: datetime.datetime
    status: str


class RoomAccessResponse(StandardizedModel):
    token: str
    url: str
    room_name: str
    participant: RoomParticipant
    session: RoomSessionSummary
