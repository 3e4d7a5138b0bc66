"""
Live-room routes - API v1

Endpoints:
    POST /{session_id}/room-token → Join token for the session's live room
"""

import logging

from fastapi import APIRouter, Depends

from ...api.dependencies.auth import Principal, require_role
from ...api.dependencies.services import get_room_access_service
from ...core.enums import RoleName
from ...schemas.room import RoomAccessResponse
from ...services.room_access_service import RoomAccessService
from .common import run_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["rooms-v1"])


@router.post("/{session_id}/room-token", response_model=RoomAccessResponse)
async def authorize_room(
    session_id: str,
    principal: Principal = Depends(require_role(RoleName.TUTOR, RoleName.STUDENT)),
    service: RoomAccessService = Depends(get_room_access_service),
) -> RoomAccessResponse:
    """Return a LiveKit token when the caller may join right now."""
    result = await run_service(service.authorize_room, session_id, principal.id)
    return RoomAccessResponse(**result)
