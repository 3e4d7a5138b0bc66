"""
Sessions routes - API v1

Tutor calendar endpoints under /api/v1/sessions.
All business logic delegated to SessionService and SlotSuggestionService.

Endpoints:
    POST   /                          → Schedule a session on a draft course (tutor)
    GET    /tutor                     → The caller's sessions (tutor)
    GET    /suggested-slots           → Free slots inside the caller's availability (tutor)
    GET    /course/{course_id}        → Sessions of a course (public)
    GET    /{session_id}              → One session (authenticated)
    POST   /{session_id}/duplicate    → Copy a session to new times (tutor)
    POST   /{session_id}/complete     → Mark an in-progress session completed (tutor)
    DELETE /{session_id}              → Cancel a session and its bookings (tutor)
"""

from datetime import datetime
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from ...api.dependencies.auth import Principal, get_current_principal, require_tutor
from ...api.dependencies.services import get_session_service, get_slot_suggestion_service
from ...core.config import settings
from ...schemas.session import (
    SessionCreate,
    SessionDetailResponse,
    SessionDuplicate,
    SessionResponse,
    SuggestedSlot,
    SuggestedSlotsResponse,
    TutorSessionResponse,
)
from ...services.session_service import SessionService
from ...services.slot_suggestion_service import SlotSuggestionService
from .common import run_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["sessions-v1"])


@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def create_session(
    payload: SessionCreate,
    principal: Principal = Depends(require_tutor),
    service: SessionService = Depends(get_session_service),
) -> SessionResponse:
    session = await run_service(
        service.create_session,
        payload.course_id,
        principal.id,
        payload.start_time,
        payload.end_time,
        payload.title,
        payload.description,
    )
    return SessionResponse.model_validate(session)


@router.get("/tutor", response_model=List[TutorSessionResponse])
async def list_sessions_by_tutor(
    principal: Principal = Depends(require_tutor),
    service: SessionService = Depends(get_session_service),
) -> List[TutorSessionResponse]:
    sessions = await run_service(service.list_sessions_by_tutor, principal.id)
    return [TutorSessionResponse.model_validate(s) for s in sessions]


@router.get("/suggested-slots", response_model=SuggestedSlotsResponse)
async def suggest_slots(
    course_id: str = Query(...),
    range_start: datetime = Query(..., description="Start of the search range (ISO-8601)"),
    range_end: datetime = Query(..., description="End of the search range (ISO-8601)"),
    duration_minutes: int = Query(60, ge=1, le=24 * 60),
    max_results: Optional[int] = Query(None, ge=1, le=500),
    principal: Principal = Depends(require_tutor),
    service: SlotSuggestionService = Depends(get_slot_suggestion_service),
) -> SuggestedSlotsResponse:
    """Suggest free slots; an empty list means nothing fits."""
    slots = await run_service(
        service.suggest_slots,
        principal.id,
        course_id,
        range_start,
        range_end,
        duration_minutes,
        max_results or settings.max_suggested_slots,
    )
    return SuggestedSlotsResponse(
        slots=[SuggestedSlot(**slot) for slot in slots],
        duration_minutes=duration_minutes,
    )


@router.get("/course/{course_id}", response_model=List[SessionDetailResponse])
async def list_sessions_by_course(
    course_id: str,
    service: SessionService = Depends(get_session_service),
) -> List[SessionDetailResponse]:
    sessions = await run_service(service.list_sessions_by_course, course_id)
    return [SessionDetailResponse.model_validate(s) for s in sessions]


@router.get("/{session_id}", response_model=SessionDetailResponse)
async def get_session(
    session_id: str,
    principal: Principal = Depends(get_current_principal),
    service: SessionService = Depends(get_session_service),
) -> SessionDetailResponse:
    session = await run_service(service.get_session, session_id)
    return SessionDetailResponse.model_validate(session)


@router.post(
    "/{session_id}/duplicate",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def duplicate_session(
    session_id: str,
    payload: SessionDuplicate,
    principal: Principal = Depends(require_tutor),
    service: SessionService = Depends(get_session_service),
) -> SessionResponse:
    session = await run_service(
        service.duplicate_session,
        session_id,
        principal.id,
        payload.start_time,
        payload.end_time,
    )
    return SessionResponse.model_validate(session)


@router.post("/{session_id}/complete", response_model=SessionResponse)
async def complete_session(
    session_id: str,
    principal: Principal = Depends(require_tutor),
    service: SessionService = Depends(get_session_service),
) -> SessionResponse:
    session = await run_service(service.complete_session, session_id, principal.id)
    return SessionResponse.model_validate(session)


@router.delete("/{session_id}", response_model=SessionResponse)
async def cancel_session(
    session_id: str,
    principal: Principal = Depends(require_tutor),
    service: SessionService = Depends(get_session_service),
) -> SessionResponse:
    session = await run_service(service.cancel_session, session_id, principal.id)
    return SessionResponse.model_validate(session)
