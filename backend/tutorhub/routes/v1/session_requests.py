"""
Session request routes - API v1

Tutor submissions for calendar changes on published courses,
under /api/v1/session-requests.

Endpoints:
    POST /reschedule      → Ask to move a session
    GET  /reschedule      → The caller's reschedule requests, newest first
    POST /add-session     → Ask to add a session
    GET  /add-session     → The caller's add-session requests, newest first
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, status

from ...api.dependencies.auth import Principal, require_tutor
from ...api.dependencies.services import get_session_request_service
from ...schemas.session_request import (
    AddSessionRequestCreate,
    AddSessionRequestResponse,
    RescheduleRequestCreate,
    RescheduleRequestResponse,
)
from ...services.session_request_service import SessionRequestService
from .common import run_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["session-requests-v1"])


@router.post(
    "/reschedule",
    response_model=RescheduleRequestResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_reschedule_request(
    payload: RescheduleRequestCreate,
    principal: Principal = Depends(require_tutor),
    service: SessionRequestService = Depends(get_session_request_service),
) -> RescheduleRequestResponse:
    request = await run_service(
        service.create_reschedule_request,
        principal.id,
        payload.session_id,
        payload.requested_start_time,
        payload.requested_end_time,
        payload.reason,
    )
    return RescheduleRequestResponse.model_validate(request)


@router.get("/reschedule", response_model=List[RescheduleRequestResponse])
async def list_reschedule_requests(
    principal: Principal = Depends(require_tutor),
    service: SessionRequestService = Depends(get_session_request_service),
) -> List[RescheduleRequestResponse]:
    requests = await run_service(service.list_reschedule_requests_for_tutor, principal.id)
    return [RescheduleRequestResponse.model_validate(r) for r in requests]


@router.post(
    "/add-session",
    response_model=AddSessionRequestResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_add_session_request(
    payload: AddSessionRequestCreate,
    principal: Principal = Depends(require_tutor),
    service: SessionRequestService = Depends(get_session_request_service),
) -> AddSessionRequestResponse:
    request = await run_service(
        service.create_add_session_request,
        principal.id,
        payload.course_id,
        payload.start_time,
        payload.end_time,
        payload.reason,
        payload.title,
        payload.description,
    )
    return AddSessionRequestResponse.model_validate(request)


@router.get("/add-session", response_model=List[AddSessionRequestResponse])
async def list_add_session_requests(
    principal: Principal = Depends(require_tutor),
    service: SessionRequestService = Depends(get_session_request_service),
) -> List[AddSessionRequestResponse]:
    requests = await run_service(service.list_add_session_requests_for_tutor, principal.id)
    return [AddSessionRequestResponse.model_validate(r) for r in requests]
