"""
Admin routes - API v1

Review queue for tutor session requests and manual booking fan-out,
under /api/v1/admin.

Endpoints:
    GET   /reschedule-requests                  → Pending reschedules, oldest first
    PATCH /reschedule-requests/{request_id}     → Approve or reject
    GET   /add-session-requests                 → Pending add-session requests, oldest first
    PATCH /add-session-requests/{request_id}    → Approve or reject
    POST  /courses/{course_id}/fan-out-bookings → Book active students into every session
"""

import logging
from typing import List

from fastapi import APIRouter, Depends

from ...api.dependencies.auth import Principal, require_admin
from ...api.dependencies.services import get_booking_service, get_session_request_service
from ...schemas.booking import FanOutResponse
from ...schemas.session_request import (
    AddSessionRequestResponse,
    RequestReview,
    RescheduleRequestResponse,
)
from ...services.booking_service import BookingService
from ...services.session_request_service import SessionRequestService
from .common import run_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["admin-session-requests-v1"])


@router.get("/reschedule-requests", response_model=List[RescheduleRequestResponse])
async def list_pending_reschedule_requests(
    principal: Principal = Depends(require_admin),
    service: SessionRequestService = Depends(get_session_request_service),
) -> List[RescheduleRequestResponse]:
    requests = await run_service(service.list_pending_reschedule_requests)
    return [RescheduleRequestResponse.model_validate(r) for r in requests]


@router.patch("/reschedule-requests/{request_id}", response_model=RescheduleRequestResponse)
async def review_reschedule_request(
    request_id: str,
    payload: RequestReview,
    principal: Principal = Depends(require_admin),
    service: SessionRequestService = Depends(get_session_request_service),
) -> RescheduleRequestResponse:
    request = await run_service(
        service.review_reschedule_request,
        request_id,
        principal.id,
        payload.status,
        payload.admin_note,
    )
    return RescheduleRequestResponse.model_validate(request)


@router.get("/add-session-requests", response_model=List[AddSessionRequestResponse])
async def list_pending_add_session_requests(
    principal: Principal = Depends(require_admin),
    service: SessionRequestService = Depends(get_session_request_service),
) -> List[AddSessionRequestResponse]:
    requests = await run_service(service.list_pending_add_session_requests)
    return [AddSessionRequestResponse.model_validate(r) for r in requests]


@router.patch("/add-session-requests/{request_id}", response_model=AddSessionRequestResponse)
async def review_add_session_request(
    request_id: str,
    payload: RequestReview,
    principal: Principal = Depends(require_admin),
    service: SessionRequestService = Depends(get_session_request_service),
) -> AddSessionRequestResponse:
    request = await run_service(
        service.review_add_session_request,
        request_id,
        principal.id,
        payload.status,
        payload.admin_note,
    )
    return AddSessionRequestResponse.model_validate(request)


@router.post("/courses/{course_id}/fan-out-bookings", response_model=FanOutResponse)
async def fan_out_bookings(
    course_id: str,
    principal: Principal = Depends(require_admin),
    service: BookingService = Depends(get_booking_service),
) -> FanOutResponse:
    created = await run_service(service.fan_out_bookings, course_id)
    return FanOutResponse(course_id=course_id, created=created)
