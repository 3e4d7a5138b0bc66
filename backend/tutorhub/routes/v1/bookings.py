"""
Bookings routes - API v1

Student seat endpoints under /api/v1/sessions.
All business logic delegated to BookingService.

Endpoints:
    POST   /{session_id}/book          → Book a seat (student)
    GET    /bookings                   → The caller's bookings, newest first (student)
    DELETE /bookings/{booking_id}      → Cancel one of the caller's bookings (student)
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, status

from ...api.dependencies.auth import Principal, require_student
from ...api.dependencies.services import get_booking_service
from ...schemas.booking import BookingResponse, StudentBookingResponse
from ...services.booking_service import BookingService
from .common import run_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["bookings-v1"])


@router.get("/bookings", response_model=List[StudentBookingResponse])
async def list_student_bookings(
    principal: Principal = Depends(require_student),
    service: BookingService = Depends(get_booking_service),
) -> List[StudentBookingResponse]:
    bookings = await run_service(service.list_student_bookings, principal.id)
    return [StudentBookingResponse.model_validate(b) for b in bookings]


@router.delete("/bookings/{booking_id}", response_model=BookingResponse)
async def cancel_booking(
    booking_id: str,
    principal: Principal = Depends(require_student),
    service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    booking = await run_service(service.cancel_booking, booking_id, principal.id)
    return BookingResponse.model_validate(booking)


@router.post(
    "/{session_id}/book",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
)
async def book_session(
    session_id: str,
    principal: Principal = Depends(require_student),
    service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    booking = await run_service(service.book_session, session_id, principal.id)
    return BookingResponse.model_validate(booking)
