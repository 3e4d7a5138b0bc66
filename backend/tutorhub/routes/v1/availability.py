"""
Availability routes - API v1

Tutor weekly availability windows under /api/v1/sessions/availability.

Endpoints:
    POST   /               → Add a window
    GET    /               → List the caller's active windows
    DELETE /{window_id}    → Remove one of the caller's windows
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, status

from ...api.dependencies.auth import Principal, require_tutor
from ...api.dependencies.services import get_availability_service
from ...schemas.availability import AvailabilityCreate, AvailabilityResponse
from ...services.availability_service import AvailabilityService
from .common import run_service

logger = logging.getLogger(__name__)

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["availability-v1"])


@router.post("", response_model=AvailabilityResponse, status_code=status.HTTP_201_CREATED)
async def create_availability(
    payload: AvailabilityCreate,
    principal: Principal = Depends(require_tutor),
    service: AvailabilityService = Depends(get_availability_service),
) -> AvailabilityResponse:
    window = await run_service(
        service.create_availability,
        principal.id,
        payload.day_of_week,
        payload.start_time,
        payload.end_time,
    )
    return AvailabilityResponse.model_validate(window)


@router.get("", response_model=List[AvailabilityResponse])
async def list_availability(
    principal: Principal = Depends(require_tutor),
    service: AvailabilityService = Depends(get_availability_service),
) -> List[AvailabilityResponse]:
    windows = await run_service(service.list_active, principal.id)
    return [AvailabilityResponse.model_validate(w) for w in windows]


@router.delete("/{window_id}", response_model=AvailabilityResponse)
async def delete_availability(
    window_id: str,
    principal: Principal = Depends(require_tutor),
    service: AvailabilityService = Depends(get_availability_service),
) -> AvailabilityResponse:
    window = await run_service(service.delete_availability, window_id, principal.id)
    return AvailabilityResponse.model_validate(window)
