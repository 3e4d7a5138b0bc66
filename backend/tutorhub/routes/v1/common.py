"""
Helpers shared by the v1 routers.

Routes stay thin: each one runs a single sync service call in a worker
thread and converts domain exceptions to HTTP errors.
"""

import asyncio
import logging
from typing import Any, Callable, NoReturn, TypeVar

from fastapi import HTTPException, status

from ...core.exceptions import DomainException

logger = logging.getLogger(__name__)

T = TypeVar("T")


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


async def run_service(func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Run a sync service method off the event loop, mapping domain errors."""
    try:
        return await asyncio.to_thread(func, *args, **kwargs)
    except DomainException as exc:
        handle_domain_exception(exc)
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Unexpected error in %s: %s", getattr(func, "__name__", func), e, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred processing your request",
        )
