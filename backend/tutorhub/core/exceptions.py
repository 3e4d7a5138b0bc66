# backend/tutorhub/core/exceptions.py
"""
Domain-specific exceptions for the TutorHub scheduling core.

These exceptions provide clear, business-focused error messages
that can be caught and handled appropriately at the API layer.
Every kind maps to a stable HTTP status and ``code`` so clients can
branch on them (e.g. "slot no longer available" vs "outside your hours").
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status

HTTP_422_UNPROCESSABLE: int = getattr(status, "HTTP_422_UNPROCESSABLE_CONTENT", 422)


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        """Convert to an HTTPException carrying the stable error payload."""
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class ValidationException(DomainException):
    """Raised when business validation fails."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(
        self,
        message: str = "Resource not found",
        code: Optional[str] = "NOT_FOUND",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code, details)


class ConflictException(DomainException):
    """Raised when there's a conflict with existing data."""

    status_code = status.HTTP_409_CONFLICT


class BusinessRuleException(DomainException):
    """Raised when a business rule is violated."""

    status_code = HTTP_422_UNPROCESSABLE


class ForbiddenException(DomainException):
    """Raised when the caller does not own the resource."""

    status_code = status.HTTP_403_FORBIDDEN

    def __init__(
        self,
        message: str = "You do not have access to this resource",
        code: Optional[str] = "FORBIDDEN",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code, details)


class ServiceException(DomainException):
    """Raised when a service operation fails for infrastructure reasons."""

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "message": self.message or "An error occurred processing your request",
                "code": self.code,
                "details": self.details if self.details else {},
            },
        )


# Specific scheduling exceptions


class InvalidRangeException(ValidationException):
    """Raised when a time interval is malformed (start >= end, or in the past)."""

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="INVALID_RANGE", details=details)


class InvalidStateException(BusinessRuleException):
    """Raised when an operation is illegal for the current lifecycle phase."""

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="INVALID_STATE", details=details)


class SessionConflictException(ConflictException):
    """Raised when a session would overlap another session of the same tutor."""

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message
            or "This time slot overlaps with an existing session. Please choose a different time.",
            code="SESSION_CONFLICT",
            details=details or {},
        )


class BookingConflictException(ConflictException):
    """Raised when a student already holds a booking for the session."""

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message or "You have already booked this session",
            code="BOOKING_CONFLICT",
            details=details or {},
        )


class ActiveEnrollmentException(ConflictException):
    """Raised when a session cannot be cancelled because students are live on the course."""

    def __init__(self, course_id: str):
        super().__init__(
            message=(
                "Cannot cancel a session once students have enrolled. "
                "Use a Reschedule request for changes."
            ),
            code="ACTIVE_ENROLLMENT",
            details={"course_id": course_id},
        )


class OutsideAvailabilityException(BusinessRuleException):
    """Raised when a session falls outside the tutor's declared weekly availability."""

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="OUTSIDE_AVAILABILITY", details=details)


class CapacityExceededException(ConflictException):
    """Raised when a session has reached the course's maximum number of students."""

    def __init__(self, max_students: int, confirmed: int):
        super().__init__(
            message="Session is fully booked",
            code="CAPACITY_EXCEEDED",
            details={"max_students": max_students, "confirmed_bookings": confirmed},
        )


class TooEarlyException(BusinessRuleException):
    """Raised when a room is requested before the join window opens."""

    def __init__(self, minutes_remaining: int):
        super().__init__(
            message=(
                "You can join this session closer to the start time "
                f"({minutes_remaining} minutes remaining)."
            ),
            code="TOO_EARLY",
            details={"minutes_remaining": minutes_remaining},
        )


class TooLateException(BusinessRuleException):
    """Raised when a room is requested after the join window closed."""

    def __init__(self) -> None:
        super().__init__(message="This session has already ended.", code="TOO_LATE")


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    This exception is used when data access operations fail,
    such as database connection issues, query failures, or
    constraint violations.
    """
