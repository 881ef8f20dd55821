"""Domain errors raised by the booking and unit services.

Every error is an ``HTTPException`` so FastAPI renders it directly, while callers
inside the service layer can still tell them apart by type.
"""
from __future__ import annotations

from datetime import date
import enum
from typing import Any

from fastapi import HTTPException, status


class BookingServiceError(HTTPException):
    """Base class carrying a stable error code and structured context."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "error"
    message: str = "Request could not be processed"

    def __init__(self, message: str | None = None, **context: Any) -> None:
        self.context = context
        detail: dict[str, Any] = {"error": message or self.message, "code": self.code}
        detail.update({key: _jsonable(value) for key, value in context.items()})
        super().__init__(status_code=self.status_code, detail=detail)


class UnitNotFoundError(BookingServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    message = "Storage unit not found"


class BookingNotFoundError(BookingServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    message = "Booking not found"


class UnitUnavailableError(BookingServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "unavailable"
    message = "Storage unit is not available for booking"


class BookingConflictError(BookingServiceError):
    status_code = status.HTTP_409_CONFLICT
    code = "conflict"
    message = "This unit is already booked for the selected dates"


class AlreadyCancelledError(BookingServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "already_cancelled"
    message = "Booking is already cancelled"


class InvalidTransitionError(BookingServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "invalid_transition"
    message = "Cannot cancel a completed booking"


def _jsonable(value: Any) -> Any:
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {key: _jsonable(item) for key, item in value.items()}
    if isinstance(value, enum.Enum):
        return value.value
    return value
