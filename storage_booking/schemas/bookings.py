"""Schemas for booking creation, retrieval and cancellation."""
from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator, model_validator

from ..core.config import settings
from ..models.booking import BookingStatus
from .units import UnitSummary

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"


class BookingCreateRequest(BaseModel):
    user_name: str = Field(min_length=1, max_length=255)
    unit_id: int = Field(gt=0, strict=True)
    start_date: date
    end_date: date
    user_email: str | None = Field(default=None, max_length=255, pattern=EMAIL_PATTERN)
    notes: str | None = Field(default=None, max_length=1000)

    @field_validator("user_name", mode="before")
    @classmethod
    def _strip_user_name(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value

    @model_validator(mode="after")
    def _check_dates(self) -> "BookingCreateRequest":
        """Dates must be ordered, not in the past and within the allowed span."""

        if self.start_date >= self.end_date:
            raise ValueError("End date must be after start date")
        if self.start_date < datetime.now(timezone.utc).date():
            raise ValueError("Start date cannot be in the past")
        span = (self.end_date - self.start_date).days
        if span > settings.max_booking_days:
            raise ValueError(f"Booking period cannot exceed {settings.max_booking_days} days")
        return self


class BookingOut(BaseModel):
    id: int
    unit_id: int
    user_name: str
    user_email: str | None = None
    start_date: date
    end_date: date
    total_cost: Decimal
    status: BookingStatus
    notes: str | None = None
    created_at: datetime | None = None
    storage_unit: UnitSummary | None = None


class BookingSummary(BaseModel):
    booking_id: int
    user_name: str
    unit_name: str
    duration_days: int
    total_cost: Decimal
    status: BookingStatus


class BookingCreateResponse(BaseModel):
    message: str
    booking: BookingOut
    summary: BookingSummary


class BookingListSummary(BaseModel):
    total: int = 0
    upcoming: int = 0
    active: int = 0
    completed: int = 0
    cancelled: int = 0
    total_value: Decimal = Decimal("0.00")


class BookingListResponse(BaseModel):
    bookings: list[BookingOut]
    summary: BookingListSummary
    user: str


class BookingCancelResponse(BaseModel):
    message: str
    booking_id: int
    previous_status: BookingStatus
    new_status: BookingStatus
    booking: BookingOut
