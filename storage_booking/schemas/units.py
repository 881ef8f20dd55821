"""Schemas for storage unit browsing and availability."""
from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from ..models.booking import BookingStatus


class UnitFilters(BaseModel):
    location: str | None = Field(default=None)
    available: bool | None = Field(default=None)
    min_price: Decimal | None = Field(default=None, ge=0)
    max_price: Decimal | None = Field(default=None, ge=0)
    size: str | None = Field(default=None)


class UnitSummary(BaseModel):
    id: int
    name: str
    size: str
    location: str
    price_per_day: Decimal


class UnitOut(UnitSummary):
    is_available: bool
    description: str | None = None


class BookingWindow(BaseModel):
    booking_id: int
    start_date: date
    end_date: date
    status: BookingStatus


class UnitDetailResponse(UnitOut):
    bookings: list[BookingWindow] = Field(default_factory=list)


class UnitListMetadata(BaseModel):
    total: int
    available: int
    unavailable: int
    filters: UnitFilters


class UnitListResponse(BaseModel):
    units: list[UnitOut]
    metadata: UnitListMetadata


class DateRange(BaseModel):
    start_date: date
    end_date: date


class AvailabilityResponse(BaseModel):
    unit_id: int
    available: bool
    date_range: DateRange
    conflicts: list[BookingWindow] = Field(default_factory=list)
