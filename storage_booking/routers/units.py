"""Storage unit browsing endpoints."""
from __future__ import annotations

from datetime import date
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.session import get_session
from ..schemas import units as units_schema
from ..services import units as units_service

router = APIRouter()


@router.get("", response_model=units_schema.UnitListResponse)
async def list_units(
    location: str | None = None,
    available: bool | None = None,
    min_price: Decimal | None = Query(default=None, ge=0),
    max_price: Decimal | None = Query(default=None, ge=0),
    size: str | None = None,
    session: AsyncSession = Depends(get_session),
) -> units_schema.UnitListResponse:
    """Return units matching the optional filters."""

    filters = units_schema.UnitFilters(
        location=location,
        available=available,
        min_price=min_price,
        max_price=max_price,
        size=size,
    )
    return await units_service.list_units(session, filters)


@router.get("/{unit_id}", response_model=units_schema.UnitDetailResponse)
async def get_unit(
    unit_id: int = Path(gt=0),
    session: AsyncSession = Depends(get_session),
) -> units_schema.UnitDetailResponse:
    """Return a unit and the bookings currently holding it."""

    return await units_service.get_unit(session, unit_id)


@router.get("/{unit_id}/availability", response_model=units_schema.AvailabilityResponse)
async def check_availability(
    unit_id: int = Path(gt=0),
    start_date: date = Query(...),
    end_date: date = Query(...),
    session: AsyncSession = Depends(get_session),
) -> units_schema.AvailabilityResponse:
    """Check whether the unit is free for the inclusive date range."""

    if start_date >= end_date:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="End date must be after start date")

    return await units_service.check_availability(session, unit_id, start_date, end_date)
