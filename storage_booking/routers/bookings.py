"""Booking endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.session import get_session
from ..models.booking import BookingStatus
from ..schemas import bookings as bookings_schema
from ..services import bookings as bookings_service

router = APIRouter()


@router.post("", response_model=bookings_schema.BookingCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    payload: bookings_schema.BookingCreateRequest,
    session: AsyncSession = Depends(get_session),
) -> bookings_schema.BookingCreateResponse:
    """Reserve a unit for the requested dates."""

    return await bookings_service.create_booking(
        session,
        user_name=payload.user_name,
        unit_id=payload.unit_id,
        start_date=payload.start_date,
        end_date=payload.end_date,
        user_email=payload.user_email,
        notes=payload.notes,
    )


@router.get("", response_model=bookings_schema.BookingListResponse)
async def list_bookings(
    user_name: str = Query(...),
    booking_status: BookingStatus | None = Query(default=None, alias="status"),
    session: AsyncSession = Depends(get_session),
) -> bookings_schema.BookingListResponse:
    """Return bookings made under the given user name."""

    user_name = user_name.strip()
    if not user_name:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="user_name must be a non-empty string")
    if len(user_name) > 255:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="user_name must be at most 255 characters")

    return await bookings_service.list_bookings_for_user(session, user_name=user_name, status=booking_status)


@router.get("/{booking_id}", response_model=bookings_schema.BookingOut)
async def get_booking(
    booking_id: int = Path(gt=0),
    session: AsyncSession = Depends(get_session),
) -> bookings_schema.BookingOut:
    """Return a single booking."""

    return await bookings_service.get_booking(session, booking_id)


@router.put("/{booking_id}/cancel", response_model=bookings_schema.BookingCancelResponse)
async def cancel_booking(
    booking_id: int = Path(gt=0),
    session: AsyncSession = Depends(get_session),
) -> bookings_schema.BookingCancelResponse:
    """Cancel an upcoming or active booking."""

    return await bookings_service.cancel_booking(session, booking_id)
