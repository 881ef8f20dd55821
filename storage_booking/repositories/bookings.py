"""Booking persistence helpers."""
from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..core.booking_rules import BLOCKING_STATUSES
from ..models.booking import Booking, BookingStatus
from ..models.storage_unit import StorageUnit


def _overlapping(
    *,
    unit_id: int,
    start_date: date,
    end_date: date,
    exclude_booking_id: int | None,
):
    """Criteria for blocking bookings on the unit sharing a day with the range."""

    criteria = [
        Booking.unit_id == unit_id,
        Booking.status.in_(BLOCKING_STATUSES),
        Booking.start_date <= end_date,
        Booking.end_date >= start_date,
    ]
    if exclude_booking_id is not None:
        criteria.append(Booking.id != exclude_booking_id)
    return criteria


async def has_conflict(
    session: AsyncSession,
    *,
    unit_id: int,
    start_date: date,
    end_date: date,
    exclude_booking_id: int | None = None,
) -> bool:
    """Return True if an upcoming or active booking overlaps the range."""

    stmt: Select[tuple[int]] = select(func.count(Booking.id)).where(
        *_overlapping(
            unit_id=unit_id,
            start_date=start_date,
            end_date=end_date,
            exclude_booking_id=exclude_booking_id,
        )
    )
    count = await session.execute(stmt)
    return count.scalar_one() > 0


async def find_conflicts(
    session: AsyncSession,
    *,
    unit_id: int,
    start_date: date,
    end_date: date,
    exclude_booking_id: int | None = None,
) -> list[Booking]:
    """Return the overlapping upcoming or active bookings ordered by start date."""

    stmt = (
        select(Booking)
        .where(
            *_overlapping(
                unit_id=unit_id,
                start_date=start_date,
                end_date=end_date,
                exclude_booking_id=exclude_booking_id,
            )
        )
        .order_by(Booking.start_date.asc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def list_blocking_for_unit(session: AsyncSession, *, unit_id: int) -> list[Booking]:
    """Return upcoming and active bookings held against a unit."""

    stmt = (
        select(Booking)
        .where(Booking.unit_id == unit_id, Booking.status.in_(BLOCKING_STATUSES))
        .order_by(Booking.start_date.asc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def create_booking(
    session: AsyncSession,
    *,
    unit: StorageUnit,
    user_name: str,
    start_date: date,
    end_date: date,
    total_cost: Decimal,
    status: BookingStatus,
    user_email: str | None = None,
    notes: str | None = None,
) -> Booking:
    """Persist a new booking and return it."""

    booking = Booking(
        unit_id=unit.id,
        storage_unit=unit,
        user_name=user_name,
        user_email=user_email,
        start_date=start_date,
        end_date=end_date,
        total_cost=total_cost,
        status=status,
        notes=notes,
    )
    session.add(booking)
    await session.flush()
    return booking


async def get_by_id(
    session: AsyncSession,
    booking_id: int,
    *,
    for_update: bool = False,
) -> Booking | None:
    """Return a booking with its unit loaded, optionally locking the row."""

    stmt = select(Booking).options(selectinload(Booking.storage_unit)).where(Booking.id == booking_id)
    if for_update:
        stmt = stmt.with_for_update(of=Booking)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def list_for_user(session: AsyncSession, *, user_name: str) -> list[Booking]:
    """Return bookings whose user name contains ``user_name``, newest first."""

    stmt = (
        select(Booking)
        .options(selectinload(Booking.storage_unit))
        .where(Booking.user_name.icontains(user_name, autoescape=True))
        .order_by(Booking.created_at.desc(), Booking.id.desc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def update_status(session: AsyncSession, booking: Booking, status: BookingStatus) -> None:
    """Persist a new status for the booking."""

    booking.status = status
    session.add(booking)
    await session.flush()
