"""Business logic for browsing units and checking availability."""
from __future__ import annotations

from datetime import date
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from ..core import booking_rules as rules
from ..core.errors import UnitNotFoundError
from ..models.booking import Booking
from ..models.storage_unit import StorageUnit
from ..repositories import bookings as bookings_repo
from ..repositories import units as units_repo
from ..schemas import units as schemas
from . import bookings as bookings_service

logger = logging.getLogger(__name__)


async def list_units(session: AsyncSession, filters: schemas.UnitFilters) -> schemas.UnitListResponse:
    """Search units by filters, available and cheapest first."""

    units = await units_repo.search_units(session, filters=filters)
    available = sum(1 for unit in units if unit.is_available)
    logger.info("Retrieved %d storage units", len(units))

    return schemas.UnitListResponse(
        units=[_to_unit_out(unit) for unit in units],
        metadata=schemas.UnitListMetadata(
            total=len(units),
            available=available,
            unavailable=len(units) - available,
            filters=filters,
        ),
    )


async def get_unit(session: AsyncSession, unit_id: int) -> schemas.UnitDetailResponse:
    """Return a unit together with the bookings currently holding it."""

    async with session.begin():
        unit = await units_repo.get_by_id(session, unit_id)
        if unit is None:
            raise UnitNotFoundError(unit_id=unit_id)

        held = await _still_blocking(
            session, await bookings_repo.list_blocking_for_unit(session, unit_id=unit_id)
        )

    base = _to_unit_out(unit)
    return schemas.UnitDetailResponse(
        **base.model_dump(),
        bookings=[_to_window(booking) for booking in held],
    )


async def check_availability(
    session: AsyncSession,
    unit_id: int,
    start_date: date,
    end_date: date,
) -> schemas.AvailabilityResponse:
    """Report whether the unit can be booked for the inclusive range.

    A unit switched off administratively is never available, even without
    overlapping bookings. Stored statuses are refreshed first, so a booking
    that has since ended never counts as a conflict.
    """

    async with session.begin():
        unit = await units_repo.get_by_id(session, unit_id)
        if unit is None:
            raise UnitNotFoundError(unit_id=unit_id)

        conflicts = await _still_blocking(
            session,
            await bookings_repo.find_conflicts(
                session, unit_id=unit_id, start_date=start_date, end_date=end_date
            ),
        )

    return schemas.AvailabilityResponse(
        unit_id=unit_id,
        available=unit.is_available and not conflicts,
        date_range=schemas.DateRange(start_date=start_date, end_date=end_date),
        conflicts=[_to_window(booking) for booking in conflicts],
    )


async def _still_blocking(session: AsyncSession, bookings: list[Booking]) -> list[Booking]:
    current_day = bookings_service.today()
    for booking in bookings:
        await bookings_service.refresh_status(session, booking, current_day)
    return [booking for booking in bookings if booking.status in rules.BLOCKING_STATUSES]


def _to_unit_out(unit: StorageUnit) -> schemas.UnitOut:
    return schemas.UnitOut(
        id=unit.id,
        name=unit.name,
        size=unit.size,
        location=unit.location,
        price_per_day=unit.price_per_day,
        is_available=unit.is_available,
        description=unit.description,
    )


def _to_window(booking: Booking) -> schemas.BookingWindow:
    return schemas.BookingWindow(
        booking_id=booking.id,
        start_date=booking.start_date,
        end_date=booking.end_date,
        status=booking.status,
    )
