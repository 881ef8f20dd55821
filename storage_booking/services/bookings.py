"""Booking admission, lookup and cancellation.

Admission runs under a row lock on the unit so the overlap check and the insert
form one atomic step. Reads re-derive each booking's status from today's date and
persist the value when it changed, which keeps statuses current without a
background scheduler.
"""
from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from ..core import booking_rules as rules
from ..core.errors import (
    AlreadyCancelledError,
    BookingConflictError,
    BookingNotFoundError,
    InvalidTransitionError,
    UnitNotFoundError,
    UnitUnavailableError,
)
from ..models.booking import Booking, BookingStatus
from ..models.storage_unit import StorageUnit
from ..repositories import bookings as bookings_repo
from ..repositories import units as units_repo
from ..schemas import bookings as schemas
from ..schemas.units import UnitSummary

logger = logging.getLogger(__name__)


def today() -> date:
    """Current calendar day in UTC."""

    return datetime.now(timezone.utc).date()


async def create_booking(
    session: AsyncSession,
    *,
    user_name: str,
    unit_id: int,
    start_date: date,
    end_date: date,
    user_email: str | None = None,
    notes: str | None = None,
) -> schemas.BookingCreateResponse:
    """Admit a booking if the unit is bookable and free for the whole range."""

    current_day = today()
    logger.info("Creating booking for user %s on unit %s", user_name, unit_id)

    async def _admit(unit: StorageUnit | None) -> Booking:
        if unit is None:
            raise UnitNotFoundError(unit_id=unit_id)
        if not unit.is_available:
            raise UnitUnavailableError(unit_id=unit_id, unit_name=unit.name)

        if await bookings_repo.has_conflict(
            session, unit_id=unit_id, start_date=start_date, end_date=end_date
        ):
            logger.info(
                "Rejected booking for unit %s: %s..%s overlaps an existing booking",
                unit_id,
                start_date,
                end_date,
            )
            raise BookingConflictError(
                unit_id=unit_id,
                date_range={"start_date": start_date, "end_date": end_date},
            )

        return await bookings_repo.create_booking(
            session,
            unit=unit,
            user_name=user_name,
            user_email=user_email,
            start_date=start_date,
            end_date=end_date,
            total_cost=rules.compute_total_cost(start_date, end_date, unit.price_per_day),
            status=rules.resolve_status(start_date, end_date, current_day),
            notes=notes,
        )

    booking = await units_repo.with_unit_lock(session, unit_id, _admit)
    logger.info("Booking %s created for unit %s", booking.id, unit_id)

    return schemas.BookingCreateResponse(
        message="Booking created successfully",
        booking=to_booking_out(booking),
        summary=schemas.BookingSummary(
            booking_id=booking.id,
            user_name=booking.user_name,
            unit_name=booking.storage_unit.name,
            duration_days=rules.duration_days(booking.start_date, booking.end_date),
            total_cost=booking.total_cost,
            status=booking.status,
        ),
    )


async def list_bookings_for_user(
    session: AsyncSession,
    *,
    user_name: str,
    status: BookingStatus | None = None,
) -> schemas.BookingListResponse:
    """Return a user's bookings, newest first, with statuses brought up to date."""

    current_day = today()

    async with session.begin():
        bookings = await bookings_repo.list_for_user(session, user_name=user_name)
        for booking in bookings:
            await refresh_status(session, booking, current_day)

    if status is not None:
        bookings = [booking for booking in bookings if booking.status == status]

    logger.info("Retrieved %d bookings for %s", len(bookings), user_name)
    return schemas.BookingListResponse(
        bookings=[to_booking_out(booking) for booking in bookings],
        summary=summarise(bookings),
        user=user_name,
    )


async def get_booking(session: AsyncSession, booking_id: int) -> schemas.BookingOut:
    """Return a booking with its status brought up to date."""

    async with session.begin():
        booking = await bookings_repo.get_by_id(session, booking_id)
        if booking is None:
            raise BookingNotFoundError(booking_id=booking_id)
        await refresh_status(session, booking, today())

    return to_booking_out(booking)


async def cancel_booking(session: AsyncSession, booking_id: int) -> schemas.BookingCancelResponse:
    """Move an upcoming or active booking to the terminal cancelled state."""

    async with session.begin():
        booking = await bookings_repo.get_by_id(session, booking_id, for_update=True)
        if booking is None:
            raise BookingNotFoundError(booking_id=booking_id)

        await refresh_status(session, booking, today())
        previous_status = booking.status
        if previous_status == BookingStatus.CANCELLED:
            raise AlreadyCancelledError(booking_id=booking_id, current_status=previous_status)
        if previous_status == BookingStatus.COMPLETED:
            raise InvalidTransitionError(booking_id=booking_id, current_status=previous_status)

        await bookings_repo.update_status(session, booking, BookingStatus.CANCELLED)

    logger.info("Booking %s cancelled (was %s)", booking_id, previous_status.value)
    return schemas.BookingCancelResponse(
        message="Booking cancelled successfully",
        booking_id=booking_id,
        previous_status=previous_status,
        new_status=BookingStatus.CANCELLED,
        booking=to_booking_out(booking),
    )


async def refresh_status(session: AsyncSession, booking: Booking, current_day: date) -> bool:
    """Persist the time-derived status when it differs from the stored one."""

    new_status = rules.refreshed_status(booking.status, booking.start_date, booking.end_date, current_day)
    if new_status == booking.status:
        return False

    logger.info("Updated booking %s status: %s -> %s", booking.id, booking.status.value, new_status.value)
    await bookings_repo.update_status(session, booking, new_status)
    return True


def summarise(bookings: list[Booking]) -> schemas.BookingListSummary:
    """Count bookings per status and total their value."""

    summary = schemas.BookingListSummary(total=len(bookings))
    total_value = Decimal("0.00")
    for booking in bookings:
        field = booking.status.value
        setattr(summary, field, getattr(summary, field) + 1)
        total_value += Decimal(booking.total_cost)
    summary.total_value = total_value
    return summary


def to_booking_out(booking: Booking) -> schemas.BookingOut:
    unit = booking.storage_unit
    return schemas.BookingOut(
        id=booking.id,
        unit_id=booking.unit_id,
        user_name=booking.user_name,
        user_email=booking.user_email,
        start_date=booking.start_date,
        end_date=booking.end_date,
        total_cost=booking.total_cost,
        status=booking.status,
        notes=booking.notes,
        created_at=booking.created_at,
        storage_unit=UnitSummary(
            id=unit.id,
            name=unit.name,
            size=unit.size,
            location=unit.location,
            price_per_day=unit.price_per_day,
        )
        if unit is not None
        else None,
    )
