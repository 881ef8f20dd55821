"""Pure booking rules: date overlap, pricing and lifecycle status.

Nothing here touches the database. Services call these functions and decide
separately whether a changed value needs to be persisted.
"""
from __future__ import annotations

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

from ..models.booking import BookingStatus

CENTS = Decimal("0.01")
BLOCKING_STATUSES: tuple[BookingStatus, ...] = (BookingStatus.UPCOMING, BookingStatus.ACTIVE)


def ranges_overlap(start_a: date, end_a: date, start_b: date, end_b: date) -> bool:
    """Return True when two inclusive date ranges share at least one day."""

    return start_a <= end_b and start_b <= end_a


def duration_days(start_date: date, end_date: date) -> int:
    """Number of calendar days booked, counting both boundary days."""

    return (end_date - start_date).days + 1


def compute_total_cost(start_date: date, end_date: date, price_per_day: Decimal | int | float | str) -> Decimal:
    """Return the booking cost rounded half-up to cents."""

    rate = price_per_day if isinstance(price_per_day, Decimal) else Decimal(str(price_per_day))
    return (duration_days(start_date, end_date) * rate).quantize(CENTS, rounding=ROUND_HALF_UP)


def resolve_status(start_date: date, end_date: date, today: date) -> BookingStatus:
    """Derive the time-based status of a booking for the given day."""

    if isinstance(today, datetime):
        today = today.date()
    if today < start_date:
        return BookingStatus.UPCOMING
    if today > end_date:
        return BookingStatus.COMPLETED
    return BookingStatus.ACTIVE


def refreshed_status(
    current: BookingStatus,
    start_date: date,
    end_date: date,
    today: date,
) -> BookingStatus:
    """Return the status a stored booking should have today.

    Cancellation is terminal and is never replaced by a time-derived status.
    """

    if current == BookingStatus.CANCELLED:
        return current
    return resolve_status(start_date, end_date, today)
