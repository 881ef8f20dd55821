"""Checks on the SQL emitted by the repository helpers."""
from __future__ import annotations

from datetime import date
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql

from storage_booking.models.booking import BookingStatus
from storage_booking.repositories import bookings as bookings_repo
from storage_booking.repositories import units as units_repo


class RecordingSession:
    """Session stub that records executed statements."""

    def __init__(self, result: object = None) -> None:
        self.statements: list[object] = []
        self.result = result if result is not None else MagicMock()
        self.in_transaction = False

    async def execute(self, stmt):
        self.statements.append(stmt)
        return self.result

    def begin(self):  # noqa: D401 - mimic SQLAlchemy's async begin
        session = self

        class _Tx:
            async def __aenter__(self_inner):
                session.in_transaction = True
                return session

            async def __aexit__(self_inner, exc_type, exc, tb):
                session.in_transaction = False
                return False

        return _Tx()


def _sql(stmt) -> str:
    return str(stmt.compile(dialect=postgresql.dialect()))


@pytest.mark.asyncio
async def test_has_conflict_uses_inclusive_overlap():
    result = MagicMock()
    result.scalar_one.return_value = 1
    session = RecordingSession(result)

    conflict = await bookings_repo.has_conflict(
        session, unit_id=3, start_date=date(2024, 3, 1), end_date=date(2024, 3, 15)
    )

    assert conflict is True
    sql = _sql(session.statements[0])
    assert "bookings.start_date <= " in sql
    assert "bookings.end_date >= " in sql
    assert "bookings.status IN" in sql
    assert "bookings.id !=" not in sql

    params = session.statements[0].compile(dialect=postgresql.dialect()).params
    assert params["start_date_1"] == date(2024, 3, 15)
    assert params["end_date_1"] == date(2024, 3, 1)
    assert set(params["status_1"]) == {BookingStatus.UPCOMING, BookingStatus.ACTIVE}


@pytest.mark.asyncio
async def test_find_conflicts_can_exclude_a_booking():
    result = MagicMock()
    result.scalars.return_value.all.return_value = []
    session = RecordingSession(result)

    conflicts = await bookings_repo.find_conflicts(
        session,
        unit_id=3,
        start_date=date(2024, 3, 1),
        end_date=date(2024, 3, 15),
        exclude_booking_id=12,
    )

    assert conflicts == []
    assert "bookings.id != " in _sql(session.statements[0])


@pytest.mark.asyncio
async def test_with_unit_lock_selects_for_update_inside_transaction():
    unit = SimpleNamespace(id=1, price_per_day=Decimal("25.00"))
    result = MagicMock()
    result.scalar_one_or_none.return_value = unit
    session = RecordingSession(result)
    seen: list[tuple[object, bool]] = []

    async def work(locked_unit):
        seen.append((locked_unit, session.in_transaction))
        return "done"

    outcome = await units_repo.with_unit_lock(session, 1, work)

    assert outcome == "done"
    assert seen == [(unit, True)]
    assert "FOR UPDATE" in _sql(session.statements[0])


@pytest.mark.asyncio
async def test_search_units_applies_filters_and_ordering():
    result = MagicMock()
    result.scalars.return_value.all.return_value = []
    session = RecordingSession(result)
    filters = SimpleNamespace(
        location=" Downtown ",
        size="10x",
        available=True,
        min_price=Decimal("10"),
        max_price=Decimal("30"),
    )

    await units_repo.search_units(session, filters=filters)

    sql = _sql(session.statements[0])
    assert "storage_units.price_per_day >= " in sql
    assert "storage_units.price_per_day <= " in sql
    assert "storage_units.is_available IS true" in sql
    assert "ORDER BY storage_units.is_available DESC, storage_units.price_per_day ASC, storage_units.created_at ASC" in sql


@pytest.mark.asyncio
async def test_update_status_flushes_change():
    session = MagicMock()
    session.flush = AsyncMock()
    booking = SimpleNamespace(status=BookingStatus.UPCOMING)

    await bookings_repo.update_status(session, booking, BookingStatus.ACTIVE)

    assert booking.status is BookingStatus.ACTIVE
    session.add.assert_called_once_with(booking)
    session.flush.assert_awaited_once()
