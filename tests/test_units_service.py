"""Service-level tests for unit browsing and availability checks."""
from __future__ import annotations

from datetime import date
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from storage_booking.core.errors import UnitNotFoundError
from storage_booking.models.booking import BookingStatus
from storage_booking.repositories import bookings as bookings_repo
from storage_booking.repositories import units as units_repo
from storage_booking.schemas import units as schemas
from storage_booking.services import bookings as bookings_service
from storage_booking.services import units as units_service


class TxSession:
    """Session stub that only supports opening a transaction."""

    def __init__(self) -> None:
        self.begin_called = 0

    def begin(self):  # noqa: D401 - mimic SQLAlchemy's async begin
        session = self

        class _Tx:
            async def __aenter__(self_inner):
                session.begin_called += 1
                return session

            async def __aexit__(self_inner, exc_type, exc, tb):
                return False

        return _Tx()


@pytest.fixture(autouse=True)
def pinned_today(monkeypatch):
    monkeypatch.setattr(bookings_service, "today", lambda: date(2024, 2, 20))


@pytest.fixture
def update_status(monkeypatch):
    async def _apply(session, booking, status):
        booking.status = status

    update = AsyncMock(side_effect=_apply)
    monkeypatch.setattr(bookings_repo, "update_status", update)
    return update


def unit_stub(*, unit_id: int = 1, available: bool = True, price: str = "25.00") -> SimpleNamespace:
    return SimpleNamespace(
        id=unit_id,
        name=f"Unit {unit_id}",
        size="10x10 ft",
        location="Downtown",
        price_per_day=Decimal(price),
        is_available=available,
        description="Dry and secure.",
    )


def booking_stub(
    booking_id: int, start: date, end: date, status: BookingStatus = BookingStatus.UPCOMING
) -> SimpleNamespace:
    return SimpleNamespace(id=booking_id, start_date=start, end_date=end, status=status)


@pytest.mark.asyncio
async def test_list_units_reports_counts_and_filters(monkeypatch):
    units = [unit_stub(unit_id=1), unit_stub(unit_id=2, price="10.00"), unit_stub(unit_id=3, available=False)]
    search = AsyncMock(return_value=units)
    monkeypatch.setattr(units_repo, "search_units", search)
    filters = schemas.UnitFilters(location="down", max_price=Decimal("30"))

    response = await units_service.list_units(AsyncMock(), filters)

    assert [unit.id for unit in response.units] == [1, 2, 3]
    assert response.metadata.total == 3
    assert response.metadata.available == 2
    assert response.metadata.unavailable == 1
    assert response.metadata.filters.location == "down"
    assert search.await_args.kwargs["filters"] is filters


@pytest.mark.asyncio
async def test_get_unit_includes_holding_bookings(monkeypatch):
    monkeypatch.setattr(units_repo, "get_by_id", AsyncMock(return_value=unit_stub()))
    monkeypatch.setattr(
        bookings_repo,
        "list_blocking_for_unit",
        AsyncMock(return_value=[booking_stub(4, date(2024, 3, 1), date(2024, 3, 15))]),
    )

    response = await units_service.get_unit(TxSession(), 1)

    assert response.name == "Unit 1"
    assert response.bookings[0].booking_id == 4
    assert response.bookings[0].status is BookingStatus.UPCOMING


@pytest.mark.asyncio
async def test_get_unit_not_found(monkeypatch):
    monkeypatch.setattr(units_repo, "get_by_id", AsyncMock(return_value=None))

    with pytest.raises(UnitNotFoundError) as exc:
        await units_service.get_unit(TxSession(), 42)

    assert exc.value.status_code == 404


@pytest.mark.asyncio
async def test_availability_free_unit(monkeypatch):
    monkeypatch.setattr(units_repo, "get_by_id", AsyncMock(return_value=unit_stub()))
    monkeypatch.setattr(bookings_repo, "find_conflicts", AsyncMock(return_value=[]))

    response = await units_service.check_availability(TxSession(), 1, date(2024, 3, 1), date(2024, 3, 15))

    assert response.available is True
    assert response.conflicts == []
    assert response.date_range.start_date == date(2024, 3, 1)


@pytest.mark.asyncio
async def test_availability_lists_conflicts(monkeypatch):
    monkeypatch.setattr(units_repo, "get_by_id", AsyncMock(return_value=unit_stub()))
    find = AsyncMock(return_value=[booking_stub(9, date(2024, 3, 10), date(2024, 3, 20))])
    monkeypatch.setattr(bookings_repo, "find_conflicts", find)

    response = await units_service.check_availability(TxSession(), 1, date(2024, 3, 1), date(2024, 3, 15))

    assert response.available is False
    assert [conflict.booking_id for conflict in response.conflicts] == [9]
    assert find.await_args.kwargs == {
        "unit_id": 1,
        "start_date": date(2024, 3, 1),
        "end_date": date(2024, 3, 15),
    }


@pytest.mark.asyncio
async def test_availability_disabled_unit_without_conflicts(monkeypatch):
    monkeypatch.setattr(units_repo, "get_by_id", AsyncMock(return_value=unit_stub(available=False)))
    monkeypatch.setattr(bookings_repo, "find_conflicts", AsyncMock(return_value=[]))

    response = await units_service.check_availability(TxSession(), 1, date(2024, 3, 1), date(2024, 3, 15))

    assert response.available is False
    assert response.conflicts == []


@pytest.mark.asyncio
async def test_availability_unknown_unit(monkeypatch):
    monkeypatch.setattr(units_repo, "get_by_id", AsyncMock(return_value=None))

    with pytest.raises(UnitNotFoundError):
        await units_service.check_availability(TxSession(), 5, date(2024, 3, 1), date(2024, 3, 2))


@pytest.mark.asyncio
async def test_get_unit_drops_bookings_that_have_ended(monkeypatch, update_status):
    monkeypatch.setattr(bookings_service, "today", lambda: date(2024, 3, 20))
    monkeypatch.setattr(units_repo, "get_by_id", AsyncMock(return_value=unit_stub()))
    ended = booking_stub(4, date(2024, 3, 1), date(2024, 3, 13))
    running = booking_stub(5, date(2024, 3, 18), date(2024, 3, 25))
    monkeypatch.setattr(bookings_repo, "list_blocking_for_unit", AsyncMock(return_value=[ended, running]))
    session = TxSession()

    response = await units_service.get_unit(session, 1)

    assert [window.booking_id for window in response.bookings] == [5]
    assert response.bookings[0].status is BookingStatus.ACTIVE
    assert session.begin_called == 1
    update_status.assert_any_await(session, ended, BookingStatus.COMPLETED)
    update_status.assert_any_await(session, running, BookingStatus.ACTIVE)


@pytest.mark.asyncio
async def test_availability_ignores_stale_upcoming_booking(monkeypatch, update_status):
    monkeypatch.setattr(bookings_service, "today", lambda: date(2024, 3, 20))
    monkeypatch.setattr(units_repo, "get_by_id", AsyncMock(return_value=unit_stub()))
    stale = booking_stub(9, date(2024, 3, 1), date(2024, 3, 13))
    monkeypatch.setattr(bookings_repo, "find_conflicts", AsyncMock(return_value=[stale]))

    response = await units_service.check_availability(TxSession(), 1, date(2024, 3, 5), date(2024, 3, 10))

    assert response.available is True
    assert response.conflicts == []
    assert stale.status is BookingStatus.COMPLETED
    update_status.assert_awaited_once()
