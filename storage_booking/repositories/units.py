"""Data access helpers for storage units."""
from __future__ import annotations

from collections.abc import Awaitable, Callable
from decimal import Decimal
from typing import Protocol, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.storage_unit import StorageUnit

T = TypeVar("T")


async def get_by_id(session: AsyncSession, unit_id: int) -> StorageUnit | None:
    """Return a storage unit by identifier."""

    return await session.get(StorageUnit, unit_id)


async def get_for_update(session: AsyncSession, unit_id: int) -> StorageUnit | None:
    """Load a unit and hold a row lock on it until the transaction ends."""

    stmt = select(StorageUnit).where(StorageUnit.id == unit_id).with_for_update()
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def with_unit_lock(
    session: AsyncSession,
    unit_id: int,
    fn: Callable[[StorageUnit | None], Awaitable[T]],
) -> T:
    """Run ``fn`` inside one transaction while the unit row is locked.

    Every admission for a unit goes through this lock, so the conflict check and
    the insert that follows cannot interleave with another admission for the same
    unit. ``fn`` receives ``None`` when the unit does not exist. Exceptions raised
    by ``fn`` roll the transaction back.
    """

    async with session.begin():
        unit = await get_for_update(session, unit_id)
        return await fn(unit)


async def search_units(
    session: AsyncSession,
    *,
    filters: "UnitFiltersProtocol",
) -> list[StorageUnit]:
    """Return units matching the filters, available and cheapest first."""

    stmt = select(StorageUnit)

    if filters.location:
        stmt = stmt.where(StorageUnit.location.icontains(filters.location.strip(), autoescape=True))
    if filters.size:
        stmt = stmt.where(StorageUnit.size.icontains(filters.size.strip(), autoescape=True))
    if filters.available is not None:
        stmt = stmt.where(StorageUnit.is_available.is_(filters.available))
    if filters.min_price is not None:
        stmt = stmt.where(StorageUnit.price_per_day >= filters.min_price)
    if filters.max_price is not None:
        stmt = stmt.where(StorageUnit.price_per_day <= filters.max_price)

    stmt = stmt.order_by(
        StorageUnit.is_available.desc(),
        StorageUnit.price_per_day.asc(),
        StorageUnit.created_at.asc(),
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


class UnitFiltersProtocol(Protocol):
    """Search criteria accepted by ``search_units``; any unset field is ignored."""

    location: str | None
    size: str | None
    available: bool | None
    min_price: Decimal | None
    max_price: Decimal | None
