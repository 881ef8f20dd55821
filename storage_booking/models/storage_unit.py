"""Storage unit model."""
from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, CheckConstraint, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin

if TYPE_CHECKING:
    from .booking import Booking


class StorageUnit(TimestampMixin, Base):
    """Rentable storage space priced per day."""

    __tablename__ = "storage_units"
    __table_args__ = (
        CheckConstraint("price_per_day >= 0", name="ck_storage_units_price_non_negative"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    size: Mapped[str] = mapped_column(String(50), nullable=False)
    location: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    price_per_day: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, index=True)
    is_available: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text)

    bookings: Mapped[list["Booking"]] = relationship(
        "Booking", back_populates="storage_unit", passive_deletes="all"
    )
