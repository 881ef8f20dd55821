"""Booking model."""
from __future__ import annotations

from datetime import date
from decimal import Decimal
import enum
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Date, Enum, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

if TYPE_CHECKING:
    from .storage_unit import StorageUnit

from .base import Base, TimestampMixin


class BookingStatus(str, enum.Enum):
    UPCOMING = "upcoming"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Booking(TimestampMixin, Base):
    """Reservation of one unit for an inclusive date range."""

    __tablename__ = "bookings"
    __table_args__ = (
        CheckConstraint("start_date < end_date", name="ck_bookings_dates_ordered"),
        CheckConstraint("total_cost >= 0", name="ck_bookings_cost_non_negative"),
        Index("ix_bookings_date_range", "start_date", "end_date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    unit_id: Mapped[int] = mapped_column(
        ForeignKey("storage_units.id", ondelete="RESTRICT", onupdate="CASCADE"), nullable=False, index=True
    )
    user_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    user_email: Mapped[str | None] = mapped_column(String(255))
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    total_cost: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0.00"), nullable=False)
    status: Mapped[BookingStatus] = mapped_column(
        Enum(BookingStatus, name="booking_status", values_callable=lambda e: [item.value for item in e]),
        default=BookingStatus.UPCOMING,
        nullable=False,
        index=True,
    )
    notes: Mapped[str | None] = mapped_column(Text)

    storage_unit: Mapped["StorageUnit"] = relationship("StorageUnit", back_populates="bookings")
