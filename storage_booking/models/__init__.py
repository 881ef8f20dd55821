"""Expose ORM models."""
from .booking import Booking, BookingStatus
from .storage_unit import StorageUnit

__all__ = [
    "Booking",
    "BookingStatus",
    "StorageUnit",
]
