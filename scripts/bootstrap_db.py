"""Create database schema and seed sample storage units for development."""
from __future__ import annotations

import asyncio
from decimal import Decimal

from sqlalchemy import func, select

from storage_booking.db.session import SessionLocal, engine
from storage_booking.models.base import Base
from storage_booking.models import StorageUnit

UNITS = [
	{
		"name": "Small Storage Unit A1",
		"size": "5x5 ft",
		"location": "Downtown",
		"price_per_day": Decimal("15.00"),
		"is_available": True,
		"description": "Perfect for storing seasonal items, documents, and small furniture pieces.",
	},
	{
		"name": "Medium Storage Unit B2",
		"size": "10x10 ft",
		"location": "Downtown",
		"price_per_day": Decimal("25.00"),
		"is_available": True,
		"description": "Ideal for apartment contents, business inventory, and medium-sized furniture.",
	},
	{
		"name": "Large Storage Unit C3",
		"size": "10x20 ft",
		"location": "Midtown",
		"price_per_day": Decimal("40.00"),
		"is_available": True,
		"description": "Great for house contents, vehicles, and large business inventory.",
	},
	{
		"name": "Extra Large Unit D4",
		"size": "20x20 ft",
		"location": "Uptown",
		"price_per_day": Decimal("60.00"),
		"is_available": True,
		"description": "Perfect for commercial use, multiple vehicles, or large household moves.",
	},
	{
		"name": "Small Storage Unit A5",
		"size": "5x5 ft",
		"location": "Midtown",
		"price_per_day": Decimal("12.00"),
		"is_available": True,
		"description": "Compact and affordable option for personal belongings and documents.",
	},
	{
		"name": "Medium Storage Unit B6",
		"size": "10x10 ft",
		"location": "Uptown",
		"price_per_day": Decimal("28.00"),
		"is_available": True,
		"description": "Climate-controlled unit perfect for sensitive items and electronics.",
	},
	{
		"name": "Compact Unit E7",
		"size": "5x8 ft",
		"location": "Downtown",
		"price_per_day": Decimal("18.00"),
		"is_available": True,
		"description": "Narrow but deep unit, great for storing long items like skis or artwork.",
	},
	{
		"name": "Standard Unit F8",
		"size": "8x10 ft",
		"location": "Midtown",
		"price_per_day": Decimal("22.00"),
		"is_available": True,
		"description": "Popular size for studio apartment contents and small business needs.",
	},
	{
		"name": "Premium Unit G9",
		"size": "15x15 ft",
		"location": "Uptown",
		"price_per_day": Decimal("45.00"),
		"is_available": False,
		"description": "Premium climate-controlled unit with enhanced security features.",
	},
	{
		"name": "Economy Unit H10",
		"size": "5x5 ft",
		"location": "Downtown",
		"price_per_day": Decimal("10.00"),
		"is_available": True,
		"description": "Budget-friendly option for basic storage needs and seasonal items.",
	},
]


async def create_schema() -> None:
	"""Create the database schema if it does not already exist."""

	async with engine.begin() as conn:
		await conn.run_sync(Base.metadata.create_all)


async def seed_units() -> int:
	"""Insert demo units when the table is empty and return how many were added."""

	async with SessionLocal() as session:
		async with session.begin():
			existing = (await session.execute(select(func.count(StorageUnit.id)))).scalar_one()
			if existing:
				print(f"Database already contains {existing} storage units.")
				return 0

			for unit_data in UNITS:
				session.add(StorageUnit(**unit_data))
	return len(UNITS)


async def main() -> None:
	await create_schema()
	created = await seed_units()
	await engine.dispose()
	print(f"Database schema ensured and {created} demo units seeded.")


if __name__ == "__main__":
	asyncio.run(main())
