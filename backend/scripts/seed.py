#!/usr/bin/env python3
"""Seed the database with a demo user and a sample perk catalogue.

Creates:
- One demo user (prints its API token for the authenticated routes)
- A handful of perks across several merchants and categories

Idempotent: users are matched by email, perks by (title, merchant); existing
rows are left alone.

Usage:
    cd backend
    alembic upgrade head
    python -m scripts.seed
"""

import asyncio
import logging
from typing import Dict, List, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from perkhub.database import async_session_factory, dispose_engine
from perkhub.models import Perk, User

logger = logging.getLogger("perkhub.seed")

DEMO_USER = {"name": "Demo Curator", "email": "demo@perkhub.local"}

SAMPLE_PERKS: List[Dict] = [
    {
        "title": "Free Coffee Upgrade",
        "merchant": "Bean There",
        "category": "food",
        "discount_percent": 0,
        "description": "Any size upgrade on hot or iced drinks, once per day.",
    },
    {
        "title": "20% off Cold Brew Subscription",
        "merchant": "Bean There",
        "category": "food",
        "discount_percent": 20,
        "description": "Applies to the first three months of a monthly subscription.",
    },
    {
        "title": "Laptop Accessories Sale",
        "merchant": "ACME",
        "category": "tech",
        "discount_percent": 15,
        "description": "Docks, chargers and sleeves. Excludes clearance items.",
    },
    {
        "title": "Coffee Grinder Discount",
        "merchant": "ACME",
        "category": "shopping",
        "discount_percent": 10,
        "description": None,
    },
    {
        "title": "Gym Day Pass",
        "merchant": "PulseFit",
        "category": "fitness",
        "discount_percent": 50,
        "description": "Half-price day passes at any PulseFit location.",
    },
    {
        "title": "Weekend Getaway Deal",
        "merchant": None,
        "category": "travel",
        "discount_percent": 25,
        "description": "Partner hotels, two-night minimum stay.",
    },
]


async def _get_or_create_user(session: AsyncSession) -> Tuple[User, bool]:
    result = await session.execute(select(User).where(User.email == DEMO_USER["email"]))
    user = result.scalar_one_or_none()
    if user is not None:
        return user, False
    user = User(**DEMO_USER)
    session.add(user)
    await session.flush()
    return user, True


async def seed() -> None:
    async with async_session_factory() as session:
        user, created = await _get_or_create_user(session)
        logger.info("%s user %s", "Created" if created else "Found", user.email)

        added = 0
        for data in SAMPLE_PERKS:
            exists = await session.execute(
                select(Perk.id).where(
                    Perk.title == data["title"],
                    Perk.merchant.is_(None) if data["merchant"] is None
                    else Perk.merchant == data["merchant"],
                )
            )
            if exists.first() is not None:
                continue
            session.add(Perk(**data, created_by=user))
            added += 1

        await session.commit()
        logger.info("Added %d perks (%d already present)", added, len(SAMPLE_PERKS) - added)
        print(f"Demo API token for {user.email}: {user.api_token}")

    await dispose_engine()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    asyncio.run(seed())
