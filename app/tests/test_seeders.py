import importlib

import pytest
from sqlalchemy import func
from sqlmodel import select

from app.models.listing_model import Listing

listings_seeder = importlib.import_module("app.seeders.3_listings")


async def count_listings(session_factory) -> int:
    async with session_factory() as session:
        result = await session.execute(select(func.count()).select_from(Listing))
        return result.scalar_one()


@pytest.mark.asyncio
async def test_listings_seeder_runs_once_per_user(
    monkeypatch, session_factory, seller, buyer, university
):
    async def init_db():
        pass

    monkeypatch.setattr(listings_seeder, "async_session", session_factory)
    monkeypatch.setattr(listings_seeder, "init_db", init_db)

    await listings_seeder.seed_listings()
    seeded = await count_listings(session_factory)
    assert seeded == 2 * listings_seeder.LISTINGS_PER_USER

    await listings_seeder.seed_listings()
    assert await count_listings(session_factory) == seeded


@pytest.mark.asyncio
async def test_listings_seeder_skips_users_that_already_sell(
    monkeypatch, session_factory, seller, buyer, university, listing
):
    async def init_db():
        pass

    monkeypatch.setattr(listings_seeder, "async_session", session_factory)
    monkeypatch.setattr(listings_seeder, "init_db", init_db)

    await listings_seeder.seed_listings()

    async with session_factory() as session:
        result = await session.execute(
            select(func.count()).select_from(Listing).where(Listing.seller_id == seller.id)
        )
        assert result.scalar_one() == 1

        result = await session.execute(
            select(func.count()).select_from(Listing).where(Listing.seller_id == buyer.id)
        )
        assert result.scalar_one() == listings_seeder.LISTINGS_PER_USER
