import asyncio

from sqlmodel import select

from app.db.database import async_session, init_db
from app.models.university_model import University

UNIVERSITIES = [
    ("Universitas Indonesia", "ui"),
    ("Institut Teknologi Bandung", "itb"),
    ("Universitas Gadjah Mada", "ugm"),
    ("Institut Teknologi Sepuluh Nopember", "its"),
    ("Universitas Airlangga", "unair"),
    ("Universitas Brawijaya", "ub"),
]


async def seed_universities():
    await init_db()

    async with async_session() as session:
        created = 0
        for name, slug in UNIVERSITIES:
            result = await session.execute(
                select(University).where(University.slug == slug)
            )
            if result.scalar_one_or_none():
                print(f"University '{slug}' already exists. Skipping.")
                continue

            session.add(University(name=name, slug=slug))
            created += 1

        await session.commit()
        print(f"Seeded {created} universities")


if __name__ == "__main__":
    asyncio.run(seed_universities())
