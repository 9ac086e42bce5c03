import asyncio
import random
from decimal import Decimal

from faker import Faker
from sqlmodel import select

from app.db.database import async_session, init_db
from app.models.enums.listing_condition import ListingCondition
from app.models.enums.media_type import MediaType
from app.models.listing_media_model import ListingMedia
from app.models.listing_model import Listing
from app.models.university_model import University
from app.models.user_model import User

fake = Faker()

LISTINGS_PER_USER = 5
MAX_MEDIA_PER_LISTING = 3


async def seed_listings():
    await init_db()

    async with async_session() as session:
        result = await session.execute(select(User))
        users: list[User] = result.scalars().all()

        result = await session.execute(select(University))
        universities: list[University] = result.scalars().all()
        if not users or not universities:
            print("No users or universities found. Run the previous seeders first.")
            return

        listings_count = 0
        for user in users:
            existing = await session.execute(
                select(Listing.id).where(Listing.seller_id == user.id).limit(1)
            )
            if existing.first() is not None:
                print(f"User {user.email} already has listings. Skipping.")
                continue

            # students sell around their own campus
            university = random.choice(universities)

            for _ in range(LISTINGS_PER_USER):
                listing = Listing(
                    title=fake.sentence(nb_words=4).rstrip("."),
                    description=fake.paragraph(nb_sentences=3),
                    price=Decimal(random.randrange(10, 2000) * 1000),
                    condition=random.choice(list(ListingCondition)),
                    seller_id=user.id,
                    university_id=university.id,
                )
                session.add(listing)
                # flush so listing.id can be used by the media rows
                await session.flush()

                for order in range(random.randint(0, MAX_MEDIA_PER_LISTING)):
                    session.add(
                        ListingMedia(
                            listing_id=listing.id,
                            url=f"https://picsum.photos/seed/{listing.id}-{order}/600/400",
                            type=MediaType.IMAGE,
                            display_order=order,
                        )
                    )
                listings_count += 1

        await session.commit()
        print(f"Seeded {listings_count} listings")


if __name__ == "__main__":
    asyncio.run(seed_listings())
