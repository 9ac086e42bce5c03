import asyncio

from faker import Faker
from sqlmodel import select

from app.db.database import async_session, init_db
from app.models.user_model import User

fake = Faker("id_ID")
NUM_USERS = 10

DEFAULT_EMAIL = "seller@campus.test"


async def user_exists(session, email: str) -> bool:
    result = await session.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none() is not None


async def seed_users():
    await init_db()

    async with async_session() as session:
        users = []

        for _ in range(NUM_USERS):
            email = fake.unique.email()
            if await user_exists(session, email):
                print(f"User with email {email} already exists. Skipping.")
                continue

            user = User(
                name=fake.name(),
                email=email,
                phone_number=fake.phone_number(),
                bio=fake.sentence(nb_words=10),
            )
            users.append(user)
            session.add(user)

        # account used for manual testing
        if await user_exists(session, DEFAULT_EMAIL):
            print(f"Default user with email {DEFAULT_EMAIL} already exists. Skipping.")
        else:
            default_user = User(
                name="Campus Seller",
                email=DEFAULT_EMAIL,
                phone_number=fake.phone_number(),
            )
            users.append(default_user)
            session.add(default_user)

        await session.commit()
        print(f"Seeded {len(users)} users")


if __name__ == "__main__":
    asyncio.run(seed_users())
