from typing import Optional

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.api.dependencies import get_async_session, get_user
from app.models.user_model import User
from app.schemas.user_schema import UserRegister
from app.services.user.exceptions import (
    UserAlreadyExists,
    UserEmailNotFound,
    UserNotAuthenticated,
    UserNotFound,
)


class UserService:
    def __init__(self, session: AsyncSession, user_metadata: Optional[dict]) -> None:
        self.session = session

        # claims of the verified identity token
        self.user_metadata = user_metadata
        if not self.user_metadata:
            raise UserNotAuthenticated("User not authenticated.")

    async def get_user_by_email(self, email: Optional[str] = None) -> User:
        if not email:
            raise UserEmailNotFound("User email not found in metadata.")

        result = await self.session.execute(select(User).where(User.email == email))
        db_user = result.scalars().one_or_none()
        if not db_user:
            raise UserNotFound("User not found in the database.")

        return db_user

    async def get_current_user(self) -> User:
        """Retrieve the user using the email stored in the token claims."""
        return await self.get_user_by_email(self.user_metadata.get("email"))

    async def register_current_user(self, data: UserRegister) -> User:
        """
        Creates the account for the owner of the current token.

        :param data: Profile fields supplied by the client.
        :return: The new user.
        :raises UserAlreadyExists: If the token's email is already registered.
        """
        email = self.user_metadata.get("email")
        if not email:
            raise UserEmailNotFound("User email not found in metadata.")

        existing = await self.session.execute(select(User).where(User.email == email))
        if existing.scalars().one_or_none() is not None:
            raise UserAlreadyExists(f"User '{email}' is already registered.")

        new_user = User(
            name=data.name,
            email=email,
            image=self.user_metadata.get("picture"),
            phone_number=data.phone_number,
            bio=data.bio,
        )
        self.session.add(new_user)
        await self.session.commit()
        await self.session.refresh(new_user)
        return new_user

    @classmethod
    async def get_dependency(
        cls,
        session: AsyncSession = Depends(get_async_session),
        user: Optional[dict] = Depends(get_user),
    ) -> "UserService":
        return cls(session, user)
