import os

os.environ["TESTING"] = "1"
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("GOOGLE_CLIENT_ID", "test-client-id")
os.environ.setdefault("GOOGLE_CLIENT_SECRET", "test-client-secret")
os.environ.setdefault("AUTH_SECRET", "test-auth-secret")
os.environ.setdefault("AUTH_URL", "http://localhost:3000")
os.environ.setdefault("CLOUDINARY_CLOUD_NAME", "test-cloud")
os.environ.setdefault("CLOUDINARY_API_KEY", "test-key")
os.environ.setdefault("CLOUDINARY_API_SECRET", "test-secret")
os.environ.setdefault("MIDTRANS_SERVER_KEY", "SB-Mid-server-test")
os.environ.setdefault("MIDTRANS_CLIENT_KEY", "SB-Mid-client-test")

from decimal import Decimal

import pytest_asyncio
from fastapi import UploadFile
from httpx import ASGITransport, AsyncClient
from sqlalchemy import StaticPool
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

from app.api.dependencies import get_async_session, get_user
from app.api.main import app
from app.models.enums.listing_condition import ListingCondition
from app.models.enums.listing_status import ListingStatus
from app.models.listing_model import Listing
from app.models.university_model import University
from app.models.user_model import User
from app.services.media.cloudinary_service import CloudinaryService, UploadResult
from app.services.media.exceptions import MediaUploadError
from app.services.payment.exceptions import PaymentGatewayError
from app.services.payment.midtrans_service import (
    MidtransNotification,
    MidtransService,
    SnapToken,
)

DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class FakeMediaService:
    """Stands in for the image host. Files listed in ``fail_on`` are rejected."""

    def __init__(self) -> None:
        self.fail_on: set[str] = set()
        self.uploads: list[tuple[str, str]] = []

    async def upload(self, file: UploadFile, folder: str) -> UploadResult:
        await file.read()
        if file.filename in self.fail_on:
            raise MediaUploadError(f"Upload of '{file.filename}' failed")

        self.uploads.append((folder, file.filename))
        return UploadResult(
            url=f"https://res.cloudinary.com/test/{folder}/{file.filename}",
            public_id=f"{folder}/{file.filename}",
        )


class FakePaymentGateway:
    """
    Stands in for Midtrans. Notifications are "verified" by echoing the
    payload back, the way the gateway's status endpoint would.
    """

    def __init__(self) -> None:
        self.fail_snap = False
        self.fail_notification = False
        self.snap_requests: list[dict] = []

    async def create_snap_token(self, order_id, gross_amount, customer, items) -> SnapToken:
        if self.fail_snap:
            raise PaymentGatewayError("Snap token request failed: 401 unauthorized")

        self.snap_requests.append(
            {
                "order_id": order_id,
                "gross_amount": gross_amount,
                "customer": customer,
                "items": items,
            }
        )
        return SnapToken(
            token=f"snap-{order_id}",
            redirect_url=f"https://app.sandbox.midtrans.com/snap/v4/redirection/snap-{order_id}",
        )

    async def handle_notification(self, payload: dict) -> MidtransNotification:
        if self.fail_notification:
            raise PaymentGatewayError("Notification verification failed")
        return MidtransNotification.from_status_response(payload)


@pytest_asyncio.fixture()
async def session_factory():
    engine = create_async_engine(
        DATABASE_URL,
        connect_args={"check_same_thread": False},
        # ensure that we are connecting to the same
        # in memory database
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield async_sessionmaker(engine, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture()
async def media_service() -> FakeMediaService:
    return FakeMediaService()


@pytest_asyncio.fixture()
async def payment_gateway() -> FakePaymentGateway:
    return FakePaymentGateway()


@pytest_asyncio.fixture()
async def async_client(session_factory, media_service, payment_gateway) -> AsyncClient:
    async def override_get_async_session() -> AsyncSession:
        async with session_factory() as session:
            yield session

    async def override_media_service():
        return media_service

    async def override_payment_gateway():
        return payment_gateway

    app.dependency_overrides[get_async_session] = override_get_async_session
    app.dependency_overrides[CloudinaryService.get_dependency] = override_media_service
    app.dependency_overrides[MidtransService.get_dependency] = override_payment_gateway

    headers = {"Authorization": "Bearer fake"}
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test", headers=headers
    ) as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def login_as():
    """Makes the following requests carry the token claims of ``email``."""

    def _login(email: str | None) -> None:
        async def override_get_user():
            return {"email": email} if email else None

        app.dependency_overrides[get_user] = override_get_user

    return _login


async def create_user(session_factory, email: str, name: str = "Test User") -> User:
    async with session_factory() as session:
        user = User(name=name, email=email, phone_number="+6281234567890")
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user


async def create_listing(
    session_factory,
    seller: User,
    university: University,
    price: str = "150000.00",
    status: ListingStatus = ListingStatus.ACTIVE,
    title: str = "Kalkulus Purcell edisi 9",
) -> Listing:
    async with session_factory() as session:
        listing = Listing(
            title=title,
            description="Buku kuliah, kondisi bagus",
            price=Decimal(price),
            condition=ListingCondition.USED_GOOD,
            status=status,
            seller_id=seller.id,
            university_id=university.id,
        )
        session.add(listing)
        await session.commit()
        await session.refresh(listing)
        return listing


@pytest_asyncio.fixture()
async def seller(session_factory) -> User:
    return await create_user(session_factory, "seller@ui.ac.id", name="Sari Seller")


@pytest_asyncio.fixture()
async def buyer(session_factory) -> User:
    return await create_user(session_factory, "buyer@ui.ac.id", name="Budi Buyer")


@pytest_asyncio.fixture()
async def university(session_factory) -> University:
    async with session_factory() as session:
        university = University(name="Universitas Indonesia", slug="ui")
        session.add(university)
        await session.commit()
        await session.refresh(university)
        return university


@pytest_asyncio.fixture()
async def listing(session_factory, seller, university) -> Listing:
    return await create_listing(session_factory, seller, university)
