from typing import List, Literal, Optional

from fastapi import Depends, HTTPException, UploadFile, status
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlmodel import desc, select

from app.api.dependencies import get_async_session
from app.core.logging import get_logger
from app.models.enums.media_type import MediaType
from app.models.listing_media_model import ListingMedia
from app.models.listing_model import Listing
from app.models.transaction_model import Transaction
from app.models.user_model import User
from app.schemas.listing_schema import ListingQueryParameters
from app.services.media.cloudinary_service import LISTINGS_FOLDER, CloudinaryService
from app.services.media.exceptions import MediaUploadError

logger = get_logger(__name__)

AllowedListingDependencies = Literal["seller", "university", "media"]
DependenciesList = Optional[List[AllowedListingDependencies]]

# relationships every listing response embeds
LISTING_CARD_DEPENDENCIES: List[AllowedListingDependencies] = [
    "seller",
    "university",
    "media",
]


class ListingService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_listing_by_id(
        self,
        listing_id: str,
        dependencies: DependenciesList = None,
    ) -> Listing | None:
        query = select(Listing).where(Listing.id == listing_id)
        if dependencies:
            query = query.options(
                *[selectinload(getattr(Listing, dep)) for dep in dependencies]
            )

        # refresh relationships of an instance that is already in the session
        result = await self.session.execute(
            query.execution_options(populate_existing=True)
        )
        return result.scalars().one_or_none()

    async def get_owned_listing(
        self,
        listing_id: str,
        user: User,
        dependencies: DependenciesList = None,
    ) -> Listing:
        """
        Returns a listing that belongs to the given user.

        :raises HTTPException: 404 if the listing does not exist,
            403 if somebody else is selling it.
        """
        listing = await self.get_listing_by_id(listing_id, dependencies=dependencies)
        if not listing:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Listing not found",
            )

        if listing.seller_id != user.id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Forbidden",
            )

        return listing

    async def get_listings(self, params: ListingQueryParameters) -> list[Listing]:
        query = select(Listing).options(
            *[selectinload(getattr(Listing, dep)) for dep in LISTING_CARD_DEPENDENCIES]
        )

        # Filtering:
        if params.university_id is not None:
            query = query.where(Listing.university_id == params.university_id)
        if params.seller_id is not None:
            query = query.where(Listing.seller_id == params.seller_id)
        if params.status is not None:
            query = query.where(Listing.status == params.status)
        if params.condition is not None:
            query = query.where(Listing.condition == params.condition)
        if params.min_price is not None:
            query = query.where(Listing.price >= params.min_price)
        if params.max_price is not None:
            query = query.where(Listing.price <= params.max_price)

        # Sorting and pagination:
        query = (
            query.order_by(desc(Listing.created_at))
            .limit(params.limit)
            .offset(params.offset)
        )

        result = await self.session.execute(query)
        return result.scalars().all()

    async def count_media(self, listing_id: str) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(ListingMedia)
            .where(ListingMedia.listing_id == listing_id)
        )
        return result.scalar_one()

    async def attach_media(
        self,
        listing_id: str,
        files: List[UploadFile],
        uploader: CloudinaryService,
        start_order: int = 0,
    ) -> list[ListingMedia]:
        """
        Uploads files one by one and stores a media row for each success.

        A failed upload is logged and skipped, the remaining files are still
        uploaded. The display order follows the position in ``files``.

        :return: The media rows that were stored.
        """
        stored: list[ListingMedia] = []
        for index, file in enumerate(files):
            try:
                upload = await uploader.upload(file, LISTINGS_FOLDER)
            except MediaUploadError as e:
                logger.error("Media upload error for listing %s: %s", listing_id, e)
                continue

            media = ListingMedia(
                listing_id=listing_id,
                url=upload.url,
                type=MediaType.from_content_type(file.content_type),
                display_order=start_order + index,
            )
            self.session.add(media)
            await self.session.commit()
            stored.append(media)

        return stored

    async def has_transactions(self, listing_id: str) -> bool:
        result = await self.session.execute(
            select(func.count())
            .select_from(Transaction)
            .where(Transaction.listing_id == listing_id)
        )
        return result.scalar_one() > 0

    async def delete_listing(self, listing: Listing) -> None:
        # media must be loaded so the ORM cascade can delete the rows
        await self.session.delete(listing)
        await self.session.commit()

    async def delete_media(self, listing_id: str, media_id: str) -> bool:
        result = await self.session.execute(
            select(ListingMedia).where(
                ListingMedia.id == media_id,
                ListingMedia.listing_id == listing_id,
            )
        )
        media = result.scalars().one_or_none()
        if not media:
            return False

        await self.session.delete(media)
        await self.session.commit()
        return True

    @classmethod
    async def get_dependency(
        cls,
        session: AsyncSession = Depends(get_async_session),
    ) -> "ListingService":
        return cls(session)
