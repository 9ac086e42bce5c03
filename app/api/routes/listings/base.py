from decimal import Decimal
from typing import Annotated, List, Optional

from fastapi import (
    APIRouter,
    Depends,
    File,
    Form,
    HTTPException,
    Query,
    UploadFile,
    status,
)
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_async_session
from app.models.base import utcnow
from app.models.enums.listing_condition import ListingCondition
from app.models.enums.listing_status import ListingStatus
from app.models.listing_model import Listing
from app.models.university_model import University
from app.schemas.common_schema import MessageResponse
from app.schemas.listing_schema import (
    DESCRIPTION_MAX_LENGTH,
    PRICE_DECIMAL_PLACES,
    PRICE_MAX_DIGITS,
    TITLE_MAX_LENGTH,
    ListingDetail,
    ListingListResponse,
    ListingQueryParameters,
    ListingRead,
    ListingResponse,
)
from app.services.listing.listing_service import (
    LISTING_CARD_DEPENDENCIES,
    ListingService,
)
from app.services.media.cloudinary_service import CloudinaryService
from app.services.user.user_service import UserService

router = APIRouter(prefix="/api/listings")


# filter listings by university, status, condition, price and seller
@router.get(
    "",
    response_model=ListingListResponse,
    summary="Filter and list listings",
    description="Retrieve listings by university, status (active by default), condition and price range, newest first.",
)
async def get_listings(
    *,
    params: Annotated[ListingQueryParameters, Query()],
    listing_service: ListingService = Depends(ListingService.get_dependency),
):
    if (
        params.min_price is not None
        and params.max_price is not None
        and params.min_price > params.max_price
    ):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="min_price must not be greater than max_price.",
        )

    listings = await listing_service.get_listings(params)
    output_listings = [ListingRead.model_validate(listing) for listing in listings]

    return ListingListResponse(listings=output_listings, count=len(output_listings))


@router.get(
    "/{listing_id}",
    response_model=ListingResponse,
    summary="Get a listing by ID",
    description="Fetch a listing with seller contact details, university and media.",
)
async def get_listing(
    *,
    listing_id: str,
    listing_service: ListingService = Depends(ListingService.get_dependency),
):
    listing = await listing_service.get_listing_by_id(
        listing_id, dependencies=LISTING_CARD_DEPENDENCIES
    )

    if not listing:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Listing not found",
        )

    return ListingResponse(listing=ListingDetail.model_validate(listing))


@router.post(
    "",
    response_model=ListingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new listing",
    description="Creates an active listing for the current user. Media files that fail to upload are skipped.",
)
async def create_listing(
    *,
    title: str = Form(..., min_length=1, max_length=TITLE_MAX_LENGTH),
    description: str = Form(..., min_length=1, max_length=DESCRIPTION_MAX_LENGTH),
    price: Decimal = Form(
        ..., ge=0, max_digits=PRICE_MAX_DIGITS, decimal_places=PRICE_DECIMAL_PLACES
    ),
    condition: ListingCondition = Form(...),
    university_id: str = Form(..., min_length=1),
    media: Optional[List[UploadFile]] = File(None),
    session: AsyncSession = Depends(get_async_session),
    user_service: UserService = Depends(UserService.get_dependency),
    listing_service: ListingService = Depends(ListingService.get_dependency),
    media_service: CloudinaryService = Depends(CloudinaryService.get_dependency),
):
    current_user = await user_service.get_current_user()

    # check that university exists
    university = await session.get(University, university_id)
    if not university:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="University not found",
        )

    # create listing instance
    listing = Listing(
        title=title,
        description=description,
        price=price,
        condition=condition,
        status=ListingStatus.ACTIVE,
        seller_id=current_user.id,
        university_id=university.id,
    )
    session.add(listing)
    await session.commit()

    await listing_service.attach_media(listing.id, media or [], media_service)

    listing = await listing_service.get_listing_by_id(
        listing.id, dependencies=LISTING_CARD_DEPENDENCIES
    )
    return ListingResponse(listing=ListingDetail.model_validate(listing))


@router.put(
    "/{listing_id}",
    response_model=ListingResponse,
    summary="Update an existing listing",
    description="Updates the provided fields. New media is appended after the existing media.",
)
async def update_listing(
    *,
    listing_id: str,
    title: Optional[str] = Form(None, min_length=1, max_length=TITLE_MAX_LENGTH),
    description: Optional[str] = Form(
        None, min_length=1, max_length=DESCRIPTION_MAX_LENGTH
    ),
    price: Optional[Decimal] = Form(
        None, ge=0, max_digits=PRICE_MAX_DIGITS, decimal_places=PRICE_DECIMAL_PLACES
    ),
    condition: Optional[ListingCondition] = Form(None),
    listing_status: Optional[ListingStatus] = Form(None, alias="status"),
    media: Optional[List[UploadFile]] = File(None),
    session: AsyncSession = Depends(get_async_session),
    user_service: UserService = Depends(UserService.get_dependency),
    listing_service: ListingService = Depends(ListingService.get_dependency),
    media_service: CloudinaryService = Depends(CloudinaryService.get_dependency),
):
    current_user = await user_service.get_current_user()

    # check that listing exists and user is the seller of the listing
    listing = await listing_service.get_owned_listing(listing_id, current_user)

    update_data = {
        "title": title,
        "description": description,
        "price": price,
        "condition": condition,
        "status": listing_status,
    }
    for key, value in update_data.items():
        if value is not None:
            setattr(listing, key, value)
    listing.updated_at = utcnow()

    session.add(listing)
    await session.commit()

    if media:
        start_order = await listing_service.count_media(listing.id)
        await listing_service.attach_media(
            listing.id, media, media_service, start_order=start_order
        )

    listing = await listing_service.get_listing_by_id(
        listing.id, dependencies=LISTING_CARD_DEPENDENCIES
    )
    return ListingResponse(listing=ListingDetail.model_validate(listing))


@router.delete(
    "/{listing_id}",
    response_model=MessageResponse,
    summary="Delete a listing",
    description="Removes the listing together with its media. Listings with transactions can only be marked as deleted.",
)
async def delete_listing(
    *,
    listing_id: str,
    user_service: UserService = Depends(UserService.get_dependency),
    listing_service: ListingService = Depends(ListingService.get_dependency),
):
    current_user = await user_service.get_current_user()

    listing = await listing_service.get_owned_listing(
        listing_id, current_user, dependencies=["media"]
    )

    if await listing_service.has_transactions(listing.id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Listing has transactions, set its status to deleted instead.",
        )

    await listing_service.delete_listing(listing)
    return MessageResponse(message="Listing deleted successfully")
