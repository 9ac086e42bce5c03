from fastapi import APIRouter, Depends, HTTPException, status

from app.schemas.common_schema import MessageResponse
from app.services.listing.listing_service import ListingService
from app.services.user.user_service import UserService

router = APIRouter(prefix="/api/listings")


@router.delete(
    "/{listing_id}/media/{media_id}",
    response_model=MessageResponse,
    summary="Delete a media item of a listing",
)
async def delete_listing_media(
    *,
    listing_id: str,
    media_id: str,
    user_service: UserService = Depends(UserService.get_dependency),
    listing_service: ListingService = Depends(ListingService.get_dependency),
):
    current_user = await user_service.get_current_user()

    # verify listing ownership
    await listing_service.get_owned_listing(listing_id, current_user)

    deleted = await listing_service.delete_media(listing_id, media_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Media not found",
        )

    return MessageResponse(message="Media deleted successfully")
