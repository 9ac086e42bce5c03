from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from sqlalchemy import func
from sqlalchemy.ext.asyncio.session import AsyncSession
from sqlmodel import select

from app.api.dependencies import get_async_session
from app.core.logging import get_logger
from app.models.base import utcnow
from app.models.listing_model import Listing
from app.models.university_model import University
from app.schemas.common_schema import MessageResponse
from app.schemas.university_schema import (
    SLUG_PATTERN,
    UniversityListResponse,
    UniversityRead,
    UniversityResponse,
)
from app.services.media.cloudinary_service import UNIVERSITIES_FOLDER, CloudinaryService
from app.services.media.exceptions import MediaUploadError
from app.services.user.user_service import UserService

logger = get_logger(__name__)

router = APIRouter(prefix="/api/universities", tags=["Universities"])


async def _get_university_or_404(session: AsyncSession, university_id: str) -> University:
    university = await session.get(University, university_id)
    if not university:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="University not found",
        )
    return university


async def _slug_taken(session: AsyncSession, slug: str) -> bool:
    result = await session.execute(select(University).where(University.slug == slug))
    return result.scalars().first() is not None


async def _upload_logo(media_service: CloudinaryService, logo: UploadFile) -> str:
    try:
        upload = await media_service.upload(logo, UNIVERSITIES_FOLDER)
    except MediaUploadError as e:
        logger.error("Cloudinary upload error: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to upload logo",
        )
    return upload.url


@router.get(
    "",
    response_model=UniversityListResponse,
    summary="List universities",
)
async def get_universities(
    *,
    session: AsyncSession = Depends(get_async_session),
):
    result = await session.execute(select(University).order_by(University.name))
    return UniversityListResponse(
        universities=[UniversityRead.model_validate(u) for u in result.scalars().all()]
    )


@router.get(
    "/{university_id}",
    response_model=UniversityResponse,
    summary="Get a university by ID",
)
async def get_university(
    *,
    university_id: str,
    session: AsyncSession = Depends(get_async_session),
):
    university = await _get_university_or_404(session, university_id)
    return UniversityResponse(university=UniversityRead.model_validate(university))


@router.post(
    "",
    response_model=UniversityResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a university",
    description="Creates a university with a unique slug. The optional logo is uploaded to the image host.",
)
async def create_university(
    *,
    name: str = Form(..., min_length=1, max_length=255),
    slug: str = Form(..., min_length=1, max_length=255, pattern=SLUG_PATTERN),
    logo: Optional[UploadFile] = File(None),
    session: AsyncSession = Depends(get_async_session),
    user_service: UserService = Depends(UserService.get_dependency),
    media_service: CloudinaryService = Depends(CloudinaryService.get_dependency),
):
    await user_service.get_current_user()

    if await _slug_taken(session, slug):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Slug already exists",
        )

    logo_url = None
    if logo is not None and logo.filename:
        logo_url = await _upload_logo(media_service, logo)

    university = University(name=name, slug=slug, logo=logo_url)
    session.add(university)
    await session.commit()
    await session.refresh(university)

    return UniversityResponse(university=UniversityRead.model_validate(university))


@router.put(
    "/{university_id}",
    response_model=UniversityResponse,
    summary="Update a university",
    description="Updates the provided fields only. A new logo replaces the old one.",
)
async def update_university(
    *,
    university_id: str,
    name: Optional[str] = Form(None, min_length=1, max_length=255),
    slug: Optional[str] = Form(None, min_length=1, max_length=255, pattern=SLUG_PATTERN),
    logo: Optional[UploadFile] = File(None),
    session: AsyncSession = Depends(get_async_session),
    user_service: UserService = Depends(UserService.get_dependency),
    media_service: CloudinaryService = Depends(CloudinaryService.get_dependency),
):
    await user_service.get_current_user()

    university = await _get_university_or_404(session, university_id)

    # If slug is being updated, check if it's already taken
    if slug and slug != university.slug and await _slug_taken(session, slug):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Slug already exists",
        )

    if logo is not None and logo.filename:
        university.logo = await _upload_logo(media_service, logo)
    if name:
        university.name = name
    if slug:
        university.slug = slug
    university.updated_at = utcnow()

    session.add(university)
    await session.commit()
    await session.refresh(university)

    return UniversityResponse(university=UniversityRead.model_validate(university))


@router.delete(
    "/{university_id}",
    response_model=MessageResponse,
    summary="Delete a university",
    description="Deletes a university that no listing refers to anymore.",
)
async def delete_university(
    *,
    university_id: str,
    session: AsyncSession = Depends(get_async_session),
    user_service: UserService = Depends(UserService.get_dependency),
):
    await user_service.get_current_user()

    university = await _get_university_or_404(session, university_id)

    listings_count = await session.execute(
        select(func.count())
        .select_from(Listing)
        .where(Listing.university_id == university.id)
    )
    if listings_count.scalar_one() > 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="University still has listings",
        )

    await session.delete(university)
    await session.commit()

    return MessageResponse(message="University deleted successfully")
