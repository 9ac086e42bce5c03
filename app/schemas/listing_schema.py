from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from sqlmodel import Field, SQLModel

from app.models.enums.listing_condition import ListingCondition
from app.models.enums.listing_status import ListingStatus
from app.models.enums.media_type import MediaType
from app.schemas.university_schema import UniversityDetail, UniversitySummary
from app.schemas.user_schema import SellerInfo, SellerInfoExpanded

TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 5000
PRICE_MAX_DIGITS = 12
PRICE_DECIMAL_PLACES = 2


# Basic schema for listing data
class ListingBase(SQLModel):
    model_config = ConfigDict(extra="forbid")
    title: str = Field(min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str = Field(min_length=1, max_length=DESCRIPTION_MAX_LENGTH)
    price: Decimal = Field(
        max_digits=PRICE_MAX_DIGITS, decimal_places=PRICE_DECIMAL_PLACES, ge=0
    )
    condition: ListingCondition
    status: ListingStatus = Field(default=ListingStatus.ACTIVE)


class ListingMediaRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    listing_id: str
    url: str
    type: MediaType
    display_order: int
    created_at: datetime


# Schema for displaying listing data in cards
# this is used to read listing data from the database
class ListingRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    title: str
    description: str
    price: Decimal
    condition: ListingCondition
    status: ListingStatus
    seller_id: str
    university_id: str
    created_at: datetime
    updated_at: datetime

    seller: Optional[SellerInfo] = None
    university: Optional[UniversitySummary] = None
    media: List[ListingMediaRead] = []


# Schema for the listing detail page, exposes seller contact data
class ListingDetail(ListingRead):
    seller: Optional[SellerInfoExpanded] = None
    university: Optional[UniversityDetail] = None


class ListingResponse(BaseModel):
    listing: ListingDetail


class ListingListResponse(BaseModel):
    listings: List[ListingRead]
    count: int


class ListingQueryParameters(BaseModel):
    university_id: str | None = None
    seller_id: str | None = None
    status: ListingStatus | None = ListingStatus.ACTIVE
    condition: ListingCondition | None = None
    min_price: Decimal | None = Field(default=None, ge=0)
    max_price: Decimal | None = Field(default=None, ge=0)
    limit: int = Field(default=20, ge=1, le=100)
    offset: int = Field(default=0, ge=0)

    @field_validator("status", mode="before")
    @classmethod
    def empty_status_means_any(cls, value):
        # `?status=` lists every status, a missing parameter only active ones
        if value == "":
            return None
        return value
