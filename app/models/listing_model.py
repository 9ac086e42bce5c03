from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import TIMESTAMP, Column
from sqlmodel import Field, Relationship

from app.models.base import new_id, utcnow
from app.schemas.listing_schema import ListingBase

if TYPE_CHECKING:
    from .listing_media_model import ListingMedia
    from .transaction_model import Transaction
    from .university_model import University
    from .user_model import User


class Listing(ListingBase, table=True):
    __tablename__ = "listings"
    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    seller_id: str = Field(foreign_key="users.id", index=True)
    university_id: str = Field(foreign_key="universities.id", index=True)

    # updated_at is set from python, there is no server side onupdate
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(TIMESTAMP(timezone=True), nullable=False, index=True),
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(TIMESTAMP(timezone=True), nullable=False),
    )

    # Relationships
    seller: Optional["User"] = Relationship(back_populates="listings")

    university: Optional["University"] = Relationship(back_populates="listings")

    media: List["ListingMedia"] = Relationship(
        back_populates="listing",
        # media rows are owned by the listing and go away with it
        cascade_delete=True,
        sa_relationship_kwargs={"order_by": "ListingMedia.display_order"},
    )

    transactions: List["Transaction"] = Relationship(
        back_populates="listing",
        sa_relationship_kwargs={"passive_deletes": True},
    )
