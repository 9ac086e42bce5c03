from datetime import datetime

from sqlalchemy import TIMESTAMP, Column
from sqlmodel import Field, Relationship, SQLModel

from app.models.base import new_id, utcnow
from app.models.enums.media_type import MediaType
from app.models.listing_model import Listing


class ListingMediaBase(SQLModel):
    url: str = Field(max_length=1000)
    type: MediaType = Field(default=MediaType.IMAGE)
    display_order: int = Field(default=0, ge=0)


class ListingMedia(ListingMediaBase, table=True):
    __tablename__ = "listing_media"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    listing_id: str = Field(foreign_key="listings.id", ondelete="CASCADE", index=True)

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(TIMESTAMP(timezone=True), nullable=False),
    )

    listing: Listing = Relationship(back_populates="media")
