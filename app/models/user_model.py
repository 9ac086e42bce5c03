from datetime import datetime
from typing import TYPE_CHECKING, List

from sqlalchemy import TIMESTAMP, Column
from sqlmodel import Field, Relationship

from app.models.base import new_id, utcnow
from app.schemas.user_schema import UserBase

if TYPE_CHECKING:
    from .listing_model import Listing


class User(UserBase, table=True):
    __tablename__ = "users"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(TIMESTAMP(timezone=True), nullable=False),
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(TIMESTAMP(timezone=True), nullable=False),
    )

    # Relationships
    listings: List["Listing"] = Relationship(back_populates="seller")
