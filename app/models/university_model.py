from datetime import datetime
from typing import TYPE_CHECKING, List

from sqlalchemy import TIMESTAMP, Column
from sqlmodel import Field, Relationship

from app.models.base import new_id, utcnow
from app.schemas.university_schema import UniversityBase

if TYPE_CHECKING:
    from .listing_model import Listing


class University(UniversityBase, table=True):
    __tablename__ = "universities"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(TIMESTAMP(timezone=True), nullable=False),
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(TIMESTAMP(timezone=True), nullable=False),
    )

    listings: List["Listing"] = Relationship(
        back_populates="university",
        sa_relationship_kwargs={"passive_deletes": True},
    )
