from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import TIMESTAMP, Column
from sqlmodel import Field, Relationship

from app.models.base import new_id, utcnow
from app.schemas.transaction_schema import TransactionBase

if TYPE_CHECKING:
    from .listing_model import Listing
    from .user_model import User


class Transaction(TransactionBase, table=True):
    __tablename__ = "transactions"

    # also used as the payment gateway order id
    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)

    # Foreign keys
    listing_id: str = Field(foreign_key="listings.id", index=True)
    buyer_id: str = Field(foreign_key="users.id", index=True)
    seller_id: str = Field(foreign_key="users.id", index=True)

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(TIMESTAMP(timezone=True), nullable=False, index=True),
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(TIMESTAMP(timezone=True), nullable=False),
    )

    # Relationships
    listing: Optional["Listing"] = Relationship(back_populates="transactions")

    buyer: Optional["User"] = Relationship(
        sa_relationship_kwargs={"foreign_keys": "[Transaction.buyer_id]"},
    )

    seller: Optional["User"] = Relationship(
        sa_relationship_kwargs={"foreign_keys": "[Transaction.seller_id]"},
    )
