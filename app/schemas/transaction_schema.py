from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict
from sqlmodel import Field, SQLModel

from app.models.enums.listing_condition import ListingCondition
from app.models.enums.payment_method import PaymentMethod
from app.models.enums.transaction_status import TransactionStatus
from app.schemas.user_schema import PartyInfo

TransactionRole = Literal["buy", "sell", "all"]


class TransactionBase(SQLModel):
    model_config = ConfigDict(extra="forbid")
    amount: Decimal = Field(max_digits=12, decimal_places=2, ge=0)
    status: TransactionStatus = Field(default=TransactionStatus.PENDING)
    payment_method: PaymentMethod
    # id assigned by the payment gateway once it reports on the order
    payment_id: str | None = Field(default=None, max_length=255)


class TransactionCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")
    listing_id: str = Field(min_length=1)
    payment_method: PaymentMethod


class TransactionStatusUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")
    status: TransactionStatus


class TransactionListingSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    title: str
    price: Decimal
    description: str | None = None
    condition: ListingCondition | None = None


class TransactionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    listing_id: str
    buyer_id: str
    seller_id: str
    amount: Decimal
    status: TransactionStatus
    payment_method: PaymentMethod
    payment_id: str | None = None
    created_at: datetime
    updated_at: datetime


class TransactionDetail(TransactionRead):
    listing: Optional[TransactionListingSummary] = None
    buyer: Optional[PartyInfo] = None
    seller: Optional[PartyInfo] = None


class TransactionResponse(BaseModel):
    transaction: TransactionDetail


class TransactionListResponse(BaseModel):
    transactions: list[TransactionDetail]


class CheckoutResponse(BaseModel):
    transaction: TransactionRead
    snap_token: str | None = None
    snap_redirect_url: str | None = None
