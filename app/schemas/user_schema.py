from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr
from sqlmodel import Field, SQLModel


class UserBase(SQLModel):
    model_config = ConfigDict(extra="forbid")
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr = Field(unique=True, index=True, max_length=255)
    image: str | None = Field(default=None, max_length=500)
    phone_number: str | None = Field(default=None, max_length=50)
    bio: str | None = Field(default=None, max_length=1000)


# payload for registering the owner of a verified identity token
class UserRegister(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str = Field(min_length=1, max_length=255)
    phone_number: str | None = Field(default=None, max_length=50)
    bio: str | None = Field(default=None, max_length=1000)


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    name: str
    email: str
    image: str | None = None
    phone_number: str | None = None
    bio: str | None = None
    created_at: datetime


# Seller info schema
# this is used to display seller info in listing cards
class SellerInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    name: str
    email: str
    image: str | None = None


class SellerInfoExpanded(SellerInfo):
    phone_number: str | None = None
    bio: str | None = None


# buyer / seller as shown on a transaction
class PartyInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    name: str
    email: str
    phone_number: str | None = None
