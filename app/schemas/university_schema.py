from datetime import datetime

from pydantic import BaseModel, ConfigDict
from sqlmodel import Field, SQLModel

SLUG_PATTERN = r"^[a-z0-9-]+$"


class UniversityBase(SQLModel):
    model_config = ConfigDict(extra="forbid")
    name: str = Field(min_length=1, max_length=255)
    slug: str = Field(unique=True, index=True, max_length=255)
    logo: str | None = Field(default=None, max_length=500)


class UniversitySummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    name: str
    slug: str


class UniversityDetail(UniversitySummary):
    logo: str | None = None


class UniversityRead(UniversityDetail):
    created_at: datetime
    updated_at: datetime


class UniversityResponse(BaseModel):
    university: UniversityRead


class UniversityListResponse(BaseModel):
    universities: list[UniversityRead]
