"""
Performer API schemas (request/response models).
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field

from core.schemas import IntCriterionInput, QuerySpec, StringCriterionInput, URLInput, URLResponse


class GenderEnum(str, Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    TRANSGENDER_MALE = "TRANSGENDER_MALE"
    TRANSGENDER_FEMALE = "TRANSGENDER_FEMALE"
    INTERSEX = "INTERSEX"


class DateAccuracyEnum(str, Enum):
    YEAR = "YEAR"
    MONTH = "MONTH"
    DAY = "DAY"


class BodyModificationInput(BaseModel):
    location: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=1000)


class BodyModificationResponse(BaseModel):
    location: str
    description: str | None = None


class PerformerFields(BaseModel):
    disambiguation: str | None = Field(default=None, max_length=255)
    gender: GenderEnum | None = None
    birthdate: date | None = None
    birthdate_accuracy: DateAccuracyEnum | None = None
    ethnicity: str | None = Field(default=None, max_length=64)
    country: str | None = Field(default=None, max_length=64)
    eye_color: str | None = Field(default=None, max_length=64)
    hair_color: str | None = Field(default=None, max_length=64)
    height: int | None = Field(default=None, gt=0)
    cup_size: str | None = Field(default=None, max_length=8)
    band_size: int | None = Field(default=None, gt=0)
    waist_size: int | None = Field(default=None, gt=0)
    hip_size: int | None = Field(default=None, gt=0)
    breast_type: str | None = Field(default=None, max_length=32)
    career_start_year: int | None = Field(default=None, ge=1900, le=2100)
    career_end_year: int | None = Field(default=None, ge=1900, le=2100)
    aliases: list[str] = Field(default_factory=list)
    urls: list[URLInput] = Field(default_factory=list)
    tattoos: list[BodyModificationInput] = Field(default_factory=list)
    piercings: list[BodyModificationInput] = Field(default_factory=list)


class PerformerCreateInput(PerformerFields):
    name: str = Field(..., min_length=1, max_length=255)


class PerformerUpdateInput(PerformerFields):
    # Full overwrite: omitted scalars are cleared, omitted lists emptied.
    name: str = Field(..., min_length=1, max_length=255)


class PerformerFilter(BaseModel):
    name: str | None = Field(default=None, max_length=255)
    birth_year: IntCriterionInput | None = None
    age: IntCriterionInput | None = None
    country: StringCriterionInput | None = None
    gender: StringCriterionInput | None = None
    ethnicity: StringCriterionInput | None = None


class PerformerQueryRequest(BaseModel):
    performer_filter: PerformerFilter = Field(default_factory=PerformerFilter)
    filter: QuerySpec = Field(default_factory=QuerySpec)


class PerformerResponse(BaseModel):
    id: str
    name: str
    disambiguation: str | None = None
    gender: str | None = None
    birthdate: date | None = None
    birthdate_accuracy: str | None = None
    ethnicity: str | None = None
    country: str | None = None
    eye_color: str | None = None
    hair_color: str | None = None
    height: int | None = None
    cup_size: str | None = None
    band_size: int | None = None
    waist_size: int | None = None
    hip_size: int | None = None
    breast_type: str | None = None
    career_start_year: int | None = None
    career_end_year: int | None = None
    aliases: list[str] = Field(default_factory=list)
    urls: list[URLResponse] = Field(default_factory=list)
    tattoos: list[BodyModificationResponse] = Field(default_factory=list)
    piercings: list[BodyModificationResponse] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class QueryPerformersResponse(BaseModel):
    count: int
    performers: list[PerformerResponse]
