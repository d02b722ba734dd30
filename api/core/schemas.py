"""
Shared request schemas: filter criteria and paging.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class CriterionModifier(str, Enum):
    EQUALS = "EQUALS"
    NOT_EQUALS = "NOT_EQUALS"
    GREATER_THAN = "GREATER_THAN"
    LESS_THAN = "LESS_THAN"


class SortDirection(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


class IntCriterionInput(BaseModel):
    value: int
    modifier: CriterionModifier


class StringCriterionInput(BaseModel):
    value: str
    modifier: CriterionModifier


class QuerySpec(BaseModel):
    page: int = Field(default=1, ge=1)
    per_page: int = Field(default=25, ge=1, le=100)
    sort: str | None = Field(default=None, max_length=64)
    direction: SortDirection = SortDirection.ASC

    def offset(self) -> int:
        return (self.page - 1) * self.per_page


class URLInput(BaseModel):
    url: str = Field(..., min_length=1, max_length=2048)
    type: str = Field(..., min_length=1, max_length=64)


class URLResponse(BaseModel):
    url: str
    type: str
