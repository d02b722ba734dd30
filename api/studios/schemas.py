"""
Studio API schemas (request/response models).
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from core.schemas import QuerySpec, URLInput, URLResponse


class StudioCreateInput(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    urls: list[URLInput] = Field(default_factory=list)
    parent_id: str | None = None


class StudioUpdateInput(StudioCreateInput):
    pass


class StudioFilter(BaseModel):
    name: str | None = Field(default=None, max_length=255)


class StudioQueryRequest(BaseModel):
    studio_filter: StudioFilter = Field(default_factory=StudioFilter)
    filter: QuerySpec = Field(default_factory=QuerySpec)


class StudioSummary(BaseModel):
    id: str
    name: str


class StudioResponse(BaseModel):
    id: str
    name: str
    urls: list[URLResponse] = Field(default_factory=list)
    parent: StudioSummary | None = None
    child_studios: list[StudioSummary] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class QueryStudiosResponse(BaseModel):
    count: int
    studios: list[StudioResponse]
