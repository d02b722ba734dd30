"""
Studio rows and the tables they map to.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from core.tables import JoinTable, Table

STUDIO_JOIN_KEY = "studio_id"


@dataclass
class Studio:
    id: int | None = None
    name: str = ""
    parent_studio_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class StudioUrl:
    studio_id: int | None = None
    url: str = ""
    type: str = ""


STUDIO_TABLE = Table("studios", Studio)
STUDIO_URL_TABLE = JoinTable("studio_urls", StudioUrl, "studios", STUDIO_JOIN_KEY)
# Child studios point at their parent through studios.parent_studio_id.
STUDIO_CHILD_TABLE = JoinTable("studios", Studio, "studios", "parent_studio_id")


def create_urls(studio_id: int, urls: list | None) -> list[StudioUrl]:
    return [StudioUrl(studio_id=studio_id, url=u.url, type=u.type) for u in urls or []]
