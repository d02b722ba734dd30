"""
Performer rows and the tables they map to.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from core.tables import JoinTable, Table

PERFORMER_JOIN_KEY = "performer_id"


@dataclass
class Performer:
    id: int | None = None
    name: str = ""
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
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class PerformerAlias:
    performer_id: int | None = None
    alias: str = ""


@dataclass
class PerformerUrl:
    performer_id: int | None = None
    url: str = ""
    type: str = ""


@dataclass
class PerformerBodyMod:
    performer_id: int | None = None
    location: str = ""
    description: str | None = None


PERFORMER_TABLE = Table("performers", Performer)
PERFORMER_ALIAS_TABLE = JoinTable("performer_aliases", PerformerAlias, "performers", PERFORMER_JOIN_KEY)
PERFORMER_URL_TABLE = JoinTable("performer_urls", PerformerUrl, "performers", PERFORMER_JOIN_KEY)
PERFORMER_TATTOO_TABLE = JoinTable("performer_tattoos", PerformerBodyMod, "performers", PERFORMER_JOIN_KEY)
PERFORMER_PIERCING_TABLE = JoinTable("performer_piercings", PerformerBodyMod, "performers", PERFORMER_JOIN_KEY)


def create_aliases(performer_id: int, aliases: list[str] | None) -> list[PerformerAlias]:
    # Duplicate aliases collapse to one row, keeping first-seen order.
    seen: dict[str, None] = {}
    for alias in aliases or []:
        alias = alias.strip()
        if alias:
            seen.setdefault(alias, None)
    return [PerformerAlias(performer_id=performer_id, alias=alias) for alias in seen]


def create_urls(performer_id: int, urls: list | None) -> list[PerformerUrl]:
    return [PerformerUrl(performer_id=performer_id, url=u.url, type=u.type) for u in urls or []]


def create_body_mods(performer_id: int, mods: list | None) -> list[PerformerBodyMod]:
    return [
        PerformerBodyMod(performer_id=performer_id, location=m.location, description=m.description)
        for m in mods or []
    ]
