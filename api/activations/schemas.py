"""
Activation API schemas.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class ActivationCreateInput(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)


class ActivateAccountInput(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)
    invite_key: str = Field(..., min_length=20, max_length=128)
    password: str = Field(..., min_length=8, max_length=128)


class ActivationResponse(BaseModel):
    id: str
    email: str
    invite_key: str
    time: datetime | None = None
