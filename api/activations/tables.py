"""
Pending account activation rows.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from core.tables import Table


@dataclass
class PendingActivation:
    id: UUID | None = None
    email: str = ""
    invite_key: str = ""
    time: datetime | None = None


PENDING_ACTIVATION_TABLE = Table("pending_activations", PendingActivation)
