"""Data models for published public key records."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class KeyRecord(BaseModel):
    """Public half of a generated key as stored in the registry.

    ``expires_on`` is advisory: records are never deleted by the wallet.
    """

    namespace: str
    key_id: str
    public_jwk: dict[str, Any] = Field(default_factory=dict)
    issuer: str
    expires_on: datetime
