"""Registry abstraction for public key records."""

from __future__ import annotations

from typing import Protocol

from .models import KeyRecord


class KeyRecordExistsError(Exception):
    """A record with the same namespace and key id was already published."""

    def __init__(self, namespace: str, key_id: str) -> None:
        self.namespace = namespace
        self.key_id = key_id
        super().__init__(f"Key record {namespace}/{key_id} already exists")


class KeyRegistry(Protocol):
    """Protocol for shared public key registry backends.

    Backend failures (connection errors, timeouts, API errors) are raised
    as-is; only a missing record is reported as ``None``.
    """

    async def create(self, record: KeyRecord) -> None:
        """Publish ``record`` under its namespace and key id."""

    async def fetch(self, namespace: str, key_id: str) -> KeyRecord | None:
        """Return the record for ``key_id`` or ``None`` when absent."""
