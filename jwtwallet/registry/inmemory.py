"""In-memory implementation of the key registry."""

from __future__ import annotations

from typing import Dict, Tuple

from .base import KeyRecordExistsError, KeyRegistry
from .models import KeyRecord


class InMemoryKeyRegistry(KeyRegistry):
    """Store key records in local memory.

    Useful for tests or a single instance. Records are not shared with
    other processes and do not survive restarts.
    """

    def __init__(self) -> None:
        self._records: Dict[Tuple[str, str], KeyRecord] = {}

    async def create(self, record: KeyRecord) -> None:
        key = (record.namespace, record.key_id)
        if key in self._records:
            raise KeyRecordExistsError(record.namespace, record.key_id)
        self._records[key] = record.model_copy(deep=True)

    async def fetch(self, namespace: str, key_id: str) -> KeyRecord | None:
        record = self._records.get((namespace, key_id))
        return record.model_copy(deep=True) if record else None

    async def list_records(self, namespace: str) -> list[KeyRecord]:
        return [r for (ns, _), r in self._records.items() if ns == namespace]
