"""Time-bounded cache of public keys fetched from the registry."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """Public JWK together with the time it stops being served."""

    public_jwk: Dict[str, Any]
    cache_expiration: float


class VerificationCache:
    """Thread-safe ``kid`` to public JWK mapping with lazy and swept expiry.

    ``get`` ignores expired entries without removing them; removal is left
    to :meth:`sweep`, which the service runs on its own timer.
    """

    def __init__(self, now: Callable[[], float] | None = None) -> None:
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._now = now or time.time

    def get(self, key_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            entry = self._entries.get(key_id)
        if entry is None or entry.cache_expiration <= self._now():
            return None
        return entry.public_jwk

    def put(self, key_id: str, public_jwk: Dict[str, Any], ttl_seconds: float) -> None:
        entry = CacheEntry(public_jwk=dict(public_jwk), cache_expiration=self._now() + ttl_seconds)
        with self._lock:
            self._entries[key_id] = entry

    def sweep(self) -> int:
        """Drop entries whose expiration has passed and return how many."""
        now = self._now()
        with self._lock:
            expired = [kid for kid, e in self._entries.items() if e.cache_expiration < now]
            for kid in expired:
                del self._entries[kid]
        if expired:
            logger.debug("Swept %d expired key cache entries", len(expired))
        return len(expired)

    def __contains__(self, key_id: object) -> bool:
        with self._lock:
            return key_id in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
