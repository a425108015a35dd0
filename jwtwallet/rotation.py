"""Rotation of the active signing key."""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional

from .keys import KeyGenerator, Keypair
from .registry import KeyRecord, KeyRegistry

logger = logging.getLogger(__name__)


class RotationState(str, Enum):
    NO_ACTIVE_KEY = "no_active_key"
    HAS_ACTIVE_KEY = "has_active_key"


class ActiveKeySlot:
    """Holds at most one keypair; readers always get a whole snapshot."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._keypair: Optional[Keypair] = None

    def get(self) -> Optional[Keypair]:
        with self._lock:
            return self._keypair

    def swap(self, keypair: Optional[Keypair]) -> Optional[Keypair]:
        """Install ``keypair`` and return the one it replaced."""
        with self._lock:
            previous, self._keypair = self._keypair, keypair
        return previous


class RotationController:
    """Generates keys, makes them active and publishes their public half.

    The controller is the only writer of its :class:`ActiveKeySlot`.
    Rotations are serialized: a direct :meth:`rotate` call waits for one in
    flight, while :meth:`rotate_if_idle` (used by the timer) skips instead.
    """

    def __init__(
        self,
        registry: KeyRegistry,
        *,
        issuer: str,
        namespace: str,
        algorithm: str,
        key_expiration_seconds: int,
        generator: KeyGenerator | None = None,
        rollback_on_persist_failure: bool = False,
        now: Callable[[], float] | None = None,
    ) -> None:
        self._registry = registry
        self._generator = generator or KeyGenerator()
        self.issuer = issuer
        self.namespace = namespace
        self.algorithm = algorithm
        self.key_expiration_seconds = key_expiration_seconds
        self.rollback_on_persist_failure = rollback_on_persist_failure
        self._now = now or time.time
        self._slot = ActiveKeySlot()
        self._lock = asyncio.Lock()

    @property
    def active_key(self) -> Optional[Keypair]:
        return self._slot.get()

    @property
    def state(self) -> RotationState:
        if self._slot.get() is None:
            return RotationState.NO_ACTIVE_KEY
        return RotationState.HAS_ACTIVE_KEY

    @property
    def in_progress(self) -> bool:
        return self._lock.locked()

    async def rotate(self) -> Keypair:
        """Generate and install a new active key, then publish it.

        Registry failures are re-raised unchanged. The new key stays active
        unless ``rollback_on_persist_failure`` is set, in which case the
        previous key is restored first.
        """
        async with self._lock:
            return await self._rotate()

    async def rotate_if_idle(self) -> Optional[Keypair]:
        """Rotate unless another rotation is still running."""
        if self._lock.locked():
            logger.warning(
                "Skipping key rotation in namespace %s: previous rotation still in progress",
                self.namespace,
            )
            return None
        return await self.rotate()

    async def _rotate(self) -> Keypair:
        logger.info("Rolling keys in namespace: %s", self.namespace)
        keypair = await asyncio.to_thread(self._generator.generate, self.algorithm)
        expires_on = datetime.fromtimestamp(
            self._now() + self.key_expiration_seconds, tz=timezone.utc
        )
        previous = self._slot.swap(keypair)

        record = KeyRecord(
            namespace=self.namespace,
            key_id=keypair.key_id,
            public_jwk=keypair.public_jwk(),
            issuer=self.issuer,
            expires_on=expires_on,
        )
        try:
            await self._registry.create(record)
        except Exception as exc:
            logger.error(
                "Failed to save key %s in namespace %s: %s",
                keypair.key_id,
                self.namespace,
                exc,
            )
            if self.rollback_on_persist_failure:
                self._slot.swap(previous)
                logger.warning(
                    "Restored previous active key %s in namespace %s",
                    previous.key_id if previous else None,
                    self.namespace,
                )
            raise

        logger.info(
            "Keys rolled successfully. New key ID: %s in namespace: %s",
            keypair.key_id,
            self.namespace,
        )
        return keypair
