"""Wallet service tying rotation, signing and verification together."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Mapping

from .cache import VerificationCache
from .config import WalletConfig
from .keys import KeyGenerator
from .registry import KeyRegistry, get_registry
from .rotation import RotationController
from .scheduler import PeriodicTask
from .signer import ExpiresOn, TokenSigner
from .verifier import TokenVerifier

logger = logging.getLogger(__name__)


class JwtWalletService:
    """Short-lived signing keys with shared public-key verification.

    ``sign_token`` and ``verify_token`` are the public surface; everything
    else is exposed for tests and tooling only.

    Example::

        config = WalletConfig(key_expiration_seconds=3600, key_rotation_interval_seconds=300)
        async with JwtWalletService(config) as wallet:
            token = wallet.sign_token({"sub": "alice", "aud": "api"}, time.time() + 600)
            claims = await wallet.verify_token(token, audience="api")
    """

    def __init__(
        self,
        config: WalletConfig,
        registry: KeyRegistry | None = None,
        generator: KeyGenerator | None = None,
        now: Callable[[], float] | None = None,
    ) -> None:
        self.config = config
        self.registry = registry or get_registry(config)
        now = now or time.time

        self.rotation = RotationController(
            self.registry,
            issuer=config.issuer,
            namespace=config.namespace,
            algorithm=config.algorithm,
            key_expiration_seconds=config.key_expiration_seconds,
            generator=generator,
            rollback_on_persist_failure=config.rollback_on_persist_failure,
            now=now,
        )
        self.cache = VerificationCache(now=now)
        self.signer = TokenSigner(lambda: self.rotation.active_key, config.issuer, now=now)
        self.verifier = TokenVerifier(
            lambda: self.rotation.active_key,
            self.cache,
            self.registry,
            namespace=config.namespace,
            cache_ttl_seconds=config.key_expiration_seconds,
        )

        self._rotation_task = PeriodicTask(
            "jwtwallet-key-rotation",
            config.key_rotation_interval_seconds,
            self.rotation.rotate_if_idle,
        )
        self._sweep_task = PeriodicTask(
            "jwtwallet-cache-sweep",
            config.cache_sweep_interval_seconds,
            self._sweep,
        )

    async def _sweep(self) -> None:
        self.cache.sweep()

    @property
    def started(self) -> bool:
        return self._rotation_task.running

    async def start(self) -> None:
        """Rotate once, then schedule rotation and cache sweeps."""
        await self.rotation.rotate()
        self._rotation_task.start()
        self._sweep_task.start()
        logger.info("JWT wallet initialized in namespace %s", self.config.namespace)

    async def stop(self) -> None:
        await self._rotation_task.stop()
        await self._sweep_task.stop()

    async def __aenter__(self) -> "JwtWalletService":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.stop()

    def sign_token(self, payload: Mapping[str, Any], expires_on: ExpiresOn) -> str:
        return self.signer.sign(payload, expires_on)

    async def verify_token(self, token: str, audience: str) -> Dict[str, Any]:
        return await self.verifier.verify(token, audience)
