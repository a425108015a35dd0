"""Verification of tokens signed by this wallet or its peers."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional, Tuple

import jwt

from .cache import VerificationCache
from .errors import WalletError, WalletErrorKind
from .keys import Keypair
from .registry import KeyRegistry

logger = logging.getLogger(__name__)


class TokenVerifier:
    """Resolves a token's ``kid`` to a public key and validates the token.

    Resolution order is the active key, then the verification cache, then
    the registry. Registry hits are cached for ``cache_ttl_seconds``.
    """

    def __init__(
        self,
        active_key: Callable[[], Optional[Keypair]],
        cache: VerificationCache,
        registry: KeyRegistry,
        namespace: str,
        cache_ttl_seconds: float,
    ) -> None:
        self._active_key = active_key
        self._cache = cache
        self._registry = registry
        self.namespace = namespace
        self.cache_ttl_seconds = cache_ttl_seconds

    async def verify(self, token: str, audience: str) -> Dict[str, Any]:
        """Validate ``token`` for ``audience`` and return its claims."""
        header = jwt.get_unverified_header(token)
        key_id = header.get("kid")
        if not key_id:
            logger.error("No key ID (kid) found in token header")
            raise WalletError(WalletErrorKind.KEY_ID_MISSING)

        key, algorithm = await self._resolve(key_id)
        return jwt.decode(token, key, algorithms=[algorithm], audience=audience)

    async def _resolve(self, key_id: str) -> Tuple[Any, str]:
        active = self._active_key()
        if active is not None and active.key_id == key_id:
            return active.public_key, active.algorithm

        public_jwk = await self.get_jwk(key_id)
        if not public_jwk:
            logger.error("No public key found for kid: %s", key_id)
            raise WalletError(WalletErrorKind.KEY_MISSING, key_id=key_id)

        jwk = jwt.PyJWK(public_jwk)
        return jwk.key, jwk.algorithm_name

    async def get_jwk(self, key_id: str) -> Optional[Dict[str, Any]]:
        """Return the public JWK for ``key_id`` from cache or registry."""
        cached = self._cache.get(key_id)
        if cached is not None:
            return cached

        try:
            record = await self._registry.fetch(self.namespace, key_id)
        except Exception as exc:
            logger.error(
                "Error fetching key %s from registry namespace %s: %s",
                key_id,
                self.namespace,
                exc,
            )
            raise

        if record is None or not record.public_jwk:
            return None
        self._cache.put(key_id, record.public_jwk, self.cache_ttl_seconds)
        return record.public_jwk
