"""Signing of tokens with the active key."""

from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Union

import jwt

from .errors import WalletError, WalletErrorKind
from .keys import Keypair

logger = logging.getLogger(__name__)

ExpiresOn = Union[int, float, datetime]


class TokenSigner:
    """Signs payloads with whatever key ``active_key`` returns at call time."""

    def __init__(
        self,
        active_key: Callable[[], Optional[Keypair]],
        issuer: str,
        now: Callable[[], float] | None = None,
    ) -> None:
        self._active_key = active_key
        self.issuer = issuer
        self._now = now or time.time

    def sign(self, payload: Mapping[str, Any], expires_on: ExpiresOn) -> str:
        """Return a compact JWS for ``payload`` expiring at ``expires_on``.

        ``expires_on`` is an epoch timestamp in seconds or a ``datetime``.
        ``iss``, ``iat``, ``nbf`` and ``exp`` replace same-named payload keys.
        """
        keypair = self._active_key()
        if keypair is None:
            logger.error("No private key available for signing")
            raise WalletError(WalletErrorKind.PRIVATE_KEY_MISSING)

        issued_at = int(self._now())
        claims = dict(payload)
        claims.update(
            {
                "iss": self.issuer,
                "iat": issued_at,
                "nbf": issued_at,
                "exp": expires_on,
            }
        )
        return jwt.encode(
            claims,
            keypair.private_key,
            algorithm=keypair.algorithm,
            headers={"kid": keypair.key_id},
        )
