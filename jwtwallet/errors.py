"""Domain errors raised by the wallet."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class WalletErrorKind(str, Enum):
    """Closed set of wallet failure kinds."""

    PRIVATE_KEY_MISSING = "private_key_missing"
    KEY_MISSING = "key_missing"
    KEY_ID_MISSING = "key_id_missing"
    UNDEFINED_ALGORITHM = "undefined_algorithm"


_MESSAGES = {
    WalletErrorKind.PRIVATE_KEY_MISSING: "Private key is missing",
    WalletErrorKind.KEY_MISSING: "Key is missing",
    WalletErrorKind.KEY_ID_MISSING: "Key ID did not match",
    WalletErrorKind.UNDEFINED_ALGORITHM: "Algorithm is not supported",
}


class WalletError(Exception):
    """Signing or verification failure the caller should turn into a rejection.

    Callers branch on :attr:`kind` rather than on subclasses::

        try:
            claims = await wallet.verify_token(token, "api")
        except WalletError as err:
            if err.kind is WalletErrorKind.KEY_MISSING:
                ...

    ``key_id`` names the offending key where one is known. ``detail`` adds
    non-secret context such as an algorithm name. Neither ever carries key
    material.
    """

    def __init__(
        self,
        kind: WalletErrorKind,
        key_id: Optional[str] = None,
        detail: Optional[str] = None,
    ) -> None:
        self.kind = kind
        self.key_id = key_id
        self.detail = detail
        super().__init__(self._format())

    def _format(self) -> str:
        message = _MESSAGES[self.kind]
        if self.key_id:
            message = f"{message} for kid {self.key_id}"
        if self.detail:
            message = f"{message}: {self.detail}"
        return message


__all__ = ["WalletError", "WalletErrorKind"]
