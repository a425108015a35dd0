"""Key generation for signing keypairs."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict

from cryptography.hazmat.primitives.asymmetric import ec, ed25519, rsa
from jwt.algorithms import get_default_algorithms

from .errors import WalletError, WalletErrorKind

RSA_KEY_SIZE = 2048
RSA_PUBLIC_EXPONENT = 65537


def _rsa() -> Any:
    return rsa.generate_private_key(public_exponent=RSA_PUBLIC_EXPONENT, key_size=RSA_KEY_SIZE)


_GENERATORS: Dict[str, Callable[[], Any]] = {
    "ES256": lambda: ec.generate_private_key(ec.SECP256R1()),
    "ES384": lambda: ec.generate_private_key(ec.SECP384R1()),
    "ES512": lambda: ec.generate_private_key(ec.SECP521R1()),
    "RS256": _rsa,
    "RS384": _rsa,
    "RS512": _rsa,
    "PS256": _rsa,
    "PS384": _rsa,
    "PS512": _rsa,
    "EdDSA": ed25519.Ed25519PrivateKey.generate,
}

SUPPORTED_ALGORITHMS = tuple(_GENERATORS)


@dataclass(frozen=True)
class Keypair:
    """A signing identity: one private key, its public half and its ``kid``.

    The private key never leaves the process and is excluded from ``repr``.
    """

    key_id: str
    algorithm: str
    private_key: Any = field(repr=False)
    public_key: Any = field(repr=False)

    def public_jwk(self) -> Dict[str, Any]:
        """Export the public half as a JWK dict."""
        jwk = get_default_algorithms()[self.algorithm].to_jwk(self.public_key, as_dict=True)
        jwk.update({"kid": self.key_id, "alg": self.algorithm, "use": "sig"})
        return jwk


class KeyGenerator:
    """Creates fresh keypairs for a named JWS algorithm."""

    def generate(self, algorithm: str) -> Keypair:
        factory = _GENERATORS.get(algorithm)
        if factory is None:
            raise WalletError(WalletErrorKind.UNDEFINED_ALGORITHM, detail=algorithm)
        private_key = factory()
        return Keypair(
            key_id=str(uuid.uuid4()),
            algorithm=algorithm,
            private_key=private_key,
            public_key=private_key.public_key(),
        )


__all__ = ["Keypair", "KeyGenerator", "SUPPORTED_ALGORITHMS"]
