"""jwtwallet: short-lived JWT signing keys with shared public-key verification."""

from .cache import VerificationCache
from .config import WalletConfig, load_config
from .errors import WalletError, WalletErrorKind
from .keys import KeyGenerator, Keypair
from .registry import KeyRecord, get_registry
from .rotation import RotationController, RotationState
from .service import JwtWalletService
from .signer import TokenSigner
from .verifier import TokenVerifier

__version__ = "0.1.0"
__all__ = [
    "JwtWalletService",
    "WalletConfig",
    "load_config",
    "WalletError",
    "WalletErrorKind",
    "Keypair",
    "KeyGenerator",
    "KeyRecord",
    "get_registry",
    "RotationController",
    "RotationState",
    "VerificationCache",
    "TokenSigner",
    "TokenVerifier",
]
