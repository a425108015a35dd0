from __future__ import annotations

import logging
import os
import warnings
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, model_validator

logger = logging.getLogger(__name__)

DEFAULT_ALGORITHM = "ES256"


class RegistryConfig(BaseModel):
    """Where public key records are published and fetched from."""

    backend: Literal["inmemory", "sqlite", "kubernetes"] = "inmemory"
    sqlite_path: str = "jwtwallet.db"
    in_cluster: bool = False
    request_timeout_seconds: float = Field(default=10, gt=0)


class WalletConfig(BaseModel):
    """Top-level configuration model."""

    issuer: str = "default.issuer"
    namespace: str = "default"
    algorithm: str = DEFAULT_ALGORITHM
    key_expiration_seconds: int = Field(..., gt=0)
    key_rotation_interval_seconds: int = Field(..., gt=0)
    cache_sweep_interval_seconds: float = Field(default=10, gt=0)
    rollback_on_persist_failure: bool = False
    registry: RegistryConfig = RegistryConfig()
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @model_validator(mode="after")
    def _warn_on_short_expiration(self) -> "WalletConfig":
        if self.key_expiration_seconds < self.key_rotation_interval_seconds:
            message = (
                f"key_expiration_seconds ({self.key_expiration_seconds}) is shorter "
                f"than key_rotation_interval_seconds ({self.key_rotation_interval_seconds}); "
                "keys may expire from the registry before the next rotation"
            )
            logger.warning(message)
            warnings.warn(message, UserWarning, stacklevel=2)
        return self


_ENV_OVERRIDES = {
    "JWTWALLET_ISSUER": "issuer",
    "JWTWALLET_NAMESPACE": "namespace",
    "JWTWALLET_ALGORITHM": "algorithm",
    "JWTWALLET_KEY_EXPIRATION_SECONDS": "key_expiration_seconds",
    "JWTWALLET_KEY_ROTATION_INTERVAL_SECONDS": "key_rotation_interval_seconds",
}


def load_config(path: Optional[str] = None) -> WalletConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to JWTWALLET_CONFIG env
            variable or 'jwtwallet.yaml' in the current directory.

    ``JWTWALLET_*`` environment variables override values from the file.
    """

    config_path = path or os.getenv("JWTWALLET_CONFIG", "jwtwallet.yaml")
    data: dict = {}
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

    for env_name, field_name in _ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value:
            data[field_name] = value

    env_registry = os.getenv("JWTWALLET_REGISTRY")
    if env_registry:
        data["registry"] = {**(data.get("registry") or {}), "backend": env_registry}

    return WalletConfig(**data)
