"""Shared registry of public key records."""

from __future__ import annotations

from typing import Optional

from ..config import WalletConfig
from .base import KeyRecordExistsError, KeyRegistry
from .inmemory import InMemoryKeyRegistry
from .models import KeyRecord
from .sqlite import SQLiteKeyRegistry


def get_registry(config: WalletConfig, backend: Optional[str] = None) -> KeyRegistry:
    """Factory function to obtain the configured key registry.

    ``backend`` overrides ``config.registry.backend`` when given.
    """

    registry_conf = config.registry
    backend = (backend or registry_conf.backend).lower()

    if backend == "inmemory":
        return InMemoryKeyRegistry()
    elif backend == "sqlite":
        return SQLiteKeyRegistry(
            registry_conf.sqlite_path, timeout=registry_conf.request_timeout_seconds
        )
    elif backend == "kubernetes":
        from .kubernetes import KubernetesKeyRegistry

        return KubernetesKeyRegistry(
            in_cluster=registry_conf.in_cluster,
            request_timeout=registry_conf.request_timeout_seconds,
        )
    else:
        raise ValueError(f"Unsupported registry backend: {backend}")


__all__ = [
    "KeyRecord",
    "KeyRecordExistsError",
    "KeyRegistry",
    "InMemoryKeyRegistry",
    "SQLiteKeyRegistry",
    "get_registry",
]
