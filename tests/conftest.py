import time

import pytest

from jwtwallet.config import WalletConfig
from jwtwallet.registry import InMemoryKeyRegistry


class FakeClock:
    """Manually advanced clock.

    Starts in the past so tokens signed against it are already valid for
    PyJWT, which checks ``nbf``/``iat`` against the real time.
    """

    def __init__(self, start: float | None = None) -> None:
        self.value = start if start is not None else time.time() - 1000

    def __call__(self) -> float:
        return self.value

    def advance(self, seconds: float) -> None:
        self.value += seconds


class RecordingRegistry(InMemoryKeyRegistry):
    """In-memory registry that counts calls and can be told to fail."""

    def __init__(self) -> None:
        super().__init__()
        self.create_calls = 0
        self.fetch_calls = 0
        self.create_error: Exception | None = None
        self.fetch_error: Exception | None = None

    async def create(self, record):
        self.create_calls += 1
        if self.create_error is not None:
            raise self.create_error
        await super().create(record)

    async def fetch(self, namespace, key_id):
        self.fetch_calls += 1
        if self.fetch_error is not None:
            raise self.fetch_error
        return await super().fetch(namespace, key_id)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def registry():
    return RecordingRegistry()


@pytest.fixture
def config():
    return WalletConfig(
        issuer="test-issuer",
        namespace="test-namespace",
        algorithm="ES256",
        key_expiration_seconds=3600,
        key_rotation_interval_seconds=300,
    )
