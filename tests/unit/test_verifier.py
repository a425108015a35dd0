"""Tests for token verification and key resolution."""

import time

import jwt
import pytest

from jwtwallet.cache import VerificationCache
from jwtwallet.errors import WalletError, WalletErrorKind
from jwtwallet.keys import KeyGenerator
from jwtwallet.rotation import RotationController
from jwtwallet.signer import TokenSigner
from jwtwallet.verifier import TokenVerifier


class Wallet:
    """Rotation, signer and verifier wired the way the service wires them."""

    def __init__(self, registry, clock):
        self.clock = clock
        self.rotation = RotationController(
            registry,
            issuer="test-issuer",
            namespace="test-namespace",
            algorithm="ES256",
            key_expiration_seconds=3600,
            now=clock,
        )
        self.cache = VerificationCache(now=clock)
        self.signer = TokenSigner(lambda: self.rotation.active_key, "test-issuer", now=clock)
        self.verifier = TokenVerifier(
            lambda: self.rotation.active_key,
            self.cache,
            registry,
            namespace="test-namespace",
            cache_ttl_seconds=3600,
        )

    def sign(self, payload):
        return self.signer.sign(payload, int(time.time()) + 600)


@pytest.mark.asyncio
async def test_fast_path_uses_active_key_only(registry, clock):
    wallet = Wallet(registry, clock)
    await wallet.rotation.rotate()
    token = wallet.sign({"sub": "alice", "aud": "api"})

    claims = await wallet.verifier.verify(token, "api")

    assert claims["sub"] == "alice"
    assert registry.fetch_calls == 0
    assert len(wallet.cache) == 0


@pytest.mark.asyncio
async def test_previous_key_resolved_from_registry_then_cache(registry, clock):
    wallet = Wallet(registry, clock)
    await wallet.rotation.rotate()
    token = wallet.sign({"sub": "alice", "aud": "api"})
    await wallet.rotation.rotate()

    assert (await wallet.verifier.verify(token, "api"))["sub"] == "alice"
    assert registry.fetch_calls == 1

    assert (await wallet.verifier.verify(token, "api"))["sub"] == "alice"
    assert registry.fetch_calls == 1


@pytest.mark.asyncio
async def test_expired_cache_entry_is_refetched(registry, clock):
    wallet = Wallet(registry, clock)
    await wallet.rotation.rotate()
    token = wallet.sign({"aud": "api"})
    old_kid = wallet.rotation.active_key.key_id
    await wallet.rotation.rotate()

    await wallet.verifier.verify(token, "api")
    assert registry.fetch_calls == 1

    clock.advance(3601)
    assert wallet.cache.get(old_kid) is None
    await wallet.verifier.verify(token, "api")
    assert registry.fetch_calls == 2
    assert wallet.cache.get(old_kid) is not None


@pytest.mark.asyncio
async def test_peer_token_verified_through_shared_registry(registry, clock):
    signer_wallet = Wallet(registry, clock)
    verifier_wallet = Wallet(registry, clock)
    await signer_wallet.rotation.rotate()
    await verifier_wallet.rotation.rotate()

    token = signer_wallet.sign({"sub": "bob", "aud": "api"})
    claims = await verifier_wallet.verifier.verify(token, "api")

    assert claims["sub"] == "bob"
    assert claims["iss"] == "test-issuer"
    assert registry.fetch_calls == 1


@pytest.mark.asyncio
async def test_token_without_kid_fails_closed(registry, clock):
    wallet = Wallet(registry, clock)
    keypair = KeyGenerator().generate("ES256")
    token = jwt.encode({"aud": "api"}, keypair.private_key, algorithm="ES256")

    with pytest.raises(WalletError) as excinfo:
        await wallet.verifier.verify(token, "api")

    assert excinfo.value.kind is WalletErrorKind.KEY_ID_MISSING
    assert registry.fetch_calls == 0


@pytest.mark.asyncio
async def test_unknown_kid_fails_with_key_missing(registry, clock):
    wallet = Wallet(registry, clock)
    await wallet.rotation.rotate()
    stranger = KeyGenerator().generate("ES256")
    token = jwt.encode(
        {"aud": "api"}, stranger.private_key, algorithm="ES256", headers={"kid": stranger.key_id}
    )

    with pytest.raises(WalletError) as excinfo:
        await wallet.verifier.verify(token, "api")

    assert excinfo.value.kind is WalletErrorKind.KEY_MISSING
    assert excinfo.value.key_id == stranger.key_id
    assert registry.fetch_calls == 1


@pytest.mark.asyncio
async def test_registry_errors_propagate_unchanged(registry, clock):
    wallet = Wallet(registry, clock)
    await wallet.rotation.rotate()
    token = wallet.sign({"aud": "api"})
    await wallet.rotation.rotate()

    failure = TimeoutError("registry timed out")
    registry.fetch_error = failure
    with pytest.raises(TimeoutError) as excinfo:
        await wallet.verifier.verify(token, "api")
    assert excinfo.value is failure


@pytest.mark.asyncio
async def test_wrong_audience_is_rejected(registry, clock):
    wallet = Wallet(registry, clock)
    await wallet.rotation.rotate()
    token = wallet.sign({"aud": "api"})

    with pytest.raises(jwt.InvalidAudienceError):
        await wallet.verifier.verify(token, "other-service")


@pytest.mark.asyncio
async def test_expired_token_is_rejected(registry, clock):
    wallet = Wallet(registry, clock)
    await wallet.rotation.rotate()
    token = wallet.signer.sign({"aud": "api"}, int(time.time()) - 10)

    with pytest.raises(jwt.ExpiredSignatureError):
        await wallet.verifier.verify(token, "api")


@pytest.mark.asyncio
async def test_tampered_token_is_rejected(registry, clock):
    wallet = Wallet(registry, clock)
    await wallet.rotation.rotate()
    token = wallet.sign({"aud": "api", "role": "user"})
    header, payload, signature = token.split(".")
    forged = wallet.signer.sign({"aud": "api", "role": "admin"}, int(time.time()) + 600)

    with pytest.raises(jwt.InvalidSignatureError):
        await wallet.verifier.verify(".".join([header, forged.split(".")[1], signature]), "api")
