"""Tests for wallet error kinds and messages."""

from jwtwallet.errors import WalletError, WalletErrorKind


def test_messages_per_kind():
    assert str(WalletError(WalletErrorKind.PRIVATE_KEY_MISSING)) == "Private key is missing"
    assert str(WalletError(WalletErrorKind.KEY_MISSING)) == "Key is missing"
    assert str(WalletError(WalletErrorKind.KEY_ID_MISSING)) == "Key ID did not match"
    assert str(WalletError(WalletErrorKind.UNDEFINED_ALGORITHM)) == "Algorithm is not supported"


def test_key_id_and_detail_are_included():
    err = WalletError(WalletErrorKind.KEY_MISSING, key_id="kid-1")
    assert err.kind is WalletErrorKind.KEY_MISSING
    assert err.key_id == "kid-1"
    assert str(err) == "Key is missing for kid kid-1"

    err = WalletError(WalletErrorKind.UNDEFINED_ALGORITHM, detail="HS256")
    assert str(err) == "Algorithm is not supported: HS256"


def test_every_kind_has_a_message():
    for kind in WalletErrorKind:
        err = WalletError(kind)
        assert isinstance(err, Exception)
        assert str(err)
