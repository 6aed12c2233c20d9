"""Unit tests for sealed-box secret encryption."""

from __future__ import annotations

import base64

import pytest
from nacl.public import PrivateKey, SealedBox

from fleetsync.sealing import SecretSealingError, seal_secret


def _b64(raw: bytes) -> str:
    return base64.b64encode(raw).decode("ascii")


def test_sealed_value_opens_with_private_key() -> None:
    """Only the key holder can recover the plaintext."""
    private_key = PrivateKey.generate()
    public_key_b64 = _b64(bytes(private_key.public_key))

    sealed = seal_secret(public_key_b64, "s3cr3t-ü")

    opened = SealedBox(private_key).decrypt(base64.b64decode(sealed))
    assert opened.decode("utf-8") == "s3cr3t-ü"


def test_sealing_is_randomised() -> None:
    """Sealed boxes use an ephemeral key, so repeat seals differ."""
    public_key_b64 = _b64(bytes(PrivateKey.generate().public_key))

    assert seal_secret(public_key_b64, "x") != seal_secret(public_key_b64, "x")


@pytest.mark.parametrize(
    "public_key_b64",
    ["not base64!", _b64(b"too short")],
    ids=["invalid-base64", "wrong-length"],
)
def test_invalid_public_key_raises(public_key_b64: str) -> None:
    """Malformed keys raise SecretSealingError."""
    with pytest.raises(SecretSealingError, match="cannot seal secret"):
        seal_secret(public_key_b64, "value")
