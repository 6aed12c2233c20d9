"""Sealed-box encryption of Actions secret values.

GitHub publishes a Curve25519 public key per repository; secret values are
sealed to it with libsodium's anonymous sealed box before upload, so only
GitHub can open them.
"""

from __future__ import annotations

import base64
import binascii
import typing as typ

from nacl.exceptions import CryptoError
from nacl.public import PublicKey, SealedBox


class SecretSealingError(ValueError):
    """Raised when a secret cannot be sealed under the supplied key."""


class SecretSealer(typ.Protocol):
    """Callable that seals ``plaintext`` under a base64 public key."""

    def __call__(self, public_key_b64: str, plaintext: str) -> str:
        """Return the base64 ciphertext."""
        ...


def seal_secret(public_key_b64: str, plaintext: str) -> str:
    """Seal ``plaintext`` for the holder of ``public_key_b64``.

    Parameters
    ----------
    public_key_b64
        Base64-encoded Curve25519 public key from the secrets public-key
        endpoint.
    plaintext
        Secret value; encoded as UTF-8 before sealing.

    Returns
    -------
    str
        Base64-encoded sealed box.

    Raises
    ------
    SecretSealingError
        If the key is not valid base64 or not a 32-byte Curve25519 key.

    """
    try:
        key = PublicKey(base64.b64decode(public_key_b64, validate=True))
        sealed = SealedBox(key).encrypt(plaintext.encode("utf-8"))
    except (binascii.Error, CryptoError, ValueError, TypeError) as exc:
        msg = f"cannot seal secret with repository public key: {exc}"
        raise SecretSealingError(msg) from exc
    return base64.b64encode(sealed).decode("ascii")
