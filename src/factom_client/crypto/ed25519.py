"""
Ed25519 signing for Factom addresses.

A private address (``Es``/``Fs``) carries the 32-byte RFC 8032 seed; the
matching public address carries the raw 32-byte public key (EC) or the hash
of an RCD built from it (FA).
"""

from __future__ import annotations
from typing import Union

from cryptography.exceptions import InvalidSignature as CryptoInvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey, Ed25519PublicKey
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from ..constants import SIGNATURE_SIZE

PUBLIC_KEY_SIZE = 32
SEED_SIZE = 32


class Ed25519KeyPair:
    """Signing key pair of a private Factom address."""

    def __init__(self, seed: bytes):
        if len(seed) != SEED_SIZE:
            raise ValueError(f"Ed25519 seed must be {SEED_SIZE} bytes, got {len(seed)}")

        self._signer = Ed25519PrivateKey.from_private_bytes(bytes(seed))
        self._public_key = self._signer.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)

    @classmethod
    def from_seed(cls, seed: Union[str, bytes]) -> Ed25519KeyPair:
        """Key pair from a seed given as bytes or 64 hex characters."""
        return cls(bytes.fromhex(seed) if isinstance(seed, str) else seed)

    def public_key_bytes(self) -> bytes:
        return self._public_key

    def sign(self, message: bytes) -> bytes:
        """Detached 64-byte signature of message."""
        return self._signer.sign(bytes(message))

    def __repr__(self) -> str:
        return f"Ed25519KeyPair(public={self._public_key.hex()})"


def verify_ed25519(public_key: bytes, signature: bytes, message: bytes) -> bool:
    """
    Check a detached signature.

    Malformed keys or signatures of the wrong size do not verify rather
    than raise.

    Args:
        public_key: 32-byte Ed25519 public key
        signature: 64-byte signature
        message: Signed bytes

    Returns:
        True if the signature is valid for message under public_key
    """
    if len(public_key) != PUBLIC_KEY_SIZE or len(signature) != SIGNATURE_SIZE:
        return False
    try:
        Ed25519PublicKey.from_public_bytes(bytes(public_key)).verify(bytes(signature), bytes(message))
    except (CryptoInvalidSignature, ValueError):
        return False
    return True


__all__ = [
    "Ed25519KeyPair",
    "verify_ed25519",
    "PUBLIC_KEY_SIZE",
    "SEED_SIZE",
]
