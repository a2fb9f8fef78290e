"""
Cryptographic primitives for Factom.

Provides Ed25519 key pairs from address seeds, signing and verification.
"""

from .ed25519 import Ed25519KeyPair, verify_ed25519

__all__ = [
    "Ed25519KeyPair",
    "verify_ed25519",
]
