"""
Hash Functions

SHA-256, double SHA-256 and SHA-512 over arbitrary byte strings, as used by
entry hashes, chain ids, commit welds and RCD hashes.
"""

import hashlib


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of input bytes.

    Args:
        data: Input bytes to hash

    Returns:
        SHA-256 hash as bytes (32 bytes)
    """
    return hashlib.sha256(data).digest()


def sha256d(data: bytes) -> bytes:
    """
    Compute SHA-256 applied twice.

    Args:
        data: Input bytes to hash

    Returns:
        SHA-256(SHA-256(data)) as bytes (32 bytes)
    """
    return sha256(sha256(data))


def sha512(data: bytes) -> bytes:
    """
    Compute SHA-512 hash of input bytes.

    Args:
        data: Input bytes to hash

    Returns:
        SHA-512 hash as bytes (64 bytes)
    """
    return hashlib.sha512(data).digest()
