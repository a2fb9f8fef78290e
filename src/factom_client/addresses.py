"""
Factom human-readable addresses.

Addresses are base58-check strings of ``prefix(2) || key(32) || checksum(4)``
where the checksum is the first 4 bytes of SHA-256d over prefix and key.
The two leading characters identify the kind:

- ``EC`` public Entry Credit address, key = Ed25519 public key
- ``Es`` private Entry Credit address, key = Ed25519 seed
- ``FA`` public Factoid address, key = RCD hash (SHA-256d of the RCD)
- ``Fs`` private Factoid address, key = Ed25519 seed

Text is parsed once into an ``Address`` value; the rest of the package works
on ``Address.kind`` and never re-inspects prefixes.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Union

import base58

from .codec.hashes import sha256d
from .constants import RCD_TYPE_1
from .crypto.ed25519 import Ed25519KeyPair
from .runtime.errors import InvalidAddress

ADDRESS_LENGTH = 52
KEY_SIZE = 32
CHECKSUM_SIZE = 4


class AddressKind(Enum):
    """Address kinds keyed by their human-readable prefix."""

    EC_PUBLIC = "EC"
    EC_PRIVATE = "Es"
    FCT_PUBLIC = "FA"
    FCT_PRIVATE = "Fs"

    @property
    def prefix_bytes(self) -> bytes:
        return _PREFIX_BYTES[self]

    @property
    def is_private(self) -> bool:
        return self in (AddressKind.EC_PRIVATE, AddressKind.FCT_PRIVATE)

    @property
    def is_entry_credit(self) -> bool:
        return self in (AddressKind.EC_PUBLIC, AddressKind.EC_PRIVATE)


_PREFIX_BYTES = {
    AddressKind.EC_PUBLIC: bytes([0x59, 0x2A]),
    AddressKind.EC_PRIVATE: bytes([0x5D, 0xB6]),
    AddressKind.FCT_PUBLIC: bytes([0x5F, 0xB1]),
    AddressKind.FCT_PRIVATE: bytes([0x64, 0x78]),
}


@dataclass(frozen=True)
class Address:
    """
    A decoded Factom address.

    ``key`` holds the 32 bytes between prefix and checksum: public key for
    ``EC``, RCD hash for ``FA``, seed for ``Es``/``Fs``.
    """

    kind: AddressKind
    key: bytes
    text: str

    @classmethod
    def parse(cls, address: Union[str, Address]) -> Address:
        return parse_address(address)

    @property
    def is_private(self) -> bool:
        return self.kind.is_private

    @property
    def is_public(self) -> bool:
        return not self.kind.is_private

    @property
    def is_entry_credit(self) -> bool:
        return self.kind.is_entry_credit

    @property
    def is_factoid(self) -> bool:
        return not self.kind.is_entry_credit

    def key_pair(self) -> Ed25519KeyPair:
        """Signing key pair of a private address."""
        if not self.is_private:
            raise InvalidAddress(f"{self.text} is not a private address")
        return Ed25519KeyPair(self.key)

    def public(self) -> Address:
        """Public counterpart of this address (itself if already public)."""
        if self.is_public:
            return self
        public_key = self.key_pair().public_key_bytes()
        if self.kind is AddressKind.EC_PRIVATE:
            return parse_address(key_to_public_ec_address(public_key))
        return parse_address(key_to_public_fct_address(public_key))

    def __str__(self) -> str:
        return self.text


def _encode(kind: AddressKind, key: bytes) -> str:
    if len(key) != KEY_SIZE:
        raise InvalidAddress(f"Address key must be 32 bytes, got {len(key)}")
    payload = kind.prefix_bytes + bytes(key)
    checksum = sha256d(payload)[:CHECKSUM_SIZE]
    return base58.b58encode(payload + checksum).decode("ascii")


def parse_address(address: Union[str, Address]) -> Address:
    """
    Decode a human-readable address.

    Args:
        address: Address text (an already parsed Address is returned as-is)

    Returns:
        Parsed Address

    Raises:
        InvalidAddress: If the text is not a valid Factom address
    """
    if isinstance(address, Address):
        return address
    if not isinstance(address, str) or len(address) != ADDRESS_LENGTH:
        raise InvalidAddress(f"Invalid address {address!r}")

    try:
        kind = AddressKind(address[:2])
    except ValueError:
        raise InvalidAddress(f"Invalid address prefix {address[:2]!r} in {address}") from None

    try:
        raw = base58.b58decode(address)
    except ValueError as e:
        raise InvalidAddress(f"Invalid address {address}", cause=e) from e

    if len(raw) != 2 + KEY_SIZE + CHECKSUM_SIZE or raw[:2] != kind.prefix_bytes:
        raise InvalidAddress(f"Invalid address {address}")
    if sha256d(raw[:2 + KEY_SIZE])[:CHECKSUM_SIZE] != raw[2 + KEY_SIZE:]:
        raise InvalidAddress(f"Invalid address checksum {address}")

    return Address(kind=kind, key=raw[2:2 + KEY_SIZE], text=address)


def _is_kind(address, *kinds: AddressKind) -> bool:
    try:
        return parse_address(address).kind in kinds
    except InvalidAddress:
        return False


def is_valid_address(address) -> bool:
    return _is_kind(address, *AddressKind)


def is_valid_ec_address(address) -> bool:
    return _is_kind(address, AddressKind.EC_PUBLIC, AddressKind.EC_PRIVATE)


def is_valid_ec_public_address(address) -> bool:
    return _is_kind(address, AddressKind.EC_PUBLIC)


def is_valid_ec_private_address(address) -> bool:
    return _is_kind(address, AddressKind.EC_PRIVATE)


def is_valid_fct_address(address) -> bool:
    return _is_kind(address, AddressKind.FCT_PUBLIC, AddressKind.FCT_PRIVATE)


def is_valid_fct_public_address(address) -> bool:
    return _is_kind(address, AddressKind.FCT_PUBLIC)


def is_valid_fct_private_address(address) -> bool:
    return _is_kind(address, AddressKind.FCT_PRIVATE)


def is_valid_public_address(address) -> bool:
    return _is_kind(address, AddressKind.EC_PUBLIC, AddressKind.FCT_PUBLIC)


def is_valid_private_address(address) -> bool:
    return _is_kind(address, AddressKind.EC_PRIVATE, AddressKind.FCT_PRIVATE)


def get_public_address(address: Union[str, Address]) -> str:
    """Public address text of any address (derives it from a private one)."""
    return parse_address(address).public().text


def address_to_key(address: Union[str, Address]) -> bytes:
    """
    Extract the cryptographic key of an address.

    Returns the public key of an ``EC`` address or the seed of a private one.
    A public Factoid address only embeds an RCD hash, not a key.

    Raises:
        InvalidAddress: For ``FA`` addresses or undecodable text
    """
    parsed = parse_address(address)
    if parsed.kind is AddressKind.FCT_PUBLIC:
        raise InvalidAddress(f"No key can be extracted from public Factoid address {parsed.text}")
    return parsed.key


def address_to_rcd_hash(address: Union[str, Address]) -> bytes:
    """RCD hash of a Factoid address (derived from the seed for ``Fs``)."""
    parsed = parse_address(address)
    if not parsed.is_factoid:
        raise InvalidAddress(f"{parsed.text} is not a Factoid address")
    return parsed.public().key


def rcd1_from_public_key(public_key: bytes) -> bytes:
    """RCD type 1: ``0x01 || public key``."""
    return bytes([RCD_TYPE_1]) + bytes(public_key)


def key_to_public_ec_address(public_key: bytes) -> str:
    return _encode(AddressKind.EC_PUBLIC, public_key)


def key_to_private_ec_address(seed: bytes) -> str:
    return _encode(AddressKind.EC_PRIVATE, seed)


def key_to_public_fct_address(public_key: bytes) -> str:
    return rcd_hash_to_public_fct_address(sha256d(rcd1_from_public_key(public_key)))


def rcd_hash_to_public_fct_address(rcd_hash: bytes) -> str:
    return _encode(AddressKind.FCT_PUBLIC, rcd_hash)


def key_to_private_fct_address(seed: bytes) -> str:
    return _encode(AddressKind.FCT_PRIVATE, seed)


__all__ = [
    "Address",
    "AddressKind",
    "parse_address",
    "is_valid_address",
    "is_valid_ec_address",
    "is_valid_ec_public_address",
    "is_valid_ec_private_address",
    "is_valid_fct_address",
    "is_valid_fct_public_address",
    "is_valid_fct_private_address",
    "is_valid_public_address",
    "is_valid_private_address",
    "get_public_address",
    "address_to_key",
    "address_to_rcd_hash",
    "rcd1_from_public_key",
    "key_to_public_ec_address",
    "key_to_private_ec_address",
    "key_to_public_fct_address",
    "rcd_hash_to_public_fct_address",
    "key_to_private_fct_address",
]
