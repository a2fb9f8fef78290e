"""
Commit and reveal composition for Entries and Chains.

A commit pays for a write: a ledger buffer referencing the Entry hash,
signed with an Entry Credit key. The reveal is the marshalled Entry itself.

Entry commit ledger (40 bytes)::

    0x00 || timestamp(6, BE ms) || entry_hash(32) || ec_cost(1)

Chain commit ledger (104 bytes)::

    0x00 || timestamp(6, BE ms) || SHA256d(chain_id)(32)
         || SHA256d(entry_hash || chain_id)(32) || entry_hash(32)
         || ec_cost + 10 (1)

Commit wire payload: ``ledger || public_key(32) || signature(64)``.

When the Entry carries no timestamp the current time is used each time a
ledger is composed, so an external signature can only be verified against a
ledger built from an Entry with a fixed timestamp.
"""

from __future__ import annotations
import time
from dataclasses import dataclass
from typing import Optional, Union

from .addresses import AddressKind, parse_address, Address
from .chain import Chain, validate_chain_instance
from .codec.hashes import sha256, sha256d
from .codec.writer import BinaryWriter
from .constants import CHAIN_CREATION_COST, COMMIT_VERSION
from .crypto.ed25519 import verify_ed25519
from .entry import Entry, to_bytes, validate_entry_instance
from .runtime.errors import InvalidAddress, InvalidArgument, InvalidSignature


@dataclass(frozen=True)
class ComposedCommit:
    """Commit and reveal buffers of one Entry or Chain."""

    commit: bytes
    reveal: bytes


def _now_ms() -> int:
    return int(time.time() * 1000)


def _ledger_timestamp(entry: Entry) -> int:
    return entry.timestamp if entry.timestamp is not None else _now_ms()


def compose_entry_ledger(entry: Entry) -> bytes:
    """
    Build the 40-byte entry commit ledger.

    Args:
        entry: Entry with a chain id

    Returns:
        Ledger bytes to sign
    """
    validate_entry_instance(entry)
    writer = BinaryWriter()
    writer.u8(COMMIT_VERSION)
    writer.u48be(_ledger_timestamp(entry))
    writer.bytes(entry.hash())
    writer.u8(entry.ec_cost())
    return writer.to_bytes()


def compose_chain_ledger(chain: Chain) -> bytes:
    """
    Build the 104-byte chain commit ledger.

    Args:
        chain: Chain to commit

    Returns:
        Ledger bytes to sign
    """
    validate_chain_instance(chain)
    first_entry = chain.first_entry
    entry_hash = first_entry.hash()

    writer = BinaryWriter()
    writer.u8(COMMIT_VERSION)
    writer.u48be(_ledger_timestamp(first_entry))
    writer.bytes(sha256d(chain.id))
    writer.bytes(sha256d(entry_hash + chain.id))
    writer.bytes(entry_hash)
    writer.u8(first_entry.ec_cost() + CHAIN_CREATION_COST)
    return writer.to_bytes()


def compose_commit(ledger: bytes, ec_address: Union[str, Address],
                   signature: Optional[Union[bytes, str]] = None) -> bytes:
    """
    Append public key and signature to a commit ledger.

    Args:
        ledger: Entry or chain commit ledger
        ec_address: Private EC address (signs the ledger) or public EC
            address (``signature`` must be supplied)
        signature: Detached 64-byte signature (bytes or hex) for the public address flow

    Returns:
        Commit payload: ledger || public key || signature

    Raises:
        InvalidAddress: If the address is not an Entry Credit address
        InvalidSignature: If the supplied signature does not verify
    """
    address = parse_address(ec_address)

    if address.kind is AddressKind.EC_PRIVATE:
        key_pair = address.key_pair()
        return bytes(ledger) + key_pair.public_key_bytes() + key_pair.sign(ledger)

    if address.kind is AddressKind.EC_PUBLIC:
        if signature is None:
            raise InvalidArgument(
                f"A signature is required to compose a commit with public address {address.text}"
            )
        signature = to_bytes(signature)
        if not verify_ed25519(address.key, signature, ledger):
            raise InvalidSignature(
                "Invalid signature for the commit, make sure the timestamp of the entry is fixed",
                details={"ec_address": address.text},
            )
        return bytes(ledger) + address.key + signature

    raise InvalidAddress(f"{address.text} is not a valid EC address")


def compose_entry_commit(entry: Entry, ec_address: Union[str, Address],
                         signature: Optional[Union[bytes, str]] = None) -> bytes:
    return compose_commit(compose_entry_ledger(entry), ec_address, signature)


def compose_chain_commit(chain: Chain, ec_address: Union[str, Address],
                         signature: Optional[Union[bytes, str]] = None) -> bytes:
    return compose_commit(compose_chain_ledger(chain), ec_address, signature)


def compose_entry_reveal(entry: Entry) -> bytes:
    validate_entry_instance(entry)
    return entry.marshal_binary()


def compose_chain_reveal(chain: Chain) -> bytes:
    validate_chain_instance(chain)
    return chain.first_entry.marshal_binary()


def compose_entry(entry: Entry, ec_address: Union[str, Address],
                  signature: Optional[Union[bytes, str]] = None) -> ComposedCommit:
    """Compose both the commit and the reveal of an Entry."""
    return ComposedCommit(
        commit=compose_entry_commit(entry, ec_address, signature),
        reveal=compose_entry_reveal(entry),
    )


def compose_chain(chain: Chain, ec_address: Union[str, Address],
                  signature: Optional[Union[bytes, str]] = None) -> ComposedCommit:
    """Compose both the commit and the reveal of a Chain."""
    return ComposedCommit(
        commit=compose_chain_commit(chain, ec_address, signature),
        reveal=compose_chain_reveal(chain),
    )


def compute_entry_tx_id(entry: Entry) -> bytes:
    """Commit transaction id of an Entry: SHA-256 of its ledger."""
    return sha256(compose_entry_ledger(entry))


def compute_chain_tx_id(chain: Chain) -> bytes:
    """Commit transaction id of a Chain: SHA-256 of its ledger."""
    return sha256(compose_chain_ledger(chain))


def compose_ledger(obj: Union[Entry, Chain]) -> bytes:
    """Ledger of an Entry or a Chain."""
    if isinstance(obj, Chain):
        return compose_chain_ledger(obj)
    if isinstance(obj, Entry):
        return compose_entry_ledger(obj)
    raise InvalidArgument("Argument must be an instance of Entry or Chain")


def compose_reveal(obj: Union[Entry, Chain]) -> bytes:
    """Reveal of an Entry or a Chain."""
    if isinstance(obj, Chain):
        return compose_chain_reveal(obj)
    if isinstance(obj, Entry):
        return compose_entry_reveal(obj)
    raise InvalidArgument("Argument must be an instance of Entry or Chain")


def compute_tx_id(obj: Union[Entry, Chain]) -> bytes:
    return sha256(compose_ledger(obj))


__all__ = [
    "ComposedCommit",
    "compose_entry_ledger",
    "compose_chain_ledger",
    "compose_ledger",
    "compose_commit",
    "compose_entry_commit",
    "compose_chain_commit",
    "compose_entry_reveal",
    "compose_chain_reveal",
    "compose_reveal",
    "compose_entry",
    "compose_chain",
    "compute_entry_tx_id",
    "compute_chain_tx_id",
    "compute_tx_id",
]
