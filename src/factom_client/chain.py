"""
Factom Chain identity.

A Chain is the first Entry of a new chain together with the chain id derived
from that Entry's external ids. The id is always derived, never supplied:
any chain id set on the source Entry is replaced.
"""

from __future__ import annotations
from typing import Any, Dict, Union

from .codec.hashes import sha256
from .constants import CHAIN_CREATION_COST
from .entry import Entry
from .runtime.errors import EmptyExtIds, InvalidArgument


def compute_chain_id(first_entry: Entry) -> bytes:
    """
    Derive a chain id from the first Entry of the chain.

    ``SHA-256(SHA-256(ext_id_0) || SHA-256(ext_id_1) || ...)``

    Args:
        first_entry: First Entry of the chain

    Returns:
        32-byte chain id

    Raises:
        EmptyExtIds: If the Entry has no external ids
    """
    if len(first_entry.ext_ids) == 0:
        raise EmptyExtIds("First entry of a chain must contain at least 1 external id")
    return sha256(b"".join(sha256(ext_id) for ext_id in first_entry.ext_ids))


class Chain:
    """
    Immutable Chain built from its first Entry.

    ``Chain(entry)`` derives the id and rewrites the Entry's chain id;
    ``Chain(chain)`` copies an existing Chain.
    """

    __slots__ = ("_id", "_first_entry")

    def __init__(self, source: Union[Entry, Chain]):
        if isinstance(source, Chain):
            first_entry = source.first_entry
        elif isinstance(source, Entry):
            first_entry = source
        else:
            raise InvalidArgument("Argument of Chain must be an instance of Entry or Chain")

        chain_id = compute_chain_id(first_entry)
        object.__setattr__(self, "_id", chain_id)
        object.__setattr__(
            self,
            "_first_entry",
            Entry.builder(first_entry).chain_id(chain_id).build(),
        )

    def __setattr__(self, name, value):
        raise AttributeError("Chain is immutable")

    @property
    def id(self) -> bytes:
        return self._id

    @property
    def id_hex(self) -> str:
        return self._id.hex()

    @property
    def first_entry(self) -> Entry:
        return self._first_entry

    def ec_cost(self) -> int:
        """Chain creation cost plus the EC cost of the first Entry."""
        return CHAIN_CREATION_COST + self._first_entry.ec_cost()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id_hex,
            "firstentry": self._first_entry.to_dict(),
        }

    def __eq__(self, other) -> bool:
        if not isinstance(other, Chain):
            return NotImplemented
        return self._first_entry == other._first_entry

    def __hash__(self) -> int:
        return hash(self._first_entry)

    def __repr__(self) -> str:
        return f"Chain(id={self.id_hex})"


def validate_chain_instance(chain: Any) -> None:
    if not isinstance(chain, Chain):
        raise InvalidArgument("Argument must be an instance of Chain")


__all__ = [
    "Chain",
    "compute_chain_id",
    "validate_chain_instance",
]
