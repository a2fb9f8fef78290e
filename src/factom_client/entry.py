"""
Factom Entry model.

An Entry is an immutable record appended to a chain. Entries are assembled
with ``EntryBuilder`` and frozen on ``build()``; changing any field means
building a new Entry (``Entry.builder(entry)`` starts from a copy).

Wire format::

    0x00 || chain_id(32) || ext_ids_size(2, BE) || [len(2, BE) || ext_id]* || content
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, List, Tuple, Dict, Any, Union

from .codec.hashes import sha256, sha512
from .codec.reader import BinaryReader
from .codec.writer import BinaryWriter
from .constants import (
    ENTRY_CREDIT_CHUNK,
    ENTRY_HEADER_SIZE,
    ENTRY_VERSION,
    MAX_ENTRY_PAYLOAD_SIZE,
)
from .runtime.errors import InvalidArgument, MissingChainId, SizeLimitExceeded

CHAIN_ID_SIZE = 32

BytesLike = Union[bytes, bytearray, str]


def to_bytes(value: BytesLike, encoding: str = "hex") -> bytes:
    """
    Coerce builder input to bytes.

    Args:
        value: Bytes, or a string decoded with ``encoding``
        encoding: ``hex`` (default) or any Python text codec such as ``utf8``

    Returns:
        Raw bytes

    Raises:
        InvalidArgument: If the value cannot be decoded
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        try:
            if encoding == "hex":
                return bytes.fromhex(value)
            return value.encode(encoding)
        except (ValueError, LookupError) as e:
            raise InvalidArgument(f"Cannot decode {value!r} as {encoding}", cause=e) from e
    raise InvalidArgument(f"Expected bytes or str, got {type(value).__name__}")


@dataclass(frozen=True)
class EntryBlockContext:
    """Inclusion data of an Entry read back from the blockchain."""

    entry_timestamp: int
    directory_block_height: int
    entry_block_timestamp: int
    entry_block_sequence_number: int
    entry_block_key_mr: str


@dataclass(frozen=True)
class Entry:
    """
    Immutable Factom Entry.

    Attributes:
        chain_id: 32-byte chain id, empty until assigned
        ext_ids: Ordered external ids
        content: Entry content (may be empty)
        timestamp: Milliseconds since epoch used in commits, None means "now"
        block_context: Inclusion metadata of an Entry read from the chain
    """

    chain_id: bytes = b""
    ext_ids: Tuple[bytes, ...] = ()
    content: bytes = b""
    timestamp: Optional[int] = None
    block_context: Optional[EntryBlockContext] = None

    @staticmethod
    def builder(entry: Optional[Entry] = None) -> EntryBuilder:
        """Start a builder, optionally pre-filled with an existing Entry."""
        return EntryBuilder(entry)

    @property
    def chain_id_hex(self) -> str:
        return self.chain_id.hex()

    @property
    def content_hex(self) -> str:
        return self.content.hex()

    @property
    def ext_ids_hex(self) -> List[str]:
        return [ext_id.hex() for ext_id in self.ext_ids]

    def size(self) -> int:
        """Full marshalled size: 35-byte header plus payload."""
        return ENTRY_HEADER_SIZE + self.payload_size()

    def payload_size(self) -> int:
        """Raw data size plus the 2-byte length prefix of every ext id."""
        return self.raw_data_size() + 2 * len(self.ext_ids)

    def raw_data_size(self) -> int:
        return len(self.content) + sum(len(ext_id) for ext_id in self.ext_ids)

    def remaining_free_bytes(self) -> int:
        """Bytes that can still be added without increasing the EC cost."""
        size = self.payload_size()
        if size == 0:
            return ENTRY_CREDIT_CHUNK
        remainder = size % ENTRY_CREDIT_CHUNK
        return ENTRY_CREDIT_CHUNK - remainder if remainder else 0

    def remaining_max_bytes(self) -> int:
        """
        Bytes that can still be added before hitting the payload limit.

        Raises:
            SizeLimitExceeded: If the Entry is already over the limit
        """
        remaining = MAX_ENTRY_PAYLOAD_SIZE - self.payload_size()
        if remaining < 0:
            raise SizeLimitExceeded(
                f"Entry cannot be larger than {MAX_ENTRY_PAYLOAD_SIZE} bytes",
                details={"payload_size": self.payload_size()},
            )
        return remaining

    def ec_cost(self) -> int:
        """
        Entry Credit cost: one EC per started KiB of payload, minimum 1.

        Raises:
            SizeLimitExceeded: If the payload exceeds 10240 bytes
        """
        size = self.payload_size()
        if size > MAX_ENTRY_PAYLOAD_SIZE:
            raise SizeLimitExceeded(
                f"Entry cannot be larger than {MAX_ENTRY_PAYLOAD_SIZE} bytes",
                details={"payload_size": size},
            )
        return max(1, -(-size // ENTRY_CREDIT_CHUNK))

    def marshal_binary(self) -> bytes:
        """
        Serialize the Entry to its wire format.

        Raises:
            MissingChainId: If no chain id has been assigned
        """
        if len(self.chain_id) == 0:
            raise MissingChainId("Chain id is missing to marshal the entry")

        ext_ids = BinaryWriter()
        for ext_id in self.ext_ids:
            ext_ids.u16_prefixed_bytes(ext_id)

        writer = BinaryWriter()
        writer.u8(ENTRY_VERSION)
        writer.bytes(self.chain_id)
        writer.u16be(len(ext_ids))
        writer.bytes(ext_ids.to_bytes())
        writer.bytes(self.content)
        return writer.to_bytes()

    def marshal_binary_hex(self) -> str:
        return self.marshal_binary().hex()

    def hash(self) -> bytes:
        """Entry hash: SHA-256(SHA-512(marshal) || marshal)."""
        data = self.marshal_binary()
        return sha256(sha512(data) + data)

    def hash_hex(self) -> str:
        return self.hash().hex()

    @classmethod
    def unmarshal_binary(cls, data: bytes) -> Entry:
        """
        Decode an Entry from its wire format.

        Args:
            data: Marshalled Entry

        Returns:
            Decoded Entry (without timestamp or block context)

        Raises:
            InvalidArgument: If the buffer is not a well-formed Entry
        """
        reader = BinaryReader(bytes(data))
        try:
            version = reader.u8()
            if version != ENTRY_VERSION:
                raise InvalidArgument(f"Unsupported entry version {version}")
            chain_id = reader.bytes(CHAIN_ID_SIZE)
            ext_ids_reader = BinaryReader(reader.bytes(reader.u16be()))
            ext_ids = []
            while not ext_ids_reader.eof:
                ext_ids.append(ext_ids_reader.u16_prefixed_bytes())
            content = reader.rest()
        except IndexError as e:
            raise InvalidArgument("Truncated entry data", cause=e) from e

        return cls(chain_id=chain_id, ext_ids=tuple(ext_ids), content=content)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to the factomd JSON representation.

        Returns:
            Dictionary with hex ``chainid``, ``extids`` and ``content``
        """
        result = {
            "chainid": self.chain_id_hex,
            "extids": self.ext_ids_hex,
            "content": self.content_hex,
        }
        if self.timestamp is not None:
            result["timestamp"] = self.timestamp
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Entry:
        """Build an Entry from a factomd ``entry`` API result."""
        builder = cls.builder()
        if data.get("chainid"):
            builder.chain_id(data["chainid"])
        builder.ext_ids(data.get("extids") or [])
        builder.content(data.get("content") or "")
        if data.get("timestamp") is not None:
            builder.timestamp(data["timestamp"])
        return builder.build()


class EntryBuilder:
    """
    Mutable builder producing immutable Entries.

    String inputs are decoded as hex unless another encoding is given.
    """

    def __init__(self, entry: Optional[Entry] = None):
        """
        Initialize builder.

        Args:
            entry: Existing Entry to copy fields from
        """
        if entry is not None and not isinstance(entry, Entry):
            raise InvalidArgument("Argument must be an instance of Entry")

        if entry is not None:
            self._chain_id = entry.chain_id
            self._ext_ids = list(entry.ext_ids)
            self._content = entry.content
            self._timestamp = entry.timestamp
            self._block_context = entry.block_context
        else:
            self._chain_id = b""
            self._ext_ids: List[bytes] = []
            self._content = b""
            self._timestamp: Optional[int] = None
            self._block_context: Optional[EntryBlockContext] = None

    def chain_id(self, chain_id: BytesLike, encoding: str = "hex") -> EntryBuilder:
        """Set the 32-byte chain id."""
        if chain_id is not None:
            self._chain_id = to_bytes(chain_id, encoding)
        return self

    def ext_ids(self, ext_ids: List[BytesLike], encoding: str = "hex") -> EntryBuilder:
        """Replace all external ids."""
        if ext_ids is not None:
            self._ext_ids = [to_bytes(ext_id, encoding) for ext_id in ext_ids]
        return self

    def ext_id(self, ext_id: BytesLike, encoding: str = "hex") -> EntryBuilder:
        """Append one external id."""
        if ext_id is not None:
            self._ext_ids.append(to_bytes(ext_id, encoding))
        return self

    def content(self, content: BytesLike, encoding: str = "hex") -> EntryBuilder:
        if content is not None:
            self._content = to_bytes(content, encoding)
        return self

    def timestamp(self, timestamp: Optional[int]) -> EntryBuilder:
        """Fix the commit timestamp (milliseconds since epoch)."""
        self._timestamp = timestamp
        return self

    def entry_block_context(self, block_context: Optional[EntryBlockContext]) -> EntryBuilder:
        self._block_context = block_context
        return self

    def build(self) -> Entry:
        """
        Freeze the builder state into an Entry.

        Raises:
            InvalidArgument: If the chain id is neither empty nor 32 bytes,
                an ext id is longer than 65535 bytes or the timestamp is invalid
        """
        if len(self._chain_id) not in (0, CHAIN_ID_SIZE):
            raise InvalidArgument(
                f"Chain id must be {CHAIN_ID_SIZE} bytes, got {len(self._chain_id)}"
            )
        for ext_id in self._ext_ids:
            if len(ext_id) > 0xFFFF:
                raise InvalidArgument("External id cannot be larger than 65535 bytes")
        if self._timestamp is not None:
            if isinstance(self._timestamp, bool) or not isinstance(self._timestamp, int) \
                    or self._timestamp < 0:
                raise InvalidArgument(f"Invalid timestamp {self._timestamp!r}")

        return Entry(
            chain_id=self._chain_id,
            ext_ids=tuple(self._ext_ids),
            content=self._content,
            timestamp=self._timestamp,
            block_context=self._block_context,
        )


def validate_entry_instance(entry: Any) -> None:
    if not isinstance(entry, Entry):
        raise InvalidArgument("Argument must be an instance of Entry")


__all__ = [
    "Entry",
    "EntryBuilder",
    "EntryBlockContext",
    "to_bytes",
    "validate_entry_instance",
]
