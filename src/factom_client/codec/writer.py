"""
Binary Writer for the Factom wire formats.

Big-endian fixed-width integers, raw byte runs, 2-byte length prefixes and the
VarInt_F variable-length integer used by Factoid transactions.
"""

from typing import List, Union

MAX_UINT64 = 0xFFFFFFFFFFFFFFFF


def encode_var_int(value: Union[int, str]) -> bytes:
    """
    Encode a non-negative integer with the VarInt_F scheme.

    Seven data bits per byte, most significant group first, with the
    continuation bit (0x80) set on every byte but the last. Values with the
    top bit of their 64-bit representation set start with a 0x81 byte.

    Args:
        value: Integer, or decimal string, in the unsigned 64-bit range

    Returns:
        Encoded bytes (zero encodes as a single 0x00)

    Raises:
        ValueError: If the value is negative or wider than 64 bits
    """
    if isinstance(value, bool):
        raise ValueError("VarInt_F value must be an integer, got bool")
    if isinstance(value, str):
        value = int(value, 10)
    if value < 0 or value > MAX_UINT64:
        raise ValueError(f"VarInt_F value out of unsigned 64-bit range: {value}")

    groups = [value & 0x7F]
    value >>= 7
    while value:
        groups.append((value & 0x7F) | 0x80)
        value >>= 7

    return bytes(reversed(groups))


class BinaryWriter:
    """
    Accumulates bytes for a single marshalled structure.

    Every write appends; ``to_bytes`` returns the immutable result.
    """

    def __init__(self):
        """Initialize writer with empty byte buffer."""
        self._bb: List[int] = []

    def __len__(self) -> int:
        return len(self._bb)

    def u8(self, v: int) -> None:
        """
        Write unsigned 8-bit integer.

        Args:
            v: Integer value to write (0-255)
        """
        if not 0 <= v <= 0xFF:
            raise ValueError(f"u8 value out of range: {v}")
        self._bb.append(v)

    def u16be(self, v: int) -> None:
        """
        Write unsigned 16-bit integer in big-endian format.

        Used for the ext-ids block size and each ext-id length prefix.

        Args:
            v: Integer value to write (0-65535)
        """
        if not 0 <= v <= 0xFFFF:
            raise ValueError(f"u16 value out of range: {v}")
        self._bb.extend(v.to_bytes(2, "big"))

    def u48be(self, v: int) -> None:
        """
        Write unsigned 48-bit integer in big-endian format.

        Millisecond timestamps in commit ledgers and transaction headers
        occupy 6 bytes.

        Args:
            v: Integer value to write
        """
        if not 0 <= v < (1 << 48):
            raise ValueError(f"u48 value out of range: {v}")
        self._bb.extend(v.to_bytes(6, "big"))

    def bytes(self, v: bytes) -> None:
        """
        Write raw bytes without length prefix.

        Args:
            v: Bytes to write directly
        """
        self._bb.extend(v)

    def u16_prefixed_bytes(self, v: bytes) -> None:
        """
        Write bytes preceded by their 2-byte big-endian length.

        Args:
            v: Bytes to write with length prefix
        """
        self.u16be(len(v))
        self.bytes(v)

    def var_int(self, v: Union[int, str]) -> None:
        """
        Write a VarInt_F encoded integer.

        Args:
            v: Unsigned integer value to encode
        """
        self.bytes(encode_var_int(v))

    def to_bytes(self) -> bytes:
        """
        Return accumulated bytes as immutable bytes object.

        Returns:
            Bytes containing all written data
        """
        return bytes(self._bb)
