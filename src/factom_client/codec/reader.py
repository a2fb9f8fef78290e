"""
Binary Reader for the Factom wire formats.

Decode side of ``writer.py``: used to unmarshal Entries and Factoid
transactions so that decode then re-marshal yields identical bytes.
"""

import builtins
from typing import Tuple


def decode_var_int(data: builtins.bytes, offset: int = 0) -> Tuple[int, int]:
    """
    Decode a VarInt_F integer.

    Args:
        data: Buffer holding the encoded value
        offset: Position of the first encoded byte

    Returns:
        Tuple of (value, number of bytes consumed)

    Raises:
        IndexError: If the buffer ends before the terminating byte
        ValueError: If the value is wider than 64 bits
    """
    value = 0
    pos = offset
    while True:
        if pos >= len(data):
            raise IndexError("Buffer overflow: attempting to read varint beyond end")
        b = data[pos]
        pos += 1
        value = (value << 7) | (b & 0x7F)
        if b < 0x80:
            break

    if value > 0xFFFFFFFFFFFFFFFF:
        raise ValueError("VarInt_F value exceeds 64 bits")

    return value, pos - offset


class BinaryReader:
    """
    Sequential reader over an immutable byte buffer.

    Every read advances the offset; reading past the end raises IndexError.
    """

    def __init__(self, buf: builtins.bytes):
        self._buf = buf
        self._off = 0

    @property
    def eof(self) -> bool:
        """True once every byte has been consumed."""
        return self._off >= len(self._buf)

    @property
    def offset(self) -> int:
        return self._off

    def u8(self) -> int:
        return self.bytes(1)[0]

    def u16be(self) -> int:
        """Read unsigned 16-bit big-endian integer."""
        return int.from_bytes(self.bytes(2), "big")

    def u48be(self) -> int:
        """Read unsigned 48-bit big-endian integer."""
        return int.from_bytes(self.bytes(6), "big")

    def var_int(self) -> int:
        """Read a VarInt_F encoded integer."""
        value, size = decode_var_int(self._buf, self._off)
        self._off += size
        return value

    def bytes(self, n: int) -> builtins.bytes:
        """Read exactly n bytes."""
        if self._off + n > len(self._buf):
            raise IndexError(f"Buffer overflow: attempting to read {n} bytes beyond end")
        out = builtins.bytes(self._buf[self._off : self._off + n])
        self._off += n
        return out

    def u16_prefixed_bytes(self) -> builtins.bytes:
        """
        Read bytes preceded by a 2-byte big-endian length.

        Returns:
            Bytes with length read from the prefix
        """
        n = self.u16be()
        return self.bytes(n)

    def rest(self) -> builtins.bytes:
        """Read every remaining byte."""
        return self.bytes(len(self._buf) - self._off)
