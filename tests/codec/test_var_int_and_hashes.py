"""
Test VarInt_F encoding, binary reader/writer and hash helpers.
"""

import hashlib
import pytest

from factom_client.codec import (
    BinaryReader,
    BinaryWriter,
    decode_var_int,
    encode_var_int,
    sha256,
    sha256d,
    sha512,
)


class TestVarInt:
    """Test the VarInt_F scheme."""

    @pytest.mark.parametrize("value,expected", [
        (0, [0]),
        (3, [3]),
        (127, [127]),
        (128, [129, 0]),
        (130, [129, 2]),
        (65535, [131, 255, 127]),
        (65536, [132, 128, 0]),
        (2 ** 32 - 1, [143, 255, 255, 255, 127]),
        (2 ** 32, [144, 128, 128, 128, 0]),
        (2 ** 64 - 1, [129] + [255] * 8 + [127]),
    ])
    def test_encode_known_values(self, value, expected):
        """Test encoding against known VarInt_F outputs."""
        assert encode_var_int(value) == bytes(expected)

    def test_encode_decimal_string(self):
        """Test that decimal strings are accepted for 64-bit values."""
        assert encode_var_int("18446744073709551615") == encode_var_int(2 ** 64 - 1)

    @pytest.mark.parametrize("value", [-1, 2 ** 64, True])
    def test_encode_rejects_out_of_range(self, value):
        """Test that negative, oversized and boolean values are rejected."""
        with pytest.raises(ValueError):
            encode_var_int(value)

    def test_decode_reports_consumed_bytes(self):
        """Test decoding at an offset inside a larger buffer."""
        data = b"\xff" + bytes([131, 255, 127]) + b"\x00"
        assert decode_var_int(data, 1) == (65535, 3)

    def test_decode_truncated(self):
        """Test that a missing terminating byte is detected."""
        with pytest.raises(IndexError):
            decode_var_int(bytes([129, 128]))


class TestBinaryWriterReader:
    """Test fixed-width integers and length-prefixed bytes."""

    def test_writer_layout(self):
        """Test the byte layout produced by the writer."""
        writer = BinaryWriter()
        writer.u8(0)
        writer.u48be(1523151053000)
        writer.u16be(4)
        writer.u16_prefixed_bytes(b"test")
        writer.var_int(130)

        assert writer.to_bytes().hex() == "00" + "0162a2e0a0c8" + "0004" + "000474657374" + "8102"
        assert len(writer) == 17

    @pytest.mark.parametrize("method,value", [
        ("u8", 256),
        ("u16be", 65536),
        ("u48be", 1 << 48),
        ("u8", -1),
    ])
    def test_writer_range_checks(self, method, value):
        """Test that values outside the field width are rejected."""
        with pytest.raises(ValueError):
            getattr(BinaryWriter(), method)(value)

    def test_reader_sequence(self):
        """Test reading back what the writer produced."""
        writer = BinaryWriter()
        writer.u8(2)
        writer.u48be(1521693377958)
        writer.u16_prefixed_bytes(b"abc")
        writer.var_int(14000000)
        writer.bytes(b"tail")

        reader = BinaryReader(writer.to_bytes())
        assert reader.u8() == 2
        assert reader.u48be() == 1521693377958
        assert reader.u16_prefixed_bytes() == b"abc"
        assert reader.var_int() == 14000000
        assert not reader.eof
        assert reader.rest() == b"tail"
        assert reader.eof

    def test_reader_overflow(self):
        """Test that reading past the end raises IndexError."""
        reader = BinaryReader(b"\x00\x05ab")
        with pytest.raises(IndexError):
            reader.u16_prefixed_bytes()


class TestHashes:
    """Test hash helpers."""

    def test_sha256(self):
        assert sha256(b"test") == hashlib.sha256(b"test").digest()

    def test_sha256d(self):
        assert sha256d(b"test") == hashlib.sha256(hashlib.sha256(b"test").digest()).digest()

    def test_sha512(self):
        assert sha512(b"test") == hashlib.sha512(b"test").digest()
        assert len(sha512(b"")) == 64
