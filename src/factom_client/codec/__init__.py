"""
Factom Binary Codec Module

Low-level helpers shared by the Entry, commit and Factoid transaction
encodings:
- writer.py: Binary writer with big-endian integers and VarInt_F encoding
- reader.py: Binary reader, the decode side used for round-trips
- hashes.py: SHA-256 / SHA-256d / SHA-512 helpers
"""

from .hashes import sha256, sha256d, sha512
from .reader import BinaryReader, decode_var_int
from .writer import BinaryWriter, encode_var_int

__all__ = [
    "BinaryReader",
    "BinaryWriter",
    "decode_var_int",
    "encode_var_int",
    "sha256",
    "sha256d",
    "sha512",
]
