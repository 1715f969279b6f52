"""
Stellar XDR Codec Module

Primitive XDR encoding and decoding shared by every typed model in
stellar_client.xdr.

Key components:
- writer.py: XdrWriter, big-endian integers, padded opaque data, arrays, optionals
- reader.py: XdrReader, cursor-based decoding with EOF, boolean and padding checks
- hashes.py: SHA-256 helpers
"""

from .hashes import sha256_bytes, sha256_hex
from .reader import XdrReader
from .writer import XdrWriter

__all__ = [
    "XdrReader",
    "XdrWriter",
    "sha256_bytes",
    "sha256_hex",
]
