"""
Cryptographic primitives for the Stellar network.

Provides Ed25519 key pairs, StrKey text addresses and CRC16 checksums.
"""

from . import strkey
from .ed25519 import Ed25519PrivateKey, Ed25519PublicKey
from .keypair import KeyPair
from .strkey import VersionByte, crc16_xmodem

__all__ = [
    "Ed25519PrivateKey",
    "Ed25519PublicKey",
    "KeyPair",
    "VersionByte",
    "crc16_xmodem",
    "strkey",
]
