"""
StrKey text addresses.

A StrKey is base32 (RFC 4648 alphabet, no padding) of
``version_byte || payload || crc16_xmodem(version_byte || payload)`` with the
checksum stored little-endian. Each address kind has its own version byte,
which determines the leading character of the text form.
"""

from __future__ import annotations
import base64
import binascii
import struct
from enum import IntEnum
from typing import Tuple

from ..runtime.errors import ChecksumMismatch, InvalidVersionByte, NonCanonicalStrKey, StrKeyError


class VersionByte(IntEnum):
    """Version bytes of the StrKey address kinds."""

    ACCOUNT_ID = 6 << 3          # G
    MUXED_ACCOUNT = 12 << 3      # M
    CONTRACT = 2 << 3            # C
    SIGNED_PAYLOAD = 15 << 3     # P
    SEED = 18 << 3               # S
    PRE_AUTH_TX = 19 << 3        # T
    SHA256_HASH = 23 << 3        # X


MAX_SIGNED_PAYLOAD_LENGTH = 64


def crc16_xmodem(data: bytes) -> int:
    """
    CRC-16/XMODEM checksum (polynomial 0x1021, initial value 0).

    Args:
        data: Input bytes

    Returns:
        16-bit checksum
    """
    crc = 0
    for byte in data:
        crc ^= byte << 8
        for _ in range(8):
            if crc & 0x8000:
                crc = ((crc << 1) ^ 0x1021) & 0xFFFF
            else:
                crc = (crc << 1) & 0xFFFF
    return crc


def _checksum(data: bytes) -> bytes:
    return struct.pack("<H", crc16_xmodem(data))


def encode_check(version_byte: VersionByte, payload: bytes) -> str:
    """
    Encode a payload as a StrKey.

    Args:
        version_byte: Address kind
        payload: Raw payload bytes

    Returns:
        Base32 text without padding
    """
    data = bytes([int(version_byte)]) + bytes(payload)
    return base64.b32encode(data + _checksum(data)).decode("ascii").rstrip("=")


def decode_check(version_byte: VersionByte, encoded: str) -> bytes:
    """
    Decode a StrKey and return its payload.

    The checksum and the unused trailing bits are verified before the version
    byte, so any single corrupted character reports ChecksumMismatch.

    Args:
        version_byte: Expected address kind
        encoded: StrKey text

    Returns:
        Payload bytes

    Raises:
        StrKeyError: If the text is not canonical unpadded base32
        ChecksumMismatch: If the embedded checksum or the trailing bits are wrong
        InvalidVersionByte: If the address is of another kind
    """
    if not isinstance(encoded, str) or not encoded:
        raise StrKeyError("StrKey must be a non-empty string")
    if "=" in encoded:
        raise StrKeyError("StrKey must not contain base32 padding")
    try:
        decoded = base64.b32decode(encoded + "=" * (-len(encoded) % 8))
    except (binascii.Error, ValueError) as e:
        raise StrKeyError(f"Invalid base32 in StrKey: {e}") from e
    if len(decoded) < 3:
        raise StrKeyError("StrKey too short")

    data, checksum = decoded[:-2], decoded[-2:]
    expected = _checksum(data)
    if checksum != expected:
        raise ChecksumMismatch(expected, checksum)
    canonical = base64.b32encode(decoded).decode("ascii").rstrip("=")
    if canonical != encoded:
        raise NonCanonicalStrKey(encoded, canonical)
    if data[0] != int(version_byte):
        raise InvalidVersionByte(int(version_byte), data[0])
    return data[1:]


def _decode_fixed(version_byte: VersionByte, encoded: str, size: int) -> bytes:
    payload = decode_check(version_byte, encoded)
    if len(payload) != size:
        raise StrKeyError(f"{version_byte.name} payload must be {size} bytes, got {len(payload)}")
    return payload


def _encode_fixed(version_byte: VersionByte, data: bytes, size: int) -> str:
    if len(data) != size:
        raise StrKeyError(f"{version_byte.name} payload must be {size} bytes, got {len(data)}")
    return encode_check(version_byte, data)


def encode_account_id(public_key: bytes) -> str:
    """Encode a 32-byte Ed25519 public key as a G... address."""
    return _encode_fixed(VersionByte.ACCOUNT_ID, public_key, 32)


def decode_account_id(address: str) -> bytes:
    """Decode a G... address to its 32-byte Ed25519 public key."""
    return _decode_fixed(VersionByte.ACCOUNT_ID, address, 32)


def encode_seed(seed: bytes) -> str:
    """Encode a 32-byte Ed25519 seed as an S... secret."""
    return _encode_fixed(VersionByte.SEED, seed, 32)


def decode_seed(secret: str) -> bytes:
    """Decode an S... secret to its 32-byte Ed25519 seed."""
    return _decode_fixed(VersionByte.SEED, secret, 32)


def encode_contract_id(contract_id: bytes) -> str:
    """Encode a 32-byte contract hash as a C... address."""
    return _encode_fixed(VersionByte.CONTRACT, contract_id, 32)


def decode_contract_id(address: str) -> bytes:
    """Decode a C... address to its 32-byte contract hash."""
    return _decode_fixed(VersionByte.CONTRACT, address, 32)


def encode_pre_auth_tx(tx_hash: bytes) -> str:
    return _encode_fixed(VersionByte.PRE_AUTH_TX, tx_hash, 32)


def decode_pre_auth_tx(address: str) -> bytes:
    return _decode_fixed(VersionByte.PRE_AUTH_TX, address, 32)


def encode_sha256_hash(hash_x: bytes) -> str:
    return _encode_fixed(VersionByte.SHA256_HASH, hash_x, 32)


def decode_sha256_hash(address: str) -> bytes:
    return _decode_fixed(VersionByte.SHA256_HASH, address, 32)


def encode_muxed_account(public_key: bytes, muxed_id: int) -> str:
    """
    Encode a muxed account as an M... address.

    Args:
        public_key: 32-byte Ed25519 public key
        muxed_id: 64-bit unsigned sub-account id

    Returns:
        69-character M... address
    """
    if len(public_key) != 32:
        raise StrKeyError(f"muxed account key must be 32 bytes, got {len(public_key)}")
    if not 0 <= muxed_id < 2 ** 64:
        raise StrKeyError(f"muxed account id out of range: {muxed_id}")
    return encode_check(VersionByte.MUXED_ACCOUNT, public_key + struct.pack(">Q", muxed_id))


def decode_muxed_account(address: str) -> Tuple[bytes, int]:
    """
    Decode an M... address.

    Returns:
        Tuple of (32-byte public key, 64-bit id)
    """
    payload = _decode_fixed(VersionByte.MUXED_ACCOUNT, address, 40)
    return payload[:32], struct.unpack(">Q", payload[32:])[0]


def encode_signed_payload(public_key: bytes, payload: bytes) -> str:
    """
    Encode an Ed25519 signed payload signer as a P... address.

    The StrKey payload is the XDR encoding of the signer: the 32-byte key
    followed by a length-prefixed, zero-padded payload of at most 64 bytes.
    """
    if len(public_key) != 32:
        raise StrKeyError(f"signed payload key must be 32 bytes, got {len(public_key)}")
    if len(payload) > MAX_SIGNED_PAYLOAD_LENGTH:
        raise StrKeyError(f"signed payload exceeds {MAX_SIGNED_PAYLOAD_LENGTH} bytes")
    pad = b"\x00" * (-len(payload) % 4)
    body = public_key + struct.pack(">I", len(payload)) + payload + pad
    return encode_check(VersionByte.SIGNED_PAYLOAD, body)


def decode_signed_payload(address: str) -> Tuple[bytes, bytes]:
    """
    Decode a P... address.

    Returns:
        Tuple of (32-byte public key, payload)
    """
    body = decode_check(VersionByte.SIGNED_PAYLOAD, address)
    if len(body) < 36:
        raise StrKeyError("signed payload StrKey too short")
    public_key = body[:32]
    (length,) = struct.unpack(">I", body[32:36])
    if length > MAX_SIGNED_PAYLOAD_LENGTH:
        raise StrKeyError(f"signed payload exceeds {MAX_SIGNED_PAYLOAD_LENGTH} bytes")
    pad = -length % 4
    if len(body) != 36 + length + pad:
        raise StrKeyError("signed payload length does not match StrKey size")
    if any(body[36 + length:]):
        raise StrKeyError("signed payload padding must be zero")
    return public_key, body[36:36 + length]


def _is_valid(decode, address: str) -> bool:
    try:
        decode(address)
        return True
    except StrKeyError:
        return False


def is_valid_account_id(address: str) -> bool:
    return _is_valid(decode_account_id, address)


def is_valid_muxed_account(address: str) -> bool:
    return _is_valid(decode_muxed_account, address)


def is_valid_contract_id(address: str) -> bool:
    return _is_valid(decode_contract_id, address)


def is_valid_seed(secret: str) -> bool:
    return _is_valid(decode_seed, secret)


def is_valid_signed_payload(address: str) -> bool:
    return _is_valid(decode_signed_payload, address)
