"""
Account and signer keys: AccountId, MuxedAccount, SignerKey.

Each type converts to and from its StrKey text form.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from ..codec.reader import XdrReader
from ..codec.writer import XdrWriter, UINT64_MAX, check_range
from ..crypto import strkey
from ..runtime.errors import InvalidDiscriminant, StrKeyError, XdrRangeError
from .base import XdrType, read_enum
from .enums import ClaimableBalanceIDType, CryptoKeyType, PublicKeyType, SignerKeyType


def check_hash(name: str, value: bytes, size: int = 32) -> bytes:
    """Validate a fixed-size byte string and return it as bytes."""
    if not isinstance(value, (bytes, bytearray)):
        raise XdrRangeError(f"{name} must be bytes, got {type(value).__name__}")
    if len(value) != size:
        raise XdrRangeError(f"{name} must be {size} bytes, got {len(value)}")
    return bytes(value)


@dataclass(frozen=True)
class AccountId(XdrType):
    """An Ed25519 account public key (G... address)."""

    key: bytes

    def __post_init__(self):
        object.__setattr__(self, "key", check_hash("account id", self.key))

    @classmethod
    def from_address(cls, address: str) -> AccountId:
        return cls(strkey.decode_account_id(address))

    @property
    def address(self) -> str:
        return strkey.encode_account_id(self.key)

    def pack(self, w: XdrWriter) -> None:
        w.enum(PublicKeyType.PUBLIC_KEY_TYPE_ED25519)
        w.opaque_fixed(self.key, 32)

    @classmethod
    def unpack(cls, r: XdrReader) -> AccountId:
        read_enum(r, PublicKeyType)
        return cls(r.opaque_fixed(32))

    def __str__(self) -> str:
        return self.address


@dataclass(frozen=True)
class MuxedAccount(XdrType):
    """
    A transaction or operation source / destination.

    With ``id`` set it is a muxed (M...) account, otherwise a plain G...
    account.
    """

    ed25519: bytes
    id: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, "ed25519", check_hash("muxed account key", self.ed25519))
        if self.id is not None:
            check_range("muxed account id", self.id, 0, UINT64_MAX)

    @classmethod
    def from_address(cls, address: str) -> MuxedAccount:
        """
        Parse a G... or M... address.

        Raises:
            StrKeyError: If address is neither
        """
        if address.startswith("M"):
            key, muxed_id = strkey.decode_muxed_account(address)
            return cls(key, muxed_id)
        if address.startswith("G"):
            return cls(strkey.decode_account_id(address))
        raise StrKeyError(f"Expected a G... or M... address, got {address[:1]!r}")

    @classmethod
    def from_account_id(cls, account_id: AccountId) -> MuxedAccount:
        return cls(account_id.key)

    @property
    def address(self) -> str:
        if self.id is None:
            return strkey.encode_account_id(self.ed25519)
        return strkey.encode_muxed_account(self.ed25519, self.id)

    @property
    def account_id(self) -> AccountId:
        """The underlying G... account, dropping any muxed id."""
        return AccountId(self.ed25519)

    @property
    def is_muxed(self) -> bool:
        return self.id is not None

    def pack(self, w: XdrWriter) -> None:
        if self.id is None:
            w.enum(CryptoKeyType.KEY_TYPE_ED25519)
            w.opaque_fixed(self.ed25519, 32)
        else:
            w.enum(CryptoKeyType.KEY_TYPE_MUXED_ED25519)
            w.uint64(self.id)
            w.opaque_fixed(self.ed25519, 32)

    @classmethod
    def unpack(cls, r: XdrReader) -> MuxedAccount:
        key_type = read_enum(r, CryptoKeyType)
        if key_type == CryptoKeyType.KEY_TYPE_ED25519:
            return cls(r.opaque_fixed(32))
        if key_type == CryptoKeyType.KEY_TYPE_MUXED_ED25519:
            muxed_id = r.uint64()
            return cls(r.opaque_fixed(32), muxed_id)
        raise InvalidDiscriminant("MuxedAccount", int(key_type))

    def __str__(self) -> str:
        return self.address


@dataclass(frozen=True)
class SignerKey(XdrType):
    """
    An account signer: ed25519 key, pre-authorized transaction hash,
    sha256 hash-x, or ed25519 signed payload.
    """

    type: SignerKeyType
    key: bytes
    payload: Optional[bytes] = None

    def __post_init__(self):
        object.__setattr__(self, "type", SignerKeyType(self.type))
        object.__setattr__(self, "key", check_hash("signer key", self.key))
        if self.type == SignerKeyType.SIGNER_KEY_TYPE_ED25519_SIGNED_PAYLOAD:
            if self.payload is None or len(self.payload) > strkey.MAX_SIGNED_PAYLOAD_LENGTH:
                raise XdrRangeError("signed payload signer requires a payload of at most 64 bytes")
            object.__setattr__(self, "payload", bytes(self.payload))
        elif self.payload is not None:
            raise XdrRangeError(f"{self.type.name} does not carry a payload")

    @classmethod
    def ed25519(cls, public_key: bytes) -> SignerKey:
        return cls(SignerKeyType.SIGNER_KEY_TYPE_ED25519, public_key)

    @classmethod
    def pre_auth_tx(cls, tx_hash: bytes) -> SignerKey:
        return cls(SignerKeyType.SIGNER_KEY_TYPE_PRE_AUTH_TX, tx_hash)

    @classmethod
    def hash_x(cls, hash_x: bytes) -> SignerKey:
        return cls(SignerKeyType.SIGNER_KEY_TYPE_HASH_X, hash_x)

    @classmethod
    def signed_payload(cls, public_key: bytes, payload: bytes) -> SignerKey:
        return cls(SignerKeyType.SIGNER_KEY_TYPE_ED25519_SIGNED_PAYLOAD, public_key, payload)

    @classmethod
    def from_address(cls, address: str) -> SignerKey:
        """
        Parse a G..., T..., X... or P... address.

        Raises:
            StrKeyError: For any other prefix
        """
        prefix = address[:1]
        if prefix == "G":
            return cls.ed25519(strkey.decode_account_id(address))
        if prefix == "T":
            return cls.pre_auth_tx(strkey.decode_pre_auth_tx(address))
        if prefix == "X":
            return cls.hash_x(strkey.decode_sha256_hash(address))
        if prefix == "P":
            key, payload = strkey.decode_signed_payload(address)
            return cls.signed_payload(key, payload)
        raise StrKeyError(f"Unsupported signer key prefix {prefix!r}")

    @property
    def address(self) -> str:
        if self.type == SignerKeyType.SIGNER_KEY_TYPE_ED25519:
            return strkey.encode_account_id(self.key)
        if self.type == SignerKeyType.SIGNER_KEY_TYPE_PRE_AUTH_TX:
            return strkey.encode_pre_auth_tx(self.key)
        if self.type == SignerKeyType.SIGNER_KEY_TYPE_HASH_X:
            return strkey.encode_sha256_hash(self.key)
        return strkey.encode_signed_payload(self.key, self.payload)

    def pack(self, w: XdrWriter) -> None:
        w.enum(self.type)
        w.opaque_fixed(self.key, 32)
        if self.type == SignerKeyType.SIGNER_KEY_TYPE_ED25519_SIGNED_PAYLOAD:
            w.opaque_var(self.payload, strkey.MAX_SIGNED_PAYLOAD_LENGTH)

    @classmethod
    def unpack(cls, r: XdrReader) -> SignerKey:
        key_type = read_enum(r, SignerKeyType)
        key = r.opaque_fixed(32)
        payload = None
        if key_type == SignerKeyType.SIGNER_KEY_TYPE_ED25519_SIGNED_PAYLOAD:
            payload = r.opaque_var(strkey.MAX_SIGNED_PAYLOAD_LENGTH)
        return cls(key_type, key, payload)

    def __str__(self) -> str:
        return self.address


@dataclass(frozen=True)
class ClaimableBalanceId(XdrType):
    """Claimable balance id (V0: 32-byte hash)."""

    v0: bytes

    def __post_init__(self):
        object.__setattr__(self, "v0", check_hash("claimable balance id", self.v0))

    def pack(self, w: XdrWriter) -> None:
        w.enum(ClaimableBalanceIDType.CLAIMABLE_BALANCE_ID_TYPE_V0)
        w.opaque_fixed(self.v0, 32)

    @classmethod
    def unpack(cls, r: XdrReader) -> ClaimableBalanceId:
        read_enum(r, ClaimableBalanceIDType)
        return cls(r.opaque_fixed(32))

    @property
    def balance_id_hex(self) -> str:
        """Hex of the full XDR encoding, as shown by Horizon."""
        return self.to_xdr_bytes().hex()
