"""
Stellar key pairs.

A KeyPair always has a public key and optionally the secret seed. Key pairs
built from an address can verify but not sign.
"""

from __future__ import annotations
import logging
from typing import Optional, TYPE_CHECKING

from ..runtime.errors import SignatureError
from . import strkey
from .ed25519 import Ed25519PrivateKey, Ed25519PublicKey

if TYPE_CHECKING:
    from ..xdr.keys import AccountId, MuxedAccount
    from ..xdr.transaction import DecoratedSignature

logger = logging.getLogger(__name__)


class KeyPair:
    """
    Ed25519 key pair with StrKey import and export.
    """

    def __init__(self, public_key: Ed25519PublicKey, private_key: Optional[Ed25519PrivateKey] = None):
        """
        Initialize key pair.

        Args:
            public_key: Public half
            private_key: Private half, or None for a verify-only key pair
        """
        self._public_key = public_key
        self._private_key = private_key

    @classmethod
    def random(cls) -> KeyPair:
        """Generate a new random key pair."""
        private_key = Ed25519PrivateKey.generate()
        return cls(private_key.public_key(), private_key)

    @classmethod
    def from_raw_seed(cls, seed: bytes) -> KeyPair:
        """Create a key pair from a raw 32-byte Ed25519 seed."""
        private_key = Ed25519PrivateKey(seed)
        return cls(private_key.public_key(), private_key)

    @classmethod
    def from_secret(cls, secret: str) -> KeyPair:
        """
        Create a key pair from an S... secret seed.

        Raises:
            StrKeyError: If the secret is malformed
        """
        return cls.from_raw_seed(strkey.decode_seed(secret))

    @classmethod
    def from_address(cls, account_id: str) -> KeyPair:
        """Create a verify-only key pair from a G... address."""
        return cls(Ed25519PublicKey(strkey.decode_account_id(account_id)))

    @classmethod
    def from_public_key(cls, public_key: bytes) -> KeyPair:
        """Create a verify-only key pair from a raw 32-byte public key."""
        return cls(Ed25519PublicKey(public_key))

    @property
    def account_id(self) -> str:
        """The G... address."""
        return strkey.encode_account_id(self._public_key.to_bytes())

    @property
    def secret_seed(self) -> str:
        """
        The S... secret seed.

        Raises:
            SignatureError: If this key pair has no private key
        """
        return strkey.encode_seed(self._require_private().to_bytes())

    @property
    def raw_public_key(self) -> bytes:
        return self._public_key.to_bytes()

    @property
    def raw_secret_key(self) -> bytes:
        return self._require_private().to_bytes()

    def can_sign(self) -> bool:
        return self._private_key is not None

    def _require_private(self) -> Ed25519PrivateKey:
        if self._private_key is None:
            raise SignatureError("KeyPair has no secret key; it can only verify")
        return self._private_key

    def signature_hint(self) -> bytes:
        """
        Last 4 bytes of the public key.

        Used only to match signatures to signers, never as a security check.
        """
        return self._public_key.to_bytes()[-4:]

    def sign(self, data: bytes) -> bytes:
        """
        Sign data.

        Args:
            data: Bytes to sign (usually a 32-byte transaction hash)

        Returns:
            64-byte Ed25519 signature
        """
        return self._require_private().sign(data)

    def verify(self, data: bytes, signature: bytes) -> bool:
        """Return True if signature is a valid signature of data by this key."""
        return self._public_key.verify(signature, data)

    def sign_decorated(self, data: bytes) -> DecoratedSignature:
        """Sign data and wrap the signature with this key's hint."""
        from ..xdr.transaction import DecoratedSignature

        signature = self.sign(data)
        logger.debug("Signed %d bytes with hint %s", len(data), self.signature_hint().hex())
        return DecoratedSignature(self.signature_hint(), signature)

    def sign_payload_decorated(self, payload: bytes) -> DecoratedSignature:
        """
        Sign a payload for an ed25519 signed payload signer.

        The hint is the key hint XORed with the last 4 bytes of the payload
        (right-padded with zeros when shorter than 4 bytes).
        """
        from ..xdr.transaction import DecoratedSignature

        tail = payload[-4:] if len(payload) >= 4 else payload + b"\x00" * (4 - len(payload))
        hint = bytes(a ^ b for a, b in zip(self.signature_hint(), tail))
        return DecoratedSignature(hint, self.sign(payload))

    def xdr_account_id(self) -> AccountId:
        from ..xdr.keys import AccountId

        return AccountId(self.raw_public_key)

    def xdr_muxed_account(self, muxed_id: Optional[int] = None) -> MuxedAccount:
        from ..xdr.keys import MuxedAccount

        return MuxedAccount(self.raw_public_key, muxed_id)

    def __eq__(self, other) -> bool:
        if not isinstance(other, KeyPair):
            return False
        return self._public_key == other._public_key and self.can_sign() == other.can_sign()

    def __hash__(self) -> int:
        return hash(self.raw_public_key)

    def __repr__(self) -> str:
        return f"KeyPair({self.account_id})"
