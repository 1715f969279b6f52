"""
Transactions, fee-bump transactions and signed envelopes.

Signing never mutates an envelope: ``TransactionEnvelope.sign`` returns a new
envelope with one more decorated signature.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Optional, Tuple, Union

from ..codec.hashes import sha256_bytes
from ..codec.reader import XdrReader
from ..codec.writer import XdrWriter, INT64_MAX, INT64_MIN, UINT32_MAX, check_range
from ..runtime.errors import InvalidDiscriminant, UnknownDiscriminant, XdrRangeError
from .base import XdrType, network_id_of, read_enum
from .enums import EnvelopeType
from .keys import MuxedAccount, check_hash
from .ledger_key import SorobanTransactionData
from .memo import Memo
from .operations import Operation
from .preconditions import Preconditions, TimeBounds

if TYPE_CHECKING:
    from ..crypto.keypair import KeyPair
    from ..tx.network import Network

logger = logging.getLogger(__name__)

MAX_OPERATIONS = 100
MAX_SIGNATURES = 20
MAX_SIGNATURE_LENGTH = 64


def _check_operations(operations) -> Tuple[Operation, ...]:
    operations = tuple(operations)
    if len(operations) > MAX_OPERATIONS:
        raise XdrRangeError(f"a transaction holds at most {MAX_OPERATIONS} operations, got {len(operations)}")
    return operations


@dataclass(frozen=True)
class DecoratedSignature(XdrType):
    """Signature with the 4-byte hint of the signing key."""

    hint: bytes
    signature: bytes

    def __post_init__(self):
        object.__setattr__(self, "hint", check_hash("signature hint", self.hint, 4))
        if len(self.signature) > MAX_SIGNATURE_LENGTH:
            raise XdrRangeError(f"signature must be at most {MAX_SIGNATURE_LENGTH} bytes")
        object.__setattr__(self, "signature", bytes(self.signature))

    def pack(self, w: XdrWriter) -> None:
        w.opaque_fixed(self.hint, 4)
        w.opaque_var(self.signature, MAX_SIGNATURE_LENGTH)

    @classmethod
    def unpack(cls, r: XdrReader) -> DecoratedSignature:
        hint = r.opaque_fixed(4)
        return cls(hint, r.opaque_var(MAX_SIGNATURE_LENGTH))


def _pack_signatures(w: XdrWriter, signatures: Tuple[DecoratedSignature, ...]) -> None:
    w.array(signatures, lambda s: s.pack(w), MAX_SIGNATURES)


def _unpack_signatures(r: XdrReader) -> Tuple[DecoratedSignature, ...]:
    return tuple(r.array(lambda: DecoratedSignature.unpack(r), MAX_SIGNATURES))


@dataclass(frozen=True)
class Transaction(XdrType):
    """
    A v1 transaction.

    ``soroban_data`` selects extension arm 1 when set.
    """

    source_account: MuxedAccount
    fee: int
    sequence_number: int
    operations: Tuple[Operation, ...]
    memo: Memo = Memo()
    preconditions: Preconditions = Preconditions()
    soroban_data: Optional[SorobanTransactionData] = None

    def __post_init__(self):
        check_range("fee", self.fee, 0, UINT32_MAX)
        check_range("sequence_number", self.sequence_number, INT64_MIN, INT64_MAX)
        object.__setattr__(self, "operations", _check_operations(self.operations))

    @property
    def base_fee(self) -> int:
        """Fee per operation, excluding any Soroban resource fee."""
        fee = self.fee
        if self.soroban_data is not None:
            fee -= self.soroban_data.resource_fee
        return fee // max(len(self.operations), 1)

    def pack(self, w: XdrWriter) -> None:
        self.source_account.pack(w)
        w.uint32(self.fee)
        w.int64(self.sequence_number)
        self.preconditions.pack(w)
        self.memo.pack(w)
        w.array(self.operations, lambda op: op.pack(w), MAX_OPERATIONS)
        if self.soroban_data is None:
            w.int32(0)
        else:
            w.int32(1)
            self.soroban_data.pack(w)

    @classmethod
    def unpack(cls, r: XdrReader) -> Transaction:
        source = MuxedAccount.unpack(r)
        fee = r.uint32()
        seq = r.int64()
        preconditions = Preconditions.unpack(r)
        memo = Memo.unpack(r)
        operations = tuple(r.array(lambda: Operation.unpack(r), MAX_OPERATIONS))
        ext = r.int32()
        if ext == 0:
            soroban_data = None
        elif ext == 1:
            soroban_data = SorobanTransactionData.unpack(r)
        else:
            raise UnknownDiscriminant("TransactionExt", ext)
        return cls(source, fee, seq, operations, memo, preconditions, soroban_data)


@dataclass(frozen=True)
class TransactionV0(XdrType):
    """Legacy transaction with a bare ed25519 source and optional time bounds."""

    source_account_ed25519: bytes
    fee: int
    sequence_number: int
    operations: Tuple[Operation, ...]
    memo: Memo = Memo()
    time_bounds: Optional[TimeBounds] = None

    def __post_init__(self):
        object.__setattr__(self, "source_account_ed25519",
                           check_hash("source account", self.source_account_ed25519))
        check_range("fee", self.fee, 0, UINT32_MAX)
        check_range("sequence_number", self.sequence_number, INT64_MIN, INT64_MAX)
        object.__setattr__(self, "operations", _check_operations(self.operations))

    def to_v1(self) -> Transaction:
        """The equivalent v1 transaction; both share one signature base."""
        preconditions = Preconditions.none() if self.time_bounds is None else Preconditions.time(self.time_bounds)
        return Transaction(
            source_account=MuxedAccount(self.source_account_ed25519),
            fee=self.fee,
            sequence_number=self.sequence_number,
            operations=self.operations,
            memo=self.memo,
            preconditions=preconditions,
        )

    def pack(self, w: XdrWriter) -> None:
        w.opaque_fixed(self.source_account_ed25519, 32)
        w.uint32(self.fee)
        w.int64(self.sequence_number)
        w.optional(self.time_bounds, lambda v: v.pack(w))
        self.memo.pack(w)
        w.array(self.operations, lambda op: op.pack(w), MAX_OPERATIONS)
        w.int32(0)

    @classmethod
    def unpack(cls, r: XdrReader) -> TransactionV0:
        source = r.opaque_fixed(32)
        fee = r.uint32()
        seq = r.int64()
        time_bounds = r.optional(lambda: TimeBounds.unpack(r))
        memo = Memo.unpack(r)
        operations = tuple(r.array(lambda: Operation.unpack(r), MAX_OPERATIONS))
        ext = r.int32()
        if ext != 0:
            raise UnknownDiscriminant("TransactionV0Ext", ext)
        return cls(source, fee, seq, operations, memo, time_bounds)


@dataclass(frozen=True)
class FeeBumpTransaction(XdrType):
    """Outer fee-bump transaction wrapping a signed v1 envelope."""

    fee_source: MuxedAccount
    fee: int
    inner_tx: TransactionEnvelope

    def __post_init__(self):
        check_range("fee", self.fee, INT64_MIN, INT64_MAX)
        if self.inner_tx.type != EnvelopeType.ENVELOPE_TYPE_TX:
            raise XdrRangeError(f"fee bump inner transaction must be a v1 envelope, got {self.inner_tx.type.name}")

    def pack(self, w: XdrWriter) -> None:
        self.fee_source.pack(w)
        w.int64(self.fee)
        w.enum(EnvelopeType.ENVELOPE_TYPE_TX)
        self.inner_tx.tx.pack(w)
        _pack_signatures(w, self.inner_tx.signatures)
        w.int32(0)

    @classmethod
    def unpack(cls, r: XdrReader) -> FeeBumpTransaction:
        fee_source = MuxedAccount.unpack(r)
        fee = r.int64()
        inner_type = read_enum(r, EnvelopeType)
        if inner_type != EnvelopeType.ENVELOPE_TYPE_TX:
            raise InvalidDiscriminant("FeeBumpTransactionInnerTx", int(inner_type))
        inner_tx = Transaction.unpack(r)
        inner = TransactionEnvelope(inner_tx, _unpack_signatures(r))
        ext = r.int32()
        if ext != 0:
            raise UnknownDiscriminant("FeeBumpTransactionExt", ext)
        return cls(fee_source, fee, inner)


_ENVELOPE_TYPES = {
    TransactionV0: EnvelopeType.ENVELOPE_TYPE_TX_V0,
    Transaction: EnvelopeType.ENVELOPE_TYPE_TX,
    FeeBumpTransaction: EnvelopeType.ENVELOPE_TYPE_TX_FEE_BUMP,
}


@dataclass(frozen=True)
class TransactionEnvelope(XdrType):
    """
    A transaction of any kind plus its decorated signatures.

    The envelope type follows from the class of ``tx``.
    """

    tx: Union[Transaction, TransactionV0, FeeBumpTransaction]
    signatures: Tuple[DecoratedSignature, ...] = ()

    def __post_init__(self):
        if type(self.tx) not in _ENVELOPE_TYPES:
            raise XdrRangeError(f"Unsupported transaction type {type(self.tx).__name__}")
        object.__setattr__(self, "signatures", tuple(self.signatures))
        if len(self.signatures) > MAX_SIGNATURES:
            raise XdrRangeError(f"an envelope holds at most {MAX_SIGNATURES} signatures")

    @property
    def type(self) -> EnvelopeType:
        return _ENVELOPE_TYPES[type(self.tx)]

    @property
    def is_fee_bump(self) -> bool:
        return self.type == EnvelopeType.ENVELOPE_TYPE_TX_FEE_BUMP

    # -- hashing -----------------------------------------------------------------

    def signature_base(self, network: Union[Network, str]) -> bytes:
        """
        Bytes whose SHA-256 is signed.

        network_id || envelope type tag || transaction XDR. A v0 transaction
        is tagged and encoded as its v1 equivalent.

        Args:
            network: Network or network passphrase
        """
        w = XdrWriter()
        w.raw(network_id_of(network))
        if self.type == EnvelopeType.ENVELOPE_TYPE_TX_FEE_BUMP:
            w.enum(EnvelopeType.ENVELOPE_TYPE_TX_FEE_BUMP)
            self.tx.pack(w)
        else:
            tx = self.tx.to_v1() if isinstance(self.tx, TransactionV0) else self.tx
            w.enum(EnvelopeType.ENVELOPE_TYPE_TX)
            tx.pack(w)
        return w.to_bytes()

    def hash(self, network: Union[Network, str]) -> bytes:
        """
        The transaction hash signers sign.

        Returns:
            32-byte SHA-256 of the signature base
        """
        return sha256_bytes(self.signature_base(network))

    def hash_hex(self, network: Union[Network, str]) -> str:
        return self.hash(network).hex()

    # -- signing -----------------------------------------------------------------

    def add_signature(self, signature: DecoratedSignature) -> TransactionEnvelope:
        """
        Return a copy with one more signature.

        Raises:
            XdrRangeError: If the envelope already holds 20 signatures
        """
        if len(self.signatures) >= MAX_SIGNATURES:
            raise XdrRangeError(f"an envelope holds at most {MAX_SIGNATURES} signatures")
        return replace(self, signatures=self.signatures + (signature,))

    def sign(self, keypair: KeyPair, network: Union[Network, str]) -> TransactionEnvelope:
        """
        Sign the transaction hash for network.

        Signing twice with the same key appends two signatures.

        Args:
            keypair: Key pair holding a secret key
            network: Network or network passphrase

        Returns:
            New envelope with the appended decorated signature

        Raises:
            SignatureError: If keypair cannot sign
        """
        tx_hash = self.hash(network)
        signed = self.add_signature(keypair.sign_decorated(tx_hash))
        logger.debug("Signed %s %s, %d signature(s)",
                     self.type.name, tx_hash.hex(), len(signed.signatures))
        return signed

    def sign_hash_x(self, preimage: bytes) -> TransactionEnvelope:
        """Attach a hash(x) preimage as a signature for a HASH_X signer."""
        hint = sha256_bytes(preimage)[-4:]
        return self.add_signature(DecoratedSignature(hint, preimage))

    def verify_signature(self, keypair: KeyPair, signature: DecoratedSignature,
                         network: Union[Network, str]) -> bool:
        """
        Check a decorated signature against a key for this transaction.

        Returns:
            True if the hint matches the key and the signature verifies
        """
        if signature.hint != keypair.signature_hint():
            return False
        return keypair.verify(self.hash(network), signature.signature)

    # -- codec -------------------------------------------------------------------

    def pack(self, w: XdrWriter) -> None:
        w.enum(self.type)
        self.tx.pack(w)
        _pack_signatures(w, self.signatures)

    @classmethod
    def unpack(cls, r: XdrReader) -> TransactionEnvelope:
        envelope_type = read_enum(r, EnvelopeType)
        if envelope_type == EnvelopeType.ENVELOPE_TYPE_TX_V0:
            tx = TransactionV0.unpack(r)
        elif envelope_type == EnvelopeType.ENVELOPE_TYPE_TX:
            tx = Transaction.unpack(r)
        elif envelope_type == EnvelopeType.ENVELOPE_TYPE_TX_FEE_BUMP:
            tx = FeeBumpTransaction.unpack(r)
        else:
            raise InvalidDiscriminant("TransactionEnvelope", int(envelope_type))
        return cls(tx, _unpack_signatures(r))
