"""
Test factories for creating key pairs and transactions consistently.
"""

from __future__ import annotations
import hashlib
from typing import Optional, Sequence, Union

from stellar_client import KeyPair, TransactionBuilder
from stellar_client.xdr import (
    Asset, Memo, MuxedAccount, Operation, OperationBody, Payment, TransactionEnvelope,
)


def mk_keypair(seed: Union[int, bytes]) -> KeyPair:
    """
    Create a deterministic key pair.

    Args:
        seed: An int (encoded big-endian into 32 bytes) or bytes (hashed
            when not exactly 32 bytes long)
    """
    if isinstance(seed, int):
        seed_bytes = seed.to_bytes(32, "big")
    elif len(seed) == 32:
        seed_bytes = seed
    else:
        seed_bytes = hashlib.sha256(seed).digest()
    return KeyPair.from_raw_seed(seed_bytes)


def mk_payment(destination: KeyPair, amount: int = 10_000_000,
               asset: Optional[Asset] = None) -> Payment:
    return Payment(MuxedAccount(destination.raw_public_key), asset or Asset.native(), amount)


def mk_envelope(source: KeyPair, operations: Sequence[Union[Operation, OperationBody]],
                sequence_number: int = 100, base_fee: int = 100,
                memo: Optional[Memo] = None) -> TransactionEnvelope:
    """Build an unsigned v1 envelope with the given operations."""
    builder = TransactionBuilder(source, sequence_number, base_fee)
    builder.add_operations(operations)
    if memo is not None:
        builder.add_memo(memo)
    return builder.build_envelope()
