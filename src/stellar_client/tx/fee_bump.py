"""
Fee-bump transaction builder.

Wraps a signed inner transaction so that a different account pays a higher
fee. The outer fee is base_fee x (inner operation count + 1).
"""

from __future__ import annotations
import logging
from typing import List, Union

from ..codec.writer import INT64_MAX
from ..crypto.keypair import KeyPair
from ..runtime.errors import BuilderValidationError
from ..xdr.enums import EnvelopeType
from ..xdr.keys import MuxedAccount
from ..xdr.transaction import FeeBumpTransaction, TransactionEnvelope, TransactionV0
from .builder import BASE_FEE, to_muxed_account

logger = logging.getLogger(__name__)


class FeeBumpTransactionBuilder:
    """
    Builder for fee-bump envelopes.

    A v0 inner envelope is converted to v1 first; its signatures remain valid
    because v0 and v1 share one signature base.
    """

    def __init__(self, inner_envelope: TransactionEnvelope,
                 fee_source: Union[str, MuxedAccount, KeyPair], base_fee: int):
        """
        Initialize fee-bump builder.

        Args:
            inner_envelope: Signed v0 or v1 envelope to wrap
            fee_source: Account paying the fee
            base_fee: Fee per operation in stroops, counting the fee bump as one
        """
        self.inner_envelope = inner_envelope
        self.fee_source = to_muxed_account(fee_source)
        self.base_fee = base_fee

    def _inner_v1(self) -> TransactionEnvelope:
        inner = self.inner_envelope
        if isinstance(inner.tx, TransactionV0):
            return TransactionEnvelope(inner.tx.to_v1(), inner.signatures)
        return inner

    def validate(self) -> List[str]:
        """
        Check fee-bump invariants.

        Returns:
            List of problems; empty when ready to build
        """
        issues = []
        if self.inner_envelope.type == EnvelopeType.ENVELOPE_TYPE_TX_FEE_BUMP:
            issues.append("inner transaction must be v0 or v1, not a fee bump")
            return issues
        inner_tx = self._inner_v1().tx
        if self.base_fee < BASE_FEE:
            issues.append(f"base fee must be at least {BASE_FEE} stroops, got {self.base_fee}")
        if self.base_fee < inner_tx.base_fee:
            issues.append(f"base fee {self.base_fee} is lower than the inner transaction base fee "
                          f"{inner_tx.base_fee}")
        fee = self._fee(inner_tx)
        if fee > INT64_MAX:
            issues.append(f"fee {fee} does not fit in int64")
        return issues

    def _fee(self, inner_tx) -> int:
        fee = self.base_fee * (len(inner_tx.operations) + 1)
        if inner_tx.soroban_data is not None:
            fee += inner_tx.soroban_data.resource_fee
        return fee

    def build(self) -> TransactionEnvelope:
        """
        Build the unsigned fee-bump envelope.

        Returns:
            TransactionEnvelope of type ENVELOPE_TYPE_TX_FEE_BUMP, ready to be
            signed by the fee source

        Raises:
            BuilderValidationError: If any invariant is violated
        """
        issues = self.validate()
        if issues:
            raise BuilderValidationError("Fee bump validation failed", issues)
        inner = self._inner_v1()
        fee_bump = FeeBumpTransaction(self.fee_source, self._fee(inner.tx), inner)
        logger.debug("Wrapped %d-operation transaction in fee bump, fee %d",
                     len(inner.tx.operations), fee_bump.fee)
        return TransactionEnvelope(fee_bump)
