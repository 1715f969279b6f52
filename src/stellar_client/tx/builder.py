"""
Transaction builder.

Accumulates operations, memo, preconditions and a Soroban extension into an
immutable Transaction. The builder is single-owner while building; the value
returned by ``build()`` can be shared freely.
"""

from __future__ import annotations
import logging
import time
from typing import Iterable, List, Optional, Union

from ..codec.writer import INT64_MAX, INT64_MIN, UINT32_MAX
from ..crypto.keypair import KeyPair
from ..runtime.errors import BuilderValidationError
from ..xdr.keys import MuxedAccount, SignerKey
from ..xdr.ledger_key import SorobanTransactionData
from ..xdr.memo import Memo
from ..xdr.operations import Operation, OperationBody
from ..xdr.preconditions import (
    LedgerBounds, Preconditions, PreconditionsV2, TimeBounds, MAX_EXTRA_SIGNERS,
)
from ..xdr.transaction import Transaction, TransactionEnvelope, MAX_OPERATIONS

logger = logging.getLogger(__name__)

BASE_FEE = 100
TIMEOUT_INFINITE = 0


def to_muxed_account(account: Union[str, MuxedAccount, KeyPair]) -> MuxedAccount:
    """Accept a G.../M... address, a MuxedAccount or a KeyPair."""
    if isinstance(account, MuxedAccount):
        return account
    if isinstance(account, KeyPair):
        return account.xdr_muxed_account()
    return MuxedAccount.from_address(account)


class TransactionBuilder:
    """
    Builder for v1 transactions.

    The sequence number is used as given: callers pass the account's current
    sequence plus one.

    Example:
        >>> tx = (TransactionBuilder(source, 2916609211498497)
        ...       .add_operation(Payment(dest, Asset.native(), 10_000_000))
        ...       .add_memo(Memo.text("rent"))
        ...       .set_timeout(300)
        ...       .build())
    """

    def __init__(self, source: Union[str, MuxedAccount, KeyPair],
                 sequence_number: Optional[int], base_fee: int = BASE_FEE):
        """
        Initialize builder.

        Args:
            source: Transaction source account
            sequence_number: Sequence number of the new transaction
            base_fee: Fee per operation in stroops
        """
        self.source = to_muxed_account(source)
        self.sequence_number = sequence_number
        self.base_fee = base_fee
        self._operations: List[Operation] = []
        self._memo = Memo.none()
        self._preconditions: Optional[Preconditions] = None
        self._time_bounds: Optional[TimeBounds] = None
        self._ledger_bounds: Optional[LedgerBounds] = None
        self._min_seq_num: Optional[int] = None
        self._min_seq_age = 0
        self._min_seq_ledger_gap = 0
        self._extra_signers: List[SignerKey] = []
        self._soroban_data: Optional[SorobanTransactionData] = None

    # -- operations --------------------------------------------------------------

    def add_operation(self, operation: Union[Operation, OperationBody],
                      source: Union[str, MuxedAccount, KeyPair, None] = None) -> TransactionBuilder:
        """
        Append an operation (chainable).

        Args:
            operation: Operation, or a bare body to wrap
            source: Per-operation source account for a bare body
        """
        if isinstance(operation, OperationBody):
            operation = Operation(operation, to_muxed_account(source) if source is not None else None)
        elif source is not None:
            raise BuilderValidationError("source is only accepted with a bare operation body")
        self._operations.append(operation)
        logger.debug("Added %s operation (%d total)", operation.type.name, len(self._operations))
        return self

    def add_operations(self, operations: Iterable[Union[Operation, OperationBody]]) -> TransactionBuilder:
        for operation in operations:
            self.add_operation(operation)
        return self

    # -- memo and preconditions --------------------------------------------------

    def add_memo(self, memo: Memo) -> TransactionBuilder:
        self._memo = memo
        return self

    def add_text_memo(self, text: str) -> TransactionBuilder:
        return self.add_memo(Memo.text(text))

    def add_id_memo(self, memo_id: int) -> TransactionBuilder:
        return self.add_memo(Memo.id(memo_id))

    def set_preconditions(self, preconditions: Preconditions) -> TransactionBuilder:
        """
        Use explicit preconditions.

        Cannot be combined with the individual precondition setters.
        """
        self._preconditions = preconditions
        return self

    def set_time_bounds(self, min_time: int, max_time: int) -> TransactionBuilder:
        """Unix-second validity window; 0 leaves a side unbounded."""
        self._time_bounds = TimeBounds(min_time, max_time)
        return self

    def set_timeout(self, timeout: int) -> TransactionBuilder:
        """
        Expire the transaction timeout seconds from now.

        Args:
            timeout: Seconds, or TIMEOUT_INFINITE for no upper bound

        Raises:
            BuilderValidationError: If time bounds with a max time were set
        """
        if self._time_bounds is not None and self._time_bounds.max_time > 0:
            raise BuilderValidationError("TimeBounds.max_time has been already set")
        if timeout < 0:
            raise BuilderValidationError("timeout cannot be negative")
        min_time = self._time_bounds.min_time if self._time_bounds is not None else 0
        max_time = int(time.time()) + timeout if timeout != TIMEOUT_INFINITE else 0
        self._time_bounds = TimeBounds(min_time, max_time)
        return self

    def set_ledger_bounds(self, min_ledger: int, max_ledger: int) -> TransactionBuilder:
        self._ledger_bounds = LedgerBounds(min_ledger, max_ledger)
        return self

    def set_min_sequence_number(self, min_seq_num: int) -> TransactionBuilder:
        self._min_seq_num = min_seq_num
        return self

    def set_min_sequence_age(self, min_seq_age: int) -> TransactionBuilder:
        self._min_seq_age = min_seq_age
        return self

    def set_min_sequence_ledger_gap(self, min_seq_ledger_gap: int) -> TransactionBuilder:
        self._min_seq_ledger_gap = min_seq_ledger_gap
        return self

    def add_extra_signer(self, signer: Union[str, SignerKey]) -> TransactionBuilder:
        """Require an extra signer; accepts a SignerKey or G/T/X/P address."""
        if isinstance(signer, str):
            signer = SignerKey.from_address(signer)
        self._extra_signers.append(signer)
        return self

    def set_soroban_data(self, soroban_data: SorobanTransactionData) -> TransactionBuilder:
        self._soroban_data = soroban_data
        return self

    # -- build -------------------------------------------------------------------

    def _has_v2_conditions(self) -> bool:
        return (self._ledger_bounds is not None or self._min_seq_num is not None
                or self._min_seq_age > 0 or self._min_seq_ledger_gap > 0
                or bool(self._extra_signers))

    def _build_preconditions(self) -> Preconditions:
        if self._preconditions is not None:
            return self._preconditions
        if self._has_v2_conditions():
            return Preconditions.from_v2(PreconditionsV2(
                time_bounds=self._time_bounds,
                ledger_bounds=self._ledger_bounds,
                min_seq_num=self._min_seq_num,
                min_seq_age=self._min_seq_age,
                min_seq_ledger_gap=self._min_seq_ledger_gap,
                extra_signers=tuple(self._extra_signers),
            ))
        if self._time_bounds is not None:
            return Preconditions.time(self._time_bounds)
        return Preconditions.none()

    def validate(self) -> List[str]:
        """
        Check build-time invariants.

        Returns:
            List of problems; empty when the builder is ready to build
        """
        issues = []
        if self.sequence_number is None:
            issues.append("sequence number is required")
        elif isinstance(self.sequence_number, bool) or not isinstance(self.sequence_number, int) \
                or not INT64_MIN <= self.sequence_number <= INT64_MAX:
            issues.append(f"sequence number must be a 64-bit integer, got {self.sequence_number!r}")
        if not self._operations:
            issues.append("at least one operation is required")
        if len(self._operations) > MAX_OPERATIONS:
            issues.append(f"at most {MAX_OPERATIONS} operations are allowed, got {len(self._operations)}")
        if self.base_fee < BASE_FEE:
            issues.append(f"base fee must be at least {BASE_FEE} stroops, got {self.base_fee}")
        if len(self._extra_signers) > MAX_EXTRA_SIGNERS:
            issues.append(f"at most {MAX_EXTRA_SIGNERS} extra signers are allowed")
        if self._time_bounds is not None and self._time_bounds.max_time \
                and self._time_bounds.min_time > self._time_bounds.max_time:
            issues.append("time bounds min_time must not exceed max_time")
        if self._preconditions is not None and (self._time_bounds is not None or self._has_v2_conditions()):
            issues.append("explicit preconditions cannot be combined with individual precondition setters")
        if not issues and self._fee() > UINT32_MAX:
            issues.append(f"total fee {self._fee()} does not fit in uint32")
        return issues

    def _fee(self) -> int:
        fee = self.base_fee * len(self._operations)
        if self._soroban_data is not None:
            fee += self._soroban_data.resource_fee
        return fee

    def build(self) -> Transaction:
        """
        Build the transaction.

        Fee is base_fee times the operation count, plus the Soroban resource
        fee when an extension is set. The same inputs always produce the same
        transaction.

        Returns:
            Immutable Transaction

        Raises:
            BuilderValidationError: If any invariant is violated
        """
        issues = self.validate()
        if issues:
            raise BuilderValidationError("Transaction validation failed", issues)

        tx = Transaction(
            source_account=self.source,
            fee=self._fee(),
            sequence_number=self.sequence_number,
            operations=tuple(self._operations),
            memo=self._memo,
            preconditions=self._build_preconditions(),
            soroban_data=self._soroban_data,
        )
        logger.debug("Built transaction: %d operation(s), fee %d, seq %d",
                     len(tx.operations), tx.fee, tx.sequence_number)
        return tx

    def build_envelope(self) -> TransactionEnvelope:
        """Build and wrap in an unsigned envelope."""
        return TransactionEnvelope(self.build())
