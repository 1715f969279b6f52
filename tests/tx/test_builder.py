"""
Transaction builder tests.
"""

import time

import pytest

from stellar_client import Network, TransactionBuilder
from stellar_client.runtime.errors import BuilderValidationError, XdrRangeError
from stellar_client.tx import TIMEOUT_INFINITE, to_muxed_account
from stellar_client.xdr import (
    BumpSequence, LedgerFootprint, LedgerKey, Memo, MemoType, Operation, PreconditionType,
    Preconditions, SignerKey, SorobanResources, SorobanTransactionData, TimeBounds,
)

from helpers.factories import mk_keypair, mk_payment

MUXED_SOURCE = "MA7QYNF7SOWQ3GLR2BGMZEHXAVIRZA4KVWLTJJFC7MGXUA74P7UJVAAAAAAAAAAAAAJLK"


def _soroban_data(resource_fee: int) -> SorobanTransactionData:
    footprint = LedgerFootprint(read_only=(LedgerKey.contract_code(b"\x07" * 32),))
    return SorobanTransactionData(SorobanResources(footprint, 1_000_000, 2048, 512), resource_fee)


class TestBuild:
    """Test successful builds."""

    def test_fee_is_base_fee_times_operations(self, fake_keypair, other_keypair):
        tx = (TransactionBuilder(fake_keypair, 101, base_fee=250)
              .add_operation(mk_payment(other_keypair))
              .add_operation(BumpSequence(500))
              .add_operation(mk_payment(other_keypair, 5))
              .build())
        assert tx.fee == 750
        assert tx.base_fee == 250
        assert tx.sequence_number == 101
        assert len(tx.operations) == 3

    def test_defaults(self, payment_builder):
        tx = payment_builder.build()
        assert tx.fee == 100
        assert tx.memo.type == MemoType.MEMO_NONE
        assert tx.preconditions.type == PreconditionType.PRECOND_NONE
        assert tx.soroban_data is None

    def test_sequence_number_used_as_given(self, fake_keypair, other_keypair):
        tx = TransactionBuilder(fake_keypair, 2916609211498497).add_operation(mk_payment(other_keypair)).build()
        assert tx.sequence_number == 2916609211498497

    def test_deterministic(self, fake_keypair, other_keypair):
        """Test that identical inputs produce identical bytes and hashes."""
        def build():
            return (TransactionBuilder(fake_keypair, 7)
                    .add_operation(mk_payment(other_keypair))
                    .add_text_memo("same")
                    .set_time_bounds(0, 1700000000)
                    .build_envelope())

        first, second = build(), build()
        assert first == second
        assert first.to_xdr_bytes() == second.to_xdr_bytes()
        assert first.hash(Network.TESTNET) == second.hash(Network.TESTNET)

    def test_muxed_source(self, other_keypair):
        tx = TransactionBuilder(MUXED_SOURCE, 1).add_operation(mk_payment(other_keypair)).build()
        assert tx.source_account.is_muxed
        assert tx.source_account.address == MUXED_SOURCE

    def test_operation_source(self, fake_keypair, other_keypair):
        tx = (TransactionBuilder(fake_keypair, 1)
              .add_operation(mk_payment(fake_keypair), source=other_keypair.account_id)
              .build())
        assert tx.operations[0].source_account == to_muxed_account(other_keypair)

    def test_source_rejected_for_wrapped_operation(self, fake_keypair, other_keypair):
        with pytest.raises(BuilderValidationError):
            TransactionBuilder(fake_keypair, 1).add_operation(
                Operation(mk_payment(other_keypair)), source=other_keypair)

    def test_memos(self, payment_builder):
        assert payment_builder.add_id_memo(99).build().memo == Memo.id(99)
        assert payment_builder.add_text_memo("rent").build().memo.text_value == "rent"
        with pytest.raises(XdrRangeError):
            payment_builder.add_text_memo("x" * 29)

    def test_envelope_is_unsigned(self, payment_builder):
        envelope = payment_builder.build_envelope()
        assert envelope.signatures == ()
        signed = envelope.sign(mk_keypair(1), Network.TESTNET)
        assert len(signed.signatures) == 1


class TestPreconditions:
    """Test precondition assembly."""

    def test_time_bounds(self, payment_builder):
        tx = payment_builder.set_time_bounds(10, 20).build()
        assert tx.preconditions == Preconditions.time(TimeBounds(10, 20))

    def test_timeout(self, payment_builder):
        before = int(time.time())
        tx = payment_builder.set_timeout(300).build()
        bounds = tx.preconditions.time_bounds
        assert bounds.min_time == 0
        assert before + 300 <= bounds.max_time <= int(time.time()) + 300

    def test_infinite_timeout(self, payment_builder):
        """Test that TIMEOUT_INFINITE still emits explicit 0/0 time bounds."""
        tx = payment_builder.set_timeout(TIMEOUT_INFINITE).build()
        assert tx.preconditions.type == PreconditionType.PRECOND_TIME
        assert tx.preconditions.time_bounds == TimeBounds(0, 0)

    def test_timeout_after_max_time(self, payment_builder):
        payment_builder.set_time_bounds(0, 100)
        with pytest.raises(BuilderValidationError, match="already set"):
            payment_builder.set_timeout(30)

    def test_negative_timeout(self, payment_builder):
        with pytest.raises(BuilderValidationError):
            payment_builder.set_timeout(-1)

    def test_v2_conditions(self, payment_builder, other_keypair):
        tx = (payment_builder
              .set_time_bounds(1, 2)
              .set_ledger_bounds(100, 200)
              .set_min_sequence_number(5)
              .set_min_sequence_age(60)
              .set_min_sequence_ledger_gap(3)
              .add_extra_signer(other_keypair.account_id)
              .build())
        cond = tx.preconditions
        assert cond.type == PreconditionType.PRECOND_V2
        assert cond.v2.time_bounds == TimeBounds(1, 2)
        assert cond.v2.ledger_bounds.max_ledger == 200
        assert cond.v2.min_seq_num == 5
        assert cond.v2.min_seq_age == 60
        assert cond.v2.min_seq_ledger_gap == 3
        assert cond.v2.extra_signers == (SignerKey.ed25519(other_keypair.raw_public_key),)
        assert cond.effective_time_bounds == TimeBounds(1, 2)

    def test_explicit_preconditions(self, payment_builder):
        cond = Preconditions.time(TimeBounds(5, 6))
        assert payment_builder.set_preconditions(cond).build().preconditions == cond


class TestSoroban:
    """Test the Soroban transaction extension."""

    def test_resource_fee_added(self, payment_builder):
        tx = payment_builder.set_soroban_data(_soroban_data(12_345)).build()
        assert tx.fee == 100 + 12_345
        assert tx.base_fee == 100
        assert tx.soroban_data.resources.instructions == 1_000_000

    def test_extension_round_trip(self, payment_builder):
        envelope = payment_builder.set_soroban_data(_soroban_data(1)).build_envelope()
        assert type(envelope).from_xdr_bytes(envelope.to_xdr_bytes()) == envelope


class TestValidation:
    """Test build-time validation."""

    def _issues(self, builder):
        with pytest.raises(BuilderValidationError) as exc_info:
            builder.build()
        assert exc_info.value.issues == builder.validate()
        return exc_info.value.issues

    def test_valid_builder(self, payment_builder):
        assert payment_builder.validate() == []

    def test_missing_sequence(self, fake_keypair, other_keypair):
        builder = TransactionBuilder(fake_keypair, None).add_operation(mk_payment(other_keypair))
        assert self._issues(builder) == ["sequence number is required"]

    def test_no_operations(self, fake_keypair):
        assert self._issues(TransactionBuilder(fake_keypair, 1)) == ["at least one operation is required"]

    def test_too_many_operations(self, fake_keypair, other_keypair):
        builder = TransactionBuilder(fake_keypair, 1).add_operations([mk_payment(other_keypair)] * 101)
        issues = self._issues(builder)
        assert any("at most 100 operations" in issue for issue in issues)

    def test_exactly_max_operations(self, fake_keypair, other_keypair):
        tx = TransactionBuilder(fake_keypair, 1).add_operations([mk_payment(other_keypair)] * 100).build()
        assert tx.fee == 10_000

    def test_low_base_fee(self, fake_keypair, other_keypair):
        builder = TransactionBuilder(fake_keypair, 1, base_fee=99).add_operation(mk_payment(other_keypair))
        assert any("base fee" in issue for issue in self._issues(builder))

    def test_fee_overflow(self, fake_keypair, other_keypair):
        builder = (TransactionBuilder(fake_keypair, 1, base_fee=2 ** 31)
                   .add_operations([mk_payment(other_keypair)] * 2))
        assert any("uint32" in issue for issue in self._issues(builder))

    def test_too_many_extra_signers(self, payment_builder):
        for i in range(3):
            payment_builder.add_extra_signer(SignerKey.hash_x(bytes([i]) * 32))
        assert any("extra signers" in issue for issue in self._issues(payment_builder))

    def test_inverted_time_bounds(self, payment_builder):
        payment_builder.set_time_bounds(200, 100)
        assert any("min_time" in issue for issue in self._issues(payment_builder))

    def test_mixed_precondition_styles(self, payment_builder):
        payment_builder.set_preconditions(Preconditions.none()).set_ledger_bounds(1, 2)
        assert any("explicit preconditions" in issue for issue in self._issues(payment_builder))

    def test_multiple_issues_reported(self, fake_keypair):
        builder = TransactionBuilder(fake_keypair, None, base_fee=10)
        assert len(self._issues(builder)) == 3
