"""
Fee-bump builder tests.
"""

import pytest

from stellar_client import FeeBumpTransactionBuilder, Network, TransactionBuilder
from stellar_client.runtime.errors import BuilderValidationError
from stellar_client.xdr import (
    EnvelopeType, LedgerFootprint, Operation, SorobanResources, SorobanTransactionData,
    TransactionEnvelope, TransactionV0,
)

from helpers.factories import mk_keypair, mk_payment


@pytest.fixture
def signed_inner(fake_keypair, other_keypair):
    """A signed two-operation v1 envelope with base fee 100."""
    envelope = (TransactionBuilder(fake_keypair, 10)
                .add_operations([mk_payment(other_keypair), mk_payment(other_keypair, 1)])
                .build_envelope())
    return envelope.sign(fake_keypair, Network.TESTNET)


class TestFeeBumpBuild:
    """Test fee-bump construction."""

    def test_fee_counts_the_bump(self, signed_inner, other_keypair):
        """Test outer fee = base_fee x (inner operations + 1)."""
        envelope = FeeBumpTransactionBuilder(signed_inner, other_keypair, 200).build()
        assert envelope.type == EnvelopeType.ENVELOPE_TYPE_TX_FEE_BUMP
        assert envelope.tx.fee == 600
        assert envelope.tx.fee_source.address == other_keypair.account_id
        assert envelope.tx.inner_tx == signed_inner
        assert envelope.signatures == ()

    def test_same_base_fee_as_inner(self, signed_inner, other_keypair):
        envelope = FeeBumpTransactionBuilder(signed_inner, other_keypair.account_id, 100).build()
        assert envelope.tx.fee == 300

    def test_resource_fee_carried(self, fake_keypair, other_keypair):
        data = SorobanTransactionData(SorobanResources(LedgerFootprint()), resource_fee=5_000)
        inner = (TransactionBuilder(fake_keypair, 1)
                 .add_operation(mk_payment(other_keypair))
                 .set_soroban_data(data)
                 .build_envelope())
        assert inner.tx.fee == 5_100
        envelope = FeeBumpTransactionBuilder(inner, other_keypair, 150).build()
        assert envelope.tx.fee == 150 * 2 + 5_000

    def test_inner_signatures_still_verify(self, signed_inner, fake_keypair, other_keypair):
        envelope = FeeBumpTransactionBuilder(signed_inner, other_keypair, 200).build()
        inner = envelope.tx.inner_tx
        assert inner.verify_signature(fake_keypair, inner.signatures[0], Network.TESTNET)

    def test_fee_source_signs_outer(self, signed_inner, other_keypair):
        envelope = FeeBumpTransactionBuilder(signed_inner, other_keypair, 200).build()
        signed = envelope.sign(other_keypair, Network.TESTNET)
        assert signed.verify_signature(other_keypair, signed.signatures[0], Network.TESTNET)
        assert signed.hash(Network.TESTNET) != signed_inner.hash(Network.TESTNET)
        assert TransactionEnvelope.from_xdr_base64(signed.to_xdr_base64()) == signed

    def test_v0_inner_converted(self, fake_keypair, other_keypair):
        """Test a v0 inner envelope is wrapped as v1 and keeps its signature."""
        v0 = TransactionV0(fake_keypair.raw_public_key, 100, 5, (Operation(mk_payment(other_keypair)),))
        inner = TransactionEnvelope(v0).sign(fake_keypair, Network.TESTNET)
        envelope = FeeBumpTransactionBuilder(inner, other_keypair, 100).build()
        wrapped = envelope.tx.inner_tx
        assert wrapped.type == EnvelopeType.ENVELOPE_TYPE_TX
        assert wrapped.tx == v0.to_v1()
        assert wrapped.signatures == inner.signatures
        assert wrapped.verify_signature(fake_keypair, wrapped.signatures[0], Network.TESTNET)


class TestFeeBumpValidation:
    """Test fee-bump invariants."""

    def test_nested_fee_bump(self, signed_inner, other_keypair):
        outer = FeeBumpTransactionBuilder(signed_inner, other_keypair, 200).build()
        builder = FeeBumpTransactionBuilder(outer, mk_keypair(3), 300)
        assert builder.validate() == ["inner transaction must be v0 or v1, not a fee bump"]
        with pytest.raises(BuilderValidationError):
            builder.build()

    def test_base_fee_below_minimum(self, signed_inner, other_keypair):
        issues = FeeBumpTransactionBuilder(signed_inner, other_keypair, 50).validate()
        assert any("at least 100" in issue for issue in issues)

    def test_base_fee_below_inner(self, fake_keypair, other_keypair):
        inner = TransactionBuilder(fake_keypair, 1, base_fee=500).add_operation(mk_payment(other_keypair)).build_envelope()
        with pytest.raises(BuilderValidationError) as exc_info:
            FeeBumpTransactionBuilder(inner, other_keypair, 400).build()
        assert any("lower than the inner" in issue for issue in exc_info.value.issues)

    def test_fee_overflow(self, signed_inner, other_keypair):
        issues = FeeBumpTransactionBuilder(signed_inner, other_keypair, 2 ** 62).validate()
        assert any("int64" in issue for issue in issues)
