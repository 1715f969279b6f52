"""
TxRep reference documents: text <-> XDR in both directions.
"""

import pytest

from stellar_client import (
    TxRepOptions, from_stroops, from_txrep, to_stroops, to_txrep, txrep_from_xdr_base64, xdr_base64_from_txrep,
)
from stellar_client.xdr import EnvelopeType, OperationType, TransactionEnvelope

from helpers import txrep_fixtures as fx

PAIRS = [
    pytest.param(fx.FEE_BUMP, fx.FEE_BUMP_XDR, id="fee_bump"),
    pytest.param(fx.CREATE_CLAIMABLE_BALANCE, fx.CREATE_CLAIMABLE_BALANCE_XDR, id="create_claimable_balance"),
    pytest.param(fx.CLAIM_CLAIMABLE_BALANCE, fx.CLAIM_CLAIMABLE_BALANCE_XDR, id="claim_claimable_balance"),
    pytest.param(fx.SPONSORING, fx.SPONSORING_XDR, id="sponsoring"),
    pytest.param(fx.REVOKE_SPONSORSHIP, fx.REVOKE_SPONSORSHIP_XDR, id="revoke_sponsorship"),
    pytest.param(fx.CLAWBACK, fx.CLAWBACK_XDR, id="clawback"),
    pytest.param(fx.CLAWBACK_CLAIMABLE_BALANCE, fx.CLAWBACK_CLAIMABLE_BALANCE_XDR, id="clawback_claimable_balance"),
    pytest.param(fx.SET_TRUSTLINE_FLAGS, fx.SET_TRUSTLINE_FLAGS_XDR, id="set_trustline_flags"),
    pytest.param(fx.LIQUIDITY_POOL, fx.LIQUIDITY_POOL_XDR, id="liquidity_pool"),
    pytest.param(fx.PRECONDITIONS3, fx.PRECONDITIONS3_XDR, id="preconditions"),
]


class TestReferenceDocuments:
    """Test published TxRep documents against their XDR."""

    @pytest.mark.parametrize("text,xdr", PAIRS)
    def test_text_to_xdr(self, text, xdr):
        assert xdr_base64_from_txrep(text) == xdr

    @pytest.mark.parametrize("text,xdr", PAIRS)
    def test_xdr_to_text(self, text, xdr):
        """Test the encoder reproduces the document line for line."""
        assert txrep_from_xdr_base64(xdr) == text

    @pytest.mark.parametrize("text", [fx.TX_REP_AND_BACK, fx.FEE_BUMP])
    def test_text_round_trip(self, text):
        assert to_txrep(from_txrep(text)) == text

    @pytest.mark.parametrize("xdr", [fx.PRECONDITIONS1_XDR, fx.PRECONDITIONS2_XDR])
    def test_xdr_round_trip(self, xdr):
        """Test muxed sources and V2 preconditions survive both directions."""
        assert xdr_base64_from_txrep(txrep_from_xdr_base64(xdr)) == xdr

    def test_all_classic_operations(self):
        envelope = from_txrep(fx.TX_REP_AND_BACK)
        types = [op.type for op in envelope.tx.operations]
        assert types[:3] == [OperationType.CREATE_ACCOUNT, OperationType.PAYMENT, OperationType.PAYMENT]
        assert OperationType.MANAGE_BUY_OFFER in types
        assert envelope.tx.memo.text_value == "Enjoy this transaction"
        assert envelope.tx.operations[0].source_account is None
        assert envelope.tx.operations[1].source_account is not None

    def test_fee_bump_envelope(self):
        envelope = from_txrep(fx.FEE_BUMP)
        assert envelope.type == EnvelopeType.ENVELOPE_TYPE_TX_FEE_BUMP
        assert envelope.tx.fee == 1515
        assert envelope == TransactionEnvelope.from_xdr_base64(fx.FEE_BUMP_XDR)

    def test_v2_preconditions_text(self):
        text = txrep_from_xdr_base64(fx.PRECONDITIONS2_XDR)
        assert "tx.cond.type: PRECOND_V2" in text
        assert "tx.cond.v2.extraSigners.len: 2" in text
        assert "tx.sourceAccount: M" in text


class TestAnnotations:
    """Test informational annotations."""

    def test_foreign_annotations_ignored(self):
        """Test that annotations in any format are stripped before parsing."""
        assert from_txrep(fx.FEE_BUMP_ANNOTATED) == from_txrep(fx.FEE_BUMP)

    def test_annotated_output_parses(self):
        envelope = from_txrep(fx.TX_REP_AND_BACK)
        annotated = to_txrep(envelope, TxRepOptions(annotations=True))
        assert annotated != fx.TX_REP_AND_BACK
        assert from_txrep(annotated) == envelope

    def test_amount_and_time_annotations(self):
        text = to_txrep(from_txrep(fx.TX_REP_AND_BACK), TxRepOptions(annotations=True))
        lines = text.splitlines()
        assert "tx.fee: 1400 (0.0001400)" in lines
        assert "tx.cond.timeBounds.minTime: 1595282368 (2020-07-20T21:59:28Z)" in lines
        assert "tx.operations[3].body.pathPaymentStrictReceiveOp.sendMax: 20000000 (2.0000000)" in lines
        # non-amount integers stay bare
        assert "tx.seqNum: 1102902109202" in lines

    def test_amount_precision(self):
        options = TxRepOptions(annotations=True, amount_decimals=2)
        text = to_txrep(from_txrep(fx.TX_REP_AND_BACK), options)
        assert "tx.operations[3].body.pathPaymentStrictReceiveOp.sendMax: 20000000 (2.00)" in text.splitlines()

    def test_amounts_match_stroops_helper(self):
        text = to_txrep(from_txrep(fx.TX_REP_AND_BACK), TxRepOptions(annotations=True))
        line = next(ln for ln in text.splitlines() if ln.startswith("tx.operations[3].body.pathPaymentStrictReceiveOp.sendMax:"))
        value, note = line.split(": ", 1)[1].split(" ", 1)
        assert note == f"({from_stroops(int(value))})"
        assert to_stroops(note.strip("()")) == int(value)

    def test_off_by_default(self):
        assert "(" not in to_txrep(from_txrep(fx.CLAWBACK))
