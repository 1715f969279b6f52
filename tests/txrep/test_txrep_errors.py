"""
TxRep parser leniency and error reporting.
"""

import pytest

from stellar_client import from_txrep, to_txrep
from stellar_client.runtime.errors import (
    ErrorCode, LengthMismatch, MissingField, TxRepError, UnknownVariant,
)
from stellar_client.txrep import parse_lines
from stellar_client.txrep.common import split_annotation
from stellar_client.xdr import Memo, MemoType


@pytest.fixture
def document(payment_builder):
    """TxRep text of an unsigned one-payment transaction."""
    return to_txrep(payment_builder.add_text_memo("rent").build_envelope())


def _set(text: str, key: str, value: str) -> str:
    lines = [f"{key}: {value}" if line.startswith(f"{key}:") else line for line in text.splitlines()]
    assert lines != text.splitlines()
    return "\n".join(lines)


def _drop(text: str, key: str) -> str:
    return "\n".join(line for line in text.splitlines() if not line.startswith(f"{key}:"))


class TestLeniency:
    """Test input the parser tolerates."""

    def test_blank_and_separatorless_lines(self, document):
        noisy = "\n\n".join(document.splitlines()) + "\nthis line has no separator\n"
        assert from_txrep(noisy) == from_txrep(document)

    def test_last_duplicate_wins(self, document):
        envelope = from_txrep(document + "\ntx.seqNum: 77")
        assert envelope.tx.sequence_number == 77

    def test_whitespace_around_separator(self, document):
        spaced = document.replace("tx.fee: 100", "  tx.fee :   100  ")
        assert from_txrep(spaced).tx.fee == 100

    def test_parenthesis_inside_memo(self, payment_builder):
        envelope = payment_builder.add_text_memo("pay (rent)").build_envelope()
        assert from_txrep(to_txrep(envelope)).tx.memo.text_value == "pay (rent)"

    def test_memo_escapes(self, payment_builder):
        """Test quotes, backslashes and non-UTF-8 bytes survive the text form."""
        for value in ('say "hi"', "back\\slash", b"\xff\xfe raw"):
            envelope = payment_builder.add_memo(Memo.text(value)).build_envelope()
            assert from_txrep(to_txrep(envelope)) == envelope

    def test_legacy_return_memo_key(self, document):
        text = _set(document, "tx.memo.type", "MEMO_RETURN")
        text = text.replace('tx.memo.text: "rent"', "tx.memo.return: " + "ab" * 32)
        memo = from_txrep(text).tx.memo
        assert memo.type == MemoType.MEMO_RETURN
        assert memo.value == b"\xab" * 32

    def test_parse_lines(self):
        values = parse_lines("a: 1 (one)\nb: \"x (y)\" (note)\nnoise\na: 2")
        assert values == {"a": "2", "b": '"x (y)"'}

    def test_split_annotation(self):
        assert split_annotation("100 (0.00001)") == "100"
        assert split_annotation('"a\\"(b" (c)') == '"a\\"(b"'
        assert split_annotation("GABC") == "GABC"


class TestErrors:
    """Test every failure names the offending path."""

    def test_missing_field(self, document):
        with pytest.raises(MissingField) as exc_info:
            from_txrep(_drop(document, "tx.fee"))
        assert exc_info.value.path == "tx.fee"
        assert exc_info.value.code == ErrorCode.MISSING_FIELD

    def test_missing_type(self):
        with pytest.raises(MissingField) as exc_info:
            from_txrep("tx.fee: 100")
        assert exc_info.value.path == "type"

    def test_length_mismatch(self, document):
        with pytest.raises(LengthMismatch) as exc_info:
            from_txrep(_set(document, "tx.operations.len", "2"))
        error = exc_info.value
        assert error.path == "tx.operations"
        assert (error.declared, error.actual) == (2, 1)

    def test_unknown_variant(self, document):
        with pytest.raises(UnknownVariant) as exc_info:
            from_txrep(_set(document, "tx.memo.type", "MEMO_FANCY"))
        assert exc_info.value.path == "tx.memo.type"
        assert exc_info.value.name == "MEMO_FANCY"

    def test_unknown_operation(self, document):
        with pytest.raises(UnknownVariant) as exc_info:
            from_txrep(_set(document, "tx.operations[0].body.type", "TELEPORT"))
        assert exc_info.value.path == "tx.operations[0].body.type"

    @pytest.mark.parametrize("value", ["1e3", "0x64", "100.0", "", "+100"])
    def test_bad_integer(self, document, value):
        with pytest.raises(TxRepError) as exc_info:
            from_txrep(_set(document, "tx.fee", value))
        assert exc_info.value.path == "tx.fee"

    def test_integer_out_of_range(self, document):
        with pytest.raises(TxRepError) as exc_info:
            from_txrep(_set(document, "tx.fee", str(2 ** 32)))
        assert exc_info.value.path == "tx.fee"

    def test_bad_boolean(self, document):
        with pytest.raises(TxRepError) as exc_info:
            from_txrep(_set(document, "tx.operations[0].sourceAccount._present", "yes"))
        assert exc_info.value.path == "tx.operations[0].sourceAccount._present"

    def test_bad_address(self, document):
        with pytest.raises(TxRepError) as exc_info:
            from_txrep(_set(document, "tx.operations[0].body.paymentOp.destination", "GBROKEN"))
        assert exc_info.value.path == "tx.operations[0].body.paymentOp.destination"
        assert exc_info.value.cause is not None

    def test_memo_too_long(self, document):
        with pytest.raises(TxRepError) as exc_info:
            from_txrep(_set(document, "tx.memo.text", '"' + "x" * 29 + '"'))
        assert exc_info.value.path == "tx.memo.text"

    def test_bad_hex(self, document):
        text = _set(document, "tx.memo.type", "MEMO_HASH").replace('tx.memo.text: "rent"', "tx.memo.hash: zz")
        with pytest.raises(TxRepError) as exc_info:
            from_txrep(text)
        assert exc_info.value.path == "tx.memo.hash"

    def test_errors_are_value_errors(self, document):
        with pytest.raises(ValueError):
            from_txrep(_drop(document, "tx.seqNum"))
