"""
Decimal amount and stroops conversion tests.
"""

from decimal import Decimal

import pytest

from stellar_client import from_stroops, to_stroops
from stellar_client.codec.writer import INT64_MAX
from stellar_client.runtime.errors import XdrRangeError
from stellar_client.xdr import STROOPS_PER_UNIT


class TestToStroops:
    """Test parsing decimal amounts."""

    @pytest.mark.parametrize("amount,expected", [
        ("1", 10_000_000),
        ("12.5", 125_000_000),
        ("0.0000001", 1),
        (Decimal("922337203685.4775807"), INT64_MAX),
        ("-3.25", -32_500_000),
        (7, 70_000_000),
        ("0", 0),
    ])
    def test_values(self, amount, expected):
        assert to_stroops(amount) == expected

    def test_unit(self):
        assert to_stroops("1") == STROOPS_PER_UNIT

    @pytest.mark.parametrize("amount", ["0.00000001", "1.12345678", Decimal("1E-8")])
    def test_excess_precision(self, amount):
        with pytest.raises(XdrRangeError):
            to_stroops(amount)

    @pytest.mark.parametrize("amount", ["922337203685.4775808", "abc", "", "NaN", "Infinity", 1.5, True])
    def test_invalid(self, amount):
        with pytest.raises(XdrRangeError):
            to_stroops(amount)

    def test_trailing_zeros_accepted(self):
        assert to_stroops("2.00000000000") == 20_000_000


class TestFromStroops:
    """Test formatting stroops."""

    def test_seven_places(self):
        assert from_stroops(1) == "0.0000001"
        assert from_stroops(20_000_000) == "2.0000000"
        assert from_stroops(INT64_MAX) == "922337203685.4775807"

    def test_places(self):
        assert from_stroops(20_000_000, 2) == "2.00"
        assert from_stroops(125_000_000, 0) == "12"

    def test_inverse(self):
        for stroops in (0, 1, 1400, 123_456_789, INT64_MAX):
            assert to_stroops(from_stroops(stroops)) == stroops

    def test_out_of_range(self):
        with pytest.raises(XdrRangeError):
            from_stroops(INT64_MAX + 1)
