"""
Tests for the primitive XDR writer and reader.
"""

import pytest

from stellar_client.codec import XdrReader, XdrWriter
from stellar_client.codec.writer import INT32_MIN, INT64_MAX, UINT32_MAX, UINT64_MAX, padding_length
from stellar_client.runtime.errors import (
    ErrorCode, InvalidBoolean, InvalidPadding, TrailingData, UnexpectedEof, XdrRangeError,
)


def _encode(fn, *args) -> bytes:
    w = XdrWriter()
    getattr(w, fn)(*args)
    return w.to_bytes()


class TestIntegers:
    """Test big-endian integer encoding and range checks."""

    def test_int32_big_endian(self):
        """Test int32 two's complement layout."""
        assert _encode("int32", 1) == b"\x00\x00\x00\x01"
        assert _encode("int32", -1) == b"\xff\xff\xff\xff"
        assert _encode("int32", INT32_MIN) == b"\x80\x00\x00\x00"

    def test_uint64_layout(self):
        assert _encode("uint64", UINT64_MAX) == b"\xff" * 8
        assert _encode("int64", INT64_MAX) == b"\x7f" + b"\xff" * 7

    @pytest.mark.parametrize("fn,value", [
        ("int32", 2 ** 31),
        ("int32", INT32_MIN - 1),
        ("uint32", -1),
        ("uint32", UINT32_MAX + 1),
        ("int64", INT64_MAX + 1),
        ("uint64", -1),
        ("uint64", UINT64_MAX + 1),
    ])
    def test_out_of_range_rejected(self, fn, value):
        """Test that values outside the declared width raise XdrRangeError."""
        with pytest.raises(XdrRangeError) as exc_info:
            _encode(fn, value)
        assert exc_info.value.code == ErrorCode.RANGE_ERROR

    def test_bool_is_not_an_integer(self):
        with pytest.raises(XdrRangeError, match="must be an integer"):
            _encode("uint32", True)

    def test_integer_round_trip_edges(self):
        """Test reading back boundary values for every width."""
        w = XdrWriter()
        w.int32(INT32_MIN)
        w.uint32(UINT32_MAX)
        w.int64(-(2 ** 63))
        w.uint64(UINT64_MAX)
        r = XdrReader(w.to_bytes())
        assert r.int32() == INT32_MIN
        assert r.uint32() == UINT32_MAX
        assert r.int64() == -(2 ** 63)
        assert r.uint64() == UINT64_MAX
        assert r.eof


class TestOpaque:
    """Test opaque data padding."""

    @pytest.mark.parametrize("n,pad", [(0, 0), (1, 3), (2, 2), (3, 1), (4, 0), (5, 3)])
    def test_padding_length(self, n, pad):
        assert padding_length(n) == pad

    def test_var_opaque_is_length_prefixed_and_padded(self):
        """Test a 5-byte value takes 4 + 5 + 3 bytes."""
        data = _encode("opaque_var", b"hello")
        assert data == b"\x00\x00\x00\x05hello\x00\x00\x00"
        assert len(data) % 4 == 0

    def test_fixed_opaque_requires_exact_size(self):
        with pytest.raises(XdrRangeError):
            _encode("opaque_fixed", b"abc", 4)

    def test_var_opaque_max_size(self):
        w = XdrWriter()
        with pytest.raises(XdrRangeError, match="opaque<4>"):
            w.opaque_var(b"12345", 4)

    def test_string_is_utf8(self):
        r = XdrReader(_encode("string", "día"))
        assert r.string().decode("utf-8") == "día"

    def test_nonzero_padding_rejected(self):
        """Test that a reader refuses garbage in padding bytes."""
        with pytest.raises(InvalidPadding) as exc_info:
            XdrReader(b"\x00\x00\x00\x01a\x00\x01\x00").opaque_var()
        assert exc_info.value.code == ErrorCode.INVALID_PADDING

    def test_declared_length_beyond_buffer(self):
        with pytest.raises(UnexpectedEof):
            XdrReader(b"\x00\x00\x00\x10abcd").opaque_var()

    def test_declared_length_over_max(self):
        with pytest.raises(XdrRangeError):
            XdrReader(b"\x00\x00\x00\x40" + b"\x00" * 64).opaque_var(32)


class TestCompound:
    """Test booleans, optionals and arrays."""

    def test_bool_encoding(self):
        assert _encode("bool", True) == b"\x00\x00\x00\x01"
        assert _encode("bool", False) == b"\x00\x00\x00\x00"

    def test_invalid_boolean(self):
        with pytest.raises(InvalidBoolean) as exc_info:
            XdrReader(b"\x00\x00\x00\x02").bool()
        assert exc_info.value.value == 2

    def test_optional(self):
        w = XdrWriter()
        w.optional(None, w.uint32)
        w.optional(7, w.uint32)
        r = XdrReader(w.to_bytes())
        assert r.optional(r.uint32) is None
        assert r.optional(r.uint32) == 7

    def test_array(self):
        w = XdrWriter()
        w.array([1, 2, 3], w.int32)
        assert len(w) == 16
        r = XdrReader(w.to_bytes())
        assert r.array(r.int32) == [1, 2, 3]

    def test_array_max_size(self):
        w = XdrWriter()
        with pytest.raises(XdrRangeError):
            w.array([1, 2, 3], w.int32, 2)

    def test_array_count_beyond_buffer(self):
        """Test a huge declared count fails fast instead of looping."""
        with pytest.raises(UnexpectedEof):
            XdrReader(b"\xff\xff\xff\xff").array(lambda: None)


class TestReaderCursor:
    """Test EOF and trailing data handling."""

    def test_short_read(self):
        with pytest.raises(UnexpectedEof) as exc_info:
            XdrReader(b"\x00\x00").uint32()
        assert exc_info.value.needed == 4
        assert exc_info.value.remaining == 2

    def test_trailing_data(self):
        r = XdrReader(b"\x00\x00\x00\x01\x00")
        r.uint32()
        assert r.offset == 4
        with pytest.raises(TrailingData) as exc_info:
            r.ensure_consumed()
        assert exc_info.value.remaining == 1

    def test_consumed(self):
        r = XdrReader(b"\x00\x00\x00\x01")
        r.uint32()
        r.ensure_consumed()
