"""
XDR Writer

Implements the XDR (RFC 4506) primitive encoding used by the Stellar network:
big-endian fixed-width integers, 4-byte booleans, zero-padded opaque data and
length-prefixed variable data.
"""

import struct
from typing import Callable, List, Optional, Sequence, TypeVar

from ..runtime.errors import XdrRangeError

T = TypeVar("T")

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1
UINT32_MAX = 2 ** 32 - 1
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1
UINT64_MAX = 2 ** 64 - 1


def padding_length(n: int) -> int:
    """Number of zero bytes needed to align n bytes to a 4-byte boundary."""
    return (4 - n % 4) % 4


def check_range(name: str, v: int, lo: int, hi: int) -> int:
    """
    Validate an integer against an inclusive range.

    Raises:
        XdrRangeError: If v is not an int or is out of [lo, hi]
    """
    if isinstance(v, bool) or not isinstance(v, int):
        raise XdrRangeError(f"{name} must be an integer, got {type(v).__name__}")
    if v < lo or v > hi:
        raise XdrRangeError(f"{name} out of range [{lo}, {hi}]: {v}", {"value": v})
    return v


class XdrWriter:
    """
    XDR writer.

    Accumulates encoded bytes; every value is written at a 4-byte aligned
    offset.
    """

    def __init__(self):
        """Initialize writer with empty byte buffer."""
        self._bb: List[int] = []

    def int32(self, v: int) -> None:
        """
        Write signed 32-bit integer in big-endian two's complement.

        Args:
            v: Integer value in [-2^31, 2^31-1]

        Raises:
            XdrRangeError: If v does not fit
        """
        check_range("int32", v, INT32_MIN, INT32_MAX)
        self._bb.extend(struct.pack(">i", v))

    def uint32(self, v: int) -> None:
        """
        Write unsigned 32-bit integer in big-endian format.

        Args:
            v: Integer value in [0, 2^32-1]

        Raises:
            XdrRangeError: If v does not fit
        """
        check_range("uint32", v, 0, UINT32_MAX)
        self._bb.extend(struct.pack(">I", v))

    def int64(self, v: int) -> None:
        """
        Write signed 64-bit integer in big-endian two's complement.

        Args:
            v: Integer value in [-2^63, 2^63-1]
        """
        check_range("int64", v, INT64_MIN, INT64_MAX)
        self._bb.extend(struct.pack(">q", v))

    def uint64(self, v: int) -> None:
        """
        Write unsigned 64-bit integer in big-endian format.

        Args:
            v: Integer value in [0, 2^64-1]
        """
        check_range("uint64", v, 0, UINT64_MAX)
        self._bb.extend(struct.pack(">Q", v))

    def bool(self, v: bool) -> None:
        """Write boolean as a 4-byte 0 or 1."""
        self._bb.extend(struct.pack(">I", 1 if v else 0))

    def enum(self, v: int) -> None:
        """Write an enum or union discriminant."""
        self.int32(int(v))

    def opaque_fixed(self, v: bytes, size: int) -> None:
        """
        Write fixed-length opaque data, zero padded to a 4-byte boundary.

        Args:
            v: Exactly size bytes
            size: Declared length

        Raises:
            XdrRangeError: If len(v) != size
        """
        if len(v) != size:
            raise XdrRangeError(f"opaque[{size}] requires {size} bytes, got {len(v)}")
        self._bb.extend(v)
        self._bb.extend(b"\x00" * padding_length(size))

    def opaque_var(self, v: bytes, max_size: Optional[int] = None) -> None:
        """
        Write variable-length opaque data with a 4-byte length prefix.

        Args:
            v: Bytes to write
            max_size: Protocol maximum length, if any

        Raises:
            XdrRangeError: If v exceeds max_size
        """
        if max_size is not None and len(v) > max_size:
            raise XdrRangeError(f"opaque<{max_size}> exceeded: {len(v)} bytes")
        self.uint32(len(v))
        self._bb.extend(v)
        self._bb.extend(b"\x00" * padding_length(len(v)))

    def string(self, s, max_size: Optional[int] = None) -> None:
        """
        Write an XDR string.

        XDR strings are byte strings; text is encoded as UTF-8.

        Args:
            s: str or bytes
            max_size: Protocol maximum length in bytes, if any
        """
        data = s.encode("utf-8") if isinstance(s, str) else bytes(s)
        self.opaque_var(data, max_size)

    def optional(self, v: Optional[T], write: Callable[[T], None]) -> None:
        """Write a presence flag followed by the value iff present."""
        if v is None:
            self.bool(False)
        else:
            self.bool(True)
            write(v)

    def array(self, items: Sequence[T], write: Callable[[T], None],
              max_size: Optional[int] = None) -> None:
        """
        Write a variable-length array: count prefix then each element.

        Raises:
            XdrRangeError: If the array exceeds max_size
        """
        if max_size is not None and len(items) > max_size:
            raise XdrRangeError(f"array<{max_size}> exceeded: {len(items)} elements")
        self.uint32(len(items))
        for item in items:
            write(item)

    def raw(self, v: bytes) -> None:
        """Write raw bytes without length prefix or padding."""
        self._bb.extend(v)

    def to_bytes(self) -> bytes:
        """
        Return accumulated bytes as immutable bytes object.

        Returns:
            The encoded bytes
        """
        return bytes(self._bb)

    def __len__(self) -> int:
        return len(self._bb)
