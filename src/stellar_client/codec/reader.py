"""
XDR Reader

Decodes the XDR primitives written by XdrWriter. Every read validates what it
consumes: truncated input raises UnexpectedEof, booleans must be 0 or 1 and
padding bytes must be zero.
"""

import struct
from typing import Callable, List, Optional, TypeVar

from ..runtime.errors import (
    InvalidBoolean, InvalidPadding, TrailingData, UnexpectedEof, XdrRangeError,
)
from .writer import padding_length

T = TypeVar("T")


class XdrReader:
    """
    XDR reader over an in-memory buffer.

    Maintains a cursor; each read advances it past the value and its padding.
    """

    def __init__(self, buf: bytes):
        """
        Initialize reader with byte buffer.

        Args:
            buf: Byte buffer to read from
        """
        self._buf = bytes(buf)
        self._off = 0

    @property
    def eof(self) -> bool:
        """True if the whole buffer has been consumed."""
        return self._off >= len(self._buf)

    @property
    def offset(self) -> int:
        return self._off

    @property
    def remaining(self) -> int:
        return len(self._buf) - self._off

    def _take(self, n: int) -> bytes:
        if self._off + n > len(self._buf):
            raise UnexpectedEof(n, self.remaining)
        chunk = self._buf[self._off:self._off + n]
        self._off += n
        return chunk

    def _skip_padding(self, n: int) -> None:
        pad = self._take(padding_length(n))
        if any(pad):
            raise InvalidPadding(pad)

    def int32(self) -> int:
        """
        Read signed 32-bit big-endian integer.

        Returns:
            Integer value

        Raises:
            UnexpectedEof: If fewer than 4 bytes remain
        """
        return struct.unpack(">i", self._take(4))[0]

    def uint32(self) -> int:
        """Read unsigned 32-bit big-endian integer."""
        return struct.unpack(">I", self._take(4))[0]

    def int64(self) -> int:
        """Read signed 64-bit big-endian integer."""
        return struct.unpack(">q", self._take(8))[0]

    def uint64(self) -> int:
        """Read unsigned 64-bit big-endian integer."""
        return struct.unpack(">Q", self._take(8))[0]

    def bool(self) -> bool:
        """
        Read a 4-byte boolean.

        Raises:
            InvalidBoolean: If the encoded value is neither 0 nor 1
        """
        v = self.uint32()
        if v not in (0, 1):
            raise InvalidBoolean(v)
        return v == 1

    def enum(self) -> int:
        """Read an enum or union discriminant (not yet validated)."""
        return self.int32()

    def opaque_fixed(self, size: int) -> bytes:
        """
        Read fixed-length opaque data and verify its padding.

        Args:
            size: Declared length

        Returns:
            Exactly size bytes
        """
        data = self._take(size)
        self._skip_padding(size)
        return data

    def opaque_var(self, max_size: Optional[int] = None) -> bytes:
        """
        Read variable-length opaque data.

        Args:
            max_size: Protocol maximum length, if any

        Raises:
            XdrRangeError: If the declared length exceeds max_size
            UnexpectedEof: If the declared length exceeds the buffer
        """
        n = self.uint32()
        if max_size is not None and n > max_size:
            raise XdrRangeError(f"opaque<{max_size}> exceeded: {n} bytes")
        if n > self.remaining:
            raise UnexpectedEof(n, self.remaining)
        return self.opaque_fixed(n)

    def string(self, max_size: Optional[int] = None) -> bytes:
        """Read an XDR string as raw bytes."""
        return self.opaque_var(max_size)

    def optional(self, read: Callable[[], T]) -> Optional[T]:
        """Read a presence flag and the value iff present."""
        if self.bool():
            return read()
        return None

    def array(self, read: Callable[[], T], max_size: Optional[int] = None) -> List[T]:
        """
        Read a variable-length array.

        Raises:
            XdrRangeError: If the declared count exceeds max_size
            UnexpectedEof: If the declared count cannot possibly fit
        """
        n = self.uint32()
        if max_size is not None and n > max_size:
            raise XdrRangeError(f"array<{max_size}> exceeded: {n} elements")
        # every element is at least 4 bytes
        if n * 4 > self.remaining:
            raise UnexpectedEof(n * 4, self.remaining)
        return [read() for _ in range(n)]

    def ensure_consumed(self) -> None:
        """
        Assert the whole buffer was read.

        Raises:
            TrailingData: If unread bytes remain
        """
        if not self.eof:
            raise TrailingData(self.remaining)
