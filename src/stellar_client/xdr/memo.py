"""Transaction memo."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Union

from ..codec.reader import XdrReader
from ..codec.writer import XdrWriter, UINT64_MAX, check_range
from ..runtime.errors import XdrRangeError
from .base import XdrType, read_enum
from .enums import MemoType
from .keys import check_hash

MAX_MEMO_TEXT_LENGTH = 28


@dataclass(frozen=True)
class Memo(XdrType):
    """
    Memo union.

    ``value`` is None for MEMO_NONE, the raw UTF-8 bytes for MEMO_TEXT, an
    unsigned 64-bit int for MEMO_ID and 32 bytes for MEMO_HASH / MEMO_RETURN.
    """

    type: MemoType = MemoType.MEMO_NONE
    value: Union[None, bytes, int] = None

    def __post_init__(self):
        object.__setattr__(self, "type", MemoType(self.type))
        if self.type == MemoType.MEMO_NONE:
            if self.value is not None:
                raise XdrRangeError("MEMO_NONE carries no value")
        elif self.type == MemoType.MEMO_TEXT:
            if not isinstance(self.value, (bytes, bytearray)):
                raise XdrRangeError("MEMO_TEXT value must be bytes")
            if len(self.value) > MAX_MEMO_TEXT_LENGTH:
                raise XdrRangeError(
                    f"memo text must be at most {MAX_MEMO_TEXT_LENGTH} bytes, got {len(self.value)}")
            object.__setattr__(self, "value", bytes(self.value))
        elif self.type == MemoType.MEMO_ID:
            check_range("memo id", self.value, 0, UINT64_MAX)
        else:
            object.__setattr__(self, "value", check_hash(self.type.name, self.value))

    @classmethod
    def none(cls) -> Memo:
        return cls()

    @classmethod
    def text(cls, text: Union[str, bytes]) -> Memo:
        """
        Text memo.

        Raises:
            XdrRangeError: If the UTF-8 encoding exceeds 28 bytes
        """
        data = text.encode("utf-8") if isinstance(text, str) else text
        return cls(MemoType.MEMO_TEXT, data)

    @classmethod
    def id(cls, memo_id: int) -> Memo:
        return cls(MemoType.MEMO_ID, memo_id)

    @classmethod
    def hash(cls, memo_hash: bytes) -> Memo:
        return cls(MemoType.MEMO_HASH, memo_hash)

    @classmethod
    def return_hash(cls, memo_hash: bytes) -> Memo:
        return cls(MemoType.MEMO_RETURN, memo_hash)

    @property
    def text_value(self) -> str:
        """Decoded MEMO_TEXT; undecodable bytes are replaced."""
        return self.value.decode("utf-8", errors="replace")

    def pack(self, w: XdrWriter) -> None:
        w.enum(self.type)
        if self.type == MemoType.MEMO_TEXT:
            w.string(self.value, MAX_MEMO_TEXT_LENGTH)
        elif self.type == MemoType.MEMO_ID:
            w.uint64(self.value)
        elif self.type in (MemoType.MEMO_HASH, MemoType.MEMO_RETURN):
            w.opaque_fixed(self.value, 32)

    @classmethod
    def unpack(cls, r: XdrReader) -> Memo:
        memo_type = read_enum(r, MemoType)
        if memo_type == MemoType.MEMO_NONE:
            return cls()
        if memo_type == MemoType.MEMO_TEXT:
            return cls(memo_type, r.string(MAX_MEMO_TEXT_LENGTH))
        if memo_type == MemoType.MEMO_ID:
            return cls(memo_type, r.uint64())
        return cls(memo_type, r.opaque_fixed(32))
