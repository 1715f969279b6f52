"""Transaction preconditions: time bounds, ledger bounds and the V2 extension."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple

from ..codec.reader import XdrReader
from ..codec.writer import XdrWriter, INT64_MAX, INT64_MIN, UINT32_MAX, UINT64_MAX, check_range
from ..runtime.errors import XdrRangeError
from .base import XdrType, read_enum
from .enums import PreconditionType
from .keys import SignerKey

MAX_EXTRA_SIGNERS = 2


@dataclass(frozen=True)
class TimeBounds(XdrType):
    """Unix-second validity window; 0 means unbounded."""

    min_time: int = 0
    max_time: int = 0

    def __post_init__(self):
        check_range("min_time", self.min_time, 0, UINT64_MAX)
        check_range("max_time", self.max_time, 0, UINT64_MAX)

    def pack(self, w: XdrWriter) -> None:
        w.uint64(self.min_time)
        w.uint64(self.max_time)

    @classmethod
    def unpack(cls, r: XdrReader) -> TimeBounds:
        return cls(r.uint64(), r.uint64())


@dataclass(frozen=True)
class LedgerBounds(XdrType):
    """Ledger sequence validity window; max 0 means unbounded."""

    min_ledger: int = 0
    max_ledger: int = 0

    def __post_init__(self):
        check_range("min_ledger", self.min_ledger, 0, UINT32_MAX)
        check_range("max_ledger", self.max_ledger, 0, UINT32_MAX)

    def pack(self, w: XdrWriter) -> None:
        w.uint32(self.min_ledger)
        w.uint32(self.max_ledger)

    @classmethod
    def unpack(cls, r: XdrReader) -> LedgerBounds:
        return cls(r.uint32(), r.uint32())


@dataclass(frozen=True)
class PreconditionsV2(XdrType):
    time_bounds: Optional[TimeBounds] = None
    ledger_bounds: Optional[LedgerBounds] = None
    min_seq_num: Optional[int] = None
    min_seq_age: int = 0
    min_seq_ledger_gap: int = 0
    extra_signers: Tuple[SignerKey, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "extra_signers", tuple(self.extra_signers))
        if len(self.extra_signers) > MAX_EXTRA_SIGNERS:
            raise XdrRangeError(f"at most {MAX_EXTRA_SIGNERS} extra signers are allowed")
        if self.min_seq_num is not None:
            check_range("min_seq_num", self.min_seq_num, INT64_MIN, INT64_MAX)
        check_range("min_seq_age", self.min_seq_age, 0, UINT64_MAX)
        check_range("min_seq_ledger_gap", self.min_seq_ledger_gap, 0, UINT32_MAX)

    def pack(self, w: XdrWriter) -> None:
        w.optional(self.time_bounds, lambda v: v.pack(w))
        w.optional(self.ledger_bounds, lambda v: v.pack(w))
        w.optional(self.min_seq_num, w.int64)
        w.uint64(self.min_seq_age)
        w.uint32(self.min_seq_ledger_gap)
        w.array(self.extra_signers, lambda v: v.pack(w), MAX_EXTRA_SIGNERS)

    @classmethod
    def unpack(cls, r: XdrReader) -> PreconditionsV2:
        return cls(
            time_bounds=r.optional(lambda: TimeBounds.unpack(r)),
            ledger_bounds=r.optional(lambda: LedgerBounds.unpack(r)),
            min_seq_num=r.optional(r.int64),
            min_seq_age=r.uint64(),
            min_seq_ledger_gap=r.uint32(),
            extra_signers=tuple(r.array(lambda: SignerKey.unpack(r), MAX_EXTRA_SIGNERS)),
        )


@dataclass(frozen=True)
class Preconditions(XdrType):
    """
    Preconditions union: none, time bounds only, or V2.
    """

    type: PreconditionType = PreconditionType.PRECOND_NONE
    time_bounds: Optional[TimeBounds] = None
    v2: Optional[PreconditionsV2] = None

    def __post_init__(self):
        object.__setattr__(self, "type", PreconditionType(self.type))
        if self.type == PreconditionType.PRECOND_TIME and self.time_bounds is None:
            raise XdrRangeError("PRECOND_TIME requires time_bounds")
        if self.type == PreconditionType.PRECOND_V2 and self.v2 is None:
            raise XdrRangeError("PRECOND_V2 requires v2")

    @classmethod
    def none(cls) -> Preconditions:
        return cls()

    @classmethod
    def time(cls, time_bounds: TimeBounds) -> Preconditions:
        return cls(PreconditionType.PRECOND_TIME, time_bounds=time_bounds)

    @classmethod
    def from_v2(cls, v2: PreconditionsV2) -> Preconditions:
        return cls(PreconditionType.PRECOND_V2, v2=v2)

    @property
    def effective_time_bounds(self) -> Optional[TimeBounds]:
        if self.type == PreconditionType.PRECOND_TIME:
            return self.time_bounds
        if self.type == PreconditionType.PRECOND_V2:
            return self.v2.time_bounds
        return None

    def pack(self, w: XdrWriter) -> None:
        w.enum(self.type)
        if self.type == PreconditionType.PRECOND_TIME:
            self.time_bounds.pack(w)
        elif self.type == PreconditionType.PRECOND_V2:
            self.v2.pack(w)

    @classmethod
    def unpack(cls, r: XdrReader) -> Preconditions:
        cond_type = read_enum(r, PreconditionType)
        if cond_type == PreconditionType.PRECOND_TIME:
            return cls.time(TimeBounds.unpack(r))
        if cond_type == PreconditionType.PRECOND_V2:
            return cls.from_v2(PreconditionsV2.unpack(r))
        return cls()
