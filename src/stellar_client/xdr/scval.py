"""
Smart contract values (SCVal) and contract addresses.

128 and 256-bit integers travel as 64-bit parts on the wire but are exposed
as plain Python ints. Range is validated whenever a value is constructed, so
an out-of-range integer never reaches the encoder.
"""

from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Tuple, Union

from ..codec.reader import XdrReader
from ..codec.writer import (
    XdrWriter, INT32_MAX, INT32_MIN, INT64_MAX, INT64_MIN, UINT32_MAX, UINT64_MAX, check_range,
)
from ..crypto import strkey
from ..runtime.errors import StrKeyError, XdrRangeError
from .base import XdrType, read_enum
from .enums import ContractExecutableType, SCAddressType, SCErrorCode, SCErrorType, SCValType
from .keys import AccountId, ClaimableBalanceId, MuxedAccount, check_hash

MASK64 = (1 << 64) - 1

U128_MAX = (1 << 128) - 1
I128_MIN = -(1 << 127)
I128_MAX = (1 << 127) - 1
U256_MAX = (1 << 256) - 1
I256_MIN = -(1 << 255)
I256_MAX = (1 << 255) - 1

MAX_SYMBOL_LENGTH = 32

_SYMBOL = re.compile(r"^[A-Za-z0-9_]*\Z")


def check_symbol(name: str, value: Any) -> str:
    """
    Validate a contract symbol: at most 32 characters from [A-Za-z0-9_].

    Raises:
        XdrRangeError: If value is not a valid symbol
    """
    if not isinstance(value, str) or len(value) > MAX_SYMBOL_LENGTH or not _SYMBOL.match(value):
        raise XdrRangeError(f"{name} must be at most {MAX_SYMBOL_LENGTH} characters of [A-Za-z0-9_], got {value!r}")
    return value


def decode_symbol(name: str, raw: bytes) -> str:
    """Decode symbol bytes read off the wire."""
    try:
        text = raw.decode("ascii")
    except UnicodeDecodeError:
        raise XdrRangeError(f"{name} is not ASCII: {raw.hex()}") from None
    return check_symbol(name, text)


# =============================================================================
# Big integer parts
# =============================================================================

def u128_to_parts(value: int) -> Tuple[int, int]:
    """
    Split an unsigned 128-bit integer.

    Returns:
        (hi, lo) unsigned 64-bit words

    Raises:
        XdrRangeError: If value is outside [0, 2^128-1]
    """
    check_range("u128", value, 0, U128_MAX)
    return value >> 64, value & MASK64


def i128_to_parts(value: int) -> Tuple[int, int]:
    """
    Split a signed 128-bit integer.

    Returns:
        (hi, lo) where hi is signed 64-bit and lo unsigned 64-bit
    """
    check_range("i128", value, I128_MIN, I128_MAX)
    return value >> 64, value & MASK64


def parts_to_u128(hi: int, lo: int) -> int:
    return (hi << 64) | lo


def parts_to_i128(hi: int, lo: int) -> int:
    # hi is already signed; the arithmetic shift keeps the sign
    return (hi << 64) | lo


def u256_to_parts(value: int) -> Tuple[int, int, int, int]:
    """
    Split an unsigned 256-bit integer.

    Returns:
        (hi_hi, hi_lo, lo_hi, lo_lo) unsigned 64-bit words
    """
    check_range("u256", value, 0, U256_MAX)
    return (value >> 192) & MASK64, (value >> 128) & MASK64, (value >> 64) & MASK64, value & MASK64


def i256_to_parts(value: int) -> Tuple[int, int, int, int]:
    """
    Split a signed 256-bit integer.

    Returns:
        (hi_hi, hi_lo, lo_hi, lo_lo); hi_hi is signed, the rest unsigned
    """
    check_range("i256", value, I256_MIN, I256_MAX)
    return value >> 192, (value >> 128) & MASK64, (value >> 64) & MASK64, value & MASK64


def parts_to_u256(hi_hi: int, hi_lo: int, lo_hi: int, lo_lo: int) -> int:
    return (hi_hi << 192) | (hi_lo << 128) | (lo_hi << 64) | lo_lo


def parts_to_i256(hi_hi: int, hi_lo: int, lo_hi: int, lo_lo: int) -> int:
    return (hi_hi << 192) | (hi_lo << 128) | (lo_hi << 64) | lo_lo


# =============================================================================
# Addresses, errors, executables
# =============================================================================

@dataclass(frozen=True)
class SCAddress(XdrType):
    """
    Contract-visible address.

    ``value`` is an AccountId, a 32-byte contract id, a muxed MuxedAccount,
    a ClaimableBalanceId or a 32-byte liquidity pool id depending on type.
    """

    type: SCAddressType
    value: Union[AccountId, bytes, MuxedAccount, ClaimableBalanceId]

    def __post_init__(self):
        object.__setattr__(self, "type", SCAddressType(self.type))
        t = self.type
        if t == SCAddressType.SC_ADDRESS_TYPE_ACCOUNT:
            ok = isinstance(self.value, AccountId)
        elif t == SCAddressType.SC_ADDRESS_TYPE_MUXED_ACCOUNT:
            ok = isinstance(self.value, MuxedAccount) and self.value.is_muxed
        elif t == SCAddressType.SC_ADDRESS_TYPE_CLAIMABLE_BALANCE:
            ok = isinstance(self.value, ClaimableBalanceId)
        else:
            object.__setattr__(self, "value", check_hash(t.name, self.value))
            ok = True
        if not ok:
            raise XdrRangeError(f"Invalid value for {t.name}: {self.value!r}")

    @classmethod
    def account(cls, account_id: Union[str, AccountId]) -> SCAddress:
        if isinstance(account_id, str):
            account_id = AccountId.from_address(account_id)
        return cls(SCAddressType.SC_ADDRESS_TYPE_ACCOUNT, account_id)

    @classmethod
    def contract(cls, contract_id: Union[str, bytes]) -> SCAddress:
        if isinstance(contract_id, str):
            contract_id = strkey.decode_contract_id(contract_id)
        return cls(SCAddressType.SC_ADDRESS_TYPE_CONTRACT, contract_id)

    @classmethod
    def from_address(cls, address: str) -> SCAddress:
        """
        Parse a G..., M... or C... address.

        Raises:
            StrKeyError: For any other prefix
        """
        prefix = address[:1]
        if prefix == "G":
            return cls.account(address)
        if prefix == "C":
            return cls.contract(address)
        if prefix == "M":
            return cls(SCAddressType.SC_ADDRESS_TYPE_MUXED_ACCOUNT, MuxedAccount.from_address(address))
        raise StrKeyError(f"Unsupported contract address prefix {prefix!r}")

    @property
    def address(self) -> str:
        """StrKey text for account, muxed and contract addresses."""
        t = self.type
        if t == SCAddressType.SC_ADDRESS_TYPE_ACCOUNT:
            return self.value.address
        if t == SCAddressType.SC_ADDRESS_TYPE_CONTRACT:
            return strkey.encode_contract_id(self.value)
        if t == SCAddressType.SC_ADDRESS_TYPE_MUXED_ACCOUNT:
            return self.value.address
        raise XdrRangeError(f"{t.name} has no StrKey form")

    def pack(self, w: XdrWriter) -> None:
        w.enum(self.type)
        t = self.type
        if t == SCAddressType.SC_ADDRESS_TYPE_MUXED_ACCOUNT:
            w.uint64(self.value.id)
            w.opaque_fixed(self.value.ed25519, 32)
        elif t in (SCAddressType.SC_ADDRESS_TYPE_CONTRACT, SCAddressType.SC_ADDRESS_TYPE_LIQUIDITY_POOL):
            w.opaque_fixed(self.value, 32)
        else:
            self.value.pack(w)

    @classmethod
    def unpack(cls, r: XdrReader) -> SCAddress:
        t = read_enum(r, SCAddressType)
        if t == SCAddressType.SC_ADDRESS_TYPE_ACCOUNT:
            return cls(t, AccountId.unpack(r))
        if t == SCAddressType.SC_ADDRESS_TYPE_MUXED_ACCOUNT:
            muxed_id = r.uint64()
            return cls(t, MuxedAccount(r.opaque_fixed(32), muxed_id))
        if t == SCAddressType.SC_ADDRESS_TYPE_CLAIMABLE_BALANCE:
            return cls(t, ClaimableBalanceId.unpack(r))
        return cls(t, r.opaque_fixed(32))


@dataclass(frozen=True)
class SCError(XdrType):
    """Contract error: a contract-defined u32 code or a host error code."""

    type: SCErrorType
    contract_code: Optional[int] = None
    code: Optional[SCErrorCode] = None

    def __post_init__(self):
        object.__setattr__(self, "type", SCErrorType(self.type))
        if self.type == SCErrorType.SCE_CONTRACT:
            check_range("contract error code", self.contract_code, 0, UINT32_MAX)
            if self.code is not None:
                raise XdrRangeError("SCE_CONTRACT carries contract_code only")
        else:
            if self.code is None or self.contract_code is not None:
                raise XdrRangeError(f"{self.type.name} requires an SCErrorCode")
            object.__setattr__(self, "code", SCErrorCode(self.code))

    def pack(self, w: XdrWriter) -> None:
        w.enum(self.type)
        if self.type == SCErrorType.SCE_CONTRACT:
            w.uint32(self.contract_code)
        else:
            w.enum(self.code)

    @classmethod
    def unpack(cls, r: XdrReader) -> SCError:
        t = read_enum(r, SCErrorType)
        if t == SCErrorType.SCE_CONTRACT:
            return cls(t, contract_code=r.uint32())
        return cls(t, code=read_enum(r, SCErrorCode))


@dataclass(frozen=True)
class ContractExecutable(XdrType):
    """Uploaded wasm (by hash) or the built-in Stellar asset contract."""

    type: ContractExecutableType
    wasm_hash: Optional[bytes] = None

    def __post_init__(self):
        object.__setattr__(self, "type", ContractExecutableType(self.type))
        if self.type == ContractExecutableType.CONTRACT_EXECUTABLE_WASM:
            object.__setattr__(self, "wasm_hash", check_hash("wasm hash", self.wasm_hash))
        elif self.wasm_hash is not None:
            raise XdrRangeError("Stellar asset executable has no wasm hash")

    @classmethod
    def wasm(cls, wasm_hash: bytes) -> ContractExecutable:
        return cls(ContractExecutableType.CONTRACT_EXECUTABLE_WASM, wasm_hash)

    @classmethod
    def stellar_asset(cls) -> ContractExecutable:
        return cls(ContractExecutableType.CONTRACT_EXECUTABLE_STELLAR_ASSET)

    def pack(self, w: XdrWriter) -> None:
        w.enum(self.type)
        if self.type == ContractExecutableType.CONTRACT_EXECUTABLE_WASM:
            w.opaque_fixed(self.wasm_hash, 32)

    @classmethod
    def unpack(cls, r: XdrReader) -> ContractExecutable:
        t = read_enum(r, ContractExecutableType)
        if t == ContractExecutableType.CONTRACT_EXECUTABLE_WASM:
            return cls(t, r.opaque_fixed(32))
        return cls(t)


# =============================================================================
# SCVal
# =============================================================================

@dataclass(frozen=True)
class SCMapEntry(XdrType):
    key: SCVal
    val: SCVal

    def pack(self, w: XdrWriter) -> None:
        self.key.pack(w)
        self.val.pack(w)

    @classmethod
    def unpack(cls, r: XdrReader) -> SCMapEntry:
        return cls(SCVal.unpack(r), SCVal.unpack(r))


def _pack_map(w: XdrWriter, entries: Tuple[SCMapEntry, ...]) -> None:
    w.array(entries, lambda e: e.pack(w))


def _unpack_map(r: XdrReader) -> Tuple[SCMapEntry, ...]:
    return tuple(r.array(lambda: SCMapEntry.unpack(r)))


@dataclass(frozen=True)
class SCContractInstance(XdrType):
    executable: ContractExecutable
    storage: Optional[Tuple[SCMapEntry, ...]] = None

    def __post_init__(self):
        if self.storage is not None:
            object.__setattr__(self, "storage", tuple(self.storage))

    def pack(self, w: XdrWriter) -> None:
        self.executable.pack(w)
        w.optional(self.storage, lambda v: _pack_map(w, v))

    @classmethod
    def unpack(cls, r: XdrReader) -> SCContractInstance:
        executable = ContractExecutable.unpack(r)
        return cls(executable, r.optional(lambda: _unpack_map(r)))


_INT_RANGES = {
    SCValType.SCV_U32: (0, UINT32_MAX),
    SCValType.SCV_I32: (INT32_MIN, INT32_MAX),
    SCValType.SCV_U64: (0, UINT64_MAX),
    SCValType.SCV_I64: (INT64_MIN, INT64_MAX),
    SCValType.SCV_TIMEPOINT: (0, UINT64_MAX),
    SCValType.SCV_DURATION: (0, UINT64_MAX),
    SCValType.SCV_U128: (0, U128_MAX),
    SCValType.SCV_I128: (I128_MIN, I128_MAX),
    SCValType.SCV_U256: (0, U256_MAX),
    SCValType.SCV_I256: (I256_MIN, I256_MAX),
    SCValType.SCV_LEDGER_KEY_NONCE: (INT64_MIN, INT64_MAX),
}

_VOID_TYPES = (SCValType.SCV_VOID, SCValType.SCV_LEDGER_KEY_CONTRACT_INSTANCE)


@dataclass(frozen=True)
class SCVal(XdrType):
    """
    Contract value union.

    ``value`` by type:

    - BOOL: bool; VOID, LEDGER_KEY_CONTRACT_INSTANCE: None
    - integer types, TIMEPOINT, DURATION, LEDGER_KEY_NONCE: int
    - BYTES, STRING: bytes; SYMBOL: str
    - VEC: tuple of SCVal or None; MAP: tuple of SCMapEntry or None
    - ERROR: SCError; ADDRESS: SCAddress; CONTRACT_INSTANCE: SCContractInstance
    """

    type: SCValType
    value: Any = None

    def __post_init__(self):
        object.__setattr__(self, "type", SCValType(self.type))
        t = self.type
        v = self.value
        if t in _INT_RANGES:
            lo, hi = _INT_RANGES[t]
            check_range(t.name, v, lo, hi)
        elif t == SCValType.SCV_BOOL:
            if not isinstance(v, bool):
                raise XdrRangeError("SCV_BOOL value must be bool")
        elif t in _VOID_TYPES:
            if v is not None:
                raise XdrRangeError(f"{t.name} carries no value")
        elif t in (SCValType.SCV_BYTES, SCValType.SCV_STRING):
            if not isinstance(v, (bytes, bytearray)):
                raise XdrRangeError(f"{t.name} value must be bytes")
            object.__setattr__(self, "value", bytes(v))
        elif t == SCValType.SCV_SYMBOL:
            check_symbol("SCV_SYMBOL", v)
        elif t in (SCValType.SCV_VEC, SCValType.SCV_MAP):
            if v is not None:
                object.__setattr__(self, "value", tuple(v))
        elif t == SCValType.SCV_ERROR:
            if not isinstance(v, SCError):
                raise XdrRangeError("SCV_ERROR value must be SCError")
        elif t == SCValType.SCV_ADDRESS:
            if not isinstance(v, SCAddress):
                raise XdrRangeError("SCV_ADDRESS value must be SCAddress")
        elif t == SCValType.SCV_CONTRACT_INSTANCE:
            if not isinstance(v, SCContractInstance):
                raise XdrRangeError("SCV_CONTRACT_INSTANCE value must be SCContractInstance")

    # -- factories -------------------------------------------------------------

    @classmethod
    def from_bool(cls, v: bool) -> SCVal:
        return cls(SCValType.SCV_BOOL, v)

    @classmethod
    def void(cls) -> SCVal:
        return cls(SCValType.SCV_VOID)

    @classmethod
    def error(cls, error: SCError) -> SCVal:
        return cls(SCValType.SCV_ERROR, error)

    @classmethod
    def u32(cls, v: int) -> SCVal:
        return cls(SCValType.SCV_U32, v)

    @classmethod
    def i32(cls, v: int) -> SCVal:
        return cls(SCValType.SCV_I32, v)

    @classmethod
    def u64(cls, v: int) -> SCVal:
        return cls(SCValType.SCV_U64, v)

    @classmethod
    def i64(cls, v: int) -> SCVal:
        return cls(SCValType.SCV_I64, v)

    @classmethod
    def timepoint(cls, v: int) -> SCVal:
        return cls(SCValType.SCV_TIMEPOINT, v)

    @classmethod
    def duration(cls, v: int) -> SCVal:
        return cls(SCValType.SCV_DURATION, v)

    @classmethod
    def u128(cls, v: int) -> SCVal:
        """Raises XdrRangeError outside [0, 2^128-1]."""
        return cls(SCValType.SCV_U128, v)

    @classmethod
    def i128(cls, v: int) -> SCVal:
        """Raises XdrRangeError outside [-2^127, 2^127-1]."""
        return cls(SCValType.SCV_I128, v)

    @classmethod
    def u256(cls, v: int) -> SCVal:
        return cls(SCValType.SCV_U256, v)

    @classmethod
    def i256(cls, v: int) -> SCVal:
        return cls(SCValType.SCV_I256, v)

    @classmethod
    def from_bytes(cls, v: bytes) -> SCVal:
        return cls(SCValType.SCV_BYTES, v)

    @classmethod
    def string(cls, v: Union[str, bytes]) -> SCVal:
        return cls(SCValType.SCV_STRING, v.encode("utf-8") if isinstance(v, str) else v)

    @classmethod
    def symbol(cls, v: str) -> SCVal:
        return cls(SCValType.SCV_SYMBOL, v)

    @classmethod
    def vec(cls, items: Optional[Iterable[SCVal]]) -> SCVal:
        return cls(SCValType.SCV_VEC, None if items is None else tuple(items))

    @classmethod
    def map(cls, entries: Optional[Iterable[SCMapEntry]]) -> SCVal:
        """Map in the given order; entries are not sorted."""
        return cls(SCValType.SCV_MAP, None if entries is None else tuple(entries))

    @classmethod
    def address(cls, address: Union[str, SCAddress]) -> SCVal:
        if isinstance(address, str):
            address = SCAddress.from_address(address)
        return cls(SCValType.SCV_ADDRESS, address)

    @classmethod
    def contract_instance(cls, instance: SCContractInstance) -> SCVal:
        return cls(SCValType.SCV_CONTRACT_INSTANCE, instance)

    @classmethod
    def ledger_key_contract_instance(cls) -> SCVal:
        return cls(SCValType.SCV_LEDGER_KEY_CONTRACT_INSTANCE)

    @classmethod
    def ledger_key_nonce(cls, nonce: int) -> SCVal:
        return cls(SCValType.SCV_LEDGER_KEY_NONCE, nonce)

    # -- codec -------------------------------------------------------------------

    def pack(self, w: XdrWriter) -> None:
        w.enum(self.type)
        t = self.type
        v = self.value
        if t == SCValType.SCV_BOOL:
            w.bool(v)
        elif t in _VOID_TYPES:
            pass
        elif t == SCValType.SCV_ERROR:
            v.pack(w)
        elif t == SCValType.SCV_U32:
            w.uint32(v)
        elif t == SCValType.SCV_I32:
            w.int32(v)
        elif t in (SCValType.SCV_U64, SCValType.SCV_TIMEPOINT, SCValType.SCV_DURATION):
            w.uint64(v)
        elif t in (SCValType.SCV_I64, SCValType.SCV_LEDGER_KEY_NONCE):
            w.int64(v)
        elif t == SCValType.SCV_U128:
            hi, lo = u128_to_parts(v)
            w.uint64(hi)
            w.uint64(lo)
        elif t == SCValType.SCV_I128:
            hi, lo = i128_to_parts(v)
            w.int64(hi)
            w.uint64(lo)
        elif t == SCValType.SCV_U256:
            for part in u256_to_parts(v):
                w.uint64(part)
        elif t == SCValType.SCV_I256:
            hi_hi, hi_lo, lo_hi, lo_lo = i256_to_parts(v)
            w.int64(hi_hi)
            w.uint64(hi_lo)
            w.uint64(lo_hi)
            w.uint64(lo_lo)
        elif t in (SCValType.SCV_BYTES, SCValType.SCV_STRING):
            w.opaque_var(v)
        elif t == SCValType.SCV_SYMBOL:
            w.string(v, MAX_SYMBOL_LENGTH)
        elif t == SCValType.SCV_VEC:
            w.optional(v, lambda items: w.array(items, lambda item: item.pack(w)))
        elif t == SCValType.SCV_MAP:
            w.optional(v, lambda entries: _pack_map(w, entries))
        else:
            v.pack(w)

    @classmethod
    def unpack(cls, r: XdrReader) -> SCVal:
        t = read_enum(r, SCValType)
        if t == SCValType.SCV_BOOL:
            return cls(t, r.bool())
        if t in _VOID_TYPES:
            return cls(t)
        if t == SCValType.SCV_ERROR:
            return cls(t, SCError.unpack(r))
        if t == SCValType.SCV_U32:
            return cls(t, r.uint32())
        if t == SCValType.SCV_I32:
            return cls(t, r.int32())
        if t in (SCValType.SCV_U64, SCValType.SCV_TIMEPOINT, SCValType.SCV_DURATION):
            return cls(t, r.uint64())
        if t in (SCValType.SCV_I64, SCValType.SCV_LEDGER_KEY_NONCE):
            return cls(t, r.int64())
        if t == SCValType.SCV_U128:
            hi = r.uint64()
            return cls(t, parts_to_u128(hi, r.uint64()))
        if t == SCValType.SCV_I128:
            hi = r.int64()
            return cls(t, parts_to_i128(hi, r.uint64()))
        if t == SCValType.SCV_U256:
            return cls(t, parts_to_u256(r.uint64(), r.uint64(), r.uint64(), r.uint64()))
        if t == SCValType.SCV_I256:
            return cls(t, parts_to_i256(r.int64(), r.uint64(), r.uint64(), r.uint64()))
        if t in (SCValType.SCV_BYTES, SCValType.SCV_STRING):
            return cls(t, r.opaque_var())
        if t == SCValType.SCV_SYMBOL:
            return cls(t, decode_symbol("SCV_SYMBOL", r.string(MAX_SYMBOL_LENGTH)))
        if t == SCValType.SCV_VEC:
            return cls(t, r.optional(lambda: tuple(r.array(lambda: SCVal.unpack(r)))))
        if t == SCValType.SCV_MAP:
            return cls(t, r.optional(lambda: _unpack_map(r)))
        if t == SCValType.SCV_ADDRESS:
            return cls(t, SCAddress.unpack(r))
        return cls(t, SCContractInstance.unpack(r))
