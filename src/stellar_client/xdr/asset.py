"""
Assets and prices.

Asset is the plain {native, alphanum4, alphanum12} union. ChangeTrustAsset and
TrustLineAsset extend it with liquidity pool shares; AssetCode is the bare
code used by ALLOW_TRUST.
"""

from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Optional, Union

from ..codec.hashes import sha256_bytes
from ..codec.reader import XdrReader
from ..codec.writer import XdrWriter, INT32_MAX, INT32_MIN, check_range
from ..runtime.errors import InvalidDiscriminant, XdrRangeError
from .base import XdrType, read_enum
from .enums import AssetType, LiquidityPoolType
from .keys import AccountId, check_hash

_CODE_RE = re.compile(r"^[A-Za-z0-9]{1,12}$")

NATIVE_ASSET_CODE = "XLM"
LIQUIDITY_POOL_FEE_V18 = 30


def _code_type(code: str) -> AssetType:
    if not isinstance(code, str) or not _CODE_RE.match(code):
        raise XdrRangeError(f"Invalid asset code {code!r}: 1-12 alphanumeric characters required")
    return AssetType.ASSET_TYPE_CREDIT_ALPHANUM4 if len(code) <= 4 else AssetType.ASSET_TYPE_CREDIT_ALPHANUM12


def _check_code(asset_type: AssetType, code: Optional[str]) -> str:
    if code is None:
        raise XdrRangeError(f"{asset_type.name} requires an asset code")
    natural = _code_type(code)
    if natural != asset_type:
        raise XdrRangeError(f"Asset code {code!r} has the wrong length for {asset_type.name}")
    return code


def _code_size(asset_type: AssetType) -> int:
    return 4 if asset_type == AssetType.ASSET_TYPE_CREDIT_ALPHANUM4 else 12


def _pack_code(w: XdrWriter, asset_type: AssetType, code: str) -> None:
    size = _code_size(asset_type)
    w.opaque_fixed(code.encode("ascii").ljust(size, b"\x00"), size)


def _unpack_code(r: XdrReader, asset_type: AssetType) -> str:
    raw = r.opaque_fixed(_code_size(asset_type)).rstrip(b"\x00")
    try:
        return raw.decode("ascii")
    except UnicodeDecodeError:
        raise XdrRangeError(f"Asset code is not ASCII: {raw.hex()}") from None


@dataclass(frozen=True)
class Asset(XdrType):
    """
    A native or issued asset.

    Use ``Asset.native()`` or ``Asset.credit(code, issuer)``; the alphanum
    variant follows from the code length.
    """

    type: AssetType
    code: Optional[str] = None
    issuer: Optional[AccountId] = None

    def __post_init__(self):
        object.__setattr__(self, "type", AssetType(self.type))
        if self.type == AssetType.ASSET_TYPE_NATIVE:
            if self.code is not None or self.issuer is not None:
                raise XdrRangeError("native asset has no code or issuer")
        elif self.type in (AssetType.ASSET_TYPE_CREDIT_ALPHANUM4, AssetType.ASSET_TYPE_CREDIT_ALPHANUM12):
            _check_code(self.type, self.code)
            if not isinstance(self.issuer, AccountId):
                raise XdrRangeError(f"{self.type.name} requires an issuer AccountId")
        else:
            raise XdrRangeError(f"{self.type.name} is not a plain asset")

    @classmethod
    def native(cls) -> Asset:
        return cls(AssetType.ASSET_TYPE_NATIVE)

    @classmethod
    def credit(cls, code: str, issuer: Union[str, AccountId]) -> Asset:
        """
        Create an issued asset.

        Args:
            code: 1-12 alphanumeric characters
            issuer: Issuer G... address or AccountId
        """
        if isinstance(issuer, str):
            issuer = AccountId.from_address(issuer)
        return cls(_code_type(code), code, issuer)

    @classmethod
    def from_canonical(cls, text: str) -> Asset:
        """Parse ``XLM`` / ``native`` or ``CODE:ISSUER``."""
        if text in (NATIVE_ASSET_CODE, "native"):
            return cls.native()
        code, sep, issuer = text.partition(":")
        if not sep:
            raise XdrRangeError(f"Invalid asset {text!r}: expected XLM or CODE:ISSUER")
        return cls.credit(code, issuer)

    @property
    def canonical(self) -> str:
        if self.type == AssetType.ASSET_TYPE_NATIVE:
            return NATIVE_ASSET_CODE
        return f"{self.code}:{self.issuer.address}"

    @property
    def is_native(self) -> bool:
        return self.type == AssetType.ASSET_TYPE_NATIVE

    def pack(self, w: XdrWriter) -> None:
        w.enum(self.type)
        if self.type != AssetType.ASSET_TYPE_NATIVE:
            _pack_code(w, self.type, self.code)
            self.issuer.pack(w)

    @classmethod
    def unpack(cls, r: XdrReader) -> Asset:
        asset_type = read_enum(r, AssetType)
        if asset_type == AssetType.ASSET_TYPE_NATIVE:
            return cls.native()
        if asset_type == AssetType.ASSET_TYPE_POOL_SHARE:
            raise InvalidDiscriminant("Asset", int(asset_type))
        code = _unpack_code(r, asset_type)
        return cls(asset_type, code, AccountId.unpack(r))

    def __str__(self) -> str:
        return self.canonical


@dataclass(frozen=True)
class AssetCode(XdrType):
    """Asset code without issuer (ALLOW_TRUST)."""

    type: AssetType
    code: str

    def __post_init__(self):
        object.__setattr__(self, "type", AssetType(self.type))
        if self.type not in (AssetType.ASSET_TYPE_CREDIT_ALPHANUM4, AssetType.ASSET_TYPE_CREDIT_ALPHANUM12):
            raise XdrRangeError(f"{self.type.name} is not a valid asset code type")
        _check_code(self.type, self.code)

    @classmethod
    def from_code(cls, code: str) -> AssetCode:
        return cls(_code_type(code), code)

    def pack(self, w: XdrWriter) -> None:
        w.enum(self.type)
        _pack_code(w, self.type, self.code)

    @classmethod
    def unpack(cls, r: XdrReader) -> AssetCode:
        asset_type = read_enum(r, AssetType)
        if asset_type not in (AssetType.ASSET_TYPE_CREDIT_ALPHANUM4, AssetType.ASSET_TYPE_CREDIT_ALPHANUM12):
            raise InvalidDiscriminant("AssetCode", int(asset_type))
        return cls(asset_type, _unpack_code(r, asset_type))


@dataclass(frozen=True)
class Price(XdrType):
    """Rational price n/d of int32 parts."""

    n: int
    d: int

    def __post_init__(self):
        check_range("price numerator", self.n, INT32_MIN, INT32_MAX)
        check_range("price denominator", self.d, INT32_MIN, INT32_MAX)

    def pack(self, w: XdrWriter) -> None:
        w.int32(self.n)
        w.int32(self.d)

    @classmethod
    def unpack(cls, r: XdrReader) -> Price:
        return cls(r.int32(), r.int32())


@dataclass(frozen=True)
class LiquidityPoolParameters(XdrType):
    """Constant product pool parameters. Assets must be in lexicographic order."""

    asset_a: Asset
    asset_b: Asset
    fee: int = LIQUIDITY_POOL_FEE_V18

    def pack(self, w: XdrWriter) -> None:
        w.enum(LiquidityPoolType.LIQUIDITY_POOL_CONSTANT_PRODUCT)
        self.asset_a.pack(w)
        self.asset_b.pack(w)
        w.int32(self.fee)

    @classmethod
    def unpack(cls, r: XdrReader) -> LiquidityPoolParameters:
        read_enum(r, LiquidityPoolType)
        return cls(Asset.unpack(r), Asset.unpack(r), r.int32())

    def pool_id(self) -> bytes:
        """The 32-byte pool id: SHA-256 of these parameters."""
        return sha256_bytes(self.to_xdr_bytes())


@dataclass(frozen=True)
class ChangeTrustAsset(XdrType):
    """CHANGE_TRUST line: a plain asset or a liquidity pool share."""

    asset: Optional[Asset] = None
    liquidity_pool: Optional[LiquidityPoolParameters] = None

    def __post_init__(self):
        if (self.asset is None) == (self.liquidity_pool is None):
            raise XdrRangeError("ChangeTrustAsset needs exactly one of asset or liquidity_pool")

    @property
    def type(self) -> AssetType:
        return self.asset.type if self.asset is not None else AssetType.ASSET_TYPE_POOL_SHARE

    def pack(self, w: XdrWriter) -> None:
        if self.asset is not None:
            self.asset.pack(w)
        else:
            w.enum(AssetType.ASSET_TYPE_POOL_SHARE)
            self.liquidity_pool.pack(w)

    @classmethod
    def unpack(cls, r: XdrReader) -> ChangeTrustAsset:
        asset_type = read_enum(r, AssetType)
        if asset_type == AssetType.ASSET_TYPE_POOL_SHARE:
            return cls(liquidity_pool=LiquidityPoolParameters.unpack(r))
        if asset_type == AssetType.ASSET_TYPE_NATIVE:
            return cls(Asset.native())
        return cls(Asset(asset_type, _unpack_code(r, asset_type), AccountId.unpack(r)))


@dataclass(frozen=True)
class TrustLineAsset(XdrType):
    """Trust line key asset: a plain asset or a 32-byte pool id."""

    asset: Optional[Asset] = None
    liquidity_pool_id: Optional[bytes] = None

    def __post_init__(self):
        if (self.asset is None) == (self.liquidity_pool_id is None):
            raise XdrRangeError("TrustLineAsset needs exactly one of asset or liquidity_pool_id")
        if self.liquidity_pool_id is not None:
            object.__setattr__(self, "liquidity_pool_id", check_hash("pool id", self.liquidity_pool_id))

    @property
    def type(self) -> AssetType:
        return self.asset.type if self.asset is not None else AssetType.ASSET_TYPE_POOL_SHARE

    def pack(self, w: XdrWriter) -> None:
        if self.asset is not None:
            self.asset.pack(w)
        else:
            w.enum(AssetType.ASSET_TYPE_POOL_SHARE)
            w.opaque_fixed(self.liquidity_pool_id, 32)

    @classmethod
    def unpack(cls, r: XdrReader) -> TrustLineAsset:
        asset_type = read_enum(r, AssetType)
        if asset_type == AssetType.ASSET_TYPE_POOL_SHARE:
            return cls(liquidity_pool_id=r.opaque_fixed(32))
        if asset_type == AssetType.ASSET_TYPE_NATIVE:
            return cls(Asset.native())
        return cls(Asset(asset_type, _unpack_code(r, asset_type), AccountId.unpack(r)))
