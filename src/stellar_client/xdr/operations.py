"""
Operations.

Each operation body is a frozen dataclass registered against its
OperationType; ``Operation`` pairs a body with an optional source account and
dispatches decoding through the registry.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import ClassVar, Dict, Optional, Tuple, Type

from ..codec.reader import XdrReader
from ..codec.writer import XdrWriter, INT64_MAX, INT64_MIN, UINT32_MAX, check_range
from ..runtime.errors import UnknownDiscriminant, XdrRangeError
from .asset import Asset, AssetCode, ChangeTrustAsset, Price
from .auth import HostFunction, SorobanAuthorizationEntry
from .base import XdrType, read_enum
from .enums import (
    ClaimPredicateType, ClaimantType, OperationType, RevokeSponsorshipType,
)
from .keys import AccountId, ClaimableBalanceId, MuxedAccount, SignerKey, check_hash
from .ledger_key import LedgerKey

MAX_PATH_LENGTH = 5
MAX_CLAIMANTS = 10
MAX_HOME_DOMAIN_LENGTH = 32
MAX_DATA_NAME_LENGTH = 64
MAX_DATA_VALUE_LENGTH = 64
MAX_PREDICATES = 2


def _int64(name: str, v: int) -> int:
    return check_range(name, v, INT64_MIN, INT64_MAX)


def _uint32(name: str, v: int) -> int:
    return check_range(name, v, 0, UINT32_MAX)


def _check_ext_v0(r: XdrReader, type_name: str) -> None:
    ext = r.int32()
    if ext != 0:
        raise UnknownDiscriminant(type_name, ext)


# =============================================================================
# Registry
# =============================================================================

class OperationBody(XdrType):
    """Base of all operation bodies; ``TYPE`` is the wire discriminant."""

    TYPE: ClassVar[OperationType]


OPERATION_BODIES: Dict[OperationType, Type[OperationBody]] = {}


def register_body(cls: Type[OperationBody]) -> Type[OperationBody]:
    """Class decorator adding a body type to the registry."""
    OPERATION_BODIES[cls.TYPE] = cls
    return cls


def lookup_body(op_type: OperationType) -> Type[OperationBody]:
    """
    Body class for an operation type.

    Raises:
        UnknownDiscriminant: If the type has no registered body
    """
    try:
        return OPERATION_BODIES[op_type]
    except KeyError:
        raise UnknownDiscriminant("OperationBody", int(op_type)) from None


# =============================================================================
# Claimable balances
# =============================================================================

@dataclass(frozen=True)
class ClaimPredicate(XdrType):
    """
    Recursive claim condition.

    AND / OR carry ``predicates`` (two sub-predicates), NOT carries an
    optional ``predicate``, the time variants carry ``value`` (absolute unix
    seconds or relative seconds).
    """

    type: ClaimPredicateType
    predicates: Tuple[ClaimPredicate, ...] = ()
    predicate: Optional[ClaimPredicate] = None
    value: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, "type", ClaimPredicateType(self.type))
        object.__setattr__(self, "predicates", tuple(self.predicates))
        t = self.type
        if t in (ClaimPredicateType.CLAIM_PREDICATE_AND, ClaimPredicateType.CLAIM_PREDICATE_OR):
            if len(self.predicates) > MAX_PREDICATES:
                raise XdrRangeError(f"{t.name} takes at most {MAX_PREDICATES} predicates")
        elif self.predicates:
            raise XdrRangeError(f"{t.name} has no predicate list")
        if t in (ClaimPredicateType.CLAIM_PREDICATE_BEFORE_ABSOLUTE_TIME,
                 ClaimPredicateType.CLAIM_PREDICATE_BEFORE_RELATIVE_TIME):
            _int64(t.name, self.value)
        elif self.value is not None:
            raise XdrRangeError(f"{t.name} has no time value")
        if self.predicate is not None and t != ClaimPredicateType.CLAIM_PREDICATE_NOT:
            raise XdrRangeError(f"{t.name} has no single predicate")

    @classmethod
    def unconditional(cls) -> ClaimPredicate:
        return cls(ClaimPredicateType.CLAIM_PREDICATE_UNCONDITIONAL)

    @classmethod
    def and_(cls, left: ClaimPredicate, right: ClaimPredicate) -> ClaimPredicate:
        return cls(ClaimPredicateType.CLAIM_PREDICATE_AND, predicates=(left, right))

    @classmethod
    def or_(cls, left: ClaimPredicate, right: ClaimPredicate) -> ClaimPredicate:
        return cls(ClaimPredicateType.CLAIM_PREDICATE_OR, predicates=(left, right))

    @classmethod
    def not_(cls, predicate: Optional[ClaimPredicate]) -> ClaimPredicate:
        return cls(ClaimPredicateType.CLAIM_PREDICATE_NOT, predicate=predicate)

    @classmethod
    def before_absolute_time(cls, unix_seconds: int) -> ClaimPredicate:
        return cls(ClaimPredicateType.CLAIM_PREDICATE_BEFORE_ABSOLUTE_TIME, value=unix_seconds)

    @classmethod
    def before_relative_time(cls, seconds: int) -> ClaimPredicate:
        return cls(ClaimPredicateType.CLAIM_PREDICATE_BEFORE_RELATIVE_TIME, value=seconds)

    def pack(self, w: XdrWriter) -> None:
        w.enum(self.type)
        t = self.type
        if t in (ClaimPredicateType.CLAIM_PREDICATE_AND, ClaimPredicateType.CLAIM_PREDICATE_OR):
            w.array(self.predicates, lambda p: p.pack(w), MAX_PREDICATES)
        elif t == ClaimPredicateType.CLAIM_PREDICATE_NOT:
            w.optional(self.predicate, lambda p: p.pack(w))
        elif t != ClaimPredicateType.CLAIM_PREDICATE_UNCONDITIONAL:
            w.int64(self.value)

    @classmethod
    def unpack(cls, r: XdrReader) -> ClaimPredicate:
        t = read_enum(r, ClaimPredicateType)
        if t in (ClaimPredicateType.CLAIM_PREDICATE_AND, ClaimPredicateType.CLAIM_PREDICATE_OR):
            return cls(t, predicates=tuple(r.array(lambda: ClaimPredicate.unpack(r), MAX_PREDICATES)))
        if t == ClaimPredicateType.CLAIM_PREDICATE_NOT:
            return cls(t, predicate=r.optional(lambda: ClaimPredicate.unpack(r)))
        if t == ClaimPredicateType.CLAIM_PREDICATE_UNCONDITIONAL:
            return cls(t)
        return cls(t, value=r.int64())


@dataclass(frozen=True)
class Claimant(XdrType):
    destination: AccountId
    predicate: ClaimPredicate

    def pack(self, w: XdrWriter) -> None:
        w.enum(ClaimantType.CLAIMANT_TYPE_V0)
        self.destination.pack(w)
        self.predicate.pack(w)

    @classmethod
    def unpack(cls, r: XdrReader) -> Claimant:
        read_enum(r, ClaimantType)
        destination = AccountId.unpack(r)
        return cls(destination, ClaimPredicate.unpack(r))


@dataclass(frozen=True)
class Signer(XdrType):
    key: SignerKey
    weight: int

    def __post_init__(self):
        _uint32("signer weight", self.weight)

    def pack(self, w: XdrWriter) -> None:
        self.key.pack(w)
        w.uint32(self.weight)

    @classmethod
    def unpack(cls, r: XdrReader) -> Signer:
        key = SignerKey.unpack(r)
        return cls(key, r.uint32())


# =============================================================================
# Bodies
# =============================================================================

@register_body
@dataclass(frozen=True)
class CreateAccount(OperationBody):
    TYPE: ClassVar[OperationType] = OperationType.CREATE_ACCOUNT

    destination: AccountId
    starting_balance: int

    def __post_init__(self):
        _int64("starting_balance", self.starting_balance)

    def pack(self, w: XdrWriter) -> None:
        self.destination.pack(w)
        w.int64(self.starting_balance)

    @classmethod
    def unpack(cls, r: XdrReader) -> CreateAccount:
        destination = AccountId.unpack(r)
        return cls(destination, r.int64())


@register_body
@dataclass(frozen=True)
class Payment(OperationBody):
    TYPE: ClassVar[OperationType] = OperationType.PAYMENT

    destination: MuxedAccount
    asset: Asset
    amount: int

    def __post_init__(self):
        _int64("amount", self.amount)

    def pack(self, w: XdrWriter) -> None:
        self.destination.pack(w)
        self.asset.pack(w)
        w.int64(self.amount)

    @classmethod
    def unpack(cls, r: XdrReader) -> Payment:
        destination = MuxedAccount.unpack(r)
        asset = Asset.unpack(r)
        return cls(destination, asset, r.int64())


def _pack_path(w: XdrWriter, path: Tuple[Asset, ...]) -> None:
    w.array(path, lambda a: a.pack(w), MAX_PATH_LENGTH)


def _unpack_path(r: XdrReader) -> Tuple[Asset, ...]:
    return tuple(r.array(lambda: Asset.unpack(r), MAX_PATH_LENGTH))


def _check_path(path) -> Tuple[Asset, ...]:
    path = tuple(path)
    if len(path) > MAX_PATH_LENGTH:
        raise XdrRangeError(f"path takes at most {MAX_PATH_LENGTH} assets")
    return path


@register_body
@dataclass(frozen=True)
class PathPaymentStrictReceive(OperationBody):
    TYPE: ClassVar[OperationType] = OperationType.PATH_PAYMENT_STRICT_RECEIVE

    send_asset: Asset
    send_max: int
    destination: MuxedAccount
    dest_asset: Asset
    dest_amount: int
    path: Tuple[Asset, ...] = ()

    def __post_init__(self):
        _int64("send_max", self.send_max)
        _int64("dest_amount", self.dest_amount)
        object.__setattr__(self, "path", _check_path(self.path))

    def pack(self, w: XdrWriter) -> None:
        self.send_asset.pack(w)
        w.int64(self.send_max)
        self.destination.pack(w)
        self.dest_asset.pack(w)
        w.int64(self.dest_amount)
        _pack_path(w, self.path)

    @classmethod
    def unpack(cls, r: XdrReader) -> PathPaymentStrictReceive:
        return cls(
            send_asset=Asset.unpack(r),
            send_max=r.int64(),
            destination=MuxedAccount.unpack(r),
            dest_asset=Asset.unpack(r),
            dest_amount=r.int64(),
            path=_unpack_path(r),
        )


@register_body
@dataclass(frozen=True)
class ManageSellOffer(OperationBody):
    """Create (offer_id 0), update or delete (amount 0) a sell offer."""

    TYPE: ClassVar[OperationType] = OperationType.MANAGE_SELL_OFFER

    selling: Asset
    buying: Asset
    amount: int
    price: Price
    offer_id: int = 0

    def __post_init__(self):
        _int64("amount", self.amount)
        _int64("offer_id", self.offer_id)

    def pack(self, w: XdrWriter) -> None:
        self.selling.pack(w)
        self.buying.pack(w)
        w.int64(self.amount)
        self.price.pack(w)
        w.int64(self.offer_id)

    @classmethod
    def unpack(cls, r: XdrReader) -> ManageSellOffer:
        selling = Asset.unpack(r)
        buying = Asset.unpack(r)
        amount = r.int64()
        price = Price.unpack(r)
        return cls(selling, buying, amount, price, r.int64())


@register_body
@dataclass(frozen=True)
class CreatePassiveSellOffer(OperationBody):
    TYPE: ClassVar[OperationType] = OperationType.CREATE_PASSIVE_SELL_OFFER

    selling: Asset
    buying: Asset
    amount: int
    price: Price

    def __post_init__(self):
        _int64("amount", self.amount)

    def pack(self, w: XdrWriter) -> None:
        self.selling.pack(w)
        self.buying.pack(w)
        w.int64(self.amount)
        self.price.pack(w)

    @classmethod
    def unpack(cls, r: XdrReader) -> CreatePassiveSellOffer:
        selling = Asset.unpack(r)
        buying = Asset.unpack(r)
        amount = r.int64()
        return cls(selling, buying, amount, Price.unpack(r))


@register_body
@dataclass(frozen=True)
class SetOptions(OperationBody):
    """Account options; every field is optional and None leaves it unchanged."""

    TYPE: ClassVar[OperationType] = OperationType.SET_OPTIONS

    inflation_dest: Optional[AccountId] = None
    clear_flags: Optional[int] = None
    set_flags: Optional[int] = None
    master_weight: Optional[int] = None
    low_threshold: Optional[int] = None
    med_threshold: Optional[int] = None
    high_threshold: Optional[int] = None
    home_domain: Optional[str] = None
    signer: Optional[Signer] = None

    def __post_init__(self):
        for name in ("clear_flags", "set_flags", "master_weight",
                     "low_threshold", "med_threshold", "high_threshold"):
            value = getattr(self, name)
            if value is not None:
                _uint32(name, value)
        if self.home_domain is not None and len(self.home_domain.encode("utf-8")) > MAX_HOME_DOMAIN_LENGTH:
            raise XdrRangeError(f"home domain must be at most {MAX_HOME_DOMAIN_LENGTH} bytes")

    def pack(self, w: XdrWriter) -> None:
        w.optional(self.inflation_dest, lambda v: v.pack(w))
        w.optional(self.clear_flags, w.uint32)
        w.optional(self.set_flags, w.uint32)
        w.optional(self.master_weight, w.uint32)
        w.optional(self.low_threshold, w.uint32)
        w.optional(self.med_threshold, w.uint32)
        w.optional(self.high_threshold, w.uint32)
        w.optional(self.home_domain, lambda v: w.string(v, MAX_HOME_DOMAIN_LENGTH))
        w.optional(self.signer, lambda v: v.pack(w))

    @classmethod
    def unpack(cls, r: XdrReader) -> SetOptions:
        return cls(
            inflation_dest=r.optional(lambda: AccountId.unpack(r)),
            clear_flags=r.optional(r.uint32),
            set_flags=r.optional(r.uint32),
            master_weight=r.optional(r.uint32),
            low_threshold=r.optional(r.uint32),
            med_threshold=r.optional(r.uint32),
            high_threshold=r.optional(r.uint32),
            home_domain=r.optional(
                lambda: r.string(MAX_HOME_DOMAIN_LENGTH).decode("utf-8", errors="replace")),
            signer=r.optional(lambda: Signer.unpack(r)),
        )


@register_body
@dataclass(frozen=True)
class ChangeTrust(OperationBody):
    """Add, update or remove (limit 0) a trust line."""

    TYPE: ClassVar[OperationType] = OperationType.CHANGE_TRUST

    line: ChangeTrustAsset
    limit: int = INT64_MAX

    def __post_init__(self):
        _int64("limit", self.limit)

    def pack(self, w: XdrWriter) -> None:
        self.line.pack(w)
        w.int64(self.limit)

    @classmethod
    def unpack(cls, r: XdrReader) -> ChangeTrust:
        line = ChangeTrustAsset.unpack(r)
        return cls(line, r.int64())


@register_body
@dataclass(frozen=True)
class AllowTrust(OperationBody):
    TYPE: ClassVar[OperationType] = OperationType.ALLOW_TRUST

    trustor: AccountId
    asset: AssetCode
    authorize: int

    def __post_init__(self):
        _uint32("authorize", self.authorize)

    def pack(self, w: XdrWriter) -> None:
        self.trustor.pack(w)
        self.asset.pack(w)
        w.uint32(self.authorize)

    @classmethod
    def unpack(cls, r: XdrReader) -> AllowTrust:
        trustor = AccountId.unpack(r)
        asset = AssetCode.unpack(r)
        return cls(trustor, asset, r.uint32())


@register_body
@dataclass(frozen=True)
class AccountMerge(OperationBody):
    TYPE: ClassVar[OperationType] = OperationType.ACCOUNT_MERGE

    destination: MuxedAccount

    def pack(self, w: XdrWriter) -> None:
        self.destination.pack(w)

    @classmethod
    def unpack(cls, r: XdrReader) -> AccountMerge:
        return cls(MuxedAccount.unpack(r))


@register_body
@dataclass(frozen=True)
class Inflation(OperationBody):
    """Deprecated; still decodable."""

    TYPE: ClassVar[OperationType] = OperationType.INFLATION

    def pack(self, w: XdrWriter) -> None:
        pass

    @classmethod
    def unpack(cls, r: XdrReader) -> Inflation:
        return cls()


@register_body
@dataclass(frozen=True)
class ManageData(OperationBody):
    """Set (value given) or delete (value None) an account data entry."""

    TYPE: ClassVar[OperationType] = OperationType.MANAGE_DATA

    data_name: str
    data_value: Optional[bytes] = None

    def __post_init__(self):
        if len(self.data_name.encode("utf-8")) > MAX_DATA_NAME_LENGTH:
            raise XdrRangeError(f"data name must be at most {MAX_DATA_NAME_LENGTH} bytes")
        if self.data_value is not None:
            if len(self.data_value) > MAX_DATA_VALUE_LENGTH:
                raise XdrRangeError(f"data value must be at most {MAX_DATA_VALUE_LENGTH} bytes")
            object.__setattr__(self, "data_value", bytes(self.data_value))

    def pack(self, w: XdrWriter) -> None:
        w.string(self.data_name, MAX_DATA_NAME_LENGTH)
        w.optional(self.data_value, lambda v: w.opaque_var(v, MAX_DATA_VALUE_LENGTH))

    @classmethod
    def unpack(cls, r: XdrReader) -> ManageData:
        name = r.string(MAX_DATA_NAME_LENGTH).decode("utf-8", errors="replace")
        return cls(name, r.optional(lambda: r.opaque_var(MAX_DATA_VALUE_LENGTH)))


@register_body
@dataclass(frozen=True)
class BumpSequence(OperationBody):
    TYPE: ClassVar[OperationType] = OperationType.BUMP_SEQUENCE

    bump_to: int

    def __post_init__(self):
        _int64("bump_to", self.bump_to)

    def pack(self, w: XdrWriter) -> None:
        w.int64(self.bump_to)

    @classmethod
    def unpack(cls, r: XdrReader) -> BumpSequence:
        return cls(r.int64())


@register_body
@dataclass(frozen=True)
class ManageBuyOffer(OperationBody):
    TYPE: ClassVar[OperationType] = OperationType.MANAGE_BUY_OFFER

    selling: Asset
    buying: Asset
    buy_amount: int
    price: Price
    offer_id: int = 0

    def __post_init__(self):
        _int64("buy_amount", self.buy_amount)
        _int64("offer_id", self.offer_id)

    def pack(self, w: XdrWriter) -> None:
        self.selling.pack(w)
        self.buying.pack(w)
        w.int64(self.buy_amount)
        self.price.pack(w)
        w.int64(self.offer_id)

    @classmethod
    def unpack(cls, r: XdrReader) -> ManageBuyOffer:
        selling = Asset.unpack(r)
        buying = Asset.unpack(r)
        buy_amount = r.int64()
        price = Price.unpack(r)
        return cls(selling, buying, buy_amount, price, r.int64())


@register_body
@dataclass(frozen=True)
class PathPaymentStrictSend(OperationBody):
    TYPE: ClassVar[OperationType] = OperationType.PATH_PAYMENT_STRICT_SEND

    send_asset: Asset
    send_amount: int
    destination: MuxedAccount
    dest_asset: Asset
    dest_min: int
    path: Tuple[Asset, ...] = ()

    def __post_init__(self):
        _int64("send_amount", self.send_amount)
        _int64("dest_min", self.dest_min)
        object.__setattr__(self, "path", _check_path(self.path))

    def pack(self, w: XdrWriter) -> None:
        self.send_asset.pack(w)
        w.int64(self.send_amount)
        self.destination.pack(w)
        self.dest_asset.pack(w)
        w.int64(self.dest_min)
        _pack_path(w, self.path)

    @classmethod
    def unpack(cls, r: XdrReader) -> PathPaymentStrictSend:
        return cls(
            send_asset=Asset.unpack(r),
            send_amount=r.int64(),
            destination=MuxedAccount.unpack(r),
            dest_asset=Asset.unpack(r),
            dest_min=r.int64(),
            path=_unpack_path(r),
        )


@register_body
@dataclass(frozen=True)
class CreateClaimableBalance(OperationBody):
    TYPE: ClassVar[OperationType] = OperationType.CREATE_CLAIMABLE_BALANCE

    asset: Asset
    amount: int
    claimants: Tuple[Claimant, ...]

    def __post_init__(self):
        _int64("amount", self.amount)
        object.__setattr__(self, "claimants", tuple(self.claimants))
        if len(self.claimants) > MAX_CLAIMANTS:
            raise XdrRangeError(f"at most {MAX_CLAIMANTS} claimants are allowed")

    def pack(self, w: XdrWriter) -> None:
        self.asset.pack(w)
        w.int64(self.amount)
        w.array(self.claimants, lambda c: c.pack(w), MAX_CLAIMANTS)

    @classmethod
    def unpack(cls, r: XdrReader) -> CreateClaimableBalance:
        asset = Asset.unpack(r)
        amount = r.int64()
        return cls(asset, amount, tuple(r.array(lambda: Claimant.unpack(r), MAX_CLAIMANTS)))


@register_body
@dataclass(frozen=True)
class ClaimClaimableBalance(OperationBody):
    TYPE: ClassVar[OperationType] = OperationType.CLAIM_CLAIMABLE_BALANCE

    balance_id: ClaimableBalanceId

    def pack(self, w: XdrWriter) -> None:
        self.balance_id.pack(w)

    @classmethod
    def unpack(cls, r: XdrReader) -> ClaimClaimableBalance:
        return cls(ClaimableBalanceId.unpack(r))


@register_body
@dataclass(frozen=True)
class BeginSponsoringFutureReserves(OperationBody):
    TYPE: ClassVar[OperationType] = OperationType.BEGIN_SPONSORING_FUTURE_RESERVES

    sponsored_id: AccountId

    def pack(self, w: XdrWriter) -> None:
        self.sponsored_id.pack(w)

    @classmethod
    def unpack(cls, r: XdrReader) -> BeginSponsoringFutureReserves:
        return cls(AccountId.unpack(r))


@register_body
@dataclass(frozen=True)
class EndSponsoringFutureReserves(OperationBody):
    TYPE: ClassVar[OperationType] = OperationType.END_SPONSORING_FUTURE_RESERVES

    def pack(self, w: XdrWriter) -> None:
        pass

    @classmethod
    def unpack(cls, r: XdrReader) -> EndSponsoringFutureReserves:
        return cls()


@register_body
@dataclass(frozen=True)
class RevokeSponsorship(OperationBody):
    """Revoke sponsorship of a ledger entry or of an account signer."""

    TYPE: ClassVar[OperationType] = OperationType.REVOKE_SPONSORSHIP

    type: RevokeSponsorshipType
    ledger_key: Optional[LedgerKey] = None
    account_id: Optional[AccountId] = None
    signer_key: Optional[SignerKey] = None

    def __post_init__(self):
        object.__setattr__(self, "type", RevokeSponsorshipType(self.type))
        if self.type == RevokeSponsorshipType.REVOKE_SPONSORSHIP_LEDGER_ENTRY:
            if self.ledger_key is None or self.account_id is not None or self.signer_key is not None:
                raise XdrRangeError("ledger entry revocation takes a ledger key only")
        elif self.ledger_key is not None or self.account_id is None or self.signer_key is None:
            raise XdrRangeError("signer revocation takes an account id and signer key")

    @classmethod
    def ledger_entry(cls, ledger_key: LedgerKey) -> RevokeSponsorship:
        return cls(RevokeSponsorshipType.REVOKE_SPONSORSHIP_LEDGER_ENTRY, ledger_key=ledger_key)

    @classmethod
    def signer(cls, account_id: AccountId, signer_key: SignerKey) -> RevokeSponsorship:
        return cls(RevokeSponsorshipType.REVOKE_SPONSORSHIP_SIGNER,
                   account_id=account_id, signer_key=signer_key)

    def pack(self, w: XdrWriter) -> None:
        w.enum(self.type)
        if self.type == RevokeSponsorshipType.REVOKE_SPONSORSHIP_LEDGER_ENTRY:
            self.ledger_key.pack(w)
        else:
            self.account_id.pack(w)
            self.signer_key.pack(w)

    @classmethod
    def unpack(cls, r: XdrReader) -> RevokeSponsorship:
        t = read_enum(r, RevokeSponsorshipType)
        if t == RevokeSponsorshipType.REVOKE_SPONSORSHIP_LEDGER_ENTRY:
            return cls.ledger_entry(LedgerKey.unpack(r))
        account_id = AccountId.unpack(r)
        return cls.signer(account_id, SignerKey.unpack(r))


@register_body
@dataclass(frozen=True)
class Clawback(OperationBody):
    TYPE: ClassVar[OperationType] = OperationType.CLAWBACK

    asset: Asset
    from_account: MuxedAccount
    amount: int

    def __post_init__(self):
        _int64("amount", self.amount)

    def pack(self, w: XdrWriter) -> None:
        self.asset.pack(w)
        self.from_account.pack(w)
        w.int64(self.amount)

    @classmethod
    def unpack(cls, r: XdrReader) -> Clawback:
        asset = Asset.unpack(r)
        from_account = MuxedAccount.unpack(r)
        return cls(asset, from_account, r.int64())


@register_body
@dataclass(frozen=True)
class ClawbackClaimableBalance(OperationBody):
    TYPE: ClassVar[OperationType] = OperationType.CLAWBACK_CLAIMABLE_BALANCE

    balance_id: ClaimableBalanceId

    def pack(self, w: XdrWriter) -> None:
        self.balance_id.pack(w)

    @classmethod
    def unpack(cls, r: XdrReader) -> ClawbackClaimableBalance:
        return cls(ClaimableBalanceId.unpack(r))


@register_body
@dataclass(frozen=True)
class SetTrustLineFlags(OperationBody):
    TYPE: ClassVar[OperationType] = OperationType.SET_TRUST_LINE_FLAGS

    trustor: AccountId
    asset: Asset
    clear_flags: int = 0
    set_flags: int = 0

    def __post_init__(self):
        _uint32("clear_flags", self.clear_flags)
        _uint32("set_flags", self.set_flags)

    def pack(self, w: XdrWriter) -> None:
        self.trustor.pack(w)
        self.asset.pack(w)
        w.uint32(self.clear_flags)
        w.uint32(self.set_flags)

    @classmethod
    def unpack(cls, r: XdrReader) -> SetTrustLineFlags:
        trustor = AccountId.unpack(r)
        asset = Asset.unpack(r)
        clear_flags = r.uint32()
        return cls(trustor, asset, clear_flags, r.uint32())


@register_body
@dataclass(frozen=True)
class LiquidityPoolDeposit(OperationBody):
    TYPE: ClassVar[OperationType] = OperationType.LIQUIDITY_POOL_DEPOSIT

    liquidity_pool_id: bytes
    max_amount_a: int
    max_amount_b: int
    min_price: Price
    max_price: Price

    def __post_init__(self):
        object.__setattr__(self, "liquidity_pool_id", check_hash("pool id", self.liquidity_pool_id))
        _int64("max_amount_a", self.max_amount_a)
        _int64("max_amount_b", self.max_amount_b)

    def pack(self, w: XdrWriter) -> None:
        w.opaque_fixed(self.liquidity_pool_id, 32)
        w.int64(self.max_amount_a)
        w.int64(self.max_amount_b)
        self.min_price.pack(w)
        self.max_price.pack(w)

    @classmethod
    def unpack(cls, r: XdrReader) -> LiquidityPoolDeposit:
        return cls(
            liquidity_pool_id=r.opaque_fixed(32),
            max_amount_a=r.int64(),
            max_amount_b=r.int64(),
            min_price=Price.unpack(r),
            max_price=Price.unpack(r),
        )


@register_body
@dataclass(frozen=True)
class LiquidityPoolWithdraw(OperationBody):
    TYPE: ClassVar[OperationType] = OperationType.LIQUIDITY_POOL_WITHDRAW

    liquidity_pool_id: bytes
    amount: int
    min_amount_a: int
    min_amount_b: int

    def __post_init__(self):
        object.__setattr__(self, "liquidity_pool_id", check_hash("pool id", self.liquidity_pool_id))
        _int64("amount", self.amount)
        _int64("min_amount_a", self.min_amount_a)
        _int64("min_amount_b", self.min_amount_b)

    def pack(self, w: XdrWriter) -> None:
        w.opaque_fixed(self.liquidity_pool_id, 32)
        w.int64(self.amount)
        w.int64(self.min_amount_a)
        w.int64(self.min_amount_b)

    @classmethod
    def unpack(cls, r: XdrReader) -> LiquidityPoolWithdraw:
        pool_id = r.opaque_fixed(32)
        return cls(pool_id, r.int64(), r.int64(), r.int64())


@register_body
@dataclass(frozen=True)
class InvokeHostFunction(OperationBody):
    TYPE: ClassVar[OperationType] = OperationType.INVOKE_HOST_FUNCTION

    host_function: HostFunction
    auth: Tuple[SorobanAuthorizationEntry, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "auth", tuple(self.auth))

    def pack(self, w: XdrWriter) -> None:
        self.host_function.pack(w)
        w.array(self.auth, lambda a: a.pack(w))

    @classmethod
    def unpack(cls, r: XdrReader) -> InvokeHostFunction:
        host_function = HostFunction.unpack(r)
        return cls(host_function, tuple(r.array(lambda: SorobanAuthorizationEntry.unpack(r))))


@register_body
@dataclass(frozen=True)
class ExtendFootprintTTL(OperationBody):
    TYPE: ClassVar[OperationType] = OperationType.EXTEND_FOOTPRINT_TTL

    extend_to: int

    def __post_init__(self):
        _uint32("extend_to", self.extend_to)

    def pack(self, w: XdrWriter) -> None:
        w.int32(0)
        w.uint32(self.extend_to)

    @classmethod
    def unpack(cls, r: XdrReader) -> ExtendFootprintTTL:
        _check_ext_v0(r, "ExtendFootprintTTLOp.ext")
        return cls(r.uint32())


@register_body
@dataclass(frozen=True)
class RestoreFootprint(OperationBody):
    TYPE: ClassVar[OperationType] = OperationType.RESTORE_FOOTPRINT

    def pack(self, w: XdrWriter) -> None:
        w.int32(0)

    @classmethod
    def unpack(cls, r: XdrReader) -> RestoreFootprint:
        _check_ext_v0(r, "RestoreFootprintOp.ext")
        return cls()


# =============================================================================
# Operation
# =============================================================================

@dataclass(frozen=True)
class Operation(XdrType):
    """An operation body with an optional per-operation source account."""

    body: OperationBody
    source_account: Optional[MuxedAccount] = None

    def __post_init__(self):
        if not isinstance(self.body, OperationBody):
            raise XdrRangeError(f"Operation body must be an OperationBody, got {type(self.body).__name__}")

    @property
    def type(self) -> OperationType:
        return self.body.TYPE

    def pack(self, w: XdrWriter) -> None:
        w.optional(self.source_account, lambda v: v.pack(w))
        w.enum(self.body.TYPE)
        self.body.pack(w)

    @classmethod
    def unpack(cls, r: XdrReader) -> Operation:
        source = r.optional(lambda: MuxedAccount.unpack(r))
        op_type = read_enum(r, OperationType)
        return cls(lookup_body(op_type).unpack(r), source)
