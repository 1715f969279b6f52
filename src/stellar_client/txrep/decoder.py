"""
TxRep decoder.

Parses ``dotted.path: value`` lines back into a TransactionEnvelope. Lines
without a ``:`` and blank lines are ignored, a trailing ``(...)`` annotation
is dropped and the last occurrence of a duplicated key wins. Every error is a
TxRepError carrying the path of the offending line.
"""

from __future__ import annotations
import logging
import re
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, Optional, Set, Tuple, Type, TypeVar

from ..codec.writer import (
    INT32_MAX, INT32_MIN, INT64_MAX, INT64_MIN, UINT32_MAX, UINT64_MAX,
)
from ..crypto import strkey
from ..runtime.errors import (
    LengthMismatch, MissingField, StellarError, TxRepError, UnknownVariant,
)
from ..xdr.asset import (
    Asset, AssetCode, ChangeTrustAsset, LiquidityPoolParameters, Price, TrustLineAsset,
)
from ..xdr.auth import (
    ContractIDPreimage, CreateContractArgs, HostFunction, InvokeContractArgs,
    SorobanAddressCredentials, SorobanAuthorizationEntry, SorobanAuthorizedFunction,
    SorobanAuthorizedInvocation, SorobanCredentials,
)
from ..xdr.enums import (
    AssetType, ClaimableBalanceIDType, ClaimantType, ClaimPredicateType, ConfigSettingID,
    ContractDataDurability, ContractExecutableType, ContractIDPreimageType, EnvelopeType,
    HostFunctionType, LedgerEntryType, MemoType, OperationType, PreconditionType,
    RevokeSponsorshipType, SCAddressType, SCErrorCode, SCErrorType, SCValType,
    SorobanAuthorizedFunctionType, SorobanCredentialsType,
)
from ..xdr.keys import AccountId, ClaimableBalanceId, MuxedAccount, SignerKey
from ..xdr.ledger_key import (
    LedgerFootprint, LedgerKey, SorobanResources, SorobanTransactionData,
)
from ..xdr.memo import Memo
from ..xdr.operations import (
    AccountMerge, AllowTrust, BeginSponsoringFutureReserves, BumpSequence, ChangeTrust,
    ClaimClaimableBalance, ClaimPredicate, Claimant, Clawback, ClawbackClaimableBalance,
    CreateAccount, CreateClaimableBalance, CreatePassiveSellOffer, EndSponsoringFutureReserves,
    ExtendFootprintTTL, Inflation, InvokeHostFunction, LiquidityPoolDeposit,
    LiquidityPoolWithdraw, ManageBuyOffer, ManageData, ManageSellOffer, Operation,
    OperationBody, PathPaymentStrictReceive, PathPaymentStrictSend, Payment, RestoreFootprint,
    RevokeSponsorship, SetOptions, SetTrustLineFlags, Signer,
)
from ..xdr.preconditions import LedgerBounds, Preconditions, PreconditionsV2, TimeBounds
from ..xdr.scval import (
    ContractExecutable, SCAddress, SCContractInstance, SCError, SCMapEntry, SCVal,
    parts_to_i128, parts_to_i256, parts_to_u128, parts_to_u256,
)
from ..xdr.transaction import (
    DecoratedSignature, FeeBumpTransaction, Transaction, TransactionEnvelope, TransactionV0,
)
from .common import FALSE, OPERATION_PREFIXES, TRUE, split_annotation, unquote_bytes, unquote_text

logger = logging.getLogger(__name__)

E = TypeVar("E")
T = TypeVar("T")

_INTEGER = re.compile(r"^-?\d+$")
_INDEX = re.compile(r"\[(\d+)\]")

# Older producers emit these names
_ALIASES: Dict[str, str] = {
    "memo.retHash": "memo.return",
    "resources.diskReadBytes": "resources.readBytes",
}


@contextmanager
def _at(path: str) -> Iterator[None]:
    """Report model validation failures against ``path``."""
    try:
        yield
    except TxRepError:
        raise
    except (StellarError, ValueError) as e:
        raise TxRepError(f"{path}: {e}", path, cause=e) from e


def parse_lines(text: str) -> Dict[str, str]:
    """
    Split TxRep text into a path -> value map.

    Annotations are removed; for duplicated keys the last line wins.
    """
    values: Dict[str, str] = {}
    for raw in text.splitlines():
        line = raw.strip()
        if not line or ":" not in line:
            continue
        key, _, value = line.partition(":")
        values[key.strip()] = split_annotation(value.strip())
    return values


class TxRepDecoder:
    """
    Typed accessors over one parsed TxRep document.

    Paths passed to the accessors are full dotted keys; struct prefixes end
    with a ``.`` so children are addressed as ``prefix + "field"``.
    """

    def __init__(self, text: str):
        self._values = parse_lines(text)
        self._indices: Dict[str, Set[int]] = {}
        for key in self._values:
            for m in _INDEX.finditer(key):
                self._indices.setdefault(key[:m.start()], set()).add(int(m.group(1)))
        logger.debug("Parsed %d TxRep keys", len(self._values))

    # -- primitives --------------------------------------------------------------

    def _lookup(self, path: str) -> Optional[str]:
        value = self._values.get(path)
        if value is None:
            for current, legacy in _ALIASES.items():
                if path.endswith(current):
                    value = self._values.get(path[: -len(current)] + legacy)
                    break
        return value

    def get(self, path: str) -> str:
        value = self._lookup(path)
        if value is None:
            raise MissingField(path)
        return value

    def integer(self, path: str, lo: int, hi: int) -> int:
        value = self.get(path)
        if not _INTEGER.match(value):
            raise TxRepError(f"{path}: expected an integer, got {value!r}", path)
        n = int(value)
        if not lo <= n <= hi:
            raise TxRepError(f"{path}: {n} out of range [{lo}, {hi}]", path)
        return n

    def uint32(self, path: str) -> int:
        return self.integer(path, 0, UINT32_MAX)

    def int32(self, path: str) -> int:
        return self.integer(path, INT32_MIN, INT32_MAX)

    def uint64(self, path: str) -> int:
        return self.integer(path, 0, UINT64_MAX)

    def int64(self, path: str) -> int:
        return self.integer(path, INT64_MIN, INT64_MAX)

    def boolean(self, path: str) -> bool:
        value = self.get(path)
        if value == TRUE:
            return True
        if value == FALSE:
            return False
        raise TxRepError(f"{path}: expected true or false, got {value!r}", path)

    def present(self, path: str) -> bool:
        return self.boolean(f"{path}._present")

    def enum(self, path: str, enum_cls: Type[E]) -> E:
        name = self.get(path)
        try:
            return enum_cls[name]
        except KeyError:
            raise UnknownVariant(path, name) from None

    def hex(self, path: str, size: Optional[int] = None) -> bytes:
        value = self.get(path)
        try:
            data = bytes.fromhex(value)
        except ValueError as e:
            raise TxRepError(f"{path}: invalid hex {value!r}", path, cause=e) from e
        if size is not None and len(data) != size:
            raise TxRepError(f"{path}: expected {size} bytes, got {len(data)}", path)
        return data

    def text(self, path: str) -> str:
        with _at(path):
            return unquote_text(self.get(path))

    def raw_bytes(self, path: str) -> bytes:
        with _at(path):
            return unquote_bytes(self.get(path))

    def length(self, path: str) -> int:
        """
        Read ``path.len`` and check it against the ``path[i]`` keys present.

        Raises:
            LengthMismatch: If the count of distinct indices differs
        """
        declared = self.uint32(f"{path}.len")
        actual = len(self._indices.get(path, ()))
        if declared != actual:
            raise LengthMismatch(path, declared, actual)
        return declared

    def items(self, path: str, read: Callable[[str], T]) -> Tuple[T, ...]:
        return tuple(read(f"{path}[{i}].") for i in range(self.length(path)))

    def values(self, path: str, read: Callable[[str], T]) -> Tuple[T, ...]:
        return tuple(read(f"{path}[{i}]") for i in range(self.length(path)))

    def build(self, path: str, factory: Callable[..., T], /, *args, **kwargs) -> T:
        with _at(path.rstrip(".")):
            return factory(*args, **kwargs)

    # -- addresses and assets ----------------------------------------------------

    def account_id(self, path: str) -> AccountId:
        return self.build(path, AccountId.from_address, self.get(path))

    def muxed(self, path: str) -> MuxedAccount:
        return self.build(path, MuxedAccount.from_address, self.get(path))

    def signer_key(self, path: str) -> SignerKey:
        return self.build(path, SignerKey.from_address, self.get(path))

    def asset(self, path: str) -> Asset:
        return self.build(path, Asset.from_canonical, self.get(path))

    def price(self, p: str) -> Price:
        return self.build(p, Price, self.int32(p + "n"), self.int32(p + "d"))

    def balance_id(self, p: str) -> ClaimableBalanceId:
        self.enum(p + "type", ClaimableBalanceIDType)
        return self.build(p, ClaimableBalanceId, self.hex(p + "v0", 32))

    # -- envelope ----------------------------------------------------------------

    def envelope(self) -> TransactionEnvelope:
        envelope_type = self.enum("type", EnvelopeType)
        if envelope_type == EnvelopeType.ENVELOPE_TYPE_TX_FEE_BUMP:
            inner_type = self.enum("feeBump.tx.innerTx.type", EnvelopeType)
            if inner_type != EnvelopeType.ENVELOPE_TYPE_TX:
                raise UnknownVariant("feeBump.tx.innerTx.type", inner_type.name)
            self._ext_v0("feeBump.tx.ext.v")
            inner = self.build(
                "feeBump.tx.innerTx", TransactionEnvelope,
                self.transaction("feeBump.tx.innerTx.tx."),
                self.signatures("feeBump.tx.innerTx."),
            )
            fee_bump = self.build(
                "feeBump.tx", FeeBumpTransaction,
                fee_source=self.muxed("feeBump.tx.feeSource"),
                fee=self.int64("feeBump.tx.fee"),
                inner_tx=inner,
            )
            return self.build("feeBump", TransactionEnvelope, fee_bump, self.signatures("feeBump."))
        if envelope_type == EnvelopeType.ENVELOPE_TYPE_TX_V0:
            tx = self.transaction_v0("tx.")
        elif envelope_type == EnvelopeType.ENVELOPE_TYPE_TX:
            tx = self.transaction("tx.")
        else:
            raise UnknownVariant("type", envelope_type.name)
        return self.build("tx", TransactionEnvelope, tx, self.signatures(""))

    def _ext_v0(self, path: str) -> None:
        if self.integer(path, 0, 0) != 0:
            raise TxRepError(f"{path}: only 0 is supported", path)

    def signatures(self, prefix: str) -> Tuple[DecoratedSignature, ...]:
        def read(p: str) -> DecoratedSignature:
            return self.build(p, DecoratedSignature, self.hex(p + "hint", 4), self.hex(p + "signature"))

        return self.items(prefix + "signatures", read)

    def transaction(self, p: str) -> Transaction:
        ext = self.integer(p + "ext.v", 0, 1)
        return self.build(
            p, Transaction,
            source_account=self.muxed(p + "sourceAccount"),
            fee=self.uint32(p + "fee"),
            sequence_number=self.int64(p + "seqNum"),
            operations=self.items(p + "operations", self.operation),
            memo=self.memo(p + "memo."),
            preconditions=self.preconditions(p + "cond."),
            soroban_data=self.soroban_data(p + "sorobanData.") if ext == 1 else None,
        )

    def transaction_v0(self, p: str) -> TransactionV0:
        self._ext_v0(p + "ext.v")
        source = self.get(p + "sourceAccountEd25519")
        return self.build(
            p, TransactionV0,
            source_account_ed25519=self.build(p + "sourceAccountEd25519", strkey.decode_account_id, source),
            fee=self.uint32(p + "fee"),
            sequence_number=self.int64(p + "seqNum"),
            operations=self.items(p + "operations", self.operation),
            memo=self.memo(p + "memo."),
            time_bounds=self.time_bounds(p + "timeBounds.") if self.present(p + "timeBounds") else None,
        )

    def time_bounds(self, p: str) -> TimeBounds:
        return self.build(p, TimeBounds, self.uint64(p + "minTime"), self.uint64(p + "maxTime"))

    def preconditions(self, p: str) -> Preconditions:
        cond_type = self.enum(p + "type", PreconditionType)
        if cond_type == PreconditionType.PRECOND_NONE:
            return Preconditions.none()
        if cond_type == PreconditionType.PRECOND_TIME:
            return Preconditions.time(self.time_bounds(p + "timeBounds."))
        q = p + "v2."
        ledger_bounds = None
        if self.present(q + "ledgerBounds"):
            ledger_bounds = self.build(
                q + "ledgerBounds", LedgerBounds,
                self.uint32(q + "ledgerBounds.minLedger"), self.uint32(q + "ledgerBounds.maxLedger"),
            )
        v2 = self.build(
            q, PreconditionsV2,
            time_bounds=self.time_bounds(q + "timeBounds.") if self.present(q + "timeBounds") else None,
            ledger_bounds=ledger_bounds,
            min_seq_num=self.int64(q + "minSeqNum") if self.present(q + "minSeqNum") else None,
            min_seq_age=self.uint64(q + "minSeqAge"),
            min_seq_ledger_gap=self.uint32(q + "minSeqLedgerGap"),
            extra_signers=self.values(q + "extraSigners", self.signer_key),
        )
        return Preconditions.from_v2(v2)

    def memo(self, p: str) -> Memo:
        memo_type = self.enum(p + "type", MemoType)
        if memo_type == MemoType.MEMO_TEXT:
            return self.build(p + "text", Memo.text, self.raw_bytes(p + "text"))
        if memo_type == MemoType.MEMO_ID:
            return Memo.id(self.uint64(p + "id"))
        if memo_type == MemoType.MEMO_HASH:
            return Memo.hash(self.hex(p + "hash", 32))
        if memo_type == MemoType.MEMO_RETURN:
            return Memo.return_hash(self.hex(p + "retHash", 32))
        return Memo.none()

    # -- operations --------------------------------------------------------------

    def operation(self, p: str) -> Operation:
        source = self.muxed(p + "sourceAccount") if self.present(p + "sourceAccount") else None
        op_type = self.enum(p + "body.type", OperationType)
        if op_type == OperationType.ACCOUNT_MERGE:
            body: OperationBody = AccountMerge(self.muxed(p + "body.destination"))
        elif op_type == OperationType.INFLATION:
            body = Inflation()
        elif op_type == OperationType.END_SPONSORING_FUTURE_RESERVES:
            body = EndSponsoringFutureReserves()
        else:
            read = self._BODY_READERS[op_type]
            body = read(self, f"{p}body.{OPERATION_PREFIXES[op_type]}.")
        return self.build(p, Operation, body, source)

    def _path(self, path: str) -> Tuple[Asset, ...]:
        return self.values(path, self.asset)

    def _create_account(self, p: str) -> CreateAccount:
        return self.build(p, CreateAccount, self.account_id(p + "destination"),
                          self.int64(p + "startingBalance"))

    def _payment(self, p: str) -> Payment:
        return self.build(p, Payment, self.muxed(p + "destination"), self.asset(p + "asset"),
                          self.int64(p + "amount"))

    def _path_payment_strict_receive(self, p: str) -> PathPaymentStrictReceive:
        return self.build(
            p, PathPaymentStrictReceive,
            send_asset=self.asset(p + "sendAsset"),
            send_max=self.int64(p + "sendMax"),
            destination=self.muxed(p + "destination"),
            dest_asset=self.asset(p + "destAsset"),
            dest_amount=self.int64(p + "destAmount"),
            path=self._path(p + "path"),
        )

    def _path_payment_strict_send(self, p: str) -> PathPaymentStrictSend:
        return self.build(
            p, PathPaymentStrictSend,
            send_asset=self.asset(p + "sendAsset"),
            send_amount=self.int64(p + "sendAmount"),
            destination=self.muxed(p + "destination"),
            dest_asset=self.asset(p + "destAsset"),
            dest_min=self.int64(p + "destMin"),
            path=self._path(p + "path"),
        )

    def _manage_sell_offer(self, p: str) -> ManageSellOffer:
        return self.build(p, ManageSellOffer, self.asset(p + "selling"), self.asset(p + "buying"),
                          self.int64(p + "amount"), self.price(p + "price."), self.int64(p + "offerID"))

    def _manage_buy_offer(self, p: str) -> ManageBuyOffer:
        return self.build(p, ManageBuyOffer, self.asset(p + "selling"), self.asset(p + "buying"),
                          self.int64(p + "buyAmount"), self.price(p + "price."), self.int64(p + "offerID"))

    def _create_passive_sell_offer(self, p: str) -> CreatePassiveSellOffer:
        return self.build(p, CreatePassiveSellOffer, self.asset(p + "selling"), self.asset(p + "buying"),
                          self.int64(p + "amount"), self.price(p + "price."))

    def _set_options(self, p: str) -> SetOptions:
        fields = {}
        if self.present(p + "inflationDest"):
            fields["inflation_dest"] = self.account_id(p + "inflationDest")
        for name, key in (("clear_flags", "clearFlags"), ("set_flags", "setFlags"),
                          ("master_weight", "masterWeight"), ("low_threshold", "lowThreshold"),
                          ("med_threshold", "medThreshold"), ("high_threshold", "highThreshold")):
            if self.present(p + key):
                fields[name] = self.uint32(p + key)
        if self.present(p + "homeDomain"):
            fields["home_domain"] = self.text(p + "homeDomain")
        if self.present(p + "signer"):
            fields["signer"] = self.build(p + "signer", Signer, self.signer_key(p + "signer.key"),
                                          self.uint32(p + "signer.weight"))
        return self.build(p, SetOptions, **fields)

    def _change_trust(self, p: str) -> ChangeTrust:
        if self._lookup(p + "line.type") is not None:
            self._expect_pool_share(p + "line.type")
            q = p + "line.liquidityPool.constantProduct."
            pool = self.build(q, LiquidityPoolParameters, self.asset(q + "assetA"),
                              self.asset(q + "assetB"), self.int32(q + "fee"))
            line = self.build(p + "line", ChangeTrustAsset, liquidity_pool=pool)
        else:
            line = self.build(p + "line", ChangeTrustAsset, asset=self.asset(p + "line"))
        return self.build(p, ChangeTrust, line, self.int64(p + "limit"))

    def _expect_pool_share(self, path: str) -> None:
        asset_type = self.enum(path, AssetType)
        if asset_type != AssetType.ASSET_TYPE_POOL_SHARE:
            raise UnknownVariant(path, asset_type.name)

    def _allow_trust(self, p: str) -> AllowTrust:
        code = self.build(p + "asset", AssetCode.from_code, self.get(p + "asset"))
        return self.build(p, AllowTrust, self.account_id(p + "trustor"), code, self.uint32(p + "authorize"))

    def _manage_data(self, p: str) -> ManageData:
        value = self.hex(p + "dataValue") if self.present(p + "dataValue") else None
        return self.build(p, ManageData, self.text(p + "dataName"), value)

    def _bump_sequence(self, p: str) -> BumpSequence:
        return self.build(p, BumpSequence, self.int64(p + "bumpTo"))

    def _create_claimable_balance(self, p: str) -> CreateClaimableBalance:
        def claimant(q: str) -> Claimant:
            self.enum(q + "type", ClaimantType)
            return self.build(q, Claimant, self.account_id(q + "v0.destination"),
                              self.predicate(q + "v0.predicate."))

        return self.build(p, CreateClaimableBalance, self.asset(p + "asset"), self.int64(p + "amount"),
                          self.items(p + "claimants", claimant))

    def predicate(self, p: str) -> ClaimPredicate:
        t = self.enum(p + "type", ClaimPredicateType)
        if t in (ClaimPredicateType.CLAIM_PREDICATE_AND, ClaimPredicateType.CLAIM_PREDICATE_OR):
            name = "andPredicates" if t == ClaimPredicateType.CLAIM_PREDICATE_AND else "orPredicates"
            return self.build(p, ClaimPredicate, t, predicates=self.items(p + name, self.predicate))
        if t == ClaimPredicateType.CLAIM_PREDICATE_NOT:
            inner = self.predicate(p + "notPredicate.") if self.present(p + "notPredicate") else None
            return self.build(p, ClaimPredicate.not_, inner)
        if t == ClaimPredicateType.CLAIM_PREDICATE_BEFORE_ABSOLUTE_TIME:
            return self.build(p, ClaimPredicate.before_absolute_time, self.int64(p + "absBefore"))
        if t == ClaimPredicateType.CLAIM_PREDICATE_BEFORE_RELATIVE_TIME:
            return self.build(p, ClaimPredicate.before_relative_time, self.int64(p + "relBefore"))
        return ClaimPredicate.unconditional()

    def _claim_claimable_balance(self, p: str) -> ClaimClaimableBalance:
        return ClaimClaimableBalance(self.balance_id(p + "balanceID."))

    def _clawback_claimable_balance(self, p: str) -> ClawbackClaimableBalance:
        return ClawbackClaimableBalance(self.balance_id(p + "balanceID."))

    def _begin_sponsoring_future_reserves(self, p: str) -> BeginSponsoringFutureReserves:
        return BeginSponsoringFutureReserves(self.account_id(p + "sponsoredID"))

    def _revoke_sponsorship(self, p: str) -> RevokeSponsorship:
        t = self.enum(p + "type", RevokeSponsorshipType)
        if t == RevokeSponsorshipType.REVOKE_SPONSORSHIP_LEDGER_ENTRY:
            return RevokeSponsorship.ledger_entry(self.ledger_key(p + "ledgerKey."))
        return self.build(p, RevokeSponsorship.signer, self.account_id(p + "signer.accountID"),
                          self.signer_key(p + "signer.signerKey"))

    def _clawback(self, p: str) -> Clawback:
        return self.build(p, Clawback, self.asset(p + "asset"), self.muxed(p + "from"),
                          self.int64(p + "amount"))

    def _set_trust_line_flags(self, p: str) -> SetTrustLineFlags:
        return self.build(p, SetTrustLineFlags, self.account_id(p + "trustor"), self.asset(p + "asset"),
                          self.uint32(p + "clearFlags"), self.uint32(p + "setFlags"))

    def _liquidity_pool_deposit(self, p: str) -> LiquidityPoolDeposit:
        return self.build(
            p, LiquidityPoolDeposit,
            liquidity_pool_id=self.hex(p + "liquidityPoolID", 32),
            max_amount_a=self.int64(p + "maxAmountA"),
            max_amount_b=self.int64(p + "maxAmountB"),
            min_price=self.price(p + "minPrice."),
            max_price=self.price(p + "maxPrice."),
        )

    def _liquidity_pool_withdraw(self, p: str) -> LiquidityPoolWithdraw:
        return self.build(
            p, LiquidityPoolWithdraw,
            liquidity_pool_id=self.hex(p + "liquidityPoolID", 32),
            amount=self.int64(p + "amount"),
            min_amount_a=self.int64(p + "minAmountA"),
            min_amount_b=self.int64(p + "minAmountB"),
        )

    def _invoke_host_function(self, p: str) -> InvokeHostFunction:
        return self.build(p, InvokeHostFunction, self.host_function(p + "hostFunction."),
                          self.items(p + "auth", self.auth_entry))

    def _extend_footprint_ttl(self, p: str) -> ExtendFootprintTTL:
        self._ext_v0(p + "ext.v")
        return self.build(p, ExtendFootprintTTL, self.uint32(p + "extendTo"))

    def _restore_footprint(self, p: str) -> RestoreFootprint:
        self._ext_v0(p + "ext.v")
        return RestoreFootprint()

    _BODY_READERS: Dict[OperationType, Callable[..., OperationBody]] = {
        OperationType.CREATE_ACCOUNT: _create_account,
        OperationType.PAYMENT: _payment,
        OperationType.PATH_PAYMENT_STRICT_RECEIVE: _path_payment_strict_receive,
        OperationType.MANAGE_SELL_OFFER: _manage_sell_offer,
        OperationType.CREATE_PASSIVE_SELL_OFFER: _create_passive_sell_offer,
        OperationType.SET_OPTIONS: _set_options,
        OperationType.CHANGE_TRUST: _change_trust,
        OperationType.ALLOW_TRUST: _allow_trust,
        OperationType.MANAGE_DATA: _manage_data,
        OperationType.BUMP_SEQUENCE: _bump_sequence,
        OperationType.MANAGE_BUY_OFFER: _manage_buy_offer,
        OperationType.PATH_PAYMENT_STRICT_SEND: _path_payment_strict_send,
        OperationType.CREATE_CLAIMABLE_BALANCE: _create_claimable_balance,
        OperationType.CLAIM_CLAIMABLE_BALANCE: _claim_claimable_balance,
        OperationType.BEGIN_SPONSORING_FUTURE_RESERVES: _begin_sponsoring_future_reserves,
        OperationType.REVOKE_SPONSORSHIP: _revoke_sponsorship,
        OperationType.CLAWBACK: _clawback,
        OperationType.CLAWBACK_CLAIMABLE_BALANCE: _clawback_claimable_balance,
        OperationType.SET_TRUST_LINE_FLAGS: _set_trust_line_flags,
        OperationType.LIQUIDITY_POOL_DEPOSIT: _liquidity_pool_deposit,
        OperationType.LIQUIDITY_POOL_WITHDRAW: _liquidity_pool_withdraw,
        OperationType.INVOKE_HOST_FUNCTION: _invoke_host_function,
        OperationType.EXTEND_FOOTPRINT_TTL: _extend_footprint_ttl,
        OperationType.RESTORE_FOOTPRINT: _restore_footprint,
    }

    # -- ledger keys and Soroban data --------------------------------------------

    def _trust_line_asset(self, path: str) -> TrustLineAsset:
        if self._lookup(path + ".type") is not None:
            self._expect_pool_share(path + ".type")
            return self.build(path, TrustLineAsset,
                              liquidity_pool_id=self.hex(path + ".liquidityPoolID", 32))
        return self.build(path, TrustLineAsset, asset=self.asset(path))

    def ledger_key(self, p: str) -> LedgerKey:
        t = self.enum(p + "type", LedgerEntryType)
        if t == LedgerEntryType.ACCOUNT:
            return LedgerKey.account(self.account_id(p + "account.accountID"))
        if t == LedgerEntryType.TRUSTLINE:
            return self.build(p, LedgerKey.trustline, self.account_id(p + "trustLine.accountID"),
                              self._trust_line_asset(p + "trustLine.asset"))
        if t == LedgerEntryType.OFFER:
            return self.build(p, LedgerKey.offer, self.account_id(p + "offer.sellerID"),
                              self.int64(p + "offer.offerID"))
        if t == LedgerEntryType.DATA:
            return self.build(p, LedgerKey.data, self.account_id(p + "data.accountID"),
                              self.text(p + "data.dataName"))
        if t == LedgerEntryType.CLAIMABLE_BALANCE:
            return LedgerKey.claimable_balance(self.balance_id(p + "claimableBalance.balanceID."))
        if t == LedgerEntryType.LIQUIDITY_POOL:
            return LedgerKey.liquidity_pool(self.hex(p + "liquidityPool.liquidityPoolID", 32))
        if t == LedgerEntryType.CONTRACT_DATA:
            return self.build(p, LedgerKey.contract_data, self.sc_address(p + "contractData.contract."),
                              self.scval(p + "contractData.key."),
                              self.enum(p + "contractData.durability", ContractDataDurability))
        if t == LedgerEntryType.CONTRACT_CODE:
            return LedgerKey.contract_code(self.hex(p + "contractCode.hash", 32))
        if t == LedgerEntryType.CONFIG_SETTING:
            return LedgerKey.config_setting(self.enum(p + "configSetting.configSettingID", ConfigSettingID))
        return LedgerKey.ttl(self.hex(p + "ttl.keyHash", 32))

    def soroban_data(self, p: str) -> SorobanTransactionData:
        archived: Optional[Tuple[int, ...]] = None
        if self.integer(p + "ext.v", 0, 1) == 1:
            archived = self.values(p + "ext.archivedSorobanEntries", self.uint32)
        q = p + "resources."
        footprint = self.build(
            q + "footprint", LedgerFootprint,
            self.items(q + "footprint.readOnly", self.ledger_key),
            self.items(q + "footprint.readWrite", self.ledger_key),
        )
        resources = self.build(
            q, SorobanResources, footprint,
            instructions=self.uint32(q + "instructions"),
            disk_read_bytes=self.uint32(q + "diskReadBytes"),
            write_bytes=self.uint32(q + "writeBytes"),
        )
        return self.build(p, SorobanTransactionData, resources, self.int64(p + "resourceFee"), archived)

    # -- contracts ---------------------------------------------------------------

    def sc_address(self, p: str) -> SCAddress:
        t = self.enum(p + "type", SCAddressType)
        if t == SCAddressType.SC_ADDRESS_TYPE_ACCOUNT:
            return SCAddress(t, self.account_id(p + "accountId"))
        if t == SCAddressType.SC_ADDRESS_TYPE_CONTRACT:
            contract_id = self.build(p + "contractId", strkey.decode_contract_id, self.get(p + "contractId"))
            return SCAddress(t, contract_id)
        if t == SCAddressType.SC_ADDRESS_TYPE_MUXED_ACCOUNT:
            return self.build(p, SCAddress, t, self.muxed(p + "muxedAccount"))
        if t == SCAddressType.SC_ADDRESS_TYPE_CLAIMABLE_BALANCE:
            return SCAddress(t, self.balance_id(p + "claimableBalanceId.balanceID."))
        return SCAddress(t, self.hex(p + "liquidityPoolId", 32))

    def sc_error(self, p: str) -> SCError:
        t = self.enum(p + "type", SCErrorType)
        if t == SCErrorType.SCE_CONTRACT:
            return SCError(t, contract_code=self.uint32(p + "contractCode"))
        return SCError(t, code=self.enum(p + "code", SCErrorCode))

    def executable(self, p: str) -> ContractExecutable:
        t = self.enum(p + "type", ContractExecutableType)
        if t == ContractExecutableType.CONTRACT_EXECUTABLE_WASM:
            return ContractExecutable.wasm(self.hex(p + "wasm_hash", 32))
        return ContractExecutable.stellar_asset()

    def _map_entries(self, path: str) -> Tuple[SCMapEntry, ...]:
        def entry(q: str) -> SCMapEntry:
            return SCMapEntry(self.scval(q + "key."), self.scval(q + "val."))

        return self.items(path, entry)

    def scval(self, p: str) -> SCVal:
        t = self.enum(p + "type", SCValType)
        value = None
        if t == SCValType.SCV_BOOL:
            value = self.boolean(p + "b")
        elif t == SCValType.SCV_ERROR:
            value = self.sc_error(p + "error.")
        elif t == SCValType.SCV_U32:
            value = self.uint32(p + "u32")
        elif t == SCValType.SCV_I32:
            value = self.int32(p + "i32")
        elif t == SCValType.SCV_U64:
            value = self.uint64(p + "u64")
        elif t == SCValType.SCV_I64:
            value = self.int64(p + "i64")
        elif t == SCValType.SCV_TIMEPOINT:
            value = self.uint64(p + "timepoint")
        elif t == SCValType.SCV_DURATION:
            value = self.uint64(p + "duration")
        elif t == SCValType.SCV_U128:
            value = parts_to_u128(self.uint64(p + "u128.hi"), self.uint64(p + "u128.lo"))
        elif t == SCValType.SCV_I128:
            value = parts_to_i128(self.int64(p + "i128.hi"), self.uint64(p + "i128.lo"))
        elif t == SCValType.SCV_U256:
            value = parts_to_u256(*(self.uint64(f"{p}u256.{name}")
                                    for name in ("hi_hi", "hi_lo", "lo_hi", "lo_lo")))
        elif t == SCValType.SCV_I256:
            value = parts_to_i256(self.int64(p + "i256.hi_hi"),
                                  *(self.uint64(f"{p}i256.{name}") for name in ("hi_lo", "lo_hi", "lo_lo")))
        elif t == SCValType.SCV_BYTES:
            value = self.hex(p + "bytes")
        elif t == SCValType.SCV_STRING:
            value = self.raw_bytes(p + "str")
        elif t == SCValType.SCV_SYMBOL:
            value = self.get(p + "sym")
        elif t == SCValType.SCV_VEC:
            value = self.items(p + "vec", self.scval) if self.present(p + "vec") else None
        elif t == SCValType.SCV_MAP:
            value = self._map_entries(p + "map") if self.present(p + "map") else None
        elif t == SCValType.SCV_ADDRESS:
            value = self.sc_address(p + "address.")
        elif t == SCValType.SCV_LEDGER_KEY_NONCE:
            value = self.int64(p + "nonce_key.nonce")
        elif t == SCValType.SCV_CONTRACT_INSTANCE:
            storage = self._map_entries(p + "storage") if self.present(p + "storage") else None
            value = SCContractInstance(self.executable(p + "executable."), storage)
        return self.build(p, SCVal, t, value)

    def preimage(self, p: str) -> ContractIDPreimage:
        t = self.enum(p + "type", ContractIDPreimageType)
        if t == ContractIDPreimageType.CONTRACT_ID_PREIMAGE_FROM_ADDRESS:
            return self.build(p, ContractIDPreimage.from_address,
                              self.sc_address(p + "fromAddress.address."),
                              self.hex(p + "fromAddress.salt", 32))
        return ContractIDPreimage.from_asset(self.asset(p + "fromAsset"))

    def create_contract_args(self, p: str, v2: bool) -> CreateContractArgs:
        return self.build(
            p, CreateContractArgs,
            self.preimage(p + "contractIDPreimage."),
            self.executable(p + "executable."),
            self.items(p + "constructorArgs", self.scval) if v2 else None,
        )

    def invoke_contract_args(self, p: str) -> InvokeContractArgs:
        return self.build(p, InvokeContractArgs, self.sc_address(p + "contractAddress."),
                          self.get(p + "functionName"), self.items(p + "args", self.scval))

    def host_function(self, p: str) -> HostFunction:
        t = self.enum(p + "type", HostFunctionType)
        if t == HostFunctionType.HOST_FUNCTION_TYPE_INVOKE_CONTRACT:
            return HostFunction.invoke(self.invoke_contract_args(p + "invokeContract."))
        if t == HostFunctionType.HOST_FUNCTION_TYPE_CREATE_CONTRACT:
            return HostFunction.create(self.create_contract_args(p + "createContract.", v2=False))
        if t == HostFunctionType.HOST_FUNCTION_TYPE_CREATE_CONTRACT_V2:
            return HostFunction.create(self.create_contract_args(p + "createContractV2.", v2=True))
        return HostFunction.upload_wasm(self.hex(p + "wasm"))

    def credentials(self, p: str) -> SorobanCredentials:
        t = self.enum(p + "type", SorobanCredentialsType)
        if t == SorobanCredentialsType.SOROBAN_CREDENTIALS_SOURCE_ACCOUNT:
            return SorobanCredentials.source_account()
        q = p + "address."
        address = self.build(
            q, SorobanAddressCredentials,
            address=self.sc_address(q + "address."),
            nonce=self.int64(q + "nonce"),
            signature_expiration_ledger=self.uint32(q + "signatureExpirationLedger"),
            signature=self.scval(q + "signature."),
        )
        return SorobanCredentials.from_address(address)

    def authorized_function(self, p: str) -> SorobanAuthorizedFunction:
        t = self.enum(p + "type", SorobanAuthorizedFunctionType)
        if t == SorobanAuthorizedFunctionType.SOROBAN_AUTHORIZED_FUNCTION_TYPE_CONTRACT_FN:
            return SorobanAuthorizedFunction.contract(self.invoke_contract_args(p + "contractFn."))
        if t == SorobanAuthorizedFunctionType.SOROBAN_AUTHORIZED_FUNCTION_TYPE_CREATE_CONTRACT_HOST_FN:
            return SorobanAuthorizedFunction.create(
                self.create_contract_args(p + "createContractHostFn.", v2=False))
        return SorobanAuthorizedFunction.create(self.create_contract_args(p + "createContractV2HostFn.", v2=True))

    def invocation(self, p: str) -> SorobanAuthorizedInvocation:
        return SorobanAuthorizedInvocation(self.authorized_function(p + "function."),
                                           self.items(p + "subInvocations", self.invocation))

    def auth_entry(self, p: str) -> SorobanAuthorizationEntry:
        return SorobanAuthorizationEntry(self.credentials(p + "credentials."),
                                         self.invocation(p + "rootInvocation."))


def from_txrep(text: str) -> TransactionEnvelope:
    """
    Parse TxRep text into an envelope.

    Args:
        text: TxRep document, annotated or not

    Returns:
        The decoded envelope

    Raises:
        MissingField: A required key is absent
        LengthMismatch: A ``*.len`` disagrees with the indexed keys present
        UnknownVariant: A ``*.type`` names no known variant
        TxRepError: Any other malformed value
    """
    envelope = TxRepDecoder(text).envelope()
    logger.debug("Decoded TxRep %s with %d signatures", envelope.type.name, len(envelope.signatures))
    return envelope
