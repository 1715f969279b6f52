"""
TxRep encoder.

Renders a TransactionEnvelope as ``dotted.path: value`` lines in pre-order:
``*.len`` precedes array elements, ``*.type`` precedes union arms and
``*._present`` precedes optional values. Amounts are integer stroops.
"""

from __future__ import annotations
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..crypto import strkey
from ..xdr.amount import from_stroops
from ..xdr.asset import Asset, ChangeTrustAsset, Price, TrustLineAsset
from ..xdr.auth import (
    ContractIDPreimage, CreateContractArgs, HostFunction, InvokeContractArgs,
    SorobanAuthorizationEntry, SorobanAuthorizedFunction, SorobanAuthorizedInvocation,
    SorobanCredentials,
)
from ..xdr.enums import (
    AssetType, ClaimableBalanceIDType, ClaimantType, ClaimPredicateType, ContractExecutableType,
    ContractIDPreimageType, EnvelopeType, HostFunctionType, LedgerEntryType, MemoType,
    OperationType, PreconditionType, RevokeSponsorshipType, SCAddressType, SCErrorType, SCValType,
    SorobanAuthorizedFunctionType, SorobanCredentialsType,
)
from ..xdr.keys import ClaimableBalanceId
from ..xdr.ledger_key import LedgerFootprint, LedgerKey, SorobanTransactionData
from ..xdr.memo import Memo
from ..xdr.operations import ClaimPredicate, Operation
from ..xdr.preconditions import Preconditions, TimeBounds
from ..xdr.scval import (
    ContractExecutable, SCAddress, SCError, SCVal, i128_to_parts, i256_to_parts,
    u128_to_parts, u256_to_parts,
)
from ..xdr.transaction import DecoratedSignature, Transaction, TransactionEnvelope, TransactionV0
from .common import FALSE, OPERATION_PREFIXES, TRUE, quote_bytes, quote_text
from .options import DEFAULT_OPTIONS, TxRepOptions

logger = logging.getLogger(__name__)


def _utc(seconds: int) -> Optional[str]:
    if seconds <= 0:
        return None
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    except (OverflowError, OSError, ValueError):
        # beyond the platform's datetime range; leave the line unannotated
        return None


class TxRepEncoder:
    """
    Stateful line writer for one envelope at a time.

    Use ``to_txrep`` unless the same options are reused for many envelopes.
    """

    def __init__(self, options: Optional[TxRepOptions] = None):
        self.options = options or DEFAULT_OPTIONS
        self._lines: List[str] = []

    def encode(self, envelope: TransactionEnvelope) -> str:
        """
        Render an envelope.

        Returns:
            TxRep text, lines joined with ``\\n`` and no trailing newline
        """
        self._lines = []
        self._envelope(envelope)
        logger.debug("Rendered %s as %d TxRep lines", envelope.type.name, len(self._lines))
        return "\n".join(self._lines)

    # -- primitives --------------------------------------------------------------

    def _add(self, path: str, value: Any, note: Optional[str] = None) -> None:
        line = f"{path}: {value}"
        if note is not None and self.options.annotations:
            line = f"{line} ({note})"
        self._lines.append(line)

    def _bool(self, path: str, flag: bool) -> None:
        self._add(path, TRUE if flag else FALSE)

    def _present(self, path: str, value: Any) -> bool:
        """Write ``path._present`` and report whether the value follows."""
        self._bool(f"{path}._present", value is not None)
        return value is not None

    def _amount(self, path: str, stroops: int) -> None:
        places = self.options.amount_decimals
        self._add(path, stroops, from_stroops(stroops, places))

    def _time(self, path: str, seconds: int) -> None:
        self._add(path, seconds, _utc(seconds))

    def _list(self, path: str, items: Sequence[Any], write: Callable[[str, Any], None]) -> None:
        self._add(f"{path}.len", len(items))
        for i, item in enumerate(items):
            write(f"{path}[{i}].", item)

    def _values(self, path: str, values: Sequence[Any]) -> None:
        self._add(f"{path}.len", len(values))
        for i, value in enumerate(values):
            self._add(f"{path}[{i}]", value)

    # -- envelope ----------------------------------------------------------------

    def _envelope(self, envelope: TransactionEnvelope) -> None:
        envelope_type = envelope.type
        self._add("type", envelope_type.name)
        if envelope_type == EnvelopeType.ENVELOPE_TYPE_TX_FEE_BUMP:
            fee_bump = envelope.tx
            self._add("feeBump.tx.feeSource", fee_bump.fee_source.address)
            self._amount("feeBump.tx.fee", fee_bump.fee)
            self._add("feeBump.tx.innerTx.type", EnvelopeType.ENVELOPE_TYPE_TX.name)
            self._transaction("feeBump.tx.innerTx.tx.", fee_bump.inner_tx.tx)
            self._signatures("feeBump.tx.innerTx.", fee_bump.inner_tx.signatures)
            self._add("feeBump.tx.ext.v", 0)
            self._signatures("feeBump.", envelope.signatures)
        elif envelope_type == EnvelopeType.ENVELOPE_TYPE_TX_V0:
            self._transaction_v0("tx.", envelope.tx)
            self._signatures("", envelope.signatures)
        else:
            self._transaction("tx.", envelope.tx)
            self._signatures("", envelope.signatures)

    def _signatures(self, prefix: str, signatures: Sequence[DecoratedSignature]) -> None:
        def write(p: str, sig: DecoratedSignature) -> None:
            self._add(p + "hint", sig.hint.hex())
            self._add(p + "signature", sig.signature.hex())

        self._list(prefix + "signatures", signatures, write)

    def _transaction(self, p: str, tx: Transaction) -> None:
        self._add(p + "sourceAccount", tx.source_account.address)
        self._amount(p + "fee", tx.fee)
        self._add(p + "seqNum", tx.sequence_number)
        self._preconditions(p + "cond.", tx.preconditions)
        self._memo(p + "memo.", tx.memo)
        self._list(p + "operations", tx.operations, self._operation)
        if tx.soroban_data is None:
            self._add(p + "ext.v", 0)
        else:
            self._add(p + "ext.v", 1)
            self._soroban_data(p + "sorobanData.", tx.soroban_data)

    def _transaction_v0(self, p: str, tx: TransactionV0) -> None:
        self._add(p + "sourceAccountEd25519", strkey.encode_account_id(tx.source_account_ed25519))
        self._amount(p + "fee", tx.fee)
        self._add(p + "seqNum", tx.sequence_number)
        if self._present(p + "timeBounds", tx.time_bounds):
            self._time_bounds(p + "timeBounds.", tx.time_bounds)
        self._memo(p + "memo.", tx.memo)
        self._list(p + "operations", tx.operations, self._operation)
        self._add(p + "ext.v", 0)

    def _time_bounds(self, p: str, bounds: TimeBounds) -> None:
        self._time(p + "minTime", bounds.min_time)
        self._time(p + "maxTime", bounds.max_time)

    def _preconditions(self, p: str, cond: Preconditions) -> None:
        self._add(p + "type", cond.type.name)
        if cond.type == PreconditionType.PRECOND_TIME:
            self._time_bounds(p + "timeBounds.", cond.time_bounds)
        elif cond.type == PreconditionType.PRECOND_V2:
            v2 = cond.v2
            q = p + "v2."
            if self._present(q + "timeBounds", v2.time_bounds):
                self._time_bounds(q + "timeBounds.", v2.time_bounds)
            if self._present(q + "ledgerBounds", v2.ledger_bounds):
                self._add(q + "ledgerBounds.minLedger", v2.ledger_bounds.min_ledger)
                self._add(q + "ledgerBounds.maxLedger", v2.ledger_bounds.max_ledger)
            if self._present(q + "minSeqNum", v2.min_seq_num):
                self._add(q + "minSeqNum", v2.min_seq_num)
            self._add(q + "minSeqAge", v2.min_seq_age)
            self._add(q + "minSeqLedgerGap", v2.min_seq_ledger_gap)
            self._values(q + "extraSigners", [signer.address for signer in v2.extra_signers])

    def _memo(self, p: str, memo: Memo) -> None:
        self._add(p + "type", memo.type.name)
        if memo.type == MemoType.MEMO_TEXT:
            self._add(p + "text", quote_bytes(memo.value))
        elif memo.type == MemoType.MEMO_ID:
            self._add(p + "id", memo.value)
        elif memo.type == MemoType.MEMO_HASH:
            self._add(p + "hash", memo.value.hex())
        elif memo.type == MemoType.MEMO_RETURN:
            self._add(p + "retHash", memo.value.hex())

    # -- operations --------------------------------------------------------------

    def _operation(self, p: str, op: Operation) -> None:
        if self._present(p + "sourceAccount", op.source_account):
            self._add(p + "sourceAccount", op.source_account.address)
        self._add(p + "body.type", op.type.name)
        if op.type == OperationType.ACCOUNT_MERGE:
            self._add(p + "body.destination", op.body.destination.address)
            return
        write = self._BODY_WRITERS.get(op.type)
        if write is not None:
            write(self, f"{p}body.{OPERATION_PREFIXES[op.type]}.", op.body)

    def _asset(self, path: str, asset: Asset) -> None:
        self._add(path, asset.canonical)

    def _price(self, p: str, price: Price) -> None:
        self._add(p + "n", price.n)
        self._add(p + "d", price.d)

    def _path(self, path: str, assets: Sequence[Asset]) -> None:
        self._values(path, [asset.canonical for asset in assets])

    def _create_account(self, p: str, body) -> None:
        self._add(p + "destination", body.destination.address)
        self._amount(p + "startingBalance", body.starting_balance)

    def _payment(self, p: str, body) -> None:
        self._add(p + "destination", body.destination.address)
        self._asset(p + "asset", body.asset)
        self._amount(p + "amount", body.amount)

    def _path_payment_strict_receive(self, p: str, body) -> None:
        self._asset(p + "sendAsset", body.send_asset)
        self._amount(p + "sendMax", body.send_max)
        self._add(p + "destination", body.destination.address)
        self._asset(p + "destAsset", body.dest_asset)
        self._amount(p + "destAmount", body.dest_amount)
        self._path(p + "path", body.path)

    def _path_payment_strict_send(self, p: str, body) -> None:
        self._asset(p + "sendAsset", body.send_asset)
        self._amount(p + "sendAmount", body.send_amount)
        self._add(p + "destination", body.destination.address)
        self._asset(p + "destAsset", body.dest_asset)
        self._amount(p + "destMin", body.dest_min)
        self._path(p + "path", body.path)

    def _manage_sell_offer(self, p: str, body) -> None:
        self._asset(p + "selling", body.selling)
        self._asset(p + "buying", body.buying)
        self._amount(p + "amount", body.amount)
        self._price(p + "price.", body.price)
        self._add(p + "offerID", body.offer_id)

    def _manage_buy_offer(self, p: str, body) -> None:
        self._asset(p + "selling", body.selling)
        self._asset(p + "buying", body.buying)
        self._amount(p + "buyAmount", body.buy_amount)
        self._price(p + "price.", body.price)
        self._add(p + "offerID", body.offer_id)

    def _create_passive_sell_offer(self, p: str, body) -> None:
        self._asset(p + "selling", body.selling)
        self._asset(p + "buying", body.buying)
        self._amount(p + "amount", body.amount)
        self._price(p + "price.", body.price)

    def _set_options(self, p: str, body) -> None:
        if self._present(p + "inflationDest", body.inflation_dest):
            self._add(p + "inflationDest", body.inflation_dest.address)
        for name, value in (("clearFlags", body.clear_flags), ("setFlags", body.set_flags),
                            ("masterWeight", body.master_weight), ("lowThreshold", body.low_threshold),
                            ("medThreshold", body.med_threshold), ("highThreshold", body.high_threshold)):
            if self._present(p + name, value):
                self._add(p + name, value)
        if self._present(p + "homeDomain", body.home_domain):
            self._add(p + "homeDomain", quote_text(body.home_domain))
        if self._present(p + "signer", body.signer):
            self._add(p + "signer.key", body.signer.key.address)
            self._add(p + "signer.weight", body.signer.weight)

    def _change_trust(self, p: str, body) -> None:
        line: ChangeTrustAsset = body.line
        if line.asset is not None:
            self._asset(p + "line", line.asset)
        else:
            pool = line.liquidity_pool
            self._add(p + "line.type", AssetType.ASSET_TYPE_POOL_SHARE.name)
            self._asset(p + "line.liquidityPool.constantProduct.assetA", pool.asset_a)
            self._asset(p + "line.liquidityPool.constantProduct.assetB", pool.asset_b)
            self._add(p + "line.liquidityPool.constantProduct.fee", pool.fee)
        self._amount(p + "limit", body.limit)

    def _allow_trust(self, p: str, body) -> None:
        self._add(p + "trustor", body.trustor.address)
        self._add(p + "asset", body.asset.code)
        self._add(p + "authorize", body.authorize)

    def _manage_data(self, p: str, body) -> None:
        self._add(p + "dataName", quote_text(body.data_name))
        if self._present(p + "dataValue", body.data_value):
            self._add(p + "dataValue", body.data_value.hex())

    def _bump_sequence(self, p: str, body) -> None:
        self._add(p + "bumpTo", body.bump_to)

    def _create_claimable_balance(self, p: str, body) -> None:
        self._asset(p + "asset", body.asset)
        self._amount(p + "amount", body.amount)

        def write(q: str, claimant) -> None:
            self._add(q + "type", ClaimantType.CLAIMANT_TYPE_V0.name)
            self._add(q + "v0.destination", claimant.destination.address)
            self._predicate(q + "v0.predicate.", claimant.predicate)

        self._list(p + "claimants", body.claimants, write)

    def _predicate(self, p: str, predicate: ClaimPredicate) -> None:
        t = predicate.type
        self._add(p + "type", t.name)
        if t == ClaimPredicateType.CLAIM_PREDICATE_AND:
            self._list(p + "andPredicates", predicate.predicates, self._predicate)
        elif t == ClaimPredicateType.CLAIM_PREDICATE_OR:
            self._list(p + "orPredicates", predicate.predicates, self._predicate)
        elif t == ClaimPredicateType.CLAIM_PREDICATE_NOT:
            if self._present(p + "notPredicate", predicate.predicate):
                self._predicate(p + "notPredicate.", predicate.predicate)
        elif t == ClaimPredicateType.CLAIM_PREDICATE_BEFORE_ABSOLUTE_TIME:
            self._time(p + "absBefore", predicate.value)
        elif t == ClaimPredicateType.CLAIM_PREDICATE_BEFORE_RELATIVE_TIME:
            self._add(p + "relBefore", predicate.value)

    def _balance_id(self, p: str, balance_id: ClaimableBalanceId) -> None:
        self._add(p + "type", ClaimableBalanceIDType.CLAIMABLE_BALANCE_ID_TYPE_V0.name)
        self._add(p + "v0", balance_id.v0.hex())

    def _claim_claimable_balance(self, p: str, body) -> None:
        self._balance_id(p + "balanceID.", body.balance_id)

    def _begin_sponsoring_future_reserves(self, p: str, body) -> None:
        self._add(p + "sponsoredID", body.sponsored_id.address)

    def _revoke_sponsorship(self, p: str, body) -> None:
        self._add(p + "type", body.type.name)
        if body.type == RevokeSponsorshipType.REVOKE_SPONSORSHIP_LEDGER_ENTRY:
            self._ledger_key(p + "ledgerKey.", body.ledger_key)
        else:
            self._add(p + "signer.accountID", body.account_id.address)
            self._add(p + "signer.signerKey", body.signer_key.address)

    def _clawback(self, p: str, body) -> None:
        self._asset(p + "asset", body.asset)
        self._add(p + "from", body.from_account.address)
        self._amount(p + "amount", body.amount)

    def _set_trust_line_flags(self, p: str, body) -> None:
        self._add(p + "trustor", body.trustor.address)
        self._asset(p + "asset", body.asset)
        self._add(p + "clearFlags", body.clear_flags)
        self._add(p + "setFlags", body.set_flags)

    def _liquidity_pool_deposit(self, p: str, body) -> None:
        self._add(p + "liquidityPoolID", body.liquidity_pool_id.hex())
        self._amount(p + "maxAmountA", body.max_amount_a)
        self._amount(p + "maxAmountB", body.max_amount_b)
        self._price(p + "minPrice.", body.min_price)
        self._price(p + "maxPrice.", body.max_price)

    def _liquidity_pool_withdraw(self, p: str, body) -> None:
        self._add(p + "liquidityPoolID", body.liquidity_pool_id.hex())
        self._amount(p + "amount", body.amount)
        self._amount(p + "minAmountA", body.min_amount_a)
        self._amount(p + "minAmountB", body.min_amount_b)

    def _invoke_host_function(self, p: str, body) -> None:
        self._host_function(p + "hostFunction.", body.host_function)
        self._list(p + "auth", body.auth, self._auth_entry)

    def _extend_footprint_ttl(self, p: str, body) -> None:
        self._add(p + "ext.v", 0)
        self._add(p + "extendTo", body.extend_to)

    def _restore_footprint(self, p: str, body) -> None:
        self._add(p + "ext.v", 0)

    _BODY_WRITERS: Dict[OperationType, Callable[..., None]] = {
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
        OperationType.CLAWBACK_CLAIMABLE_BALANCE: _claim_claimable_balance,
        OperationType.SET_TRUST_LINE_FLAGS: _set_trust_line_flags,
        OperationType.LIQUIDITY_POOL_DEPOSIT: _liquidity_pool_deposit,
        OperationType.LIQUIDITY_POOL_WITHDRAW: _liquidity_pool_withdraw,
        OperationType.INVOKE_HOST_FUNCTION: _invoke_host_function,
        OperationType.EXTEND_FOOTPRINT_TTL: _extend_footprint_ttl,
        OperationType.RESTORE_FOOTPRINT: _restore_footprint,
    }

    # -- ledger keys and Soroban data --------------------------------------------

    def _trust_line_asset(self, path: str, asset: TrustLineAsset) -> None:
        if asset.asset is not None:
            self._asset(path, asset.asset)
        else:
            self._add(path + ".type", AssetType.ASSET_TYPE_POOL_SHARE.name)
            self._add(path + ".liquidityPoolID", asset.liquidity_pool_id.hex())

    def _ledger_key(self, p: str, key: LedgerKey) -> None:
        t = key.type
        self._add(p + "type", t.name)
        if t == LedgerEntryType.ACCOUNT:
            self._add(p + "account.accountID", key.account_id.address)
        elif t == LedgerEntryType.TRUSTLINE:
            self._add(p + "trustLine.accountID", key.account_id.address)
            self._trust_line_asset(p + "trustLine.asset", key.asset)
        elif t == LedgerEntryType.OFFER:
            self._add(p + "offer.sellerID", key.seller_id.address)
            self._add(p + "offer.offerID", key.offer_id)
        elif t == LedgerEntryType.DATA:
            self._add(p + "data.accountID", key.account_id.address)
            self._add(p + "data.dataName", quote_text(key.data_name))
        elif t == LedgerEntryType.CLAIMABLE_BALANCE:
            self._balance_id(p + "claimableBalance.balanceID.", key.balance_id)
        elif t == LedgerEntryType.LIQUIDITY_POOL:
            self._add(p + "liquidityPool.liquidityPoolID", key.liquidity_pool_id.hex())
        elif t == LedgerEntryType.CONTRACT_DATA:
            self._sc_address(p + "contractData.contract.", key.contract)
            self._scval(p + "contractData.key.", key.key)
            self._add(p + "contractData.durability", key.durability.name)
        elif t == LedgerEntryType.CONTRACT_CODE:
            self._add(p + "contractCode.hash", key.hash.hex())
        elif t == LedgerEntryType.CONFIG_SETTING:
            self._add(p + "configSetting.configSettingID", key.config_setting_id.name)
        else:
            self._add(p + "ttl.keyHash", key.key_hash.hex())

    def _footprint(self, p: str, footprint: LedgerFootprint) -> None:
        self._list(p + "readOnly", footprint.read_only, self._ledger_key)
        self._list(p + "readWrite", footprint.read_write, self._ledger_key)

    def _soroban_data(self, p: str, data: SorobanTransactionData) -> None:
        if data.archived_soroban_entries is None:
            self._add(p + "ext.v", 0)
        else:
            self._add(p + "ext.v", 1)
            self._values(p + "ext.archivedSorobanEntries", data.archived_soroban_entries)
        resources = data.resources
        self._footprint(p + "resources.footprint.", resources.footprint)
        self._add(p + "resources.instructions", resources.instructions)
        self._add(p + "resources.diskReadBytes", resources.disk_read_bytes)
        self._add(p + "resources.writeBytes", resources.write_bytes)
        self._amount(p + "resourceFee", data.resource_fee)

    # -- contracts ---------------------------------------------------------------

    def _sc_address(self, p: str, address: SCAddress) -> None:
        t = address.type
        self._add(p + "type", t.name)
        if t == SCAddressType.SC_ADDRESS_TYPE_ACCOUNT:
            self._add(p + "accountId", address.address)
        elif t == SCAddressType.SC_ADDRESS_TYPE_CONTRACT:
            self._add(p + "contractId", address.address)
        elif t == SCAddressType.SC_ADDRESS_TYPE_MUXED_ACCOUNT:
            self._add(p + "muxedAccount", address.address)
        elif t == SCAddressType.SC_ADDRESS_TYPE_CLAIMABLE_BALANCE:
            self._balance_id(p + "claimableBalanceId.balanceID.", address.value)
        else:
            self._add(p + "liquidityPoolId", address.value.hex())

    def _sc_error(self, p: str, error: SCError) -> None:
        self._add(p + "type", error.type.name)
        if error.type == SCErrorType.SCE_CONTRACT:
            self._add(p + "contractCode", error.contract_code)
        else:
            self._add(p + "code", error.code.name)

    def _executable(self, p: str, executable: ContractExecutable) -> None:
        self._add(p + "type", executable.type.name)
        if executable.type == ContractExecutableType.CONTRACT_EXECUTABLE_WASM:
            self._add(p + "wasm_hash", executable.wasm_hash.hex())

    def _map_entries(self, path: str, entries) -> None:
        def write(q: str, entry) -> None:
            self._scval(q + "key.", entry.key)
            self._scval(q + "val.", entry.val)

        self._list(path, entries, write)

    def _scval(self, p: str, val: SCVal) -> None:
        t = val.type
        v = val.value
        self._add(p + "type", t.name)
        if t == SCValType.SCV_BOOL:
            self._bool(p + "b", v)
        elif t == SCValType.SCV_ERROR:
            self._sc_error(p + "error.", v)
        elif t == SCValType.SCV_U32:
            self._add(p + "u32", v)
        elif t == SCValType.SCV_I32:
            self._add(p + "i32", v)
        elif t == SCValType.SCV_U64:
            self._add(p + "u64", v)
        elif t == SCValType.SCV_I64:
            self._add(p + "i64", v)
        elif t == SCValType.SCV_TIMEPOINT:
            self._time(p + "timepoint", v)
        elif t == SCValType.SCV_DURATION:
            self._add(p + "duration", v)
        elif t in (SCValType.SCV_U128, SCValType.SCV_I128):
            field = "u128" if t == SCValType.SCV_U128 else "i128"
            hi, lo = u128_to_parts(v) if t == SCValType.SCV_U128 else i128_to_parts(v)
            self._add(f"{p}{field}.hi", hi)
            self._add(f"{p}{field}.lo", lo)
        elif t in (SCValType.SCV_U256, SCValType.SCV_I256):
            field = "u256" if t == SCValType.SCV_U256 else "i256"
            parts = u256_to_parts(v) if t == SCValType.SCV_U256 else i256_to_parts(v)
            for name, part in zip(("hi_hi", "hi_lo", "lo_hi", "lo_lo"), parts):
                self._add(f"{p}{field}.{name}", part)
        elif t == SCValType.SCV_BYTES:
            self._add(p + "bytes", v.hex())
        elif t == SCValType.SCV_STRING:
            self._add(p + "str", quote_bytes(v))
        elif t == SCValType.SCV_SYMBOL:
            self._add(p + "sym", v)
        elif t == SCValType.SCV_VEC:
            if self._present(p + "vec", v):
                self._list(p + "vec", v, self._scval)
        elif t == SCValType.SCV_MAP:
            if self._present(p + "map", v):
                self._map_entries(p + "map", v)
        elif t == SCValType.SCV_ADDRESS:
            self._sc_address(p + "address.", v)
        elif t == SCValType.SCV_LEDGER_KEY_NONCE:
            self._add(p + "nonce_key.nonce", v)
        elif t == SCValType.SCV_CONTRACT_INSTANCE:
            self._executable(p + "executable.", v.executable)
            if self._present(p + "storage", v.storage):
                self._map_entries(p + "storage", v.storage)

    def _preimage(self, p: str, preimage: ContractIDPreimage) -> None:
        self._add(p + "type", preimage.type.name)
        if preimage.type == ContractIDPreimageType.CONTRACT_ID_PREIMAGE_FROM_ADDRESS:
            self._sc_address(p + "fromAddress.address.", preimage.address)
            self._add(p + "fromAddress.salt", preimage.salt.hex())
        else:
            self._asset(p + "fromAsset", preimage.asset)

    def _create_contract_args(self, p: str, args: CreateContractArgs) -> None:
        self._preimage(p + "contractIDPreimage.", args.contract_id_preimage)
        self._executable(p + "executable.", args.executable)
        if args.is_v2:
            self._list(p + "constructorArgs", args.constructor_args, self._scval)

    def _invoke_contract_args(self, p: str, args: InvokeContractArgs) -> None:
        self._sc_address(p + "contractAddress.", args.contract_address)
        self._add(p + "functionName", args.function_name)
        self._list(p + "args", args.args, self._scval)

    def _host_function(self, p: str, fn: HostFunction) -> None:
        t = fn.type
        self._add(p + "type", t.name)
        if t == HostFunctionType.HOST_FUNCTION_TYPE_INVOKE_CONTRACT:
            self._invoke_contract_args(p + "invokeContract.", fn.invoke_contract)
        elif t == HostFunctionType.HOST_FUNCTION_TYPE_CREATE_CONTRACT:
            self._create_contract_args(p + "createContract.", fn.create_contract)
        elif t == HostFunctionType.HOST_FUNCTION_TYPE_CREATE_CONTRACT_V2:
            self._create_contract_args(p + "createContractV2.", fn.create_contract)
        else:
            self._add(p + "wasm", fn.wasm.hex())

    def _credentials(self, p: str, credentials: SorobanCredentials) -> None:
        self._add(p + "type", credentials.type.name)
        if credentials.type == SorobanCredentialsType.SOROBAN_CREDENTIALS_ADDRESS:
            address = credentials.address
            q = p + "address."
            self._sc_address(q + "address.", address.address)
            self._add(q + "nonce", address.nonce)
            self._add(q + "signatureExpirationLedger", address.signature_expiration_ledger)
            self._scval(q + "signature.", address.signature)

    def _authorized_function(self, p: str, fn: SorobanAuthorizedFunction) -> None:
        t = fn.type
        self._add(p + "type", t.name)
        if t == SorobanAuthorizedFunctionType.SOROBAN_AUTHORIZED_FUNCTION_TYPE_CONTRACT_FN:
            self._invoke_contract_args(p + "contractFn.", fn.contract_fn)
        elif t == SorobanAuthorizedFunctionType.SOROBAN_AUTHORIZED_FUNCTION_TYPE_CREATE_CONTRACT_HOST_FN:
            self._create_contract_args(p + "createContractHostFn.", fn.create_contract)
        else:
            self._create_contract_args(p + "createContractV2HostFn.", fn.create_contract)

    def _invocation(self, p: str, invocation: SorobanAuthorizedInvocation) -> None:
        self._authorized_function(p + "function.", invocation.function)
        self._list(p + "subInvocations", invocation.sub_invocations, self._invocation)

    def _auth_entry(self, p: str, entry: SorobanAuthorizationEntry) -> None:
        self._credentials(p + "credentials.", entry.credentials)
        self._invocation(p + "rootInvocation.", entry.root_invocation)


def to_txrep(envelope: TransactionEnvelope, options: Optional[TxRepOptions] = None) -> str:
    """
    Render an envelope as TxRep text.

    Args:
        envelope: v0, v1 or fee-bump envelope
        options: Rendering options; annotations are off by default

    Returns:
        TxRep text without a trailing newline
    """
    return TxRepEncoder(options).encode(envelope)
