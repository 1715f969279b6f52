"""
Ledger keys and Soroban resource declarations.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple

from ..codec.reader import XdrReader
from ..codec.writer import XdrWriter, INT64_MAX, INT64_MIN, UINT32_MAX, check_range
from ..runtime.errors import UnknownDiscriminant, XdrRangeError
from .base import XdrType, read_enum
from .enums import ConfigSettingID, ContractDataDurability, LedgerEntryType
from .keys import AccountId, ClaimableBalanceId, check_hash
from .asset import TrustLineAsset
from .scval import SCAddress, SCVal

MAX_DATA_NAME_LENGTH = 64


@dataclass(frozen=True)
class LedgerKey(XdrType):
    """
    Key of a ledger entry.

    Only the fields of the selected ``type`` are set:

    - ACCOUNT: account_id
    - TRUSTLINE: account_id, asset
    - OFFER: seller_id, offer_id
    - DATA: account_id, data_name
    - CLAIMABLE_BALANCE: balance_id
    - LIQUIDITY_POOL: liquidity_pool_id
    - CONTRACT_DATA: contract, key, durability
    - CONTRACT_CODE: hash
    - CONFIG_SETTING: config_setting_id
    - TTL: key_hash
    """

    type: LedgerEntryType
    account_id: Optional[AccountId] = None
    asset: Optional[TrustLineAsset] = None
    seller_id: Optional[AccountId] = None
    offer_id: Optional[int] = None
    data_name: Optional[str] = None
    balance_id: Optional[ClaimableBalanceId] = None
    liquidity_pool_id: Optional[bytes] = None
    contract: Optional[SCAddress] = None
    key: Optional[SCVal] = None
    durability: Optional[ContractDataDurability] = None
    hash: Optional[bytes] = None
    config_setting_id: Optional[ConfigSettingID] = None
    key_hash: Optional[bytes] = None

    def __post_init__(self):
        object.__setattr__(self, "type", LedgerEntryType(self.type))
        t = self.type
        required = _REQUIRED_FIELDS[t]
        for name in required:
            if getattr(self, name) is None:
                raise XdrRangeError(f"{t.name} ledger key requires {name}")
        if t == LedgerEntryType.OFFER:
            check_range("offer_id", self.offer_id, INT64_MIN, INT64_MAX)
        elif t == LedgerEntryType.DATA:
            if len(self.data_name.encode("utf-8")) > MAX_DATA_NAME_LENGTH:
                raise XdrRangeError(f"data name must be at most {MAX_DATA_NAME_LENGTH} bytes")
        elif t == LedgerEntryType.LIQUIDITY_POOL:
            object.__setattr__(self, "liquidity_pool_id", check_hash("pool id", self.liquidity_pool_id))
        elif t == LedgerEntryType.CONTRACT_DATA:
            object.__setattr__(self, "durability", ContractDataDurability(self.durability))
        elif t == LedgerEntryType.CONTRACT_CODE:
            object.__setattr__(self, "hash", check_hash("contract code hash", self.hash))
        elif t == LedgerEntryType.CONFIG_SETTING:
            object.__setattr__(self, "config_setting_id", ConfigSettingID(self.config_setting_id))
        elif t == LedgerEntryType.TTL:
            object.__setattr__(self, "key_hash", check_hash("ttl key hash", self.key_hash))

    @classmethod
    def account(cls, account_id: AccountId) -> LedgerKey:
        return cls(LedgerEntryType.ACCOUNT, account_id=account_id)

    @classmethod
    def trustline(cls, account_id: AccountId, asset: TrustLineAsset) -> LedgerKey:
        return cls(LedgerEntryType.TRUSTLINE, account_id=account_id, asset=asset)

    @classmethod
    def offer(cls, seller_id: AccountId, offer_id: int) -> LedgerKey:
        return cls(LedgerEntryType.OFFER, seller_id=seller_id, offer_id=offer_id)

    @classmethod
    def data(cls, account_id: AccountId, data_name: str) -> LedgerKey:
        return cls(LedgerEntryType.DATA, account_id=account_id, data_name=data_name)

    @classmethod
    def claimable_balance(cls, balance_id: ClaimableBalanceId) -> LedgerKey:
        return cls(LedgerEntryType.CLAIMABLE_BALANCE, balance_id=balance_id)

    @classmethod
    def liquidity_pool(cls, pool_id: bytes) -> LedgerKey:
        return cls(LedgerEntryType.LIQUIDITY_POOL, liquidity_pool_id=pool_id)

    @classmethod
    def contract_data(cls, contract: SCAddress, key: SCVal,
                      durability: ContractDataDurability = ContractDataDurability.PERSISTENT) -> LedgerKey:
        return cls(LedgerEntryType.CONTRACT_DATA, contract=contract, key=key, durability=durability)

    @classmethod
    def contract_code(cls, code_hash: bytes) -> LedgerKey:
        return cls(LedgerEntryType.CONTRACT_CODE, hash=code_hash)

    @classmethod
    def config_setting(cls, setting_id: ConfigSettingID) -> LedgerKey:
        return cls(LedgerEntryType.CONFIG_SETTING, config_setting_id=setting_id)

    @classmethod
    def ttl(cls, key_hash: bytes) -> LedgerKey:
        return cls(LedgerEntryType.TTL, key_hash=key_hash)

    def pack(self, w: XdrWriter) -> None:
        w.enum(self.type)
        t = self.type
        if t == LedgerEntryType.ACCOUNT:
            self.account_id.pack(w)
        elif t == LedgerEntryType.TRUSTLINE:
            self.account_id.pack(w)
            self.asset.pack(w)
        elif t == LedgerEntryType.OFFER:
            self.seller_id.pack(w)
            w.int64(self.offer_id)
        elif t == LedgerEntryType.DATA:
            self.account_id.pack(w)
            w.string(self.data_name, MAX_DATA_NAME_LENGTH)
        elif t == LedgerEntryType.CLAIMABLE_BALANCE:
            self.balance_id.pack(w)
        elif t == LedgerEntryType.LIQUIDITY_POOL:
            w.opaque_fixed(self.liquidity_pool_id, 32)
        elif t == LedgerEntryType.CONTRACT_DATA:
            self.contract.pack(w)
            self.key.pack(w)
            w.enum(self.durability)
        elif t == LedgerEntryType.CONTRACT_CODE:
            w.opaque_fixed(self.hash, 32)
        elif t == LedgerEntryType.CONFIG_SETTING:
            w.enum(self.config_setting_id)
        else:
            w.opaque_fixed(self.key_hash, 32)

    @classmethod
    def unpack(cls, r: XdrReader) -> LedgerKey:
        t = read_enum(r, LedgerEntryType)
        if t == LedgerEntryType.ACCOUNT:
            return cls.account(AccountId.unpack(r))
        if t == LedgerEntryType.TRUSTLINE:
            account_id = AccountId.unpack(r)
            return cls.trustline(account_id, TrustLineAsset.unpack(r))
        if t == LedgerEntryType.OFFER:
            seller_id = AccountId.unpack(r)
            return cls.offer(seller_id, r.int64())
        if t == LedgerEntryType.DATA:
            account_id = AccountId.unpack(r)
            return cls.data(account_id, r.string(MAX_DATA_NAME_LENGTH).decode("utf-8", errors="replace"))
        if t == LedgerEntryType.CLAIMABLE_BALANCE:
            return cls.claimable_balance(ClaimableBalanceId.unpack(r))
        if t == LedgerEntryType.LIQUIDITY_POOL:
            return cls.liquidity_pool(r.opaque_fixed(32))
        if t == LedgerEntryType.CONTRACT_DATA:
            contract = SCAddress.unpack(r)
            key = SCVal.unpack(r)
            return cls.contract_data(contract, key, read_enum(r, ContractDataDurability))
        if t == LedgerEntryType.CONTRACT_CODE:
            return cls.contract_code(r.opaque_fixed(32))
        if t == LedgerEntryType.CONFIG_SETTING:
            return cls.config_setting(read_enum(r, ConfigSettingID))
        return cls.ttl(r.opaque_fixed(32))


_REQUIRED_FIELDS = {
    LedgerEntryType.ACCOUNT: ("account_id",),
    LedgerEntryType.TRUSTLINE: ("account_id", "asset"),
    LedgerEntryType.OFFER: ("seller_id", "offer_id"),
    LedgerEntryType.DATA: ("account_id", "data_name"),
    LedgerEntryType.CLAIMABLE_BALANCE: ("balance_id",),
    LedgerEntryType.LIQUIDITY_POOL: ("liquidity_pool_id",),
    LedgerEntryType.CONTRACT_DATA: ("contract", "key", "durability"),
    LedgerEntryType.CONTRACT_CODE: ("hash",),
    LedgerEntryType.CONFIG_SETTING: ("config_setting_id",),
    LedgerEntryType.TTL: ("key_hash",),
}


@dataclass(frozen=True)
class LedgerFootprint(XdrType):
    read_only: Tuple[LedgerKey, ...] = ()
    read_write: Tuple[LedgerKey, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "read_only", tuple(self.read_only))
        object.__setattr__(self, "read_write", tuple(self.read_write))

    def pack(self, w: XdrWriter) -> None:
        w.array(self.read_only, lambda k: k.pack(w))
        w.array(self.read_write, lambda k: k.pack(w))

    @classmethod
    def unpack(cls, r: XdrReader) -> LedgerFootprint:
        read_only = tuple(r.array(lambda: LedgerKey.unpack(r)))
        return cls(read_only, tuple(r.array(lambda: LedgerKey.unpack(r))))


@dataclass(frozen=True)
class SorobanResources(XdrType):
    """Declared footprint and resource limits of a Soroban transaction."""

    footprint: LedgerFootprint
    instructions: int = 0
    disk_read_bytes: int = 0
    write_bytes: int = 0

    def __post_init__(self):
        check_range("instructions", self.instructions, 0, UINT32_MAX)
        check_range("disk_read_bytes", self.disk_read_bytes, 0, UINT32_MAX)
        check_range("write_bytes", self.write_bytes, 0, UINT32_MAX)

    def pack(self, w: XdrWriter) -> None:
        self.footprint.pack(w)
        w.uint32(self.instructions)
        w.uint32(self.disk_read_bytes)
        w.uint32(self.write_bytes)

    @classmethod
    def unpack(cls, r: XdrReader) -> SorobanResources:
        footprint = LedgerFootprint.unpack(r)
        return cls(footprint, r.uint32(), r.uint32(), r.uint32())


@dataclass(frozen=True)
class SorobanTransactionData(XdrType):
    """
    Soroban extension of a v1 transaction.

    ``archived_soroban_entries`` (indices into the read-write footprint) is
    only encoded when not None, selecting extension arm 1.
    """

    resources: SorobanResources
    resource_fee: int = 0
    archived_soroban_entries: Optional[Tuple[int, ...]] = None

    def __post_init__(self):
        check_range("resource_fee", self.resource_fee, INT64_MIN, INT64_MAX)
        if self.archived_soroban_entries is not None:
            entries = tuple(self.archived_soroban_entries)
            for index in entries:
                check_range("archived entry index", index, 0, UINT32_MAX)
            object.__setattr__(self, "archived_soroban_entries", entries)

    def pack(self, w: XdrWriter) -> None:
        if self.archived_soroban_entries is None:
            w.int32(0)
        else:
            w.int32(1)
            w.array(self.archived_soroban_entries, w.uint32)
        self.resources.pack(w)
        w.int64(self.resource_fee)

    @classmethod
    def unpack(cls, r: XdrReader) -> SorobanTransactionData:
        ext = r.int32()
        archived = None
        if ext == 1:
            archived = tuple(r.array(r.uint32))
        elif ext != 0:
            raise UnknownDiscriminant("SorobanTransactionDataExt", ext)
        resources = SorobanResources.unpack(r)
        return cls(resources, r.int64(), archived)
