"""
Typed Stellar XDR model.

Every type is an immutable value implementing ``pack`` / ``unpack`` over the
primitive codec, plus whole-value byte and base64 conversion.

Key components:
- keys.py: AccountId, MuxedAccount, SignerKey, ClaimableBalanceId
- asset.py: Asset, AssetCode, ChangeTrustAsset, TrustLineAsset, Price
- amount.py: to_stroops, from_stroops
- memo.py / preconditions.py: Memo, TimeBounds, LedgerBounds, Preconditions
- scval.py: SCVal, SCAddress, SCError, ContractExecutable
- ledger_key.py: LedgerKey, SorobanTransactionData
- auth.py: HostFunction, SorobanAuthorizationEntry
- operations.py: operation bodies and Operation
- transaction.py: Transaction, TransactionV0, FeeBumpTransaction, TransactionEnvelope
"""

from .amount import STROOPS_PER_UNIT, from_stroops, to_stroops
from .asset import (
    Asset, AssetCode, ChangeTrustAsset, LiquidityPoolParameters, Price, TrustLineAsset,
    LIQUIDITY_POOL_FEE_V18, NATIVE_ASSET_CODE,
)
from .auth import (
    ContractIDPreimage, CreateContractArgs, HashIDPreimageSorobanAuthorization, HostFunction, InvokeContractArgs,
    SorobanAddressCredentials, SorobanAuthorizationEntry, SorobanAuthorizedFunction,
    SorobanAuthorizedInvocation, SorobanCredentials,
    decode_auth_entries, decode_auth_entries_base64, encode_auth_entries, encode_auth_entries_base64,
)
from .base import XdrType, decode_base64
from .enums import *  # noqa: F401,F403
from .keys import AccountId, ClaimableBalanceId, MuxedAccount, SignerKey
from .ledger_key import LedgerFootprint, LedgerKey, SorobanResources, SorobanTransactionData
from .memo import Memo, MAX_MEMO_TEXT_LENGTH
from .operations import (
    OPERATION_BODIES,
    AccountMerge, AllowTrust, BeginSponsoringFutureReserves, BumpSequence, ChangeTrust,
    ClaimClaimableBalance, ClaimPredicate, Claimant, Clawback, ClawbackClaimableBalance,
    CreateAccount, CreateClaimableBalance, CreatePassiveSellOffer, EndSponsoringFutureReserves,
    ExtendFootprintTTL, Inflation, InvokeHostFunction, LiquidityPoolDeposit, LiquidityPoolWithdraw,
    ManageBuyOffer, ManageData, ManageSellOffer, Operation, OperationBody, PathPaymentStrictReceive,
    PathPaymentStrictSend, Payment, RestoreFootprint, RevokeSponsorship, SetOptions,
    SetTrustLineFlags, Signer, lookup_body,
)
from .preconditions import LedgerBounds, Preconditions, PreconditionsV2, TimeBounds, MAX_EXTRA_SIGNERS
from .scval import ContractExecutable, SCAddress, SCContractInstance, SCError, SCMapEntry, SCVal
from .transaction import (
    DecoratedSignature, FeeBumpTransaction, Transaction, TransactionEnvelope, TransactionV0,
    MAX_OPERATIONS, MAX_SIGNATURES, network_id_of,
)
