"""
Names and value helpers shared by the TxRep encoder and decoder.
"""

from __future__ import annotations
import json
from typing import Dict

from ..xdr.enums import OperationType

# Operation body field group, e.g. ``body.paymentOp.amount``
OPERATION_PREFIXES: Dict[OperationType, str] = {
    OperationType.CREATE_ACCOUNT: "createAccountOp",
    OperationType.PAYMENT: "paymentOp",
    OperationType.PATH_PAYMENT_STRICT_RECEIVE: "pathPaymentStrictReceiveOp",
    OperationType.MANAGE_SELL_OFFER: "manageSellOfferOp",
    OperationType.CREATE_PASSIVE_SELL_OFFER: "createPassiveSellOfferOp",
    OperationType.SET_OPTIONS: "setOptionsOp",
    OperationType.CHANGE_TRUST: "changeTrustOp",
    OperationType.ALLOW_TRUST: "allowTrustOp",
    OperationType.ACCOUNT_MERGE: "accountMergeOp",
    OperationType.INFLATION: "inflationOp",
    OperationType.MANAGE_DATA: "manageDataOp",
    OperationType.BUMP_SEQUENCE: "bumpSequenceOp",
    OperationType.MANAGE_BUY_OFFER: "manageBuyOfferOp",
    OperationType.PATH_PAYMENT_STRICT_SEND: "pathPaymentStrictSendOp",
    OperationType.CREATE_CLAIMABLE_BALANCE: "createClaimableBalanceOp",
    OperationType.CLAIM_CLAIMABLE_BALANCE: "claimClaimableBalanceOp",
    OperationType.BEGIN_SPONSORING_FUTURE_RESERVES: "beginSponsoringFutureReservesOp",
    OperationType.END_SPONSORING_FUTURE_RESERVES: "endSponsoringFutureReservesOp",
    OperationType.REVOKE_SPONSORSHIP: "revokeSponsorshipOp",
    OperationType.CLAWBACK: "clawbackOp",
    OperationType.CLAWBACK_CLAIMABLE_BALANCE: "clawbackClaimableBalanceOp",
    OperationType.SET_TRUST_LINE_FLAGS: "setTrustLineFlagsOp",
    OperationType.LIQUIDITY_POOL_DEPOSIT: "liquidityPoolDepositOp",
    OperationType.LIQUIDITY_POOL_WITHDRAW: "liquidityPoolWithdrawOp",
    OperationType.INVOKE_HOST_FUNCTION: "invokeHostFunctionOp",
    OperationType.EXTEND_FOOTPRINT_TTL: "extendFootprintTTLOp",
    OperationType.RESTORE_FOOTPRINT: "restoreFootprintOp",
}

TRUE = "true"
FALSE = "false"


def quote_text(text: str) -> str:
    """JSON string literal."""
    return json.dumps(text)


def quote_bytes(data: bytes) -> str:
    """
    JSON string literal of raw bytes.

    Bytes that are not valid UTF-8 survive as lone surrogate escapes, so
    ``unquote_bytes(quote_bytes(b)) == b`` for any input.
    """
    return json.dumps(data.decode("utf-8", errors="surrogateescape"))


def unquote_text(value: str) -> str:
    """
    Decode a JSON string literal; an unquoted value is returned as is.

    Raises:
        ValueError: If the literal is malformed
    """
    if not value.startswith('"'):
        return value
    decoded = json.loads(value)
    if not isinstance(decoded, str):
        raise ValueError(f"expected a string literal, got {value!r}")
    return decoded


def unquote_bytes(value: str) -> bytes:
    return unquote_text(value).encode("utf-8", errors="surrogateescape")


def split_annotation(value: str) -> str:
    """
    Drop a trailing ``(...)`` annotation.

    A ``(`` inside a leading JSON string literal is part of the value.
    """
    start = 0
    if value.startswith('"'):
        i = 1
        while i < len(value):
            ch = value[i]
            if ch == "\\":
                i += 2
                continue
            if ch == '"':
                break
            i += 1
        start = i + 1
    cut = value.find("(", start)
    if cut < 0:
        return value
    return value[:cut].rstrip()
