"""
Stellar Python SDK - transaction client

This package builds, signs and transcodes Stellar transactions: the XDR wire
codec, StrKey addresses and Ed25519 keys, the typed transaction model, the
transaction and fee-bump builders, and the TxRep (SEP-0011) text format.
"""

# Typed XDR model
from .xdr import *  # noqa: F401,F403

# Errors
from .runtime.errors import *  # noqa: F401,F403

# Primitive codec
from .codec import XdrReader, XdrWriter, sha256_bytes, sha256_hex

# Keys and addresses
from .crypto import KeyPair, strkey

# Builders and networks
from .tx import (
    BASE_FEE, TIMEOUT_INFINITE,
    FeeBumpTransactionBuilder, Network, TransactionBuilder, to_muxed_account,
    FUTURENET_NETWORK_PASSPHRASE, PUBLIC_NETWORK_PASSPHRASE,
    STANDALONE_NETWORK_PASSPHRASE, TESTNET_NETWORK_PASSPHRASE,
)

# TxRep
from .txrep import TxRepOptions, from_txrep, to_txrep, txrep_from_xdr_base64, xdr_base64_from_txrep

__version__ = "1.0.0"
__all__ = [
    # Keys and addresses
    "KeyPair",
    "strkey",

    # Model
    "Asset",
    "Memo",
    "MuxedAccount",
    "Operation",
    "Preconditions",
    "PreconditionsV2",
    "SCVal",
    "TimeBounds",
    "from_stroops",
    "to_stroops",
    "Transaction",
    "TransactionEnvelope",
    "FeeBumpTransaction",

    # Codec
    "XdrReader",
    "XdrWriter",
    "sha256_bytes",
    "sha256_hex",

    # Builders
    "BASE_FEE",
    "TIMEOUT_INFINITE",
    "FeeBumpTransactionBuilder",
    "Network",
    "TransactionBuilder",
    "to_muxed_account",
    "FUTURENET_NETWORK_PASSPHRASE",
    "PUBLIC_NETWORK_PASSPHRASE",
    "STANDALONE_NETWORK_PASSPHRASE",
    "TESTNET_NETWORK_PASSPHRASE",

    # TxRep
    "TxRepOptions",
    "from_txrep",
    "to_txrep",
    "txrep_from_xdr_base64",
    "xdr_base64_from_txrep",

    # Errors
    "StellarError",
    "TxRepError",
    "XdrDecodeError",
    "StrKeyError",
]
