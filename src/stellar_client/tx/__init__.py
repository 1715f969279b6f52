"""
Transaction building and signing.

Key components:
- builder.py: TransactionBuilder, fee and precondition assembly
- fee_bump.py: FeeBumpTransactionBuilder
- network.py: Network passphrases and network ids
"""

from ..xdr.transaction import MAX_OPERATIONS, MAX_SIGNATURES, TransactionEnvelope
from .builder import BASE_FEE, TIMEOUT_INFINITE, TransactionBuilder, to_muxed_account
from .fee_bump import FeeBumpTransactionBuilder
from .network import (
    Network,
    FUTURENET_NETWORK_PASSPHRASE,
    PUBLIC_NETWORK_PASSPHRASE,
    STANDALONE_NETWORK_PASSPHRASE,
    TESTNET_NETWORK_PASSPHRASE,
)

__all__ = [
    "BASE_FEE",
    "FUTURENET_NETWORK_PASSPHRASE",
    "FeeBumpTransactionBuilder",
    "MAX_OPERATIONS",
    "MAX_SIGNATURES",
    "Network",
    "PUBLIC_NETWORK_PASSPHRASE",
    "STANDALONE_NETWORK_PASSPHRASE",
    "TESTNET_NETWORK_PASSPHRASE",
    "TIMEOUT_INFINITE",
    "TransactionBuilder",
    "TransactionEnvelope",
    "to_muxed_account",
]
