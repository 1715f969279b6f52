"""
Shared fixtures: deterministic key pairs, networks and a ready builder.
"""

import pytest

from stellar_client import KeyPair, Network, TransactionBuilder
from stellar_client.xdr import Asset, Payment

from helpers.factories import mk_keypair


@pytest.fixture
def fake_keypair() -> KeyPair:
    """Provide a deterministic key pair for testing."""
    return mk_keypair(1)


@pytest.fixture
def other_keypair() -> KeyPair:
    """A second deterministic key pair, distinct from fake_keypair."""
    return mk_keypair(2)


@pytest.fixture
def testnet() -> Network:
    return Network.TESTNET


@pytest.fixture
def payment_builder(fake_keypair, other_keypair) -> TransactionBuilder:
    """Builder holding one native payment from fake_keypair to other_keypair."""
    builder = TransactionBuilder(fake_keypair, sequence_number=2916609211498497)
    builder.add_operation(Payment(other_keypair.xdr_muxed_account(), Asset.native(), 10_000_000))
    return builder
