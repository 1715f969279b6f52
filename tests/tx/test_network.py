"""
Network configuration tests.
"""

import hashlib

import pytest
from pydantic import ValidationError

from stellar_client import Network, PUBLIC_NETWORK_PASSPHRASE, TESTNET_NETWORK_PASSPHRASE


class TestNetwork:
    """Test network presets and ids."""

    def test_presets(self):
        assert Network.PUBLIC.passphrase == PUBLIC_NETWORK_PASSPHRASE
        assert Network.TESTNET.passphrase == TESTNET_NETWORK_PASSPHRASE
        assert str(Network.FUTURENET) == "Test SDF Future Network ; October 2022"
        assert Network.STANDALONE.passphrase == "Standalone Network ; February 2017"

    def test_network_id(self):
        expected = hashlib.sha256(PUBLIC_NETWORK_PASSPHRASE.encode("utf-8")).digest()
        assert Network.PUBLIC.network_id == expected
        assert Network.PUBLIC.network_id.hex() == (
            "7ac33997544e3175d266bd022439b22cdb16508c01163f26e5cb2a3e1045a979")

    def test_custom_network_by_alias(self):
        """Test the camelCase alias accepted from JSON configuration."""
        network = Network.model_validate({"networkPassphrase": "Private ; 2024"})
        assert network == Network(passphrase="Private ; 2024")
        assert network != Network.TESTNET

    def test_empty_passphrase(self):
        with pytest.raises(ValidationError):
            Network(passphrase="")

    def test_frozen(self):
        with pytest.raises(ValidationError):
            Network.TESTNET.passphrase = "other"
