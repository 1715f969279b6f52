"""
Stellar network configuration.

A network is identified by its passphrase; the network id mixed into every
transaction hash is SHA-256 of that passphrase, so a signature made for one
network never verifies on another.
"""

from __future__ import annotations
from typing import ClassVar

from pydantic import BaseModel, Field, field_validator

from ..codec.hashes import sha256_bytes

PUBLIC_NETWORK_PASSPHRASE = "Public Global Stellar Network ; September 2015"
TESTNET_NETWORK_PASSPHRASE = "Test SDF Network ; September 2015"
FUTURENET_NETWORK_PASSPHRASE = "Test SDF Future Network ; October 2022"
STANDALONE_NETWORK_PASSPHRASE = "Standalone Network ; February 2017"


class Network(BaseModel):
    """
    A Stellar network.

    Use the presets ``Network.PUBLIC``, ``Network.TESTNET``,
    ``Network.FUTURENET`` and ``Network.STANDALONE`` or construct one with a
    custom passphrase.
    """
    passphrase: str = Field(..., alias="networkPassphrase", description="Network passphrase")

    model_config = {"populate_by_name": True, "frozen": True}

    PUBLIC: ClassVar[Network]
    TESTNET: ClassVar[Network]
    FUTURENET: ClassVar[Network]
    STANDALONE: ClassVar[Network]

    @field_validator("passphrase")
    @classmethod
    def validate_passphrase(cls, v: str) -> str:
        if not v:
            raise ValueError("Network passphrase must not be empty")
        return v

    @property
    def network_id(self) -> bytes:
        """SHA-256 of the passphrase."""
        return sha256_bytes(self.passphrase.encode("utf-8"))

    def __str__(self) -> str:
        return self.passphrase


Network.PUBLIC = Network(passphrase=PUBLIC_NETWORK_PASSPHRASE)
Network.TESTNET = Network(passphrase=TESTNET_NETWORK_PASSPHRASE)
Network.FUTURENET = Network(passphrase=FUTURENET_NETWORK_PASSPHRASE)
Network.STANDALONE = Network(passphrase=STANDALONE_NETWORK_PASSPHRASE)
