"""
Key pair and Ed25519 tests.
"""

import pytest

from stellar_client import KeyPair
from stellar_client.crypto import Ed25519PrivateKey, Ed25519PublicKey
from stellar_client.runtime.errors import Ed25519Error, SignatureError, StrKeyError

PAYLOAD_SIGNER_SEED = bytes.fromhex("1123740522f11bfef6b3671f51e159ccf589ccf8965262dd5f97d1721d383dd4")


class TestKeyPairConstruction:
    """Test key pair import and export."""

    def test_secret_round_trip(self, fake_keypair):
        restored = KeyPair.from_secret(fake_keypair.secret_seed)
        assert restored == fake_keypair
        assert restored.account_id == fake_keypair.account_id
        assert restored.raw_secret_key == (1).to_bytes(32, "big")

    def test_account_id_format(self, fake_keypair):
        assert fake_keypair.account_id.startswith("G")
        assert len(fake_keypair.account_id) == 56
        assert fake_keypair.secret_seed.startswith("S")

    def test_from_address_is_verify_only(self, fake_keypair):
        """Test that a key pair built from an address cannot sign."""
        public = KeyPair.from_address(fake_keypair.account_id)
        assert not public.can_sign()
        assert public != fake_keypair
        assert public.raw_public_key == fake_keypair.raw_public_key
        with pytest.raises(SignatureError):
            public.sign(b"data")
        with pytest.raises(SignatureError):
            _ = public.secret_seed

    def test_from_public_key(self, fake_keypair):
        public = KeyPair.from_public_key(fake_keypair.raw_public_key)
        assert public.account_id == fake_keypair.account_id

    def test_random_keys_differ(self):
        assert KeyPair.random().account_id != KeyPair.random().account_id

    def test_bad_secret(self):
        with pytest.raises(StrKeyError):
            KeyPair.from_secret("GBBM6BKZPEHWYO3E3YKREDPQXMS4VK35YLNU7NFBRI26RAN7GI5POFBB")

    def test_bad_seed_length(self):
        with pytest.raises(Ed25519Error):
            KeyPair.from_raw_seed(b"\x00" * 31)

    def test_xdr_accounts(self, fake_keypair):
        assert fake_keypair.xdr_account_id().address == fake_keypair.account_id
        muxed = fake_keypair.xdr_muxed_account(7)
        assert muxed.is_muxed
        assert muxed.address.startswith("M")
        assert muxed.account_id.address == fake_keypair.account_id


class TestSigning:
    """Test Ed25519 signatures and hints."""

    def test_sign_and_verify(self, fake_keypair, other_keypair):
        data = b"\x01" * 32
        signature = fake_keypair.sign(data)
        assert len(signature) == 64
        assert fake_keypair.verify(data, signature)
        assert not fake_keypair.verify(b"\x02" * 32, signature)
        assert not other_keypair.verify(data, signature)

    def test_signatures_are_deterministic(self, fake_keypair):
        assert fake_keypair.sign(b"message") == fake_keypair.sign(b"message")

    def test_verify_rejects_garbage(self, fake_keypair):
        assert not fake_keypair.verify(b"data", b"\x00" * 10)

    def test_signature_hint(self, fake_keypair):
        assert fake_keypair.signature_hint() == fake_keypair.raw_public_key[-4:]

    def test_decorated_signature(self, fake_keypair):
        decorated = fake_keypair.sign_decorated(b"hash")
        assert decorated.hint == fake_keypair.signature_hint()
        assert fake_keypair.verify(b"hash", decorated.signature)

    def test_signed_payload_hint(self):
        """Test the hint is the key hint XORed with the payload tail."""
        keypair = KeyPair.from_raw_seed(PAYLOAD_SIGNER_SEED)
        assert keypair.signature_hint() == bytes([254, 66, 4, 55])

        decorated = keypair.sign_payload_decorated(bytes([1, 2, 3, 4, 5]))
        assert decorated.hint == bytes([252, 65, 0, 50])
        assert keypair.verify(bytes([1, 2, 3, 4, 5]), decorated.signature)

    def test_signed_payload_hint_short_payload(self):
        keypair = KeyPair.from_raw_seed(PAYLOAD_SIGNER_SEED)
        decorated = keypair.sign_payload_decorated(bytes([1, 2, 3]))
        assert decorated.hint == bytes([255, 64, 7, 55])


class TestEd25519Keys:
    """Test the raw key wrappers."""

    def test_public_key_size(self):
        with pytest.raises(Ed25519Error):
            Ed25519PublicKey(b"\x00" * 33)

    def test_private_key_derives_public(self):
        private = Ed25519PrivateKey((3).to_bytes(32, "big"))
        public = private.public_key()
        message = b"stellar"
        assert public.verify(private.sign(message), message)
        assert Ed25519PublicKey.from_hex(public.to_hex()) == public
