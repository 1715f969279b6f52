"""
Contract value and authorization entry codec tests.
"""

import pytest

from stellar_client.codec.hashes import sha256_bytes
from stellar_client.crypto.keypair import KeyPair
from stellar_client.runtime.errors import SignatureError, UnknownDiscriminant, XdrDecodeError, XdrRangeError
from stellar_client.tx.network import Network
from stellar_client.xdr import (
    HashIDPreimageSorobanAuthorization, InvokeContractArgs, SCAddress, SCError, SCErrorCode, SCErrorType, SCMapEntry, SCVal,
    SorobanAddressCredentials, SorobanAuthorizationEntry, SorobanAuthorizedFunction,
    SorobanAuthorizedInvocation, SorobanCredentials, decode_auth_entries,
    decode_auth_entries_base64, encode_auth_entries, encode_auth_entries_base64,
)
from stellar_client.xdr.scval import i128_to_parts, parts_to_i128, u256_to_parts

from helpers.parity import assert_hex_equal

CONTRACT = SCAddress.contract(b"\x0c" * 32)


def _round_trip(value: SCVal) -> SCVal:
    decoded = SCVal.from_xdr_bytes(value.to_xdr_bytes())
    assert decoded == value
    return decoded


class TestBigIntegers:
    """Test 128 and 256-bit range boundaries."""

    @pytest.mark.parametrize("factory,lo,hi", [
        (SCVal.u128, 0, 2 ** 128 - 1),
        (SCVal.i128, -(2 ** 127), 2 ** 127 - 1),
        (SCVal.u256, 0, 2 ** 256 - 1),
        (SCVal.i256, -(2 ** 255), 2 ** 255 - 1),
    ], ids=["u128", "i128", "u256", "i256"])
    def test_boundaries(self, factory, lo, hi):
        assert _round_trip(factory(lo)).value == lo
        assert _round_trip(factory(hi)).value == hi
        with pytest.raises(XdrRangeError):
            factory(hi + 1)
        with pytest.raises(XdrRangeError):
            factory(lo - 1)

    def test_u128_wire_layout(self):
        """Test the high word precedes the low word."""
        data = SCVal.u128(2 ** 64 + 2).to_xdr_bytes()
        assert_hex_equal(data, "00000009" "0000000000000001" "0000000000000002", "u128")

    def test_negative_i128_parts(self):
        hi, lo = i128_to_parts(-1)
        assert (hi, lo) == (-1, 2 ** 64 - 1)
        assert parts_to_i128(hi, lo) == -1

    def test_u256_parts(self):
        assert u256_to_parts(1 << 192) == (1, 0, 0, 0)

    def test_bool_is_not_an_integer(self):
        with pytest.raises(XdrRangeError):
            SCVal.u32(True)


class TestValues:
    """Test the remaining contract value arms."""

    def test_symbol_limit(self):
        SCVal.symbol("s" * 32)
        with pytest.raises(XdrRangeError):
            SCVal.symbol("s" * 33)

    @pytest.mark.parametrize("name", ["caf\u00e9", "a (b)", "with space", "dash-ed", "colon:"])
    def test_symbol_charset(self, name):
        """Test symbols are limited to [A-Za-z0-9_]."""
        with pytest.raises(XdrRangeError):
            SCVal.symbol(name)
        with pytest.raises(XdrRangeError):
            InvokeContractArgs(CONTRACT, name)

    def test_symbol_round_trip(self):
        assert _round_trip(SCVal.symbol("Under_score_09")).value == "Under_score_09"
        assert _round_trip(SCVal.symbol("")).value == ""

    def test_non_symbol_bytes_on_the_wire(self):
        """Test decoding rejects symbol bytes outside the charset instead of replacing them."""
        sym = b"\x00\x00\x00\x0f" + b"\x00\x00\x00\x03" + b"a b\x00"
        with pytest.raises(XdrRangeError):
            SCVal.from_xdr_bytes(sym)
        name = b"\x00\x00\x00\x02" + b"\xc3\xa9\x00\x00"
        args = CONTRACT.to_xdr_bytes() + name + b"\x00\x00\x00\x00"
        with pytest.raises(XdrRangeError):
            InvokeContractArgs.from_xdr_bytes(args)

    def test_map_keeps_insertion_order(self):
        entries = [SCMapEntry(SCVal.symbol(k), SCVal.u32(i)) for i, k in enumerate("zya")]
        decoded = _round_trip(SCVal.map(entries))
        assert [e.key.value for e in decoded.value] == ["z", "y", "a"]

    def test_absent_vec_differs_from_empty(self):
        assert SCVal.vec(None) != SCVal.vec([])
        assert _round_trip(SCVal.vec(None)).value is None
        assert _round_trip(SCVal.vec([])).value == ()

    def test_nested_vec(self):
        inner = SCVal.vec([SCVal.i64(-1), SCVal.string("s"), SCVal.from_bytes(b"\x00\x01")])
        _round_trip(SCVal.vec([inner, SCVal.void(), SCVal.from_bool(False)]))

    def test_addresses(self, fake_keypair):
        for address in (fake_keypair.account_id, CONTRACT.address):
            value = _round_trip(SCVal.address(address))
            assert value.value.address == address

    def test_errors(self):
        _round_trip(SCVal.error(SCError(SCErrorType.SCE_CONTRACT, contract_code=404)))
        _round_trip(SCVal.error(SCError(SCErrorType.SCE_BUDGET, code=SCErrorCode.SCEC_EXCEEDED_LIMIT)))
        with pytest.raises(XdrRangeError):
            SCError(SCErrorType.SCE_CONTRACT, code=SCErrorCode.SCEC_INVALID_INPUT)
        with pytest.raises(XdrRangeError):
            SCError(SCErrorType.SCE_AUTH)

    def test_unknown_type(self):
        with pytest.raises(UnknownDiscriminant):
            SCVal.from_xdr_bytes(b"\x00\x00\x00\x7f")

    def test_non_ascii_symbol(self):
        data = b"\x00\x00\x00\x0f" + b"\x00\x00\x00\x02" + b"\xc3\xa9\x00\x00"
        with pytest.raises(XdrRangeError):
            SCVal.from_xdr_bytes(data)


class TestAuthorizationEntries:
    """Test the standalone authorization entry list format."""

    def _entries(self, signer):
        leaf = SorobanAuthorizedInvocation(SorobanAuthorizedFunction.contract(
            InvokeContractArgs(CONTRACT, "approve", (SCVal.i128(10),))))
        middle = SorobanAuthorizedInvocation(
            SorobanAuthorizedFunction.contract(InvokeContractArgs(CONTRACT, "route")), (leaf, leaf))
        root = SorobanAuthorizedInvocation(
            SorobanAuthorizedFunction.contract(InvokeContractArgs(CONTRACT, "swap")), (middle,))
        address = SorobanAddressCredentials(SCAddress.account(signer.account_id), 1, 1000, SCVal.vec([]))
        return [
            SorobanAuthorizationEntry(SorobanCredentials.from_address(address), root),
            SorobanAuthorizationEntry(SorobanCredentials.source_account(), leaf),
        ]

    def test_round_trip(self, fake_keypair):
        entries = self._entries(fake_keypair)
        data = encode_auth_entries(entries)
        assert data[:4] == b"\x00\x00\x00\x02"
        assert decode_auth_entries(data) == entries
        assert decode_auth_entries_base64(encode_auth_entries_base64(entries)) == entries

    def test_recursion_depth_preserved(self, fake_keypair):
        root = decode_auth_entries(encode_auth_entries(self._entries(fake_keypair)))[0].root_invocation
        middle = root.sub_invocations[0]
        assert len(middle.sub_invocations) == 2
        assert middle.sub_invocations[1].function.contract_fn.function_name == "approve"

    def test_empty_list(self):
        assert encode_auth_entries([]) == b"\x00\x00\x00\x00"
        assert decode_auth_entries(b"\x00\x00\x00\x00") == []

    def test_trailing_bytes(self, fake_keypair):
        with pytest.raises(XdrDecodeError):
            decode_auth_entries(encode_auth_entries(self._entries(fake_keypair)) + b"\x00" * 4)

    def test_credentials_shape(self):
        with pytest.raises(XdrRangeError):
            SorobanCredentials(SorobanCredentials.source_account().type, SorobanAddressCredentials(
                CONTRACT, 0, 0, SCVal.void()))


class TestAuthorizationSigning:
    """Test signing address credentials of an authorization entry."""

    def _entry(self, signer):
        root = SorobanAuthorizedInvocation(SorobanAuthorizedFunction.contract(
            InvokeContractArgs(CONTRACT, "transfer", (SCVal.i128(25),))))
        address = SorobanAddressCredentials(SCAddress.account(signer.account_id), 77, 1000, SCVal.void())
        return SorobanAuthorizationEntry(SorobanCredentials.from_address(address), root)

    def _signature(self, entry):
        (value,) = entry.credentials.address.signature.value
        fields = {e.key.value: e.val.value for e in value.value}
        return fields["public_key"], fields["signature"]

    def test_preimage_layout(self, fake_keypair, testnet):
        entry = self._entry(fake_keypair)
        data = entry.signature_preimage(testnet).to_xdr_bytes()
        assert data[:4] == b"\x00\x00\x00\x09"
        assert data[4:36] == testnet.network_id
        assert data[36:44] == (77).to_bytes(8, "big")
        assert data[44:48] == (1000).to_bytes(4, "big")
        assert data[48:] == entry.root_invocation.to_xdr_bytes()
        assert HashIDPreimageSorobanAuthorization.from_xdr_bytes(data) == entry.signature_preimage(testnet)

    def test_sign_verifies_on_network(self, fake_keypair, testnet):
        signed = self._entry(fake_keypair).sign(fake_keypair, testnet)
        public_key, signature = self._signature(signed)
        assert public_key == fake_keypair.raw_public_key
        assert len(signature) == 64
        assert fake_keypair.verify(signed.payload(testnet), signature)
        assert not fake_keypair.verify(signed.payload(Network.PUBLIC), signature)

    def test_signature_map_keys(self, fake_keypair, testnet):
        signed = self._entry(fake_keypair).sign(fake_keypair, testnet)
        (value,) = signed.credentials.address.signature.value
        assert [e.key for e in value.value] == [SCVal.symbol("public_key"), SCVal.symbol("signature")]

    def test_signed_entry_survives_encoding(self, fake_keypair, testnet):
        signed = self._entry(fake_keypair).sign(fake_keypair, testnet)
        assert SorobanAuthorizationEntry.from_xdr_bytes(signed.to_xdr_bytes()) == signed

    def test_expiration_override(self, fake_keypair, testnet):
        entry = self._entry(fake_keypair)
        signed = entry.sign(fake_keypair, testnet, signature_expiration_ledger=5000)
        assert signed.credentials.address.signature_expiration_ledger == 5000
        assert entry.credentials.address.signature_expiration_ledger == 1000
        _, signature = self._signature(signed)
        assert fake_keypair.verify(signed.payload(testnet), signature)
        assert not fake_keypair.verify(entry.payload(testnet), signature)

    def test_payload_is_preimage_hash(self, fake_keypair):
        entry = self._entry(fake_keypair)
        passphrase = "Test SDF Network ; September 2015"
        assert entry.payload(passphrase) == sha256_bytes(entry.signature_preimage(Network.TESTNET).to_xdr_bytes())

    def test_source_account_credentials(self, fake_keypair, testnet):
        entry = SorobanAuthorizationEntry(SorobanCredentials.source_account(), self._entry(fake_keypair).root_invocation)
        with pytest.raises(SignatureError):
            entry.sign(fake_keypair, testnet)

    def test_verify_only_keypair(self, fake_keypair, testnet):
        with pytest.raises(SignatureError):
            self._entry(fake_keypair).sign(KeyPair.from_address(fake_keypair.account_id), testnet)
