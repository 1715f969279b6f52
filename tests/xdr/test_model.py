"""
Typed XDR model tests: value validation and whole-value codec behaviour.
"""

import pytest

from stellar_client.runtime.errors import (
    InvalidDiscriminant, StrKeyError, TrailingData, XdrDecodeError, XdrRangeError,
)
from stellar_client.xdr import (
    AccountId, Asset, AssetType, ChangeTrust, ChangeTrustAsset, ClaimPredicate, Claimant,
    CreateClaimableBalance, LedgerBounds, ManageData, Memo, MemoType, MuxedAccount, Operation,
    OperationType, Preconditions, PreconditionsV2, Price, SignerKey, SignerKeyType, TimeBounds,
    TrustLineAsset,
)

ISSUER = "GBBM6BKZPEHWYO3E3YKREDPQXMS4VK35YLNU7NFBRI26RAN7GI5POFBB"
MUXED = "MA7QYNF7SOWQ3GLR2BGMZEHXAVIRZA4KVWLTJJFC7MGXUA74P7UJVAAAAAAAAAAAAAJLK"


class TestMemo:
    """Test memo variants."""

    def test_text_limit(self):
        """Test the 28-byte limit counts UTF-8 bytes, not characters."""
        assert Memo.text("a" * 28).text_value == "a" * 28
        with pytest.raises(XdrRangeError):
            Memo.text("a" * 29)
        with pytest.raises(XdrRangeError):
            Memo.text("é" * 15)

    def test_variants_round_trip(self):
        for memo in (Memo.none(), Memo.text("rent"), Memo.id(2 ** 64 - 1),
                     Memo.hash(b"\x01" * 32), Memo.return_hash(b"\x02" * 32)):
            assert Memo.from_xdr_bytes(memo.to_xdr_bytes()) == memo

    def test_hash_size(self):
        with pytest.raises(XdrRangeError):
            Memo.hash(b"\x01" * 31)

    def test_id_range(self):
        with pytest.raises(XdrRangeError):
            Memo.id(-1)

    def test_text_wire_format(self):
        assert Memo.text("hi").to_xdr_bytes() == b"\x00\x00\x00\x01\x00\x00\x00\x02hi\x00\x00"
        assert Memo.none().type == MemoType.MEMO_NONE


class TestAssets:
    """Test asset validation and canonical forms."""

    def test_native(self):
        assert Asset.native().canonical == "XLM"
        assert Asset.native().to_xdr_bytes() == b"\x00\x00\x00\x00"

    def test_code_length_selects_type(self):
        assert Asset.credit("USD", ISSUER).type == AssetType.ASSET_TYPE_CREDIT_ALPHANUM4
        assert Asset.credit("USDCOIN", ISSUER).type == AssetType.ASSET_TYPE_CREDIT_ALPHANUM12

    @pytest.mark.parametrize("code", ["", "ABCDEFGHIJKLM", "US D", "€UR"])
    def test_invalid_codes(self, code):
        with pytest.raises(XdrRangeError):
            Asset.credit(code, ISSUER)

    def test_canonical_round_trip(self):
        asset = Asset.from_canonical(f"USD:{ISSUER}")
        assert asset.canonical == f"USD:{ISSUER}"
        assert Asset.from_canonical("XLM") == Asset.native()
        assert Asset.from_xdr_bytes(asset.to_xdr_bytes()) == asset

    def test_bad_canonical(self):
        with pytest.raises(XdrRangeError):
            Asset.from_canonical("USD")

    def test_bad_issuer(self):
        with pytest.raises(StrKeyError):
            Asset.credit("USD", "GNOTANADDRESS")

    def test_pool_assets_need_one_arm(self):
        with pytest.raises(XdrRangeError):
            ChangeTrustAsset()
        with pytest.raises(XdrRangeError):
            TrustLineAsset(asset=Asset.native(), liquidity_pool_id=b"\x00" * 32)


class TestAccounts:
    """Test account and signer key types."""

    def test_muxed_round_trip(self):
        account = MuxedAccount.from_address(MUXED)
        assert account.is_muxed
        assert account.id == 0x8000000000000000
        assert account.address == MUXED
        assert MuxedAccount.from_xdr_bytes(account.to_xdr_bytes()) == account

    def test_plain_account(self):
        account = MuxedAccount.from_address(ISSUER)
        assert not account.is_muxed
        assert account.account_id == AccountId.from_address(ISSUER)
        assert len(account.to_xdr_bytes()) == 36

    def test_rejects_other_kinds(self):
        with pytest.raises(StrKeyError):
            MuxedAccount.from_address("SAB5556L5AN5KSR5WF7UOEFDCIODEWEO7H2UR4S5R62DFTQOGLKOVZDY")

    def test_signer_key_addresses(self):
        """Test G, T, X and P addresses map onto signer key variants."""
        assert SignerKey.from_address(ISSUER).type == SignerKeyType.SIGNER_KEY_TYPE_ED25519
        pre_auth = SignerKey.pre_auth_tx(b"\x01" * 32)
        assert pre_auth.address.startswith("T")
        assert SignerKey.from_address(pre_auth.address) == pre_auth
        hash_x = SignerKey.hash_x(b"\x02" * 32)
        assert SignerKey.from_address(hash_x.address) == hash_x
        payload = SignerKey.signed_payload(AccountId.from_address(ISSUER).key, b"\x01\x02\x03")
        assert payload.address.startswith("P")
        assert SignerKey.from_xdr_bytes(payload.to_xdr_bytes()) == payload


class TestPreconditions:
    """Test precondition variants."""

    def test_extra_signer_limit(self):
        signers = tuple(SignerKey.hash_x(bytes([i]) * 32) for i in range(3))
        with pytest.raises(XdrRangeError, match="extra signers"):
            PreconditionsV2(extra_signers=signers)

    def test_zero_time_bounds_preserved(self):
        """Test that PRECOND_TIME with 0/0 survives a round trip instead of collapsing to NONE."""
        cond = Preconditions.time(TimeBounds(0, 0))
        decoded = Preconditions.from_xdr_bytes(cond.to_xdr_bytes())
        assert decoded == cond
        assert decoded.time_bounds == TimeBounds(0, 0)

    def test_v2_round_trip(self):
        cond = Preconditions.from_v2(PreconditionsV2(
            time_bounds=TimeBounds(1, 2),
            ledger_bounds=LedgerBounds(3, 4),
            min_seq_num=5,
            min_seq_age=6,
            min_seq_ledger_gap=7,
            extra_signers=(SignerKey.from_address(ISSUER),),
        ))
        assert Preconditions.from_xdr_bytes(cond.to_xdr_bytes()) == cond

    def test_negative_time(self):
        with pytest.raises(XdrRangeError):
            TimeBounds(-1, 0)


class TestOperations:
    """Test operation bodies."""

    def test_price_range(self):
        with pytest.raises(XdrRangeError):
            Price(2 ** 31, 1)

    def test_manage_data_limits(self):
        with pytest.raises(XdrRangeError):
            ManageData("n" * 65, b"v")
        with pytest.raises(XdrRangeError):
            ManageData("name", b"v" * 65)
        deleted = ManageData("name")
        assert Operation.from_xdr_bytes(Operation(deleted).to_xdr_bytes()).body == deleted

    def test_operation_with_source(self):
        op = Operation(ChangeTrust(ChangeTrustAsset(asset=Asset.credit("USD", ISSUER))),
                       MuxedAccount.from_address(MUXED))
        assert op.type == OperationType.CHANGE_TRUST
        assert Operation.from_xdr_bytes(op.to_xdr_bytes()) == op

    def test_nested_predicates(self):
        predicate = ClaimPredicate.and_(
            ClaimPredicate.not_(ClaimPredicate.before_relative_time(60)),
            ClaimPredicate.or_(ClaimPredicate.unconditional(), ClaimPredicate.before_absolute_time(10)),
        )
        op = Operation(CreateClaimableBalance(
            Asset.native(), 1, (Claimant(AccountId.from_address(ISSUER), predicate),)))
        assert Operation.from_xdr_bytes(op.to_xdr_bytes()) == op

    def test_body_type_required(self):
        with pytest.raises(XdrRangeError):
            Operation("payment")

    def test_unknown_operation_type(self):
        data = b"\x00\x00\x00\x00" + b"\x00\x00\x03\xe7"
        with pytest.raises(InvalidDiscriminant):
            Operation.from_xdr_bytes(data)


class TestWholeValueCodec:
    """Test strict byte and base64 decoding."""

    def test_trailing_bytes(self):
        with pytest.raises(TrailingData):
            Asset.from_xdr_bytes(b"\x00\x00\x00\x00\x00")

    def test_invalid_base64(self):
        with pytest.raises(XdrDecodeError):
            Asset.from_xdr_base64("not base64!")

    def test_base64_round_trip(self):
        asset = Asset.credit("USDCOIN", ISSUER)
        assert Asset.from_xdr_base64(asset.to_xdr_base64()) == asset
