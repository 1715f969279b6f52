"""
Soroban host functions and authorization entries.

Authorization entry lists are also exchanged on their own (outside a
transaction) as a length-prefixed XDR array; see ``encode_auth_entries`` and
``decode_auth_entries``.
"""

from __future__ import annotations
import base64
import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Iterable, List, Optional, Tuple, Union

from ..codec.hashes import sha256_bytes
from ..codec.reader import XdrReader
from ..codec.writer import XdrWriter, INT64_MAX, INT64_MIN, UINT32_MAX, check_range
from ..runtime.errors import InvalidDiscriminant, SignatureError, XdrRangeError
from .asset import Asset
from .base import XdrType, decode_base64, network_id_of, read_enum
from .enums import (
    ContractIDPreimageType, EnvelopeType, HostFunctionType, SorobanAuthorizedFunctionType, SorobanCredentialsType,
)
from .keys import check_hash
from .scval import MAX_SYMBOL_LENGTH, ContractExecutable, SCAddress, SCMapEntry, SCVal, check_symbol, decode_symbol

if TYPE_CHECKING:
    from ..crypto.keypair import KeyPair
    from ..tx.network import Network

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InvokeContractArgs(XdrType):
    contract_address: SCAddress
    function_name: str
    args: Tuple[SCVal, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "args", tuple(self.args))
        check_symbol("function name", self.function_name)

    def pack(self, w: XdrWriter) -> None:
        self.contract_address.pack(w)
        w.string(self.function_name, MAX_SYMBOL_LENGTH)
        w.array(self.args, lambda v: v.pack(w))

    @classmethod
    def unpack(cls, r: XdrReader) -> InvokeContractArgs:
        address = SCAddress.unpack(r)
        name = decode_symbol("function name", r.string(MAX_SYMBOL_LENGTH))
        return cls(address, name, tuple(r.array(lambda: SCVal.unpack(r))))


@dataclass(frozen=True)
class ContractIDPreimage(XdrType):
    """Source of a new contract id: deployer address and salt, or an asset."""

    type: ContractIDPreimageType
    address: Optional[SCAddress] = None
    salt: Optional[bytes] = None
    asset: Optional[Asset] = None

    def __post_init__(self):
        object.__setattr__(self, "type", ContractIDPreimageType(self.type))
        if self.type == ContractIDPreimageType.CONTRACT_ID_PREIMAGE_FROM_ADDRESS:
            if self.address is None or self.asset is not None:
                raise XdrRangeError("FROM_ADDRESS preimage requires address and salt only")
            object.__setattr__(self, "salt", check_hash("salt", self.salt))
        elif self.asset is None or self.address is not None or self.salt is not None:
            raise XdrRangeError("FROM_ASSET preimage requires asset only")

    @classmethod
    def from_address(cls, address: SCAddress, salt: bytes) -> ContractIDPreimage:
        return cls(ContractIDPreimageType.CONTRACT_ID_PREIMAGE_FROM_ADDRESS, address=address, salt=salt)

    @classmethod
    def from_asset(cls, asset: Asset) -> ContractIDPreimage:
        return cls(ContractIDPreimageType.CONTRACT_ID_PREIMAGE_FROM_ASSET, asset=asset)

    def pack(self, w: XdrWriter) -> None:
        w.enum(self.type)
        if self.type == ContractIDPreimageType.CONTRACT_ID_PREIMAGE_FROM_ADDRESS:
            self.address.pack(w)
            w.opaque_fixed(self.salt, 32)
        else:
            self.asset.pack(w)

    @classmethod
    def unpack(cls, r: XdrReader) -> ContractIDPreimage:
        t = read_enum(r, ContractIDPreimageType)
        if t == ContractIDPreimageType.CONTRACT_ID_PREIMAGE_FROM_ADDRESS:
            address = SCAddress.unpack(r)
            return cls.from_address(address, r.opaque_fixed(32))
        return cls.from_asset(Asset.unpack(r))


@dataclass(frozen=True)
class CreateContractArgs(XdrType):
    """
    Contract creation arguments.

    ``constructor_args`` is None for the original CREATE_CONTRACT form and a
    tuple (possibly empty) for the V2 form.
    """

    contract_id_preimage: ContractIDPreimage
    executable: ContractExecutable
    constructor_args: Optional[Tuple[SCVal, ...]] = None

    def __post_init__(self):
        if self.constructor_args is not None:
            object.__setattr__(self, "constructor_args", tuple(self.constructor_args))

    @property
    def is_v2(self) -> bool:
        return self.constructor_args is not None

    def pack(self, w: XdrWriter) -> None:
        self.contract_id_preimage.pack(w)
        self.executable.pack(w)
        if self.constructor_args is not None:
            w.array(self.constructor_args, lambda v: v.pack(w))

    @classmethod
    def unpack(cls, r: XdrReader) -> CreateContractArgs:
        return cls.unpack_v1(r)

    @classmethod
    def unpack_v1(cls, r: XdrReader) -> CreateContractArgs:
        preimage = ContractIDPreimage.unpack(r)
        return cls(preimage, ContractExecutable.unpack(r))

    @classmethod
    def unpack_v2(cls, r: XdrReader) -> CreateContractArgs:
        preimage = ContractIDPreimage.unpack(r)
        executable = ContractExecutable.unpack(r)
        return cls(preimage, executable, tuple(r.array(lambda: SCVal.unpack(r))))


@dataclass(frozen=True)
class HostFunction(XdrType):
    """
    Host function invoked by INVOKE_HOST_FUNCTION.

    - INVOKE_CONTRACT: invoke_contract
    - CREATE_CONTRACT / CREATE_CONTRACT_V2: create_contract
    - UPLOAD_CONTRACT_WASM: wasm
    """

    type: HostFunctionType
    invoke_contract: Optional[InvokeContractArgs] = None
    create_contract: Optional[CreateContractArgs] = None
    wasm: Optional[bytes] = None

    def __post_init__(self):
        object.__setattr__(self, "type", HostFunctionType(self.type))
        t = self.type
        if t == HostFunctionType.HOST_FUNCTION_TYPE_INVOKE_CONTRACT:
            ok = self.invoke_contract is not None
        elif t == HostFunctionType.HOST_FUNCTION_TYPE_CREATE_CONTRACT:
            ok = self.create_contract is not None and not self.create_contract.is_v2
        elif t == HostFunctionType.HOST_FUNCTION_TYPE_CREATE_CONTRACT_V2:
            ok = self.create_contract is not None and self.create_contract.is_v2
        else:
            ok = isinstance(self.wasm, (bytes, bytearray))
            if ok:
                object.__setattr__(self, "wasm", bytes(self.wasm))
        if not ok:
            raise XdrRangeError(f"Missing or mismatched arguments for {t.name}")

    @classmethod
    def invoke(cls, args: InvokeContractArgs) -> HostFunction:
        return cls(HostFunctionType.HOST_FUNCTION_TYPE_INVOKE_CONTRACT, invoke_contract=args)

    @classmethod
    def create(cls, args: CreateContractArgs) -> HostFunction:
        t = (HostFunctionType.HOST_FUNCTION_TYPE_CREATE_CONTRACT_V2 if args.is_v2
             else HostFunctionType.HOST_FUNCTION_TYPE_CREATE_CONTRACT)
        return cls(t, create_contract=args)

    @classmethod
    def upload_wasm(cls, wasm: bytes) -> HostFunction:
        return cls(HostFunctionType.HOST_FUNCTION_TYPE_UPLOAD_CONTRACT_WASM, wasm=wasm)

    def pack(self, w: XdrWriter) -> None:
        w.enum(self.type)
        if self.type == HostFunctionType.HOST_FUNCTION_TYPE_INVOKE_CONTRACT:
            self.invoke_contract.pack(w)
        elif self.type == HostFunctionType.HOST_FUNCTION_TYPE_UPLOAD_CONTRACT_WASM:
            w.opaque_var(self.wasm)
        else:
            self.create_contract.pack(w)

    @classmethod
    def unpack(cls, r: XdrReader) -> HostFunction:
        t = read_enum(r, HostFunctionType)
        if t == HostFunctionType.HOST_FUNCTION_TYPE_INVOKE_CONTRACT:
            return cls.invoke(InvokeContractArgs.unpack(r))
        if t == HostFunctionType.HOST_FUNCTION_TYPE_CREATE_CONTRACT:
            return cls.create(CreateContractArgs.unpack_v1(r))
        if t == HostFunctionType.HOST_FUNCTION_TYPE_CREATE_CONTRACT_V2:
            return cls.create(CreateContractArgs.unpack_v2(r))
        return cls.upload_wasm(r.opaque_var())


# =============================================================================
# Authorization
# =============================================================================

@dataclass(frozen=True)
class SorobanAddressCredentials(XdrType):
    address: SCAddress
    nonce: int
    signature_expiration_ledger: int
    signature: SCVal

    def __post_init__(self):
        check_range("nonce", self.nonce, INT64_MIN, INT64_MAX)
        check_range("signature_expiration_ledger", self.signature_expiration_ledger, 0, UINT32_MAX)

    def pack(self, w: XdrWriter) -> None:
        self.address.pack(w)
        w.int64(self.nonce)
        w.uint32(self.signature_expiration_ledger)
        self.signature.pack(w)

    @classmethod
    def unpack(cls, r: XdrReader) -> SorobanAddressCredentials:
        address = SCAddress.unpack(r)
        nonce = r.int64()
        expiration = r.uint32()
        return cls(address, nonce, expiration, SCVal.unpack(r))


@dataclass(frozen=True)
class SorobanCredentials(XdrType):
    """Transaction source account credentials, or address credentials."""

    type: SorobanCredentialsType = SorobanCredentialsType.SOROBAN_CREDENTIALS_SOURCE_ACCOUNT
    address: Optional[SorobanAddressCredentials] = None

    def __post_init__(self):
        object.__setattr__(self, "type", SorobanCredentialsType(self.type))
        if (self.type == SorobanCredentialsType.SOROBAN_CREDENTIALS_ADDRESS) != (self.address is not None):
            raise XdrRangeError("address credentials are required iff type is SOROBAN_CREDENTIALS_ADDRESS")

    @classmethod
    def source_account(cls) -> SorobanCredentials:
        return cls()

    @classmethod
    def from_address(cls, credentials: SorobanAddressCredentials) -> SorobanCredentials:
        return cls(SorobanCredentialsType.SOROBAN_CREDENTIALS_ADDRESS, credentials)

    def pack(self, w: XdrWriter) -> None:
        w.enum(self.type)
        if self.address is not None:
            self.address.pack(w)

    @classmethod
    def unpack(cls, r: XdrReader) -> SorobanCredentials:
        t = read_enum(r, SorobanCredentialsType)
        if t == SorobanCredentialsType.SOROBAN_CREDENTIALS_ADDRESS:
            return cls.from_address(SorobanAddressCredentials.unpack(r))
        return cls()


@dataclass(frozen=True)
class SorobanAuthorizedFunction(XdrType):
    type: SorobanAuthorizedFunctionType
    contract_fn: Optional[InvokeContractArgs] = None
    create_contract: Optional[CreateContractArgs] = None

    def __post_init__(self):
        object.__setattr__(self, "type", SorobanAuthorizedFunctionType(self.type))
        t = self.type
        if t == SorobanAuthorizedFunctionType.SOROBAN_AUTHORIZED_FUNCTION_TYPE_CONTRACT_FN:
            ok = self.contract_fn is not None
        elif t == SorobanAuthorizedFunctionType.SOROBAN_AUTHORIZED_FUNCTION_TYPE_CREATE_CONTRACT_HOST_FN:
            ok = self.create_contract is not None and not self.create_contract.is_v2
        else:
            ok = self.create_contract is not None and self.create_contract.is_v2
        if not ok:
            raise XdrRangeError(f"Missing or mismatched arguments for {t.name}")

    @classmethod
    def contract(cls, args: InvokeContractArgs) -> SorobanAuthorizedFunction:
        return cls(SorobanAuthorizedFunctionType.SOROBAN_AUTHORIZED_FUNCTION_TYPE_CONTRACT_FN, contract_fn=args)

    @classmethod
    def create(cls, args: CreateContractArgs) -> SorobanAuthorizedFunction:
        t = (SorobanAuthorizedFunctionType.SOROBAN_AUTHORIZED_FUNCTION_TYPE_CREATE_CONTRACT_V2_HOST_FN
             if args.is_v2 else SorobanAuthorizedFunctionType.SOROBAN_AUTHORIZED_FUNCTION_TYPE_CREATE_CONTRACT_HOST_FN)
        return cls(t, create_contract=args)

    def pack(self, w: XdrWriter) -> None:
        w.enum(self.type)
        if self.contract_fn is not None:
            self.contract_fn.pack(w)
        else:
            self.create_contract.pack(w)

    @classmethod
    def unpack(cls, r: XdrReader) -> SorobanAuthorizedFunction:
        t = read_enum(r, SorobanAuthorizedFunctionType)
        if t == SorobanAuthorizedFunctionType.SOROBAN_AUTHORIZED_FUNCTION_TYPE_CONTRACT_FN:
            return cls.contract(InvokeContractArgs.unpack(r))
        if t == SorobanAuthorizedFunctionType.SOROBAN_AUTHORIZED_FUNCTION_TYPE_CREATE_CONTRACT_HOST_FN:
            return cls.create(CreateContractArgs.unpack_v1(r))
        return cls.create(CreateContractArgs.unpack_v2(r))


@dataclass(frozen=True)
class SorobanAuthorizedInvocation(XdrType):
    function: SorobanAuthorizedFunction
    sub_invocations: Tuple[SorobanAuthorizedInvocation, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "sub_invocations", tuple(self.sub_invocations))

    def pack(self, w: XdrWriter) -> None:
        self.function.pack(w)
        w.array(self.sub_invocations, lambda v: v.pack(w))

    @classmethod
    def unpack(cls, r: XdrReader) -> SorobanAuthorizedInvocation:
        function = SorobanAuthorizedFunction.unpack(r)
        return cls(function, tuple(r.array(lambda: SorobanAuthorizedInvocation.unpack(r))))


@dataclass(frozen=True)
class HashIDPreimageSorobanAuthorization(XdrType):
    """
    The ENVELOPE_TYPE_SOROBAN_AUTHORIZATION arm of HashIDPreimage.

    Its SHA-256 is what an address signs to authorize an invocation.
    """

    network_id: bytes
    nonce: int
    signature_expiration_ledger: int
    invocation: SorobanAuthorizedInvocation

    def __post_init__(self):
        object.__setattr__(self, "network_id", check_hash("network_id", self.network_id))
        check_range("nonce", self.nonce, INT64_MIN, INT64_MAX)
        check_range("signature_expiration_ledger", self.signature_expiration_ledger, 0, UINT32_MAX)

    def pack(self, w: XdrWriter) -> None:
        w.enum(EnvelopeType.ENVELOPE_TYPE_SOROBAN_AUTHORIZATION)
        w.opaque_fixed(self.network_id, 32)
        w.int64(self.nonce)
        w.uint32(self.signature_expiration_ledger)
        self.invocation.pack(w)

    @classmethod
    def unpack(cls, r: XdrReader) -> HashIDPreimageSorobanAuthorization:
        t = read_enum(r, EnvelopeType)
        if t != EnvelopeType.ENVELOPE_TYPE_SOROBAN_AUTHORIZATION:
            raise InvalidDiscriminant("HashIDPreimageSorobanAuthorization", int(t))
        network_id = r.opaque_fixed(32)
        nonce = r.int64()
        expiration = r.uint32()
        return cls(network_id, nonce, expiration, SorobanAuthorizedInvocation.unpack(r))


@dataclass(frozen=True)
class SorobanAuthorizationEntry(XdrType):
    credentials: SorobanCredentials
    root_invocation: SorobanAuthorizedInvocation

    def _address_credentials(self) -> SorobanAddressCredentials:
        if self.credentials.address is None:
            raise SignatureError("source account credentials are authorized by the transaction signature")
        return self.credentials.address

    def signature_preimage(self, network: Union[Network, str],
                           signature_expiration_ledger: Optional[int] = None) -> HashIDPreimageSorobanAuthorization:
        creds = self._address_credentials()
        if signature_expiration_ledger is None:
            signature_expiration_ledger = creds.signature_expiration_ledger
        return HashIDPreimageSorobanAuthorization(
            network_id_of(network), creds.nonce, signature_expiration_ledger, self.root_invocation,
        )

    def payload(self, network: Union[Network, str]) -> bytes:
        """SHA-256 of the signature preimage for network, at the current expiration ledger."""
        return sha256_bytes(self.signature_preimage(network).to_xdr_bytes())

    def sign(self, keypair: KeyPair, network: Union[Network, str],
             signature_expiration_ledger: Optional[int] = None) -> SorobanAuthorizationEntry:
        """
        Sign this entry for an address.

        The signature is stored as a vector holding one map with the
        ``public_key`` and ``signature`` bytes, replacing any previous one.

        Args:
            keypair: Key pair holding a secret key
            network: Network or network passphrase
            signature_expiration_ledger: Replaces the expiration in the credentials

        Returns:
            New entry with the signature in its address credentials

        Raises:
            SignatureError: If the credentials are the transaction source account,
                or keypair cannot sign
        """
        creds = self._address_credentials()
        preimage = self.signature_preimage(network, signature_expiration_ledger)
        signature = keypair.sign(sha256_bytes(preimage.to_xdr_bytes()))
        value = SCVal.vec([SCVal.map([
            SCMapEntry(SCVal.symbol("public_key"), SCVal.from_bytes(keypair.raw_public_key)),
            SCMapEntry(SCVal.symbol("signature"), SCVal.from_bytes(signature)),
        ])])
        signed = replace(creds, signature_expiration_ledger=preimage.signature_expiration_ledger, signature=value)
        logger.debug("Signed authorization entry for %s, nonce %d", keypair.account_id, creds.nonce)
        return replace(self, credentials=SorobanCredentials.from_address(signed))

    def pack(self, w: XdrWriter) -> None:
        self.credentials.pack(w)
        self.root_invocation.pack(w)

    @classmethod
    def unpack(cls, r: XdrReader) -> SorobanAuthorizationEntry:
        credentials = SorobanCredentials.unpack(r)
        return cls(credentials, SorobanAuthorizedInvocation.unpack(r))


def encode_auth_entries(entries: Iterable[SorobanAuthorizationEntry]) -> bytes:
    """
    Encode a standalone list of authorization entries.

    Returns:
        uint32 count followed by each entry
    """
    w = XdrWriter()
    w.array(list(entries), lambda e: e.pack(w))
    return w.to_bytes()


def decode_auth_entries(data: bytes) -> List[SorobanAuthorizationEntry]:
    """
    Decode a standalone list of authorization entries.

    Raises:
        XdrDecodeError: On malformed input or trailing bytes
    """
    r = XdrReader(data)
    entries = r.array(lambda: SorobanAuthorizationEntry.unpack(r))
    r.ensure_consumed()
    return entries


def encode_auth_entries_base64(entries: Iterable[SorobanAuthorizationEntry]) -> str:
    return base64.b64encode(encode_auth_entries(entries)).decode("ascii")


def decode_auth_entries_base64(data: str) -> List[SorobanAuthorizationEntry]:
    return decode_auth_entries(decode_base64(data))
