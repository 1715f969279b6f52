"""
Base class and helpers shared by every XDR value type.

Concrete types are frozen dataclasses implementing ``pack`` and ``unpack``;
this module adds whole-value byte and base64 conversion on top.
"""

from __future__ import annotations
import base64
import binascii
from abc import ABC, abstractmethod
from enum import IntEnum
from typing import TYPE_CHECKING, Type, TypeVar, Union

from ..codec.hashes import sha256_bytes
from ..codec.reader import XdrReader
from ..codec.writer import XdrWriter
from ..runtime.errors import UnknownDiscriminant, XdrDecodeError

if TYPE_CHECKING:
    from ..tx.network import Network

T = TypeVar("T", bound="XdrType")
E = TypeVar("E", bound=IntEnum)


class XdrType(ABC):
    """
    A value with an XDR wire form.
    """

    @abstractmethod
    def pack(self, w: XdrWriter) -> None:
        """Append the encoding of this value to the writer."""

    @classmethod
    @abstractmethod
    def unpack(cls: Type[T], r: XdrReader) -> T:
        """Decode one value at the reader's cursor."""

    def to_xdr_bytes(self) -> bytes:
        """
        Encode this value.

        Returns:
            XDR bytes
        """
        w = XdrWriter()
        self.pack(w)
        return w.to_bytes()

    @classmethod
    def from_xdr_bytes(cls: Type[T], data: bytes) -> T:
        """
        Decode a value that spans the whole buffer.

        Raises:
            XdrDecodeError: On malformed input or trailing bytes
        """
        r = XdrReader(data)
        value = cls.unpack(r)
        r.ensure_consumed()
        return value

    def to_xdr_base64(self) -> str:
        return base64.b64encode(self.to_xdr_bytes()).decode("ascii")

    @classmethod
    def from_xdr_base64(cls: Type[T], data: str) -> T:
        return cls.from_xdr_bytes(decode_base64(data))


def decode_base64(data: str) -> bytes:
    """
    Strict base64 decoding.

    Raises:
        XdrDecodeError: If data is not valid base64
    """
    try:
        return base64.b64decode(data.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        raise XdrDecodeError(f"Invalid base64: {e}", cause=e) from e


def read_enum(r: XdrReader, enum_cls: Type[E]) -> E:
    """
    Read a discriminant and map it onto an enum.

    Raises:
        UnknownDiscriminant: If the value is not a member of enum_cls
    """
    value = r.enum()
    try:
        return enum_cls(value)
    except ValueError:
        raise UnknownDiscriminant(enum_cls.__name__, value) from None


def network_id_of(network: Union[Network, str]) -> bytes:
    """Network id of a Network or a raw passphrase: SHA-256 of the passphrase."""
    if isinstance(network, str):
        return sha256_bytes(network.encode("utf-8"))
    return network.network_id
