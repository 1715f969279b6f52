"""
Stellar Error Model

This module provides the error handling framework for the Stellar Python SDK.
Every failure raised by the codec, the crypto layer, the transaction builder
and the TxRep transcoder is a subclass of StellarError carrying an ErrorCode.
"""

from __future__ import annotations
from typing import Optional, Dict, Any, List
from enum import IntEnum


class ErrorCode(IntEnum):
    """Stellar SDK error codes."""

    # Success
    OK = 0

    # General errors (1-99)
    UNKNOWN = 1
    INTERNAL = 2

    # XDR decoding errors (100-199)
    DECODE_ERROR = 100
    UNEXPECTED_EOF = 101
    INVALID_DISCRIMINANT = 102
    UNKNOWN_DISCRIMINANT = 103
    INVALID_BOOLEAN = 104
    INVALID_PADDING = 105
    TRAILING_DATA = 106

    # Range errors (200-299)
    RANGE_ERROR = 200

    # StrKey errors (300-399)
    STRKEY_ERROR = 300
    CHECKSUM_MISMATCH = 301
    INVALID_VERSION_BYTE = 302

    # Crypto errors (400-499)
    INVALID_KEY = 400
    INVALID_SIGNATURE = 401

    # Builder errors (500-599)
    INVALID_TRANSACTION = 500

    # TxRep errors (600-699)
    TXREP_ERROR = 600
    MISSING_FIELD = 601
    LENGTH_MISMATCH = 602
    UNKNOWN_VARIANT = 603


class StellarError(Exception):
    """
    Base class for all Stellar SDK errors.

    Provides structured error information: a code, a message, optional
    details and the underlying cause.
    """

    def __init__(self, message: str, code: ErrorCode = ErrorCode.UNKNOWN,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        """
        Initialize a Stellar error.

        Args:
            message: Error message
            code: Error code
            details: Additional error details
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        """String representation of the error."""
        parts = [f"[{self.code.name}] {self.message}"]
        if self.details:
            parts.append(f"Details: {self.details}")
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        result = {
            "code": self.code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.cause:
            result["cause"] = str(self.cause)
        return result


# =============================================================================
# XDR decoding
# =============================================================================

class XdrDecodeError(StellarError):
    """Binary decoding errors. Fatal to the current decode call."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.DECODE_ERROR,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, code, details, cause)


class UnexpectedEof(XdrDecodeError):
    """The buffer ended in the middle of a value."""

    def __init__(self, needed: int, remaining: int):
        super().__init__(
            f"Unexpected end of input: need {needed} bytes, {remaining} remaining",
            ErrorCode.UNEXPECTED_EOF,
            {"needed": needed, "remaining": remaining},
        )
        self.needed = needed
        self.remaining = remaining


class InvalidDiscriminant(XdrDecodeError):
    """A union or enum discriminant is not valid at this position."""

    def __init__(self, type_name: str, value: int, code: ErrorCode = ErrorCode.INVALID_DISCRIMINANT):
        super().__init__(
            f"Invalid discriminant {value} for {type_name}",
            code,
            {"type": type_name, "value": value},
        )
        self.type_name = type_name
        self.value = value


class UnknownDiscriminant(InvalidDiscriminant):
    """A discriminant value that is not a member of its enum."""

    def __init__(self, type_name: str, value: int):
        super().__init__(type_name, value, ErrorCode.UNKNOWN_DISCRIMINANT)


class InvalidBoolean(XdrDecodeError):
    """A boolean was encoded as something other than 0 or 1."""

    def __init__(self, value: int):
        super().__init__(f"Invalid boolean value {value}", ErrorCode.INVALID_BOOLEAN, {"value": value})
        self.value = value


class InvalidPadding(XdrDecodeError):
    """Non-zero padding bytes after opaque data."""

    def __init__(self, padding: bytes):
        super().__init__(f"Non-zero padding bytes: {padding.hex()}", ErrorCode.INVALID_PADDING)
        self.padding = padding


class TrailingData(XdrDecodeError):
    """Bytes remained after a complete value was decoded."""

    def __init__(self, remaining: int):
        super().__init__(f"{remaining} unread bytes after value", ErrorCode.TRAILING_DATA,
                         {"remaining": remaining})
        self.remaining = remaining


# =============================================================================
# Range
# =============================================================================

class XdrRangeError(StellarError, ValueError):
    """A value does not fit its protocol type (integer width, length limit, code charset)."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.RANGE_ERROR, details)


# =============================================================================
# StrKey
# =============================================================================

class StrKeyError(StellarError, ValueError):
    """Malformed StrKey text address."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.STRKEY_ERROR,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code, details)


class ChecksumMismatch(StrKeyError):
    """The CRC16 checksum embedded in a StrKey does not match its payload."""

    def __init__(self, expected: bytes, actual: bytes):
        super().__init__(
            "StrKey checksum mismatch",
            ErrorCode.CHECKSUM_MISMATCH,
            {"expected": expected.hex(), "actual": actual.hex()},
        )


class NonCanonicalStrKey(ChecksumMismatch):
    """
    The unused low bits of the last base32 character are not zero.

    Those bits sit outside the CRC16 input, so they are checked as part of
    the checksum: a single changed final character is always rejected here.
    """

    def __init__(self, actual: str, canonical: str):
        StrKeyError.__init__(
            self,
            "StrKey has non-zero trailing bits",
            ErrorCode.CHECKSUM_MISMATCH,
            {"expected": canonical[-1:], "actual": actual[-1:]},
        )


class InvalidVersionByte(StrKeyError):
    """The StrKey version byte does not belong to the requested address kind."""

    def __init__(self, expected: int, actual: int):
        super().__init__(
            f"Invalid version byte: expected {expected}, got {actual}",
            ErrorCode.INVALID_VERSION_BYTE,
            {"expected": expected, "actual": actual},
        )


# =============================================================================
# Crypto
# =============================================================================

class Ed25519Error(StellarError):
    """Ed25519 key errors."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.INVALID_KEY, cause=cause)


class SignatureError(StellarError):
    """Signing is impossible with the given key."""

    def __init__(self, message: str = "Invalid signature"):
        super().__init__(message, ErrorCode.INVALID_SIGNATURE)


# =============================================================================
# Builder
# =============================================================================

class BuilderValidationError(StellarError, ValueError):
    """Transaction builder validation errors."""

    def __init__(self, message: str, issues: Optional[List[str]] = None):
        """
        Initialize validation error.

        Args:
            message: Primary error message
            issues: List of specific validation issues
        """
        super().__init__(message, ErrorCode.INVALID_TRANSACTION,
                         {"issues": issues} if issues else None)
        self.issues = issues or []

    def __str__(self) -> str:
        """Return detailed error message including issues."""
        if self.issues:
            return f"[{self.code.name}] {self.message}: {'; '.join(self.issues)}"
        return f"[{self.code.name}] {self.message}"


# =============================================================================
# TxRep
# =============================================================================

class TxRepError(StellarError, ValueError):
    """TxRep parse errors. Carries the full dotted path of the offending line."""

    def __init__(self, message: str, path: Optional[str] = None,
                 code: ErrorCode = ErrorCode.TXREP_ERROR, cause: Optional[Exception] = None):
        details = {"path": path} if path else None
        super().__init__(message, code, details, cause)
        self.path = path


class MissingField(TxRepError):
    """A required path is absent from the input."""

    def __init__(self, path: str):
        super().__init__(f"missing {path}", path, ErrorCode.MISSING_FIELD)


class LengthMismatch(TxRepError):
    """A declared *.len does not match the indexed children present."""

    def __init__(self, path: str, declared: int, actual: int):
        super().__init__(
            f"{path} declares {declared} elements but {actual} are present",
            path,
            ErrorCode.LENGTH_MISMATCH,
        )
        self.declared = declared
        self.actual = actual


class UnknownVariant(TxRepError):
    """A *.type line names a variant that does not exist."""

    def __init__(self, path: str, name: str):
        super().__init__(f"unknown {path} {name}", path, ErrorCode.UNKNOWN_VARIANT)
        self.name = name


__all__ = [
    "ErrorCode",
    "StellarError",
    "XdrDecodeError",
    "UnexpectedEof",
    "InvalidDiscriminant",
    "UnknownDiscriminant",
    "InvalidBoolean",
    "InvalidPadding",
    "TrailingData",
    "XdrRangeError",
    "StrKeyError",
    "ChecksumMismatch",
    "NonCanonicalStrKey",
    "InvalidVersionByte",
    "Ed25519Error",
    "SignatureError",
    "BuilderValidationError",
    "TxRepError",
    "MissingField",
    "LengthMismatch",
    "UnknownVariant",
]
