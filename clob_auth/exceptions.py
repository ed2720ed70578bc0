"""
Custom exceptions for CLOB authentication.

Provides typed exceptions so callers can tell key, schema and signature
failures apart without parsing messages.
"""

from typing import Optional, Any


class ClobAuthError(Exception):
    """Base exception for all clob_auth errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(ClobAuthError):
    """Input validation failed."""
    pass


class InvalidKeyError(ValidationError):
    """Private key is malformed or outside the secp256k1 scalar range."""
    pass


# Typed-data schema exceptions
class TypedDataError(ValidationError):
    """Base exception for EIP-712 typed-data encoding errors."""
    pass


class UnknownTypeError(TypedDataError):
    """Referenced type has no schema."""

    def __init__(self, message: str, type_name: Optional[str] = None):
        super().__init__(message, {"type_name": type_name})
        self.type_name = type_name


class MissingFieldError(TypedDataError):
    """Declared field is absent from the message."""

    def __init__(self, message: str, type_name: Optional[str] = None,
                 field_name: Optional[str] = None):
        super().__init__(message, {"type_name": type_name, "field_name": field_name})
        self.type_name = type_name
        self.field_name = field_name


class TypeMismatchError(TypedDataError):
    """Value cannot be coerced to its declared ABI type."""

    def __init__(self, message: str, abi_type: Optional[str] = None,
                 field_name: Optional[str] = None):
        super().__init__(message, {"abi_type": abi_type, "field_name": field_name})
        self.abi_type = abi_type
        self.field_name = field_name


# Signature exceptions
class SignatureError(ClobAuthError):
    """Base exception for malformed or unrecoverable signatures."""
    pass


class InvalidSignatureLengthError(SignatureError):
    """Signature is not exactly 65 bytes."""

    def __init__(self, message: str, length: Optional[int] = None):
        super().__init__(message, {"length": length})
        self.length = length


class InvalidSignatureError(SignatureError):
    """Signature does not recover to a valid public key."""
    pass


class SigningError(ClobAuthError):
    """Signing failed in the entropy source or curve backend."""

    def __init__(self, message: str, retryable: bool = False):
        super().__init__(message, {"retryable": retryable})
        self.retryable = retryable


class AuthenticationError(ClobAuthError):
    """Authentication headers could not be built or verified."""
    pass
