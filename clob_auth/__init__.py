"""
CLOB authentication core.

Wallet-control proofs (EIP-712 ClobAuth signatures) and per-request HMAC
signatures for the CLOB trading API. Pure functions over key material and
request metadata: no networking, no persistence, no key storage.
"""

__version__ = "0.1.0"

from .auth import (
    Authenticator,
    KeyMaterial,
    RequestSigner,
    Signature,
    StructSchema,
    build_clob_auth_signature,
    canonical_message,
    clob_auth_digest,
    clob_auth_struct_hash,
    decode_hex,
    derive,
    domain_separator,
    encode_hex,
    hash_domain,
    hash_typed_data,
    normalize_v,
    recover,
    register_schema,
    sign_digest,
    sign_request,
    sign_typed_data,
    typed_data_digest,
    verify,
    verify_request,
)
from .config import ClobAuthSettings, get_settings
from .models import ApiCredentials, ClobAuthMessage, EIP712Domain, TypeField, TypedData
from .exceptions import (
    ClobAuthError,
    ValidationError,
    InvalidKeyError,
    TypedDataError,
    UnknownTypeError,
    MissingFieldError,
    TypeMismatchError,
    SignatureError,
    InvalidSignatureLengthError,
    InvalidSignatureError,
    SigningError,
    AuthenticationError,
)
from .logging_config import setup_logging

__all__ = [
    # Core
    "KeyMaterial",
    "derive",
    "Signature",
    "sign_digest",
    "recover",
    "verify",
    "encode_hex",
    "decode_hex",
    "normalize_v",
    "domain_separator",
    "hash_domain",
    "typed_data_digest",
    "hash_typed_data",
    "clob_auth_struct_hash",
    "clob_auth_digest",
    "StructSchema",
    "register_schema",
    "RequestSigner",
    "canonical_message",
    "sign_request",
    "verify_request",
    # Header builders
    "Authenticator",
    "build_clob_auth_signature",
    "sign_typed_data",
    # Models / config
    "ApiCredentials",
    "ClobAuthMessage",
    "EIP712Domain",
    "TypeField",
    "TypedData",
    "ClobAuthSettings",
    "get_settings",
    "setup_logging",
    # Exceptions
    "ClobAuthError",
    "ValidationError",
    "InvalidKeyError",
    "TypedDataError",
    "UnknownTypeError",
    "MissingFieldError",
    "TypeMismatchError",
    "SignatureError",
    "InvalidSignatureLengthError",
    "InvalidSignatureError",
    "SigningError",
    "AuthenticationError",
]
