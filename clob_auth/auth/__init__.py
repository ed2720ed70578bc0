"""Authentication modules for the CLOB API."""

from .authenticator import Authenticator, build_clob_auth_signature, sign_typed_data
from .eip712 import (
    CLOB_AUTH_SCHEMA,
    CLOB_AUTH_TYPE,
    EIP712_DOMAIN_TYPE,
    StructSchema,
    clob_auth_digest,
    clob_auth_struct_hash,
    domain_separator,
    hash_domain,
    hash_struct,
    hash_typed_data,
    register_schema,
    typed_data_digest,
)
from .hmac_signer import RequestSigner, canonical_message, sign_request, verify_request
from .key_material import KeyMaterial, derive
from .signature import Signature, decode_hex, encode_hex, normalize_v, recover, sign_digest, verify

__all__ = [
    "Authenticator",
    "build_clob_auth_signature",
    "sign_typed_data",
    "CLOB_AUTH_SCHEMA",
    "CLOB_AUTH_TYPE",
    "EIP712_DOMAIN_TYPE",
    "StructSchema",
    "clob_auth_digest",
    "clob_auth_struct_hash",
    "domain_separator",
    "hash_domain",
    "hash_struct",
    "hash_typed_data",
    "register_schema",
    "typed_data_digest",
    "RequestSigner",
    "canonical_message",
    "sign_request",
    "verify_request",
    "KeyMaterial",
    "derive",
    "Signature",
    "decode_hex",
    "encode_hex",
    "normalize_v",
    "recover",
    "sign_digest",
    "verify",
]
