"""Utility modules for clob_auth."""

from .validators import validate_address, validate_private_key, address_to_bytes
from .structured_logging import CredentialRedactionFilter

__all__ = [
    "validate_address",
    "validate_private_key",
    "address_to_bytes",
    "CredentialRedactionFilter",
]
