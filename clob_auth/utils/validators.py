"""
Input validation utilities.

Normalizes addresses, private keys and hex blobs before they reach the
signing code.
"""

import re
from typing import Any

from eth_utils import is_hex_address

from ..exceptions import ValidationError, InvalidKeyError

_HEX_RE = re.compile(r"^[0-9a-fA-F]*$")


def strip_hex_prefix(value: str) -> str:
    """Remove a leading 0x / 0X if present."""
    if value[:2] in ("0x", "0X"):
        return value[2:]
    return value


def validate_address(address: Any) -> str:
    """
    Validate Ethereum address.

    Args:
        address: Ethereum address (with or without 0x, any case)

    Returns:
        Lowercase 0x-prefixed address

    Raises:
        ValidationError: If address is invalid
    """
    if not isinstance(address, str):
        raise ValidationError(f"Address must be string, got {type(address)}")

    addr = strip_hex_prefix(address)
    if not is_hex_address(f"0x{addr}") or len(addr) != 40:
        raise ValidationError(f"Invalid Ethereum address: {address}")

    return f"0x{addr.lower()}"


def address_to_bytes(address: Any) -> bytes:
    """Decode a validated address into its 20 raw bytes."""
    if isinstance(address, (bytes, bytearray)):
        if len(address) != 20:
            raise ValidationError(f"Address must be 20 bytes, got {len(address)}")
        return bytes(address)
    return bytes.fromhex(validate_address(address)[2:])


def validate_private_key(private_key: Any) -> str:
    """
    Validate private key format.

    Only the textual shape is checked here; range checks against the curve
    order live with the key material.

    Args:
        private_key: Private key hex string

    Returns:
        Normalized private key (lowercase, 0x-prefixed)

    Raises:
        InvalidKeyError: If private key is invalid
    """
    if not isinstance(private_key, str):
        raise InvalidKeyError(f"Private key must be string, got {type(private_key)}")

    key = strip_hex_prefix(private_key.strip())

    # Never echo the key back in the error
    if len(key) != 64 or not _HEX_RE.match(key):
        raise InvalidKeyError("Invalid private key format")

    return f"0x{key.lower()}"


def decode_hex(value: Any, name: str = "value") -> bytes:
    """
    Decode an optionally 0x-prefixed hex string.

    Raises:
        ValidationError: If value is not valid hex
    """
    if not isinstance(value, str):
        raise ValidationError(f"{name} must be hex string, got {type(value)}")

    body = strip_hex_prefix(value)
    if len(body) % 2 or not _HEX_RE.match(body):
        raise ValidationError(f"{name} is not valid hex")

    return bytes.fromhex(body)
