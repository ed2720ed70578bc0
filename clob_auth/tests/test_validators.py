"""Tests for validators."""

import pytest

from clob_auth.exceptions import InvalidKeyError, ValidationError
from clob_auth.utils.validators import (
    address_to_bytes,
    decode_hex,
    strip_hex_prefix,
    validate_address,
    validate_private_key,
)


def test_validate_address():
    """Test address validation."""
    checksummed = "0x2c7536E3605D9C16a7a3D7b1898e529396a65c23"
    assert validate_address(checksummed) == checksummed.lower()
    assert validate_address(checksummed[2:]) == checksummed.lower()

    with pytest.raises(ValidationError):
        validate_address("0x1234")  # Too short

    with pytest.raises(ValidationError):
        validate_address("0x" + "g" * 40)  # Not hex

    with pytest.raises(ValidationError):
        validate_address(1234)  # Not a string


def test_address_to_bytes():
    """Test address decoding."""
    assert address_to_bytes("0x" + "11" * 20) == b"\x11" * 20
    assert address_to_bytes(b"\x22" * 20) == b"\x22" * 20

    with pytest.raises(ValidationError):
        address_to_bytes(b"\x22" * 19)


def test_validate_private_key():
    """Test private key validation."""
    assert validate_private_key("AB" * 32) == "0x" + "ab" * 32
    assert validate_private_key("0x" + "01" * 32) == "0x" + "01" * 32

    with pytest.raises(InvalidKeyError):
        validate_private_key("0x" + "01" * 31)  # Too short

    with pytest.raises(InvalidKeyError):
        validate_private_key(b"\x01" * 32)  # Not a string


def test_decode_hex():
    """Test hex decoding."""
    assert decode_hex("0xdeadbeef") == b"\xde\xad\xbe\xef"
    assert decode_hex("") == b""
    assert strip_hex_prefix("0Xab") == "ab"

    with pytest.raises(ValidationError):
        decode_hex("0xabc")  # Odd length
