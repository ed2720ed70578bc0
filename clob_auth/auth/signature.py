"""
Recoverable secp256k1 signatures.

Produces, parses and recovers 65-byte r || s || v signatures. The recovery
byte convention (0/1 internally, 27/28 on the wire) is handled by
normalize_v() and nowhere else.
"""

import hmac
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from eth_keys import keys
from eth_keys.constants import SECPK1_N
from eth_keys.exceptions import BadSignature
from eth_utils import keccak
from eth_utils.exceptions import ValidationError as EthValidationError

from ..exceptions import (
    InvalidSignatureError,
    InvalidSignatureLengthError,
    SigningError,
    TypeMismatchError,
)
from ..utils.validators import address_to_bytes, strip_hex_prefix

if TYPE_CHECKING:
    from .key_material import KeyMaterial

logger = logging.getLogger(__name__)

SIGNATURE_LENGTH = 65
SIGNATURE_HEX_LENGTH = SIGNATURE_LENGTH * 2
DIGEST_LENGTH = 32
V_OFFSET = 27


def normalize_v(v: int, canonical: bool = True) -> int:
    """
    Map a recovery byte onto one convention.

    Args:
        v: Recovery byte, one of 0, 1, 27, 28
        canonical: True for the wire form (27/28), False for recovery math (0/1)

    Returns:
        Normalized recovery byte

    Raises:
        InvalidSignatureError: If v is not a recognized recovery byte
    """
    if v in (0, 1):
        recovery_id = v
    elif v in (27, 28):
        recovery_id = v - V_OFFSET
    else:
        raise InvalidSignatureError(f"Invalid recovery byte v={v}", {"v": v})
    return recovery_id + V_OFFSET if canonical else recovery_id


@dataclass(frozen=True)
class Signature:
    """65-byte recoverable ECDSA signature."""
    r: int
    s: int
    v: int

    @classmethod
    def from_bytes(cls, raw: Union[bytes, bytearray]) -> "Signature":
        """
        Parse r || s || v.

        Raises:
            InvalidSignatureLengthError: Unless raw is exactly 65 bytes
        """
        if len(raw) != SIGNATURE_LENGTH:
            raise InvalidSignatureLengthError(
                f"Signature must be {SIGNATURE_LENGTH} bytes, got {len(raw)}",
                length=len(raw)
            )
        return cls(
            r=int.from_bytes(raw[:32], "big"),
            s=int.from_bytes(raw[32:64], "big"),
            v=raw[64],
        )

    @property
    def recovery_id(self) -> int:
        return normalize_v(self.v, canonical=False)

    def canonical(self) -> "Signature":
        """Same signature with v in {27, 28}."""
        return Signature(self.r, self.s, normalize_v(self.v))

    def to_bytes(self) -> bytes:
        return (
            self.r.to_bytes(32, "big")
            + self.s.to_bytes(32, "big")
            + bytes([self.v])
        )

    def to_hex(self) -> str:
        return encode_hex(self)

    def __str__(self) -> str:
        return self.to_hex()


SignatureLike = Union[Signature, bytes, bytearray, str]


def _check_digest(digest: bytes) -> bytes:
    if not isinstance(digest, (bytes, bytearray)) or len(digest) != DIGEST_LENGTH:
        raise TypeMismatchError(
            f"Digest must be {DIGEST_LENGTH} bytes",
            abi_type="bytes32"
        )
    return bytes(digest)


def encode_hex(signature: Signature) -> str:
    """0x + 130 lowercase hex characters."""
    return "0x" + signature.to_bytes().hex()


def decode_hex(text: str) -> Signature:
    """
    Parse a hex signature (0x prefix optional).

    Raises:
        InvalidSignatureError: If text is not hex
        InvalidSignatureLengthError: Unless it decodes to 65 bytes
    """
    if not isinstance(text, str):
        raise InvalidSignatureError(f"Signature must be hex string, got {type(text)}")
    body = strip_hex_prefix(text)
    try:
        raw = bytes.fromhex(body)
    except ValueError:
        raise InvalidSignatureError("Signature is not valid hex") from None
    return Signature.from_bytes(raw)


def coerce_signature(signature: SignatureLike) -> Signature:
    """Accept a Signature, raw 65 bytes or a hex string."""
    if isinstance(signature, Signature):
        return signature
    if isinstance(signature, (bytes, bytearray)):
        return Signature.from_bytes(signature)
    if isinstance(signature, str):
        return decode_hex(signature)
    raise InvalidSignatureError(f"Unsupported signature type {type(signature)}")


def sign_digest(digest: bytes, key: "KeyMaterial") -> Signature:
    """
    Sign a 32-byte digest with RFC 6979 deterministic ECDSA.

    Args:
        digest: 32-byte message hash
        key: Signing key material

    Returns:
        Signature with v in {27, 28}

    Raises:
        SigningError: If the curve backend fails
    """
    digest = _check_digest(digest)
    try:
        raw = key._private_key().sign_msg_hash(digest)
    except (EthValidationError, BadSignature, ArithmeticError) as e:
        raise SigningError(f"Signing failed: {type(e).__name__}") from None

    signature = Signature(r=raw.r, s=raw.s, v=normalize_v(raw.v))
    logger.debug(f"Signed digest 0x{digest.hex()[:16]}... for {key.address_hex()}")
    return signature


def recover_public_key(digest: bytes, signature: SignatureLike) -> bytes:
    """
    Recover the 64-byte public key that produced signature over digest.

    Raises:
        InvalidSignatureLengthError: Unless the signature is 65 bytes
        InvalidSignatureError: If no valid public key can be recovered
    """
    digest = _check_digest(digest)
    sig = coerce_signature(signature)

    if not (0 < sig.r < SECPK1_N and 0 < sig.s < SECPK1_N):
        raise InvalidSignatureError("Signature r/s out of range")

    try:
        raw = keys.Signature(vrs=(sig.recovery_id, sig.r, sig.s))
        public_key = raw.recover_public_key_from_msg_hash(digest)
    except (EthValidationError, BadSignature, ArithmeticError) as e:
        raise InvalidSignatureError(f"Signature recovery failed: {type(e).__name__}") from None

    return public_key.to_bytes()


def recover(digest: bytes, signature: SignatureLike) -> str:
    """
    Recover the signer's lowercase 0x-prefixed address.

    Raises:
        InvalidSignatureLengthError: Unless the signature is 65 bytes
        InvalidSignatureError: If no valid public key can be recovered
    """
    public_key = recover_public_key(digest, signature)
    return "0x" + keccak(public_key)[-20:].hex()


def verify(digest: bytes, signature: SignatureLike, expected_address: Union[str, bytes]) -> bool:
    """
    Check that signature over digest was produced by expected_address.

    Signature shape errors propagate from recover().

    Raises:
        ValidationError: If expected_address is malformed
    """
    expected = address_to_bytes(expected_address)
    recovered = bytes.fromhex(recover(digest, signature)[2:])
    return hmac.compare_digest(recovered, expected)


def recover_message(data: bytes, signature: SignatureLike) -> str:
    """Recover the signer of keccak256(data)."""
    return recover(keccak(data), signature)


def verify_message(data: bytes, signature: SignatureLike, expected_address: Union[str, bytes]) -> bool:
    """Verify a KeyMaterial.sign_message() signature."""
    return verify(keccak(data), signature, expected_address)


__all__ = [
    "Signature",
    "SignatureLike",
    "normalize_v",
    "encode_hex",
    "decode_hex",
    "coerce_signature",
    "sign_digest",
    "recover",
    "recover_public_key",
    "verify",
    "recover_message",
    "verify_message",
]
