"""
secp256k1 key material for wallet authentication.

Owns a private scalar and the address derived from it. The scalar is kept in a
mutable buffer so callers can wipe it once the key is no longer needed.
"""

import logging
import secrets
from typing import Optional, Union

from eth_keys import keys
from eth_keys.constants import SECPK1_N
from eth_keys.exceptions import BadSignature
from eth_utils import keccak, to_checksum_address
from eth_utils.exceptions import ValidationError as EthValidationError

from ..exceptions import InvalidKeyError, SigningError
from ..utils.validators import validate_private_key
from .signature import Signature, sign_digest

logger = logging.getLogger(__name__)

PRIVATE_KEY_LENGTH = 32


def _scalar_to_bytes(scalar: Union[int, bytes, bytearray]) -> bytearray:
    if isinstance(scalar, bool):
        raise InvalidKeyError("Private key scalar must be int or bytes, got bool")
    if isinstance(scalar, int):
        if not 0 < scalar < SECPK1_N:
            raise InvalidKeyError("Private key scalar out of range")
        return bytearray(scalar.to_bytes(PRIVATE_KEY_LENGTH, "big"))
    if isinstance(scalar, (bytes, bytearray)):
        if len(scalar) != PRIVATE_KEY_LENGTH:
            raise InvalidKeyError(
                f"Private key must be {PRIVATE_KEY_LENGTH} bytes, got {len(scalar)}"
            )
        if not 0 < int.from_bytes(scalar, "big") < SECPK1_N:
            raise InvalidKeyError("Private key scalar out of range")
        return bytearray(scalar)
    raise InvalidKeyError(f"Private key scalar must be int or bytes, got {type(scalar)}")


class KeyMaterial:
    """
    A secp256k1 private key and its Ethereum address.

    SECURITY: The scalar never appears in repr. Use as a context manager (or
    call wipe()) to zero the scalar buffer when finished.

    Example:
        >>> with KeyMaterial.from_hex(os.environ["PRIVATE_KEY"]) as key:
        ...     sig = key.sign_hash(digest)
    """

    __slots__ = ("_secret", "_public_key", "_address")

    def __init__(self, scalar: Union[int, bytes, bytearray]):
        """
        Build key material from a private scalar.

        Args:
            scalar: Private key as an int or 32 big-endian bytes

        Raises:
            InvalidKeyError: If the scalar is not in [1, n-1]
        """
        self._secret = _scalar_to_bytes(scalar)
        try:
            public_key = keys.PrivateKey(bytes(self._secret)).public_key
        except (EthValidationError, BadSignature) as e:
            raise InvalidKeyError(f"Invalid private key: {type(e).__name__}") from None
        self._public_key = public_key.to_bytes()
        self._address = public_key.to_canonical_address()

    @classmethod
    def derive(cls, scalar: Union[int, bytes, bytearray]) -> "KeyMaterial":
        """Construct key material from a private scalar."""
        return cls(scalar)

    @classmethod
    def from_hex(cls, text: str) -> "KeyMaterial":
        """
        Construct key material from a hex private key.

        Args:
            text: 64 hex characters, optional 0x prefix

        Raises:
            InvalidKeyError: On malformed hex or out-of-range scalar
        """
        normalized = validate_private_key(text)
        return cls(bytes.fromhex(normalized[2:]))

    @classmethod
    def generate(cls) -> "KeyMaterial":
        """
        Create key material from a fresh random scalar.

        Raises:
            SigningError: If the OS entropy source is unavailable
        """
        while True:
            try:
                candidate = secrets.token_bytes(PRIVATE_KEY_LENGTH)
            except (OSError, NotImplementedError) as e:
                raise SigningError(
                    f"Entropy source unavailable: {type(e).__name__}",
                    retryable=isinstance(e, BlockingIOError)
                ) from e
            # Rejection sampling keeps the distribution uniform over [1, n-1]
            if 0 < int.from_bytes(candidate, "big") < SECPK1_N:
                logger.debug("Generated new key material")
                return cls(candidate)

    @property
    def address(self) -> bytes:
        """20-byte address: last 20 bytes of keccak256(X || Y)."""
        return self._address

    @property
    def public_key(self) -> bytes:
        """64-byte uncompressed public key without the 0x04 tag."""
        return self._public_key

    @property
    def is_wiped(self) -> bool:
        return not any(self._secret)

    def address_hex(self) -> str:
        """Lowercase 0x-prefixed address."""
        return "0x" + self._address.hex()

    def checksum_address(self) -> str:
        """EIP-55 mixed-case address."""
        return to_checksum_address(self._address)

    def private_key_hex(self) -> str:
        """0x-prefixed private key. Handle with care."""
        self._ensure_live()
        return "0x" + self._secret.hex()

    def sign_hash(self, digest: bytes) -> Signature:
        """Sign a 32-byte digest; v is returned as 27/28."""
        self._ensure_live()
        return sign_digest(digest, self)

    def sign_message(self, data: bytes) -> Signature:
        """Sign keccak256(data). No EIP-191 prefix is applied."""
        return self.sign_hash(keccak(data))

    def wipe(self) -> None:
        """Zero the private scalar in place."""
        for i in range(len(self._secret)):
            self._secret[i] = 0

    def _ensure_live(self) -> None:
        if self.is_wiped:
            raise InvalidKeyError("Key material has been wiped")

    def _private_key(self) -> keys.PrivateKey:
        self._ensure_live()
        return keys.PrivateKey(bytes(self._secret))

    def __enter__(self) -> "KeyMaterial":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.wipe()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, KeyMaterial):
            return NotImplemented
        return secrets.compare_digest(self._address, other._address)

    def __hash__(self) -> int:
        return hash(self._address)

    def __repr__(self) -> str:
        return f"KeyMaterial(address={self.address_hex()})"


def derive(scalar: Union[int, bytes, bytearray]) -> tuple[KeyMaterial, str]:
    """
    Derive key material and its address from a private scalar.

    Returns:
        (key material, lowercase 0x-prefixed address)
    """
    key = KeyMaterial.derive(scalar)
    return key, key.address_hex()


def is_valid_private_key(text: Optional[str]) -> bool:
    """True when text parses as an in-range private key."""
    try:
        KeyMaterial.from_hex(text)
    except InvalidKeyError:
        return False
    return True
