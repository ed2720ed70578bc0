"""
Type definitions for CLOB authentication.

Uses Pydantic for runtime validation of EIP-712 domains, typed-data payloads
and API credentials.
"""

from typing import Optional, Any, Union
from pydantic import BaseModel, Field, field_validator, ConfigDict

from .config import CLOB_AUTH_MESSAGE
from .exceptions import ValidationError
from .utils.validators import validate_address, decode_hex


class EIP712Domain(BaseModel):
    """
    EIP-712 domain.

    Field names follow Python style; the wire (camelCase) names are accepted as
    aliases so wallet JSON can be loaded directly.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: Optional[str] = Field(None, description="Signing domain name")
    version: Optional[str] = Field(None, description="Signing domain version")
    chain_id: Optional[int] = Field(None, alias="chainId", ge=0, description="EIP-155 chain ID")
    verifying_contract: Optional[str] = Field(
        None, alias="verifyingContract", description="Contract that verifies signatures"
    )
    salt: Optional[bytes] = Field(None, description="32-byte disambiguating salt")

    @field_validator("chain_id", mode="before")
    @classmethod
    def parse_chain_id(cls, v: Any) -> Any:
        """Accept 0x-hex strings as wallets often send them."""
        if isinstance(v, str) and v.strip()[:2] in ("0x", "0X"):
            try:
                return int(v.strip(), 16)
            except ValueError:
                raise ValueError(f"chainId is not valid hex: {v!r}") from None
        return v

    @field_validator("verifying_contract", mode="before")
    @classmethod
    def validate_verifying_contract(cls, v: Any) -> Optional[str]:
        """Normalize to lowercase 0x address."""
        if v is None or v == "":
            return None
        try:
            return validate_address(v)
        except ValidationError as e:
            raise ValueError(e.message) from e

    @field_validator("salt", mode="before")
    @classmethod
    def validate_salt(cls, v: Any) -> Optional[bytes]:
        """Accept raw bytes or 0x hex; must be 32 bytes."""
        if v is None or v in ("", b""):
            return None
        if isinstance(v, str):
            try:
                v = decode_hex(v, "salt")
            except ValidationError as e:
                raise ValueError(e.message) from e
        if not isinstance(v, (bytes, bytearray)) or len(v) != 32:
            raise ValueError("salt must be 32 bytes")
        return bytes(v)

    def to_eip712_dict(self) -> dict[str, Any]:
        """Present fields only, keyed by their EIP-712 names."""
        fields = {
            "name": self.name,
            "version": self.version,
            "chainId": self.chain_id,
            "verifyingContract": self.verifying_contract,
            "salt": self.salt,
        }
        return {k: v for k, v in fields.items() if v is not None}


class TypeField(BaseModel):
    """One (name, type) member of an EIP-712 struct definition."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)


class TypedData(BaseModel):
    """
    Full EIP-712 payload as passed to eth_signTypedData_v4.

    Example:
        >>> TypedData.model_validate({
        ...     "types": {"Mail": [{"name": "contents", "type": "string"}]},
        ...     "primaryType": "Mail",
        ...     "domain": {"name": "Ether Mail", "version": "1", "chainId": 1},
        ...     "message": {"contents": "Hello, Bob!"},
        ... })
    """
    model_config = ConfigDict(populate_by_name=True)

    types: dict[str, list[TypeField]] = Field(..., description="Struct definitions by name")
    primary_type: str = Field(..., alias="primaryType", description="Struct being signed")
    domain: EIP712Domain = Field(..., description="Signing domain")
    message: dict[str, Any] = Field(..., description="Message values")

    def type_table(self) -> dict[str, list[tuple[str, str]]]:
        """Struct definitions as plain (name, type) tuples."""
        return {
            type_name: [(f.name, f.type) for f in fields]
            for type_name, fields in self.types.items()
        }


class ClobAuthMessage(BaseModel):
    """
    CLOB authentication message.

    Used for Level 1 (private key) authentication.
    """
    model_config = ConfigDict(frozen=True)

    address: str = Field(..., description="Signer address")
    timestamp: str = Field(..., description="Unix timestamp (decimal string)")
    nonce: int = Field(default=0, ge=0, lt=2**256, description="Auth nonce")
    message: str = Field(default=CLOB_AUTH_MESSAGE, description="Attestation text")

    @field_validator("address", mode="before")
    @classmethod
    def normalize_address(cls, v: Any) -> str:
        """Normalize to lowercase 0x address."""
        try:
            return validate_address(v)
        except ValidationError as e:
            raise ValueError(e.message) from e

    @field_validator("timestamp", mode="before")
    @classmethod
    def validate_timestamp(cls, v: Union[int, str]) -> str:
        """Integers are rendered in decimal."""
        if isinstance(v, bool):
            raise ValueError("timestamp must be int or str")
        if isinstance(v, int):
            return str(v)
        return v


class ApiCredentials(BaseModel):
    """
    L2 API credentials.

    SECURITY: Secret and passphrase are hidden from repr.
    """
    model_config = ConfigDict(frozen=True)

    api_key: str = Field(..., description="API key UUID")
    api_secret: str = Field(..., repr=False, description="URL-safe base64 secret")
    api_passphrase: str = Field(..., repr=False, description="API passphrase")
