"""
EIP-712 structured-data hashing.

Two entry points share one encoder:

- the canonical CLOB path (ClobAuth struct, name/version/chainId domain);
- the generic path over arbitrary typed-data payloads, which performs the
  full recursive field encoding and matches eth_account's encode_typed_data.

Struct schemas live in a registry; adding a message type means adding a
StructSchema entry, not a new encoder.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence, Union

from eth_abi import encode as abi_encode
from eth_abi.exceptions import EncodingError
from eth_utils import keccak
from pydantic import ValidationError as PydanticValidationError

from ..config import CLOB_AUTH_MESSAGE, CLOB_DOMAIN_NAME, CLOB_DOMAIN_VERSION
from ..exceptions import (
    MissingFieldError,
    TypedDataError,
    TypeMismatchError,
    UnknownTypeError,
    ValidationError,
)
from ..models import ClobAuthMessage, EIP712Domain, TypedData
from ..utils.validators import address_to_bytes, decode_hex

logger = logging.getLogger(__name__)

EIP191_PREFIX = b"\x19\x01"

EIP712_DOMAIN_TYPE = "EIP712Domain(string name,string version,uint256 chainId)"
CLOB_AUTH_TYPE = "ClobAuth(address address,string timestamp,uint256 nonce,string message)"

EIP712_DOMAIN_TYPEHASH = keccak(text=EIP712_DOMAIN_TYPE)

# Canonical order of optional domain members
DOMAIN_FIELDS = (
    ("name", "string"),
    ("version", "string"),
    ("chainId", "uint256"),
    ("verifyingContract", "address"),
    ("salt", "bytes32"),
)

_ARRAY_RE = re.compile(r"^(?P<element>.+)\[(?P<length>\d*)\]$")
_INT_RE = re.compile(r"^(?P<signed>u?)int(?P<bits>\d+)$")
_FIXED_BYTES_RE = re.compile(r"^bytes(?P<size>\d+)$")

TypeTable = Mapping[str, Sequence[tuple[str, str]]]


def _is_atomic(type_name: str) -> bool:
    if type_name in ("address", "bool", "string", "bytes"):
        return True
    match = _INT_RE.match(type_name)
    if match:
        bits = int(match.group("bits"))
        return 8 <= bits <= 256 and bits % 8 == 0
    match = _FIXED_BYTES_RE.match(type_name)
    if match:
        return 1 <= int(match.group("size")) <= 32
    return False


def _split_array(type_name: str) -> Optional[tuple[str, Optional[int]]]:
    match = _ARRAY_RE.match(type_name)
    if not match:
        return None
    length = match.group("length")
    return match.group("element"), int(length) if length else None


def _base_type(type_name: str) -> str:
    return type_name.split("[", 1)[0]


# --- Type encoding ---

def find_dependencies(primary_type: str, types: TypeTable) -> list[str]:
    """
    Struct types referenced (transitively) by primary_type, primary first.

    Raises:
        UnknownTypeError: If a referenced type is neither atomic nor declared
    """
    primary = _base_type(primary_type)
    if primary not in types:
        raise UnknownTypeError(f"Unknown type {primary!r}", type_name=primary)

    found: list[str] = []
    pending = [primary]

    while pending:
        type_name = pending.pop()
        if type_name in found:
            continue
        if type_name not in types:
            if _is_atomic(type_name):
                continue
            raise UnknownTypeError(f"Unknown type {type_name!r}", type_name=type_name)
        found.append(type_name)
        for _, field_type in types[type_name]:
            pending.append(_base_type(field_type))

    return found


def encode_type(primary_type: str, types: TypeTable) -> str:
    """
    Type string for primary_type and its dependencies.

    The primary type comes first, referenced structs follow sorted by name,
    e.g. "Mail(Person from,Person to,string contents)Person(string name,address wallet)".
    """
    primary, *deps = find_dependencies(primary_type, types)
    parts = []
    for type_name in [primary] + sorted(deps):
        members = ",".join(f"{field_type} {name}" for name, field_type in types[type_name])
        parts.append(f"{type_name}({members})")
    return "".join(parts)


def hash_type(primary_type: str, types: TypeTable) -> bytes:
    """keccak256 of the encoded type string."""
    return keccak(text=encode_type(primary_type, types))


# --- Value encoding ---

def _mismatch(field_name: str, abi_type: str, value: Any) -> TypeMismatchError:
    return TypeMismatchError(
        f"Field {field_name!r}: cannot encode {type(value).__name__} as {abi_type}",
        abi_type=abi_type,
        field_name=field_name,
    )


def _coerce_int(field_name: str, abi_type: str, value: Any) -> int:
    if isinstance(value, bool):
        raise _mismatch(field_name, abi_type, value)
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            if text[:2] in ("0x", "0X"):
                return int(text, 16)
            return int(text, 10)
        except ValueError:
            raise _mismatch(field_name, abi_type, value) from None
    raise _mismatch(field_name, abi_type, value)


def _coerce_bytes(field_name: str, abi_type: str, value: Any) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        try:
            return decode_hex(value, field_name)
        except ValidationError:
            raise _mismatch(field_name, abi_type, value) from None
    raise _mismatch(field_name, abi_type, value)


def _encode_atomic(field_name: str, abi_type: str, value: Any) -> bytes:
    if abi_type == "string":
        if isinstance(value, str):
            return keccak(text=value)
        raise _mismatch(field_name, abi_type, value)

    if abi_type == "bytes":
        return keccak(_coerce_bytes(field_name, abi_type, value))

    if abi_type == "address":
        try:
            value = address_to_bytes(value)
        except ValidationError:
            raise _mismatch(field_name, abi_type, value) from None
    elif abi_type == "bool":
        if not isinstance(value, bool):
            if isinstance(value, int) and value in (0, 1):
                value = bool(value)
            else:
                raise _mismatch(field_name, abi_type, value)
    elif abi_type.startswith(("int", "uint")):
        value = _coerce_int(field_name, abi_type, value)
    elif abi_type.startswith("bytes"):
        value = _coerce_bytes(field_name, abi_type, value)

    try:
        return abi_encode([abi_type], [value])
    except (EncodingError, OverflowError, TypeError) as e:
        raise TypeMismatchError(
            f"Field {field_name!r}: {type(e).__name__} encoding {abi_type}",
            abi_type=abi_type,
            field_name=field_name,
        ) from None


def encode_value(field_name: str, field_type: str, value: Any, types: TypeTable) -> bytes:
    """
    Encode one member value into its 32-byte slot.

    Structs become their struct hash, arrays the keccak256 of their
    concatenated element encodings, strings and bytes their keccak256.
    """
    array = _split_array(field_type)
    if array is not None:
        element_type, length = array
        if isinstance(value, (str, bytes, bytearray, Mapping)) or not isinstance(value, Sequence):
            raise _mismatch(field_name, field_type, value)
        if length is not None and len(value) != length:
            raise TypeMismatchError(
                f"Field {field_name!r}: expected {length} elements, got {len(value)}",
                abi_type=field_type,
                field_name=field_name,
            )
        return keccak(b"".join(
            encode_value(field_name, element_type, item, types) for item in value
        ))

    if field_type in types:
        if not isinstance(value, Mapping):
            raise _mismatch(field_name, field_type, value)
        return hash_struct(field_type, types, value)

    if not _is_atomic(field_type):
        raise UnknownTypeError(f"Unknown type {field_type!r}", type_name=field_type)

    return _encode_atomic(field_name, field_type, value)


def encode_data(primary_type: str, types: TypeTable, data: Mapping[str, Any]) -> bytes:
    """
    typeHash || enc(field_1) || ... || enc(field_n), in declaration order.

    Raises:
        UnknownTypeError: If a referenced type has no schema
        MissingFieldError: If a declared field is absent from data
        TypeMismatchError: If a value cannot be encoded as its declared type
    """
    if primary_type not in types:
        raise UnknownTypeError(f"Unknown type {primary_type!r}", type_name=primary_type)

    encoded = [hash_type(primary_type, types)]
    for name, field_type in types[primary_type]:
        if name not in data or data[name] is None:
            raise MissingFieldError(
                f"{primary_type}.{name} is missing",
                type_name=primary_type,
                field_name=name,
            )
        encoded.append(encode_value(name, field_type, data[name], types))
    return b"".join(encoded)


def hash_struct(primary_type: str, types: TypeTable, data: Mapping[str, Any]) -> bytes:
    """keccak256(encode_data(...))."""
    return keccak(encode_data(primary_type, types, data))


# --- Struct schema registry ---

@dataclass(frozen=True)
class StructSchema:
    """A named struct definition: ordered (field name, ABI type) pairs."""
    name: str
    fields: tuple[tuple[str, str], ...]

    @property
    def types(self) -> dict[str, tuple[tuple[str, str], ...]]:
        return {self.name: self.fields}

    def type_string(self) -> str:
        return encode_type(self.name, self.types)

    def type_hash(self) -> bytes:
        return hash_type(self.name, self.types)

    def struct_hash(self, values: Mapping[str, Any]) -> bytes:
        return hash_struct(self.name, self.types, values)


CLOB_AUTH_SCHEMA = StructSchema(
    name="ClobAuth",
    fields=(
        ("address", "address"),
        ("timestamp", "string"),
        ("nonce", "uint256"),
        ("message", "string"),
    ),
)

SCHEMAS: dict[str, StructSchema] = {
    CLOB_AUTH_SCHEMA.name: CLOB_AUTH_SCHEMA,
}


def register_schema(schema: StructSchema) -> StructSchema:
    """
    Add a flat struct schema to the registry.

    Raises:
        TypedDataError: If a different schema is already registered under the name
    """
    existing = SCHEMAS.get(schema.name)
    if existing is not None and existing != schema:
        raise TypedDataError(f"Schema {schema.name!r} already registered")
    # Validates every member type up front
    schema.type_string()
    SCHEMAS[schema.name] = schema
    return schema


def get_schema(name: str) -> StructSchema:
    """
    Raises:
        UnknownTypeError: If no schema is registered under name
    """
    try:
        return SCHEMAS[name]
    except KeyError:
        raise UnknownTypeError(f"No schema registered for {name!r}", type_name=name) from None


def hash_registered(name: str, values: Mapping[str, Any]) -> bytes:
    """Struct hash of values under the registered schema name."""
    return get_schema(name).struct_hash(values)


# --- Domain separator ---

def domain_separator(name: str, version: str, chain_id: int) -> bytes:
    """
    keccak256(typeHash || keccak(name) || keccak(version) || uint256(chainId)).

    salt and verifyingContract never participate here.
    """
    if isinstance(chain_id, bool) or not isinstance(chain_id, int) or not 0 <= chain_id < 2**256:
        raise TypeMismatchError(f"chainId must be uint256, got {chain_id!r}", abi_type="uint256",
                                field_name="chainId")
    return keccak(
        EIP712_DOMAIN_TYPEHASH
        + keccak(text=name)
        + keccak(text=version)
        + chain_id.to_bytes(32, "big")
    )


def _as_domain(domain: Union[EIP712Domain, Mapping[str, Any]]) -> EIP712Domain:
    if isinstance(domain, EIP712Domain):
        return domain
    try:
        return EIP712Domain.model_validate(domain)
    except PydanticValidationError as e:
        raise TypedDataError(f"Invalid EIP712Domain: {e.error_count()} error(s)") from e


def domain_types(domain: Union[EIP712Domain, Mapping[str, Any]]) -> list[tuple[str, str]]:
    """EIP712Domain members for the fields this domain actually carries."""
    present = _as_domain(domain).to_eip712_dict()
    return [(name, abi_type) for name, abi_type in DOMAIN_FIELDS if name in present]


def hash_domain(
    domain: Union[EIP712Domain, Mapping[str, Any]],
    declared: Optional[Sequence[tuple[str, str]]] = None
) -> bytes:
    """
    Domain separator over whichever optional members the domain carries.

    For a name/version/chainId domain this equals domain_separator().

    Args:
        domain: Domain model or mapping
        declared: EIP712Domain members as declared by the payload, in order.
            When given, the domain must carry exactly these members.

    Raises:
        TypedDataError: If the domain members differ from the declared ones
    """
    domain = _as_domain(domain)
    values = domain.to_eip712_dict()
    if declared is None:
        fields = domain_types(domain)
    else:
        fields = [(name, abi_type) for name, abi_type in declared]
        declared_names = [name for name, _ in fields]
        if len(set(declared_names)) != len(declared_names) or set(declared_names) != set(values):
            raise TypedDataError(
                "Domain members do not match the declared EIP712Domain type",
                {"declared": declared_names, "present": sorted(values)},
            )
    return hash_struct("EIP712Domain", {"EIP712Domain": fields}, values)


def domain_separator_for(domain: Union[EIP712Domain, Mapping[str, Any]], narrow: bool = True) -> bytes:
    """
    Domain separator for a full domain record.

    Args:
        domain: Domain model or mapping
        narrow: Hash name/version/chainId only, ignoring salt and verifyingContract
    """
    domain = _as_domain(domain)
    if not narrow:
        return hash_domain(domain)
    if domain.name is None or domain.version is None or domain.chain_id is None:
        raise MissingFieldError(
            "Domain requires name, version and chainId",
            type_name="EIP712Domain",
        )
    return domain_separator(domain.name, domain.version, domain.chain_id)


# --- Final digest ---

def typed_data_digest(domain_sep: bytes, struct_hash: bytes) -> bytes:
    """keccak256(0x19 0x01 || domainSeparator || structHash)."""
    for label, value in (("domainSeparator", domain_sep), ("structHash", struct_hash)):
        if not isinstance(value, (bytes, bytearray)) or len(value) != 32:
            raise TypeMismatchError(f"{label} must be 32 bytes", abi_type="bytes32", field_name=label)
    return keccak(EIP191_PREFIX + bytes(domain_sep) + bytes(struct_hash))


def hash_typed_data(typed_data: Union[TypedData, Mapping[str, Any]]) -> bytes:
    """
    Signing digest for a full typed-data payload.

    The message hash is the struct hash of the primary type. The domain is
    encoded with the declared EIP712Domain members when the payload has them,
    otherwise with every member it carries.

    Raises:
        TypedDataError: If the payload is malformed
    """
    if not isinstance(typed_data, TypedData):
        try:
            typed_data = TypedData.model_validate(typed_data)
        except PydanticValidationError as e:
            raise TypedDataError(f"Invalid typed data: {e.error_count()} error(s)") from e

    types = typed_data.type_table()
    declared_domain = types.pop("EIP712Domain", None)

    digest = typed_data_digest(
        hash_domain(typed_data.domain, declared_domain),
        hash_struct(typed_data.primary_type, types, typed_data.message),
    )
    logger.debug(f"Hashed typed data {typed_data.primary_type}")
    return digest


# --- Canonical CLOB path ---

def clob_auth_struct_hash(
    address: Union[str, bytes],
    timestamp: Union[int, str],
    nonce: int = 0,
    message: str = CLOB_AUTH_MESSAGE
) -> bytes:
    """Struct hash of ClobAuth(address, timestamp, nonce, message)."""
    if isinstance(address, (bytes, bytearray)):
        address = "0x" + address_to_bytes(address).hex()
    try:
        msg = ClobAuthMessage(address=address, timestamp=timestamp, nonce=nonce, message=message)
    except PydanticValidationError as e:
        raise TypeMismatchError(f"Invalid ClobAuth message: {e.error_count()} error(s)") from e
    return CLOB_AUTH_SCHEMA.struct_hash(msg.model_dump())


def clob_auth_digest(
    address: Union[str, bytes],
    chain_id: int,
    timestamp: Union[int, str],
    nonce: int = 0,
    message: str = CLOB_AUTH_MESSAGE,
    domain_name: str = CLOB_DOMAIN_NAME,
    domain_version: str = CLOB_DOMAIN_VERSION
) -> bytes:
    """
    Digest signed for CLOB L1 authentication.

    Args:
        address: Signer address
        chain_id: Chain ID bound into the domain
        timestamp: Unix timestamp (int or decimal string)
        nonce: Auth nonce
        message: Attestation text

    Returns:
        32-byte digest
    """
    return typed_data_digest(
        domain_separator(domain_name, domain_version, chain_id),
        clob_auth_struct_hash(address, timestamp, nonce, message),
    )
