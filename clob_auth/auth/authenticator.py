"""
Authentication handler for the CLOB API.

Handles L1 (private key) and L2 (API key) authentication. Produces plain
header dicts; attaching them to requests is the transport's job.
"""

import time
from typing import Any, Mapping, Optional, Union
import logging

from ..config import ClobAuthSettings, get_settings
from ..exceptions import AuthenticationError, ClobAuthError
from ..models import ApiCredentials, TypedData
from ..utils.validators import validate_address
from .eip712 import clob_auth_digest, hash_typed_data
from .hmac_signer import sign_request, verify_request
from .key_material import KeyMaterial
from .signature import Signature, encode_hex, sign_digest, verify

logger = logging.getLogger(__name__)

POLY_ADDRESS = "POLY_ADDRESS"
POLY_SIGNATURE = "POLY_SIGNATURE"
POLY_TIMESTAMP = "POLY_TIMESTAMP"
POLY_NONCE = "POLY_NONCE"
POLY_API_KEY = "POLY_API_KEY"
POLY_PASSPHRASE = "POLY_PASSPHRASE"


def build_clob_auth_signature(
    key: KeyMaterial,
    chain_id: int,
    timestamp: int,
    nonce: int = 0,
    settings: Optional[ClobAuthSettings] = None
) -> str:
    """
    Sign the ClobAuth attestation for key.

    Returns:
        0x-prefixed 65-byte signature, v in {27, 28}
    """
    settings = settings or get_settings()
    digest = clob_auth_digest(
        key.address_hex(),
        chain_id,
        timestamp,
        nonce,
        message=settings.attestation_message,
        domain_name=settings.domain_name,
        domain_version=settings.domain_version,
    )
    return encode_hex(sign_digest(digest, key))


def sign_typed_data(key: KeyMaterial, typed_data: Union[TypedData, Mapping[str, Any]]) -> Signature:
    """Sign an arbitrary EIP-712 payload; v is returned as 27/28."""
    return sign_digest(hash_typed_data(typed_data), key)


class Authenticator:
    """
    Handles L1 and L2 authentication for the CLOB API.

    L1: Private key signature for wallet operations
    L2: API key HMAC signature for API requests
    """

    def __init__(self, chain_id: Optional[int] = None, settings: Optional[ClobAuthSettings] = None):
        """
        Initialize authenticator.

        Args:
            chain_id: Chain ID override (default: settings.chain_id)
            settings: Settings instance (default: loaded from environment)
        """
        self.settings = settings or get_settings()
        self.chain_id = chain_id if chain_id is not None else self.settings.chain_id

    def create_l1_headers(
        self,
        key: KeyMaterial,
        timestamp: Optional[int] = None,
        nonce: int = 0
    ) -> dict[str, str]:
        """
        Create L1 authentication headers.

        Uses an EIP-712 ClobAuth signature for wallet authentication.

        Args:
            key: Wallet key material
            timestamp: Unix timestamp (uses current time if None)
            nonce: Nonce value (default: 0)

        Returns:
            L1 headers dict

        Raises:
            AuthenticationError: If signing fails
        """
        try:
            if timestamp is None:
                timestamp = int(time.time())

            signature = build_clob_auth_signature(
                key, self.chain_id, timestamp, nonce, settings=self.settings
            )

            headers = {
                POLY_ADDRESS: key.address_hex(),
                POLY_SIGNATURE: signature,
                POLY_TIMESTAMP: str(timestamp),
                POLY_NONCE: str(nonce),
            }

            logger.debug(f"Created L1 headers for {key.address_hex()}")
            return headers

        except ClobAuthError as e:
            # SECURITY: Sanitize error message to prevent credential leakage
            error_type = type(e).__name__
            logger.error(f"Failed to create L1 headers: {error_type}")
            raise AuthenticationError(
                f"L1 signature failed: {error_type}. Check private key format.",
                {"cause": error_type}
            ) from None

    def verify_l1_headers(self, headers: Mapping[str, str], chain_id: Optional[int] = None) -> bool:
        """
        Verify L1 headers against the address they claim.

        Args:
            headers: L1 headers dict
            chain_id: Chain the headers were signed for (default: self.chain_id)

        Returns:
            True if the signature recovers to POLY_ADDRESS

        Raises:
            AuthenticationError: If headers are missing or malformed
        """
        try:
            address = validate_address(headers[POLY_ADDRESS])
            timestamp = headers[POLY_TIMESTAMP]
            nonce = int(headers.get(POLY_NONCE, "0"))
            digest = clob_auth_digest(
                address,
                chain_id if chain_id is not None else self.chain_id,
                timestamp,
                nonce,
                message=self.settings.attestation_message,
                domain_name=self.settings.domain_name,
                domain_version=self.settings.domain_version,
            )
            return verify(digest, headers[POLY_SIGNATURE], address)
        except KeyError as e:
            raise AuthenticationError(f"Missing L1 header {e.args[0]}") from None
        except (ClobAuthError, ValueError) as e:
            raise AuthenticationError(f"Invalid L1 headers: {type(e).__name__}") from None

    def create_l2_headers(
        self,
        address: str,
        credentials: ApiCredentials,
        method: str,
        path: str,
        body: Optional[str] = None,
        timestamp: Optional[int] = None
    ) -> dict[str, str]:
        """
        Create L2 authentication headers.

        Uses HMAC signature for API requests.

        Args:
            address: Wallet address
            credentials: API key, secret and passphrase
            method: HTTP method (GET, POST, DELETE, etc.)
            path: Request path
            body: Request body (JSON string)
            timestamp: Unix timestamp (uses current time if None)

        Returns:
            L2 headers dict

        Raises:
            AuthenticationError: If the address is invalid
        """
        try:
            address = validate_address(address)
        except ClobAuthError as e:
            raise AuthenticationError(f"L2 signature failed: {type(e).__name__}") from None

        if timestamp is None:
            timestamp = int(time.time())

        signature = sign_request(credentials.api_secret, timestamp, method, path, body)

        headers = {
            POLY_ADDRESS: address,
            POLY_SIGNATURE: signature,
            POLY_TIMESTAMP: str(timestamp),
            POLY_API_KEY: credentials.api_key,
            POLY_PASSPHRASE: credentials.api_passphrase,
        }

        logger.debug(f"Created L2 headers for {method} {path}")
        return headers

    def verify_l2_signature(
        self,
        api_secret: str,
        signature: str,
        timestamp: int,
        method: str,
        path: str,
        body: Optional[str] = None
    ) -> bool:
        """
        Verify L2 HMAC signature.

        Returns:
            True if signature is valid
        """
        return verify_request(api_secret, timestamp, method, path, body, signature)
