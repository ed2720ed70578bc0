"""
HMAC request signing for CLOB Level 2 authentication.

Signs "{timestamp}{method}{path}{body}" with HMAC-SHA256 under the API secret.
The tag is standard base64 with only '+' and '/' translated, so '=' padding
stays on the wire.
"""

import base64
import binascii
import hashlib
import hmac
import logging
from typing import Optional

logger = logging.getLogger(__name__)

_URLSAFE_TRANSLATION = str.maketrans({"+": "-", "/": "_"})


def canonical_message(
    timestamp: int,
    method: str,
    path: str,
    body: Optional[str] = None
) -> bytes:
    """
    Byte string authenticated by the request signature.

    Args:
        timestamp: Unix timestamp in seconds
        method: HTTP method, used verbatim
        path: Request path, used verbatim
        body: Request body; omitted entirely when None

    Returns:
        UTF-8 encoded message
    """
    message = f"{timestamp}{method}{path}"
    if body is not None:
        message += body
    return message.encode("utf-8")


def decode_secret(secret: str) -> bytes:
    """
    Decode a URL-safe base64 API secret.

    Secrets that are not strict URL-safe base64 are used as their raw UTF-8
    bytes instead. This fallback is intentional and never raises.
    """
    try:
        if "+" in secret or "/" in secret:
            raise binascii.Error("standard alphabet characters")
        return base64.b64decode(secret.encode("ascii"), altchars=b"-_", validate=True)
    except (binascii.Error, UnicodeEncodeError):
        logger.debug("API secret is not URL-safe base64, using raw bytes")
        return secret.encode("utf-8")


def sign_request(
    secret: str,
    timestamp: int,
    method: str,
    path: str,
    body: Optional[str] = None
) -> str:
    """
    Build the L2 request signature.

    Args:
        secret: API secret (URL-safe base64, or raw text)
        timestamp: Unix timestamp in seconds
        method: HTTP method
        path: Request path
        body: Request body (JSON string) or None

    Returns:
        Base64 tag with '+' -> '-' and '/' -> '_', padding retained
    """
    mac = hmac.new(
        decode_secret(secret),
        canonical_message(timestamp, method, path, body),
        hashlib.sha256
    )
    return base64.b64encode(mac.digest()).decode("ascii").translate(_URLSAFE_TRANSLATION)


def verify_request(
    secret: str,
    timestamp: int,
    method: str,
    path: str,
    body: Optional[str],
    candidate: str
) -> bool:
    """
    Check a request signature in constant time.

    Returns:
        True if candidate matches the recomputed signature
    """
    if not isinstance(candidate, str):
        return False
    expected = sign_request(secret, timestamp, method, path, body)
    return hmac.compare_digest(expected.encode("utf-8"), candidate.encode("utf-8"))


class RequestSigner:
    """
    Signs requests with one API secret.

    SECURITY: The secret is never included in repr.
    """

    __slots__ = ("_secret",)

    def __init__(self, secret: str):
        """
        Args:
            secret: API secret (URL-safe base64, or raw text)
        """
        if not isinstance(secret, str):
            raise TypeError(f"API secret must be string, got {type(secret)}")
        self._secret = secret

    def message(self, timestamp: int, method: str, path: str, body: Optional[str] = None) -> bytes:
        return canonical_message(timestamp, method, path, body)

    def sign(self, timestamp: int, method: str, path: str, body: Optional[str] = None) -> str:
        return sign_request(self._secret, timestamp, method, path, body)

    def verify(
        self,
        timestamp: int,
        method: str,
        path: str,
        body: Optional[str],
        candidate: str
    ) -> bool:
        return verify_request(self._secret, timestamp, method, path, body, candidate)

    def __repr__(self) -> str:
        return "RequestSigner(secret=[REDACTED])"
