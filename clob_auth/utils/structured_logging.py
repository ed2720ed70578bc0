"""
Log sanitizing for credential-bearing code paths.

Key material and API secrets pass through this package constantly; the filter
here guarantees they are masked before a record is emitted.
"""

import logging
import re


class CredentialRedactionFilter(logging.Filter):
    """
    Security filter that redacts credentials from log messages.

    - Redacts secp256k1 private keys (optional 0x followed by 64 hex chars)
    - Redacts API secrets and passphrases given as key=value / key: value
    - Redacts long base64 strings

    Usage:
        >>> handler = logging.StreamHandler()
        >>> handler.addFilter(CredentialRedactionFilter())
        >>> logger.addHandler(handler)
    """

    # Addresses are 40 hex chars and signatures 130, so 64 is unambiguous
    # once bounded on both sides.
    PRIVATE_KEY_PATTERN = re.compile(r'(?<![0-9a-fA-Fx])(?:0x)?[0-9a-fA-F]{64}(?![0-9a-fA-F])')
    API_SECRET_PATTERN = re.compile(
        r'((?:secret|passphrase|password)["\']?\s*[:=]\s*["\']?)[A-Za-z0-9+/_\-=]{8,}["\']?',
        re.IGNORECASE
    )
    BASE64_SECRET_PATTERN = re.compile(r'[A-Za-z0-9+/_\-]{40,}={0,2}')

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Redact credentials from log record.

        Args:
            record: Log record to filter

        Returns:
            Always True (record is never filtered out, just sanitized)
        """
        if record.msg:
            record.msg = self.redact(str(record.msg))

        if record.args:
            if isinstance(record.args, dict):
                record.args = {
                    k: self.redact(str(v))
                    for k, v in record.args.items()
                }
            elif isinstance(record.args, tuple):
                record.args = tuple(
                    self.redact(str(arg))
                    for arg in record.args
                )

        if record.exc_text:
            record.exc_text = self.redact(record.exc_text)

        return True

    def redact(self, text: str) -> str:
        """
        Redact all credential patterns from text.

        Args:
            text: Text to redact

        Returns:
            Text with credentials redacted
        """
        if not text:
            return text

        text = self.PRIVATE_KEY_PATTERN.sub('0x[REDACTED]', text)
        text = self.API_SECRET_PATTERN.sub(r'\1[REDACTED]', text)

        def redact_base64(match):
            b64 = match.group(0)
            # hex-only runs are addresses, hashes or signatures
            if re.fullmatch(r'(?:0x)?[0-9a-fA-F]+', b64):
                return b64
            return b64[:8] + '...[REDACTED]'

        return self.BASE64_SECRET_PATTERN.sub(redact_base64, text)
