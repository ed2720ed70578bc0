"""
Test credential redaction in logs and error messages.

Private keys and API secrets must never reach a log sink, whether through
messages, format args, or reprs of the objects that carry them.
"""

import logging
import logging.config
from io import StringIO

import pytest

from clob_auth.auth.hmac_signer import RequestSigner
from clob_auth.auth.key_material import KeyMaterial
from clob_auth.config import ClobAuthSettings
from clob_auth.logging_config import build_logging_config, get_logger, setup_logging
from clob_auth.utils.structured_logging import CredentialRedactionFilter

from .conftest import TEST_ADDRESS, TEST_PRIVATE_KEY


@pytest.fixture
def capture():
    logger = logging.getLogger("test_clob_auth_redaction")
    logger.setLevel(logging.DEBUG)
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter("%(message)s"))
    handler.addFilter(CredentialRedactionFilter())
    logger.addHandler(handler)
    yield logger, stream
    logger.removeHandler(handler)


class TestCredentialRedactionFilter:
    """Credential redaction in logging."""

    def test_redacts_private_key(self, capture):
        logger, stream = capture
        logger.info(f"Loaded key {TEST_PRIVATE_KEY}")
        output = stream.getvalue()
        assert TEST_PRIVATE_KEY[2:] not in output
        assert "0x[REDACTED]" in output

    def test_redacts_unprefixed_key_in_args(self, capture):
        logger, stream = capture
        logger.info("Loaded key %s", TEST_PRIVATE_KEY[2:])
        assert TEST_PRIVATE_KEY[2:] not in stream.getvalue()

    def test_redacts_api_secret(self, capture):
        logger, stream = capture
        logger.info("API credentials: secret=c29tZXNlY3JldA== passphrase: hunter2hunter2")
        output = stream.getvalue()
        assert "c29tZXNlY3JldA==" not in output
        assert "hunter2hunter2" not in output
        assert "secret=[REDACTED]" in output

    def test_preserves_addresses_and_signatures(self, capture):
        logger, stream = capture
        signature = "0x" + "ab" * 65
        logger.info(f"Signed for {TEST_ADDRESS}: {signature}")
        output = stream.getvalue()
        assert TEST_ADDRESS in output
        assert signature in output

    def test_preserves_normal_messages(self, capture):
        logger, stream = capture
        logger.info("Created L2 headers for GET /orders")
        assert stream.getvalue().strip() == "Created L2 headers for GET /orders"

    def test_repr_of_secret_holders_is_safe(self, capture):
        logger, stream = capture
        logger.info("%r %r", KeyMaterial.from_hex(TEST_PRIVATE_KEY), RequestSigner("c29tZXNlY3JldA=="))
        output = stream.getvalue()
        assert TEST_PRIVATE_KEY[2:] not in output
        assert "c29tZXNlY3JldA==" not in output


class TestLoggingConfig:
    """dictConfig construction."""

    def test_every_handler_redacts(self, tmp_path):
        config = build_logging_config(level="debug", log_file=str(tmp_path / "auth.log"))
        for handler in config["handlers"].values():
            assert "redact_credentials" in handler["filters"]
        assert config["loggers"]["clob_auth"]["level"] == "DEBUG"
        assert "file" in config["loggers"]["clob_auth"]["handlers"]

    def test_json_format(self):
        config = build_logging_config(json_format=True)
        assert all(h["formatter"] == "json" for h in config["handlers"].values())

    def test_default_config_not_mutated(self, tmp_path):
        build_logging_config(level="debug", log_file=str(tmp_path / "x.log"))
        fresh = build_logging_config()
        assert "file" not in fresh["handlers"]
        assert fresh["loggers"]["clob_auth"]["level"] == "INFO"

    def test_get_logger_namespace(self):
        assert get_logger("auth").name == "clob_auth.auth"

    def test_setup_from_settings(self, monkeypatch):
        applied = []
        monkeypatch.setattr(logging.config, "dictConfig", applied.append)
        settings = ClobAuthSettings(_env_file=None, log_level="debug", log_json=True)

        setup_logging(settings=settings)

        config = applied[0]
        assert config["loggers"]["clob_auth"]["level"] == "DEBUG"
        assert all(h["formatter"] == "json" for h in config["handlers"].values())

    def test_explicit_arguments_override_settings(self, monkeypatch):
        applied = []
        monkeypatch.setattr(logging.config, "dictConfig", applied.append)
        settings = ClobAuthSettings(_env_file=None, log_level="debug", log_json=True)

        setup_logging(level="error", json_format=False, settings=settings)

        config = applied[0]
        assert config["loggers"]["clob_auth"]["level"] == "ERROR"
        assert all(h["formatter"] == "standard" for h in config["handlers"].values())
