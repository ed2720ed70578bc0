"""Shared fixtures for clob_auth tests."""

import pytest

from clob_auth.auth.key_material import KeyMaterial
from clob_auth.config import ClobAuthSettings

# Well-known test vector (web3.py docs); never holds funds
TEST_PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
TEST_ADDRESS = "0x2c7536e3605d9c16a7a3d7b1898e529396a65c23"


@pytest.fixture
def key() -> KeyMaterial:
    return KeyMaterial.from_hex(TEST_PRIVATE_KEY)


@pytest.fixture
def settings(monkeypatch) -> ClobAuthSettings:
    for name in ("CHAIN_ID", "DOMAIN_NAME", "DOMAIN_VERSION", "ATTESTATION_MESSAGE"):
        monkeypatch.delenv(f"CLOB_AUTH_{name}", raising=False)
    return ClobAuthSettings(_env_file=None)
