"""
Configuration management for CLOB authentication.

Loads settings from environment variables with validation.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


POLYGON_CHAIN_ID = 137
AMOY_CHAIN_ID = 80002

CLOB_DOMAIN_NAME = "ClobAuthDomain"
CLOB_DOMAIN_VERSION = "1"
CLOB_AUTH_MESSAGE = "This message attests that I control the given wallet"


class ClobAuthSettings(BaseSettings):
    """
    CLOB authentication settings.

    Loads from environment variables with CLOB_AUTH_ prefix.
    """
    model_config = SettingsConfigDict(
        env_prefix="CLOB_AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Chain / EIP-712 domain
    chain_id: int = Field(default=POLYGON_CHAIN_ID, ge=1, description="EIP-712 domain chain ID")
    domain_name: str = Field(default=CLOB_DOMAIN_NAME, description="EIP-712 domain name")
    domain_version: str = Field(default=CLOB_DOMAIN_VERSION, description="EIP-712 domain version")
    attestation_message: str = Field(
        default=CLOB_AUTH_MESSAGE,
        description="Text signed inside the ClobAuth struct"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_json: bool = Field(default=False, description="Emit JSON formatted logs")

    def __repr__(self) -> str:
        """Safe repr without sensitive data."""
        return (
            f"ClobAuthSettings("
            f"chain_id={self.chain_id}, "
            f"domain_name={self.domain_name}, "
            f"domain_version={self.domain_version}"
            ")"
        )


def get_settings() -> ClobAuthSettings:
    """
    Get CLOB authentication settings.

    Returns:
        Validated settings instance
    """
    return ClobAuthSettings()
