"""Core configuration - centralized config for the idregistry package.

All environment-based configuration should flow through this module.
This provides a single source of truth and consistent defaults.

Usage:
    from idregistry.core.config import get_config
    config = get_config()

    # Access settings
    network = config.network_definition
    log_level = config.log_level
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..network.definitions import NetworkDefinition, get_network_definition
from .exceptions import ConfigException


class CoreSettings(BaseSettings):
    """Core configuration settings for idregistry.

    Settings can be configured via environment variables with the
    IDREGISTRY_ prefix, or through a ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_prefix="IDREGISTRY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # ==========================================================================
    # NETWORK SETTINGS
    # ==========================================================================

    network: str = Field(
        default="testnet",
        description="Network profile: 'testnet' or 'localnet'",
        validation_alias="IDREGISTRY_NETWORK",
    )
    rpc_url: str | None = Field(
        default=None,
        description="Ethereum JSON-RPC endpoint used for registration status lookups",
        validation_alias="IDREGISTRY_RPC_URL",
    )

    # ==========================================================================
    # IDENTITY SETTINGS
    # ==========================================================================

    identity_private_keys: list[str] = Field(
        default=[],
        description="Hex secp256k1 private keys of identities this node can sign for",
        validation_alias="IDREGISTRY_IDENTITY_PRIVATE_KEYS",
    )

    # ==========================================================================
    # LOGGING SETTINGS
    # ==========================================================================

    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
        validation_alias="IDREGISTRY_LOG_LEVEL",
    )
    log_format: str = Field(
        default="",
        description="Log format: 'json', 'text', or '' (auto-detect)",
        validation_alias="IDREGISTRY_LOG_FORMAT",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (optional)",
        validation_alias="IDREGISTRY_LOG_FILE",
    )

    @field_validator("network")
    @classmethod
    def validate_network(cls, value: str) -> str:
        try:
            get_network_definition(value)
        except ConfigException as e:
            raise ValueError(e.message) from e
        return value.strip().lower()

    # ==========================================================================
    # COMPUTED PROPERTIES
    # ==========================================================================

    @property
    def network_definition(self) -> NetworkDefinition:
        """Resolve the selected network profile."""
        return get_network_definition(self.network)


# ==========================================================================
# GLOBAL CONFIG INSTANCE (lazy loaded)
# ==========================================================================

_config: CoreSettings | None = None


def get_config() -> CoreSettings:
    """Get the global configuration instance.

    Returns:
        The singleton CoreSettings instance.
    """
    global _config
    if _config is None:
        _config = CoreSettings()
    return _config


def clear_config_cache() -> None:
    """Clear the config cache. Useful for testing."""
    global _config
    _config = None
