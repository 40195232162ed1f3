"""Static network profiles (discovery API, broker, payments contract)."""

from idregistry.network.definitions import (
    DEFAULT_NETWORK,
    LOCALNET,
    NETWORKS,
    TESTNET,
    NetworkDefinition,
    get_network_definition,
)

__all__ = [
    "DEFAULT_NETWORK",
    "LOCALNET",
    "NETWORKS",
    "TESTNET",
    "NetworkDefinition",
    "get_network_definition",
]
