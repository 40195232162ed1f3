"""Network profiles.

Each profile names the discovery API, the message broker and the payments
contract of one network. A profile is selected once at startup and passed
explicitly to whatever needs contract or broker addresses.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..core.exceptions import ConfigException


@dataclass(frozen=True)
class NetworkDefinition:
    """Parameters describing a particular network."""

    discovery_api_address: str
    broker_address: str
    payments_contract_address: str

    def to_dict(self) -> dict[str, str]:
        return {
            "discovery_api_address": self.discovery_api_address,
            "broker_address": self.broker_address,
            "payments_contract_address": self.payments_contract_address,
        }


# Test network (currently the default network)
TESTNET = NetworkDefinition(
    discovery_api_address="https://testnet-api.mysterium.network/v1",
    broker_address="testnet-broker.mysterium.network",
    payments_contract_address="0x617ad5e514e8117Bb6F18E68FA65cc479483df88",
)

# Local network: expects discovery and broker services on localhost
LOCALNET = NetworkDefinition(
    discovery_api_address="http://localhost/v1",
    broker_address="localhost",
    payments_contract_address="<undefined yet>",
)

DEFAULT_NETWORK = TESTNET

NETWORKS: dict[str, NetworkDefinition] = {
    "testnet": TESTNET,
    "localnet": LOCALNET,
}


def get_network_definition(name: str) -> NetworkDefinition:
    """Look up a network profile by name (case-insensitive).

    Raises:
        ConfigException: If no profile has that name.
    """
    try:
        return NETWORKS[name.strip().lower()]
    except KeyError:
        known = ", ".join(sorted(NETWORKS))
        raise ConfigException(f"Unknown network '{name}' (expected one of: {known})") from None
