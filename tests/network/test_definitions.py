"""Tests for network profiles."""

from __future__ import annotations

import pytest

from idregistry.core.exceptions import ConfigException
from idregistry.network.definitions import (
    DEFAULT_NETWORK,
    LOCALNET,
    NETWORKS,
    TESTNET,
    NetworkDefinition,
    get_network_definition,
)


class TestNetworkDefinitions:
    def test_testnet_values(self):
        assert TESTNET.discovery_api_address == "https://testnet-api.mysterium.network/v1"
        assert TESTNET.broker_address == "testnet-broker.mysterium.network"
        assert TESTNET.payments_contract_address == "0x617ad5e514e8117Bb6F18E68FA65cc479483df88"

    def test_localnet_values(self):
        assert LOCALNET.discovery_api_address == "http://localhost/v1"
        assert LOCALNET.broker_address == "localhost"
        assert LOCALNET.payments_contract_address == "<undefined yet>"

    def test_default_is_testnet(self):
        assert DEFAULT_NETWORK is TESTNET

    def test_immutable(self):
        with pytest.raises(AttributeError):
            TESTNET.broker_address = "elsewhere"  # type: ignore[misc]

    def test_to_dict(self):
        definition = NetworkDefinition("https://api", "broker", "0x00")
        assert definition.to_dict() == {
            "discovery_api_address": "https://api",
            "broker_address": "broker",
            "payments_contract_address": "0x00",
        }


class TestGetNetworkDefinition:
    @pytest.mark.parametrize("name", ["testnet", "TESTNET", " Testnet "])
    def test_case_insensitive(self, name):
        assert get_network_definition(name) is TESTNET

    def test_all_profiles_resolvable(self):
        for name, definition in NETWORKS.items():
            assert get_network_definition(name) is definition

    def test_unknown_network(self):
        with pytest.raises(ConfigException, match="Unknown network 'mainnet'") as exc_info:
            get_network_definition("mainnet")
        assert "localnet, testnet" in exc_info.value.message
