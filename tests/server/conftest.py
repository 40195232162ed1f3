"""Server-specific test fixtures."""

from __future__ import annotations

import pytest
from eth_keys import keys
from starlette.testclient import TestClient

from idregistry.identity.models import IdentityAddress
from idregistry.identity.registration_data import InMemoryKeystore, KeystoreRegistrationDataProvider
from idregistry.identity.registry import InMemoryIdentityRegistry
from idregistry.identity.resolver import RegistrationStatusResolver
from idregistry.server.app import create_app
from idregistry.server.config import ServerSettings


@pytest.fixture
def clean_server_settings():
    """Reset server settings between tests."""
    import idregistry.server.config as config_module

    config_module._settings = None
    yield
    config_module._settings = None


@pytest.fixture(autouse=True)
def clean_metrics():
    """Give each test a fresh metrics collector."""
    import idregistry.server.metrics as metrics_module

    metrics_module._metrics_collector = None
    yield
    metrics_module._metrics_collector = None


@pytest.fixture
def server_settings(clean_env, clean_server_settings) -> ServerSettings:
    return ServerSettings()


@pytest.fixture
def signing_key() -> keys.PrivateKey:
    return keys.PrivateKey(b"\x42" * 32)


@pytest.fixture
def signing_identity(signing_key) -> IdentityAddress:
    return IdentityAddress(signing_key.public_key.to_canonical_address())


@pytest.fixture
def registry() -> InMemoryIdentityRegistry:
    return InMemoryIdentityRegistry()


@pytest.fixture
def resolver(registry, signing_key) -> RegistrationStatusResolver:
    provider = KeystoreRegistrationDataProvider(InMemoryKeystore([signing_key]))
    return RegistrationStatusResolver(registry, provider)


@pytest.fixture
def client(server_settings, resolver) -> TestClient:
    """Test client backed by in-memory collaborators."""
    return TestClient(create_app(server_settings, resolver))
