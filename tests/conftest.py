"""Global test fixtures for the idregistry test suite."""

from __future__ import annotations

import os

import pytest
from eth_keys import keys

from idregistry.identity.models import IdentityAddress, PublicKeyParts, RegistrationData, SignatureParts

# ============================================================================
# Environment Fixtures
# ============================================================================


@pytest.fixture
def clean_env(monkeypatch):
    """Remove all IDREGISTRY_ environment variables."""
    for key in list(os.environ.keys()):
        if key.startswith("IDREGISTRY_"):
            monkeypatch.delenv(key, raising=False)
    # Keep a developer's .env out of the tests
    monkeypatch.chdir(os.path.dirname(__file__))


@pytest.fixture
def clean_config():
    """Reset the core config singleton between tests."""
    import idregistry.core.config as config_module

    config_module._config = None
    yield
    config_module._config = None


# ============================================================================
# Identity Fixtures
# ============================================================================


def _identity(last_byte: int) -> IdentityAddress:
    return IdentityAddress(bytes(19) + bytes([last_byte]))


@pytest.fixture
def make_identity():
    """Factory for 0x000...00XX identities."""
    return _identity


@pytest.fixture
def identity() -> IdentityAddress:
    return _identity(2)


@pytest.fixture
def private_key() -> keys.PrivateKey:
    return keys.PrivateKey(b"\x01" * 32)


@pytest.fixture
def sample_registration_data() -> RegistrationData:
    """Registration data from the canonical example scenario."""
    return RegistrationData(
        public_key=PublicKeyParts(part1=bytes(32), part2=b"\x01" * 32),
        signature=SignatureParts(r=b"\xaa" * 32, s=b"\xbb" * 32, v=27),
    )
