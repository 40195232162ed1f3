# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Registration data provisioning.

For an identity the node holds a secp256k1 key for, the provider returns
the public key split into two 32-byte halves and a signature over
``keccak256(part1 || part2)`` made with the identity's own key. The payments
contract recovers the signer from that signature and checks it against the
address derived from the submitted public key.

Key storage is pluggable through :class:`Keystore`. This module only reads
keys that have already been provisioned; it never creates or exports them.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from eth_keys import keys
from eth_keys.exceptions import ValidationError as EthKeysValidationError
from eth_utils import keccak

from ..core.exceptions import ConfigException, NotFoundError, ValidationException
from .encoding import decode_bytes
from .models import (
    IdentityAddress,
    PublicKeyParts,
    RegistrationData,
    SignatureParts,
)

logger = logging.getLogger(__name__)

PRIVATE_KEY_LENGTH = 32

# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class IdentityNotFoundError(NotFoundError):
    """Raised when no private key is held for an identity."""

    def __init__(self, identity: IdentityAddress):
        super().__init__("Identity", identity.hex)
        self.identity = identity


# ---------------------------------------------------------------------------
# Provider protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class RegistrationDataProvider(Protocol):
    """Produces the registration payload for an identity.

    Implementations return fully populated :class:`RegistrationData` or
    raise; they must not return partial data.
    """

    def provide_registration_data(self, identity: IdentityAddress) -> RegistrationData: ...


# ---------------------------------------------------------------------------
# Keystore
# ---------------------------------------------------------------------------


class Keystore(Protocol):
    """Read-only access to identity private keys."""

    def get_private_key(self, identity: IdentityAddress) -> keys.PrivateKey: ...
    def list_identities(self) -> list[IdentityAddress]: ...


class InMemoryKeystore:
    """Keys held in process memory, indexed by derived address."""

    def __init__(self, private_keys: Iterable[keys.PrivateKey] = ()) -> None:
        self._keys: dict[IdentityAddress, keys.PrivateKey] = {}
        self._lock = threading.Lock()
        for private_key in private_keys:
            self.add(private_key)

    @classmethod
    def from_hex_keys(cls, hex_keys: Iterable[str]) -> InMemoryKeystore:
        """Build a keystore from hex-encoded 32-byte private keys.

        Raises:
            ConfigException: If any key is malformed.
        """
        private_keys = []
        for index, hex_key in enumerate(hex_keys):
            try:
                raw = decode_bytes(hex_key.strip(), PRIVATE_KEY_LENGTH)
                private_keys.append(keys.PrivateKey(raw))
            except (ValidationException, EthKeysValidationError) as e:
                # Never echo key material
                raise ConfigException(f"Invalid identity private key at position {index}") from e
        return cls(private_keys)

    def add(self, private_key: keys.PrivateKey) -> IdentityAddress:
        identity = IdentityAddress(private_key.public_key.to_canonical_address())
        with self._lock:
            self._keys[identity] = private_key
        return identity

    def get_private_key(self, identity: IdentityAddress) -> keys.PrivateKey:
        with self._lock:
            private_key = self._keys.get(identity)
        if private_key is None:
            raise IdentityNotFoundError(identity)
        return private_key

    def list_identities(self) -> list[IdentityAddress]:
        with self._lock:
            return list(self._keys)


# ---------------------------------------------------------------------------
# Keystore-backed provider
# ---------------------------------------------------------------------------


def registration_message(public_key: PublicKeyParts) -> bytes:
    """Bytes the identity signs to prove ownership of its public key."""
    return public_key.to_bytes()


class KeystoreRegistrationDataProvider:
    """Signs registration data with keys from a :class:`Keystore`."""

    def __init__(self, keystore: Keystore) -> None:
        self._keystore = keystore

    def provide_registration_data(self, identity: IdentityAddress) -> RegistrationData:
        """Build the registration payload for ``identity``.

        Raises:
            IdentityNotFoundError: If the keystore has no key for the identity.
        """
        private_key = self._keystore.get_private_key(identity)

        public_key = PublicKeyParts.from_public_key(private_key.public_key.to_bytes())
        message_hash = keccak(registration_message(public_key))
        signature = private_key.sign_msg_hash(message_hash)

        logger.debug(f"Signed registration data for {identity}")
        return RegistrationData(
            public_key=public_key,
            signature=SignatureParts.from_signature(signature.to_bytes()),
        )
