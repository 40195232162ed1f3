# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Registration status resolution.

:class:`RegistrationStatusResolver` combines an :class:`IdentityRegistry`
and a :class:`RegistrationDataProvider`:

1. Ask the registry whether the identity is registered. If it is, answer
   immediately; the data provider is never consulted.
2. Otherwise ask the provider for registration data, require both the
   public key and the signature, and encode them for the wire.

Registration status can change between the two calls. The result reflects
the status observed at step 1.

The resolver holds no mutable state and may be shared between concurrent
requests. It neither retries nor imposes timeouts; both belong to the
collaborators or the caller.
"""

from __future__ import annotations

import logging

from ..core.exceptions import IdRegistryException
from .encoding import encode_registration_data
from .models import IdentityAddress, RegistrationStatusResult
from .registration_data import RegistrationDataProvider
from .registry import IdentityRegistry

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class RegistrationResolutionError(IdRegistryException):
    """Base class for failures while resolving registration status."""

    def __init__(self, message: str, identity: IdentityAddress):
        super().__init__(message, {"identity": identity.hex})
        self.identity = identity


class RegistryQueryFailed(RegistrationResolutionError):  # noqa: N818
    """The registry could not answer the status query."""


class DataProvisioningFailed(RegistrationResolutionError):  # noqa: N818
    """The data provider could not produce registration data."""


class IncompleteRegistrationData(RegistrationResolutionError):  # noqa: N818
    """The data provider reported success but left out the key or signature."""


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------


class RegistrationStatusResolver:
    """Resolves the registration status of identities."""

    def __init__(
        self,
        registry: IdentityRegistry,
        data_provider: RegistrationDataProvider,
    ) -> None:
        self._registry = registry
        self._data_provider = data_provider

    @property
    def registry(self) -> IdentityRegistry:
        return self._registry

    @property
    def data_provider(self) -> RegistrationDataProvider:
        return self._data_provider

    def resolve(self, identity: IdentityAddress) -> RegistrationStatusResult:
        """Resolve registration status and, if unregistered, registration data.

        Args:
            identity: A well-formed identity address.

        Returns:
            ``registered=True`` with no payload, or ``registered=False`` with
            the encoded public key and signature.

        Raises:
            RegistryQueryFailed: The status query raised.
            DataProvisioningFailed: The data provider raised.
            IncompleteRegistrationData: The provider returned data without a
                public key or without a signature.
        """
        try:
            registered = self._registry.is_registered(identity)
        except Exception as e:  # Intentionally broad: registry errors are opaque
            logger.warning(f"Registration status query failed for {identity}: {e}")
            raise RegistryQueryFailed(f"Failed to query registration status: {e}", identity) from e

        if registered:
            logger.debug(f"Identity {identity} is already registered")
            return RegistrationStatusResult.already_registered()

        try:
            data = self._data_provider.provide_registration_data(identity)
        except Exception as e:  # Intentionally broad: provider errors are opaque
            logger.warning(f"Registration data provisioning failed for {identity}: {e}")
            raise DataProvisioningFailed(f"Failed to provide registration data: {e}", identity) from e

        missing = [
            name
            for name, value in (("public_key", data.public_key), ("signature", data.signature))
            if value is None
        ]
        if missing:
            logger.error(f"Data provider returned incomplete registration data for {identity}: missing {missing}")
            error = IncompleteRegistrationData(
                f"Registration data is missing: {', '.join(missing)}",
                identity,
            )
            error.details["missing"] = missing
            raise error

        logger.debug(f"Identity {identity} is not registered, returning registration data")
        return RegistrationStatusResult.not_registered(encode_registration_data(data))
