"""Identity registration API endpoints.

Provides REST endpoints for identity registration:
- GET /identities/{id}/registration - Registration status, plus the data
  needed to register when the identity is not registered yet
"""

from __future__ import annotations

import asyncio
import logging

from starlette.requests import Request
from starlette.responses import JSONResponse

from ..identity.models import IdentityAddress, InvalidIdentityAddressError
from ..identity.resolver import RegistrationResolutionError, RegistrationStatusResolver
from .errors import (
    internal_error,
    invalid_format_error,
    missing_field_error,
    service_unavailable_error,
)
from .metrics import LOOKUP_ERROR, LOOKUP_REGISTERED, LOOKUP_UNREGISTERED, get_metrics_collector

logger = logging.getLogger(__name__)


async def identity_registration_endpoint(request: Request) -> JSONResponse:
    """Provide registration status for an identity.

    If the identity is not registered, also provides the public key parts and
    signature required to register it.

    Endpoint: GET /identities/{id}/registration

    Response (not registered):
    {
        "Registered": false,
        "PublicKey": {"Part1": "0x1321...", "Part2": "0x1321..."},
        "Signature": {"R": "0x1321...", "S": "0x1234...", "V": 27}
    }

    Response (registered):
    {
        "Registered": true
    }
    """
    identity_str = request.path_params.get("id")

    if not identity_str:
        return missing_field_error("id")

    try:
        identity = IdentityAddress.from_hex(identity_str)
    except InvalidIdentityAddressError:
        return invalid_format_error("id", "must be a hex encoded 20 byte address")

    resolver: RegistrationStatusResolver | None = getattr(request.app.state, "resolver", None)
    if resolver is None:
        return service_unavailable_error("Registration resolver")

    collector = get_metrics_collector()
    try:
        result = await asyncio.to_thread(resolver.resolve, identity)
    except RegistrationResolutionError as e:
        collector.record_lookup(LOOKUP_ERROR)
        return internal_error("Failed to resolve identity registration", exc=e)
    except Exception:
        collector.record_lookup(LOOKUP_ERROR)
        logger.exception(f"Error resolving registration for {identity}")
        return internal_error("Internal server error")

    collector.record_lookup(LOOKUP_REGISTERED if result.registered else LOOKUP_UNREGISTERED)
    return JSONResponse(result.to_dict())
