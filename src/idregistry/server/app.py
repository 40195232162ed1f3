"""Starlette ASGI application for the idregistry HTTP server.

Serves identity registration status and registration data, plus health,
service info and Prometheus metrics.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import asynccontextmanager
from typing import Any

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from ..core.logging import correlation_context
from ..identity.registration_data import InMemoryKeystore, KeystoreRegistrationDataProvider
from ..identity.registry import ContractIdentityRegistry, IdentityRegistry, InMemoryIdentityRegistry
from ..identity.resolver import RegistrationStatusResolver
from .config import ServerSettings, get_settings
from .identity_endpoints import identity_registration_endpoint
from .metrics import MetricsMiddleware, metrics_endpoint

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Scope a correlation ID to each request.

    Reuses the caller's X-Request-ID when present and echoes it back.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        with correlation_context(request.headers.get(REQUEST_ID_HEADER)) as cid:
            response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = cid
        return response


def build_resolver(settings: ServerSettings) -> RegistrationStatusResolver:
    """Wire the resolver's collaborators from settings.

    Raises:
        ConfigException: If the network profile, RPC settings or identity
            keys are unusable.
    """
    network = settings.network_definition

    registry: IdentityRegistry
    if settings.rpc_url:
        registry = ContractIdentityRegistry(
            network.payments_contract_address,
            settings.rpc_url,
            timeout=settings.rpc_timeout,
        )
        logger.info(f"Registration status read from contract {registry.contract_address}")
    else:
        logger.warning(
            "IDREGISTRY_RPC_URL not set - using in-memory registry, every identity reports as unregistered"
        )
        registry = InMemoryIdentityRegistry()

    keystore = InMemoryKeystore.from_hex_keys(settings.identity_private_keys)
    logger.info(f"Keystore holds {len(keystore.list_identities())} identities")

    return RegistrationStatusResolver(registry, KeystoreRegistrationDataProvider(keystore))


async def health_endpoint(request: Request) -> JSONResponse:
    """Health check endpoint."""
    settings: ServerSettings = request.app.state.settings

    health_data: dict[str, Any] = {
        "status": "healthy",
        "server": settings.server_name,
        "version": settings.server_version,
    }

    if getattr(request.app.state, "resolver", None) is None:
        health_data["resolver"] = "not initialized"
        health_data["status"] = "degraded"

    status_code = 200 if health_data["status"] == "healthy" else 503
    return JSONResponse(health_data, status_code=status_code)


async def info_endpoint(request: Request) -> JSONResponse:
    """Service info and discovery endpoint."""
    settings: ServerSettings = request.app.state.settings
    network = settings.network_definition

    return JSONResponse(
        {
            "server": settings.server_name,
            "version": settings.server_version,
            "network": settings.network,
            "payments_contract_address": network.payments_contract_address,
            "discovery_api_address": network.discovery_api_address,
            "broker_address": network.broker_address,
            "endpoints": {
                "registration": "/identities/{id}/registration",
                "health": "/health",
                "metrics": "/metrics",
            },
        }
    )


@asynccontextmanager
async def lifespan(app: Starlette):
    """Application lifespan handler."""
    settings: ServerSettings = app.state.settings
    logger.info(
        f"Starting idregistry server on {settings.host}:{settings.port} (network: {settings.network})"
    )

    yield

    logger.info("idregistry server shutting down")


def create_app(
    settings: ServerSettings | None = None,
    resolver: RegistrationStatusResolver | None = None,
) -> Starlette:
    """Create the Starlette ASGI application.

    Args:
        settings: Server settings. Defaults to the global settings.
        resolver: Pre-built resolver. Built from settings when omitted.
    """
    settings = settings or get_settings()
    if resolver is None:
        resolver = build_resolver(settings)

    routes = [
        Route("/", info_endpoint, methods=["GET"]),
        Route("/health", health_endpoint, methods=["GET"]),
        Route("/identities/{id}/registration", identity_registration_endpoint, methods=["GET"]),
        Route("/metrics", metrics_endpoint, methods=["GET"]),
    ]

    middleware = [
        Middleware(
            CORSMiddleware,
            allow_origins=settings.allowed_origins,
            allow_methods=["GET", "OPTIONS"],
            allow_headers=["Content-Type", REQUEST_ID_HEADER],
            expose_headers=[REQUEST_ID_HEADER],
        ),
        Middleware(CorrelationIdMiddleware),
        Middleware(MetricsMiddleware),
    ]

    app = Starlette(
        routes=routes,
        middleware=middleware,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.resolver = resolver
    return app
