"""idregistry HTTP server.

Serves identity registration status over HTTP.

Usage:
    # Start the server
    idregistry-server --network testnet --rpc-url https://rpc.example

    # Or with uvicorn directly
    uvicorn idregistry.server.app:create_app --factory --port 4050
"""

from .app import build_resolver, create_app
from .config import ServerSettings, get_settings

__all__ = [
    "ServerSettings",
    "build_resolver",
    "create_app",
    "get_settings",
]
