# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Command-line entry point for the idregistry server."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Any

from pydantic import ValidationError

from ..core.exceptions import ConfigException
from ..core.logging import configure_logging
from ..network.definitions import NETWORKS
from .config import ServerSettings

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Identity registration status server",
        prog="idregistry-server",
    )
    parser.add_argument("--host", help="Host to bind to (default: IDREGISTRY_HOST or 127.0.0.1)")
    parser.add_argument("--port", "-p", type=int, help="Port to bind to (default: IDREGISTRY_PORT or 4050)")
    parser.add_argument(
        "--network",
        "-n",
        choices=sorted(NETWORKS),
        help="Network profile (default: IDREGISTRY_NETWORK or testnet)",
    )
    parser.add_argument("--rpc-url", help="Ethereum JSON-RPC endpoint for registration lookups")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: IDREGISTRY_LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--log-format",
        choices=["json", "text"],
        help="Log format (default: auto-detect)",
    )
    return parser


def load_settings(args: argparse.Namespace) -> ServerSettings:
    """Build settings from the environment, overridden by CLI flags."""
    overrides: dict[str, Any] = {
        name: value
        for name, value in (
            ("host", args.host),
            ("port", args.port),
            ("network", args.network),
            ("rpc_url", args.rpc_url),
            ("log_level", args.log_level),
            ("log_format", args.log_format),
        )
        if value is not None
    }
    return ServerSettings(**overrides)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    import uvicorn

    from .app import create_app

    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args)
    except ValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    json_format = {"json": True, "text": False}.get(settings.log_format.lower())
    configure_logging(level=settings.log_level, json_format=json_format, log_file=settings.log_file)

    try:
        app = create_app(settings)
    except ConfigException as e:
        logger.error(f"Configuration error: {e.message}")
        return 2

    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
    return 0


if __name__ == "__main__":
    sys.exit(main())
