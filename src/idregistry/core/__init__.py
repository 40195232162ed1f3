"""idregistry core - shared exceptions, settings and logging."""

from .exceptions import (
    ConfigException,
    IdRegistryException,
    NotFoundError,
    ValidationException,
)

__all__ = [
    "ConfigException",
    "IdRegistryException",
    "NotFoundError",
    "ValidationException",
]
