"""Identity registration status lookups.

:class:`IdentityRegistry` is the capability the resolver depends on. Two
implementations are provided:

- :class:`InMemoryIdentityRegistry` for tests and local development.
- :class:`ContractIdentityRegistry`, which calls the payments contract's
  ``IsRegistered(address)`` view function over JSON-RPC. The call is
  read-only; nothing is signed or broadcast.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Protocol, runtime_checkable

from web3 import Web3

from ..core.exceptions import ConfigException
from .models import IdentityAddress

logger = logging.getLogger(__name__)

# Only the view function we call
PAYMENTS_REGISTRY_ABI: list[dict[str, Any]] = [
    {
        "constant": True,
        "inputs": [{"name": "identity", "type": "address"}],
        "name": "IsRegistered",
        "outputs": [{"name": "", "type": "bool"}],
        "payable": False,
        "stateMutability": "view",
        "type": "function",
    },
]

DEFAULT_RPC_TIMEOUT = 10.0


@runtime_checkable
class IdentityRegistry(Protocol):
    """Answers whether an identity is registered.

    Implementations must be safe to call repeatedly and must not change any
    state. Errors are raised as exceptions of any type.
    """

    def is_registered(self, identity: IdentityAddress) -> bool: ...


class InMemoryIdentityRegistry:
    """Simple in-memory implementation of :class:`IdentityRegistry`."""

    def __init__(self, registered: set[IdentityAddress] | None = None) -> None:
        self._registered: set[IdentityAddress] = set(registered or ())
        self._lock = threading.Lock()

    def is_registered(self, identity: IdentityAddress) -> bool:
        with self._lock:
            return identity in self._registered

    def register(self, identity: IdentityAddress) -> None:
        with self._lock:
            self._registered.add(identity)

    def unregister(self, identity: IdentityAddress) -> None:
        with self._lock:
            self._registered.discard(identity)


class ContractIdentityRegistry:
    """Registration status read from the payments smart contract.

    Args:
        contract_address: Address of the payments contract.
        rpc_url: Ethereum JSON-RPC endpoint. Ignored when ``w3`` is given.
        w3: Pre-built Web3 instance.
        timeout: HTTP timeout in seconds for each RPC request.

    Raises:
        ConfigException: If the contract address is malformed or neither
            ``rpc_url`` nor ``w3`` is supplied.
    """

    def __init__(
        self,
        contract_address: str,
        rpc_url: str | None = None,
        *,
        w3: Web3 | None = None,
        timeout: float = DEFAULT_RPC_TIMEOUT,
    ) -> None:
        # Lowercase first: is_address rejects mixed case with a bad checksum
        if not Web3.is_address(contract_address.lower()):
            raise ConfigException(f"Invalid payments contract address: {contract_address}")
        if w3 is None:
            if not rpc_url:
                raise ConfigException(
                    "An RPC URL is required for contract registration lookups",
                    missing_vars=["IDREGISTRY_RPC_URL"],
                )
            w3 = Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": timeout}))

        self.contract_address = Web3.to_checksum_address(contract_address.lower())
        self._w3 = w3
        self._contract = w3.eth.contract(address=self.contract_address, abi=PAYMENTS_REGISTRY_ABI)

    def is_registered(self, identity: IdentityAddress) -> bool:
        address = Web3.to_checksum_address(identity.hex)
        registered = self._contract.functions.IsRegistered(address).call()
        logger.debug(f"IsRegistered({identity}) on {self.contract_address} -> {registered}")
        return bool(registered)
