"""Mini README: Registry of budget client implementations.

Structure:
    * UnknownBudgetClient - raised for identifiers nobody registered.
    * BudgetClientRegistry - maps identifiers to ``BudgetClient`` classes.

``ACTUAL_CLIENT`` names the implementation the application factory creates.
Built-in providers register on import of ``actual_bridge.client``.
"""

from __future__ import annotations

from typing import Dict, Iterable, Type

from .base import BudgetClient
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


class UnknownBudgetClient(KeyError):
    """No client class is registered under the requested identifier."""


class BudgetClientRegistry:
    """Simple registry for mapping client identifiers to classes."""

    def __init__(self) -> None:
        self._clients: Dict[str, Type[BudgetClient]] = {}

    def register(self, client: Type[BudgetClient]) -> Type[BudgetClient]:
        """Register a client class; returns it so it can be used as a decorator."""

        identifier = client.client_name.lower()
        LOGGER.debug("Registering budget client '%s'", identifier)
        self._clients[identifier] = client
        return client

    def available_clients(self) -> Iterable[str]:
        return sorted(self._clients.keys())

    def create(self, identifier: str) -> BudgetClient:
        """Instantiate the client matching the identifier."""

        client_cls = self._clients.get(identifier.lower())
        if not client_cls:
            raise UnknownBudgetClient(f"Unknown budget client '{identifier}'")
        LOGGER.info("Creating budget client '%s'", identifier)
        return client_cls()


REGISTRY = BudgetClientRegistry()
