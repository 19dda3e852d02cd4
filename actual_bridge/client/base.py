"""Mini README: Abstract interface describing the budget sync capabilities.

Structure:
    * BudgetClient - async capability interface implemented by SDK wrappers.

The orchestrator and the web layer only ever talk to this interface, which
keeps the call ordering testable against an in-memory fake. Accounts,
transactions and raw budget listings are passed through as plain mappings
so responses can be serialised without knowing the SDK's models.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..logging_utils import get_logger

LOGGER = get_logger(__name__)

Record = Dict[str, Any]


class BudgetClient(ABC):
    """Base interface for Actual sync client integrations."""

    client_name: str = "generic"

    def __init__(self) -> None:
        LOGGER.debug("Initialising %s budget client", self.client_name)

    @abstractmethod
    async def init(self, *, server_url: str, password: str, data_directory: Path) -> None:
        """Log in to the server and remember where budgets are stored."""

    @abstractmethod
    async def list_budgets(self) -> List[Record]:
        """Return raw listing entries for local and remote budget files."""

    @abstractmethod
    async def download(self, remote_id: str, *, password: Optional[str] = None) -> None:
        """Materialise the remote budget identified by ``groupId`` or ``cloudFileId``."""

    @abstractmethod
    async def load(self, budget_id: str, *, password: Optional[str] = None) -> None:
        """Open a budget so subsequent queries run against it."""

    @abstractmethod
    async def sync(self) -> None:
        """Run one synchronisation pass for the open budget."""

    @abstractmethod
    async def list_accounts(self) -> List[Record]:
        """Return the accounts of the open budget."""

    @abstractmethod
    async def list_transactions(self, account_id: str, start: date, end: date) -> List[Record]:
        """Return transactions of ``account_id`` dated within ``[start, end]``."""

    async def shutdown(self) -> None:
        """Release sessions and worker resources."""

        LOGGER.debug("Shutting down %s budget client", self.client_name)

    def metadata(self) -> Dict[str, str]:
        """Return diagnostic metadata for log lines."""

        return {"client": self.client_name}
