"""Mini README: Ensure the budget client is initialised and a budget is open.

Structure:
    * ReadinessState - ``UNINITIALIZED -> SDK_READY -> FULLY_READY``.
    * LoadStrategy - one named way of materialising the selected budget.
    * ReadinessOrchestrator - owns the state and drives the client.

Every data endpoint awaits ``ensure_ready`` before touching the client. The
first successful call lists budgets, resolves the target, tries the load
strategies in order and runs one sync pass; later calls return at once.
Transitions are serialised with ``asyncio`` locks so concurrent requests
arriving during start-up share one attempt. A failed attempt leaves the
state untouched and the next request retries from where it stopped.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Awaitable, Callable, List, Optional

from ..budgets import BudgetDescriptor, resolve_budget
from ..client import BudgetClient
from ..configuration import BridgeSettings
from ..errors import BudgetLoadError, ConfigMissing, NoBudgetsFound
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


class ReadinessState(str, Enum):
    """Lifecycle of the shared budget client."""

    UNINITIALIZED = "uninitialized"
    SDK_READY = "sdk_ready"
    FULLY_READY = "fully_ready"


@dataclass(frozen=True, slots=True)
class LoadStrategy:
    """A labelled coroutine factory that materialises one budget."""

    label: str
    identifier: str
    run: Callable[[], Awaitable[None]]


class ReadinessOrchestrator:
    """Drive the budget client through initialisation, load and first sync."""

    def __init__(
        self,
        client: BudgetClient,
        *,
        server_url: Optional[str],
        password: Optional[str],
        data_directory: Path,
        preferred_budget_id: Optional[str] = None,
        file_password: Optional[str] = None,
    ) -> None:
        self.client = client
        self._server_url = server_url
        self._password = password
        self.data_directory = Path(data_directory)
        self.preferred_budget_id = preferred_budget_id
        self._file_password = file_password
        self._state = ReadinessState.UNINITIALIZED
        self._init_lock = asyncio.Lock()
        self._ready_lock = asyncio.Lock()
        self.active_budget: Optional[BudgetDescriptor] = None

    @classmethod
    def from_settings(cls, client: BudgetClient, settings: BridgeSettings) -> "ReadinessOrchestrator":
        return cls(
            client,
            server_url=settings.server_url,
            password=settings.password,
            data_directory=settings.data_directory,
            preferred_budget_id=settings.budget_id,
            file_password=settings.file_password,
        )

    @property
    def state(self) -> ReadinessState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is ReadinessState.FULLY_READY

    async def ensure_client(self) -> None:
        """Initialise the client once; a no-op when already at or past ``SDK_READY``."""

        if self._state is not ReadinessState.UNINITIALIZED:
            return
        async with self._init_lock:
            if self._state is not ReadinessState.UNINITIALIZED:
                return
            missing = [
                name
                for name, value in (
                    ("ACTUAL_SERVER_URL", self._server_url),
                    ("ACTUAL_PASSWORD", self._password),
                )
                if not value
            ]
            if missing:
                raise ConfigMissing(missing)
            self.data_directory.mkdir(parents=True, exist_ok=True)
            await self.client.init(
                server_url=self._server_url,
                password=self._password,
                data_directory=self.data_directory,
            )
            self._state = ReadinessState.SDK_READY
            LOGGER.info("Budget client initialised (%s)", self.client.metadata())

    async def ensure_ready(self) -> None:
        """Open the selected budget and sync it once; a no-op once fully ready."""

        if self.is_ready:
            return
        async with self._ready_lock:
            if self.is_ready:
                return
            await self.ensure_client()

            raw_budgets = await self.client.list_budgets()
            if not raw_budgets:
                raise NoBudgetsFound()
            descriptors = [BudgetDescriptor.from_raw(raw) for raw in raw_budgets]
            chosen = resolve_budget(descriptors, self.preferred_budget_id)
            LOGGER.info(
                "Selected budget name=%r id=%s groupId=%s cloudFileId=%s",
                chosen.name,
                chosen.id,
                chosen.group_id,
                chosen.cloud_file_id,
            )

            await self.materialise(chosen)
            await self.client.sync()

            self.active_budget = chosen
            self._state = ReadinessState.FULLY_READY

    def load_strategies(self, descriptor: BudgetDescriptor) -> List[LoadStrategy]:
        """Return the ordered ways of opening ``descriptor``."""

        if descriptor.id and (self.data_directory / descriptor.id).exists():
            return [LoadStrategy("local", descriptor.id, self._loader(descriptor.id))]

        strategies: List[LoadStrategy] = []
        if descriptor.group_id:
            strategies.append(
                LoadStrategy("groupId", descriptor.group_id, self._downloader(descriptor.group_id))
            )
        if descriptor.cloud_file_id:
            strategies.append(
                LoadStrategy(
                    "cloudFileId", descriptor.cloud_file_id, self._downloader(descriptor.cloud_file_id)
                )
            )
        return strategies

    async def materialise(self, descriptor: BudgetDescriptor) -> LoadStrategy:
        """Try each strategy in order, returning the first that succeeds."""

        strategies = self.load_strategies(descriptor)
        if not strategies:
            raise BudgetLoadError(
                f"Budget {descriptor.name!r} has no local copy and no remote identifier"
            )

        last_error: Optional[Exception] = None
        for strategy in strategies:
            try:
                await strategy.run()
            except Exception as error:
                last_error = error
                LOGGER.warning(
                    "Loading budget %r via %s (%s) failed: %s",
                    descriptor.name,
                    strategy.label,
                    strategy.identifier,
                    error,
                )
                continue
            LOGGER.info("Budget %r loaded via %s", descriptor.name, strategy.label)
            return strategy

        raise BudgetLoadError(
            f"Failed to load budget {descriptor.name!r}: {last_error}",
            last_error=last_error,
        ) from last_error

    def _loader(self, budget_id: str) -> Callable[[], Awaitable[None]]:
        async def load() -> None:
            await self.client.load(budget_id, password=self._file_password)

        return load

    def _downloader(self, remote_id: str) -> Callable[[], Awaitable[None]]:
        async def download_then_load() -> None:
            await self.client.download(remote_id, password=self._file_password)
            await self.client.load(remote_id, password=self._file_password)

        return download_then_load

    async def shutdown(self) -> None:
        """Release the client; failures are logged because the process is exiting."""

        if self._state is ReadinessState.UNINITIALIZED:
            return
        try:
            await self.client.shutdown()
        except Exception:  # pragma: no cover - best-effort release on exit
            LOGGER.exception("Budget client shutdown failed")
