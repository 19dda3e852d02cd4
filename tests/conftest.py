"""Mini README: Shared fixtures for the Actual Bridge test-suite.

Structure:
    * FakeBudgetClient - in-memory ``BudgetClient`` recording every call.
    * settings - configured ``BridgeSettings`` rooted in ``tmp_path``.
    * fake_client / orchestrator - wired the way the app factory wires them.
"""

from __future__ import annotations

import asyncio
from datetime import date
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

import pytest

from actual_bridge.client import REGISTRY, BudgetClient
from actual_bridge.configuration import BridgeSettings, get_settings
from actual_bridge.readiness import ReadinessOrchestrator

BUDGETS: List[Dict[str, Any]] = [
    {
        "name": "Remote only",
        "groupId": "group-remote",
        "cloudFileId": "cloud-remote",
        "state": "remote",
    },
    {
        "name": "Household",
        "id": "household-1a2b",
        "groupId": "group-house",
        "cloudFileId": "cloud-house",
    },
]

ACCOUNTS: List[Dict[str, Any]] = [
    {"id": "acc-1", "name": "Checking", "offbudget": False, "closed": False},
    {"id": "acc-2", "name": "Savings", "offbudget": False, "closed": False},
]

TRANSACTIONS: List[Dict[str, Any]] = [
    {
        "id": "t1",
        "date": "2024-01-01",
        "amount": -1050,
        "account": "acc-1",
        "payee": "p1",
        "category": "c1",
        "notes": None,
        "imported_id": None,
        "transfer_id": None,
    },
    {
        "id": "t2",
        "date": "2024-01-31",
        "amount": 250000,
        "account": "acc-1",
        "payee": "p2",
        "category": None,
        "notes": 'Salary "January"',
        "imported_id": "bank-77",
        "transfer_id": None,
    },
    {
        "id": "t3",
        "date": "2024-02-01",
        "amount": -500,
        "account": "acc-1",
        "payee": "p3",
        "category": "c2",
        "notes": None,
        "imported_id": None,
        "transfer_id": None,
    },
    {
        "id": "t4",
        "date": "2024-01-10",
        "amount": 10000,
        "account": "acc-2",
        "payee": None,
        "category": None,
        "notes": None,
        "imported_id": None,
        "transfer_id": "t5",
    },
]


class FakeBudgetClient(BudgetClient):
    """Budget client double that serves canned data and records calls."""

    client_name = "fake"

    def __init__(
        self,
        budgets: Optional[Iterable[Dict[str, Any]]] = None,
        accounts: Optional[Iterable[Dict[str, Any]]] = None,
        transactions: Optional[Iterable[Dict[str, Any]]] = None,
        failing_downloads: Iterable[str] = (),
    ) -> None:
        super().__init__()
        self.budgets = [dict(budget) for budget in (BUDGETS if budgets is None else budgets)]
        self.accounts = [dict(account) for account in (ACCOUNTS if accounts is None else accounts)]
        self.transactions = [
            dict(row) for row in (TRANSACTIONS if transactions is None else transactions)
        ]
        self.failing_downloads = set(failing_downloads)
        self.fail_sync = False
        self.calls: List[Tuple[Any, ...]] = []

    def call_names(self) -> List[str]:
        return [call[0] for call in self.calls]

    async def init(self, *, server_url: str, password: str, data_directory: Path) -> None:
        self.calls.append(("init", server_url, data_directory))

    async def list_budgets(self) -> List[Dict[str, Any]]:
        self.calls.append(("list_budgets",))
        return [dict(budget) for budget in self.budgets]

    async def download(self, remote_id: str, *, password: Optional[str] = None) -> None:
        self.calls.append(("download", remote_id, password))
        await asyncio.sleep(0)
        if remote_id in self.failing_downloads:
            raise RuntimeError(f"download of {remote_id} refused")

    async def load(self, budget_id: str, *, password: Optional[str] = None) -> None:
        self.calls.append(("load", budget_id, password))

    async def sync(self) -> None:
        self.calls.append(("sync",))
        if self.fail_sync:
            raise ConnectionError("sync server unreachable")

    async def list_accounts(self) -> List[Dict[str, Any]]:
        self.calls.append(("list_accounts",))
        return [dict(account) for account in self.accounts]

    async def list_transactions(self, account_id: str, start: date, end: date) -> List[Dict[str, Any]]:
        self.calls.append(("list_transactions", account_id, start, end))
        return [
            dict(row)
            for row in self.transactions
            if row["account"] == account_id and start <= date.fromisoformat(row["date"]) <= end
        ]

    async def shutdown(self) -> None:
        self.calls.append(("shutdown",))


REGISTRY.register(FakeBudgetClient)


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings(tmp_path: Path) -> BridgeSettings:
    return BridgeSettings(
        _env_file=None,
        NODE_ENV="development",
        ACTUAL_SERVER_URL="http://actual.test:5006",
        ACTUAL_PASSWORD="server-secret",
        ACTUAL_BUDGET_ID=None,
        ACTUAL_FILE_PASSWORD="file-secret",
        ACTUAL_DATA_DIR=tmp_path / "actual-data",
        ACTUAL_CLIENT="fake",
    )


@pytest.fixture
def fake_client() -> FakeBudgetClient:
    return FakeBudgetClient()


@pytest.fixture
def orchestrator(fake_client: FakeBudgetClient, settings: BridgeSettings) -> ReadinessOrchestrator:
    return ReadinessOrchestrator.from_settings(fake_client, settings)


@pytest.fixture
def make_client():
    """Return the fake client class so tests can build variants."""

    return FakeBudgetClient
