"""Mini README: Budget client backed by the ``actualpy`` SDK.

Structure:
    * ActualPyClient - ``BudgetClient`` implementation wrapping ``actual.Actual``.

The SDK is synchronous and keeps its SQLite session bound to the thread
that created it, so every SDK call is funnelled through a single worker
thread. Budgets are stored under ``<data_directory>/<groupId>``; the
``metadata.json`` shipped inside each downloaded file is read back to list
local budgets next to the remote ones, mirroring the listing of the
official JavaScript client.
"""

from __future__ import annotations

import asyncio
import functools
import json
import shutil
from concurrent.futures import ThreadPoolExecutor
from contextlib import ExitStack
from datetime import date, timedelta
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Set

from actual import Actual
from actual.queries import get_accounts, get_transactions

from ..base import BudgetClient, Record
from ..registry import REGISTRY
from ...logging_utils import get_logger

LOGGER = get_logger(__name__)

METADATA_FILE = "metadata.json"


class ActualPyClient(BudgetClient):
    """Drive an Actual server through ``actualpy`` on a dedicated thread."""

    client_name = "actualpy"

    def __init__(self) -> None:
        super().__init__()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="actualpy")
        self._server_url: Optional[str] = None
        self._password: Optional[str] = None
        self._data_directory: Optional[Path] = None
        self._server: Optional[Actual] = None
        self._budget: Optional[Actual] = None
        self._budget_stack = ExitStack()
        self._open_identifiers: Set[str] = set()

    async def _call(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, functools.partial(func, *args, **kwargs))

    async def init(self, *, server_url: str, password: str, data_directory: Path) -> None:
        self._server_url = server_url
        self._password = password
        self._data_directory = data_directory
        self._server = await self._call(Actual, base_url=server_url, password=password)
        LOGGER.info("Logged in to Actual server %s", server_url)

    async def list_budgets(self) -> List[Record]:
        return await self._call(self._list_budgets)

    async def download(self, remote_id: str, *, password: Optional[str] = None) -> None:
        await self._call(self._download, remote_id, password)

    async def load(self, budget_id: str, *, password: Optional[str] = None) -> None:
        await self._call(self._load, budget_id, password)

    async def sync(self) -> None:
        await self._call(lambda: self._require_budget().sync())

    async def list_accounts(self) -> List[Record]:
        return await self._call(self._list_accounts)

    async def list_transactions(self, account_id: str, start: date, end: date) -> List[Record]:
        return await self._call(self._list_transactions, account_id, start, end)

    async def shutdown(self) -> None:
        await super().shutdown()
        try:
            await self._call(self._close_budget)
        finally:
            self._executor.shutdown(wait=False)

    def metadata(self) -> Dict[str, str]:
        return {
            "client": self.client_name,
            "server": self._server_url or "not configured",
            "data_directory": str(self._data_directory) if self._data_directory else "unset",
        }

    # The helpers below run on the worker thread.

    def _require_server(self) -> Actual:
        if self._server is None:
            raise RuntimeError("Budget client used before init()")
        return self._server

    def _require_budget(self) -> Actual:
        if self._budget is None:
            raise RuntimeError("No budget is open; load one first")
        return self._budget

    def _remote_files(self) -> Iterable[Any]:
        return [remote for remote in self._require_server().list_user_files().data if not remote.deleted]

    def _list_budgets(self) -> List[Record]:
        remote_files = list(self._remote_files())
        remote_ids = {remote.file_id for remote in remote_files}
        local = list(self._local_budgets(remote_ids))
        local_ids = {entry.get("cloudFileId") for entry in local}
        remote = [
            {
                "name": remote.name,
                "groupId": remote.group_id,
                "cloudFileId": remote.file_id,
                "encryptKeyId": remote.encrypt_key_id,
                "state": "remote",
            }
            for remote in remote_files
            if remote.file_id not in local_ids
        ]
        return local + remote

    def _local_budgets(self, remote_ids: Set[str]) -> Iterable[Record]:
        if self._data_directory is None or not self._data_directory.is_dir():
            return
        for budget_dir in sorted(self._data_directory.iterdir()):
            metadata_path = budget_dir / METADATA_FILE
            if not metadata_path.is_file():
                continue
            try:
                metadata = json.loads(metadata_path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as error:
                LOGGER.warning("Skipping budget directory %s: unreadable %s (%s)", budget_dir, METADATA_FILE, error)
                continue
            if not isinstance(metadata, dict):
                LOGGER.warning("Skipping budget directory %s: %s is not an object", budget_dir, METADATA_FILE)
                continue
            cloud_file_id = metadata.get("cloudFileId")
            if cloud_file_id in remote_ids:
                state = "synced"
            elif cloud_file_id:
                state = "detached"
            else:
                state = "local"
            yield {
                "id": budget_dir.name,
                "name": metadata.get("budgetName", budget_dir.name),
                "groupId": metadata.get("groupId"),
                "cloudFileId": cloud_file_id,
                "state": state,
            }

    def _download(self, remote_id: str, password: Optional[str]) -> None:
        matches = [
            remote
            for remote in self._remote_files()
            if remote_id in (remote.file_id, remote.group_id)
        ]
        if not matches:
            raise LookupError(f"No budget on the server matches '{remote_id}'")
        remote = matches[0]
        target = self._data_directory / remote.group_id
        self._open(
            remote.file_id,
            target,
            password,
            identifiers={remote_id, remote.file_id, remote.group_id, target.name},
        )

    def _load(self, budget_id: str, password: Optional[str]) -> None:
        if budget_id in self._open_identifiers:
            LOGGER.debug("Budget '%s' already open", budget_id)
            return
        target = self._data_directory / budget_id
        metadata = json.loads((target / METADATA_FILE).read_text(encoding="utf-8"))
        cloud_file_id = metadata.get("cloudFileId")
        if not cloud_file_id:
            raise ValueError(f"Local budget '{budget_id}' is not linked to a server file")
        self._open(
            cloud_file_id,
            target,
            password,
            identifiers={budget_id, cloud_file_id, metadata.get("groupId") or budget_id},
        )

    def _open(
        self,
        file_id: str,
        target: Path,
        password: Optional[str],
        *,
        identifiers: Set[str],
    ) -> None:
        """Open ``file_id`` inside ``target``, fetching the latest copy from the server."""

        self._close_budget()
        existed = target.exists()
        stack = ExitStack()
        try:
            budget = stack.enter_context(
                Actual(
                    base_url=self._server_url,
                    password=self._password,
                    file=file_id,
                    encryption_password=password,
                    data_dir=target,
                )
            )
        except Exception:
            stack.close()
            if not existed:
                shutil.rmtree(target, ignore_errors=True)
            raise
        self._budget = budget
        self._budget_stack = stack
        self._open_identifiers = identifiers
        LOGGER.debug("Opened budget file %s in %s", file_id, target)

    def _close_budget(self) -> None:
        self._budget_stack.close()
        self._budget = None
        self._open_identifiers = set()

    def _list_accounts(self) -> List[Record]:
        return [
            {
                "id": account.id,
                "name": account.name,
                "offbudget": bool(account.offbudget),
                "closed": bool(account.closed),
            }
            for account in get_accounts(self._require_budget().session)
        ]

    def _list_transactions(self, account_id: str, start: date, end: date) -> List[Record]:
        session = self._require_budget().session
        account = next((entry for entry in get_accounts(session) if entry.id == account_id), None)
        if account is None:
            raise LookupError(f"Account '{account_id}' not found in the open budget")
        # get_transactions treats end_date as exclusive.
        rows = get_transactions(
            session,
            start_date=start,
            end_date=end + timedelta(days=1),
            account=account,
        )
        return [
            {
                "id": row.id,
                "date": row.get_date().isoformat(),
                "amount": row.amount,
                "account": row.acct,
                "payee": row.payee_id,
                "category": row.category_id,
                "notes": row.notes,
                "imported_id": row.financial_id,
                "transfer_id": row.transferred_id,
                "cleared": bool(row.cleared),
            }
            for row in rows
        ]


REGISTRY.register(ActualPyClient)
