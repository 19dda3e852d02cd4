"""Mini README: FastAPI application exposing the Actual budget bridge.

Structure:
    * create_application - application factory wiring middleware and routes.
    * Routes - health, raw budget listing, budgets, accounts, transactions
      (JSON or CSV) and a manual sync trigger.

Each data route awaits the readiness orchestrator first, runs a sync pass so
answers reflect the server, then queries the budget client. The
orchestrator is created per application so tests can inject a fake client.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import date
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Query
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse

from .. import __version__
from ..accounts import find_account
from ..budgets import BudgetDescriptor
from ..client import REGISTRY, BudgetClient
from ..configuration import BridgeSettings, get_settings
from ..errors import QueryValidationError
from ..export import csv_filename, transactions_to_csv
from ..logging_utils import get_logger
from ..readiness import ReadinessOrchestrator
from .handlers import register_exception_handlers, upstream_errors
from .middleware import AccessLogMiddleware, SecurityHeadersMiddleware

LOGGER = get_logger(__name__)


def _parse_day(value: str, name: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as error:
        raise QueryValidationError(f"Parameter '{name}' must be a YYYY-MM-DD date") from error


def create_application(
    settings: Optional[BridgeSettings] = None,
    *,
    client: Optional[BudgetClient] = None,
    orchestrator: Optional[ReadinessOrchestrator] = None,
) -> FastAPI:
    """Create the FastAPI application with routes and dependencies."""

    settings = settings or get_settings()
    if orchestrator is None:
        client = client or REGISTRY.create(settings.client_backend)
        orchestrator = ReadinessOrchestrator.from_settings(client, settings)
    client = orchestrator.client

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        LOGGER.info("Actual bridge ready to serve (%s)", settings.environment)
        yield
        LOGGER.info("Shutting down, releasing budget client")
        await orchestrator.shutdown()

    app = FastAPI(
        title="Actual Bridge",
        version=__version__,
        docs_url="/docs" if settings.is_development else None,
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.orchestrator = orchestrator
    register_exception_handlers(app)

    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_middleware(
        AccessLogMiddleware,
        log_format="dev" if settings.is_development else "combined",
    )

    @app.get("/health")
    async def health() -> JSONResponse:
        """Liveness check; never touches the budget client."""

        return JSONResponse({"ok": True})

    @app.get("/debug/budgets")
    async def debug_budgets() -> JSONResponse:
        """Return the raw listing entries to help pick ``ACTUAL_BUDGET_ID``."""

        async with upstream_errors("Failed to list raw budgets"):
            await orchestrator.ensure_client()
            budgets = await client.list_budgets()
        return JSONResponse(jsonable_encoder(budgets))

    @app.get("/budgets")
    async def budgets() -> JSONResponse:
        async with upstream_errors("Failed to list budgets"):
            await orchestrator.ensure_ready()
            await client.sync()
            raw_budgets = await client.list_budgets()
        LOGGER.debug("Listing %s budgets", len(raw_budgets))
        return JSONResponse([BudgetDescriptor.from_raw(raw).as_dict() for raw in raw_budgets])

    @app.get("/accounts")
    async def accounts() -> JSONResponse:
        async with upstream_errors("Failed to list accounts"):
            await orchestrator.ensure_ready()
            await client.sync()
            account_list = await client.list_accounts()
        return JSONResponse(jsonable_encoder(account_list))

    @app.get("/transactions")
    async def transactions(
        account: Optional[str] = Query(None, description="Account id or exact name."),
        start: Optional[str] = Query(None, description="First day, YYYY-MM-DD."),
        end: Optional[str] = Query(None, description="Last day (inclusive), YYYY-MM-DD."),
        output_format: Optional[str] = Query(None, alias="format"),
    ):
        """Return an account's transactions as a JSON envelope or a CSV download."""

        if not account or not start or not end:
            raise QueryValidationError("Required parameters: account, start, end")
        start_day = _parse_day(start, "start")
        end_day = _parse_day(end, "end")

        async with upstream_errors("Failed to fetch transactions"):
            await orchestrator.ensure_ready()
            await client.sync()
            selected = find_account(await client.list_accounts(), account)
            rows = await client.list_transactions(selected["id"], start_day, end_day)
        LOGGER.info(
            "Fetched %s transactions for account %s between %s and %s",
            len(rows),
            selected["id"],
            start,
            end,
        )

        if output_format == "csv":
            filename = csv_filename(selected["id"], start, end)
            return StreamingResponse(
                iter([transactions_to_csv(rows)]),
                media_type="text/csv; charset=utf-8",
                headers={"Content-Disposition": f'attachment; filename="{filename}"'},
            )
        return JSONResponse(
            jsonable_encoder(
                {
                    "account": {"id": selected["id"], "name": selected.get("name")},
                    "start": start,
                    "end": end,
                    "count": len(rows),
                    "transactions": rows,
                }
            )
        )

    @app.post("/sync")
    async def sync() -> JSONResponse:
        """Force a sync pass against the server."""

        async with upstream_errors("Failed to sync"):
            await orchestrator.ensure_ready()
            await client.sync()
        LOGGER.info("Manual sync completed")
        return JSONResponse({"ok": True})

    return app
