"""Mini README: Exception hierarchy shared by every Actual Bridge layer.

Structure:
    * BridgeError - base class carrying the HTTP status and an optional hint.
    * ConfigMissing, NoBudgetsFound, BudgetLoadError - readiness failures.
    * AccountNotFound, QueryValidationError - request level failures.
    * UpstreamError - any other failure raised by the budget client.

The web layer renders every ``BridgeError`` as ``{"error": ..., "hint": ...}``
using ``status_code``; nothing below the interface package knows about HTTP
beyond that number.
"""

from __future__ import annotations

from typing import Dict, Iterable, Optional


class BridgeError(Exception):
    """Base error for failures that map onto an HTTP response."""

    status_code: int = 500

    def __init__(self, message: str, *, hint: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint

    def as_payload(self) -> Dict[str, str]:
        payload = {"error": self.message}
        if self.hint:
            payload["hint"] = self.hint
        return payload


class ConfigMissing(BridgeError):
    """Required configuration (server URL or password) is absent."""

    def __init__(self, missing: Iterable[str]) -> None:
        self.missing = list(missing)
        super().__init__(f"Missing required configuration: {', '.join(self.missing)}")


class NoBudgetsFound(BridgeError):
    """The server listed no budget files."""

    def __init__(self, message: str = "No budgets found on the Actual server.") -> None:
        super().__init__(message)


class BudgetLoadError(BridgeError):
    """Every strategy for materialising the selected budget failed."""

    def __init__(self, message: str, *, last_error: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.last_error = last_error


class AccountNotFound(BridgeError):
    status_code = 404

    def __init__(self, account: str) -> None:
        super().__init__("Account not found", hint="Use /accounts to list the available options")
        self.account = account


class QueryValidationError(BridgeError):
    status_code = 400


class UpstreamError(BridgeError):
    """Wraps unexpected failures from the budget client or a sync pass."""
