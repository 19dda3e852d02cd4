"""Mini README: Resolve the account named in a request.

Structure:
    * account_matches - exact comparison against ``id`` or ``name``.
    * find_account - first matching account or ``AccountNotFound``.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from ..errors import AccountNotFound


def account_matches(account: Mapping[str, Any], query: str) -> bool:
    """True when the account id or name equals ``query`` exactly."""

    return account.get("id") == query or account.get("name") == query


def find_account(accounts: Iterable[Mapping[str, Any]], query: str) -> Mapping[str, Any]:
    """Return the first account whose id or name equals ``query``."""

    for account in accounts:
        if account_matches(account, query):
            return account
    raise AccountNotFound(query)
