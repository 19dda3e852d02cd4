"""Mini README: Render transactions as CSV text.

Structure:
    * CSV_HEADER - fixed column order of the export.
    * transactions_to_csv - format a sequence of transaction mappings.
    * csv_filename - attachment name for a given account and date range.

Amounts arrive as integer cents. ``amount_cents`` is written unquoted and
``amount`` is the same value in currency units with two decimals. Every
other column is a quoted string with embedded quotes doubled. Lines are
joined with ``\\n`` and the output has no trailing newline.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Iterable, Mapping, Sequence

from ..logging_utils import get_logger

LOGGER = get_logger(__name__)

CSV_HEADER: Sequence[str] = (
    "id",
    "date",
    "amount_cents",
    "amount",
    "account_id",
    "payee_id",
    "category_id",
    "notes",
    "imported_id",
    "transfer_id",
)

_CENTS = Decimal("0.01")


def _quote(value: Any) -> str:
    text = "" if value is None else str(value)
    return '"' + text.replace('"', '""') + '"'


def _format_amount(cents: Any) -> str:
    return f"{(Decimal(cents or 0) / 100).quantize(_CENTS):.2f}"


def _row(transaction: Mapping[str, Any]) -> str:
    cents = transaction.get("amount")
    return ",".join(
        [
            _quote(transaction.get("id")),
            _quote(transaction.get("date")),
            "" if cents is None else str(cents),
            _format_amount(cents),
            _quote(transaction.get("account")),
            _quote(transaction.get("payee")),
            _quote(transaction.get("category")),
            _quote(transaction.get("notes")),
            _quote(transaction.get("imported_id")),
            _quote(transaction.get("transfer_id")),
        ]
    )


def transactions_to_csv(transactions: Iterable[Mapping[str, Any]]) -> str:
    """Return the CSV document for ``transactions`` in their given order."""

    lines = [",".join(CSV_HEADER)]
    lines.extend(_row(transaction) for transaction in transactions)
    LOGGER.debug("Formatted %s transactions as CSV", len(lines) - 1)
    return "\n".join(lines)


def csv_filename(account_id: str, start: str, end: str) -> str:
    return f"transactions_{account_id}_{start}_{end}.csv"
