"""Mini README: Tests for the transaction CSV export."""

from __future__ import annotations

from actual_bridge.export import CSV_HEADER, csv_filename, transactions_to_csv

HEADER_LINE = "id,date,amount_cents,amount,account_id,payee_id,category_id,notes,imported_id,transfer_id"


def test_header_only_for_empty_input() -> None:
    assert ",".join(CSV_HEADER) == HEADER_LINE
    assert transactions_to_csv([]) == HEADER_LINE


def test_negative_amount_and_null_fields() -> None:
    csv_text = transactions_to_csv(
        [
            {
                "id": "t1",
                "date": "2024-01-01",
                "amount": -1050,
                "account": "a1",
                "payee": "p1",
                "category": "c1",
                "notes": None,
                "imported_id": None,
                "transfer_id": None,
            }
        ]
    )

    header, row = csv_text.split("\n")
    assert header == HEADER_LINE
    assert row == '"t1","2024-01-01",-1050,-10.50,"a1","p1","c1","","",""'


def test_quotes_are_doubled_and_missing_amount_is_blank() -> None:
    csv_text = transactions_to_csv(
        [
            {"id": "t2", "amount": 5, "notes": 'Paid "cash"'},
            {"id": "t3", "date": "2024-03-02"},
        ]
    )

    lines = csv_text.split("\n")
    assert lines[1] == '"t2","",5,0.05,"","","","Paid ""cash""","",""'
    assert lines[2] == '"t3","2024-03-02",,0.00,"","","","","",""'
    assert not csv_text.endswith("\n")


def test_large_amounts_keep_exact_cents() -> None:
    row = transactions_to_csv([{"id": "t4", "amount": 123456789}]).split("\n")[1]

    assert row.split(",")[2:4] == ["123456789", "1234567.89"]


def test_csv_filename() -> None:
    assert csv_filename("acc-1", "2024-01-01", "2024-01-31") == "transactions_acc-1_2024-01-01_2024-01-31.csv"
