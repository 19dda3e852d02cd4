"""Mini README: Export utilities for transaction listings.

Exposes the CSV formatter used by ``GET /transactions?format=csv`` and the
helper that names the downloaded attachment.
"""

from .csv_exporter import CSV_HEADER, csv_filename, transactions_to_csv

__all__ = ["CSV_HEADER", "csv_filename", "transactions_to_csv"]
