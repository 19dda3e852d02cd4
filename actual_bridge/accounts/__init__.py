"""Mini README: Account lookup helpers.

Accounts are opaque mappings returned by the budget client; this package
only knows how to pick one by exact id or exact name.
"""

from .matching import account_matches, find_account

__all__ = ["account_matches", "find_account"]
