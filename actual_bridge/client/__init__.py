"""Mini README: Budget client subsystem package initialiser.

Re-exports the capability interface and the registry. ``base`` holds the
abstract class, ``registry`` the plugin mapping and ``providers`` the
concrete SDK wrappers.
"""

from .base import BudgetClient, Record
from .registry import REGISTRY, BudgetClientRegistry, UnknownBudgetClient
from . import providers  # noqa: F401  # ensure built-in clients register on import

__all__ = [
    "BudgetClient",
    "BudgetClientRegistry",
    "REGISTRY",
    "Record",
    "UnknownBudgetClient",
]
