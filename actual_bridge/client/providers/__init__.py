"""Mini README: Concrete budget client implementations.

New clients subclass ``BudgetClient`` and call ``REGISTRY.register`` at
import time to become selectable through ``ACTUAL_CLIENT``.
"""

from .actualpy_client import ActualPyClient

__all__ = ["ActualPyClient"]
