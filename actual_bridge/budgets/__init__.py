"""Mini README: Budget file descriptors and selection.

``descriptor`` normalises raw listing entries returned by the budget
client; ``resolver`` picks the budget the service operates on.
"""

from .descriptor import BudgetDescriptor
from .resolver import resolve_budget

__all__ = ["BudgetDescriptor", "resolve_budget"]
