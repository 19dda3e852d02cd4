"""Mini README: Budget selection precedence.

Structure:
    * resolve_budget - choose the budget file the service operates on.

Precedence, first match wins: a descriptor carrying the preferred
identifier as its ``id``, ``groupId`` or ``cloudFileId``; the first
descriptor already materialised locally; the first descriptor listed.
"""

from __future__ import annotations

from typing import Optional, Sequence

from ..errors import NoBudgetsFound
from ..logging_utils import get_logger
from .descriptor import BudgetDescriptor

LOGGER = get_logger(__name__)


def resolve_budget(
    descriptors: Sequence[BudgetDescriptor],
    preferred_id: Optional[str] = None,
) -> BudgetDescriptor:
    """Return the descriptor to load, raising ``NoBudgetsFound`` on an empty list."""

    if not descriptors:
        raise NoBudgetsFound()

    if preferred_id:
        for descriptor in descriptors:
            if descriptor.matches(preferred_id):
                LOGGER.debug("Preferred budget '%s' matched %s", preferred_id, descriptor.name)
                return descriptor
        LOGGER.warning(
            "Preferred budget '%s' not found among %s budgets; using defaults",
            preferred_id,
            len(descriptors),
        )

    for descriptor in descriptors:
        if descriptor.is_local:
            return descriptor
    return descriptors[0]
