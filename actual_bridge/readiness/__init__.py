"""Mini README: Readiness state machine for the budget client.

Exports the orchestrator that moves the service from an uninitialised
client to an open, freshly synced budget, plus the strategy type used to
describe how a budget gets materialised.
"""

from .orchestrator import LoadStrategy, ReadinessOrchestrator, ReadinessState

__all__ = ["LoadStrategy", "ReadinessOrchestrator", "ReadinessState"]
