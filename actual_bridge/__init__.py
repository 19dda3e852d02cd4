"""Mini README: Core package initializer for Actual Bridge.

Actual Bridge exposes a handful of HTTP endpoints in front of an Actual
budgeting server. The package root only re-exports the logging helper and
the version string so importing it stays cheap.
"""

from .logging_utils import get_logger

__version__ = "0.1.0"

__all__ = ["__version__", "get_logger"]
