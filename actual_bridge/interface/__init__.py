"""Mini README: HTTP interface for Actual Bridge.

Exports the FastAPI application factory. Middleware and exception
handlers live next to it and are wired by the factory.
"""

from .web_app import create_application

__all__ = ["create_application"]
