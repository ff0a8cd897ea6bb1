"""API routers module."""

from . import auth, health, sales

__all__ = [
    "auth",
    "health",
    "sales",
]
