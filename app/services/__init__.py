"""
Domain services separated from the routes.
"""

from .sales_service import SalesService  # noqa: F401

__all__ = [
    "SalesService",
]
