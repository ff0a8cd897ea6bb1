"""
Repositories for the sales records store.
"""

from .memory_repository import InMemorySalesRepository
from .sales_repository import SqlSalesRepository

__all__ = [
    "InMemorySalesRepository",
    "SqlSalesRepository",
]
