"""FastAPI dependency providers for service layer."""

from app.core.config import settings
from app.domain.query import QueryDefaults
from app.repositories.sales_repository import SqlSalesRepository
from app.services.sales_service import SalesService


def get_query_defaults() -> QueryDefaults:
    return QueryDefaults.from_settings(settings)


def get_sales_service() -> SalesService:
    return SalesService(SqlSalesRepository(), get_query_defaults())
