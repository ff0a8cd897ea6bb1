from __future__ import annotations

import os

os.environ.setdefault("JWT_SECRET", "test-secret-that-is-long-enough-for-hs256")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from app.core.application import create_application
from app.core.security import create_access_token
from app.domain.models import SaleRecord
from app.domain.query import QueryDefaults
from app.infra.db import build_engine
from app.infra.importer import load_records
from app.infra.schema import create_schema
from app.repositories.memory_repository import InMemorySalesRepository
from app.repositories.sales_repository import SqlSalesRepository
from app.services.dependencies import get_sales_service
from app.services.sales_service import SalesService


def make_sale(transaction_id: int, **overrides) -> SaleRecord:
    values = dict(
        transaction_id=transaction_id,
        date=datetime(2023, 1, 1, 12, 0),
        customer_id=f"CUST-{transaction_id:03d}",
        customer_name=f"Customer {transaction_id}",
        phone_number=f"90000000{transaction_id:02d}",
        gender="Male",
        age=30,
        customer_region="North",
        customer_type="Regular",
        product_id=f"PROD-{transaction_id:03d}",
        product_name="Item",
        brand="Acme",
        product_category="Clothing",
        quantity=1,
        price_per_unit=Decimal("10.00"),
        discount_percentage=Decimal("0"),
        total_amount=Decimal("10.00"),
        final_amount=Decimal("10.00"),
        payment_method="UPI",
        order_status="Completed",
        delivery_type="Standard",
        store_id="ST-01",
        store_location="Mumbai",
        salesperson_id="EMP-01",
        employee_name="Ravi Kumar",
        tags=(),
    )
    values.update(overrides)
    return SaleRecord(**values)


SAMPLE_SALES = [
    make_sale(
        1,
        date=datetime(2023, 1, 10, 10, 0),
        customer_name="Alice Johnson",
        phone_number="9876500001",
        gender="Female",
        age=25,
        customer_region="North",
        product_category="Clothing",
        tags=("organic", "casual"),
        quantity=5,
        price_per_unit=Decimal("20.00"),
        discount_percentage=Decimal("10"),
        total_amount=Decimal("100.00"),
        final_amount=Decimal("90.00"),
        payment_method="UPI",
    ),
    make_sale(
        2,
        date=datetime(2023, 2, 15, 12, 0),
        customer_name="bob smith",
        phone_number="9876500002",
        gender="Male",
        age=30,
        customer_region="South",
        product_category="Electronics",
        tags=("gadgets", "wireless"),
        quantity=1,
        price_per_unit=Decimal("50.00"),
        total_amount=Decimal("50.00"),
        final_amount=Decimal("50.00"),
        payment_method="Credit Card",
    ),
    make_sale(
        3,
        date=datetime(2023, 3, 20, 9, 30),
        customer_name="Charlie Brown",
        phone_number="9123400003",
        gender="Male",
        age=40,
        customer_region="North",
        product_category="Electronics",
        tags=("wireless",),
        quantity=3,
        price_per_unit=Decimal("100.00"),
        discount_percentage=Decimal("10"),
        total_amount=Decimal("300.00"),
        final_amount=Decimal("270.00"),
        payment_method="Cash",
    ),
    make_sale(
        4,
        date=datetime(2023, 3, 20, 9, 30),
        customer_name="Diana Prince",
        phone_number="9123400004",
        gender="Female",
        age=35,
        customer_region="East",
        product_category="Beauty",
        tags=("organic", "skincare"),
        quantity=3,
        price_per_unit=Decimal("20.00"),
        discount_percentage=Decimal("10"),
        total_amount=Decimal("60.00"),
        final_amount=Decimal("54.00"),
        payment_method="UPI",
    ),
    make_sale(
        5,
        date=datetime(2023, 4, 1, 0, 0),
        customer_name="Alice Cooper",
        phone_number="9000000005",
        gender="Other",
        age=18,
        customer_region="West",
        product_category="Clothing",
        quantity=2,
        price_per_unit=Decimal("20.00"),
        total_amount=Decimal("40.00"),
        final_amount=Decimal("40.00"),
        payment_method="Debit Card",
    ),
]


@pytest.fixture
def sales_records() -> list[SaleRecord]:
    return list(SAMPLE_SALES)


@pytest.fixture
def sqlite_engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    create_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def memory_repository(sales_records) -> InMemorySalesRepository:
    return InMemorySalesRepository(sales_records)


@pytest.fixture
def sql_repository(sqlite_engine, sales_records) -> SqlSalesRepository:
    load_records(sqlite_engine, sales_records)
    return SqlSalesRepository(sqlite_engine)


@pytest.fixture(params=["memory", "sql"])
def repository(request):
    """Both stores must give the same answers."""
    return request.getfixturevalue(f"{request.param}_repository")


@pytest.fixture
def query_defaults() -> QueryDefaults:
    return QueryDefaults()


@pytest.fixture
def sales_service(repository, query_defaults) -> SalesService:
    return SalesService(repository, query_defaults)


@pytest.fixture
def api(memory_repository, query_defaults):
    application = create_application()
    application.dependency_overrides[get_sales_service] = lambda: SalesService(
        memory_repository, query_defaults
    )
    return application


@pytest.fixture
def client(api) -> TestClient:
    return TestClient(api)


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user_id='user-analyst')}"}
