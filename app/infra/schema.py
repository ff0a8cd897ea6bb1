"""Relational schema for the sales dataset (SQLAlchemy Core)."""

from __future__ import annotations

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
)
from sqlalchemy.engine import Engine

metadata = MetaData()

# Every column the listing filters or sorts on carries an index.
sales = Table(
    "sales",
    metadata,
    Column("transaction_id", Integer, primary_key=True, autoincrement=False),
    Column("date", DateTime, nullable=False, index=True),
    Column("customer_id", String(64), nullable=False),
    Column("customer_name", String(255), nullable=False, index=True),
    Column("phone_number", String(32), nullable=False, index=True),
    Column("gender", String(16), nullable=False, index=True),
    Column("age", Integer, nullable=False, index=True),
    Column("customer_region", String(64), nullable=False, index=True),
    Column("customer_type", String(64), nullable=False),
    Column("product_id", String(64), nullable=False),
    Column("product_name", String(255), nullable=False),
    Column("brand", String(128), nullable=False),
    Column("product_category", String(64), nullable=False, index=True),
    Column("quantity", Integer, nullable=False, index=True),
    Column("price_per_unit", Numeric(12, 2), nullable=False),
    Column("discount_percentage", Numeric(5, 2), nullable=False, default=0),
    Column("total_amount", Numeric(14, 2), nullable=False),
    Column("final_amount", Numeric(14, 2), nullable=False),
    Column("payment_method", String(64), nullable=False, index=True),
    Column("order_status", String(64), nullable=False),
    Column("delivery_type", String(64), nullable=False),
    Column("store_id", String(64), nullable=False),
    Column("store_location", String(128), nullable=False),
    Column("salesperson_id", String(64), nullable=False),
    Column("employee_name", String(255), nullable=False),
)

sale_tags = Table(
    "sale_tags",
    metadata,
    Column(
        "transaction_id",
        Integer,
        ForeignKey("sales.transaction_id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("tag", String(64), primary_key=True),
    Index("ix_sale_tags_tag", "tag"),
)

# Scalar columns of ``sales`` in declaration order (``tags`` lives in sale_tags).
SALE_COLUMNS = tuple(c.name for c in sales.columns)


def create_schema(engine: Engine) -> None:
    metadata.create_all(engine)
