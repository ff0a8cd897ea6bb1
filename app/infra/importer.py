"""
Bulk loader for the sales CSV dataset.

Usage:
    python -m app.infra.importer [path/to/dataset.csv] [--limit N] [--append]

Replaces the contents of the ``sales`` tables by default. Rows that fail to
parse are skipped and counted instead of being loaded with broken values.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import asdict, dataclass
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Iterator, Optional, Sequence

import pandas as pd
from sqlalchemy import delete, insert
from sqlalchemy.engine import Engine

from app.core.config import settings
from app.core.logging import import_logger, init_app_logging
from app.domain.models import SaleRecord
from app.infra.db import get_engine
from app.infra.schema import create_schema, sale_tags, sales

# CSV header -> SaleRecord attribute
CSV_COLUMNS = {
    "Transaction ID": "transaction_id",
    "Date": "date",
    "Customer ID": "customer_id",
    "Customer Name": "customer_name",
    "Phone Number": "phone_number",
    "Gender": "gender",
    "Age": "age",
    "Customer Region": "customer_region",
    "Customer Type": "customer_type",
    "Product ID": "product_id",
    "Product Name": "product_name",
    "Brand": "brand",
    "Product Category": "product_category",
    "Tags": "tags",
    "Quantity": "quantity",
    "Price per Unit": "price_per_unit",
    "Discount Percentage": "discount_percentage",
    "Total Amount": "total_amount",
    "Final Amount": "final_amount",
    "Payment Method": "payment_method",
    "Order Status": "order_status",
    "Delivery Type": "delivery_type",
    "Store ID": "store_id",
    "Store Location": "store_location",
    "Salesperson ID": "salesperson_id",
    "Employee Name": "employee_name",
}

_INT_FIELDS = ("transaction_id", "age", "quantity")
_DECIMAL_FIELDS = ("price_per_unit", "discount_percentage", "total_amount", "final_amount")


class DatasetError(RuntimeError):
    """The dataset cannot be read or loaded."""


@dataclass
class ImportReport:
    read: int = 0
    imported: int = 0
    skipped: int = 0


def parse_row(row: dict) -> SaleRecord:
    """Map one CSV row (already renamed to attribute names) to a SaleRecord.

    Raises ValueError when a required numeric or date value is malformed.
    """
    values = {name: str(row.get(name, "")).strip() for name in CSV_COLUMNS.values()}

    for name in _INT_FIELDS:
        values[name] = int(values[name])
    for name in _DECIMAL_FIELDS:
        raw = values[name] or ("0" if name == "discount_percentage" else "")
        try:
            values[name] = Decimal(raw)
        except InvalidOperation:
            raise ValueError(f"{name} is not a number: {raw!r}") from None

    parsed = pd.Timestamp(values["date"])
    if pd.isna(parsed):
        raise ValueError(f"date is empty: {values['date']!r}")
    if parsed.tzinfo is not None:
        parsed = parsed.tz_convert("UTC").tz_localize(None)
    values["date"] = parsed.to_pydatetime()

    raw_tags = values.pop("tags")
    tags = tuple(dict.fromkeys(t.strip() for t in raw_tags.split(",") if t.strip()))

    if values["age"] < 0 or values["quantity"] < 1:
        raise ValueError("age must be >= 0 and quantity >= 1")
    return SaleRecord(**values, tags=tags)


def read_sales_csv(path: Path, max_records: Optional[int] = None) -> tuple[list[SaleRecord], ImportReport]:
    """Read at most ``max_records`` rows from the dataset."""
    if not path.exists():
        raise DatasetError(f"CSV file not found: {path}")

    frame = pd.read_csv(path, dtype=str, keep_default_na=False, nrows=max_records or None)
    missing = [header for header in CSV_COLUMNS if header not in frame.columns]
    if missing:
        raise DatasetError(f"CSV is missing columns: {', '.join(missing)}")
    frame = frame.rename(columns=CSV_COLUMNS)

    report = ImportReport(read=len(frame))
    records: list[SaleRecord] = []
    seen: set[int] = set()
    for line, row in enumerate(frame.to_dict(orient="records"), start=2):
        try:
            record = parse_row(row)
        except (ValueError, TypeError) as exc:
            report.skipped += 1
            import_logger.warning("Skipping malformed row", line=line, reason=str(exc))
            continue
        if record.transaction_id in seen:
            report.skipped += 1
            import_logger.warning("Skipping duplicate transaction", line=line, transaction_id=record.transaction_id)
            continue
        seen.add(record.transaction_id)
        records.append(record)
    return records, report


def _batches(items: Sequence, size: int) -> Iterator[Sequence]:
    for start in range(0, len(items), size):
        yield items[start : start + size]


def load_records(
    engine: Engine,
    records: Sequence[SaleRecord],
    *,
    replace: bool = True,
    batch_size: int = 500,
) -> int:
    """Insert records (and their tags) in one transaction; returns rows inserted."""
    create_schema(engine)
    with engine.begin() as conn:
        if replace:
            conn.execute(delete(sale_tags))
            deleted = conn.execute(delete(sales)).rowcount
            if deleted:
                import_logger.info("Cleared existing records", deleted=deleted)

        for batch in _batches(records, batch_size):
            rows = []
            tag_rows = []
            for record in batch:
                row = asdict(record)
                for tag in row.pop("tags"):
                    tag_rows.append({"transaction_id": record.transaction_id, "tag": tag})
                rows.append(row)
            conn.execute(insert(sales), rows)
            if tag_rows:
                conn.execute(insert(sale_tags), tag_rows)
    return len(records)


def import_sales(
    path: Path,
    engine: Optional[Engine] = None,
    *,
    max_records: Optional[int] = None,
    replace: bool = True,
    batch_size: Optional[int] = None,
) -> ImportReport:
    engine = engine or get_engine()
    import_logger.info("Starting sales import", path=str(path), max_records=max_records)
    records, report = read_sales_csv(path, max_records)
    report.imported = load_records(
        engine,
        records,
        replace=replace,
        batch_size=batch_size or settings.IMPORT_BATCH_SIZE,
    )
    import_logger.info("Sales import finished", **asdict(report))
    return report


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Load the sales CSV dataset into the database.")
    parser.add_argument("csv", nargs="?", default=settings.IMPORT_CSV_PATH, help="dataset path")
    parser.add_argument(
        "--limit",
        type=int,
        default=settings.IMPORT_MAX_RECORDS,
        help="maximum rows to import (0 = all)",
    )
    parser.add_argument("--append", action="store_true", help="keep existing records")
    args = parser.parse_args(argv)

    init_app_logging()
    try:
        import_sales(Path(args.csv), max_records=args.limit or None, replace=not args.append)
    except DatasetError as exc:
        import_logger.error(str(exc))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
