"""Sales listing endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.core.cache import etag_json
from app.core.security import AccessClaims, get_current_access
from app.domain.filters import FilterCriteria
from app.domain.models import SaleRecord, SalesSummary
from app.domain.query import SalesQuery
from app.services.dependencies import get_sales_service
from app.services.sales_service import SalesService


router = APIRouter(prefix="/api/sales", tags=["sales"])


# -----------------------------------------------------------------------------
# Response Models (camelCase on the wire)
# -----------------------------------------------------------------------------


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SaleOut(CamelModel):
    """One sales record."""
    transaction_id: int
    date: datetime
    customer_id: str
    customer_name: str
    phone_number: str
    gender: str
    age: int
    customer_region: str
    customer_type: str
    product_id: str
    product_name: str
    brand: str
    product_category: str
    tags: list[str]
    quantity: int
    price_per_unit: float
    discount_percentage: float
    total_amount: float
    final_amount: float
    payment_method: str
    order_status: str
    delivery_type: str
    store_id: str
    store_location: str
    salesperson_id: str
    employee_name: str

    @classmethod
    def from_record(cls, record: SaleRecord) -> SaleOut:
        return cls(
            transaction_id=record.transaction_id,
            date=record.date,
            customer_id=record.customer_id,
            customer_name=record.customer_name,
            phone_number=record.phone_number,
            gender=record.gender,
            age=record.age,
            customer_region=record.customer_region,
            customer_type=record.customer_type,
            product_id=record.product_id,
            product_name=record.product_name,
            brand=record.brand,
            product_category=record.product_category,
            tags=list(record.tags),
            quantity=record.quantity,
            price_per_unit=float(record.price_per_unit),
            discount_percentage=float(record.discount_percentage),
            total_amount=float(record.total_amount),
            final_amount=float(record.final_amount),
            payment_method=record.payment_method,
            order_status=record.order_status,
            delivery_type=record.delivery_type,
            store_id=record.store_id,
            store_location=record.store_location,
            salesperson_id=record.salesperson_id,
            employee_name=record.employee_name,
        )


class SummaryOut(CamelModel):
    """Totals over every matching record."""
    total_units_sold: int
    total_amount: float
    total_discount: float

    @classmethod
    def from_summary(cls, summary: SalesSummary) -> SummaryOut:
        return cls(
            total_units_sold=summary.total_units_sold,
            total_amount=float(summary.total_amount),
            total_discount=float(summary.total_discount),
        )


class SalesListResponse(CamelModel):
    success: bool = True
    count: int
    total: int
    page: int
    pages: int
    summary: SummaryOut
    data: list[SaleOut]


class SaleResponse(CamelModel):
    success: bool = True
    data: SaleOut


class FilterOptionsOut(CamelModel):
    customer_regions: list[str]
    genders: list[str]
    product_categories: list[str]
    payment_methods: list[str]
    tags: list[str]


class FilterOptionsResponse(CamelModel):
    success: bool = True
    filters: FilterOptionsOut


# -----------------------------------------------------------------------------
# Endpoints
# -----------------------------------------------------------------------------


@router.get("", response_model=SalesListResponse)
def list_sales(
    search: Optional[str] = Query(None, description="Customer name or phone number (substring)"),
    customer_region: Optional[str] = Query(None, alias="customerRegion", description="Comma-separated regions"),
    gender: Optional[str] = Query(None, description="Comma-separated genders"),
    product_category: Optional[str] = Query(None, alias="productCategory", description="Comma-separated categories"),
    tags: Optional[str] = Query(None, description="Comma-separated tags (any of)"),
    payment_method: Optional[str] = Query(None, alias="paymentMethod", description="Comma-separated payment methods"),
    min_age: Optional[str] = Query(None, alias="minAge", description="Inclusive lower age bound"),
    max_age: Optional[str] = Query(None, alias="maxAge", description="Inclusive upper age bound"),
    start_date: Optional[str] = Query(None, alias="startDate", description="Inclusive start (ISO8601)"),
    end_date: Optional[str] = Query(None, alias="endDate", description="Inclusive end (ISO8601)"),
    sort_by: Optional[str] = Query(None, alias="sortBy", description="date-desc, date-asc, quantity-desc, quantity-asc, name-asc, name-desc"),
    page: Optional[str] = Query(None, description="Page number (>= 1)"),
    limit: Optional[str] = Query(None, description="Page size (>= 1)"),
    user: AccessClaims = Depends(get_current_access),
    service: SalesService = Depends(get_sales_service),
) -> SalesListResponse:
    """Search, filter, sort and paginate sales with a summary over all matches."""
    criteria = FilterCriteria.from_query_params(
        search=search,
        customer_region=customer_region,
        gender=gender,
        product_category=product_category,
        tags=tags,
        payment_method=payment_method,
        min_age=min_age,
        max_age=max_age,
        start_date=start_date,
        end_date=end_date,
    )
    query = SalesQuery.from_params(criteria, sort_by, page, limit, service.defaults)

    result = service.list_sales(query)

    return SalesListResponse(
        count=result.count,
        total=result.total,
        page=result.page,
        pages=result.pages,
        summary=SummaryOut.from_summary(result.summary),
        data=[SaleOut.from_record(r) for r in result.records],
    )


@router.get("/filters", response_model=FilterOptionsResponse)
def get_filter_options(
    request: Request,
    user: AccessClaims = Depends(get_current_access),
    service: SalesService = Depends(get_sales_service),
):
    """Distinct values for every multi-select filter, sorted alphabetically."""
    options = service.get_filter_options()
    payload = FilterOptionsResponse(
        filters=FilterOptionsOut(
            customer_regions=options.customer_regions,
            genders=options.genders,
            product_categories=options.product_categories,
            payment_methods=options.payment_methods,
            tags=options.tags,
        )
    )
    return etag_json(request, payload.model_dump(by_alias=True))


@router.get("/{transaction_id}", response_model=SaleResponse)
def get_sale(
    transaction_id: int,
    user: AccessClaims = Depends(get_current_access),
    service: SalesService = Depends(get_sales_service),
) -> SaleResponse:
    """Single sale by transaction id."""
    return SaleResponse(data=SaleOut.from_record(service.get_sale(transaction_id)))
