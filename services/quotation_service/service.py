from datetime import datetime, timedelta, timezone
from typing import Optional

import structlog
from starlette.concurrency import run_in_threadpool

from services.customer_service.repository import CustomerRepository
from services.product_service.repository import ProductRepository
from shared.errors import ServiceError, ValidationError
from shared.observability.metrics import scms_quotations_created_total

from . import pdf
from .models import Quotation, QuotationItem
from .repository import QuotationRepository
from .schemas import (
    QUOTATION_STATUSES,
    QuotationCreateRequest,
    QuotationItemCreate,
    QuotationUpdateRequest,
)

logger = structlog.get_logger(__name__)

DEFAULT_VALIDITY = timedelta(days=30)


def _build_items(items: list[QuotationItemCreate]) -> list[QuotationItem]:
    return [
        QuotationItem(
            product_id=item.product_id,
            quantity=item.quantity,
            unit_price=item.unit_price,
            discount=item.discount,
            line_total=item.computed_line_total(),
        )
        for item in items
    ]


def _total_or_item_sum(total_amount: float, items: Optional[list[QuotationItem]]) -> float:
    # A zero total means "not supplied" when there are items to sum
    if total_amount == 0 and items:
        return sum(item.line_total for item in items)
    return total_amount


class QuotationService:

    def __init__(
        self,
        repository: QuotationRepository,
        customers: CustomerRepository,
        products: ProductRepository,
    ):
        self.repository = repository
        self.customers = customers
        self.products = products

    async def list_quotations(self, customer_id: Optional[int] = None) -> list[Quotation]:
        return await self.repository.get_all(customer_id)

    async def get_quotation(self, quotation_id: int) -> tuple[Quotation, list[QuotationItem]]:
        return await self.repository.get_full(quotation_id)

    async def create_quotation(self, data: QuotationCreateRequest) -> tuple[Quotation, list[QuotationItem]]:
        fields = data.quotation
        if not fields.customer_id:
            raise ValidationError("customer_id", "Customer ID is required")

        quote_date = fields.quote_date or datetime.now(timezone.utc)
        items = _build_items(data.items)
        quotation = Quotation(
            customer_id=fields.customer_id,
            quote_date=quote_date,
            validity_date=fields.validity_date or quote_date + DEFAULT_VALIDITY,
            status=fields.status or "PENDING",
            total_amount=_total_or_item_sum(fields.total_amount, items),
        )

        try:
            quotation, items = await self.repository.create_with_items(quotation, items)
        except ServiceError:
            scms_quotations_created_total.labels(status="failed").inc()
            raise

        scms_quotations_created_total.labels(status="success").inc()
        logger.info(
            "quotation_created",
            quotation_id=quotation.quotation_id,
            customer_id=quotation.customer_id,
            items=len(items),
        )
        return quotation, items

    async def update_quotation(
        self, quotation_id: int, data: QuotationUpdateRequest
    ) -> tuple[Quotation, list[QuotationItem]]:
        fields = data.quotation
        if not fields.customer_id:
            raise ValidationError("customer_id", "Customer ID is required")

        items = _build_items(data.items) if data.items is not None else None
        values = {
            "customer_id": fields.customer_id,
            "total_amount": _total_or_item_sum(fields.total_amount, items),
        }
        if fields.quote_date:
            values["quote_date"] = fields.quote_date
        if fields.validity_date:
            values["validity_date"] = fields.validity_date
        if fields.status:
            values["status"] = fields.status

        return await self.repository.update_with_items(quotation_id, values, items)

    async def update_status(self, quotation_id: int, status: str) -> Quotation:
        # Quotations move freely between statuses; only the value is checked
        if status not in QUOTATION_STATUSES:
            raise ValidationError("status", "Invalid status. Must be one of: Pending, Approved, Rejected, Expired")
        quotation = await self.repository.update_status(quotation_id, status)
        logger.info("quotation_status_updated", quotation_id=quotation_id, status=status)
        return quotation

    async def delete_quotation(self, quotation_id: int) -> None:
        await self.repository.delete_with_items(quotation_id)
        logger.info("quotation_deleted", quotation_id=quotation_id)

    async def render_pdf(self, quotation_id: int) -> bytes:
        quotation, items = await self.repository.get_full(quotation_id)
        customer = await self.customers.get_by_id(quotation.customer_id)
        names = await self.products.get_names([item.product_id for item in items])
        rows = [
            {
                "product_name": names.get(item.product_id, f"Product #{item.product_id}"),
                "quantity": item.quantity,
                "unit_price": item.unit_price,
                "discount": item.discount,
                "line_total": item.line_total,
            }
            for item in items
        ]
        html = pdf.render_quotation_html(quotation, customer, rows)
        content = await run_in_threadpool(pdf.html_to_pdf, html)
        logger.info("quotation_pdf_rendered", quotation_id=quotation_id, size=len(content))
        return content
