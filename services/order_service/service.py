from datetime import datetime, timezone
from typing import Optional

import structlog

from shared.errors import ServiceError, ValidationError
from shared.observability.metrics import scms_orders_created_total

from .models import Order, OrderItem
from .repository import OrderRepository
from .schemas import OrderCreateRequest, OrderFields
from .status import OrderStatus, parse_status

logger = structlog.get_logger(__name__)


def _require_customer(fields: OrderFields) -> None:
    if not fields.customer_id:
        raise ValidationError("customer_id", "Customer ID is required")


class OrderService:

    def __init__(self, repository: OrderRepository):
        self.repository = repository

    async def list_orders(self, customer_id: Optional[int] = None) -> list[Order]:
        return await self.repository.get_all(customer_id)

    async def get_order(self, order_id: int) -> tuple[Order, list[OrderItem]]:
        order = await self.repository.get_by_id(order_id)
        return order, await self.repository.get_items(order_id)

    async def create_order(self, data: OrderCreateRequest) -> tuple[Order, list[OrderItem]]:
        fields = data.order
        _require_customer(fields)
        if not data.items:
            raise ValidationError("items", "Order must have at least one item")

        quotation_id = fields.quotation_id
        if quotation_id is None and data.quotation is not None:
            quotation_id = data.quotation.quotation_id

        status = parse_status(fields.status) if fields.status else OrderStatus.PENDING
        order = Order(
            customer_id=fields.customer_id,
            quotation_id=quotation_id,
            order_date=fields.order_date or datetime.now(timezone.utc),
            shipping_address=fields.shipping_address,
            status=status.value,
            total_amount=fields.total_amount,
        )
        items = [OrderItem(**item.model_dump()) for item in data.items]

        try:
            order, items = await self.repository.create_with_items(order, items)
        except ServiceError:
            scms_orders_created_total.labels(status="failed").inc()
            raise

        scms_orders_created_total.labels(status="success").inc()
        logger.info("order_created", order_id=order.order_id, customer_id=order.customer_id, items=len(items))
        return order, items

    async def update_order(self, order_id: int, fields: OrderFields) -> Order:
        _require_customer(fields)
        new_status = parse_status(fields.status) if fields.status else None
        values = fields.model_dump(exclude={"status"})
        if values["order_date"] is None:
            del values["order_date"]
        return await self.repository.guarded_update(order_id, new_status, values, operation="update order")

    async def update_order_status(self, order_id: int, status: str) -> Order:
        new_status = parse_status(status)
        order = await self.repository.guarded_update(order_id, new_status)
        logger.info("order_status_updated", order_id=order_id, status=new_status.value)
        return order

    async def delete_order(self, order_id: int) -> None:
        await self.repository.delete_with_items(order_id)
        logger.info("order_deleted", order_id=order_id)
