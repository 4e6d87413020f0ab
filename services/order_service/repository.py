from typing import Optional

import structlog
from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import func

from shared.errors import InvalidTransitionError, NotFoundError, store_errors, transaction
from shared.observability.metrics import scms_order_status_transitions_total

from .models import Order, OrderItem
from .status import OrderStatus, ensure_transition

logger = structlog.get_logger(__name__)

# Bounded re-evaluation when another writer changes the status between read and write
MAX_STATUS_ATTEMPTS = 3

ORDER_PARENTS = {"customer_id": "customer", "quotation_id": "quotation"}


class OrderRepository:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_all(self, customer_id: Optional[int] = None) -> list[Order]:
        query = select(Order).order_by(Order.order_date.desc(), Order.order_id.desc())
        if customer_id is not None:
            query = query.where(Order.customer_id == customer_id)
        with store_errors("list orders", "order"):
            result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_by_id(self, order_id: int, refresh: bool = False) -> Order:
        query = select(Order).where(Order.order_id == order_id)
        if refresh:
            query = query.execution_options(populate_existing=True)
        with store_errors("get order", "order"):
            result = await self.db.execute(query)
        order = result.scalars().first()
        if not order:
            raise NotFoundError("order")
        return order

    async def get_items(self, order_id: int) -> list[OrderItem]:
        query = select(OrderItem).where(OrderItem.order_id == order_id).order_by(OrderItem.order_item_id)
        with store_errors("get order items", "order item"):
            result = await self.db.execute(query)
        return list(result.scalars().all())

    async def create_with_items(self, order: Order, items: list[OrderItem]) -> tuple[Order, list[OrderItem]]:
        """
        Insert the order and its items in one transaction.

        Items are inserted in the supplied order; each picks up its generated id
        and the store-computed line_total. Any failure rolls everything back.
        """
        async with transaction(self.db, "create order"):
            with store_errors("create order", "order", parents=ORDER_PARENTS):
                self.db.add(order)
                await self.db.flush()
            await self.db.refresh(order)

            for item in items:
                item.order_id = order.order_id
                with store_errors("create order", "order item", parent="product"):
                    self.db.add(item)
                    await self.db.flush()
                await self.db.refresh(item)
        return order, items

    async def _current_status(self, order_id: int) -> OrderStatus:
        with store_errors("get order status", "order"):
            result = await self.db.execute(select(Order.status).where(Order.order_id == order_id))
        current = result.scalar()
        if current is None:
            raise NotFoundError("order")
        return OrderStatus(current)

    async def guarded_update(
        self,
        order_id: int,
        new_status: Optional[OrderStatus],
        fields: Optional[dict] = None,
        operation: str = "update order status",
    ) -> Order:
        """
        Apply `fields` and a status change only if the transition guard allows it.

        The write is conditional on the status that was read, so a concurrent
        change makes it match zero rows; the guard is then re-evaluated against
        the new status. `new_status=None` keeps the current status.
        """
        for attempt in range(1, MAX_STATUS_ATTEMPTS + 1):
            async with transaction(self.db, operation):
                current = await self._current_status(order_id)
                target = new_status or current
                try:
                    ensure_transition(current, target)
                except InvalidTransitionError:
                    scms_order_status_transitions_total.labels(
                        from_status=current.value, to_status=target.value, result="rejected"
                    ).inc()
                    raise

                statement = (
                    update(Order)
                    .where(Order.order_id == order_id, Order.status == current.value)
                    .values(status=target.value, updated_at=func.now(), **(fields or {}))
                )
                with store_errors(operation, "order", parents=ORDER_PARENTS):
                    result = await self.db.execute(statement)

            if result.rowcount:
                scms_order_status_transitions_total.labels(
                    from_status=current.value, to_status=target.value, result="applied"
                ).inc()
                return await self.get_by_id(order_id, refresh=True)
            logger.warning("order_status_race", order_id=order_id, attempt=attempt, expected=current.value)

        raise InvalidTransitionError("order status changed concurrently")

    async def delete_with_items(self, order_id: int) -> None:
        async with transaction(self.db, "delete order"):
            with store_errors("delete order", "order"):
                await self.db.execute(delete(OrderItem).where(OrderItem.order_id == order_id))
                result = await self.db.execute(delete(Order).where(Order.order_id == order_id))
            if result.rowcount == 0:
                raise NotFoundError("order")
