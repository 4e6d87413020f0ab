"""
Read-only aggregate queries behind the dashboard and the report endpoints.

Date windows are passed in as an absolute cutoff so the same statements run on
PostgreSQL and SQLite.
"""
from datetime import date, datetime

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from services.contact_service.models import Contact
from services.customer_service.models import Customer
from services.inventory_service.models import Inventory
from services.order_service.models import Order
from services.product_service.models import Product
from shared.errors import store_errors

from .schemas import LowStockItem, SalesTrend, TopCustomer


def _day_string(value) -> str:
    # PostgreSQL returns a date, SQLite a 'YYYY-MM-DD' string
    if isinstance(value, (date, datetime)):
        return value.strftime("%Y-%m-%d")
    return str(value)[:10]


class ReportRepository:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def sales_trends(self, since: datetime) -> list[SalesTrend]:
        day = func.date(Order.order_date).label("day")
        query = (
            select(day, func.coalesce(func.sum(Order.total_amount), 0).label("total_amount"))
            .where(Order.order_date >= since)
            .group_by(day)
            .order_by(day)
        )
        with store_errors("get sales trends", "sales trend"):
            result = await self.db.execute(query)
        return [SalesTrend(day=_day_string(row.day), total_amount=float(row.total_amount)) for row in result]

    async def total_sales(self, since: datetime) -> float:
        query = select(func.coalesce(func.sum(Order.total_amount), 0)).where(Order.order_date >= since)
        with store_errors("get total sales", "order"):
            result = await self.db.execute(query)
        return float(result.scalar() or 0)

    async def order_count(self, since: datetime) -> int:
        query = select(func.count(Order.order_id)).where(Order.order_date >= since)
        with store_errors("get order count", "order"):
            result = await self.db.execute(query)
        return int(result.scalar() or 0)

    async def low_stock_items(self) -> list[LowStockItem]:
        # Strictly below the reorder level; the inventory listing also includes rows at it
        query = (
            select(
                Inventory.inventory_id,
                Inventory.product_id,
                Product.product_name,
                Inventory.current_stock,
                Inventory.reorder_level,
                Product.price,
            )
            .join(Product, Inventory.product_id == Product.product_id)
            .where(Inventory.current_stock < Inventory.reorder_level)
            .order_by((Inventory.reorder_level - Inventory.current_stock).desc(), Inventory.inventory_id)
        )
        with store_errors("get low stock items", "inventory item"):
            result = await self.db.execute(query)
        return [
            LowStockItem(
                id=row.inventory_id,
                product_id=row.product_id,
                name=row.product_name,
                current_stock=row.current_stock,
                reorder_level=row.reorder_level,
                unit_price=float(row.price or 0),
            )
            for row in result
        ]

    async def top_customers(self, limit: int, since: datetime) -> list[TopCustomer]:
        contact_name = (
            select(Contact.first_name + " " + Contact.last_name)
            .where(Contact.customer_id == Customer.customer_id)
            .order_by(Contact.contact_id)
            .limit(1)
            .correlate(Customer)
            .scalar_subquery()
        )
        total_spent = func.coalesce(func.sum(Order.total_amount), 0).label("total_spent")
        query = (
            select(
                Customer.customer_id,
                Customer.company_name,
                total_spent,
                func.count(Order.order_id).label("order_count"),
                contact_name.label("contact_name"),
            )
            .select_from(Customer)
            .outerjoin(Order, and_(Order.customer_id == Customer.customer_id, Order.order_date >= since))
            .group_by(Customer.customer_id, Customer.company_name)
            .order_by(total_spent.desc(), Customer.customer_id)
            .limit(limit)
        )
        with store_errors("get top customers", "customer"):
            result = await self.db.execute(query)
        return [
            TopCustomer(
                id=row.customer_id,
                name=row.company_name,
                total_spent=float(row.total_spent),
                orders=row.order_count,
                contact_name=row.contact_name,
            )
            for row in result
        ]
