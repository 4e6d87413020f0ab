from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class SalesTrend(BaseModel):
    day: str
    total_amount: float


class LowStockItem(BaseModel):
    id: int
    product_id: int
    name: str
    current_stock: int
    reorder_level: int
    unit_price: float


class TopCustomer(BaseModel):
    id: int
    name: str
    total_spent: float
    orders: int
    contact_name: Optional[str] = None


class DashboardSummary(BaseModel):
    total_sales: float
    order_count: int
    low_stock_count: int
    sales_trends: list[SalesTrend]
    low_stock_items: list[LowStockItem]
    top_customers: list[TopCustomer]
    period: str
    last_updated: datetime
