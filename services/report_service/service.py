from datetime import datetime, timedelta, timezone
from typing import Optional

import structlog

from shared.errors import ValidationError
from shared.observability.metrics import scms_dashboard_duration_seconds

from .repository import ReportRepository
from .schemas import DashboardSummary, LowStockItem, SalesTrend, TopCustomer

logger = structlog.get_logger(__name__)

DEFAULT_TREND_DAYS = 7
DEFAULT_CUSTOMER_DAYS = 365
DEFAULT_TOP_CUSTOMERS = 5
DEFAULT_TOP_CUSTOMERS_EXPORT = 20


def positive_int(raw: Optional[str], default: int, name: str) -> int:
    """Parse an optional query parameter that must be a positive integer."""
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        value = 0
    if value <= 0:
        raise ValidationError(name, f"Invalid {name} parameter. Must be a positive integer.")
    return value


def window_start(days: int, now: Optional[datetime] = None) -> datetime:
    """Midnight (UTC) of the day `days` days before today."""
    now = now or datetime.now(timezone.utc)
    return now.replace(hour=0, minute=0, second=0, microsecond=0) - timedelta(days=days)


def period_label(days: int, now: datetime) -> str:
    start = now - timedelta(days=days)
    return f"Last {start:%b} {start.day} - {now:%b} {now.day}"


class ReportService:

    def __init__(self, repository: ReportRepository):
        self.repository = repository

    async def sales_trends(self, days: int) -> list[SalesTrend]:
        return await self.repository.sales_trends(window_start(days))

    async def low_stock_items(self) -> list[LowStockItem]:
        return await self.repository.low_stock_items()

    async def top_customers(self, limit: int, days: int) -> list[TopCustomer]:
        return await self.repository.top_customers(limit, window_start(days))

    async def dashboard(self, days: int) -> DashboardSummary:
        with scms_dashboard_duration_seconds.time():
            now = datetime.now(timezone.utc)
            since = window_start(days, now)
            trends = await self.repository.sales_trends(since)
            total_sales = await self.repository.total_sales(since)
            order_count = await self.repository.order_count(since)
            low_stock = await self.repository.low_stock_items()
            top_customers = await self.repository.top_customers(DEFAULT_TOP_CUSTOMERS, since)

        logger.info("dashboard_built", days=days, order_count=order_count, low_stock_count=len(low_stock))
        return DashboardSummary(
            total_sales=total_sales,
            order_count=order_count,
            low_stock_count=len(low_stock),
            sales_trends=trends,
            low_stock_items=low_stock,
            top_customers=top_customers,
            period=period_label(days, now),
            last_updated=now,
        )
