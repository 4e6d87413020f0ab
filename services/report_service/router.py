from typing import Optional

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.observability.metrics import scms_report_export_total

from . import export
from .repository import ReportRepository
from .schemas import DashboardSummary, LowStockItem, SalesTrend, TopCustomer
from .service import (
    DEFAULT_CUSTOMER_DAYS,
    DEFAULT_TOP_CUSTOMERS,
    DEFAULT_TOP_CUSTOMERS_EXPORT,
    DEFAULT_TREND_DAYS,
    ReportService,
    positive_int,
)

dashboard_router = APIRouter(prefix="/dashboard", tags=["Reports"])
router = APIRouter(prefix="/reports", tags=["Reports"])


def get_report_service(db: AsyncSession = Depends(get_db)) -> ReportService:
    return ReportService(ReportRepository(db))


def csv_response(content: str, filename: str, report: str) -> Response:
    scms_report_export_total.labels(report=report).inc()
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@dashboard_router.get("", response_model=DashboardSummary)
async def dashboard(days: Optional[str] = None, service: ReportService = Depends(get_report_service)):
    return await service.dashboard(positive_int(days, DEFAULT_TREND_DAYS, "days"))


@router.get("/sales-trends", response_model=list[SalesTrend])
async def sales_trends(days: Optional[str] = None, service: ReportService = Depends(get_report_service)):
    return await service.sales_trends(positive_int(days, DEFAULT_TREND_DAYS, "days"))


@router.get("/low-stock", response_model=list[LowStockItem])
async def low_stock(service: ReportService = Depends(get_report_service)):
    return await service.low_stock_items()


@router.get("/top-customers", response_model=list[TopCustomer])
async def top_customers(
    limit: Optional[str] = None,
    days: Optional[str] = None,
    service: ReportService = Depends(get_report_service),
):
    limit_value = positive_int(limit, DEFAULT_TOP_CUSTOMERS, "limit")
    days_value = positive_int(days, DEFAULT_CUSTOMER_DAYS, "days")
    return await service.top_customers(limit_value, days_value)


@router.get("/sales-trends/export")
async def export_sales_trends(days: Optional[str] = None, service: ReportService = Depends(get_report_service)):
    days_value = positive_int(days, DEFAULT_TREND_DAYS, "days")
    trends = await service.sales_trends(days_value)
    return csv_response(export.sales_trends_csv(trends), f"sales_trends_{days_value}_days.csv", "sales_trends")


@router.get("/low-stock/export")
async def export_low_stock(service: ReportService = Depends(get_report_service)):
    items = await service.low_stock_items()
    return csv_response(export.low_stock_csv(items), "low_stock_items.csv", "low_stock")


@router.get("/top-customers/export")
async def export_top_customers(
    limit: Optional[str] = None,
    days: Optional[str] = None,
    service: ReportService = Depends(get_report_service),
):
    limit_value = positive_int(limit, DEFAULT_TOP_CUSTOMERS_EXPORT, "limit")
    days_value = positive_int(days, DEFAULT_CUSTOMER_DAYS, "days")
    customers = await service.top_customers(limit_value, days_value)
    return csv_response(
        export.top_customers_csv(customers),
        f"top_customers_{days_value}_days.csv",
        "top_customers",
    )
