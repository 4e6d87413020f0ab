import csv
import io

from .schemas import LowStockItem, SalesTrend, TopCustomer


def _to_csv(header: list[str], rows) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(header)
    writer.writerows(rows)
    return buffer.getvalue()


def sales_trends_csv(trends: list[SalesTrend]) -> str:
    return _to_csv(
        ["Date", "Total Sales"],
        ([trend.day, f"{trend.total_amount:.2f}"] for trend in trends),
    )


def low_stock_csv(items: list[LowStockItem]) -> str:
    return _to_csv(
        ["ID", "Product ID", "Product Name", "Current Stock", "Reorder Level", "Unit Price"],
        (
            [item.id, item.product_id, item.name, item.current_stock, item.reorder_level, f"{item.unit_price:.2f}"]
            for item in items
        ),
    )


def top_customers_csv(customers: list[TopCustomer]) -> str:
    return _to_csv(
        ["Customer ID", "Company Name", "Contact Name", "Total Spent", "Order Count"],
        (
            [customer.id, customer.name, customer.contact_name or "", f"{customer.total_spent:.2f}", customer.orders]
            for customer in customers
        ),
    )
