from prometheus_client import Counter, Histogram

# Business Metrics
scms_orders_created_total = Counter(
    "scms_orders_created_total",
    "Orders submitted with their line items",
    ["status"]  # Labels: 'success', 'failed'
)

scms_quotations_created_total = Counter(
    "scms_quotations_created_total",
    "Quotations submitted with their line items",
    ["status"]  # Labels: 'success', 'failed'
)

scms_order_status_transitions_total = Counter(
    "scms_order_status_transitions_total",
    "Order status change attempts",
    ["from_status", "to_status", "result"]  # result: 'applied', 'rejected'
)

scms_transaction_rollbacks_total = Counter(
    "scms_transaction_rollbacks_total",
    "Database transactions rolled back",
    ["operation"]  # Labels: 'create order', 'delete quotation', etc.
)

scms_report_export_total = Counter(
    "scms_report_export_total",
    "CSV report exports served",
    ["report"]  # Labels: 'sales_trends', 'low_stock', 'top_customers'
)

scms_dashboard_duration_seconds = Histogram(
    "scms_dashboard_duration_seconds",
    "Time spent assembling the dashboard summary"
)
