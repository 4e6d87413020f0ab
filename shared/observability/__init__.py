from .setup import setup_observability
from .metrics import (
    scms_orders_created_total,
    scms_quotations_created_total,
    scms_order_status_transitions_total,
    scms_transaction_rollbacks_total,
    scms_report_export_total,
    scms_dashboard_duration_seconds
)
