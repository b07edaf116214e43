"""Monthly insights package."""

from finance_tracker.reports.insights import (
    BillStatusReport,
    CategoryTotal,
    bill_status,
    days_until_due,
    due_label,
    savings_rate,
    top_categories,
    transaction_type_counts,
)

__all__ = [
    "BillStatusReport",
    "CategoryTotal",
    "bill_status",
    "days_until_due",
    "due_label",
    "savings_rate",
    "top_categories",
    "transaction_type_counts",
]
