"""
Monthly Insights

Read-only views computed from a MonthlyData record: bill payment status,
upcoming and overdue bills, top spending categories.

DESIGN DECISION: These never touch storage. They take the month the caller
already fetched, so a page can show the summary and its insights from the
same snapshot.
"""

from collections import defaultdict
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from pydantic import BaseModel, Field

from finance_tracker.models.document import MonthlyData, MonthlySummary
from finance_tracker.models.entries import BillEntry, TransactionType


class CategoryTotal(BaseModel):
    category: str
    total: Decimal
    count: int = Field(ge=0)


class BillStatusReport(BaseModel):
    """Payment status of a month's bills."""

    paid_count: int = Field(ge=0)
    unpaid_count: int = Field(ge=0)
    paid_total: Decimal
    unpaid_total: Decimal

    # Unpaid bills due within the window (overdue ones included), soonest first
    upcoming: list[BillEntry] = Field(default_factory=list)
    overdue: list[BillEntry] = Field(default_factory=list)

    @property
    def total_count(self) -> int:
        return self.paid_count + self.unpaid_count

    @property
    def all_paid(self) -> bool:
        return self.unpaid_count == 0


def days_until_due(bill: BillEntry, today: Optional[date] = None) -> int:
    """Days from today to the due date; negative once overdue."""
    today = today or date.today()
    return (bill.due_date - today).days


def due_label(bill: BillEntry, today: Optional[date] = None) -> str:
    """
    Short description of when a bill is due.

    "3 days overdue", "Due today", "Due tomorrow", "Due in 5 days"
    """
    days = days_until_due(bill, today)
    if days < 0:
        return f"{abs(days)} days overdue"
    if days == 0:
        return "Due today"
    if days == 1:
        return "Due tomorrow"
    return f"Due in {days} days"


def bill_status(
    monthly: MonthlyData,
    today: Optional[date] = None,
    due_soon_days: int = 7,
) -> BillStatusReport:
    """Summarize which bills are paid, which are due soon and which are overdue."""
    today = today or date.today()
    horizon = today + timedelta(days=due_soon_days)

    paid = [bill for bill in monthly.bills if bill.is_paid]
    unpaid = [bill for bill in monthly.bills if not bill.is_paid]

    upcoming = sorted(
        (bill for bill in unpaid if bill.due_date <= horizon),
        key=lambda b: b.due_date,
    )
    overdue = [bill for bill in upcoming if bill.due_date < today]

    return BillStatusReport(
        paid_count=len(paid),
        unpaid_count=len(unpaid),
        paid_total=sum((b.amount for b in paid), Decimal("0")),
        unpaid_total=sum((b.amount for b in unpaid), Decimal("0")),
        upcoming=upcoming,
        overdue=overdue,
    )


def top_categories(monthly: MonthlyData, limit: int = 5) -> list[CategoryTotal]:
    """Transaction totals per category, largest first."""
    totals: dict[str, Decimal] = defaultdict(lambda: Decimal("0"))
    counts: dict[str, int] = defaultdict(int)
    for transaction in monthly.transactions:
        totals[transaction.category] += transaction.amount
        counts[transaction.category] += 1

    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return [
        CategoryTotal(category=category, total=total, count=counts[category])
        for category, total in ranked[:limit]
    ]


def transaction_type_counts(monthly: MonthlyData) -> dict[str, int]:
    counts = {kind.value: 0 for kind in TransactionType}
    for transaction in monthly.transactions:
        counts[transaction.type.value] += 1
    return counts


def savings_rate(summary: MonthlySummary) -> Optional[int]:
    """
    Net amount as a whole percentage of income.

    None when there is no income to compare against.
    """
    if summary.total_income <= 0:
        return None
    rate = summary.net_amount / summary.total_income * 100
    return int(rate.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
