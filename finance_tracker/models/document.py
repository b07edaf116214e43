"""
Document Models

The whole application state is one document:

    {
      "months": {"2024-06": {...MonthlyData...}, ...},
      "settings": {"currentMonth": "2024-06", "defaultCategories": [...]}
    }

It is serialized as JSON and stored under a single key. Field names and
nesting are kept exactly as earlier versions wrote them.
"""

from decimal import Decimal
from typing import Optional

from pydantic import Field, model_validator

from finance_tracker.models.entries import (
    Amount,
    BillEntry,
    FinanceModel,
    IncomeEntry,
    TransactionEntry,
)


DEFAULT_CATEGORIES = [
    "Food & Dining",
    "Transportation",
    "Shopping",
    "Entertainment",
    "Bills & Utilities",
    "Healthcare",
    "Home & Garden",
    "Other",
]


class MonthlySummary(FinanceModel):
    """
    Totals for one month.

    Fully derived from the entry lists. Never edit directly; the store
    recomputes it on every mutation.
    """

    total_income: Amount = Decimal("0")
    total_bills: Amount = Decimal("0")
    total_transactions: Amount = Decimal("0")
    net_amount: Amount = Decimal("0")


class MonthlyData(FinanceModel):
    """Everything recorded for one calendar month."""

    month: str = Field(
        ...,
        pattern=r"^\d{4}-(0[1-9]|1[0-2])$",
        description="Month key, YYYY-MM"
    )
    income: list[IncomeEntry] = Field(default_factory=list)
    bills: list[BillEntry] = Field(default_factory=list)
    transactions: list[TransactionEntry] = Field(default_factory=list)
    summary: MonthlySummary = Field(default_factory=MonthlySummary)

    @classmethod
    def empty(cls, month: str) -> "MonthlyData":
        """Zero-valued record for a month nothing has been recorded in."""
        return cls(month=month)

    @property
    def entry_count(self) -> int:
        return len(self.income) + len(self.bills) + len(self.transactions)


class DocumentSettings(FinanceModel):
    current_month: str
    default_categories: list[str] = Field(
        default_factory=lambda: list(DEFAULT_CATEGORIES)
    )


class FinanceAppData(FinanceModel):
    """The root persisted document."""

    months: dict[str, MonthlyData] = Field(default_factory=dict)
    settings: DocumentSettings

    @model_validator(mode="after")
    def check_month_keys(self) -> "FinanceAppData":
        """Each month record must be stored under its own key."""
        for key, monthly in self.months.items():
            if monthly.month != key:
                raise ValueError(
                    f"Month record {monthly.month!r} is stored under key {key!r}"
                )
        return self

    @classmethod
    def fresh(cls, current_month: str, default_categories: Optional[list[str]] = None) -> "FinanceAppData":
        """A brand new document with no months recorded."""
        return cls(
            settings=DocumentSettings(
                current_month=current_month,
                default_categories=list(default_categories or DEFAULT_CATEGORIES),
            )
        )

    @classmethod
    def from_json(cls, raw: str) -> "FinanceAppData":
        """
        Parse a stored document.

        Raises pydantic.ValidationError for invalid JSON as well as for
        a document of the wrong shape.
        """
        return cls.model_validate_json(raw)

    def to_json(self) -> str:
        """Serialize with the camelCase names; an absent paidDate is omitted."""
        return self.model_dump_json(by_alias=True, exclude_none=True)

    def all_entry_ids(self) -> set[str]:
        """Every entry id in every month."""
        ids = set()
        for monthly in self.months.values():
            for entries in (monthly.income, monthly.bills, monthly.transactions):
                ids.update(entry.id for entry in entries)
        return ids
