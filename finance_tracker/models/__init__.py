"""
Data Models Package

Pydantic models for the persisted finance document and the payloads
used to create and update entries.
"""

from finance_tracker.models.entries import (
    BillCreate,
    BillEntry,
    BillUpdate,
    Entry,
    EntryKind,
    IncomeCreate,
    IncomeEntry,
    IncomeUpdate,
    TransactionCreate,
    TransactionEntry,
    TransactionType,
    TransactionUpdate,
    generate_id,
)
from finance_tracker.models.validation import ValidationIssue, ValidationResult
from finance_tracker.models.document import (
    DEFAULT_CATEGORIES,
    DocumentSettings,
    FinanceAppData,
    MonthlyData,
    MonthlySummary,
)

__all__ = [
    # Entry models
    "BillCreate",
    "BillEntry",
    "BillUpdate",
    "Entry",
    "EntryKind",
    "IncomeCreate",
    "IncomeEntry",
    "IncomeUpdate",
    "TransactionCreate",
    "TransactionEntry",
    "TransactionType",
    "TransactionUpdate",
    "generate_id",
    # Document models
    "DEFAULT_CATEGORIES",
    "DocumentSettings",
    "FinanceAppData",
    "MonthlyData",
    "MonthlySummary",
    # Validation models
    "ValidationIssue",
    "ValidationResult",
]
