"""
Entry Models for the Finance Tracker

Three kinds of entries are recorded per month: income, bills and
transactions. They share a common shape (id, amount, description, date and
timestamps) and each adds a few fields of its own.

DESIGN DECISION: Python attributes are snake_case, but the persisted JSON
uses camelCase names (createdAt, dueDate, isPaid...). An alias generator maps
between the two so documents written by earlier versions stay readable.

Amounts are held as Decimal so that summing many entries never drifts,
and written back to JSON as plain numbers.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional, Union
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
)
from pydantic.alias_generators import to_camel


def _amount_to_json(value: Decimal) -> Union[int, float]:
    """
    Write whole amounts as integers, everything else as floats.

    A float keeps about 15 significant digits; longer fractional amounts
    are rounded when the document is saved.
    """
    if value == value.to_integral_value():
        return int(value)
    return float(value)


Amount = Annotated[
    Decimal,
    PlainSerializer(_amount_to_json, return_type=Union[int, float], when_used="json"),
]


def generate_id() -> str:
    """Opaque entry identifier."""
    return uuid4().hex


# =============================================================================
# ENUMS
# =============================================================================

class EntryKind(str, Enum):
    """The three entry lists kept for every month."""
    INCOME = "income"
    BILLS = "bills"
    TRANSACTIONS = "transactions"


class TransactionType(str, Enum):
    """Transaction type. Most transactions are expenses."""
    EXPENSE = "expense"
    OTHER = "other"


# =============================================================================
# BASE MODEL
# =============================================================================

class FinanceModel(BaseModel):
    """
    Base for every persisted model.

    Accepts both camelCase (JSON) and snake_case (Python) keys on input.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


# =============================================================================
# STORED ENTRIES
# =============================================================================

class Entry(FinanceModel):
    """Fields shared by all three entry kinds."""

    id: str = Field(
        default_factory=generate_id,
        description="Opaque identifier, unique within the document"
    )
    amount: Amount = Field(
        ...,
        description="Amount in currency units"
    )
    description: str = Field(
        default="",
        description="Free-text description"
    )
    entry_date: date = Field(
        ...,
        alias="date",
        description="Calendar date of the entry"
    )
    created_at: datetime = Field(
        ...,
        description="When the entry was created"
    )
    updated_at: datetime = Field(
        ...,
        description="When the entry was last changed"
    )


class IncomeEntry(Entry):
    """Income received during the month."""

    source: str = Field(
        ...,
        description="Where the money came from, e.g. 'Salary'"
    )


class BillEntry(Entry):
    """
    A bill and its payment status.

    NOTE: is_paid and paid_date are set independently by the caller.
    Nothing here forces paid_date to be cleared when a bill is marked unpaid.
    """

    name: str = Field(
        ...,
        description="Bill name, e.g. 'Rent'"
    )
    due_date: date = Field(
        ...,
        description="Payment due date"
    )
    is_paid: bool = Field(
        default=False,
        description="Has the bill been paid?"
    )
    paid_date: Optional[date] = Field(
        default=None,
        description="When the bill was paid"
    )


class TransactionEntry(Entry):
    """A general transaction with a category."""

    category: str = Field(
        ...,
        description="Spending category, e.g. 'Food & Dining'"
    )
    type: TransactionType = Field(
        default=TransactionType.EXPENSE,
        description="Expense or other"
    )


# =============================================================================
# CREATE PAYLOADS - what a caller supplies for a new entry
# =============================================================================

class EntryCreate(FinanceModel):
    amount: Amount
    description: str = ""
    entry_date: date = Field(..., alias="date")


class IncomeCreate(EntryCreate):
    source: str


class BillCreate(EntryCreate):
    name: str
    due_date: date


class TransactionCreate(EntryCreate):
    category: str
    type: TransactionType = TransactionType.EXPENSE


# =============================================================================
# UPDATE PAYLOADS - every field optional
# =============================================================================

class EntryUpdate(FinanceModel):
    """
    Partial update for an entry.

    Only fields the caller actually supplied are applied (pydantic tracks
    them in model_fields_set), so leaving a field out is different from
    setting it to None. Unknown keys, including id and createdAt, are
    dropped.
    """
    model_config = ConfigDict(extra="ignore")

    amount: Optional[Amount] = None
    description: Optional[str] = None
    entry_date: Optional[date] = Field(default=None, alias="date")

    def changes(self) -> dict:
        """Supplied fields, keyed by Python attribute name."""
        return self.model_dump(exclude_unset=True)


class IncomeUpdate(EntryUpdate):
    source: Optional[str] = None


class BillUpdate(EntryUpdate):
    name: Optional[str] = None
    due_date: Optional[date] = None
    is_paid: Optional[bool] = None
    paid_date: Optional[date] = None


class TransactionUpdate(EntryUpdate):
    category: Optional[str] = None
    type: Optional[TransactionType] = None
