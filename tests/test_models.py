"""
Tests for the Finance Tracker models

Test strategy:
1. Unit tests for individual components (models, validators)
2. Integration tests for the store over in-memory storage
3. No real backends in tests (use mocks)
"""

import json
from datetime import date, datetime, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from finance_tracker.models import (
    DEFAULT_CATEGORIES,
    BillEntry,
    BillUpdate,
    EntryKind,
    FinanceAppData,
    IncomeCreate,
    IncomeEntry,
    IncomeUpdate,
    MonthlyData,
    MonthlySummary,
    TransactionEntry,
    TransactionType,
    ValidationIssue,
    ValidationResult,
)


NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


def make_bill(**overrides) -> BillEntry:
    fields = {
        "id": "bill-1",
        "name": "Rent",
        "amount": Decimal("1200"),
        "date": date(2024, 6, 1),
        "due_date": date(2024, 6, 5),
        "created_at": NOW,
        "updated_at": NOW,
    }
    fields.update(overrides)
    return BillEntry(**fields)


class TestEntryModels:
    """Tests for the stored entry models."""

    def test_income_from_camel_case(self):
        """Test entries parse the persisted camelCase names."""
        entry = IncomeEntry.model_validate({
            "id": "abc",
            "amount": 5000,
            "description": "June pay",
            "date": "2024-06-01",
            "createdAt": "2024-06-01T10:00:00.000Z",
            "updatedAt": "2024-06-01T10:00:00.000Z",
            "source": "Salary",
        })
        assert entry.source == "Salary"
        assert entry.amount == Decimal("5000")
        assert entry.entry_date == date(2024, 6, 1)
        assert entry.created_at.tzinfo is not None

    def test_income_from_snake_case(self):
        """Test Python attribute names are accepted as well."""
        entry = IncomeEntry(
            source="Salary",
            amount=Decimal("10"),
            entry_date=date(2024, 6, 1),
            created_at=NOW,
            updated_at=NOW,
        )
        assert entry.entry_date == date(2024, 6, 1)
        assert entry.id

    def test_strips_whitespace(self):
        """Test that whitespace is stripped from text fields."""
        bill = make_bill(name="  Electricity  ")
        assert bill.name == "Electricity"

    def test_bill_defaults_unpaid(self):
        """Test a bill starts unpaid without a paid date."""
        bill = make_bill()
        assert bill.is_paid is False
        assert bill.paid_date is None

    def test_transaction_type_values(self):
        """Test transaction type serializes as its string value."""
        entry = TransactionEntry(
            category="Shopping",
            amount=Decimal("40"),
            date=date(2024, 6, 2),
            created_at=NOW,
            updated_at=NOW,
            type="other",
        )
        assert entry.type == TransactionType.OTHER
        assert entry.model_dump(mode="json")["type"] == "other"

    def test_transaction_type_rejects_unknown(self):
        """Test only expense and other are valid types."""
        with pytest.raises(ValidationError):
            TransactionEntry(
                category="Shopping",
                amount=Decimal("40"),
                date=date(2024, 6, 2),
                created_at=NOW,
                updated_at=NOW,
                type="refund",
            )

    def test_entry_kind_values(self):
        """Test entry kinds match the month's list names."""
        assert [kind.value for kind in EntryKind] == ["income", "bills", "transactions"]


class TestAmountSerialization:
    """Tests for how amounts reach JSON."""

    def test_whole_amount_is_int(self):
        """Test whole amounts are written without a fraction."""
        dumped = make_bill(amount=Decimal("1200.00")).model_dump(mode="json", by_alias=True)
        assert dumped["amount"] == 1200
        assert isinstance(dumped["amount"], int)

    def test_fractional_amount_is_float(self):
        """Test fractional amounts are written as numbers, not strings."""
        dumped = make_bill(amount=Decimal("12.5")).model_dump(mode="json", by_alias=True)
        assert dumped["amount"] == 12.5
        assert isinstance(dumped["amount"], float)

    def test_python_dump_keeps_decimal(self):
        """Test python-mode dumps leave amounts as Decimal."""
        assert make_bill().model_dump()["amount"] == Decimal("1200")

    def test_paid_date_omitted_when_absent(self):
        """Test an unset paid date is left out of the JSON."""
        document = FinanceAppData.fresh("2024-06")
        monthly = MonthlyData.empty("2024-06")
        monthly.bills.append(make_bill())
        document.months["2024-06"] = monthly

        raw = json.loads(document.to_json())
        bill = raw["months"]["2024-06"]["bills"][0]
        assert "paidDate" not in bill
        assert bill["dueDate"] == "2024-06-05"
        assert bill["isPaid"] is False

    def test_paid_date_written_when_set(self):
        """Test a paid date is written under its camelCase name."""
        bill = make_bill(is_paid=True, paid_date=date(2024, 6, 4))
        dumped = bill.model_dump(mode="json", by_alias=True)
        assert dumped["paidDate"] == "2024-06-04"


class TestPayloadModels:
    """Tests for create and update payloads."""

    def test_create_requires_fields(self):
        """Test a create payload without a source is rejected."""
        with pytest.raises(ValidationError):
            IncomeCreate.model_validate({"amount": 10, "date": "2024-06-01"})

    def test_create_description_defaults_empty(self):
        """Test description is optional on create."""
        payload = IncomeCreate.model_validate(
            {"source": "Gift", "amount": 10, "date": "2024-06-01"}
        )
        assert payload.description == ""

    def test_update_changes_only_supplied(self):
        """Test omitted fields don't appear in the changes."""
        update = IncomeUpdate.model_validate({"amount": 10})
        assert update.changes() == {"amount": Decimal("10")}

    def test_update_keeps_explicit_none(self):
        """Test explicit None is a change, distinct from omission."""
        update = BillUpdate.model_validate({"isPaid": False, "paidDate": None})
        assert update.changes() == {"is_paid": False, "paid_date": None}

    def test_update_ignores_unknown_keys(self):
        """Test id and createdAt are silently dropped from updates."""
        update = IncomeUpdate.model_validate(
            {"id": "x", "createdAt": "2024-01-01T00:00:00Z", "source": "Bonus"}
        )
        assert update.changes() == {"source": "Bonus"}

    def test_update_date_alias(self):
        """Test the entry date is updated through its "date" name."""
        update = IncomeUpdate.model_validate({"date": "2024-06-20"})
        assert update.changes() == {"entry_date": date(2024, 6, 20)}


class TestDocumentModels:
    """Tests for the document and month models."""

    def test_fresh_document(self):
        """Test a fresh document has no months and the default categories."""
        document = FinanceAppData.fresh("2024-06")
        assert document.months == {}
        assert document.settings.current_month == "2024-06"
        assert document.settings.default_categories == DEFAULT_CATEGORIES
        assert document.settings.default_categories is not DEFAULT_CATEGORIES

    def test_fresh_document_custom_categories(self):
        """Test custom default categories replace the built-in list."""
        document = FinanceAppData.fresh("2024-06", ["Rent"])
        assert document.settings.default_categories == ["Rent"]

    def test_empty_month(self):
        """Test an empty month is zero-valued."""
        monthly = MonthlyData.empty("2024-06")
        assert monthly.entry_count == 0
        assert monthly.summary == MonthlySummary()

    def test_month_key_validated(self):
        """Test month records reject malformed keys."""
        with pytest.raises(ValidationError):
            MonthlyData.empty("2024-13")

    def test_from_json_rejects_garbage(self):
        """Test invalid JSON surfaces as a ValidationError."""
        with pytest.raises(ValidationError):
            FinanceAppData.from_json("not json")

    def test_month_key_must_match_record(self):
        """Test a month record stored under a different key is rejected."""
        raw = json.loads(FinanceAppData.fresh("2024-06").to_json())
        raw["months"]["2024-05"] = {"month": "2024-04"}

        with pytest.raises(ValidationError, match="stored under key"):
            FinanceAppData.from_json(json.dumps(raw))

    def test_all_entry_ids(self):
        """Test ids are collected from every month and list."""
        document = FinanceAppData.fresh("2024-06")
        june = MonthlyData.empty("2024-06")
        june.bills.append(make_bill(id="a"))
        may = MonthlyData.empty("2024-05")
        may.bills.append(make_bill(id="b"))
        document.months.update({"2024-06": june, "2024-05": may})

        assert document.all_entry_ids() == {"a", "b"}

    def test_round_trip(self):
        """Test a document survives to_json/from_json unchanged."""
        document = FinanceAppData.fresh("2024-06")
        monthly = MonthlyData.empty("2024-06")
        monthly.bills.append(make_bill(amount=Decimal("99.99")))
        document.months["2024-06"] = monthly

        assert FinanceAppData.from_json(document.to_json()) == document


class TestValidationModels:
    """Tests for validation models."""

    def test_validation_result_has_errors(self):
        """Test ValidationResult correctly identifies errors."""
        result = ValidationResult(
            kind="bill",
            issues=[
                ValidationIssue(
                    field="amount",
                    issue_type="missing",
                    message="Amount is required",
                    severity="error",
                ),
                ValidationIssue(
                    field="paid_date",
                    issue_type="missing",
                    message="Paid bills should have a paid date",
                    severity="warning",
                ),
            ],
        )
        assert result.has_errors is True
        assert result.is_valid is False
        assert result.error_count == 1
        assert len(result.warnings) == 1

    def test_validation_result_no_errors(self):
        """Test ValidationResult with only warnings is valid."""
        result = ValidationResult(
            kind="income",
            issues=[
                ValidationIssue(
                    field="date",
                    issue_type="outside_month",
                    message="Date is outside the selected month",
                    severity="warning",
                ),
            ],
        )
        assert result.has_errors is False
        assert result.is_valid is True

    def test_severity_restricted(self):
        """Test severity must be error, warning or info."""
        with pytest.raises(ValidationError):
            ValidationIssue(field="x", issue_type="y", message="z", severity="fatal")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
