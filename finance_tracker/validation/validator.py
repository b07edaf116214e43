"""
Entry Form Validation

DESIGN DECISION: The store accepts any amount and any dates. Business
rules such as "amount must be positive" or "a bill can't be due before it
was issued" belong to the boundary that collects user input, so they live
here and the UI calls them before saving.

Validation NEVER fixes anything. It reports issues:
- error: the form must not be submitted
- warning: worth showing, but the entry can be saved
"""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel
from pydantic.alias_generators import to_snake

from finance_tracker.models.entries import EntryKind, TransactionType
from finance_tracker.models.validation import ValidationIssue, ValidationResult
from finance_tracker.months import month_label, month_of


Payload = Union[BaseModel, Mapping[str, Any]]


class EntryValidator:
    """
    Validates income, bill and transaction payloads.

    Payloads may use either the JSON names (dueDate) or the Python
    attribute names (due_date); "date" and "entry_date" are equivalent.
    """

    @staticmethod
    def _normalize(payload: Payload) -> dict[str, Any]:
        if isinstance(payload, BaseModel):
            payload = payload.model_dump()
        values = {to_snake(key): value for key, value in payload.items()}
        if "date" in values and "entry_date" not in values:
            values["entry_date"] = values.pop("date")
        return values

    @staticmethod
    def _parse_date(value: Any) -> Optional[date]:
        if isinstance(value, date):
            return value
        if isinstance(value, str) and value.strip():
            try:
                return date.fromisoformat(value.strip())
            except ValueError:
                return None
        return None

    def _check_text(
        self,
        values: dict[str, Any],
        field: str,
        label: str,
        issues: list[ValidationIssue],
    ) -> None:
        value = values.get(field)
        if value is None or not str(value).strip():
            issues.append(ValidationIssue(
                field=field,
                issue_type="missing",
                message=f"{label} is required",
                severity="error",
            ))

    def _check_amount(self, values: dict[str, Any], issues: list[ValidationIssue]) -> None:
        raw = values.get("amount")
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            issues.append(ValidationIssue(
                field="amount",
                issue_type="missing",
                message="Amount is required",
                severity="error",
            ))
            return

        try:
            amount = raw if isinstance(raw, Decimal) else Decimal(str(raw).strip())
        except InvalidOperation:
            amount = None
        if amount is None or not amount.is_finite() or isinstance(raw, bool):
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_format",
                message=f"Amount must be a number, got {raw!r}",
                severity="error",
            ))
            return

        if amount <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must be greater than 0",
                severity="error",
                suggested_fix="Enter the amount as a positive number",
            ))

    def _check_date(
        self,
        values: dict[str, Any],
        field: str,
        label: str,
        issues: list[ValidationIssue],
    ) -> Optional[date]:
        raw = values.get(field)
        if raw is None or raw == "":
            issues.append(ValidationIssue(
                field=field,
                issue_type="missing",
                message=f"{label} is required",
                severity="error",
            ))
            return None

        parsed = self._parse_date(raw)
        if parsed is None:
            issues.append(ValidationIssue(
                field=field,
                issue_type="invalid_format",
                message=f"{label} must be a date in YYYY-MM-DD format",
                severity="error",
            ))
        return parsed

    def _check_month(
        self,
        entry_date: Optional[date],
        month: Optional[str],
        issues: list[ValidationIssue],
    ) -> None:
        """Warn when an entry is dated outside the month it's being added to."""
        if entry_date is None or month is None:
            return
        if month_of(entry_date) != month:
            issues.append(ValidationIssue(
                field="entry_date",
                issue_type="outside_month",
                message=f"Date {entry_date.isoformat()} is not in {month_label(month)}",
                severity="warning",
                suggested_fix="Check the date or switch to the matching month",
            ))

    def validate_income(self, payload: Payload, month: Optional[str] = None) -> ValidationResult:
        values = self._normalize(payload)
        issues: list[ValidationIssue] = []

        self._check_text(values, "source", "Income source", issues)
        self._check_amount(values, issues)
        entry_date = self._check_date(values, "entry_date", "Date", issues)
        self._check_text(values, "description", "Description", issues)
        self._check_month(entry_date, month, issues)

        return ValidationResult(kind=EntryKind.INCOME.value, issues=issues)

    def validate_bill(self, payload: Payload, month: Optional[str] = None) -> ValidationResult:
        """
        Validate a bill payload.

        Besides the required fields, checks:
        - Due date is not before the bill date (error)
        - A paid bill has a paid date, an unpaid one doesn't (warnings)
        """
        values = self._normalize(payload)
        issues: list[ValidationIssue] = []

        self._check_text(values, "name", "Bill name", issues)
        self._check_amount(values, issues)
        entry_date = self._check_date(values, "entry_date", "Date", issues)
        due_date = self._check_date(values, "due_date", "Due date", issues)
        self._check_text(values, "description", "Description", issues)
        self._check_month(entry_date, month, issues)

        if entry_date and due_date and due_date < entry_date:
            issues.append(ValidationIssue(
                field="due_date",
                issue_type="inconsistent",
                message="Due date cannot be before the bill date",
                severity="error",
                suggested_fix="Please verify both dates",
            ))

        is_paid = bool(values.get("is_paid"))
        paid_date = self._parse_date(values.get("paid_date"))
        if is_paid and paid_date is None:
            issues.append(ValidationIssue(
                field="paid_date",
                issue_type="missing",
                message="Bill is marked paid but has no paid date",
                severity="warning",
                suggested_fix="Record the date the bill was paid",
            ))
        elif not is_paid and paid_date is not None:
            issues.append(ValidationIssue(
                field="paid_date",
                issue_type="inconsistent",
                message="Bill has a paid date but is not marked paid",
                severity="warning",
                suggested_fix="Mark the bill paid or clear the paid date",
            ))

        return ValidationResult(kind=EntryKind.BILLS.value, issues=issues)

    def validate_transaction(self, payload: Payload, month: Optional[str] = None) -> ValidationResult:
        values = self._normalize(payload)
        issues: list[ValidationIssue] = []

        self._check_text(values, "category", "Category", issues)
        self._check_amount(values, issues)
        entry_date = self._check_date(values, "entry_date", "Date", issues)
        self._check_text(values, "description", "Description", issues)
        self._check_month(entry_date, month, issues)

        kind = values.get("type", TransactionType.EXPENSE)
        try:
            TransactionType(kind)
        except ValueError:
            issues.append(ValidationIssue(
                field="type",
                issue_type="invalid_value",
                message=f"Transaction type must be 'expense' or 'other', got {kind!r}",
                severity="error",
            ))

        return ValidationResult(kind=EntryKind.TRANSACTIONS.value, issues=issues)

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """
        Generate a user-friendly summary of validation results.
        """
        if not result.issues:
            return "✅ All checks passed!"

        lines = []

        if result.has_errors:
            lines.append("❌ Please fix the following:")
            for issue in result.issues:
                if issue.severity == "error":
                    lines.append(f"   • {issue.message}")
                    if issue.suggested_fix:
                        lines.append(f"     💡 {issue.suggested_fix}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("⚠️ Please verify the following:")
            for warning in result.warnings:
                lines.append(f"   • {warning}")

        return "\n".join(lines)
