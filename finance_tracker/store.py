"""
Monthly Store

The store is the only component that reads or writes the persisted
document. Every operation is one synchronous cycle:

    load whole document -> locate/create month -> mutate
        -> recompute summary -> store whole document

There is no cache. The document in storage is the single source of truth
and is reloaded on every call, so two stores over the same adapter always
agree.

GUARANTEES:
- A month's summary equals the totals of its entries after every mutation
- Entry ids are unique across the whole document
- update/delete of a missing entry returns None/False and writes nothing
- An unreadable stored document is replaced by a fresh one, never raised
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Mapping, Optional, TypeVar, Union

from pydantic import BaseModel, ValidationError

from finance_tracker.config import Settings, StorageSettings, get_settings
from finance_tracker.log import configure_logging, get_logger
from finance_tracker.models.document import (
    FinanceAppData,
    MonthlyData,
    MonthlySummary,
)
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
    TransactionUpdate,
    generate_id,
)
from finance_tracker.months import current_month, validate_month
from finance_tracker.services.storage import (
    InMemoryStorage,
    JsonFileStorage,
    StorageAdapter,
)


DOCUMENT_KEY = "finance-app-data"

E = TypeVar("E", bound=Entry)
P = TypeVar("P", bound=BaseModel)

Payload = Union[BaseModel, Mapping[str, Any]]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def calculate_summary(monthly_data: MonthlyData) -> MonthlySummary:
    """
    Fold a month's entries into its summary.

    Pure function: the month is not modified.
    """
    total_income = sum((item.amount for item in monthly_data.income), Decimal("0"))
    total_bills = sum((item.amount for item in monthly_data.bills), Decimal("0"))
    total_transactions = sum(
        (item.amount for item in monthly_data.transactions), Decimal("0")
    )
    return MonthlySummary(
        total_income=total_income,
        total_bills=total_bills,
        total_transactions=total_transactions,
        net_amount=total_income - total_bills - total_transactions,
    )


class MonthlyStore:
    """
    CRUD for income, bills and transactions, grouped by month.

    Usage:
        store = MonthlyStore(JsonFileStorage("data"))
        entry = store.add_income("2024-06", {"source": "Salary", "amount": 5000,
                                             "description": "June pay", "date": "2024-06-01"})
        store.get_monthly_data("2024-06").summary.net_amount  # Decimal("5000")
    """

    def __init__(
        self,
        storage: StorageAdapter,
        document_key: str = DOCUMENT_KEY,
        clock: Optional[Callable[[], datetime]] = None,
        default_categories: Optional[list[str]] = None,
    ):
        """
        Initialize the store.

        Args:
            storage: Key-value backend holding the document
            document_key: Key the document is stored under
            clock: Returns the current time; must be timezone-aware.
                   Defaults to UTC now.
            default_categories: Categories written into a fresh document
        """
        self._storage = storage
        self._key = document_key
        self._clock = clock or utc_now
        self._default_categories = default_categories
        self._logger = get_logger(__name__)

    # -------------------------------------------------------------------------
    # Bootstrap
    # -------------------------------------------------------------------------

    def current_month(self) -> str:
        """Current "YYYY-MM" in the local calendar."""
        return current_month(self._clock())

    def _fresh_document(self) -> FinanceAppData:
        return FinanceAppData.fresh(self.current_month(), self._default_categories)

    def _read_document(self) -> tuple[FinanceAppData, bool]:
        """
        Load the document and apply defaults, without writing.

        Returns:
            (document, changed) - changed is True when the stored document
            was missing or unreadable, or when the current month had to be
            added or refreshed. The caller decides whether to persist.
        """
        raw = self._storage.load(self._key)
        changed = False

        if raw is None:
            document = self._fresh_document()
            changed = True
        else:
            try:
                document = FinanceAppData.from_json(raw)
            except ValidationError as e:
                self._logger.warning(
                    "document_unreadable",
                    key=self._key,
                    error_count=e.error_count(),
                    error=str(e).splitlines()[0],
                )
                document = self._fresh_document()
                changed = True

        month = self.current_month()
        if month not in document.months:
            document.months[month] = MonthlyData.empty(month)
            changed = True
        if document.settings.current_month != month:
            document.settings.current_month = month
            changed = True

        return document, changed

    def _write_document(self, document: FinanceAppData) -> None:
        self._storage.store(self._key, document.to_json())

    def load_document(self) -> FinanceAppData:
        """
        Load the whole document, persisting any defaults that were applied.
        """
        document, changed = self._read_document()
        if changed:
            self._write_document(document)
        return document

    def get_monthly_data(self, month: str) -> MonthlyData:
        """
        Get one month's data, creating an empty record if needed.

        Never returns None for a valid month key, past, present or future.

        Raises:
            InvalidMonthError: If month is not YYYY-MM
        """
        validate_month(month)
        document, changed = self._read_document()

        monthly = document.months.get(month)
        if monthly is None:
            monthly = MonthlyData.empty(month)
            document.months[month] = monthly
            changed = True
            self._logger.info("month_created", month=month)

        if changed:
            self._write_document(document)
        return monthly

    def get_current_month_data(self) -> MonthlyData:
        return self.get_monthly_data(self.current_month())

    def get_available_months(self) -> list[str]:
        """All recorded month keys, most recent first."""
        document = self.load_document()
        return sorted(document.months.keys(), reverse=True)

    def get_default_categories(self) -> list[str]:
        return list(self.load_document().settings.default_categories)

    # -------------------------------------------------------------------------
    # Shared mutation logic
    # -------------------------------------------------------------------------

    @staticmethod
    def _coerce(model_cls: type[P], data: Payload) -> P:
        if isinstance(data, model_cls):
            return data
        if isinstance(data, BaseModel):
            data = data.model_dump(exclude_unset=True)
        return model_cls.model_validate(data)

    def _now(self, not_before: Optional[datetime] = None) -> datetime:
        """
        Current timestamp, never earlier than not_before.

        Keeps updatedAt monotonic even if the wall clock steps backwards.
        """
        now = self._clock()
        if not_before is not None:
            if not_before.tzinfo is None:
                not_before = not_before.replace(tzinfo=timezone.utc)
            if now < not_before:
                return not_before
        return now

    @staticmethod
    def _new_id(document: FinanceAppData) -> str:
        taken = document.all_entry_ids()
        entry_id = generate_id()
        while entry_id in taken:
            entry_id = generate_id()
        return entry_id

    def _commit(self, document: FinanceAppData, month: str, monthly: MonthlyData) -> None:
        """Recompute the month's summary and persist the whole document."""
        monthly.summary = calculate_summary(monthly)
        document.months[month] = monthly
        self._write_document(document)

    def _add(
        self,
        month: str,
        kind: EntryKind,
        entry_cls: type[E],
        create_cls: type[P],
        data: Payload,
    ) -> E:
        validate_month(month)
        payload = self._coerce(create_cls, data)

        document, _ = self._read_document()
        monthly = document.months.get(month) or MonthlyData.empty(month)

        now = self._now()
        entry = entry_cls(
            id=self._new_id(document),
            created_at=now,
            updated_at=now,
            **payload.model_dump(),
        )
        getattr(monthly, kind.value).append(entry)
        self._commit(document, month, monthly)

        self._logger.info(
            "entry_added",
            kind=kind.value,
            month=month,
            entry_id=entry.id,
            amount=str(entry.amount),
        )
        return entry

    def _update(
        self,
        month: str,
        kind: EntryKind,
        entry_cls: type[E],
        update_cls: type[P],
        entry_id: str,
        data: Payload,
    ) -> Optional[E]:
        validate_month(month)
        changes = self._coerce(update_cls, data).changes()

        document, _ = self._read_document()
        monthly = document.months.get(month)
        entries = getattr(monthly, kind.value) if monthly is not None else []

        index = next(
            (i for i, item in enumerate(entries) if item.id == entry_id),
            None,
        )
        if index is None:
            self._logger.debug(
                "entry_not_found", op="update", kind=kind.value, month=month, entry_id=entry_id
            )
            return None

        existing = entries[index]
        merged = existing.model_dump()
        merged.update(changes)
        merged["id"] = existing.id
        merged["created_at"] = existing.created_at
        merged["updated_at"] = self._now(not_before=existing.updated_at)
        updated = entry_cls.model_validate(merged)

        entries[index] = updated
        self._commit(document, month, monthly)

        self._logger.info(
            "entry_updated",
            kind=kind.value,
            month=month,
            entry_id=entry_id,
            fields=sorted(changes),
        )
        return updated

    def _delete(self, month: str, kind: EntryKind, entry_id: str) -> bool:
        validate_month(month)

        document, _ = self._read_document()
        monthly = document.months.get(month)
        if monthly is None:
            self._logger.debug(
                "entry_not_found", op="delete", kind=kind.value, month=month, entry_id=entry_id
            )
            return False

        entries = getattr(monthly, kind.value)
        remaining = [item for item in entries if item.id != entry_id]
        if len(remaining) == len(entries):
            self._logger.debug(
                "entry_not_found", op="delete", kind=kind.value, month=month, entry_id=entry_id
            )
            return False

        setattr(monthly, kind.value, remaining)
        self._commit(document, month, monthly)

        self._logger.info("entry_deleted", kind=kind.value, month=month, entry_id=entry_id)
        return True

    # -------------------------------------------------------------------------
    # Income
    # -------------------------------------------------------------------------

    def add_income(self, month: str, data: Union[IncomeCreate, Mapping[str, Any]]) -> IncomeEntry:
        return self._add(month, EntryKind.INCOME, IncomeEntry, IncomeCreate, data)

    def update_income(
        self, month: str, entry_id: str, data: Union[IncomeUpdate, Mapping[str, Any]]
    ) -> Optional[IncomeEntry]:
        return self._update(month, EntryKind.INCOME, IncomeEntry, IncomeUpdate, entry_id, data)

    def delete_income(self, month: str, entry_id: str) -> bool:
        return self._delete(month, EntryKind.INCOME, entry_id)

    # -------------------------------------------------------------------------
    # Bills
    # -------------------------------------------------------------------------

    def add_bill(self, month: str, data: Union[BillCreate, Mapping[str, Any]]) -> BillEntry:
        """Add a bill. New bills always start unpaid."""
        return self._add(month, EntryKind.BILLS, BillEntry, BillCreate, data)

    def update_bill(
        self, month: str, entry_id: str, data: Union[BillUpdate, Mapping[str, Any]]
    ) -> Optional[BillEntry]:
        """
        Update a bill, e.g. {"isPaid": True, "paidDate": "2024-06-05"}.

        is_paid and paid_date are applied exactly as given; clearing
        paid_date when a bill is marked unpaid is up to the caller.
        """
        return self._update(month, EntryKind.BILLS, BillEntry, BillUpdate, entry_id, data)

    def delete_bill(self, month: str, entry_id: str) -> bool:
        return self._delete(month, EntryKind.BILLS, entry_id)

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    def add_transaction(
        self, month: str, data: Union[TransactionCreate, Mapping[str, Any]]
    ) -> TransactionEntry:
        return self._add(month, EntryKind.TRANSACTIONS, TransactionEntry, TransactionCreate, data)

    def update_transaction(
        self, month: str, entry_id: str, data: Union[TransactionUpdate, Mapping[str, Any]]
    ) -> Optional[TransactionEntry]:
        return self._update(
            month, EntryKind.TRANSACTIONS, TransactionEntry, TransactionUpdate, entry_id, data
        )

    def delete_transaction(self, month: str, entry_id: str) -> bool:
        return self._delete(month, EntryKind.TRANSACTIONS, entry_id)


def create_storage(settings: Optional[Settings] = None) -> StorageAdapter:
    """
    Build the configured storage backend.

    Google Sheets is imported only when selected, so its credentials are
    not required otherwise.
    """
    settings = settings or get_settings()
    storage_settings: StorageSettings = settings.storage

    if storage_settings.backend == "memory":
        return InMemoryStorage()
    if storage_settings.backend == "google_sheets":
        from finance_tracker.services.storage.google_sheets import (
            GoogleSheetsClient,
            GoogleSheetsStorage,
        )
        return GoogleSheetsStorage(GoogleSheetsClient(settings.google_sheets))
    return JsonFileStorage(storage_settings.data_dir)


def create_store(
    settings: Optional[Settings] = None,
    storage: Optional[StorageAdapter] = None,
) -> MonthlyStore:
    """
    Factory function wiring settings, logging and storage into a store.

    Args:
        settings: Application settings (defaults to get_settings())
        storage: Use this backend instead of the configured one
    """
    settings = settings or get_settings()
    app_settings = settings.app

    configure_logging(debug=app_settings.debug_mode)

    return MonthlyStore(
        storage=storage or create_storage(settings),
        document_key=settings.storage.document_key,
        default_categories=app_settings.default_categories_list,
    )
