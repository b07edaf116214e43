"""
Tests for the storage backends

Google Sheets is never contacted: the client is a mock standing in for
GoogleSheetsClient and its worksheet.
"""

from unittest.mock import MagicMock

import pytest

from finance_tracker.services.storage import (
    InMemoryStorage,
    JsonFileStorage,
    StorageAdapter,
    StorageConnectionError,
    StorageError,
)
from finance_tracker.services.storage.google_sheets import (
    DOCUMENT_COLUMNS,
    MAX_CELL_LENGTH,
    GoogleSheetsStorage,
)


class TestInMemoryStorage:
    """Tests for the in-memory backend."""

    def test_missing_key(self):
        """Test an unknown key loads as None."""
        assert InMemoryStorage().load("finance-app-data") is None

    def test_store_and_load(self):
        """Test the last stored value is returned."""
        storage = InMemoryStorage()
        storage.store("k", "one")
        storage.store("k", "two")
        assert storage.load("k") == "two"

    def test_initial_values_copied(self):
        """Test initial values are copied, not shared."""
        initial = {"k": "v"}
        storage = InMemoryStorage(initial)
        storage.store("k", "changed")
        assert initial == {"k": "v"}

    def test_is_adapter(self):
        """Test the backend implements the interface."""
        assert isinstance(InMemoryStorage(), StorageAdapter)


class TestJsonFileStorage:
    """Tests for the JSON file backend."""

    def test_missing_file(self, tmp_path):
        """Test a key that was never stored loads as None."""
        assert JsonFileStorage(tmp_path).load("finance-app-data") is None

    def test_round_trip(self, tmp_path):
        """Test a stored value is read back unchanged."""
        storage = JsonFileStorage(tmp_path)
        storage.store("finance-app-data", '{"months": {}}')
        assert storage.load("finance-app-data") == '{"months": {}}'
        assert (tmp_path / "finance-app-data.json").read_text(encoding="utf-8") == '{"months": {}}'

    def test_creates_directory(self, tmp_path):
        """Test the data directory is created on first write."""
        storage = JsonFileStorage(tmp_path / "nested" / "data")
        storage.store("k", "v")
        assert storage.load("k") == "v"

    def test_overwrite_leaves_no_temp_files(self, tmp_path):
        """Test atomic replace cleans up after itself."""
        storage = JsonFileStorage(tmp_path)
        for i in range(3):
            storage.store("k", f"value {i}")

        assert [p.name for p in tmp_path.iterdir()] == ["k.json"]
        assert storage.load("k") == "value 2"

    def test_undecodable_bytes_load_as_text(self, tmp_path):
        """Test a file that isn't UTF-8 still loads, with bad bytes replaced."""
        (tmp_path / "k.json").write_bytes(b'{"months": \xff\xfe}')
        assert JsonFileStorage(tmp_path).load("k") == '{"months": ��}'

    def test_unicode(self, tmp_path):
        """Test non-ASCII text survives."""
        storage = JsonFileStorage(tmp_path)
        storage.store("k", "Café ☕ ₹")
        assert storage.load("k") == "Café ☕ ₹"

    @pytest.mark.parametrize("key", ["", "../escape", "a/b", "a\\b", ".hidden"])
    def test_invalid_key(self, tmp_path, key):
        """Test keys that could escape the directory are rejected."""
        storage = JsonFileStorage(tmp_path)
        with pytest.raises(StorageError):
            storage.store(key, "v")
        with pytest.raises(StorageError):
            storage.load(key)

    def test_write_failure_raises_storage_error(self, tmp_path):
        """Test OS errors surface as StorageError."""
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("x")
        storage = JsonFileStorage(blocker / "data")

        with pytest.raises(StorageError):
            storage.store("k", "v")


@pytest.fixture
def sheet() -> MagicMock:
    worksheet = MagicMock()
    worksheet.get_all_values.return_value = [
        DOCUMENT_COLUMNS,
        ["other-key", "other-value", "2024-01-01T00:00:00+00:00"],
        ["finance-app-data", '{"months": {}}', "2024-06-01T00:00:00+00:00"],
    ]
    return worksheet


@pytest.fixture
def sheets_storage(sheet) -> GoogleSheetsStorage:
    client = MagicMock()
    client.get_documents_sheet.return_value = sheet
    return GoogleSheetsStorage(client=client)


class TestGoogleSheetsStorage:
    """Tests for the Google Sheets backend with a mocked client."""

    def test_load_existing_key(self, sheets_storage):
        """Test the value column of the matching row is returned."""
        assert sheets_storage.load("finance-app-data") == '{"months": {}}'

    def test_load_missing_key(self, sheets_storage):
        """Test an unknown key loads as None."""
        assert sheets_storage.load("missing") is None

    def test_header_is_not_a_key(self, sheets_storage):
        """Test the header row never matches."""
        assert sheets_storage.load("key") is None

    def test_store_updates_existing_row(self, sheets_storage, sheet):
        """Test an existing key is updated in place."""
        sheets_storage.store("finance-app-data", '{"months": {"2024-06": {}}}')

        sheet.append_row.assert_not_called()
        sheet.update.assert_called_once()
        kwargs = sheet.update.call_args.kwargs
        assert kwargs["range_name"] == "B3:C3"
        assert kwargs["values"][0][0] == '{"months": {"2024-06": {}}}'
        assert kwargs["value_input_option"] == "RAW"

    def test_store_appends_new_key(self, sheets_storage, sheet):
        """Test a new key is appended as a row."""
        sheets_storage.store("new-key", "value")

        sheet.update.assert_not_called()
        row = sheet.append_row.call_args.args[0]
        assert row[:2] == ["new-key", "value"]
        assert len(row) == len(DOCUMENT_COLUMNS)

    def test_store_rejects_oversized_value(self, sheets_storage, sheet):
        """Test values over the cell limit are refused before any API call."""
        with pytest.raises(StorageError, match="too large"):
            sheets_storage.store("k", "x" * (MAX_CELL_LENGTH + 1))
        sheet.get_all_values.assert_not_called()

    def test_backend_errors_wrapped(self, sheets_storage, sheet):
        """Test unexpected exceptions become StorageError."""
        sheet.get_all_values.side_effect = RuntimeError("quota")

        with pytest.raises(StorageError, match="quota"):
            sheets_storage.load("finance-app-data")
        with pytest.raises(StorageError, match="quota"):
            sheets_storage.store("finance-app-data", "v")

    def test_connection_errors_pass_through(self, sheet):
        """Test StorageConnectionError isn't rewrapped."""
        client = MagicMock()
        client.get_documents_sheet.side_effect = StorageConnectionError("no credentials")
        storage = GoogleSheetsStorage(client=client)

        with pytest.raises(StorageConnectionError):
            storage.load("finance-app-data")
