"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets is offered as a backend because:
1. The user can reach their data from any device
2. No database setup required
3. Built-in backup (Google's infrastructure)

The sheet is a plain key-value table, one document per row:

    key | value | updated_at

TRADEOFFS:
- A single cell holds at most 50,000 characters, which caps document size
- Each write replaces the whole value cell (that's the contract anyway)
"""

from datetime import datetime, timezone
from typing import Optional

import gspread
from google.oauth2.service_account import Credentials
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from finance_tracker.config import GoogleSheetsSettings, get_settings
from finance_tracker.services.storage.interface import (
    StorageAdapter,
    StorageConnectionError,
    StorageError,
)


DOCUMENT_COLUMNS = [
    "key",
    "value",
    "updated_at",
]

# Google Sheets per-cell limit
MAX_CELL_LENGTH = 50000


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise StorageConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise StorageConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise StorageConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def get_documents_sheet(self) -> gspread.Worksheet:
        """Get or create the documents worksheet."""
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(self._settings.documents_sheet_name)
        except gspread.WorksheetNotFound:
            # Create the sheet with headers
            sheet = spreadsheet.add_worksheet(
                title=self._settings.documents_sheet_name,
                rows=10,
                cols=len(DOCUMENT_COLUMNS),
            )
            sheet.append_row(DOCUMENT_COLUMNS)
        return sheet


class GoogleSheetsStorage(StorageAdapter):
    """
    Google Sheets implementation of the key-value adapter.

    Keys live in column A, serialized documents in column B.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    @staticmethod
    def _find_row(all_rows: list, key: str) -> Optional[int]:
        """1-based sheet row index of a key, skipping the header."""
        for idx, row in enumerate(all_rows[1:], start=2):
            if row and row[0] == key:
                return idx
        return None

    def load(self, key: str) -> Optional[str]:
        """Read the value stored under a key."""
        try:
            sheet = self._client.get_documents_sheet()
            all_rows = sheet.get_all_values()
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to read document: {e}")

        idx = self._find_row(all_rows, key)
        if idx is None:
            return None
        row = all_rows[idx - 1]
        return row[1] if len(row) > 1 and row[1] else None

    def store(self, key: str, value: str) -> None:
        """Write the value under a key, updating the row in place if it exists."""
        if len(value) > MAX_CELL_LENGTH:
            raise StorageError(
                f"Document too large for a single cell: {len(value)} characters "
                f"(limit {MAX_CELL_LENGTH})"
            )
        try:
            self._write_row(key, value)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to save document: {e}")

    @retry(
        retry=retry_if_exception_type(gspread.exceptions.APIError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def _write_row(self, key: str, value: str) -> None:
        sheet = self._client.get_documents_sheet()
        all_rows = sheet.get_all_values()
        updated_at = datetime.now(timezone.utc).isoformat()

        idx = self._find_row(all_rows, key)
        if idx is None:
            sheet.append_row([key, value, updated_at], value_input_option="RAW")
        else:
            sheet.update(
                range_name=f"B{idx}:C{idx}",
                values=[[value, updated_at]],
                value_input_option="RAW",
            )
