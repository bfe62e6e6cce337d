"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets is offered as a durable backend because:
1. The ledger survives reinstalling the app or switching machines
2. No database setup required
3. Users can look at the raw state directly in Sheets

TRADEOFFS:
- One cell holds a whole document, and Sheets caps a cell at 50,000
  characters (a few hundred transactions)
- No transactions (each key is written with a single range update)

The implementation follows the abstract interface, so the engine does
not know or care that it is talking to a spreadsheet.
"""

from datetime import datetime, timezone
from typing import Optional

import gspread
from google.oauth2.service_account import Credentials
from tenacity import retry, stop_after_attempt, wait_exponential

from flow_ledger.config import GoogleSheetsSettings, get_settings
from flow_ledger.services.storage.interface import (
    ConnectionError,
    KeyValueStorageInterface,
    StorageError,
)


# Column layout of the state worksheet
STATE_COLUMNS = [
    "key",
    "value",
    "updated_at",
]

MAX_CELL_CHARACTERS = 50000


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
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

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
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def get_state_sheet(self) -> gspread.Worksheet:
        """Get or create the key/value worksheet."""
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(self._settings.state_sheet_name)
        except gspread.WorksheetNotFound:
            # Create the sheet with headers
            sheet = spreadsheet.add_worksheet(
                title=self._settings.state_sheet_name,
                rows=100,
                cols=len(STATE_COLUMNS),
            )
            sheet.append_row(STATE_COLUMNS)
        return sheet


class GoogleSheetsStorage(KeyValueStorageInterface):
    """
    Google Sheets implementation of the key-value store.

    One row per key: [key, value, updated_at]. Row 1 is the header.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _find_row(self, rows: list[list[str]], key: str) -> Optional[int]:
        """1-based sheet row index holding a key, skipping the header."""
        for idx, row in enumerate(rows[1:], start=2):
            if row and row[0] == key:
                return idx
        return None

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def load(self, key: str) -> Optional[str]:
        """Read the value cell for a key."""
        try:
            sheet = self._client.get_state_sheet()
            rows = sheet.get_all_values()
        except ConnectionError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to load '{key}': {e}")

        idx = self._find_row(rows, key)
        if idx is None:
            return None
        row = rows[idx - 1]
        return row[1] if len(row) > 1 else ""

    def save(self, key: str, value: str) -> None:
        """Update the row for a key, appending it if new."""
        if len(value) > MAX_CELL_CHARACTERS:
            raise StorageError(
                f"Value for '{key}' is {len(value)} characters, "
                f"Google Sheets cells hold at most {MAX_CELL_CHARACTERS}"
            )
        self._write_row([key, value, datetime.now(timezone.utc).isoformat()])

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def _write_row(self, new_row: list[str]) -> None:
        key = new_row[0]
        try:
            sheet = self._client.get_state_sheet()
            rows = sheet.get_all_values()
            idx = self._find_row(rows, key)
            if idx is None:
                sheet.append_row(new_row, value_input_option="RAW")
            else:
                sheet.update(
                    range_name=f"A{idx}:C{idx}",
                    values=[new_row],
                    value_input_option="RAW",
                )
        except ConnectionError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to save '{key}': {e}")
