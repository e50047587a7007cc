"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets is offered as a remote backend because:
1. Non-technical users can see their data directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)

The ledger sheet has two columns, `key` and `value`. Each collection
snapshot lives in one cell.

TRADEOFFS:
- A cell holds at most 50,000 characters, which caps the size of a ledger
- No transactions (a single cell update is the unit of atomicity)
"""

import asyncio
from typing import Optional

import gspread
from gspread.utils import rowcol_to_a1
from google.oauth2.service_account import Credentials

from src.config import GoogleSheetsSettings, get_settings
from src.services.storage.interface import (
    KeyValueStore,
    StorageConnectionError,
    StorageError,
)


LEDGER_COLUMNS = ["key", "value"]


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and locates the ledger worksheet.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

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
            except FileNotFoundError as e:
                raise StorageConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                ) from e
            except Exception as e:
                raise StorageConnectionError(f"Failed to connect to Google Sheets: {e}") from e

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound as e:
                raise StorageConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                ) from e
        return self._spreadsheet

    def get_ledger_sheet(self) -> gspread.Worksheet:
        """Get or create the ledger worksheet."""
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(self._settings.ledger_sheet_name)
        except gspread.WorksheetNotFound:
            # Create the sheet with headers
            sheet = spreadsheet.add_worksheet(
                title=self._settings.ledger_sheet_name,
                rows=10,
                cols=len(LEDGER_COLUMNS),
            )
            sheet.append_row(LEDGER_COLUMNS)
        return sheet


class GoogleSheetsKeyValueStore(KeyValueStore):
    """
    Google Sheets implementation of the key-value store.

    Row 1 is the header. Each following row is one key and its value.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _find_row(self, rows: list[list[str]], key: str) -> Optional[int]:
        """Return the 1-based sheet row index holding `key`."""
        for idx, row in enumerate(rows[1:], start=2):  # Row 1 is header
            if row and row[0] == key:
                return idx
        return None

    def _read(self, key: str) -> Optional[str]:
        try:
            sheet = self._client.get_ledger_sheet()
            rows = sheet.get_all_values()
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to read '{key}' from Google Sheets: {e}") from e

        idx = self._find_row(rows, key)
        if idx is None:
            return None
        row = rows[idx - 1]
        return row[1] if len(row) > 1 else ""

    def _write(self, key: str, value: str) -> None:
        try:
            sheet = self._client.get_ledger_sheet()
            idx = self._find_row(sheet.get_all_values(), key)
            if idx is None:
                sheet.append_row([key, value], value_input_option="RAW")
            else:
                sheet.update(
                    values=[[value]],
                    range_name=rowcol_to_a1(idx, 2),
                    value_input_option="RAW",
                )
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to write '{key}' to Google Sheets: {e}") from e

    async def get(self, key: str) -> Optional[str]:
        return await asyncio.to_thread(self._read, key)

    async def set(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._write, key, value)
