"""
Table sources.

A table source returns the raw rows of a named table, header row first.
Nothing is cached: every call goes back to the backing storage so each
request sees the current contents.
"""

import json
import logging
from pathlib import Path
from typing import Any, List, Optional, Protocol, Dict

import gspread
from gspread.exceptions import SpreadsheetNotFound, WorksheetNotFound

from ..auth.errors import StoreUnavailableError

logger = logging.getLogger(__name__)

Rows = List[List[Any]]


class TableSource(Protocol):
    """Read contract of the credential store backend."""

    def get_table(self, name: str) -> Optional[Rows]:
        """Return all rows of a table including the header, or None if it does not exist."""
        ...


class JsonTableSource:
    """
    JSON file backed tables.

    The file maps table names to row lists::

        {"會員資料": [["行動電話-帳", "生日-密", "姓名"], ["0912345678", "19900101", "Alice"]]}
    """

    def __init__(self, file_path: Path):
        self.file_path = Path(file_path)

    def _load_all(self) -> Dict[str, Rows]:
        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError:
            logger.warning(f"Table file not found: {self.file_path}")
            return {}
        except json.JSONDecodeError as e:
            raise StoreUnavailableError(f"資料檔格式錯誤: {e}") from e

    def get_table(self, name: str) -> Optional[Rows]:
        return self._load_all().get(name)


class SheetsTableSource:
    """
    Google Sheets backed tables (one worksheet per table).

    The gspread client is authorized on first use and kept for the life
    of the source; worksheet values are fetched on every call.
    """

    def __init__(self, spreadsheet_id: str, credentials_file: str):
        self.spreadsheet_id = spreadsheet_id
        self.credentials_file = credentials_file
        self._client: Optional[gspread.Client] = None

    @property
    def client(self) -> gspread.Client:
        if self._client is None:
            self._client = gspread.service_account(filename=self.credentials_file)
            logger.info("Google Sheets client authorized")
        return self._client

    def get_table(self, name: str) -> Optional[Rows]:
        if not self.spreadsheet_id:
            raise StoreUnavailableError("未設定試算表 ID")

        try:
            spreadsheet = self.client.open_by_key(self.spreadsheet_id)
        except SpreadsheetNotFound as e:
            logger.warning(f"Spreadsheet {self.spreadsheet_id} not found or not shared")
            raise StoreUnavailableError("找不到試算表") from e

        try:
            worksheet = spreadsheet.worksheet(name)
        except WorksheetNotFound:
            logger.warning(f"Worksheet '{name}' not found")
            return None

        return worksheet.get_all_values()
