"""
Credential store.

Wraps a table source with header-based schema resolution. Column positions
are resolved once per table read; callers then read cells by column name.
"""

import re
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence

from ..auth.errors import StoreUnavailableError
from .sources import Rows, TableSource

logger = logging.getLogger(__name__)

# Member table columns
COL_PHONE = "行動電話-帳"
COL_PASSWORD = "生日-密"
COL_NAME = "姓名"
COL_BIRTHDAY = "生日"
COL_UNIT = "服務單位"
COL_HOME_PHONE = "住家電話"
COL_ADDRESS = "通訊地址"
COL_EMAIL = "E-mail"
COL_LINE = "LINE"
COL_HISTORY = "經歷"
COL_DECEASED = "歿"
COL_PHOTO = "照片連結"

# Placeholder accounts carry this password and are never valid
DISABLED_PASSWORD = "000000"

_LEADING_INT_RE = re.compile(r"^\s*([+-]?[0-9]+)")


def cell_text(value: Any) -> str:
    """Cell value as stripped text; None is empty."""
    if value is None:
        return ""
    return str(value).strip()


def parse_year(header: Any) -> Optional[int]:
    """Leading integer of a header cell ("2025", "2025年"), or None."""
    match = _LEADING_INT_RE.match(cell_text(header))
    return int(match.group(1)) if match else None


@dataclass
class TableSchema:
    """Column name to index mapping resolved from a header row."""
    table: str
    columns: Dict[str, int]

    @classmethod
    def resolve(
        cls,
        table: str,
        header: Sequence[Any],
        required: Sequence[str] = ()
    ) -> "TableSchema":
        """
        Build the schema from a header row.

        First occurrence wins when a header name repeats.

        Raises:
            StoreUnavailableError: a required column is missing
        """
        columns: Dict[str, int] = {}
        for idx, name in enumerate(header):
            columns.setdefault(cell_text(name), idx)

        missing = [name for name in required if name not in columns]
        if missing:
            logger.warning(f"Table '{table}' is missing columns: {missing}")
            raise StoreUnavailableError(f"欄位名稱找不到: {', '.join(missing)}")

        return cls(table=table, columns=columns)

    def get(self, row: Sequence[Any], column: str) -> str:
        """Cell text for a column; empty if the column or cell is absent."""
        idx = self.columns.get(column)
        if idx is None or idx >= len(row):
            return ""
        return cell_text(row[idx])

    def project(self, row: Sequence[Any], fields: Sequence[str]) -> Dict[str, str]:
        return {f: self.get(row, f) for f in fields}


@dataclass
class Table:
    """A table read with its resolved schema."""
    schema: TableSchema
    rows: List[List[Any]] = field(default_factory=list)

    def __iter__(self) -> Iterator[List[Any]]:
        return iter(self.rows)

    def __len__(self) -> int:
        return len(self.rows)

    def is_empty(self) -> bool:
        return not self.rows


def is_disabled_member(schema: TableSchema, row: Sequence[Any]) -> bool:
    """Rows without a phone or with the placeholder password are not real accounts."""
    return not schema.get(row, COL_PHONE) or schema.get(row, COL_PASSWORD) == DISABLED_PASSWORD


class CredentialStore:
    """
    Explicit connection to the member and payment tables.

    Passed into every service that reads tables; there is no ambient
    spreadsheet handle.
    """

    def __init__(self, source: TableSource, member_table: str, payment_table: str):
        self.source = source
        self.member_table = member_table
        self.payment_table = payment_table

    def read_table(self, name: str, required: Sequence[str] = ()) -> Table:
        """
        Read a table and resolve its schema from the header row.

        Raises:
            StoreUnavailableError: table missing, or a required column missing
        """
        rows: Optional[Rows] = self.source.get_table(name)
        if rows is None:
            raise StoreUnavailableError(f"找不到工作表: {name}")

        if len(rows) < 2:
            # Nothing to read, so missing columns do not matter yet
            header = rows[0] if rows else []
            return Table(schema=TableSchema.resolve(name, header))

        schema = TableSchema.resolve(name, rows[0], required)
        return Table(schema=schema, rows=[list(r) for r in rows[1:]])

    def read_members(self, required: Sequence[str] = (COL_PHONE,)) -> Table:
        return self.read_table(self.member_table, required)

    def read_payments(self) -> List[List[Any]]:
        """
        Raw payment rows, header first.

        The payment table is keyed by position (first column is the member
        name, other headers are years), so no named schema applies.
        """
        rows = self.source.get_table(self.payment_table)
        if rows is None:
            raise StoreUnavailableError(f"找不到工作表: {self.payment_table}")
        return [list(r) for r in rows]
