"""
Credential store for the member portal.

Reads the member and payment tables from Google Sheets (or a JSON file
for local development) and resolves their columns by header name.
"""

import logging

from ..config import Config
from .sources import TableSource, JsonTableSource, SheetsTableSource
from .credential_store import (
    CredentialStore,
    Table,
    TableSchema,
    cell_text,
    parse_year,
    is_disabled_member,
)

logger = logging.getLogger(__name__)

__all__ = [
    "TableSource",
    "JsonTableSource",
    "SheetsTableSource",
    "CredentialStore",
    "Table",
    "TableSchema",
    "cell_text",
    "parse_year",
    "is_disabled_member",
    "create_store",
]


def create_store(config: Config) -> CredentialStore:
    """
    Build the credential store for the configured backend.

    Args:
        config: Loaded configuration

    Returns:
        CredentialStore over Google Sheets or a JSON file
    """
    backend = config.store.backend
    if backend == "json":
        source: TableSource = JsonTableSource(config.store.data_file)
    elif backend == "sheets":
        source = SheetsTableSource(
            spreadsheet_id=config.sheets.spreadsheet_id,
            credentials_file=config.sheets.credentials_file
        )
    else:
        raise ValueError(f"Unknown STORE_BACKEND '{backend}'. Use 'sheets' or 'json'.")

    logger.info(f"Credential store backend: {backend}")
    return CredentialStore(
        source,
        member_table=config.sheets.member_sheet,
        payment_table=config.sheets.payment_sheet
    )
