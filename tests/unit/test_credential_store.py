"""
Unit tests for the credential store.

Tests table sources, schema resolution and cell helpers.
"""

from unittest.mock import MagicMock, patch

import pytest
from gspread.exceptions import WorksheetNotFound

from src.auth import StoreUnavailableError
from src.config import Config
from src.store import (
    CredentialStore,
    JsonTableSource,
    SheetsTableSource,
    TableSchema,
    cell_text,
    parse_year,
    is_disabled_member,
    create_store,
)


class TestCellHelpers:
    """Tests for cell_text and parse_year."""

    @pytest.mark.unit
    def test_cell_text(self):
        assert cell_text(None) == ""
        assert cell_text("  0912345678 ") == "0912345678"
        assert cell_text(19900101) == "19900101"

    @pytest.mark.unit
    @pytest.mark.parametrize("header,year", [
        ("2025", 2025),
        ("2025年", 2025),
        (" 2024 年度", 2024),
        (2026, 2026),
        ("姓名", None),
        ("", None),
        (None, None),
    ])
    def test_parse_year(self, header, year):
        """Test headers parse by leading integer."""
        assert parse_year(header) == year


class TestTableSchema:
    """Tests for TableSchema."""

    @pytest.mark.unit
    def test_resolve_and_get(self):
        schema = TableSchema.resolve("t", ["行動電話-帳", " 姓名 ", "E-mail"])
        row = ["0912345678", "Alice"]

        assert schema.get(row, "姓名") == "Alice"
        # Column exists but the row is short
        assert schema.get(row, "E-mail") == ""
        # Column does not exist
        assert schema.get(row, "LINE") == ""

    @pytest.mark.unit
    def test_missing_required_column(self):
        with pytest.raises(StoreUnavailableError) as exc:
            TableSchema.resolve("t", ["姓名"], required=["行動電話-帳", "姓名"])
        assert "行動電話-帳" in exc.value.message

    @pytest.mark.unit
    def test_first_duplicate_header_wins(self):
        schema = TableSchema.resolve("t", ["姓名", "姓名"])
        assert schema.get(["first", "second"], "姓名") == "first"

    @pytest.mark.unit
    def test_project(self):
        schema = TableSchema.resolve("t", ["a", "b"])
        assert schema.project(["1", "2"], ["b", "c"]) == {"b": "2", "c": ""}

    @pytest.mark.unit
    def test_is_disabled_member(self):
        schema = TableSchema.resolve("t", ["行動電話-帳", "生日-密"])

        assert is_disabled_member(schema, ["", "19900101"])
        assert is_disabled_member(schema, ["0912345678", "000000"])
        assert is_disabled_member(schema, ["0912345678", " 000000 "])
        assert not is_disabled_member(schema, ["0912345678", "19900101"])


class TestCredentialStore:
    """Tests for CredentialStore reads."""

    @pytest.mark.unit
    def test_read_members(self, store):
        table = store.read_members()

        assert len(table) == 6
        assert table.schema.get(table.rows[0], "姓名") == "Alice"

    @pytest.mark.unit
    def test_missing_table(self, write_tables):
        store = CredentialStore(JsonTableSource(write_tables({})), "會員資料", "繳費紀錄")

        with pytest.raises(StoreUnavailableError):
            store.read_members()
        with pytest.raises(StoreUnavailableError):
            store.read_payments()

    @pytest.mark.unit
    def test_header_only_table_skips_column_check(self, write_tables):
        store = CredentialStore(JsonTableSource(write_tables({"會員資料": [["x"]]})), "會員資料", "繳費紀錄")

        table = store.read_members(required=("行動電話-帳",))
        assert table.is_empty()

    @pytest.mark.unit
    def test_missing_required_column_with_rows(self, write_tables):
        tables = {"會員資料": [["姓名"], ["Alice"]]}
        store = CredentialStore(JsonTableSource(write_tables(tables)), "會員資料", "繳費紀錄")

        with pytest.raises(StoreUnavailableError):
            store.read_members(required=("行動電話-帳",))

    @pytest.mark.unit
    def test_reads_are_not_cached(self, store, write_tables, member_rows, payment_rows):
        """Test each read sees the current file contents."""
        assert len(store.read_members()) == 6

        write_tables({"會員資料": member_rows[:2], "繳費紀錄": payment_rows})
        assert len(store.read_members()) == 1


class TestJsonTableSource:
    """Tests for JsonTableSource."""

    @pytest.mark.unit
    def test_missing_file_has_no_tables(self, tmp_path):
        source = JsonTableSource(tmp_path / "absent.json")
        assert source.get_table("會員資料") is None

    @pytest.mark.unit
    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "tables.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(StoreUnavailableError):
            JsonTableSource(path).get_table("會員資料")


class TestSheetsTableSource:
    """Tests for SheetsTableSource with a mocked gspread client."""

    @pytest.mark.unit
    def test_get_table(self):
        worksheet = MagicMock()
        worksheet.get_all_values.return_value = [["姓名"], ["Alice"]]
        client = MagicMock()
        client.open_by_key.return_value.worksheet.return_value = worksheet

        with patch("src.store.sources.gspread.service_account", return_value=client) as auth:
            source = SheetsTableSource("sheet-id", "creds.json")
            assert source.get_table("會員資料") == [["姓名"], ["Alice"]]
            assert source.get_table("會員資料") == [["姓名"], ["Alice"]]

        # Authorized once, values fetched on every call
        auth.assert_called_once_with(filename="creds.json")
        client.open_by_key.assert_called_with("sheet-id")
        assert worksheet.get_all_values.call_count == 2

    @pytest.mark.unit
    def test_missing_worksheet(self):
        client = MagicMock()
        client.open_by_key.return_value.worksheet.side_effect = WorksheetNotFound("繳費紀錄")

        with patch("src.store.sources.gspread.service_account", return_value=client):
            source = SheetsTableSource("sheet-id", "creds.json")
            assert source.get_table("繳費紀錄") is None

    @pytest.mark.unit
    def test_missing_spreadsheet_id(self):
        source = SheetsTableSource("", "creds.json")
        with pytest.raises(StoreUnavailableError):
            source.get_table("會員資料")


class TestCreateStore:
    """Tests for create_store."""

    @pytest.mark.unit
    def test_json_backend(self, tmp_path):
        config = Config()
        config.store.backend = "json"
        config.store.data_file = tmp_path / "tables.json"

        store = create_store(config)

        assert isinstance(store.source, JsonTableSource)
        assert store.member_table == config.sheets.member_sheet

    @pytest.mark.unit
    def test_sheets_backend(self):
        config = Config()
        config.store.backend = "sheets"

        assert isinstance(create_store(config).source, SheetsTableSource)

    @pytest.mark.unit
    def test_unknown_backend(self):
        config = Config()
        config.store.backend = "postgres"

        with pytest.raises(ValueError):
            create_store(config)
