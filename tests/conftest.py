"""
Pytest configuration and shared fixtures.

This module provides common fixtures for testing:
- Member and payment tables in a temporary JSON file
- A token codec on a frozen clock
- Services wired on top of both
- API clients
"""

import os
import sys
import json
from pathlib import Path
from datetime import datetime
from zoneinfo import ZoneInfo

import pytest
from fastapi.testclient import TestClient

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set test environment variables before imports
os.environ["STORE_BACKEND"] = "json"
os.environ["TIMEZONE"] = "Asia/Taipei"

from src.config import Config
from src.auth import TokenCodec
from src.store import CredentialStore, JsonTableSource
from src.services import ServiceContext, MemberAuthService, MemberService, GatewayService


MEMBER_SHEET = "會員資料"
PAYMENT_SHEET = "繳費紀錄"

# 2026-06-15 12:00 in Taipei: current year 2026, previous 2025
FROZEN_NOW = datetime(2026, 6, 15, 12, 0, tzinfo=ZoneInfo("Asia/Taipei")).timestamp()
DAY_MS = 24 * 60 * 60 * 1000

MEMBER_HEADER = [
    "行動電話-帳", "生日-密", "姓名", "服務單位", "通訊地址", "E-mail", "LINE", "歿",
    "生日", "住家電話", "經歷", "照片連結",
]


# =============================================================================
# Configuration
# =============================================================================

@pytest.fixture(scope="session")
def test_config():
    """Test configuration values."""
    return {
        "phone": "0912345678",
        "birthday": "19900101",
        "name": "Alice",
    }


# =============================================================================
# Table Fixtures
# =============================================================================

@pytest.fixture
def member_rows() -> list:
    """Member table, header first."""
    return [
        MEMBER_HEADER,
        ["0912345678", "19900101", "Alice", "UnitA", "addr", "a@x.com", "lineA", "",
         "1990/01/01", "02-2345-6789", "Chair 2020", "https://img.example.com/alice.jpg"],
        # Paid only long ago
        ["0922222222", "19850505", "Bob", "UnitB", "addr B", "b@x.com", "lineB", "",
         "1985/05/05", "", "", ""],
        # No payment row at all
        ["0933333333", "19700707", "Carol", "UnitC", "addr C", "c@x.com", "", "",
         "1970/07/07", "", "", ""],
        # Placeholder account
        ["0944444444", "000000", "Dave", "UnitD", "addr D", "", "", "",
         "", "", "", ""],
        # No phone
        ["", "19600101", "Eve", "UnitE", "addr E", "", "", "",
         "", "", "", ""],
        # Paid previous year only
        ["0955555555", "19950202", "Frank", "UnitF", "addr F", "f@x.com", "lineF", "歿",
         "1995/02/02", "", "", ""],
    ]


@pytest.fixture
def payment_rows() -> list:
    """Payment table, header first; year headers in mixed formats."""
    return [
        ["姓名", "2023", "2024", "2025", "2026年"],
        ["Alice", "", "", "", "paid"],
        ["Bob", "paid", "", "", ""],
        ["Dave", "", "", "paid", "paid"],
        ["Eve", "", "", "paid", "paid"],
        ["Frank", "", "", "v", ""],
    ]


@pytest.fixture
def write_tables(tmp_path):
    """Write a tables JSON file and return its path."""
    def _write(tables: dict) -> Path:
        path = tmp_path / "tables.json"
        path.write_text(json.dumps(tables, ensure_ascii=False), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def tables_file(write_tables, member_rows, payment_rows) -> Path:
    return write_tables({MEMBER_SHEET: member_rows, PAYMENT_SHEET: payment_rows})


@pytest.fixture
def store(tables_file) -> CredentialStore:
    """CredentialStore over the temporary JSON tables."""
    return CredentialStore(
        JsonTableSource(tables_file),
        member_table=MEMBER_SHEET,
        payment_table=PAYMENT_SHEET
    )


# =============================================================================
# Token Fixtures
# =============================================================================

@pytest.fixture
def clock():
    """Mutable frozen clock; set clock.now to move time."""
    class FrozenClock:
        now = FROZEN_NOW

        def __call__(self) -> float:
            return self.now

    return FrozenClock()


@pytest.fixture
def codec(clock) -> TokenCodec:
    """TokenCodec on the frozen clock."""
    return TokenCodec(clock=clock)


@pytest.fixture
def valid_token(codec, test_config) -> str:
    return codec.mint(test_config["name"])


@pytest.fixture
def expired_token(clock, test_config) -> str:
    """Token issued 31 days before the frozen now."""
    old = TokenCodec(clock=lambda: clock.now - 31 * DAY_MS / 1000)
    return old.mint(test_config["name"])


# =============================================================================
# Service Fixtures
# =============================================================================

@pytest.fixture
def make_context(codec):
    """Build a ServiceContext over a given tables file."""
    def _make(tables_path: Path) -> ServiceContext:
        store = CredentialStore(
            JsonTableSource(tables_path),
            member_table=MEMBER_SHEET,
            payment_table=PAYMENT_SHEET
        )
        return ServiceContext.create(config=Config(), store=store, tokens=codec)
    return _make


@pytest.fixture
def context(store, codec) -> ServiceContext:
    return ServiceContext.create(config=Config(), store=store, tokens=codec)


@pytest.fixture
def auth_service(context) -> MemberAuthService:
    return MemberAuthService(context)


@pytest.fixture
def member_service(context) -> MemberService:
    return MemberService(context)


@pytest.fixture
def gateway(auth_service, member_service) -> GatewayService:
    return GatewayService(auth_service, member_service)


@pytest.fixture
def services(context):
    """Real services container over the test tables."""
    from api.deps import build_services
    return build_services(context)


# =============================================================================
# API Client Fixtures
# =============================================================================

@pytest.fixture
def api_app():
    """Create FastAPI app for testing."""
    from api.main import app
    return app


@pytest.fixture
def api_client(api_app) -> TestClient:
    """Create synchronous test client for API."""
    return TestClient(api_app)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as unit test"
    )
    config.addinivalue_line(
        "markers", "api: mark test as API endpoint test"
    )
