"""Configuration module for the member portal backend."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

PROJECT_ROOT = Path(__file__).parent.parent


@dataclass
class SheetsConfig:
    """Google Sheets connection and table names."""
    spreadsheet_id: str = field(default_factory=lambda: os.getenv("SPREADSHEET_ID", ""))
    credentials_file: str = field(default_factory=lambda: os.getenv("GOOGLE_SERVICE_ACCOUNT_FILE", "credentials.json"))
    member_sheet: str = field(default_factory=lambda: os.getenv("MEMBER_SHEET", "會員資料"))
    payment_sheet: str = field(default_factory=lambda: os.getenv("PAYMENT_SHEET", "繳費紀錄"))


@dataclass
class StoreConfig:
    """Which table source backs the credential store."""
    # "sheets" or "json"
    backend: str = field(default_factory=lambda: os.getenv("STORE_BACKEND", "sheets").lower())

    # Only used by the json backend
    data_file: Path = field(default_factory=lambda: Path(os.getenv("DATA_FILE", str(PROJECT_ROOT / "data" / "tables.json"))))


@dataclass
class TokenConfig:
    """Bearer token lifetime."""
    max_age_days: int = field(default_factory=lambda: int(os.getenv("TOKEN_MAX_AGE_DAYS", "30")))

    @property
    def max_age_ms(self) -> int:
        return self.max_age_days * 24 * 60 * 60 * 1000


@dataclass
class ApiConfig:
    """HTTP server binding."""
    host: str = field(default_factory=lambda: os.getenv("API_HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("API_PORT", "8000")))


@dataclass
class Config:
    """Main configuration container."""
    sheets: SheetsConfig = field(default_factory=SheetsConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    token: TokenConfig = field(default_factory=TokenConfig)
    api: ApiConfig = field(default_factory=ApiConfig)

    # Dues are checked against the calendar year in this zone
    timezone: str = field(default_factory=lambda: os.getenv("TIMEZONE", "Asia/Taipei"))


def load_config() -> Config:
    """Load configuration from environment variables."""
    return Config()
