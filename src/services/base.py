"""
Base service classes and shared context.

The ServiceContext holds the dependencies every service needs: config,
the credential store connection and the token codec. The API and the CLI
build one context and share it across services.
"""

import logging
from datetime import datetime
from typing import Optional
from dataclasses import dataclass
from zoneinfo import ZoneInfo

from ..config import Config, load_config
from ..auth import TokenCodec
from ..store import CredentialStore, create_store

logger = logging.getLogger(__name__)


@dataclass
class ServiceContext:
    """
    Shared context for all services.

    Holds no per-request state; every service call reads the store afresh.
    """
    config: Config
    store: CredentialStore
    tokens: TokenCodec

    @classmethod
    def create(
        cls,
        config: Optional[Config] = None,
        store: Optional[CredentialStore] = None,
        tokens: Optional[TokenCodec] = None
    ) -> "ServiceContext":
        """
        Factory method to create a ServiceContext with all dependencies.

        Args:
            config: Optional config (loads from env if not provided)
            store: Optional credential store (built from config if not provided)
            tokens: Optional token codec (built from config if not provided)

        Returns:
            Configured ServiceContext
        """
        cfg = config or load_config()
        return cls(
            config=cfg,
            store=store or create_store(cfg),
            tokens=tokens or TokenCodec(max_age_ms=cfg.token.max_age_ms)
        )

    def current_year(self) -> int:
        """Calendar year in the configured timezone, on the token codec's clock."""
        now = datetime.fromtimestamp(self.tokens.now_ms() / 1000, tz=ZoneInfo(self.config.timezone))
        return now.year


class BaseService:
    """
    Base class for all services.

    Each service receives the shared context and provides focused functionality.
    """

    def __init__(self, context: ServiceContext):
        self.context = context

    @property
    def config(self) -> Config:
        return self.context.config

    @property
    def store(self) -> CredentialStore:
        return self.context.store

    @property
    def tokens(self) -> TokenCodec:
        return self.context.tokens
