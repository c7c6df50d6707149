"""
API dependencies.

Provides dependency injection for services and the bearer token.
"""

import logging
from typing import Optional, Annotated
from dataclasses import dataclass

from fastapi import Depends, Query
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from src.config import load_config, Config
from src.services import (
    ServiceContext,
    MemberAuthService,
    MemberService,
    GatewayService,
)

logger = logging.getLogger(__name__)

# Security scheme
security = HTTPBearer(auto_error=False)


@dataclass
class Services:
    """Container for all services."""
    config: Config
    context: ServiceContext
    auth: MemberAuthService
    members: MemberService
    gateway: GatewayService


# Global services instance (singleton)
_services: Optional[Services] = None


def build_services(context: ServiceContext) -> Services:
    """Wire all services on top of a context."""
    auth = MemberAuthService(context)
    members = MemberService(context)
    gateway = GatewayService(auth, members)

    return Services(
        config=context.config,
        context=context,
        auth=auth,
        members=members,
        gateway=gateway
    )


def get_services() -> Services:
    """
    Get or create the services singleton.

    This initializes all services on first call. The store connection is
    shared; table contents are re-read on every request.
    """
    global _services

    if _services is None:
        logger.info("Initializing services...")

        config = load_config()
        context = ServiceContext.create(config=config)
        _services = build_services(context)

        logger.info("Services initialized successfully")

    return _services


def close_services():
    """Drop the services singleton."""
    global _services
    if _services:
        _services = None
        logger.info("Services closed")


# Dependency for getting services
def services_dep() -> Services:
    """FastAPI dependency for services."""
    return get_services()


ServicesDep = Annotated[Services, Depends(services_dep)]


async def get_request_token(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    token: Optional[str] = Query(None, description="Bearer token from login")
) -> Optional[str]:
    """
    Token from the query string, falling back to the Authorization header.

    Validation is left to the gateway so failures keep the uniform payload.
    """
    if token:
        return token
    if credentials is not None:
        return credentials.credentials
    return None


RequestToken = Annotated[Optional[str], Depends(get_request_token)]
