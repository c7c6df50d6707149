"""
Services layer for the member portal.

This module provides the core business logic as reusable services
that can be consumed by the API, the CLI, or any other interface.
"""

from .base import BaseService, ServiceContext
from .member_auth_service import MemberAuthService, Identity, LoginResult
from .member_service import MemberService
from .gateway_service import GatewayService

__all__ = [
    # Base
    "BaseService",
    "ServiceContext",
    # Services
    "MemberAuthService",
    "MemberService",
    "GatewayService",
    # Data classes
    "Identity",
    "LoginResult",
]


def create_services(context: ServiceContext = None):
    """
    Factory function to create all services with proper dependencies.

    Args:
        context: Optional ServiceContext (creates one if not provided)

    Returns:
        Tuple of (context, auth, members, gateway)
    """
    if context is None:
        context = ServiceContext.create()

    auth_service = MemberAuthService(context)
    member_service = MemberService(context)
    gateway_service = GatewayService(auth_service, member_service)

    return context, auth_service, member_service, gateway_service
