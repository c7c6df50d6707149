"""
Members endpoints.

Member directory listing and profile lookup. Both require a token.
"""

from typing import Optional

from fastapi import APIRouter, Query

from src.services.gateway_service import ACTION_LIST, ACTION_DETAIL
from ..deps import ServicesDep, RequestToken
from ..responses import render

router = APIRouter()


@router.get("")
def list_members(
    services: ServicesDep,
    token: RequestToken,
    callback: Optional[str] = Query(None, description="JSONP callback name")
):
    """
    List all active members.

    Placeholder accounts are excluded.
    """
    payload = services.gateway.handle(ACTION_LIST, {"token": token})
    return render(payload, callback)


@router.get("/{phone}")
def get_member(
    phone: str,
    services: ServicesDep,
    token: RequestToken,
    callback: Optional[str] = Query(None, description="JSONP callback name")
):
    """
    Get details for a specific member.
    """
    payload = services.gateway.handle(ACTION_DETAIL, {"token": token, "phone": phone})
    return render(payload, callback)
