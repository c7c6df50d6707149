"""
Authentication endpoints.

Handles member login.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Query

from src.services.gateway_service import ACTION_LOGIN
from ..deps import ServicesDep
from ..responses import render

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/login")
def login(
    services: ServicesDep,
    phone: Optional[str] = Query(None, description="Mobile phone number (account)"),
    birthday: Optional[str] = Query(None, description="Birthday (password)"),
    callback: Optional[str] = Query(None, description="JSONP callback name")
):
    """
    Login with phone and birthday.

    Returns a bearer token on success. Members must have paid dues for the
    current or previous year.
    """
    payload = services.gateway.handle(ACTION_LOGIN, {"phone": phone, "birthday": birthday})
    return render(payload, callback)
