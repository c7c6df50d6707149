"""
Request gateway.

Dispatches an inbound action (login, getList, getDetail) to the services,
gates protected actions on a valid token, and turns every failure into
the ``{"success": False, "msg": ...}`` payload. Nothing raised by a
service reaches the transport layer.
"""

import logging
from typing import Any, Callable, Dict, Mapping, Optional

from ..auth import AuthError, UnknownActionError
from .member_auth_service import MemberAuthService
from .member_service import MemberService

logger = logging.getLogger(__name__)

UNAUTHORIZED_MSG = "未授權訪問"
INTERNAL_ERROR_PREFIX = "伺服器處理請求異常: "
GET_ONLY_MSG = "請使用 GET 請求 (Fetch API 模式)。"

ACTION_LOGIN = "login"
ACTION_LIST = "getList"
ACTION_DETAIL = "getDetail"

Payload = Dict[str, Any]
Params = Mapping[str, Optional[str]]


def failure(msg: str) -> Payload:
    return {"success": False, "msg": msg}


class GatewayService:
    """
    Routes one request to its handler.

    Each request is independent: Received -> Dispatched(action) ->
    Authenticated | Unauthorized | NotFound -> Responded.
    """

    def __init__(self, auth: MemberAuthService, members: MemberService):
        self.auth = auth
        self.members = members
        self._handlers: Dict[str, Callable[[Params], Payload]] = {
            ACTION_LOGIN: self._login,
            ACTION_LIST: self._get_list,
            ACTION_DETAIL: self._get_detail,
        }

    @property
    def actions(self) -> list:
        return list(self._handlers)

    def handle(self, action: Optional[str], params: Params) -> Payload:
        """
        Handle one request.

        Args:
            action: Action name from the request
            params: All request parameters

        Returns:
            Success payload for the action, or a failure payload
        """
        try:
            handler = self._handlers.get(action or "")
            if handler is None:
                raise UnknownActionError()
            return handler(params)
        except AuthError as e:
            logger.info(f"Action {action!r} failed: {e.code}")
            return failure(e.message)
        except Exception as e:
            logger.error(f"Action {action!r} raised: {e}", exc_info=True)
            return failure(f"{INTERNAL_ERROR_PREFIX}{e}")

    def _login(self, params: Params) -> Payload:
        result = self.auth.login(params.get("phone"), params.get("birthday"))
        return result.to_dict()

    def _authorized(self, params: Params) -> Optional[Payload]:
        """Failure payload if the token is rejected, None if authorized."""
        try:
            identity = self.auth.authorize(params.get("token"))
        except AuthError as e:
            logger.debug(f"Unauthorized request: {e.code}")
            return failure(e.message or UNAUTHORIZED_MSG)

        logger.debug(f"Authorized as {identity.name}")
        return None

    def _get_list(self, params: Params) -> Payload:
        denied = self._authorized(params)
        if denied:
            return denied
        return {"success": True, "list": self.members.list_members()}

    def _get_detail(self, params: Params) -> Payload:
        denied = self._authorized(params)
        if denied:
            return denied
        return {"success": True, "detail": self.members.get_member_detail(params.get("phone"))}
