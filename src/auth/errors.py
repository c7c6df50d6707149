"""
Authentication and authorization errors.

Every failure the gateway can report to a caller is an AuthError subclass.
Each carries a stable code and the user-facing message returned in the
``msg`` field of the response payload.
"""

from typing import Optional


class AuthError(Exception):
    """Base class for all non-fatal request failures."""

    code: str = "AuthError"
    default_message: str = "未授權訪問"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class TokenError(AuthError):
    """Token could not be accepted."""


class MissingTokenError(TokenError):
    code = "MissingToken"
    default_message = "Token 缺失，請重新登入"


class MalformedTokenError(TokenError):
    code = "MalformedToken"
    default_message = "無效的 Token"


class ExpiredTokenError(TokenError):
    code = "ExpiredToken"
    default_message = "Token 已過期，請重新登入"


class NoSuchMemberError(AuthError):
    code = "NoSuchMember"
    default_message = "帳號或密碼錯誤"


class NoPaymentRecordError(AuthError):
    code = "NoPaymentRecord"
    default_message = "找不到繳費紀錄"


class DuesUnpaidError(AuthError):
    code = "DuesUnpaid"
    default_message = "未繳納當前年度或前一年度會費，無法登入"


class UnknownActionError(AuthError):
    code = "UnknownAction"
    default_message = "未知請求或 action 參數遺失"


class StoreUnavailableError(AuthError):
    """A table or an expected column is missing from the store."""
    code = "StoreUnavailable"
    default_message = "找不到工作表"


class MemberNotFoundError(AuthError):
    code = "MemberNotFound"
    default_message = "找不到該會員資料"
