"""
Authentication module for the member portal.

Provides the bearer token codec and the error taxonomy shared by the
services and the API layer.
"""

from .token_codec import TokenCodec, TokenPayload, normalize_token
from .errors import (
    AuthError,
    TokenError,
    MissingTokenError,
    MalformedTokenError,
    ExpiredTokenError,
    NoSuchMemberError,
    NoPaymentRecordError,
    DuesUnpaidError,
    UnknownActionError,
    StoreUnavailableError,
    MemberNotFoundError,
)

__all__ = [
    "TokenCodec",
    "TokenPayload",
    "normalize_token",
    "AuthError",
    "TokenError",
    "MissingTokenError",
    "MalformedTokenError",
    "ExpiredTokenError",
    "NoSuchMemberError",
    "NoPaymentRecordError",
    "DuesUnpaidError",
    "UnknownActionError",
    "StoreUnavailableError",
    "MemberNotFoundError",
]
