"""
Bearer token codec.

Tokens are base64 encodings of ``identity:issued_at_ms:nonce``. They carry
no signature: anyone able to build a well-formed triple can claim any
identity. Expiry is purely age based and evaluated on decode.
"""

import re
import time
import base64
import random
import logging
import binascii
from typing import Callable, Optional
from dataclasses import dataclass

from .errors import MissingTokenError, MalformedTokenError, ExpiredTokenError

logger = logging.getLogger(__name__)

DEFAULT_MAX_AGE_MS = 30 * 24 * 60 * 60 * 1000  # 30 days
FIELD_SEPARATOR = ":"

_TIMESTAMP_RE = re.compile(r"-?[0-9]+")
_WHITESPACE_RE = re.compile(r"\s+")


@dataclass
class TokenPayload:
    """Decoded token contents."""
    identity: str
    issued_at_ms: int


def normalize_token(token: str) -> str:
    """
    Undo common URL-transit mangling of a base64 token.

    Maps the URL-safe alphabet back to the standard one, drops whitespace
    and restores the padding.
    """
    safe = token.replace("-", "+").replace("_", "/")
    safe = _WHITESPACE_RE.sub("", safe).rstrip("=")
    return safe + "=" * (-len(safe) % 4)


class TokenCodec:
    """
    Mints and decodes bearer tokens.

    The clock is injectable so expiry can be tested without waiting.
    """

    def __init__(
        self,
        max_age_ms: int = DEFAULT_MAX_AGE_MS,
        clock: Optional[Callable[[], float]] = None
    ):
        """
        Initialize the codec.

        Args:
            max_age_ms: Token lifetime in milliseconds (default: 30 days)
            clock: Returns the current epoch time in seconds (default: time.time)
        """
        self.max_age_ms = max_age_ms
        self._clock = clock or time.time

    def now_ms(self) -> int:
        return int(self._clock() * 1000)

    def mint(self, identity: str) -> str:
        """
        Create a token for a verified identity.

        Args:
            identity: Display name of the member

        Returns:
            URL-safe base64 token without padding

        Raises:
            ValueError: identity is empty or contains the field separator
        """
        if not identity:
            raise ValueError("Token identity must not be empty")
        if FIELD_SEPARATOR in identity:
            raise ValueError(f"Token identity must not contain {FIELD_SEPARATOR!r}")

        raw = FIELD_SEPARATOR.join([identity, str(self.now_ms()), repr(random.random())])
        token = base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii").rstrip("=")
        logger.debug(f"Minted token for {identity}")
        return token

    def decode(self, token: Optional[str]) -> TokenPayload:
        """
        Decode and validate a token.

        Args:
            token: Token as received from the client, possibly URL-mangled

        Returns:
            TokenPayload with identity and issuance time

        Raises:
            MissingTokenError: no token supplied
            MalformedTokenError: not base64, not UTF-8 or not a valid triple
            ExpiredTokenError: older than max_age_ms
        """
        if token is None or not token.strip():
            raise MissingTokenError()

        try:
            decoded = base64.b64decode(normalize_token(token), validate=True).decode("utf-8")
        except (binascii.Error, ValueError) as e:
            logger.debug(f"Token is not valid base64/UTF-8: {e}")
            raise MalformedTokenError() from e

        parts = decoded.split(FIELD_SEPARATOR)
        if len(parts) != 3:
            logger.debug(f"Token has {len(parts)} fields, expected 3")
            raise MalformedTokenError()

        identity, issued, _nonce = parts
        if not identity or not _TIMESTAMP_RE.fullmatch(issued):
            logger.debug("Token has empty identity or non-integer timestamp")
            raise MalformedTokenError()

        issued_at_ms = int(issued)
        if self.now_ms() - issued_at_ms > self.max_age_ms:
            logger.debug(f"Token for {identity} expired")
            raise ExpiredTokenError()

        return TokenPayload(identity=identity, issued_at_ms=issued_at_ms)

