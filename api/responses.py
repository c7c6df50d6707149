"""
Response framing.

Payloads go out as plain JSON, or as JSONP when the caller names a
callback function.
"""

import re
import json
import logging
from typing import Any, Dict, Optional

from fastapi.responses import JSONResponse, Response

logger = logging.getLogger(__name__)

JSONP_MEDIA_TYPE = "application/javascript"

# Dotted JS identifier, e.g. "cb" or "jQuery.handlers.cb_1"
_CALLBACK_RE = re.compile(r"[A-Za-z_$][\w$]*(?:\.[A-Za-z_$][\w$]*)*")


def is_valid_callback(callback: Optional[str]) -> bool:
    return bool(callback) and _CALLBACK_RE.fullmatch(callback) is not None


def render(payload: Dict[str, Any], callback: Optional[str] = None) -> Response:
    """
    Frame a payload for the wire.

    Args:
        payload: Structured response
        callback: JSONP function name; ignored unless it is a valid identifier

    Returns:
        JSONP text response or JSON response
    """
    if callback and not is_valid_callback(callback):
        logger.warning("Ignoring invalid JSONP callback name")
        callback = None

    if callback:
        body = json.dumps(payload, ensure_ascii=False)
        return Response(content=f"{callback}({body})", media_type=JSONP_MEDIA_TYPE)

    return JSONResponse(content=payload)
