"""
Action gateway endpoint.

Single URL taking ``?action=login|getList|getDetail`` plus the action's
parameters, the way the spreadsheet web app was called.
"""

import logging

from fastapi import APIRouter, Request

from src.services.gateway_service import GET_ONLY_MSG, failure
from ..deps import ServicesDep
from ..responses import render

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
def dispatch(request: Request, services: ServicesDep):
    """
    Dispatch an action.

    Responds with JSONP when a ``callback`` parameter is given.
    """
    params = dict(request.query_params)
    payload = services.gateway.handle(params.get("action"), params)
    return render(payload, params.get("callback"))


@router.post("")
async def reject_post(request: Request):
    """
    POST is not supported.

    Always answers with a failure payload asking for GET.
    """
    logger.debug("Rejected POST to gateway")
    return render(failure(GET_ONLY_MSG), request.query_params.get("callback"))
