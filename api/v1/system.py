"""
System endpoints.

Reports which store backend and gateway actions this instance serves.
"""

from fastapi import APIRouter

from ..deps import ServicesDep

router = APIRouter()


@router.get("/status")
async def get_status(services: ServicesDep):
    """Service status, without reading any table."""
    return {
        "status": "healthy",
        "service": "member-portal-api",
        "store": services.config.store.backend,
        "actions": services.gateway.actions
    }
