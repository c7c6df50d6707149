"""
API v1 router.

Aggregates all v1 endpoints.
"""

from fastapi import APIRouter

from . import gateway, auth, members, system

router = APIRouter()

# Include all route modules
router.include_router(gateway.router, prefix="/exec", tags=["Gateway"])
router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(members.router, prefix="/members", tags=["Members"])
router.include_router(system.router, prefix="/system", tags=["System"])
