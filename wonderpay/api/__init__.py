"""
API routes for the Capital service.
"""

from fastapi import APIRouter

from wonderpay.api import capital

router = APIRouter()

# Include sub-routers
router.include_router(capital.router, prefix="/capital", tags=["capital"])
