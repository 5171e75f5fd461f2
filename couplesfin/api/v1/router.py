"""
API v1 router.
Aggregates all v1 endpoints.
"""
from fastapi import APIRouter

from couplesfin.api.v1 import fx
from couplesfin.api.v1.utilities import router as utilities_router
from couplesfin.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter()

router.include_router(fx.fx_router)
router.include_router(utilities_router)


@router.get("/health")
async def health_check():
    """Liveness probe. Returns {"status": "ok"}."""
    logger.info("Health check requested")
    return {"status": "ok"}
