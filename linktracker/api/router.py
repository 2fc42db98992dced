"""Admin API router - all routes require basic auth."""

from fastapi import APIRouter, Depends

from linktracker.api.analytics import router as analytics_router
from linktracker.api.links import router as links_router
from linktracker.core.security import require_admin

router = APIRouter(prefix="/api", dependencies=[Depends(require_admin)])

router.include_router(links_router)
router.include_router(analytics_router)
