"""Dashboard entry pages, served from the static directory behind basic auth."""

from fastapi import APIRouter, Request
from starlette.responses import Response

from linktracker.core.deps import AssetServerDep
from linktracker.core.security import AdminUser

router = APIRouter(tags=["dashboard"], include_in_schema=False)

DASHBOARD_PAGE = "index.html"
STATS_PAGE = "stats.html"


@router.get("/")
async def dashboard(request: Request, user: AdminUser, assets: AssetServerDep) -> Response:
    """Link management page."""
    return await assets.serve(DASHBOARD_PAGE, request)


@router.get("/analytics")
async def stats_page(request: Request, user: AdminUser, assets: AssetServerDep) -> Response:
    """Per-slug click history page."""
    return await assets.serve(STATS_PAGE, request)
