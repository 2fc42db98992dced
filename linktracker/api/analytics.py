"""Click history endpoints."""

import structlog
from fastapi import APIRouter, HTTPException, Request, status

from linktracker.core.deps import SessionDep
from linktracker.core.rate_limit import RATE_LIMIT_API, limiter
from linktracker.schemas.analytics import ClickEventResponse
from linktracker.services import click_service, link_service

logger = structlog.get_logger()

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/{slug}", response_model=list[ClickEventResponse])
@limiter.limit(RATE_LIMIT_API)
async def get_link_clicks(
    request: Request,
    slug: str,
    session: SessionDep,
) -> list[ClickEventResponse]:
    """Get the click events of a link, newest first."""
    link = await link_service.get_link_by_slug(session, slug)
    if link is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Link not found",
        )

    clicks = await click_service.list_clicks_for_link(session, link.id)

    logger.debug("Click history fetched", slug=slug, count=len(clicks))
    return [ClickEventResponse.model_validate(click) for click in clicks]
