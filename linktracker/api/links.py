"""Link registry endpoints."""

import structlog
from fastapi import APIRouter, HTTPException, Request, status

from linktracker.core.deps import LinkCacheDep, SessionDep
from linktracker.core.exceptions import InvalidLinkError, LinkNotFoundError, SlugConflictError
from linktracker.core.observability import record_link_operation
from linktracker.core.rate_limit import RATE_LIMIT_API, RATE_LIMIT_CREATE_LINK, limiter
from linktracker.schemas.link import LinkCreate, LinkDelete, LinkResponse
from linktracker.services import link_service

logger = structlog.get_logger()

router = APIRouter(prefix="/links", tags=["links"])


@router.get("", response_model=list[LinkResponse])
@limiter.limit(RATE_LIMIT_API)
async def list_links(request: Request, session: SessionDep) -> list[LinkResponse]:
    """List all links, newest first."""
    links = await link_service.list_links(session)
    return [LinkResponse.model_validate(link) for link in links]


@router.post("", response_model=LinkResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(RATE_LIMIT_CREATE_LINK)
async def create_link(
    request: Request,
    link_data: LinkCreate,
    session: SessionDep,
) -> LinkResponse:
    """Register a new slug.

    Returns 409 if the slug is already registered; existing links are
    never overwritten.
    """
    try:
        link = await link_service.create_link(
            session=session,
            slug=link_data.slug,
            url=link_data.url,
        )
        await session.commit()
    except SlugConflictError:
        logger.info("Link creation conflict", slug=link_data.slug)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Slug already exists",
        )
    except InvalidLinkError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    logger.info("Link created", link_id=link.id, slug=link.slug)
    record_link_operation("create")
    return LinkResponse.model_validate(link)


@router.delete("")
@limiter.limit(RATE_LIMIT_API)
async def delete_link(
    request: Request,
    link_data: LinkDelete,
    session: SessionDep,
    cache: LinkCacheDep,
) -> dict[str, str]:
    """Delete a link by slug."""
    try:
        link = await link_service.delete_link_by_slug(session, link_data.slug)
        await session.commit()
    except LinkNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Link not found",
        )

    # Invalidate cache so redirects stop resolving the slug
    await cache.invalidate(link_data.slug)

    logger.info("Link deleted", link_id=link.id, slug=link_data.slug)
    record_link_operation("delete")
    return {"message": "Link deleted successfully"}
