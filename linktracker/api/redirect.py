"""Redirect endpoint: resolve a slug, record the click, redirect."""

import structlog
from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.responses import Response

from linktracker.core.deps import (
    AssetServerDep,
    ClickRecorderDep,
    LinkCacheDep,
    SessionDep,
    SettingsDep,
)
from linktracker.core.observability import record_resolution
from linktracker.core.rate_limit import RATE_LIMIT_REDIRECT, limiter
from linktracker.core.redis import CachedLink, LinkCache
from linktracker.services import link_service
from linktracker.services.assets import StaticAssetServer
from linktracker.services.metrics import GeoHints, extract_click_metrics
from linktracker.services.resolver import PathKind, build_destination_url, classify_path

logger = structlog.get_logger()

router = APIRouter(tags=["redirect"])


async def lookup_link(session: AsyncSession, cache: LinkCache, slug: str) -> CachedLink | None:
    """Find the link for a slug, trying the cache before the registry."""
    cached = await cache.get(slug)
    if cached:
        return cached

    link = await link_service.get_link_by_slug(session, slug)
    if link is None:
        return None

    found = CachedLink(link_id=link.id, url=link.url)
    await cache.set(slug, found)
    return found


async def unresolved(
    path: str,
    request: Request,
    policy: str,
    assets: StaticAssetServer,
) -> Response:
    """Answer a path that does not name a registered slug."""
    record_resolution("not_found")
    if policy == "assets":
        return await assets.serve(path, request)
    raise HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Link not found",
    )


@router.get("/{path:path}", include_in_schema=False)
@limiter.limit(RATE_LIMIT_REDIRECT)
async def resolve_slug(
    request: Request,
    path: str,
    session: SessionDep,
    settings: SettingsDep,
    recorder: ClickRecorderDep,
    cache: LinkCacheDep,
    assets: AssetServerDep,
) -> Response:
    """Redirect a slug to its destination URL.

    Flow:
    1. Paths containing a dot go to the static asset server untouched
    2. Look the slug up (cache, then registry)
    3. Unknown slugs get a 404 or the asset fallback, per configuration
    4. Schedule the click write in the background
    5. Redirect (302) with non-UTM query parameters forwarded
    """
    kind = classify_path(path)

    if kind is PathKind.ASSET:
        record_resolution("asset")
        return await assets.serve(path, request)

    if kind is PathKind.MALFORMED:
        logger.info("Redirect failed - malformed path", path=path)
        return await unresolved(path, request, settings.unknown_slug_policy, assets)

    slug = path
    link = await lookup_link(session, cache, slug)
    if link is None:
        logger.info("Redirect failed - link not found", slug=slug)
        return await unresolved(path, request, settings.unknown_slug_policy, assets)

    query_items = request.query_params.multi_items()
    metrics = extract_click_metrics(
        request.headers,
        query_items,
        geo=GeoHints.from_headers(request.headers),
        client_host=request.client.host if request.client else None,
    )

    # Fire-and-forget: the response never waits on the click store
    recorder.record(link.link_id, metrics)

    destination = build_destination_url(link.url, query_items)
    logger.info("Redirect", slug=slug, link_id=link.link_id)
    record_resolution("redirect")

    return RedirectResponse(url=destination, status_code=status.HTTP_302_FOUND)
