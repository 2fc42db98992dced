"""Link registry: database operations for slug -> URL mappings."""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from linktracker.core.database import translate_storage_errors
from linktracker.core.exceptions import InvalidLinkError, LinkNotFoundError, SlugConflictError
from linktracker.models.link import Link


@translate_storage_errors
async def create_link(session: AsyncSession, slug: str, url: str) -> Link:
    """Register a new slug.

    Raises InvalidLinkError if either field is empty and SlugConflictError
    if the slug is already taken. Uniqueness is enforced by the database,
    so concurrent creates of the same slug leave exactly one row.
    """
    if not slug or not url:
        raise InvalidLinkError("Slug and URL are required")

    link = Link(slug=slug, url=url)
    session.add(link)
    try:
        await session.flush()
    except IntegrityError as e:
        await session.rollback()
        raise SlugConflictError(slug) from e

    await session.refresh(link)
    return link


@translate_storage_errors
async def get_link_by_slug(session: AsyncSession, slug: str) -> Link | None:
    """Get a link by its slug."""
    result = await session.execute(select(Link).where(Link.slug == slug))
    return result.scalar_one_or_none()


@translate_storage_errors
async def list_links(session: AsyncSession) -> list[Link]:
    """List all links, newest first."""
    result = await session.execute(
        select(Link).order_by(Link.created_at.desc(), Link.id.desc())
    )
    return list(result.scalars().all())


@translate_storage_errors
async def delete_link_by_slug(session: AsyncSession, slug: str) -> Link:
    """Delete a link by slug.

    Raises LinkNotFoundError if no link is registered under the slug.
    Click events of the link are removed by the foreign key cascade.
    """
    link = await get_link_by_slug(session, slug)
    if link is None:
        raise LinkNotFoundError(slug)

    await session.delete(link)
    await session.flush()
    return link
