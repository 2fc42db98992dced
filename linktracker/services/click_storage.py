"""Click event store and the background writer used by the redirect path."""

import asyncio

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from linktracker.core.database import translate_storage_errors
from linktracker.core.observability import (
    record_click_failed,
    record_click_stored,
    set_pending_clicks,
)
from linktracker.models.click import ClickEvent
from linktracker.schemas.analytics import ClickMetrics

logger = structlog.get_logger()


@translate_storage_errors
async def append_click(
    session: AsyncSession,
    link_id: int,
    metrics: ClickMetrics,
) -> ClickEvent:
    """Append a click event for a link."""
    click = ClickEvent(link_id=link_id, metrics=metrics.to_payload())
    session.add(click)
    await session.flush()
    return click


@translate_storage_errors
async def list_clicks_for_link(session: AsyncSession, link_id: int) -> list[ClickEvent]:
    """List the click events of a link, newest first."""
    result = await session.execute(
        select(ClickEvent)
        .where(ClickEvent.link_id == link_id)
        .order_by(ClickEvent.clicked_at.desc(), ClickEvent.id.desc())
    )
    return list(result.scalars().all())


class ClickRecorder:
    """Supervised pool of fire-and-forget click writes.

    ``record`` schedules the write as an asyncio task and returns at once,
    so the redirect response never waits on the store. The recorder keeps a
    reference to every in-flight task until it finishes, and ``stop`` waits
    for them on shutdown so accepted clicks are not dropped.

    Usage:
        recorder = ClickRecorder(session_factory)
        recorder.record(link.id, metrics)  # returns immediately
        await recorder.stop()  # waits for in-flight writes
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        drain_timeout: float = 10.0,
    ):
        """Initialize the recorder.

        Args:
            session_factory: Factory for the sessions background writes use.
            drain_timeout: Maximum seconds ``stop`` waits for pending writes.
        """
        self._session_factory = session_factory
        self._drain_timeout = drain_timeout
        self._pending: set[asyncio.Task] = set()
        self._clicks_stored = 0
        self._clicks_failed = 0

    def record(self, link_id: int, metrics: ClickMetrics) -> None:
        """Schedule a click write without waiting for it."""
        task = asyncio.create_task(self._store(link_id, metrics))
        self._pending.add(task)
        task.add_done_callback(self._task_done)
        set_pending_clicks(len(self._pending))

    def _task_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        set_pending_clicks(len(self._pending))

    async def _store(self, link_id: int, metrics: ClickMetrics) -> None:
        try:
            async with self._session_factory() as session:
                click = await append_click(session, link_id, metrics)
                await session.commit()
        except Exception as e:
            # Never surfaces to the client; the redirect has already been sent
            self._clicks_failed += 1
            record_click_failed()
            logger.error(
                "Failed to store click event",
                link_id=link_id,
                error=str(e),
            )
            return

        self._clicks_stored += 1
        record_click_stored()
        logger.debug("Click event stored", link_id=link_id, click_id=click.id)

    async def drain(self) -> None:
        """Wait until every write scheduled so far has finished."""
        while self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    async def stop(self) -> None:
        """Wait for pending writes, cancelling any left after the drain timeout."""
        drained = len(self._pending)
        if self._pending:
            _, still_pending = await asyncio.wait(set(self._pending), timeout=self._drain_timeout)
            if still_pending:
                logger.warning(
                    "Cancelling click writes still pending at shutdown",
                    pending=len(still_pending),
                )
                # Must be settled before the caller disposes the engine
                for task in still_pending:
                    task.cancel()
                await asyncio.gather(*still_pending, return_exceptions=True)

        logger.info(
            "Click recorder stopped",
            drained=drained,
            clicks_stored=self._clicks_stored,
            clicks_failed=self._clicks_failed,
        )

    @property
    def stats(self) -> dict:
        """Get writer statistics."""
        return {
            "clicks_stored": self._clicks_stored,
            "clicks_failed": self._clicks_failed,
            "pending": len(self._pending),
        }
