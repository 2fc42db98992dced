import asyncio
from contextlib import asynccontextmanager

from linktracker.schemas.analytics import ClickMetrics
from linktracker.services import click_service, link_service
from linktracker.services.click_storage import ClickRecorder


async def create_link(session, slug="promo"):
    link = await link_service.create_link(session, slug, "https://example.com/page")
    await session.commit()
    return link


async def test_append_and_list_newest_first(session):
    link = await create_link(session)

    first = await click_service.append_click(session, link.id, ClickMetrics(utm_source="a"))
    second = await click_service.append_click(session, link.id, ClickMetrics(utm_source="b"))
    await session.commit()

    clicks = await click_service.list_clicks_for_link(session, link.id)

    assert [click.id for click in clicks] == [second.id, first.id]
    assert clicks[0].metrics == {"utm_source": "b"}


async def test_clicks_are_scoped_to_their_link(session):
    promo = await create_link(session, "promo")
    other = await create_link(session, "other")

    await click_service.append_click(session, promo.id, ClickMetrics())
    await session.commit()

    assert await click_service.list_clicks_for_link(session, other.id) == []


async def test_recorder_stores_in_background(app, session):
    link = await create_link(session)
    recorder = ClickRecorder(app.state.session_factory)

    recorder.record(link.id, ClickMetrics(ip="203.0.113.7"))
    recorder.record(link.id, ClickMetrics(ip="203.0.113.8"))
    await recorder.drain()

    clicks = await click_service.list_clicks_for_link(session, link.id)
    assert {click.metrics["ip"] for click in clicks} == {"203.0.113.7", "203.0.113.8"}
    assert recorder.stats == {"clicks_stored": 2, "clicks_failed": 0, "pending": 0}


async def test_recorder_swallows_store_failures():
    def broken_session_factory():
        raise RuntimeError("database is down")

    recorder = ClickRecorder(broken_session_factory)

    recorder.record(1, ClickMetrics())
    await recorder.drain()

    assert recorder.stats == {"clicks_stored": 0, "clicks_failed": 1, "pending": 0}


async def test_stop_waits_for_pending_writes(app, session):
    link = await create_link(session)
    recorder = ClickRecorder(app.state.session_factory, drain_timeout=5.0)

    recorder.record(link.id, ClickMetrics())
    await recorder.stop()

    assert recorder.stats["clicks_stored"] == 1
    assert recorder.stats["pending"] == 0


async def test_stop_cancels_writes_past_the_timeout(app, session):
    link = await create_link(session)
    release = asyncio.Event()

    @asynccontextmanager
    async def stuck_session():
        await release.wait()
        yield None

    recorder = ClickRecorder(stuck_session, drain_timeout=0.05)
    recorder.record(link.id, ClickMetrics())

    await recorder.stop()

    assert recorder.stats == {"clicks_stored": 0, "clicks_failed": 0, "pending": 0}
