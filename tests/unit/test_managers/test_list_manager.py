"""Tests for NewsletterListManager (collection, trigger and viewport together)."""

import asyncio

ROW = 40.0


def make_manager(fetcher, scheduler, **kwargs):
    from inbox.managers.list_manager import NewsletterListManager
    from inbox.managers.paged_collection import PagedCollection
    from inbox.services.visibility import Viewport

    return NewsletterListManager(
        PagedCollection(fetcher, page_size=20),
        scheduler=scheduler,
        viewport=Viewport(page_size=400),
        row_height=ROW,
        **kwargs,
    )


def test_mount_loads_first_page(fetcher, scheduler):
    async def run():
        manager = make_manager(fetcher, scheduler)
        manager.mount()
        await manager.wait_idle()
        return manager

    manager = asyncio.run(run())

    assert len(manager.items) == 20
    assert manager.sentinel.top == 20 * ROW
    assert manager.status_text == "Showing 20 of 45 newsletters"
    assert len(fetcher.calls) == 1
    assert manager.is_loading is False
    assert manager.has_reached_end is False


def test_scrolling_to_the_end_loads_every_page(fetcher, scheduler):
    async def run():
        manager = make_manager(fetcher, scheduler)
        manager.mount()
        await manager.wait_idle()

        manager.viewport.scroll_to(400)
        await manager.wait_idle()
        assert len(manager.items) == 40

        scheduler.advance(0.5)
        manager.viewport.scroll_to(1200)
        await manager.wait_idle()
        return manager

    manager = asyncio.run(run())

    assert len(manager.items) == 45
    assert manager.has_reached_end is True
    assert manager.status_text == "Showing 45 of 45 newsletters"
    assert [c.offset for c in fetcher.cursors] == [0, 20, 40]


def test_scrolling_within_the_list_does_not_load(fetcher, scheduler):
    async def run():
        manager = make_manager(fetcher, scheduler)
        manager.mount()
        await manager.wait_idle()

        manager.viewport.scroll_to(100)
        manager.viewport.scroll_to(200)
        await manager.wait_idle()
        return manager

    manager = asyncio.run(run())

    assert len(fetcher.calls) == 1


def test_failed_load_is_reported_and_retried_on_request(fetcher, scheduler):
    from inbox.core.errors import FetchFailure

    async def run():
        manager = make_manager(fetcher, scheduler)
        fetcher.fail_with = FetchFailure("server unavailable")
        manager.mount()
        await manager.wait_idle()

        assert manager.error is not None
        assert manager.items == ()
        assert manager.trigger.is_observing is False
        assert len(fetcher.calls) == 1

        await manager.retry()
        await manager.wait_idle()
        return manager

    manager = asyncio.run(run())

    assert manager.error is None
    assert len(manager.items) == 20


def test_apply_query_resets_and_reloads(fetcher, scheduler):
    from inbox.models import NewsletterQuery

    async def run():
        manager = make_manager(fetcher, scheduler)
        manager.mount()
        await manager.wait_idle()
        manager.viewport.scroll_to(400)
        await manager.wait_idle()

        await manager.apply_query(NewsletterQuery(ascending=True))
        await manager.wait_idle()
        return manager

    manager = asyncio.run(run())

    assert manager.viewport.value == 0
    assert len(manager.items) == 20
    assert fetcher.calls[-1][0].ascending is True
    assert fetcher.cursors[-1].offset == 0


def test_disabled_scrolling_never_loads(fetcher, scheduler):
    from inbox.config.settings import ScrollSettings

    async def run():
        manager = make_manager(
            fetcher, scheduler, scroll_settings=ScrollSettings(enabled=False)
        )
        manager.mount()
        await manager.wait_idle()
        return manager

    manager = asyncio.run(run())

    assert fetcher.calls == []
    assert manager.status_text == "Showing 0 newsletters"


def test_load_initial_without_scrolling(fetcher, scheduler):
    async def run():
        manager = make_manager(fetcher, scheduler)
        await manager.load_initial()
        await manager.load_initial()
        return manager

    manager = asyncio.run(run())

    assert len(fetcher.calls) == 1
    assert len(manager.items) == 20


def test_close_stops_listening(fetcher, scheduler):
    async def run():
        manager = make_manager(fetcher, scheduler)
        manager.mount()
        await manager.wait_idle()
        manager.close()
        manager.viewport.scroll_to(400)
        await manager.wait_idle()
        return manager

    manager = asyncio.run(run())

    assert manager.trigger.is_observing is False
    assert len(fetcher.calls) == 1


def test_fetch_in_flight_at_unmount_still_applies(fetcher, scheduler):
    async def run():
        manager = make_manager(fetcher, scheduler)
        manager.mount()
        await manager.wait_idle()

        fetcher.gate = asyncio.Event()
        manager.viewport.scroll_to(400)
        await asyncio.sleep(0)
        assert manager.is_loading_more is True

        manager.unmount()
        fetcher.gate.set()
        await manager.wait_idle()

        scheduler.advance(5)
        manager.viewport.scroll_to(1200)
        await manager.wait_idle()
        return manager

    manager = asyncio.run(run())

    assert len(manager.items) == 40
    assert len(fetcher.calls) == 2
    assert manager.is_loading_more is False
    assert manager.trigger.is_observing is False


def test_first_page_is_not_loading_more(fetcher, scheduler):
    async def run():
        manager = make_manager(fetcher, scheduler)
        fetcher.gate = asyncio.Event()
        task = manager.schedule(manager.load_initial())
        await asyncio.sleep(0)
        states = (manager.is_loading, manager.is_loading_more)
        fetcher.gate.set()
        await task
        return states

    assert asyncio.run(run()) == (True, False)


def test_refresh_reloads_first_page(fetcher, scheduler):
    async def run():
        manager = make_manager(fetcher, scheduler)
        manager.mount()
        await manager.wait_idle()

        await manager.refresh()
        await manager.wait_idle()
        return manager

    manager = asyncio.run(run())

    assert len(manager.items) == 20
    assert [c.offset for c in fetcher.cursors] == [0, 0]
    assert manager.error is None


def test_failed_refresh_keeps_error(fetcher, scheduler):
    from inbox.core.errors import FetchFailure

    async def run():
        manager = make_manager(fetcher, scheduler)
        manager.mount()
        await manager.wait_idle()

        fetcher.fail_with = FetchFailure("server unavailable")
        await manager.refresh()
        await manager.wait_idle()
        return manager

    manager = asyncio.run(run())

    assert manager.items == ()
    assert isinstance(manager.error, FetchFailure)
    assert manager.trigger.is_observing is False
