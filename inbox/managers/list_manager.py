"""Manages loading newsletters into an infinitely scrolling list."""

import asyncio
import logging
from typing import Awaitable, Optional, Set, Tuple

from inbox.config.settings import ScrollSettings
from inbox.core.errors import FetchFailure
from inbox.core.protocols import Scheduler
from inbox.managers.load_trigger import ViewportLoadTrigger
from inbox.managers.paged_collection import PagedCollection
from inbox.models import Newsletter, NewsletterQuery
from inbox.services.visibility import Sentinel, Viewport, ViewportIntersectionObserver

logger = logging.getLogger("Inbox.ListManager")


class NewsletterListManager:
    """Pairs a paged collection with a viewport load trigger.

    The render layer scrolls ``viewport`` and places ``sentinel`` after the
    last row (or passes ``row_height`` and lets the manager place it).
    """

    def __init__(
        self,
        collection: PagedCollection,
        scroll_settings: Optional[ScrollSettings] = None,
        scheduler: Optional[Scheduler] = None,
        viewport: Optional[Viewport] = None,
        sentinel: Optional[Sentinel] = None,
        row_height: Optional[float] = None,
    ):
        self.collection = collection
        self.scroll_settings = scroll_settings or ScrollSettings()
        self.viewport = viewport or Viewport()
        self.sentinel = sentinel or Sentinel()
        self.row_height = row_height
        self._pending: Set[asyncio.Task] = set()
        self._load_tasks: Set[asyncio.Task] = set()

        self.trigger = ViewportLoadTrigger(
            on_load_more=self.load_more_items,
            enabled=self._trigger_enabled(),
            has_next_page=collection.has_next_page,
            is_fetching_next_page=collection.is_fetching_next_page,
            root_margin=self.scroll_settings.root_margin,
            threshold=self.scroll_settings.threshold,
            min_load_interval=self.scroll_settings.min_load_interval,
            scheduler=scheduler,
            observer_factory=self._create_observer,
        )
        self._unsubscribe = collection.subscribe(self._on_collection_changed)

    def _create_observer(self, callback, root_margin, threshold):
        return ViewportIntersectionObserver(
            self.viewport, callback, root_margin=root_margin, threshold=threshold
        )

    def _trigger_enabled(self) -> bool:
        # A failed load shows an error instead of the list; only retry() reloads.
        return (
            self.scroll_settings.enabled
            and not self.collection.is_loading
            and self.collection.error is None
        )

    # Outputs

    @property
    def items(self) -> Tuple[Newsletter, ...]:
        return self.collection.items

    @property
    def is_loading(self) -> bool:
        return self.collection.is_loading

    @property
    def is_loading_more(self) -> bool:
        return self.collection.is_fetching_next_page and len(self.collection.window) > 0

    @property
    def has_reached_end(self) -> bool:
        return self.trigger.has_reached_end

    @property
    def error(self) -> Optional[FetchFailure]:
        return self.collection.error

    @property
    def total_count(self) -> Optional[int]:
        return self.collection.total_count

    @property
    def status_text(self) -> str:
        current_count = len(self.collection.window)
        if self.total_count is None:
            return f"Showing {current_count} newsletters"
        return f"Showing {current_count} of {self.total_count} newsletters"

    # Lifecycle

    def mount(self) -> None:
        self._place_sentinel()
        self.trigger.mount(self.sentinel)

    def unmount(self) -> None:
        self.trigger.unmount()

    def close(self) -> None:
        self.unmount()
        self._unsubscribe()

    # Loading

    async def load_initial(self) -> None:
        """Load the first page unless something is already loaded.

        A load the trigger already started counts; after a failed load
        only ``retry()`` tries again.
        """
        if self._load_tasks:
            await asyncio.gather(*list(self._load_tasks))
        if len(self.collection.window) == 0 and self.collection.error is None:
            logger.info("Starting initial newsletter load...")
            await self._run_load()

    def load_more_items(self) -> None:
        """Trigger callback: start loading the next page in the background."""
        if not self.collection.has_next_page or self.collection.is_fetching_next_page:
            logger.debug("Cannot load more newsletters.")
            return
        logger.info("[UI] Reached end of newsletter list, loading more...")
        task = self.schedule(self._run_load())
        self._load_tasks.add(task)
        task.add_done_callback(self._load_tasks.discard)

    def schedule(self, coro: Awaitable[None]) -> asyncio.Task:
        """Run ``coro`` on the running loop, tracked until it finishes."""
        task = asyncio.ensure_future(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _run_load(self) -> None:
        try:
            await self.collection.fetch_next_page()
        except FetchFailure as e:
            # Kept on the collection as the observable error.
            logger.error(f"Error loading more newsletters: {e}")

    async def wait_idle(self) -> None:
        """Wait for scheduled work (trigger loads and query changes) to finish."""
        current = asyncio.current_task()
        while True:
            pending = [task for task in self._pending if task is not current]
            if not pending:
                return
            await asyncio.gather(*pending)

    async def retry(self) -> None:
        """Retry after a failed load."""
        logger.info("Retrying newsletter load")
        await self._run_load()

    async def refresh(self) -> None:
        """Reload the current query from the first page."""
        logger.info("Refreshing newsletter list")
        self.collection.reset()
        self.viewport.scroll_to(0)
        await self.load_initial()

    async def apply_query(self, query: NewsletterQuery) -> None:
        """Switch filter/sort and load the first page of the new list."""
        if not self.collection.set_query(query):
            return
        self.viewport.scroll_to(0)
        await self.load_initial()

    def _on_collection_changed(self, collection: PagedCollection) -> None:
        # Move the sentinel before re-enabling so a fresh observer sees the new layout.
        self._place_sentinel()
        self.trigger.update(
            has_error=collection.error is not None,
            has_next_page=collection.has_next_page,
            is_fetching_next_page=collection.is_fetching_next_page,
            enabled=self._trigger_enabled(),
        )

    def _place_sentinel(self) -> None:
        if self.row_height is not None:
            self.sentinel.place(len(self.collection.window) * self.row_height)
