"""Paged newsletter collection - the loaded prefix of a remote list."""

import asyncio
import logging
import time
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple

from inbox.core.errors import FetchFailure
from inbox.core.protocols import PageFetcher
from inbox.managers.pagination_manager import PaginationManager
from inbox.models import Newsletter, NewsletterQuery, Page, PageCursor

logger = logging.getLogger("Inbox.PagedCollection")


class LoadedWindow:
    """Append-only ordered newsletters with unique ids."""

    def __init__(self):
        self._items: List[Newsletter] = []
        self._index_by_id: Dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Newsletter]:
        return iter(self._items)

    def __getitem__(self, index: int) -> Newsletter:
        return self._items[index]

    def __contains__(self, newsletter_id: object) -> bool:
        return newsletter_id in self._index_by_id

    def index_of(self, newsletter_id: Optional[str]) -> int:
        if newsletter_id is None:
            return -1
        return self._index_by_id.get(newsletter_id, -1)

    @property
    def last(self) -> Optional[Newsletter]:
        return self._items[-1] if self._items else None

    def snapshot(self) -> Tuple[Newsletter, ...]:
        return tuple(self._items)

    def extend(self, items: Sequence[Newsletter]) -> int:
        """Append items in order, skipping ids already loaded.

        Returns the number of items actually appended.
        """
        appended = 0
        for item in items:
            if item.id in self._index_by_id:
                logger.warning(f"Skipping duplicate newsletter {item.id}")
                continue
            self._index_by_id[item.id] = len(self._items)
            self._items.append(item)
            appended += 1
        return appended

    def clear(self) -> None:
        self._items = []
        self._index_by_id = {}


class PagedCollection:
    """Accumulates pages of one query into a ``LoadedWindow``.

    The collection never decides when to fetch; callers (the load trigger,
    the navigator) ask for the next page and the collection refuses
    overlapping or pointless requests.
    """

    def __init__(
        self,
        fetcher: PageFetcher,
        query: Optional[NewsletterQuery] = None,
        page_size: int = 20,
    ):
        """Initialize PagedCollection.

        Args:
            fetcher: Page fetcher used for every page request
            query: Active filter and sort; defaults to newest first, unfiltered
            page_size: Number of newsletters requested per page
        """
        self.fetcher = fetcher
        self._query = query or NewsletterQuery()
        self._pagination = PaginationManager(page_size=page_size)
        self._window = LoadedWindow()
        self._generation = 0
        self._error: Optional[FetchFailure] = None
        self._listeners: List[Callable[["PagedCollection"], None]] = []

    # State

    @property
    def query(self) -> NewsletterQuery:
        return self._query

    @property
    def page_size(self) -> int:
        return self._pagination.page_size

    @property
    def window(self) -> LoadedWindow:
        return self._window

    @property
    def items(self) -> Tuple[Newsletter, ...]:
        return self._window.snapshot()

    @property
    def total_count(self) -> Optional[int]:
        return self._pagination.total

    @property
    def has_next_page(self) -> bool:
        return self._pagination.has_more

    @property
    def is_fetching_next_page(self) -> bool:
        return self._pagination.loading

    @property
    def is_loading(self) -> bool:
        """True while the first page of the current query is in flight."""
        return self._pagination.loading and len(self._window) == 0

    @property
    def error(self) -> Optional[FetchFailure]:
        return self._error

    @property
    def page_count(self) -> int:
        return self._pagination.page_count

    @property
    def pages_loaded(self) -> int:
        return self._pagination.pages_loaded

    # Change notification

    def subscribe(
        self, listener: Callable[["PagedCollection"], None]
    ) -> Callable[[], None]:
        """Register a listener called after every state change.

        Returns a function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # Operations

    def set_query(self, query: NewsletterQuery) -> bool:
        """Switch to another filter/sort.

        The loaded window is discarded; a different query is a different
        collection. Returns False when the query is unchanged.
        """
        if query.key == self._query.key:
            return False
        logger.info(f"Query changed, resetting collection: {query.key}")
        self._query = query
        self._reset()
        self._notify()
        return True

    def _reset(self) -> None:
        self._generation += 1
        self._window.clear()
        self._pagination.reset()
        self._error = None

    def reset(self) -> None:
        """Drop everything loaded for the current query."""
        logger.info("Resetting collection")
        self._reset()
        self._notify()

    async def refresh(self) -> Optional[Page]:
        """Drop everything loaded for the current query and load page one."""
        self.reset()
        return await self.fetch_next_page()

    async def fetch_next_page(self) -> Optional[Page]:
        """Fetch and append the next page.

        Returns the applied page, or None when the call was a no-op (no
        more pages, a fetch already in flight, or the query changed while
        waiting). Raises FetchFailure when the fetch fails; the window is
        left as it was.
        """
        if not self._pagination.can_load_more():
            logger.debug(
                f"Skipping next page load (has_next_page={self.has_next_page}, "
                f"fetching={self.is_fetching_next_page})"
            )
            return None

        generation = self._generation
        last = self._window.last
        cursor = PageCursor(
            offset=self._pagination.offset,
            limit=self._pagination.page_size,
            after_id=last.id if last else None,
        )
        self._pagination.start_loading()
        self._error = None
        self._notify()

        start_time = time.monotonic()
        logger.info(f"Fetching page {cursor.page_number} (offset {cursor.offset})")
        try:
            page = await self.fetcher.fetch(self._query, cursor)
        except asyncio.CancelledError:
            if generation == self._generation:
                self._pagination.fail_loading()
                self._notify()
            raise
        except Exception as e:
            if generation != self._generation:
                logger.info(f"Ignoring failure of a stale page request: {e}")
                return None
            if isinstance(e, FetchFailure):
                failure = e
            else:
                failure = FetchFailure(
                    f"Page fetch failed: {e}", offset=cursor.offset, cause=e
                )
            logger.error(f"Failed to fetch page {cursor.page_number}: {failure}")
            self._pagination.fail_loading()
            self._error = failure
            self._notify()
            if failure is e:
                raise
            raise failure from e

        if generation != self._generation:
            logger.info(
                f"Discarding page {cursor.page_number} fetched for a previous query"
            )
            return None

        appended = self._window.extend(page.items)
        self._pagination.finish_loading(
            items_loaded=len(page.items),
            has_more=page.has_next_page,
            total=page.total_count,
        )
        duration = time.monotonic() - start_time
        logger.info(
            f"Loaded {appended} newsletters in {duration:.2f} seconds "
            f"(total loaded: {len(self._window)}, total available: {self.total_count})"
        )
        self._notify()
        return page
