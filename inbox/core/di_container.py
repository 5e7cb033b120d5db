"""Dependency injection container."""

from dataclasses import dataclass, field
from typing import Optional

from inbox.config import SettingsManager
from inbox.core.protocols import PageFetcher, Scheduler
from inbox.managers import (
    FilterManager,
    NewsletterListManager,
    NewsletterNavigator,
    PagedCollection,
    SortManager,
)
from inbox.models import NewsletterQuery
from inbox.services import NewsletterPageClient


@dataclass
class AppContainer:
    settings: SettingsManager
    scheduler: Optional[Scheduler] = None

    _page_client: Optional[PageFetcher] = field(
        default=None, init=False, repr=False
    )

    @property
    def page_client(self) -> PageFetcher:
        if self._page_client is None:
            connection = self.settings.connection
            self._page_client = NewsletterPageClient(
                uri=connection.uri,
                max_size=connection.max_size,
                open_timeout=connection.open_timeout,
            )
        return self._page_client

    def use_page_client(self, fetcher: PageFetcher) -> None:
        """Replace the websocket client, e.g. with an in-memory fetcher."""
        self._page_client = fetcher

    def create_collection(
        self, query: Optional[NewsletterQuery] = None, page_size: Optional[int] = None
    ) -> PagedCollection:
        return PagedCollection(
            self.page_client,
            query=query,
            page_size=page_size or self.settings.page_size,
        )

    def create_list_manager(
        self,
        query: Optional[NewsletterQuery] = None,
        row_height: Optional[float] = None,
    ) -> NewsletterListManager:
        return NewsletterListManager(
            self.create_collection(query),
            scroll_settings=self.settings.scroll,
            scheduler=self.scheduler,
            row_height=row_height,
        )

    def create_navigator(
        self,
        target_id: Optional[str] = None,
        query: Optional[NewsletterQuery] = None,
        collection: Optional[PagedCollection] = None,
    ) -> NewsletterNavigator:
        """Navigator over ``collection``, or over a fresh one sized for navigation."""
        if collection is None:
            collection = self.create_collection(
                query, page_size=self.settings.navigation_page_size
            )
        return NewsletterNavigator(
            collection,
            target_id=target_id,
            preload_distance=self.settings.scroll.preload_distance,
        )

    def create_filter_manager(self, list_manager: NewsletterListManager) -> FilterManager:
        """Filter manager whose changes re-query ``list_manager``."""

        def on_filter_change():
            query = list_manager.collection.query.with_filter(
                filter_manager.get_active_filter()
            )
            list_manager.schedule(list_manager.apply_query(query))

        filter_manager = FilterManager(
            on_filter_change, initial=list_manager.collection.query.filter
        )
        return filter_manager

    def create_sort_manager(self, list_manager: NewsletterListManager) -> SortManager:
        """Sort manager whose changes re-query ``list_manager``."""

        def on_sort_change():
            query = list_manager.collection.query.with_order(
                sort_manager.order_by, sort_manager.ascending
            )
            list_manager.schedule(list_manager.apply_query(query))

        query = list_manager.collection.query
        sort_manager = SortManager(
            on_sort_change, order_by=query.order_by, ascending=query.ascending
        )
        return sort_manager

    @classmethod
    def create(
        cls,
        settings: Optional[SettingsManager] = None,
        scheduler: Optional[Scheduler] = None,
    ) -> "AppContainer":
        return cls(settings=settings or SettingsManager(), scheduler=scheduler)
