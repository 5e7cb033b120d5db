"""Filter management for the newsletter list."""

import logging
from dataclasses import replace
from typing import Callable, Iterable, Optional

from inbox.models import NewsletterFilter

logger = logging.getLogger("Inbox.FilterManager")

STATUS_FILTERS = ("is_read", "is_archived", "is_liked")


class FilterManager:
    """Manages the active newsletter filter (status, search, tags, sources, groups)."""

    def __init__(
        self,
        on_filter_change: Callable[[], None],
        initial: Optional[NewsletterFilter] = None,
    ):
        self.on_filter_change = on_filter_change
        self.active_filter = initial or NewsletterFilter()

    def _apply(self, new_filter: NewsletterFilter) -> None:
        if new_filter.normalized() == self.active_filter.normalized():
            return
        self.active_filter = new_filter
        logger.info(f"Active filters: {new_filter.normalized().to_params() or 'none'}")
        self.on_filter_change()

    def set_status(self, name: str, value: Optional[bool]) -> None:
        """Set a status filter; ``None`` stops filtering on it."""
        if name not in STATUS_FILTERS:
            raise ValueError(f"unknown status filter: {name}")
        self._apply(replace(self.active_filter, **{name: value}))

    def set_search(self, query: Optional[str]) -> None:
        self._apply(replace(self.active_filter, search=query))

    def set_tags(self, tag_ids: Iterable[str]) -> None:
        self._apply(replace(self.active_filter, tag_ids=tuple(tag_ids)))

    def set_sources(self, source_ids: Iterable[str]) -> None:
        self._apply(replace(self.active_filter, source_ids=tuple(source_ids)))

    def set_groups(self, group_ids: Iterable[str]) -> None:
        self._apply(replace(self.active_filter, group_ids=tuple(group_ids)))

    def set_date_range(self, date_from: Optional[str], date_to: Optional[str]) -> None:
        self._apply(replace(self.active_filter, date_from=date_from, date_to=date_to))

    def clear(self) -> None:
        """Clear all active filters."""
        self._apply(NewsletterFilter())

    def get_active_filter(self) -> NewsletterFilter:
        return self.active_filter.normalized()
