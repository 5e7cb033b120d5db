"""Manager classes for paging state."""

from .filter_manager import FilterManager
from .list_manager import NewsletterListManager
from .load_trigger import TriggerState, ViewportLoadTrigger
from .navigation_cursor import NavigationCursor, NewsletterNavigator
from .paged_collection import LoadedWindow, PagedCollection
from .pagination_manager import PaginationManager
from .sort_manager import SortManager

__all__ = [
    "PagedCollection",
    "LoadedWindow",
    "PaginationManager",
    "ViewportLoadTrigger",
    "TriggerState",
    "NavigationCursor",
    "NewsletterNavigator",
    "NewsletterListManager",
    "FilterManager",
    "SortManager",
]
