"""Previous/next navigation over the loaded newsletters."""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from inbox.core.errors import InvalidTarget
from inbox.managers.paged_collection import LoadedWindow, PagedCollection
from inbox.models import Newsletter, Page

logger = logging.getLogger("Inbox.Navigation")

DEFAULT_PRELOAD_DISTANCE = 5


@dataclass(frozen=True)
class NavigationCursor:
    """Position of a target newsletter within the loaded window.

    Only the loaded window is considered: the last loaded newsletter has
    no next one even when the server has more pages.
    """

    target_id: Optional[str]
    index: int = -1
    window_size: int = 0
    previous: Optional[Newsletter] = None
    current: Optional[Newsletter] = None
    next: Optional[Newsletter] = None

    @classmethod
    def resolve(
        cls, window: Sequence[Newsletter], target_id: Optional[str]
    ) -> "NavigationCursor":
        if target_id is None or len(window) == 0:
            return cls(target_id=target_id, window_size=len(window))

        if isinstance(window, LoadedWindow):
            index = window.index_of(target_id)
        else:
            index = next(
                (i for i, item in enumerate(window) if item.id == target_id), -1
            )

        if index < 0:
            logger.debug(f"{InvalidTarget(target_id)} ({len(window)} loaded)")
            return cls(target_id=target_id, window_size=len(window))

        return cls(
            target_id=target_id,
            index=index,
            window_size=len(window),
            previous=window[index - 1] if index > 0 else None,
            current=window[index],
            next=window[index + 1] if index + 1 < len(window) else None,
        )

    @property
    def current_index(self) -> int:
        return self.index

    @property
    def has_previous(self) -> bool:
        return self.index > 0

    @property
    def has_next(self) -> bool:
        return self.index >= 0 and self.index + 1 < self.window_size

    def navigate_to_previous(self) -> Optional[str]:
        return self.previous.id if self.previous is not None else None

    def navigate_to_next(self) -> Optional[str]:
        return self.next.id if self.next is not None else None


class NewsletterNavigator:
    """Navigation state for one newsletter over a paged collection.

    Holds only the target id; the cursor is recomputed from the
    collection on every access.
    """

    def __init__(
        self,
        collection: PagedCollection,
        target_id: Optional[str] = None,
        preload_distance: int = DEFAULT_PRELOAD_DISTANCE,
    ):
        self.collection = collection
        self.target_id = target_id
        self.preload_distance = preload_distance

    @property
    def cursor(self) -> NavigationCursor:
        return NavigationCursor.resolve(self.collection.window, self.target_id)

    @property
    def current_newsletter(self) -> Optional[Newsletter]:
        return self.cursor.current

    @property
    def previous_newsletter(self) -> Optional[Newsletter]:
        return self.cursor.previous

    @property
    def next_newsletter(self) -> Optional[Newsletter]:
        return self.cursor.next

    @property
    def current_index(self) -> int:
        return self.cursor.index

    @property
    def has_previous(self) -> bool:
        return self.cursor.has_previous

    @property
    def has_next(self) -> bool:
        return self.cursor.has_next

    @property
    def is_loading(self) -> bool:
        return self.collection.is_loading or self.collection.is_fetching_next_page

    @property
    def total_count(self) -> Optional[int]:
        return self.collection.total_count

    def navigate_to_previous(self) -> Optional[str]:
        cursor = self.cursor
        target = cursor.navigate_to_previous()
        if target is None:
            logger.debug(f"No previous newsletter (index {cursor.index})")
        else:
            logger.debug(f"Navigating to previous newsletter: {self.target_id} -> {target}")
        return target

    def navigate_to_next(self) -> Optional[str]:
        cursor = self.cursor
        target = cursor.navigate_to_next()
        if target is None:
            logger.debug(
                f"No next newsletter (index {cursor.index}, "
                f"has_next_page={self.collection.has_next_page})"
            )
        else:
            logger.debug(f"Navigating to next newsletter: {self.target_id} -> {target}")
        return target

    @property
    def needs_more_data(self) -> bool:
        """True when the target is close to the last loaded item and more pages exist.

        A ``preload_distance`` of 0 means only the last loaded item itself.
        """
        index = self.cursor.index
        if index < 0:
            return False
        near_end = index >= len(self.collection.window) - 1 - self.preload_distance
        return (
            near_end
            and self.collection.has_next_page
            and not self.collection.is_fetching_next_page
        )

    async def preload_adjacent(self) -> Optional[Page]:
        """Fetch the next page when the target is near the loaded end."""
        if not self.needs_more_data:
            return None
        logger.debug(
            f"Preloading adjacent newsletters (index {self.current_index}, "
            f"loaded {len(self.collection.window)})"
        )
        return await self.collection.fetch_next_page()
