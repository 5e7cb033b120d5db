"""Sort manager - Handles sort order state."""

import logging
from typing import Callable

from inbox.models.newsletter import ORDER_FIELDS

logger = logging.getLogger("Inbox.SortManager")


class SortManager:
    """Manages the sort field and direction of the newsletter list."""

    def __init__(
        self,
        on_sort_change: Callable[[], None],
        order_by: str = "received_at",
        ascending: bool = False,
    ):
        """Initialize SortManager.

        Args:
            on_sort_change: Callback fired after the sort order changes
            order_by: Initial sort field
            ascending: Initial direction; default newest first
        """
        if order_by not in ORDER_FIELDS:
            raise ValueError(f"cannot sort by {order_by!r}")
        self.on_sort_change = on_sort_change
        self.order_by = order_by
        self.ascending = ascending

    def toggle_direction(self) -> None:
        """Flip between ascending and descending."""
        self.ascending = not self.ascending
        logger.info(f"Sort direction: {self.direction_label}")
        self.on_sort_change()

    def set_order(self, order_by: str, ascending: bool = False) -> None:
        if order_by not in ORDER_FIELDS:
            raise ValueError(f"cannot sort by {order_by!r}")
        if order_by == self.order_by and ascending == self.ascending:
            return
        self.order_by = order_by
        self.ascending = ascending
        logger.info(f"Sort order: {order_by} {self.direction_label}")
        self.on_sort_change()

    @property
    def direction_label(self) -> str:
        if self.order_by == "title":
            return "A to Z" if self.ascending else "Z to A"
        return "Oldest first" if self.ascending else "Newest first"
