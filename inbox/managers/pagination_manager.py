"""Pagination state management for infinite scroll."""

import math
from typing import Optional


class PaginationManager:
    def __init__(self, page_size: int = 20):
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self.page_size = page_size
        self.offset = 0
        self.total: Optional[int] = None
        self.has_more = True
        self.loading = False
        self.pages_loaded = 0

    def can_load_more(self) -> bool:
        return self.has_more and not self.loading

    def start_loading(self) -> None:
        self.loading = True

    def finish_loading(
        self,
        items_loaded: int,
        has_more: bool,
        total: Optional[int] = None,
    ) -> None:
        self.loading = False
        self.offset += items_loaded
        self.pages_loaded += 1
        if total is not None:
            self.total = total

        # An empty page can't advance the offset; stop rather than loop.
        if items_loaded == 0:
            self.has_more = False
        elif self.total is not None and self.offset >= self.total:
            self.has_more = False
        else:
            self.has_more = has_more

    def fail_loading(self) -> None:
        self.loading = False

    @property
    def page_count(self) -> int:
        if not self.total:
            return 0
        return math.ceil(self.total / self.page_size)

    def reset(self) -> None:
        self.offset = 0
        self.total = None
        self.has_more = True
        self.loading = False
        self.pages_loaded = 0
