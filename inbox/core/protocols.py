"""Protocol definitions for dependency injection."""

from typing import Any, Callable, List, Protocol

from inbox.models import NewsletterQuery, Page, PageCursor


class PageFetcher(Protocol):
    async def fetch(self, query: NewsletterQuery, cursor: PageCursor) -> Page: ...


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class VisibilityObserver(Protocol):
    def observe(self, target: Any) -> None: ...

    def disconnect(self) -> None: ...


# (callback, root_margin, threshold) -> observer
ObserverFactory = Callable[
    [Callable[[List[Any]], None], str, float], VisibilityObserver
]
