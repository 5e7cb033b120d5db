"""Core interfaces and errors.

The dependency injection container lives in ``inbox.core.di_container``;
it imports the managers, which import this package.
"""

from .errors import FetchFailure, InboxError, InvalidTarget
from .protocols import (
    ObserverFactory,
    PageFetcher,
    Scheduler,
    TimerHandle,
    VisibilityObserver,
)

__all__ = [
    "FetchFailure",
    "InboxError",
    "InvalidTarget",
    "ObserverFactory",
    "PageFetcher",
    "Scheduler",
    "TimerHandle",
    "VisibilityObserver",
]
