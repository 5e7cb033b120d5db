"""Collaborators: page fetching, visibility and timers."""

from .newsletter_client import NewsletterPageClient
from .scheduler import AsyncioScheduler
from .visibility import (
    IntersectionEntry,
    Sentinel,
    Viewport,
    ViewportIntersectionObserver,
)

__all__ = [
    "AsyncioScheduler",
    "IntersectionEntry",
    "NewsletterPageClient",
    "Sentinel",
    "Viewport",
    "ViewportIntersectionObserver",
]
