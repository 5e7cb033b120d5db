"""Domain models."""

from .newsletter import (
    Newsletter,
    NewsletterFilter,
    NewsletterQuery,
    Page,
    PageCursor,
)

__all__ = ["Newsletter", "NewsletterFilter", "NewsletterQuery", "Page", "PageCursor"]
