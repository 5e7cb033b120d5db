"""Inbox reader - paged newsletter browsing with viewport-driven loading."""

__version__ = "0.1.0"
