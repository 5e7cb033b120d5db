#!/usr/bin/env python3
"""
Inbox reader - command line entry point
Loads newsletter pages from a page server by scrolling a simulated list.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from inbox.config import AppPaths, SettingsManager
from inbox.core.di_container import AppContainer
from inbox.managers import NewsletterListManager
from inbox.models import NewsletterFilter, NewsletterQuery

logger = logging.getLogger("Inbox.Main")

ROW_HEIGHT = 40.0
VISIBLE_ROWS = 10


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="inbox-reader", description="List newsletters page by page."
    )
    parser.add_argument("--search", help="Only newsletters matching this text")
    parser.add_argument(
        "--unread", action="store_true", help="Only unread newsletters"
    )
    parser.add_argument(
        "--ascending", action="store_true", help="Oldest newsletters first"
    )
    parser.add_argument(
        "--pages", type=int, default=1, help="Number of pages to load (default: 1)"
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to settings.yml (default: $XDG_CONFIG_HOME/inbox-reader/settings.yml)",
    )
    return parser


def build_query(args: argparse.Namespace) -> NewsletterQuery:
    newsletter_filter = NewsletterFilter(
        search=args.search, is_read=False if args.unread else None
    )
    return NewsletterQuery(filter=newsletter_filter, ascending=args.ascending)


async def scroll_pages(manager: NewsletterListManager, pages: int) -> None:
    """Scroll to the end of the list until ``pages`` pages are loaded."""
    manager.viewport.resize(ROW_HEIGHT * VISIBLE_ROWS)
    manager.mount()
    try:
        await manager.load_initial()
        await manager.wait_idle()

        collection = manager.collection
        while (
            collection.pages_loaded < pages
            and not manager.has_reached_end
            and manager.error is None
        ):
            loaded = collection.pages_loaded
            content_height = len(collection.window) * ROW_HEIGHT
            manager.viewport.scroll_to(
                max(0.0, content_height - manager.viewport.page_size)
            )
            # Let the trigger cool down before the next scroll.
            await asyncio.sleep(manager.scroll_settings.min_load_interval)
            await manager.wait_idle()
            if collection.pages_loaded == loaded and not collection.is_fetching_next_page:
                logger.warning("Scrolling did not load another page, stopping")
                break
    finally:
        manager.unmount()


def print_list(manager: NewsletterListManager) -> None:
    for newsletter in manager.items:
        marker = " " if newsletter.is_read else "*"
        print(f"{marker} {newsletter.title}")
    print(manager.status_text)
    if manager.error is not None:
        print(f"Error: {manager.error}", file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point"""
    args = build_parser().parse_args(argv)
    if args.pages < 1:
        print("--pages must be at least 1", file=sys.stderr)
        return 2

    settings = SettingsManager(args.config or AppPaths.default().config_path)
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info(f"Inbox reader starting, page server {settings.connection.uri}")

    container = AppContainer.create(settings=settings)
    manager = container.create_list_manager(build_query(args), row_height=ROW_HEIGHT)

    try:
        asyncio.run(scroll_pages(manager, args.pages))
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130
    finally:
        manager.close()

    print_list(manager)
    return 1 if manager.error is not None else 0


if __name__ == "__main__":
    sys.exit(main())
