"""WebSocket client that fetches newsletter pages from the page server."""

import asyncio
import json
import logging
from typing import Any, Dict

import websockets

from inbox.core.errors import FetchFailure
from inbox.models import NewsletterQuery, Page, PageCursor

logger = logging.getLogger("Inbox.NewsletterClient")


class NewsletterPageClient:
    """Requests one page per connection.

    Every failure mode (transport, server error reply, unexpected reply)
    is reported as ``FetchFailure``.
    """

    def __init__(
        self,
        uri: str = "ws://localhost:8765",
        max_size: int = 5 * 1024 * 1024,
        open_timeout: float = 5.0,
    ):
        self.uri = uri
        self.max_size = max_size
        self.open_timeout = open_timeout

    @staticmethod
    def build_request(query: NewsletterQuery, cursor: PageCursor) -> Dict[str, Any]:
        request = {
            "action": "get_newsletters",
            "offset": cursor.offset,
            "limit": cursor.limit,
            "order_by": query.order_by,
            "ascending": query.ascending,
        }
        if cursor.after_id is not None:
            request["after_id"] = cursor.after_id
        filters = query.filter.normalized().to_params()
        if filters:
            request["filters"] = filters
        return request

    async def fetch(self, query: NewsletterQuery, cursor: PageCursor) -> Page:
        request = self.build_request(query, cursor)
        logger.debug(f"Requesting page {cursor.page_number} (offset {cursor.offset})")

        try:
            async with websockets.connect(
                self.uri, max_size=self.max_size, open_timeout=self.open_timeout
            ) as websocket:
                await websocket.send(json.dumps(request))
                response = await websocket.recv()
        except (websockets.exceptions.WebSocketException, OSError, asyncio.TimeoutError) as e:
            logger.error(f"Page request to {self.uri} failed: {e}")
            raise FetchFailure(
                f"Could not reach page server: {e}", offset=cursor.offset, cause=e
            ) from e

        return self.parse_response(response, cursor)

    @staticmethod
    def parse_response(response: Any, cursor: PageCursor) -> Page:
        try:
            data = json.loads(response)
        except (TypeError, ValueError) as e:
            raise FetchFailure(
                "Malformed page response", offset=cursor.offset, cause=e
            ) from e

        if not isinstance(data, dict):
            raise FetchFailure("Malformed page response", offset=cursor.offset)

        msg_type = data.get("type")
        if msg_type == "error":
            message = data.get("message") or "Page server returned an error"
            raise FetchFailure(message, offset=cursor.offset)
        if msg_type != "newsletters":
            raise FetchFailure(
                f"Unexpected response type: {msg_type!r}", offset=cursor.offset
            )

        try:
            return Page.from_response(data)
        except (TypeError, ValueError, KeyError) as e:
            raise FetchFailure(
                f"Invalid newsletter in page: {e}", offset=cursor.offset, cause=e
            ) from e
