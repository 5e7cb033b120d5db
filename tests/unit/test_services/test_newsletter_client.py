"""Tests for NewsletterPageClient."""

import asyncio
import json

import pytest

TAG = "7a1f3b52-8c2d-4e6f-9a0b-1c2d3e4f5a6b"


def newsletters_reply(count, has_more=True, total=None):
    return json.dumps(
        {
            "type": "newsletters",
            "items": [{"id": f"n{i}", "title": f"Newsletter {i}"} for i in range(count)],
            "has_more": has_more,
            "total_count": total,
        }
    )


def test_build_request_includes_cursor_and_filters():
    from inbox.models import NewsletterFilter, NewsletterQuery, PageCursor
    from inbox.services.newsletter_client import NewsletterPageClient

    query = NewsletterQuery(
        filter=NewsletterFilter(search=" rust ", is_read=False, tag_ids=(TAG, "junk")),
        order_by="title",
        ascending=True,
    )

    request = NewsletterPageClient.build_request(
        query, PageCursor(offset=20, limit=20, after_id="n19")
    )

    assert request == {
        "action": "get_newsletters",
        "offset": 20,
        "limit": 20,
        "order_by": "title",
        "ascending": True,
        "after_id": "n19",
        "filters": {"search": "rust", "is_read": False, "tag_ids": [TAG]},
    }


def test_build_request_without_filters():
    from inbox.models import NewsletterQuery, PageCursor
    from inbox.services.newsletter_client import NewsletterPageClient

    request = NewsletterPageClient.build_request(
        NewsletterQuery(), PageCursor(offset=0, limit=20)
    )

    assert "filters" not in request
    assert "after_id" not in request


def test_fetch_sends_request_and_parses_page(monkeypatch):
    import websockets

    from inbox.models import NewsletterQuery, PageCursor
    from inbox.services.newsletter_client import NewsletterPageClient
    from tests.fakes.fake_websocket import FakeConnect, FakeWebSocket

    connect = FakeConnect(FakeWebSocket([newsletters_reply(20, total=45)]))
    monkeypatch.setattr(websockets, "connect", connect)
    client = NewsletterPageClient(uri="ws://pages.test:9000", max_size=2048, open_timeout=1.5)

    page = asyncio.run(
        client.fetch(NewsletterQuery(), PageCursor(offset=0, limit=20))
    )

    assert len(page.items) == 20
    assert page.has_next_page is True
    assert page.total_count == 45
    assert connect.calls == [
        {"uri": "ws://pages.test:9000", "max_size": 2048, "open_timeout": 1.5}
    ]
    assert connect.websocket.get_sent_json()["action"] == "get_newsletters"
    assert connect.websocket.closed is True


@pytest.mark.parametrize("error", [OSError("refused"), asyncio.TimeoutError()])
def test_fetch_transport_errors_become_fetch_failures(monkeypatch, error):
    import websockets

    from inbox.core.errors import FetchFailure
    from inbox.models import NewsletterQuery, PageCursor
    from inbox.services.newsletter_client import NewsletterPageClient
    from tests.fakes.fake_websocket import FakeConnect

    monkeypatch.setattr(websockets, "connect", FakeConnect(error=error))
    client = NewsletterPageClient()

    with pytest.raises(FetchFailure) as exc_info:
        asyncio.run(client.fetch(NewsletterQuery(), PageCursor(offset=40, limit=20)))

    assert exc_info.value.offset == 40
    assert exc_info.value.cause is error


def test_parse_response_error_message():
    from inbox.core.errors import FetchFailure
    from inbox.models import PageCursor
    from inbox.services.newsletter_client import NewsletterPageClient

    reply = json.dumps({"type": "error", "message": "Not authenticated"})

    with pytest.raises(FetchFailure, match="Not authenticated"):
        NewsletterPageClient.parse_response(reply, PageCursor(offset=0, limit=20))


@pytest.mark.parametrize(
    "reply",
    [
        "not json",
        json.dumps(["a", "list"]),
        json.dumps({"type": "history", "items": []}),
        json.dumps({"type": "newsletters", "items": [{"title": "no id"}]}),
    ],
)
def test_parse_response_rejects_bad_replies(reply):
    from inbox.core.errors import FetchFailure
    from inbox.models import PageCursor
    from inbox.services.newsletter_client import NewsletterPageClient

    with pytest.raises(FetchFailure):
        NewsletterPageClient.parse_response(reply, PageCursor(offset=0, limit=20))


def test_parse_response_last_page():
    from inbox.models import PageCursor
    from inbox.services.newsletter_client import NewsletterPageClient

    page = NewsletterPageClient.parse_response(
        newsletters_reply(5, has_more=False, total=45), PageCursor(offset=40, limit=20)
    )

    assert len(page.items) == 5
    assert page.has_next_page is False
