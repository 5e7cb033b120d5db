"""Tests for newsletter models."""

import pytest

TAG = "7a1f3b52-8c2d-4e6f-9a0b-1c2d3e4f5a6b"


def test_newsletter_from_dict():
    from inbox.models import Newsletter

    newsletter = Newsletter.from_dict(
        {
            "id": 12,
            "title": "Weekly digest",
            "received_at": "2024-05-01T08:00:00Z",
            "is_read": 1,
            "newsletter_source_id": "source-1",
            "tags": [{"id": TAG, "name": "tech"}],
            "word_count": "900",
        }
    )

    assert newsletter.id == "12"
    assert newsletter.title == "Weekly digest"
    assert newsletter.is_read is True
    assert newsletter.source_id == "source-1"
    assert newsletter.tag_ids == (TAG,)
    assert newsletter.word_count == 900


def test_newsletter_requires_id():
    from inbox.models import Newsletter

    with pytest.raises(ValueError):
        Newsletter.from_dict({"title": "anonymous"})


def test_filter_normalization():
    from inbox.models import NewsletterFilter

    newsletter_filter = NewsletterFilter(
        search="   ", tag_ids=("bogus", TAG), is_liked=True
    )

    normalized = newsletter_filter.normalized()

    assert normalized.search is None
    assert normalized.tag_ids == (TAG,)
    assert normalized.to_params() == {"is_liked": True, "tag_ids": [TAG]}
    assert NewsletterFilter().is_empty() is True


def test_query_key_ignores_cosmetic_differences():
    from inbox.models import NewsletterFilter, NewsletterQuery

    a = NewsletterQuery(filter=NewsletterFilter(search="rust "))
    b = NewsletterQuery(filter=NewsletterFilter(search="rust"))
    c = NewsletterQuery(filter=NewsletterFilter(search="rust"), ascending=True)

    assert a.key == b.key
    assert a.key != c.key


def test_query_rejects_unknown_order():
    from inbox.models import NewsletterQuery

    with pytest.raises(ValueError):
        NewsletterQuery(order_by="popularity")


def test_query_with_filter_and_order():
    from inbox.models import NewsletterFilter, NewsletterQuery

    query = NewsletterQuery(order_by="title", ascending=True)

    filtered = query.with_filter(NewsletterFilter(is_read=False))
    reordered = filtered.with_order("received_at", False)

    assert filtered.order_by == "title"
    assert filtered.filter.is_read is False
    assert reordered.filter.is_read is False
    assert reordered.ascending is False


def test_page_cursor_page_number():
    from inbox.models import PageCursor

    assert PageCursor(offset=0, limit=20).page_number == 1
    assert PageCursor(offset=40, limit=20).page_number == 3


def test_page_from_response():
    from inbox.models import Page

    page = Page.from_response(
        {"items": [{"id": "a"}, {"id": "b"}], "has_more": True, "total_count": "10"}
    )

    assert [n.id for n in page.items] == ["a", "b"]
    assert page.has_next_page is True
    assert page.total_count == 10


def test_page_from_empty_response():
    from inbox.models import Page

    page = Page.from_response({})

    assert page.items == ()
    assert page.has_next_page is False
    assert page.total_count is None
