"""Newsletter items, query parameters and page payloads."""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

_UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)

ORDER_FIELDS = ("received_at", "title", "updated_at")


def is_valid_uuid(value: str) -> bool:
    return isinstance(value, str) and bool(_UUID_RE.match(value))


@dataclass(frozen=True)
class Newsletter:
    """A single newsletter as seen by the paging engine.

    Only ``id`` matters for position; the other fields are carried for
    the sort order and for consumers of the navigation state.
    """

    id: str
    title: str = ""
    received_at: Optional[str] = None
    is_read: bool = False
    is_archived: bool = False
    is_liked: bool = False
    source_id: Optional[str] = None
    tag_ids: Tuple[str, ...] = ()
    summary: str = ""
    word_count: int = 0
    estimated_read_time: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Newsletter":
        if "id" not in data or data["id"] in (None, ""):
            raise ValueError("newsletter payload has no id")

        tags = data.get("tags") or []
        tag_ids = data.get("tag_ids")
        if tag_ids is None:
            tag_ids = [t["id"] if isinstance(t, dict) else t for t in tags]

        return cls(
            id=str(data["id"]),
            title=data.get("title") or "",
            received_at=data.get("received_at"),
            is_read=bool(data.get("is_read", False)),
            is_archived=bool(data.get("is_archived", False)),
            is_liked=bool(data.get("is_liked", False)),
            source_id=data.get("newsletter_source_id") or data.get("source_id"),
            tag_ids=tuple(str(t) for t in tag_ids),
            summary=data.get("summary") or "",
            word_count=int(data.get("word_count") or 0),
            estimated_read_time=int(data.get("estimated_read_time") or 0),
        )


@dataclass(frozen=True)
class NewsletterFilter:
    """Filter half of a newsletter query. ``None`` means "don't filter"."""

    search: Optional[str] = None
    is_read: Optional[bool] = None
    is_archived: Optional[bool] = None
    is_liked: Optional[bool] = None
    tag_ids: Tuple[str, ...] = ()
    source_ids: Tuple[str, ...] = ()
    group_ids: Tuple[str, ...] = ()
    date_from: Optional[str] = None
    date_to: Optional[str] = None

    def normalized(self) -> "NewsletterFilter":
        """Return a copy with blank search removed and invalid ids dropped.

        Id tuples are sorted so that equal selections compare equal
        regardless of the order they were picked in.
        """
        search = self.search.strip() if self.search else None
        return NewsletterFilter(
            search=search or None,
            is_read=self.is_read,
            is_archived=self.is_archived,
            is_liked=self.is_liked,
            tag_ids=tuple(sorted(t for t in self.tag_ids if is_valid_uuid(t))),
            source_ids=tuple(
                sorted(s for s in self.source_ids if is_valid_uuid(s))
            ),
            group_ids=tuple(sorted(g for g in self.group_ids if is_valid_uuid(g))),
            date_from=self.date_from,
            date_to=self.date_to,
        )

    def to_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        if self.search:
            params["search"] = self.search
        for name in ("is_read", "is_archived", "is_liked", "date_from", "date_to"):
            value = getattr(self, name)
            if value is not None:
                params[name] = value
        for name in ("tag_ids", "source_ids", "group_ids"):
            value = getattr(self, name)
            if value:
                params[name] = list(value)
        return params

    def is_empty(self) -> bool:
        return not self.to_params()


@dataclass(frozen=True)
class NewsletterQuery:
    """Filter plus sort: the identity of one paged collection."""

    filter: NewsletterFilter = field(default_factory=NewsletterFilter)
    order_by: str = "received_at"
    ascending: bool = False

    def __post_init__(self):
        if self.order_by not in ORDER_FIELDS:
            raise ValueError(
                f"order_by must be one of {', '.join(ORDER_FIELDS)}, "
                f"got {self.order_by!r}"
            )

    @property
    def key(self) -> Tuple[Any, ...]:
        """Hashable key; two queries with the same key share one collection."""
        normalized = self.filter.normalized()
        return (
            "newsletters",
            "infinite",
            tuple(sorted((k, str(v)) for k, v in normalized.to_params().items())),
            self.order_by,
            self.ascending,
        )

    def with_filter(self, newsletter_filter: NewsletterFilter) -> "NewsletterQuery":
        return NewsletterQuery(
            filter=newsletter_filter, order_by=self.order_by, ascending=self.ascending
        )

    def with_order(self, order_by: str, ascending: bool) -> "NewsletterQuery":
        return NewsletterQuery(
            filter=self.filter, order_by=order_by, ascending=ascending
        )


@dataclass(frozen=True)
class PageCursor:
    """Where the next page resumes: an offset, plus the last loaded id."""

    offset: int
    limit: int
    after_id: Optional[str] = None

    @property
    def page_number(self) -> int:
        return self.offset // self.limit + 1


@dataclass(frozen=True)
class Page:
    """One page as returned by the page fetcher."""

    items: Tuple[Newsletter, ...]
    has_next_page: bool
    total_count: Optional[int] = None

    @classmethod
    def from_response(cls, data: Dict[str, Any]) -> "Page":
        raw_items: List[Dict[str, Any]] = data.get("items") or []
        total = data.get("total_count")
        return cls(
            items=tuple(Newsletter.from_dict(item) for item in raw_items),
            has_next_page=bool(data.get("has_more", False)),
            total_count=int(total) if total is not None else None,
        )
