"""Sentinel visibility for infinite scroll.

The render layer owns a ``Viewport`` (the scrolled area, described the
same way as a Gtk.Adjustment: a scroll ``value`` and a visible
``page_size``) and a ``Sentinel`` placed after the last row. A
``ViewportIntersectionObserver`` watches both and reports
``IntersectionEntry`` lists whenever the sentinel enters or leaves the
viewport, expanded by ``root_margin``.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

logger = logging.getLogger("Inbox.Visibility")

_TOKEN = re.compile(r"^(-?\d+(?:\.\d+)?)(px|%)?$")


class _Signal:
    """Minimal connect/disconnect change notification."""

    def __init__(self):
        self._handlers: Dict[int, Callable[[], None]] = {}
        self._next_id = 1

    def connect(self, callback: Callable[[], None]) -> int:
        handler_id = self._next_id
        self._next_id += 1
        self._handlers[handler_id] = callback
        return handler_id

    def disconnect(self, handler_id: int) -> None:
        self._handlers.pop(handler_id, None)

    @property
    def handler_count(self) -> int:
        return len(self._handlers)

    def _emit(self) -> None:
        for callback in list(self._handlers.values()):
            callback()


class Viewport(_Signal):
    """Visible region of a scrolled list."""

    def __init__(self, page_size: float = 0.0, value: float = 0.0):
        super().__init__()
        self._page_size = float(page_size)
        self._value = float(value)

    @property
    def value(self) -> float:
        return self._value

    @property
    def page_size(self) -> float:
        return self._page_size

    def scroll_to(self, value: float) -> None:
        if value == self._value:
            return
        self._value = float(value)
        self._emit()

    def resize(self, page_size: float) -> None:
        if page_size == self._page_size:
            return
        self._page_size = float(page_size)
        self._emit()


class Sentinel(_Signal):
    """Marker element placed below the last loaded row."""

    def __init__(self, top: float = 0.0, height: float = 1.0):
        super().__init__()
        self._top = float(top)
        self.height = float(height)

    @property
    def top(self) -> float:
        return self._top

    def place(self, top: float) -> None:
        if top == self._top:
            return
        self._top = float(top)
        self._emit()


@dataclass(frozen=True)
class IntersectionEntry:
    is_intersecting: bool
    target: Sentinel
    intersection_ratio: float = 0.0


def _to_pixels(token: str, extent: float) -> float:
    match = _TOKEN.match(token)
    if not match:
        raise ValueError(f"invalid margin value: {token!r}")
    number = float(match.group(1))
    if match.group(2) == "%":
        return extent * number / 100.0
    if match.group(2) is None and number != 0:
        raise ValueError(f"margin value needs a unit: {token!r}")
    return number


def parse_root_margin(margin: str, extent: float) -> Tuple[float, float]:
    """Return the (top, bottom) pixel margins of a CSS style margin string.

    Percentages are relative to ``extent``, the viewport height.
    """
    tokens = margin.split()
    if len(tokens) == 1:
        top = bottom = tokens[0]
    elif len(tokens) == 2:
        top = bottom = tokens[0]
    elif len(tokens) in (3, 4):
        top, bottom = tokens[0], tokens[2]
    else:
        raise ValueError(f"root margin takes one to four values: {margin!r}")
    return _to_pixels(top, extent), _to_pixels(bottom, extent)


def compute_intersection(
    viewport: Viewport, sentinel: Sentinel, root_margin: str, threshold: float
) -> IntersectionEntry:
    top_margin, bottom_margin = parse_root_margin(root_margin, viewport.page_size)
    root_top = viewport.value - top_margin
    root_bottom = viewport.value + viewport.page_size + bottom_margin

    if sentinel.height <= 0:
        inside = root_top <= sentinel.top <= root_bottom
        ratio = 1.0 if inside else 0.0
    else:
        overlap = min(root_bottom, sentinel.top + sentinel.height) - max(
            root_top, sentinel.top
        )
        ratio = max(0.0, min(1.0, overlap / sentinel.height))

    if threshold <= 0:
        intersecting = ratio > 0
    else:
        intersecting = ratio >= threshold
    return IntersectionEntry(
        is_intersecting=intersecting, target=sentinel, intersection_ratio=ratio
    )


class ViewportIntersectionObserver:
    """Reports sentinel visibility changes within a viewport.

    An entry is delivered when observation starts and afterwards only
    when the intersecting state flips.
    """

    def __init__(
        self,
        viewport: Viewport,
        callback: Callable[[List[IntersectionEntry]], None],
        root_margin: str = "0px",
        threshold: float = 0.0,
    ):
        parse_root_margin(root_margin, 0.0)
        self.viewport = viewport
        self.callback = callback
        self.root_margin = root_margin
        self.threshold = threshold
        self._target: Optional[Sentinel] = None
        self._viewport_handler: Optional[int] = None
        self._target_handler: Optional[int] = None
        self._last_intersecting: Optional[bool] = None

    @property
    def target(self) -> Optional[Sentinel]:
        return self._target

    def observe(self, target: Sentinel) -> None:
        if target is self._target:
            return
        self.disconnect()

        self._target = target
        self._last_intersecting = None
        self._viewport_handler = self.viewport.connect(self._check)
        self._target_handler = target.connect(self._check)
        logger.debug("Observing sentinel")
        self._check()

    def disconnect(self) -> None:
        if self._target is None:
            return
        if self._viewport_handler is not None:
            self.viewport.disconnect(self._viewport_handler)
        if self._target_handler is not None:
            self._target.disconnect(self._target_handler)
        self._viewport_handler = None
        self._target_handler = None
        self._target = None
        self._last_intersecting = None
        logger.debug("Stopped observing sentinel")

    def _check(self) -> None:
        if self._target is None:
            return
        entry = compute_intersection(
            self.viewport, self._target, self.root_margin, self.threshold
        )
        if entry.is_intersecting == self._last_intersecting:
            return
        self._last_intersecting = entry.is_intersecting
        self.callback([entry])
