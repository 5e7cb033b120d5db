"""Viewport load trigger - turns sentinel visibility into load-more calls."""

import logging
from enum import Enum
from typing import Any, Callable, Optional, Sequence

from inbox.core.protocols import ObserverFactory, Scheduler, TimerHandle, VisibilityObserver
from inbox.services.scheduler import AsyncioScheduler
from inbox.services.visibility import IntersectionEntry

logger = logging.getLogger("Inbox.LoadTrigger")

DEFAULT_MIN_LOAD_INTERVAL = 0.5


class TriggerState(Enum):
    IDLE = "idle"
    ARMED = "armed"
    TRIGGERED = "triggered"
    COOLING = "cooling"


class ViewportLoadTrigger:
    """Debounced state machine over sentinel visibility.

    One visibility crossing causes at most one ``on_load_more`` call.
    After a call the trigger cools down for ``min_load_interval`` seconds;
    intersection reports during the cooldown are absorbed. Once the
    cooldown is over the trigger fires again only if the sentinel went
    away and came back, or if a load completed (or ``has_next_page`` came
    back after the end was reached) and the sentinel is still visible.
    """

    def __init__(
        self,
        on_load_more: Callable[[], Any],
        enabled: bool = True,
        has_next_page: bool = False,
        is_fetching_next_page: bool = False,
        root_margin: str = "100px",
        threshold: float = 0.1,
        min_load_interval: float = DEFAULT_MIN_LOAD_INTERVAL,
        scheduler: Optional[Scheduler] = None,
        observer_factory: Optional[ObserverFactory] = None,
    ):
        """Initialize ViewportLoadTrigger.

        Args:
            on_load_more: Called once per triggered load; its result is ignored
            enabled: Whether observation is allowed at all
            has_next_page: Whether the collection has more pages
            is_fetching_next_page: Whether a page fetch is in flight
            root_margin: Margin around the viewport, passed to the observer
            threshold: Visible fraction of the sentinel, passed to the observer
            min_load_interval: Cooldown in seconds after each load-more call
            scheduler: Timer source for the cooldown
            observer_factory: Builds the visibility observer on mount/enable
        """
        if min_load_interval < 0:
            raise ValueError("min_load_interval cannot be negative")
        self.on_load_more = on_load_more
        self.root_margin = root_margin
        self.threshold = threshold
        self.min_load_interval = min_load_interval
        self.scheduler = scheduler or AsyncioScheduler()
        self.observer_factory = observer_factory

        self._enabled = enabled
        self._has_next_page = has_next_page
        self._is_fetching_next_page = is_fetching_next_page
        self._has_error = False

        self._state = TriggerState.IDLE
        self._is_intersecting = False
        self._sentinel: Optional[Any] = None
        self._observer: Optional[VisibilityObserver] = None
        self._cooldown: Optional[TimerHandle] = None
        self._cooldown_elapsed = True
        self._completed_since_load = False
        self.load_count = 0

    # State

    @property
    def state(self) -> TriggerState:
        return self._state

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def is_intersecting(self) -> bool:
        return self._is_intersecting

    @property
    def is_observing(self) -> bool:
        return self._observer is not None

    @property
    def has_reached_end(self) -> bool:
        return not self._has_next_page and not self._is_fetching_next_page

    def _set_state(self, state: TriggerState) -> None:
        if state is not self._state:
            logger.debug(f"{self._state.value} -> {state.value}")
            self._state = state

    # Resource lifecycle

    def mount(self, sentinel: Any) -> None:
        """Start observing ``sentinel`` (when enabled)."""
        if self.observer_factory is None:
            raise ValueError("an observer_factory is required to mount the trigger")
        if sentinel is not self._sentinel:
            self._release()
        self._sentinel = sentinel
        self._acquire()

    def unmount(self) -> None:
        """Stop observing. Safe to call repeatedly."""
        self._release()
        self._sentinel = None

    def _acquire(self) -> None:
        if not self._enabled or self._sentinel is None or self._observer is not None:
            return
        self._observer = self.observer_factory(
            self.handle_intersection, self.root_margin, self.threshold
        )
        self._observer.observe(self._sentinel)

    def _release(self) -> None:
        if self._observer is not None:
            observer = self._observer
            self._observer = None
            observer.disconnect()
        self._cancel_cooldown()
        self._is_intersecting = False
        self._set_state(TriggerState.IDLE)

    def _cancel_cooldown(self) -> None:
        if self._cooldown is not None:
            self._cooldown.cancel()
            self._cooldown = None
        self._cooldown_elapsed = True

    # Inputs

    def update(
        self,
        enabled: Optional[bool] = None,
        has_next_page: Optional[bool] = None,
        is_fetching_next_page: Optional[bool] = None,
        has_error: Optional[bool] = None,
    ) -> None:
        """Feed the latest collection state into the trigger.

        A fetch that settles with ``has_error`` set does not count as a
        completed load, so failures are never retried automatically.
        """
        if has_error is not None:
            self._has_error = has_error

        settled = False
        if is_fetching_next_page is not None:
            settled = self._is_fetching_next_page and not is_fetching_next_page
            self._is_fetching_next_page = is_fetching_next_page

        reopened = False
        if has_next_page is not None and has_next_page != self._has_next_page:
            self._has_next_page = has_next_page
            if not has_next_page:
                logger.debug("No more pages, disarming")
                self._cancel_cooldown()
                self._set_state(TriggerState.IDLE)
            else:
                reopened = True

        if settled:
            self._on_fetch_settled()
        elif (
            reopened
            and self._state is TriggerState.IDLE
            and self._is_observing_visible()
        ):
            # The still visible sentinel counts as a fresh report.
            logger.debug("More pages available again")
            self._arm()

        if enabled is not None and enabled != self._enabled:
            self._enabled = enabled
            if enabled:
                logger.debug("Trigger enabled")
                self._acquire()
            else:
                logger.debug("Trigger disabled")
                self._release()

    def handle_intersection(self, entries: Sequence[IntersectionEntry]) -> None:
        """Observer callback. The most recent entry wins."""
        if not entries or self._observer is None or not self._enabled:
            return
        entry = entries[-1]
        self._is_intersecting = entry.is_intersecting

        if self._state is TriggerState.COOLING:
            if not self._cooldown_elapsed:
                return
            if entry.is_intersecting:
                self._arm()
            else:
                self._set_state(TriggerState.IDLE)
            return

        if not entry.is_intersecting:
            self._set_state(TriggerState.IDLE)
            return
        self._arm()

    # Transitions

    def _arm(self) -> None:
        if not self._has_next_page:
            self._set_state(TriggerState.IDLE)
            return
        self._set_state(TriggerState.ARMED)
        if self._is_fetching_next_page:
            logger.debug("Sentinel visible but a fetch is in flight")
            return
        self._fire()

    def _fire(self) -> None:
        self._set_state(TriggerState.TRIGGERED)
        self._completed_since_load = False
        self.load_count += 1
        logger.debug(f"Requesting more newsletters (load #{self.load_count})")
        try:
            self.on_load_more()
        finally:
            self._start_cooldown()

    def _start_cooldown(self) -> None:
        self._cancel_cooldown()
        self._set_state(TriggerState.COOLING)
        self._cooldown_elapsed = False
        if self.min_load_interval == 0:
            self._on_cooldown_elapsed()
            return
        self._cooldown = self.scheduler.call_later(
            self.min_load_interval, self._on_cooldown_elapsed
        )

    def _on_cooldown_elapsed(self) -> None:
        self._cooldown = None
        if self._state is not TriggerState.COOLING:
            return
        self._cooldown_elapsed = True
        if not self._is_intersecting:
            self._set_state(TriggerState.IDLE)
        elif self._completed_since_load:
            self._arm()

    def _on_fetch_settled(self) -> None:
        if self._has_error:
            return
        self._completed_since_load = True
        if not self._is_observing_visible():
            return
        if self._state is TriggerState.ARMED:
            # Someone else's fetch finished while we waited; wait out a
            # cooldown before loading on the same visibility.
            self._start_cooldown()
        elif self._state is TriggerState.IDLE:
            self._arm()
        elif self._state is TriggerState.COOLING and self._cooldown_elapsed:
            self._arm()

    def _is_observing_visible(self) -> bool:
        return self._is_intersecting and self._observer is not None and self._enabled
