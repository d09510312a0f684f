"""Single-slot state cache with expiry-driven refresh.

The cache holds at most one :class:`RemoteState`. A periodic check drops
the entry once its TTL has elapsed and starts a background refresh;
readers may see no state until that refresh completes. A failed refresh
leaves the cache empty and is reported to failure listeners.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from pysecurehome._constants import DEFAULT_CACHE_TTL, DEFAULT_CHECK_PERIOD
from pysecurehome.models.state import RemoteState

_logger = logging.getLogger(__name__)

StateListener = Callable[[RemoteState], None]
FailureListener = Callable[[BaseException], None]


@dataclass(slots=True, frozen=True)
class CacheEntry:
    """The cached snapshot and its freshness window (monotonic seconds)."""

    state: RemoteState
    stored_at: float
    expires_at: float


class StateCache:
    """Time-keyed single slot for the latest panel snapshot.

    Usage::

        cache = StateCache(fetcher.fetch_state, ttl=5)
        unsubscribe = cache.subscribe(on_state)
        await cache.refresh()
        cache.start()
    """

    def __init__(
        self,
        refresher: Callable[[], Awaitable[RemoteState]],
        *,
        ttl: float = DEFAULT_CACHE_TTL,
        check_period: float = DEFAULT_CHECK_PERIOD,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._refresher = refresher
        self._ttl = ttl
        self._check_period = check_period
        self._clock = clock
        self._entry: CacheEntry | None = None
        self._subscribers: list[StateListener] = []
        self._failure_listeners: list[FailureListener] = []
        self._expiry_task: asyncio.Task[None] | None = None
        self._refresh_tasks: set[asyncio.Task[None]] = set()

    @property
    def ttl(self) -> float:
        return self._ttl

    @property
    def entry(self) -> CacheEntry | None:
        return self._entry

    @property
    def is_running(self) -> bool:
        return self._expiry_task is not None and not self._expiry_task.done()

    # ------------------------------------------------------------------
    # Slot operations
    # ------------------------------------------------------------------

    def get(self) -> RemoteState | None:
        """Return the cached snapshot, or ``None`` when empty or stale."""
        entry = self._entry
        if entry is None or self._clock() >= entry.expires_at:
            return None
        return entry.state

    def set(self, state: RemoteState) -> None:
        """Store *state* and restart its TTL.

        Subscribers are notified only when the snapshot has an alarm
        section.
        """
        now = self._clock()
        self._entry = CacheEntry(state=state, stored_at=now, expires_at=now + self._ttl)
        if state.alarm:
            self._notify(state)

    def invalidate(self) -> None:
        """Drop the cached snapshot regardless of its TTL."""
        self._entry = None

    async def refresh(self) -> RemoteState:
        """Fetch a snapshot now and store it.

        Errors propagate to the caller; nothing is reported to failure
        listeners.
        """
        state = await self._refresher()
        self.set(state)
        return state

    def report_failure(self, exc: BaseException) -> None:
        """Empty the cache and signal every failure listener once."""
        _logger.error("Failed refreshing status. Waiting for recovery: %s", exc)
        _logger.debug("Refresh failure detail", exc_info=exc)
        self._entry = None
        for listener in list(self._failure_listeners):
            try:
                listener(exc)
            except Exception:
                _logger.debug("Failure listener raised", exc_info=True)

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a state-changed listener; returns its unsubscribe."""
        self._subscribers.append(listener)

        def _unsubscribe() -> None:
            with contextlib.suppress(ValueError):
                self._subscribers.remove(listener)

        return _unsubscribe

    def on_failure(self, listener: FailureListener) -> Callable[[], None]:
        """Register a refresh-failure listener; returns its unsubscribe."""
        self._failure_listeners.append(listener)

        def _unsubscribe() -> None:
            with contextlib.suppress(ValueError):
                self._failure_listeners.remove(listener)

        return _unsubscribe

    def _notify(self, state: RemoteState) -> None:
        for listener in list(self._subscribers):
            try:
                listener(state)
            except Exception:
                _logger.debug("State listener raised", exc_info=True)

    # ------------------------------------------------------------------
    # Expiry timer
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the periodic expiry check (idempotent)."""
        if self.is_running:
            return
        _logger.debug("Enabling auto refresh every %s seconds", self._ttl)
        self._expiry_task = asyncio.get_running_loop().create_task(self._expiry_loop())

    async def stop(self) -> None:
        """Cancel the expiry check and any in-flight refreshes."""
        tasks = [t for t in (self._expiry_task, *self._refresh_tasks) if t is not None]
        self._expiry_task = None
        self._refresh_tasks.clear()
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    def check_expiry(self) -> bool:
        """Expire a stale entry and start a background refresh.

        Returns ``True`` when the entry expired on this check.
        """
        entry = self._entry
        if entry is None or self._clock() < entry.expires_at:
            return False
        self._entry = None
        _logger.debug("Cached state expired after %.1fs", self._clock() - entry.stored_at)
        self._spawn_refresh()
        return True

    async def _expiry_loop(self) -> None:
        while True:
            await asyncio.sleep(self._check_period)
            self.check_expiry()

    def _spawn_refresh(self) -> asyncio.Task[None]:
        # In-flight refreshes are not deduplicated.
        task = asyncio.get_running_loop().create_task(self._background_refresh())
        self._refresh_tasks.add(task)
        task.add_done_callback(self._refresh_tasks.discard)
        return task

    async def _background_refresh(self) -> None:
        try:
            await self.refresh()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            self.report_failure(exc)
