"""Recovery from failed refreshes.

A failed refresh leaves the cache empty, so the TTL cycle stops on its
own. The controller restarts it: it logs in again after an exponential
backoff and re-seeds the cache.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable

from pysecurehome.cache import StateCache
from pysecurehome.config import SecureHomeConfig
from pysecurehome.session import SessionManager

_logger = logging.getLogger(__name__)

RecoveryListener = Callable[[BaseException], None]


class RecoveryController:
    """Listens for refresh failures and re-establishes the session."""

    def __init__(
        self,
        config: SecureHomeConfig,
        sessions: SessionManager,
        cache: StateCache,
    ) -> None:
        self._sessions = sessions
        self._cache = cache
        self._backoff_base = config.recovery_backoff_base
        self._backoff_cap = config.recovery_backoff_cap
        self._max_attempts = config.recovery_max_attempts
        self._consecutive_failures = 0
        self._gave_up = False
        self._listeners: list[RecoveryListener] = []
        self._task: asyncio.Task[None] | None = None
        self._unsubscribe: Callable[[], None] | None = None

    @property
    def consecutive_failures(self) -> int:
        return self._consecutive_failures

    @property
    def gave_up(self) -> bool:
        """Whether retrying stopped after ``recovery_max_attempts`` failures."""
        return self._gave_up

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def attach(self) -> None:
        """Subscribe to the cache's failure signal."""
        if self._unsubscribe is None:
            self._unsubscribe = self._cache.on_failure(self.handle_failure)

    def add_listener(self, listener: RecoveryListener) -> Callable[[], None]:
        """Register a recovery-signal listener; returns its unsubscribe."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            with contextlib.suppress(ValueError):
                self._listeners.remove(listener)

        return _unsubscribe

    def handle_failure(self, exc: BaseException) -> None:
        """Invalidate the cache, emit one recovery signal, schedule re-login."""
        _logger.warning("Refresh failed, attempting recovery: %s", exc)
        self._cache.invalidate()
        for listener in list(self._listeners):
            try:
                listener(exc)
            except Exception:
                _logger.debug("Recovery listener raised", exc_info=True)
        self._schedule()

    def next_delay(self) -> float:
        """Backoff before the next re-login attempt."""
        return min(self._backoff_base * (2**self._consecutive_failures), self._backoff_cap)

    async def stop(self) -> None:
        """Detach from the cache and cancel any pending re-login."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        task = self._task
        self._task = None
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

    def _schedule(self) -> None:
        if self.pending:
            return
        if self._max_attempts and self._consecutive_failures >= self._max_attempts:
            if not self._gave_up:
                _logger.error(
                    "Giving up recovery after %d failed attempts; restart required",
                    self._consecutive_failures,
                )
                self._gave_up = True
                self._sessions.invalidate()
            return
        delay = self.next_delay()
        _logger.info("Scheduling re-login in %.0fs (attempt %d)", delay, self._consecutive_failures + 1)
        self._task = asyncio.get_running_loop().create_task(self._recover_after(delay))

    async def _recover_after(self, delay: float) -> None:
        await asyncio.sleep(delay)
        try:
            await self._sessions.login()
            await self._cache.refresh()
        except Exception as exc:
            self._consecutive_failures += 1
            _logger.warning("Recovery attempt %d failed: %r", self._consecutive_failures, exc)
            self._task = None
            self._schedule()
            return
        _logger.info("Recovered after %d failed attempt(s)", self._consecutive_failures)
        self._consecutive_failures = 0
        self._task = None
