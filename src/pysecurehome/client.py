"""High-level async client for the ADT Secure Home API."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import aiohttp

from pysecurehome._transport import HttpTransport, Transport
from pysecurehome.cache import StateCache
from pysecurehome.commands import CommandDispatcher
from pysecurehome.config import SecureHomeConfig
from pysecurehome.exceptions import SecureHomeError
from pysecurehome.fetcher import StateFetcher
from pysecurehome.models.responses import ArmSiteResponse, SyncInfo, UserPreferences
from pysecurehome.models.state import ArmingState, RemoteState, StateInfo
from pysecurehome.recovery import RecoveryController
from pysecurehome.session import Session, SessionManager

_logger = logging.getLogger(__name__)


class SecureHomeClient:
    """Async client keeping alarm state in sync with the remote panel.

    Usage::

        async with SecureHomeClient(config) as client:
            client.subscribe(on_state)
            state = await client.start()
            error = await client.request_arming_state(ArmingState.ARMED_AWAY)

    Passing ``transport`` bypasses the HTTP layer entirely (tests,
    alternative backends).
    """

    def __init__(
        self,
        config: SecureHomeConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
        on_state: Callable[[RemoteState], None] | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport: Transport | None = transport
        self._sessions: SessionManager | None = None
        self._fetcher: StateFetcher | None = None
        self._cache: StateCache | None = None
        self._commands: CommandDispatcher | None = None
        self._recovery: RecoveryController | None = None
        self._on_state = on_state
        self._failed = False
        _logger.debug(
            "Initializing with username=%s, cacheTTL=%s",
            config.username,
            config.cache_ttl,
        )

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> SecureHomeClient:
        self._open()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    def _open(self) -> None:
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = HttpTransport(self._config, self._http_session)
        if self._sessions is not None:
            return

        self._sessions = SessionManager(self._config, self._transport)
        self._fetcher = StateFetcher(self._config, self._sessions, self._transport)
        self._cache = StateCache(
            self._fetcher.fetch_state,
            ttl=self._config.cache_ttl,
            check_period=self._config.check_period,
        )
        self._commands = CommandDispatcher(
            self._config,
            self._sessions,
            self._fetcher,
            self._cache,
            self._transport,
        )
        self._recovery = RecoveryController(self._config, self._sessions, self._cache)
        self._recovery.attach()
        if self._on_state is not None:
            self._cache.subscribe(self._on_state)

    async def close(self) -> None:
        """Stop timers and background tasks and release the HTTP session."""
        if self._recovery is not None:
            await self._recovery.stop()
        if self._cache is not None:
            await self._cache.stop()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None

    # ------------------------------------------------------------------
    # Initialization
    # ------------------------------------------------------------------

    @property
    def failed(self) -> bool:
        """Whether :meth:`start` failed; the instance is then unusable."""
        return self._failed

    async def start(self) -> RemoteState:
        """Log in, seed the cache and start the refresh cycle.

        Returns the initial snapshot. A failure here is terminal for the
        instance: it is raised, :attr:`failed` becomes ``True`` and no
        retry is scheduled.
        """
        if self._failed:
            raise SecureHomeError("Client failed to start; create a new instance")
        self._open()
        sessions, cache = self._require_sessions(), self._require_cache()
        _logger.info("Initializing status...")
        try:
            await sessions.login()
            state = await cache.refresh()
        except SecureHomeError:
            self._failed = True
            _logger.exception("Initialization failed")
            raise
        cache.start()
        _logger.info("Secure Home client initialized")
        return state

    # ------------------------------------------------------------------
    # Component access
    # ------------------------------------------------------------------

    def _require_sessions(self) -> SessionManager:
        if self._sessions is None:
            raise SecureHomeError("Client not initialized. Use 'async with SecureHomeClient(...) as client:'")
        return self._sessions

    def _require_fetcher(self) -> StateFetcher:
        if self._fetcher is None:
            raise SecureHomeError("Client not initialized. Use 'async with SecureHomeClient(...) as client:'")
        return self._fetcher

    def _require_cache(self) -> StateCache:
        if self._cache is None:
            raise SecureHomeError("Client not initialized. Use 'async with SecureHomeClient(...) as client:'")
        return self._cache

    def _require_commands(self) -> CommandDispatcher:
        if self._commands is None:
            raise SecureHomeError("Client not initialized. Use 'async with SecureHomeClient(...) as client:'")
        return self._commands

    @property
    def session(self) -> Session | None:
        return self._sessions.session if self._sessions is not None else None

    @property
    def cache(self) -> StateCache:
        return self._require_cache()

    @property
    def recovery(self) -> RecoveryController:
        if self._recovery is None:
            raise SecureHomeError("Client not initialized. Use 'async with SecureHomeClient(...) as client:'")
        return self._recovery

    @property
    def target_state(self) -> ArmingState | None:
        return self._commands.target_state if self._commands is not None else None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def get_state(self) -> RemoteState | None:
        """Return the cached snapshot, or ``None`` while none is fresh."""
        return self._require_cache().get()

    def subscribe(self, listener: Callable[[RemoteState], None]) -> Callable[[], None]:
        """Receive every new snapshot that carries an alarm section."""
        return self._require_cache().subscribe(listener)

    async def request_arming_state(self, desired: ArmingState) -> SecureHomeError | None:
        """Request an arming state; see :meth:`CommandDispatcher.request_arming_state`."""
        return await self._require_commands().request_arming_state(desired)

    # ------------------------------------------------------------------
    # Session and reads
    # ------------------------------------------------------------------

    async def login(self) -> Session:
        return await self._require_sessions().login()

    async def fetch_state(self) -> RemoteState:
        return await self._require_fetcher().fetch_state()

    async def fetch_sync_info(self) -> SyncInfo:
        return await self._require_fetcher().fetch_sync_info()

    async def fetch_state_info(self) -> StateInfo:
        return await self._require_fetcher().fetch_state_info()

    async def fetch_user_preferences(self) -> UserPreferences:
        return await self._require_fetcher().fetch_user_preferences()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def arm_site(self, *, stay: bool = False) -> ArmSiteResponse:
        """Arm the site directly, without the cached-state checks."""
        return await self._require_commands().arm_site(stay=stay)

    async def disarm_site(self) -> ArmSiteResponse:
        """Disarm the site directly, without the cached-state checks."""
        return await self._require_commands().disarm_site()
