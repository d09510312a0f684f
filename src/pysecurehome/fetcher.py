"""Authenticated reads that assemble panel state snapshots."""

from __future__ import annotations

import logging

from pysecurehome._api.preferences import fetch_user_preferences as fetch_user_preferences_api
from pysecurehome._api.state_info import fetch_state_info as fetch_state_info_api
from pysecurehome._transport import Transport
from pysecurehome.config import SecureHomeConfig
from pysecurehome.exceptions import FetchError, SecureHomeError
from pysecurehome.models.responses import SyncInfo, UserPreferences
from pysecurehome.models.state import RemoteState, StateInfo
from pysecurehome.session import SessionManager

_logger = logging.getLogger(__name__)


class StateFetcher:
    """Read side of the API.

    Credentials always come from the :class:`SessionManager`; the fetcher
    never writes session fields itself.
    """

    def __init__(self, config: SecureHomeConfig, sessions: SessionManager, transport: Transport) -> None:
        self._config = config
        self._sessions = sessions
        self._transport = transport

    async def fetch_sync_info(self) -> SyncInfo:
        """Refresh ``site_id`` from the account's site list."""
        return await self._sessions.refresh_site()

    async def fetch_state_info(self) -> StateInfo:
        """Fetch the detailed panel state payload."""
        session = self._sessions.require()
        return await fetch_state_info_api(self._config, session.token, self._transport)

    async def fetch_user_preferences(self) -> UserPreferences:
        """Fetch account preferences (best effort for callers)."""
        session = self._sessions.require()
        return await fetch_user_preferences_api(session, self._transport)

    async def fetch_state(self) -> RemoteState:
        """Fetch a complete snapshot.

        Raises
        ------
        FetchError
            If any underlying call fails or the payload has no usable
            partition. The original failure is chained as ``__cause__``.
        """
        try:
            info = await self.fetch_state_info()
        except SecureHomeError as exc:
            raise FetchError(f"Failed to fetch panel state: {exc}") from exc

        partition = info.partition(self._config.partition_id)
        if partition is None:
            wanted = self._config.partition_id
            detail = f"partition {wanted} not reported" if wanted is not None else "no partitions reported"
            raise FetchError(f"Failed to fetch panel state: {detail}")

        state = RemoteState.from_state_info(info, partition)
        _logger.debug(
            "Fetched state arming=%s fault=%s sensors=%d",
            partition.arming_state.name,
            partition.fault_status.name,
            len(state.contact_sensors),
        )
        return state
