"""Arm / disarm commands reconciled against the cached panel state."""

from __future__ import annotations

import logging

from pysecurehome._api.arm import arm_site as arm_site_api
from pysecurehome._transport import Transport
from pysecurehome.cache import StateCache
from pysecurehome.config import SecureHomeConfig
from pysecurehome.exceptions import AuthError, CommandError, PreconditionError, SecureHomeError
from pysecurehome.fetcher import StateFetcher
from pysecurehome.models.responses import ArmSiteResponse
from pysecurehome.models.state import ArmingState
from pysecurehome.session import Session, SessionManager

_logger = logging.getLogger(__name__)

REQUESTABLE_STATES: frozenset[ArmingState] = frozenset(
    {ArmingState.DISARMED, ArmingState.ARMED_AWAY, ArmingState.ARMED_STAY}
)


class CommandDispatcher:
    """Issues arm/disarm requests and resynchronizes the cache afterwards."""

    def __init__(
        self,
        config: SecureHomeConfig,
        sessions: SessionManager,
        fetcher: StateFetcher,
        cache: StateCache,
        transport: Transport,
    ) -> None:
        self._config = config
        self._sessions = sessions
        self._fetcher = fetcher
        self._cache = cache
        self._transport = transport
        self._target_state: ArmingState | None = None

    @property
    def target_state(self) -> ArmingState | None:
        """The arming state currently being requested, if any."""
        return self._target_state

    async def request_arming_state(self, desired: ArmingState) -> SecureHomeError | None:
        """Move the panel to *desired*.

        Returns ``None`` when the panel already is in that state or the
        command was accepted. A rejected request is returned, not raised:
        :class:`PreconditionError` when it was refused locally and
        :class:`CommandError` when the remote call failed.

        Raises
        ------
        ValueError
            If *desired* is not a state a user can request.
        """
        desired = ArmingState(desired)
        if desired not in REQUESTABLE_STATES:
            raise ValueError(f"{desired.name} cannot be requested")

        self._target_state = desired
        try:
            current = self._cache.get()
            if current is not None and current.alarm:
                if current.alarm.arming_state == desired:
                    _logger.debug("No status change needed")
                    return None
                if current.alarm.not_ready_to_arm:
                    _logger.error("Can't arm system. System is not ready.")
                    return PreconditionError("Can't arm system. System is not ready.")

            _logger.info("Setting status to %s", desired.name)
            if desired == ArmingState.DISARMED:
                await self.disarm_site()
            else:
                await self.arm_site(stay=desired == ArmingState.ARMED_STAY)
            return None
        except (PreconditionError, CommandError) as exc:
            _logger.error("Setting status to %s failed: %s", desired.name, exc)
            return exc
        except Exception as exc:
            _logger.error("Setting status to %s failed: %r", desired.name, exc)
            error = CommandError(f"Setting status to {desired.name} failed: {exc}")
            error.__cause__ = exc
            return error
        finally:
            self._target_state = None

    async def arm_site(self, *, stay: bool = False) -> ArmSiteResponse:
        """Arm the site (away, or stay with the partition's stay profile)."""
        session = self._require_site()
        partition_id, stay_profile_id = self._resolve_partition()
        if stay and (partition_id is None or stay_profile_id is None):
            raise PreconditionError("Stay arming needs a partition and stay profile; none configured or reported")

        result = await arm_site_api(
            self._config,
            session,
            self._transport,
            arm=True,
            partition_id=partition_id,
            stay_profile_id=stay_profile_id if stay else None,
        )
        await self._resync()
        return result

    async def disarm_site(self) -> ArmSiteResponse:
        """Disarm the site with the configured keypad PIN."""
        pin = self._config.keypad_pin
        if not pin:
            raise PreconditionError("Can't disarm system. No keypad PIN configured.")
        session = self._require_site()

        result = await arm_site_api(self._config, session, self._transport, arm=False, pin=pin)
        await self._resync()
        return result

    def _require_site(self) -> Session:
        session = self._sessions.require()
        if session.site_id is None:
            raise AuthError("No operable site resolved for this session")
        return session

    def _resolve_partition(self) -> tuple[int | None, int | None]:
        partition_id = self._config.partition_id
        stay_profile_id = self._config.stay_profile_id
        current = self._cache.get()
        if current is not None and current.alarm is not None:
            if partition_id is None:
                partition_id = current.alarm.partition_id
            if stay_profile_id is None:
                stay_profile_id = current.alarm.stay_profile_id
        return partition_id, stay_profile_id

    async def _resync(self) -> None:
        """Refresh site and panel state right after a command."""
        try:
            await self._fetcher.fetch_sync_info()
            await self._cache.refresh()
        except Exception as exc:
            self._cache.report_failure(exc)
