"""Session state and the component that owns it."""

from __future__ import annotations

import logging
import time

from pydantic import BaseModel, ConfigDict, Field

from pysecurehome._api.login import login as login_api
from pysecurehome._api.sync import fetch_sync_info
from pysecurehome._constants import LOGIN_ENDPOINT
from pysecurehome._transport import Transport
from pysecurehome.config import SecureHomeConfig
from pysecurehome.exceptions import AuthError, SecureHomeError, SyncError
from pysecurehome.models.responses import SyncInfo

_logger = logging.getLogger(__name__)


class Session(BaseModel):
    """Authenticated session.

    Parameters
    ----------
    token : str
        Token returned by the login endpoint.
    user_id : str
        The authenticated user's id.
    site_id : int or None
        The operable site, resolved from ``getSyncInfo`` after login.
    created_at : float
        Monotonic timestamp of the login that produced the token.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        str_strip_whitespace=True,
    )

    token: str
    user_id: str
    site_id: int | None = None
    created_at: float = Field(default_factory=time.monotonic)

    @property
    def age(self) -> float:
        """Seconds since the session was created."""
        return time.monotonic() - self.created_at


class SessionManager:
    """Single writer of the :class:`Session`.

    The session is never expired locally; a failed fetch is the signal
    that it must be re-established through :meth:`login`.
    """

    def __init__(self, config: SecureHomeConfig, transport: Transport) -> None:
        self._config = config
        self._transport = transport
        self._session: Session | None = None

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def site_id(self) -> int | None:
        return self._session.site_id if self._session is not None else None

    def require(self) -> Session:
        """Return the current session or raise :class:`AuthError`."""
        if self._session is None:
            raise AuthError("Not logged in")
        return self._session

    async def login(self) -> Session:
        """Log in and resolve the operable site.

        Also used for re-login after a failure. Any failure, including
        failing to resolve the site, surfaces as :class:`AuthError`.
        """
        try:
            response = await login_api(self._config, self._transport)
            if not response.token or response.user is None or response.user.id is None:
                raise AuthError("Login response missing token or user id", endpoint=LOGIN_ENDPOINT)
            # site_id stays unset until getSyncInfo resolves it for this token
            self._session = Session(token=response.token, user_id=str(response.user.id))
            await self.refresh_site()
        except AuthError:
            raise
        except SecureHomeError as exc:
            raise AuthError(f"Login failed: {exc}") from exc
        _logger.debug("Login successful for user=%s site=%s", self._session.user_id, self._session.site_id)
        return self._session

    async def refresh_site(self) -> SyncInfo:
        """Resolve ``site_id`` from the first master site.

        On :class:`SyncError` the current ``site_id`` is left as it was.
        """
        session = self.require()
        info = await fetch_sync_info(self._config, session.token, self._transport)
        if not info.master_sites:
            raise SyncError("masterSites is empty")
        self._session = session.model_copy(update={"site_id": info.master_sites[0].id})
        return info

    def invalidate(self) -> None:
        """Drop the session; the next call must log in again."""
        self._session = None
