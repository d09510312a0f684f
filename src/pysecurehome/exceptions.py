"""Custom exception hierarchy for pysecurehome."""

from __future__ import annotations


class SecureHomeError(Exception):
    """Base exception for all pysecurehome errors."""


class SecureHomeConfigError(SecureHomeError):
    """Invalid or missing configuration."""


class TransportError(SecureHomeError):
    """HTTP-level failure (network, non-200, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class ApiError(SecureHomeError):
    """The API answered, but without its success marker."""

    def __init__(
        self,
        message: str,
        *,
        status: str = "",
        endpoint: str = "",
    ) -> None:
        self.status = status
        self.endpoint = endpoint
        super().__init__(message)


class AuthError(ApiError):
    """Login failed or no session is available."""


class SyncError(ApiError):
    """``getSyncInfo`` failed or returned no master site."""


class StateInfoError(ApiError):
    """``getStateInfo`` failed or returned a non-success status."""


class PreferencesError(ApiError):
    """``getUserPreferences`` failed."""


class CommandError(ApiError):
    """An arm or disarm call was rejected by the remote service."""


class FetchError(SecureHomeError):
    """A complete state snapshot could not be assembled.

    When a remote call failed, that failure is chained as ``__cause__``.
    """


class PreconditionError(SecureHomeError):
    """A command was rejected locally without contacting the panel.

    Raised (or returned) when the cached panel state makes the request
    invalid, e.g. arming while the panel reports not-ready with a fault,
    or disarming without a configured keypad PIN.
    """
