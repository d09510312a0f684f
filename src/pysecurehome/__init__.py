"""pysecurehome - Async Python client for the ADT Secure Home alarm API."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pysecurehome")
except PackageNotFoundError:
    __version__ = "0+local"
from pysecurehome.cache import CacheEntry, StateCache
from pysecurehome.client import SecureHomeClient
from pysecurehome.commands import CommandDispatcher
from pysecurehome.config import DeviceProfile, SecureHomeConfig
from pysecurehome.exceptions import (
    ApiError,
    AuthError,
    CommandError,
    FetchError,
    PreconditionError,
    PreferencesError,
    SecureHomeConfigError,
    SecureHomeError,
    StateInfoError,
    SyncError,
    TransportError,
)
from pysecurehome.fetcher import StateFetcher
from pysecurehome.models import (
    AlarmState,
    ArmingState,
    ArmSiteResponse,
    ContactSensor,
    FaultStatus,
    RemoteState,
    StateInfo,
    SyncInfo,
    UserPreferences,
)
from pysecurehome.recovery import RecoveryController
from pysecurehome.session import Session, SessionManager

__all__ = [
    "__version__",
    "AlarmState",
    "ApiError",
    "ArmSiteResponse",
    "ArmingState",
    "AuthError",
    "CacheEntry",
    "CommandDispatcher",
    "CommandError",
    "ContactSensor",
    "DeviceProfile",
    "FaultStatus",
    "FetchError",
    "PreconditionError",
    "PreferencesError",
    "RecoveryController",
    "RemoteState",
    "SecureHomeClient",
    "SecureHomeConfig",
    "SecureHomeConfigError",
    "SecureHomeError",
    "Session",
    "SessionManager",
    "StateCache",
    "StateFetcher",
    "StateInfo",
    "StateInfoError",
    "SyncError",
    "SyncInfo",
    "TransportError",
    "UserPreferences",
]
