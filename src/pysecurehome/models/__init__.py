"""Data models for alarm service API responses."""

from pysecurehome.models._base import SecureHomeBaseModel, SecureHomeEnum
from pysecurehome.models.responses import (
    ArmSiteResponse,
    LoginResponse,
    LoginUser,
    MasterSite,
    SyncInfo,
    UserPreferences,
)
from pysecurehome.models.state import (
    AlarmState,
    ArmingState,
    ContactSensor,
    FaultStatus,
    Partition,
    RemoteState,
    StateInfo,
    Zone,
)

__all__ = [
    "AlarmState",
    "ArmSiteResponse",
    "ArmingState",
    "ContactSensor",
    "FaultStatus",
    "LoginResponse",
    "LoginUser",
    "MasterSite",
    "Partition",
    "RemoteState",
    "SecureHomeBaseModel",
    "SecureHomeEnum",
    "StateInfo",
    "SyncInfo",
    "UserPreferences",
    "Zone",
]
