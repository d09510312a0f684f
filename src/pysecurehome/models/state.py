"""Panel state models.

``StateInfo`` mirrors the ``/device/getStateInfo`` payload. ``RemoteState``
is the immutable snapshot kept in the cache and handed to subscribers.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_serializer, field_validator

from pysecurehome.models._base import SecureHomeBaseModel, SecureHomeEnum

_OPEN_STATUSES = frozenset({"OPEN", "OPENED", "ACTIVE", "VIOLATED", "TRUE", "1"})


class ArmingState(SecureHomeEnum):
    """Panel arming mode."""

    UNKNOWN = -1
    DISARMED = 0
    ARMED_AWAY = 1
    ARMED_STAY = 2
    NOT_READY = 3


class FaultStatus(SecureHomeEnum):
    """Panel fault indicator."""

    UNKNOWN = -1
    OK = 0
    FAULT = 1


# ------------------------------------------------------------------
# getStateInfo payload
# ------------------------------------------------------------------


class Partition(SecureHomeBaseModel):
    """One partition of the panel."""

    id: int
    name: str = ""
    arming_state: ArmingState
    fault_status: FaultStatus = FaultStatus.UNKNOWN
    stay_profile_id: int | None = None


class Zone(SecureHomeBaseModel):
    """A zone (door/window contact) reported by the panel."""

    id: str
    name: str = ""
    open: bool = Field(default=False, validation_alias=AliasChoices("open", "isOpen", "status"))

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("open", mode="before")
    @classmethod
    def _coerce_open(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper() in _OPEN_STATUSES
        return value


class StateInfo(SecureHomeBaseModel):
    """``/device/getStateInfo`` response."""

    status: str = ""
    partitions: list[Partition] = Field(default_factory=list)
    zones: list[Zone] = Field(default_factory=list)

    def partition(self, partition_id: int | None = None) -> Partition | None:
        """Return the requested partition, or the first one."""
        if partition_id is not None:
            for partition in self.partitions:
                if partition.id == partition_id:
                    return partition
            return None
        return self.partitions[0] if self.partitions else None


# ------------------------------------------------------------------
# Cached snapshot
# ------------------------------------------------------------------


class AlarmState(BaseModel):
    """Alarm section of a snapshot."""

    model_config = ConfigDict(frozen=True)

    arming_state: ArmingState
    fault_status: FaultStatus = FaultStatus.UNKNOWN
    partition_id: int | None = None
    stay_profile_id: int | None = None
    name: str = ""

    @property
    def not_ready_to_arm(self) -> bool:
        """Whether the panel refuses arming (not ready with an open fault)."""
        return self.arming_state == ArmingState.NOT_READY and self.fault_status == FaultStatus.FAULT


class ContactSensor(BaseModel):
    """A single contact sensor."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    open: bool = False


class RemoteState(BaseModel):
    """Immutable snapshot of alarm and contact sensor state.

    ``alarm`` is ``None`` when the snapshot carries no alarm section;
    such snapshots are stored but never announced to subscribers.
    ``contact_sensors`` is a read-only mapping shared by every subscriber.
    """

    model_config = ConfigDict(frozen=True)

    alarm: AlarmState | None = None
    contact_sensors: Mapping[str, ContactSensor] = Field(default_factory=dict, validate_default=True)

    @field_validator("contact_sensors", mode="after")
    @classmethod
    def _freeze_sensors(cls, value: Mapping[str, ContactSensor]) -> Mapping[str, ContactSensor]:
        return MappingProxyType(dict(value))

    @field_serializer("contact_sensors")
    def _serialize_sensors(self, value: Mapping[str, ContactSensor]) -> dict[str, ContactSensor]:
        return dict(value)

    @classmethod
    def from_state_info(cls, info: StateInfo, partition: Partition | None) -> RemoteState:
        """Translate a ``getStateInfo`` payload into a snapshot."""
        alarm: AlarmState | None = None
        if partition is not None:
            alarm = AlarmState(
                arming_state=partition.arming_state,
                fault_status=partition.fault_status,
                partition_id=partition.id,
                stay_profile_id=partition.stay_profile_id,
                name=partition.name,
            )
        sensors = {zone.id: ContactSensor(id=zone.id, name=zone.name, open=zone.open) for zone in info.zones}
        return cls(alarm=alarm, contact_sensors=sensors)
