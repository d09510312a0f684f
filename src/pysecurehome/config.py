"""Client configuration for pysecurehome."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from typing import Any

from pysecurehome._constants import (
    BASE_URL,
    DEFAULT_CACHE_TTL,
    DEFAULT_CHECK_PERIOD,
    DEFAULT_RECOVERY_BACKOFF_BASE,
    DEFAULT_RECOVERY_BACKOFF_CAP,
    DEFAULT_RECOVERY_MAX_ATTEMPTS,
)
from pysecurehome.exceptions import SecureHomeConfigError


def _env_int(value: str | None) -> int | None:
    if value is None or not value.strip():
        return None
    return int(value)


@dataclasses.dataclass(frozen=True)
class DeviceProfile:
    """Device identity fields sent with every request.

    The remote service attributes calls to a mobile client using these
    values. They are fixed per installation, not per call.
    """

    pkg: str = "com.adtsa.adtsa.chfd.mobile.ios.fadtsh"
    device_name: str = "iPhone"
    app_version_code: str = "415"
    imei: str = "11B9F5D6-5B09-4FCD-882A-4055B9B8AE16"
    device_os: str = "17.5"

    def identity_fields(self) -> dict[str, str]:
        """Fields identifying the app installation, in wire naming."""
        return {
            "pkg": self.pkg,
            "deviceName": self.device_name,
            "_appVersionCode": self.app_version_code,
            "_appPkg": self.pkg,
            "imei": self.imei,
            "deviceOS": self.device_os,
        }


@dataclasses.dataclass(frozen=True)
class SecureHomeConfig:
    """Client configuration.

    Parameters
    ----------
    username : str
        Account e-mail address.
    password : str
        Account password.
    name : str
        Display name of the security system accessory.
    cache_ttl : float
        Seconds a cached snapshot stays fresh before a refresh is
        triggered.
    check_period : float
        Interval of the expiry check in seconds.
    keypad_pin : str or None
        Keypad PIN. Required for disarming.
    partition_id : int or None
        Partition to stay-arm. Falls back to the partition reported by
        the panel.
    stay_profile_id : int or None
        Stay profile used for stay arming. Falls back to the profile
        reported by the panel.
    base_url : str
        API base URL.
    recovery_backoff_base : float
        First re-login delay after a refresh failure, in seconds.
    recovery_backoff_cap : float
        Upper bound for the re-login delay.
    recovery_max_attempts : int
        Consecutive failed re-logins after which recovery gives up.
        ``0`` retries forever.
    device : DeviceProfile
        Device identity fields.
    """

    username: str
    password: str
    name: str = "Security System"
    cache_ttl: float = DEFAULT_CACHE_TTL
    check_period: float = DEFAULT_CHECK_PERIOD
    keypad_pin: str | None = None
    partition_id: int | None = None
    stay_profile_id: int | None = None
    base_url: str = BASE_URL
    recovery_backoff_base: float = DEFAULT_RECOVERY_BACKOFF_BASE
    recovery_backoff_cap: float = DEFAULT_RECOVERY_BACKOFF_CAP
    recovery_max_attempts: int = DEFAULT_RECOVERY_MAX_ATTEMPTS
    device: DeviceProfile = dataclasses.field(default_factory=DeviceProfile)

    def __post_init__(self) -> None:
        if not self.username or not self.password:
            raise SecureHomeConfigError("Missing parameter. Both username and password are required.")
        if self.cache_ttl <= 0:
            raise SecureHomeConfigError(f"cache_ttl must be positive, got {self.cache_ttl}")
        if self.check_period <= 0:
            raise SecureHomeConfigError(f"check_period must be positive, got {self.check_period}")
        if self.recovery_backoff_base <= 0 or self.recovery_backoff_cap < self.recovery_backoff_base:
            raise SecureHomeConfigError("recovery backoff must satisfy 0 < base <= cap")
        if self.recovery_max_attempts < 0:
            raise SecureHomeConfigError("recovery_max_attempts must not be negative")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> SecureHomeConfig:
        """Build configuration from a host platform config block.

        Accepts the camelCase keys used by platform config files
        (``cacheTTL``, ``keypadPin``, ...) as well as field names.
        ``cacheTTL`` falls back to the default when empty or zero.
        """
        aliases = {
            "cacheTTL": "cache_ttl",
            "checkPeriod": "check_period",
            "keypadPin": "keypad_pin",
            "partitionId": "partition_id",
            "stayProfileId": "stay_profile_id",
            "baseUrl": "base_url",
        }
        field_names = {f.name for f in dataclasses.fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            field_name = aliases.get(key, key)
            if field_name in field_names:
                kwargs[field_name] = value

        if not kwargs.get("cache_ttl"):
            kwargs.pop("cache_ttl", None)
        if isinstance(kwargs.get("device"), Mapping):
            kwargs["device"] = DeviceProfile(**kwargs["device"])
        if kwargs.get("keypad_pin") is not None:
            kwargs["keypad_pin"] = str(kwargs["keypad_pin"])

        kwargs.setdefault("username", "")
        kwargs.setdefault("password", "")
        return cls(**kwargs)

    @classmethod
    def from_env(cls, **overrides: Any) -> SecureHomeConfig:
        """Create configuration from environment variables.

        Reads ``SECUREHOME_USERNAME``, ``SECUREHOME_PASSWORD`` and the
        optional ``SECUREHOME_*`` variables. Explicit keyword arguments
        override environment values.
        """
        env = os.environ

        device_kwargs: dict[str, str] = {}
        _ENV_DEVICE_MAP = {
            "SECUREHOME_PKG": "pkg",
            "SECUREHOME_DEVICE_NAME": "device_name",
            "SECUREHOME_APP_VERSION_CODE": "app_version_code",
            "SECUREHOME_IMEI": "imei",
            "SECUREHOME_DEVICE_OS": "device_os",
        }
        for env_key, field_name in _ENV_DEVICE_MAP.items():
            val = env.get(env_key)
            if val is not None:
                device_kwargs[field_name] = val

        device_overrides = overrides.pop("device", None)
        if isinstance(device_overrides, dict):
            device_kwargs.update(device_overrides)
        elif isinstance(device_overrides, DeviceProfile):
            device_kwargs = dataclasses.asdict(device_overrides)

        config_kwargs: dict[str, Any] = {"device": DeviceProfile(**device_kwargs)}

        _ENV_CONFIG_MAP = {
            "SECUREHOME_USERNAME": "username",
            "SECUREHOME_PASSWORD": "password",
            "SECUREHOME_NAME": "name",
            "SECUREHOME_KEYPAD_PIN": "keypad_pin",
            "SECUREHOME_BASE_URL": "base_url",
        }
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        ttl_env = env.get("SECUREHOME_CACHE_TTL")
        if ttl_env is not None and "cache_ttl" not in overrides:
            config_kwargs["cache_ttl"] = float(ttl_env)

        for env_key, field_name in (
            ("SECUREHOME_PARTITION_ID", "partition_id"),
            ("SECUREHOME_STAY_PROFILE_ID", "stay_profile_id"),
        ):
            parsed = _env_int(env.get(env_key))
            if parsed is not None and field_name not in overrides:
                config_kwargs[field_name] = parsed

        config_kwargs.update(overrides)
        config_kwargs.setdefault("username", "")
        config_kwargs.setdefault("password", "")

        return cls(**config_kwargs)
