"""Internal constants shared across the library."""

BASE_URL = "https://ids.trintel.co.za/Inhep-Impl-1.0-SNAPSHOT"
API_HOST = "ids.trintel.co.za"
USER_AGENT = "SecureHome/152 CFNetwork/1496.0.1 Darwin/23.5.0"

LOGIN_ENDPOINT = "/auth/login"
SYNC_INFO_ENDPOINT = "/device/getSyncInfo"
STATE_INFO_ENDPOINT = "/device/getStateInfo"
USER_PREFERENCES_ENDPOINT = "/user/getUserPreferences"
ARM_SITE_ENDPOINT = "/device/armSite"

#: Value of the ``status`` field on successful auth/device responses.
STATUS_SUCCESS = "SUCCESS"

#: Headers sent with every form POST, mirroring the iOS app.
DEFAULT_HEADERS: dict[str, str] = {
    "Host": API_HOST,
    "accept": "application/json, text/plain, */*",
    "content-type": "application/x-www-form-urlencoded",
    "user-agent": USER_AGENT,
    "accept-language": "en-GB,en;q=0.9",
}

# ------------------------------------------------------------------
# Cache / recovery defaults
# ------------------------------------------------------------------

DEFAULT_CACHE_TTL: float = 5.0
DEFAULT_CHECK_PERIOD: float = 1.0
DEFAULT_RECOVERY_BACKOFF_BASE: float = 5.0
DEFAULT_RECOVERY_BACKOFF_CAP: float = 300.0
DEFAULT_RECOVERY_MAX_ATTEMPTS: int = 10
