"""Login endpoint.

Endpoint:
  - /auth/login (GET, credentials in the query string)
"""

from __future__ import annotations

import logging
from typing import Any

from pysecurehome._api._common import parse_model
from pysecurehome._constants import LOGIN_ENDPOINT, STATUS_SUCCESS
from pysecurehome._redact import redact_for_log
from pysecurehome._transport import Transport
from pysecurehome.config import SecureHomeConfig
from pysecurehome.exceptions import AuthError, TransportError
from pysecurehome.models.responses import LoginResponse

_logger = logging.getLogger(__name__)


def build_login_params(config: SecureHomeConfig) -> dict[str, str]:
    """Build the query parameters for the login endpoint."""
    device = config.device
    return {
        "email": config.username,
        "password": config.password,
        "pkg": device.pkg,
        "deviceName": device.device_name,
        "_appVersionCode": device.app_version_code,
        "_appPkg": device.pkg,
        "imei": device.imei,
        "deviceOS": device.device_os,
    }


def parse_login_response(response: dict[str, Any]) -> LoginResponse:
    """Validate a login response.

    Raises
    ------
    AuthError
        If the success marker, the token or the user id is missing.
    """
    parsed = parse_model(LoginResponse, response, endpoint=LOGIN_ENDPOINT, error_cls=AuthError)
    if parsed.status != STATUS_SUCCESS or not parsed.token:
        raise AuthError(
            f"Login failed: status={parsed.status or '<missing>'}",
            status=parsed.status,
            endpoint=LOGIN_ENDPOINT,
        )
    if parsed.user is None or parsed.user.id is None:
        raise AuthError("Login response missing user id", status=parsed.status, endpoint=LOGIN_ENDPOINT)
    return parsed


async def login(config: SecureHomeConfig, transport: Transport) -> LoginResponse:
    """Authenticate with the account credentials."""
    try:
        response = await transport.get_json(LOGIN_ENDPOINT, build_login_params(config))
    except TransportError as exc:
        raise AuthError(f"Login failed: {exc}", endpoint=LOGIN_ENDPOINT) from exc
    _logger.debug("Login response parsed=%s", redact_for_log(response))
    return parse_login_response(response)
