"""HTTP transport for the alarm service API."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from pysecurehome._constants import DEFAULT_HEADERS
from pysecurehome._redact import redact_for_log
from pysecurehome.config import SecureHomeConfig
from pysecurehome.exceptions import TransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Endpoint modules only depend on this protocol so tests can pass
    plain fakes instead of a live HTTP session.
    """

    async def get_json(self, endpoint: str, params: Mapping[str, Any]) -> dict[str, Any]:
        ...

    async def post_form(self, endpoint: str, data: Mapping[str, Any]) -> dict[str, Any]:
        ...


def _form_value(value: Any) -> str:
    """Encode a payload value the way the mobile app serialises it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _encode_fields(fields: Mapping[str, Any]) -> dict[str, str]:
    return {key: _form_value(value) for key, value in fields.items() if value is not None}


class HttpTransport:
    """aiohttp-backed transport returning decoded JSON objects."""

    def __init__(self, config: SecureHomeConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session

    async def get_json(self, endpoint: str, params: Mapping[str, Any]) -> dict[str, Any]:
        url = f"{self._config.base_url}{endpoint}"
        _logger.debug("GET %s params=%s", url, redact_for_log(params))
        return await self._request("GET", endpoint, url, params=_encode_fields(params))

    async def post_form(self, endpoint: str, data: Mapping[str, Any]) -> dict[str, Any]:
        url = f"{self._config.base_url}{endpoint}"
        _logger.debug("POST %s data=%s", url, redact_for_log(data))
        return await self._request(
            "POST",
            endpoint,
            url,
            data=_encode_fields(data),
            headers=DEFAULT_HEADERS,
        )

    async def _request(self, method: str, endpoint: str, url: str, **kwargs: Any) -> dict[str, Any]:
        try:
            async with self._http.request(method, url, **kwargs) as resp:
                text = await resp.text()
                if resp.status != 200:
                    raise TransportError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except TransportError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise TransportError(
                f"Request to {endpoint} failed: {exc!r}",
                endpoint=endpoint,
            ) from exc
        except UnicodeDecodeError as exc:
            raise TransportError(
                f"Undecodable response body from {endpoint}: {exc}",
                endpoint=endpoint,
            ) from exc

        try:
            body: Any = json.loads(text)
        except json.JSONDecodeError as exc:
            raise TransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                endpoint=endpoint,
            ) from exc

        if not isinstance(body, dict):
            raise TransportError(
                f"Expected a JSON object from {endpoint}, got {type(body).__name__}",
                endpoint=endpoint,
            )

        _logger.debug("Response from %s: %s", endpoint, redact_for_log(body))
        return body
