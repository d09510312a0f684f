from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import aiohttp
import pytest

from pysecurehome._transport import HttpTransport, _encode_fields
from pysecurehome.config import SecureHomeConfig
from pysecurehome.exceptions import TransportError


@dataclass
class _FakeResponse:
    status: int
    body: str
    text_error: Exception | None = None

    async def text(self) -> str:
        if self.text_error is not None:
            raise self.text_error
        return self.body

    async def __aenter__(self) -> _FakeResponse:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        return None


@dataclass
class _FakeHttpSession:
    status: int = 200
    body: str = '{"status": "SUCCESS"}'
    error: Exception | None = None
    text_error: Exception | None = None
    requests: list[tuple[str, str, dict[str, Any]]] = field(default_factory=list)

    def request(self, method: str, url: str, **kwargs: Any) -> _FakeResponse:
        self.requests.append((method, url, kwargs))
        if self.error is not None:
            raise self.error
        return _FakeResponse(self.status, self.body, self.text_error)


def test_encode_fields_drops_none_and_lowercases_booleans() -> None:
    encoded = _encode_fields({"arm": True, "pin": None, "siteId": 42, "stay": False})
    assert encoded == {"arm": "true", "siteId": "42", "stay": "false"}


@pytest.mark.asyncio
async def test_post_form_sends_form_fields_and_headers(config: SecureHomeConfig) -> None:
    http = _FakeHttpSession()
    transport = HttpTransport(config, http)  # type: ignore[arg-type]

    body = await transport.post_form("/device/getSyncInfo", {"token": "T1", "arm": False})

    assert body == {"status": "SUCCESS"}
    method, url, kwargs = http.requests[0]
    assert method == "POST"
    assert url == f"{config.base_url}/device/getSyncInfo"
    assert kwargs["data"] == {"token": "T1", "arm": "false"}
    assert kwargs["headers"]["content-type"] == "application/x-www-form-urlencoded"


@pytest.mark.asyncio
async def test_get_json_sends_query_params(config: SecureHomeConfig) -> None:
    http = _FakeHttpSession()
    transport = HttpTransport(config, http)  # type: ignore[arg-type]

    await transport.get_json("/auth/login", {"email": "a@b", "password": "pw"})

    method, _, kwargs = http.requests[0]
    assert method == "GET"
    assert kwargs["params"] == {"email": "a@b", "password": "pw"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("status", "body", "message"),
    [
        (500, "oops", "HTTP 500"),
        (200, "<html>", "Invalid JSON"),
        (200, "[1, 2]", "Expected a JSON object"),
    ],
)
async def test_bad_responses_raise_transport_error(
    config: SecureHomeConfig, status: int, body: str, message: str
) -> None:
    transport = HttpTransport(config, _FakeHttpSession(status=status, body=body))  # type: ignore[arg-type]

    with pytest.raises(TransportError, match=message) as exc_info:
        await transport.post_form("/device/getStateInfo", {})
    assert exc_info.value.endpoint == "/device/getStateInfo"


@pytest.mark.asyncio
async def test_client_error_raises_transport_error(config: SecureHomeConfig) -> None:
    http = _FakeHttpSession(error=aiohttp.ClientConnectionError("refused"))
    transport = HttpTransport(config, http)  # type: ignore[arg-type]

    with pytest.raises(TransportError, match="failed"):
        await transport.get_json("/auth/login", {})


@pytest.mark.asyncio
async def test_timeout_raises_transport_error(config: SecureHomeConfig) -> None:
    http = _FakeHttpSession(error=TimeoutError())
    transport = HttpTransport(config, http)  # type: ignore[arg-type]

    with pytest.raises(TransportError, match="TimeoutError") as exc_info:
        await transport.post_form("/device/armSite", {"arm": True})
    assert isinstance(exc_info.value.__cause__, TimeoutError)


@pytest.mark.asyncio
async def test_undecodable_body_raises_transport_error(config: SecureHomeConfig) -> None:
    http = _FakeHttpSession(text_error=UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte"))
    transport = HttpTransport(config, http)  # type: ignore[arg-type]

    with pytest.raises(TransportError, match="Undecodable"):
        await transport.get_json("/auth/login", {})
