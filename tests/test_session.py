from __future__ import annotations

import pytest
from fakes import FakeBackend

from pysecurehome._api.login import build_login_params
from pysecurehome.config import SecureHomeConfig
from pysecurehome.exceptions import AuthError, SyncError
from pysecurehome.session import SessionManager


@pytest.mark.asyncio
async def test_login_stores_token_and_resolves_site(config: SecureHomeConfig, backend: FakeBackend) -> None:
    sessions = SessionManager(config, backend)

    session = await sessions.login()

    assert session.token == "T1"
    assert session.user_id == "7"
    assert session.site_id == 42
    assert sessions.site_id == 42
    assert [name for name, _ in backend.calls] == ["/auth/login", "/device/getSyncInfo"]
    sync_payload = backend.payloads("/device/getSyncInfo")[0]
    assert sync_payload == {"token": "T1", "pkg": config.device.pkg, "imei": config.device.imei}


def test_login_params_carry_credentials_and_identity(config: SecureHomeConfig) -> None:
    params = build_login_params(config)
    assert params["email"] == "user@example.com"
    assert params["password"] == "secret"
    assert params["_appPkg"] == params["pkg"]
    assert params["imei"] == config.device.imei


@pytest.mark.asyncio
async def test_login_without_success_marker_raises_auth_error(config: SecureHomeConfig) -> None:
    backend = FakeBackend(login_status="FAILED")
    sessions = SessionManager(config, backend)

    with pytest.raises(AuthError, match="Login failed"):
        await sessions.login()

    assert sessions.session is None
    assert backend.count("/device/getSyncInfo") == 0


@pytest.mark.asyncio
async def test_login_transport_failure_raises_auth_error(config: SecureHomeConfig) -> None:
    backend = FakeBackend(fail_endpoints={"/auth/login"})
    sessions = SessionManager(config, backend)

    with pytest.raises(AuthError):
        await sessions.login()
    assert sessions.session is None


@pytest.mark.asyncio
async def test_login_with_empty_master_sites_keeps_token_without_site(config: SecureHomeConfig) -> None:
    backend = FakeBackend(master_sites=[])
    sessions = SessionManager(config, backend)

    with pytest.raises(AuthError) as exc_info:
        await sessions.login()

    assert isinstance(exc_info.value.__cause__, SyncError)
    assert sessions.session is not None
    assert sessions.session.token == "T1"
    assert sessions.site_id is None


@pytest.mark.asyncio
async def test_refresh_site_with_empty_master_sites_leaves_site_unchanged(
    config: SecureHomeConfig, backend: FakeBackend
) -> None:
    sessions = SessionManager(config, backend)
    await sessions.login()

    backend.master_sites = []
    with pytest.raises(SyncError):
        await sessions.refresh_site()

    assert sessions.site_id == 42


@pytest.mark.asyncio
async def test_refresh_site_picks_first_master_site(config: SecureHomeConfig, backend: FakeBackend) -> None:
    sessions = SessionManager(config, backend)
    await sessions.login()

    backend.master_sites = [{"id": 99}, {"id": 100}]
    info = await sessions.refresh_site()

    assert [site.id for site in info.master_sites] == [99, 100]
    assert sessions.site_id == 99


@pytest.mark.asyncio
async def test_relogin_replaces_token_and_keeps_site(config: SecureHomeConfig, backend: FakeBackend) -> None:
    sessions = SessionManager(config, backend)
    await sessions.login()

    backend.token = "T2"
    session = await sessions.login()

    assert session.token == "T2"
    assert session.site_id == 42


def test_require_without_login_raises(config: SecureHomeConfig, backend: FakeBackend) -> None:
    sessions = SessionManager(config, backend)
    with pytest.raises(AuthError, match="Not logged in"):
        sessions.require()


@pytest.mark.asyncio
async def test_invalidate_drops_session(config: SecureHomeConfig, backend: FakeBackend) -> None:
    sessions = SessionManager(config, backend)
    await sessions.login()

    sessions.invalidate()

    assert sessions.session is None
    assert sessions.site_id is None


@pytest.mark.asyncio
async def test_login_without_user_id_raises_auth_error(config: SecureHomeConfig) -> None:
    backend = FakeBackend(user_id=None)
    sessions = SessionManager(config, backend)

    with pytest.raises(AuthError, match="user id"):
        await sessions.login()
    assert sessions.session is None


@pytest.mark.asyncio
async def test_relogin_with_failed_site_resolution_drops_old_site(
    config: SecureHomeConfig, backend: FakeBackend
) -> None:
    sessions = SessionManager(config, backend)
    await sessions.login()

    backend.token = "T2"
    backend.master_sites = []
    with pytest.raises(AuthError):
        await sessions.login()

    assert sessions.session is not None
    assert sessions.session.token == "T2"
    assert sessions.site_id is None
