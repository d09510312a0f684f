"""Response models for the session, preference and command endpoints."""

from __future__ import annotations

from pydantic import Field

from pysecurehome.models._base import SecureHomeBaseModel


class LoginUser(SecureHomeBaseModel):
    """``user`` object of the login response."""

    id: int | str | None = None
    email: str | None = None


class LoginResponse(SecureHomeBaseModel):
    """``/auth/login`` response."""

    status: str = ""
    token: str | None = None
    user: LoginUser | None = None


class MasterSite(SecureHomeBaseModel):
    """A site the account may operate."""

    id: int
    name: str = ""


class SyncInfo(SecureHomeBaseModel):
    """``/device/getSyncInfo`` response."""

    status: str = ""
    master_sites: list[MasterSite] = Field(default_factory=list)


class UserPreferences(SecureHomeBaseModel):
    """``/user/getUserPreferences`` response.

    Only the success marker is interpreted; everything else is kept in
    ``raw``.
    """

    success: bool = False


class ArmSiteResponse(SecureHomeBaseModel):
    """``/device/armSite`` response."""

    success: bool = False
    message: str | None = None
