"""Sync info endpoint.

Endpoint:
  - /device/getSyncInfo
"""

from __future__ import annotations

from pysecurehome._api._common import parse_model, post_form, require_status_success
from pysecurehome._constants import SYNC_INFO_ENDPOINT
from pysecurehome._transport import Transport
from pysecurehome.config import SecureHomeConfig
from pysecurehome.exceptions import SyncError
from pysecurehome.models.responses import SyncInfo


async def fetch_sync_info(config: SecureHomeConfig, token: str, transport: Transport) -> SyncInfo:
    """Fetch the account's site list.

    Raises
    ------
    SyncError
        On a failed call, a non-success status or an empty ``masterSites``.
    """
    response = await post_form(
        endpoint=SYNC_INFO_ENDPOINT,
        transport=transport,
        data={
            "token": token,
            "pkg": config.device.pkg,
            "imei": config.device.imei,
        },
        error_cls=SyncError,
    )
    require_status_success(response, endpoint=SYNC_INFO_ENDPOINT, error_cls=SyncError)
    info = parse_model(SyncInfo, response, endpoint=SYNC_INFO_ENDPOINT, error_cls=SyncError)
    if not info.master_sites:
        raise SyncError(
            "Failed to retrieve sync info: masterSites is empty",
            status=info.status,
            endpoint=SYNC_INFO_ENDPOINT,
        )
    return info
