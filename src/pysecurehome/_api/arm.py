"""Arm / disarm endpoint.

Endpoint:
  - /device/armSite

Arming and disarming are the same endpoint with ``arm`` set to
``true`` or ``false``. Disarming carries the keypad PIN; stay arming
carries the partition and its stay profile.
"""

from __future__ import annotations

import logging
from typing import Any

from pysecurehome._api._common import parse_model, post_form
from pysecurehome._constants import ARM_SITE_ENDPOINT
from pysecurehome._transport import Transport
from pysecurehome.config import SecureHomeConfig
from pysecurehome.exceptions import CommandError
from pysecurehome.models.responses import ArmSiteResponse
from pysecurehome.session import Session

_logger = logging.getLogger(__name__)


def build_arm_payload(
    config: SecureHomeConfig,
    session: Session,
    *,
    arm: bool,
    pin: str | None = None,
    partition_id: int | None = None,
    stay_profile_id: int | None = None,
) -> dict[str, Any]:
    """Build the form payload for ``/device/armSite``.

    ``clientImei`` and ``imei`` both come from the configured device
    profile on arm and disarm.
    """
    payload: dict[str, Any] = {
        "token": session.token,
        "userId": session.user_id,
        "siteId": session.site_id,
        "clientImei": config.device.imei,
        "arm": arm,
    }
    if pin is not None:
        payload["pin"] = pin
    if stay_profile_id is not None:
        payload["stayProfileId"] = stay_profile_id
    if partition_id is not None:
        payload["partitionId"] = partition_id
    payload.update(config.device.identity_fields())
    return payload


async def arm_site(
    config: SecureHomeConfig,
    session: Session,
    transport: Transport,
    *,
    arm: bool,
    pin: str | None = None,
    partition_id: int | None = None,
    stay_profile_id: int | None = None,
) -> ArmSiteResponse:
    """Send an arm or disarm request.

    Raises
    ------
    CommandError
        If the call fails or the response has no ``success`` marker.
    """
    action = "Arm" if arm else "Disarm"
    payload = build_arm_payload(
        config,
        session,
        arm=arm,
        pin=pin,
        partition_id=partition_id,
        stay_profile_id=stay_profile_id,
    )
    response = await post_form(
        endpoint=ARM_SITE_ENDPOINT,
        transport=transport,
        data=payload,
        error_cls=CommandError,
    )
    result = parse_model(ArmSiteResponse, response, endpoint=ARM_SITE_ENDPOINT, error_cls=CommandError)
    if not result.success:
        raise CommandError(
            f"{action} operation failed: {result.message or 'no success marker'}",
            status=str(response.get("status", "")),
            endpoint=ARM_SITE_ENDPOINT,
        )
    _logger.debug("%s operation accepted for site=%s", action, session.site_id)
    return result
