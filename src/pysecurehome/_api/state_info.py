"""State info endpoint.

Endpoint:
  - /device/getStateInfo
"""

from __future__ import annotations

from pysecurehome._api._common import parse_model, post_form, require_status_success
from pysecurehome._constants import STATE_INFO_ENDPOINT
from pysecurehome._transport import Transport
from pysecurehome.config import SecureHomeConfig
from pysecurehome.exceptions import StateInfoError
from pysecurehome.models.state import StateInfo


async def fetch_state_info(config: SecureHomeConfig, token: str, transport: Transport) -> StateInfo:
    """Fetch detailed panel state."""
    response = await post_form(
        endpoint=STATE_INFO_ENDPOINT,
        transport=transport,
        data={"token": token, **config.device.identity_fields()},
        error_cls=StateInfoError,
    )
    require_status_success(response, endpoint=STATE_INFO_ENDPOINT, error_cls=StateInfoError)
    return parse_model(StateInfo, response, endpoint=STATE_INFO_ENDPOINT, error_cls=StateInfoError)
