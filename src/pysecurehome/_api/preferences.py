"""User preferences endpoint.

Endpoint:
  - /user/getUserPreferences
"""

from __future__ import annotations

from pysecurehome._api._common import parse_model, post_form
from pysecurehome._constants import USER_PREFERENCES_ENDPOINT
from pysecurehome._transport import Transport
from pysecurehome.exceptions import PreferencesError
from pysecurehome.models.responses import UserPreferences
from pysecurehome.session import Session


async def fetch_user_preferences(session: Session, transport: Transport) -> UserPreferences:
    response = await post_form(
        endpoint=USER_PREFERENCES_ENDPOINT,
        transport=transport,
        data={
            "token": session.token,
            "userId": session.user_id,
            "siteId": session.site_id,
        },
        error_cls=PreferencesError,
    )
    prefs = parse_model(UserPreferences, response, endpoint=USER_PREFERENCES_ENDPOINT, error_cls=PreferencesError)
    if not prefs.success:
        raise PreferencesError(
            "Failed to retrieve user preferences",
            status=str(response.get("status", "")),
            endpoint=USER_PREFERENCES_ENDPOINT,
        )
    return prefs
