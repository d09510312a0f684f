"""Shared helpers for the endpoint modules.

This module centralizes the repeated patterns:
- wrapping transport failures in the endpoint's error type
- validating a response payload against its model
- checking the ``status`` success marker

It is internal to pysecurehome and may change at any time.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import ValidationError

from pysecurehome._constants import STATUS_SUCCESS
from pysecurehome._transport import Transport
from pysecurehome.exceptions import ApiError, TransportError
from pysecurehome.models._base import SecureHomeBaseModel

M = TypeVar("M", bound=SecureHomeBaseModel)


async def post_form(
    *,
    endpoint: str,
    transport: Transport,
    data: Mapping[str, Any],
    error_cls: type[ApiError],
) -> dict[str, Any]:
    """POST *data* and re-raise transport failures as *error_cls*."""
    try:
        return await transport.post_form(endpoint, data)
    except TransportError as exc:
        raise error_cls(
            f"{endpoint} failed: {exc}",
            endpoint=endpoint,
        ) from exc


def parse_model(
    model: type[M],
    response: dict[str, Any],
    *,
    endpoint: str,
    error_cls: type[ApiError],
) -> M:
    """Validate *response* as *model*; schema errors become *error_cls*."""
    try:
        return model.model_validate(response)
    except ValidationError as exc:
        raise error_cls(
            f"{endpoint} returned an unexpected payload: {exc.error_count()} validation error(s)",
            status=str(response.get("status", "")),
            endpoint=endpoint,
        ) from exc


def require_status_success(
    response: dict[str, Any],
    *,
    endpoint: str,
    error_cls: type[ApiError],
) -> None:
    status = str(response.get("status", ""))
    if status != STATUS_SUCCESS:
        raise error_cls(
            f"{endpoint} failed: status={status or '<missing>'} message={response.get('message', '')}",
            status=status,
            endpoint=endpoint,
        )
