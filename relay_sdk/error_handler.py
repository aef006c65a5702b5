"""Normalize failed HTTP exchanges into a single error value."""

from __future__ import annotations

import json
import logging

from .errors import SERVER_ERROR, RelayRemoteError

_LOGGER = logging.getLogger(__name__)


def translate_error(
    status: int | None = None,
    body: str | None = None,
    *,
    cause: BaseException | None = None,
) -> RelayRemoteError:
    """Build the error delivered to the caller of a failed REST call.

    The ``error`` field of a JSON response body becomes the error value. A
    missing field, an unparsable body or a transport failure (``cause``)
    yields the generic ``"Server error"`` value. Never raises.

    Args:
        status: HTTP status, ``None`` when no response was received.
        body: Raw response body text.
        cause: Transport exception, logged for diagnostics.

    Returns:
        The normalized error.
    """
    if cause is not None:
        _LOGGER.warning("Request failed before a response arrived: %s", cause)

    error: object = SERVER_ERROR
    if body:
        try:
            data = json.loads(body)
        except ValueError:
            _LOGGER.debug("Error response body is not JSON (status=%s)", status)
        else:
            if isinstance(data, dict) and data.get("error") is not None:
                error = data["error"]

    return RelayRemoteError(error, status=status)
