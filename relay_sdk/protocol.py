"""URL, query and channel helpers shared by the REST and streaming paths.

Both transports build URLs with the same functions so a channel name computed
by a subscriber matches the one the backend publishes on.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

AUTH_HEADER = "Authorization"


def resolve_path(url_template: str, path_params: Mapping[str, Any] | None) -> str:
    """Substitute ``:name`` placeholders with path parameter values.

    A placeholder only matches when followed by ``/`` or the end of the
    string, so ``:id`` never matches the start of ``:idx``. Parameters whose
    value is ``None`` are left unsubstituted.

    Args:
        url_template: Route such as ``/widgets/:id/parts/:partId``.
        path_params: Values keyed by placeholder name.

    Returns:
        The resolved path.
    """
    url = url_template
    for key, value in (path_params or {}).items():
        if value is None:
            continue
        replacement = quote(str(value), safe="")
        url = re.sub(
            f":{re.escape(key)}(/|$)",
            lambda match: replacement + match.group(1),
            url,
        )
    return url


def encode_query_value(value: Any) -> str:
    """Encode one query value as text.

    Mappings and sequences use their compact JSON encoding; filters such as
    ``{"where": {"active": true}}`` rely on this.
    """
    if isinstance(value, (Mapping, list, tuple, bool)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def serialize_query(query_params: Mapping[str, Any] | None) -> str:
    """Serialize query parameters to ``?k=v&k2=v2``, or ``""`` when empty.

    ``None`` values are omitted. Keys keep their insertion order.
    """
    pairs = [
        f"{quote(str(key), safe='')}={quote(encode_query_value(value), safe='')}"
        for key, value in (query_params or {}).items()
        if value is not None
    ]
    if not pairs:
        return ""
    return "?" + "&".join(pairs)


def channel_name(method: str, url: str) -> str:
    """Build the subscription key for ``method`` on ``url``.

    The format is ``[METHOD]url`` with every ``?`` removed. Publisher and
    subscriber must produce the same string byte for byte.
    """
    return f"[{method.upper()}]{url}".replace("?", "")


def build_auth_headers(token: str | None, *, prefix: str = "") -> dict[str, str]:
    """Return the auth header for ``token``, or no header when anonymous."""
    if not token:
        return {}
    return {AUTH_HEADER: f"{prefix}{token}"}
