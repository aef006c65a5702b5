"""HTTP transport for Relay REST calls."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

import aiohttp

from ..error_handler import translate_error

_LOGGER = logging.getLogger(__name__)

JSON_HEADERS: Mapping[str, str] = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


class RelayHttpClient:
    """HTTP client wrapper that maps every failure to ``RelayRemoteError``."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        *,
        timeout: float = 30.0,
    ) -> None:
        self._session = session
        self._timeout = timeout

    async def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str] | None = None,
        body: Any = None,
    ) -> Any:
        """Issue one HTTP call and return the decoded JSON body.

        An empty or blank response body decodes to ``{}``. Calls are never retried.

        Raises:
            RelayRemoteError: On a non-2xx status, a transport failure a body
                that is not text, or an undecodable success body.
        """
        request_headers = {**JSON_HEADERS, **(headers or {})}
        data = json.dumps(body) if body is not None else None

        _LOGGER.debug("%s %s", method, url)
        try:
            async with self._session.request(
                method,
                url,
                headers=request_headers,
                data=data,
                timeout=aiohttp.ClientTimeout(total=self._timeout),
            ) as resp:
                status = resp.status
                try:
                    text = await resp.text()
                except UnicodeDecodeError as err:
                    raise translate_error(status, cause=err) from err
        except TimeoutError as err:
            raise translate_error(cause=err) from err
        except aiohttp.ClientError as err:
            raise translate_error(cause=err) from err

        if not 200 <= status < 300:
            _LOGGER.debug("%s %s failed with status %d", method, url, status)
            raise translate_error(status, text)

        if not text.strip():
            return {}
        try:
            return json.loads(text)
        except ValueError as err:
            raise translate_error(status, text, cause=err) from err
