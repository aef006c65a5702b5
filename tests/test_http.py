"""Tests for RelayHttpClient."""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import aiohttp
import pytest

from relay_sdk.errors import SERVER_ERROR, RelayRemoteError
from relay_sdk.transport.http import RelayHttpClient

from .conftest import create_mock_response


class TestRelayHttpClientSend:
    """Tests for RelayHttpClient.send()."""

    async def test_success_decodes_json(self, mock_session: MagicMock) -> None:
        """Test a successful response is decoded from JSON."""
        client = RelayHttpClient(mock_session)
        mock_session.request.return_value = create_mock_response(
            json_data={"name": "bolt"}
        )

        result = await client.send("GET", "http://api.test/api/widgets/3")

        assert result == {"name": "bolt"}
        call_args = mock_session.request.call_args
        assert call_args.args == ("GET", "http://api.test/api/widgets/3")

    async def test_empty_body_is_empty_object(self, mock_session: MagicMock) -> None:
        """Test an empty success body decodes to an empty dict."""
        client = RelayHttpClient(mock_session)
        mock_session.request.return_value = create_mock_response(
            status=204, text_data=""
        )

        assert await client.send("DELETE", "http://api.test/api/widgets/3") == {}

    async def test_body_serialized_with_headers(self, mock_session: MagicMock) -> None:
        """Test body is JSON serialized and headers are merged."""
        client = RelayHttpClient(mock_session)
        mock_session.request.return_value = create_mock_response(json_data={})

        await client.send(
            "POST",
            "http://api.test/api/widgets",
            {"Authorization": "tok"},
            {"name": "bolt"},
        )

        call_kwargs = mock_session.request.call_args.kwargs
        assert json.loads(call_kwargs["data"]) == {"name": "bolt"}
        assert call_kwargs["headers"]["Authorization"] == "tok"
        assert call_kwargs["headers"]["Content-Type"] == "application/json"

    async def test_no_body_sends_no_data(self, mock_session: MagicMock) -> None:
        """Test no body sends no request data."""
        client = RelayHttpClient(mock_session)
        mock_session.request.return_value = create_mock_response(json_data={})

        await client.send("GET", "http://api.test/api/widgets")

        assert mock_session.request.call_args.kwargs["data"] is None

    async def test_uses_configured_timeout(self, mock_session: MagicMock) -> None:
        """Test the configured timeout is passed to aiohttp."""
        client = RelayHttpClient(mock_session, timeout=10)
        mock_session.request.return_value = create_mock_response(json_data={})

        await client.send("GET", "http://api.test/api/widgets")

        timeout = mock_session.request.call_args.kwargs.get("timeout")
        assert timeout is not None
        assert timeout.total == 10

    async def test_error_status_translated(self, mock_session: MagicMock) -> None:
        """Test a non-2xx status raises RelayRemoteError."""
        client = RelayHttpClient(mock_session)
        mock_session.request.return_value = create_mock_response(
            status=404, json_data={"error": {"message": "not found"}}
        )

        with pytest.raises(RelayRemoteError) as exc_info:
            await client.send("GET", "http://api.test/api/widgets/9")

        assert exc_info.value.error == {"message": "not found"}
        assert exc_info.value.status == 404

    async def test_timeout_translated(self, mock_session: MagicMock) -> None:
        """Test a timeout raises RelayRemoteError."""
        client = RelayHttpClient(mock_session)
        mock_session.request.side_effect = TimeoutError("Request timed out")

        with pytest.raises(RelayRemoteError) as exc_info:
            await client.send("GET", "http://api.test/api/widgets")

        assert exc_info.value.error == SERVER_ERROR
        assert isinstance(exc_info.value.__cause__, TimeoutError)

    async def test_client_error_translated(self, mock_session: MagicMock) -> None:
        """Test an aiohttp ClientError raises RelayRemoteError."""
        client = RelayHttpClient(mock_session)
        mock_session.request.side_effect = aiohttp.ClientError("Connection refused")

        with pytest.raises(RelayRemoteError) as exc_info:
            await client.send("GET", "http://api.test/api/widgets")

        assert exc_info.value.error == SERVER_ERROR
        assert exc_info.value.status is None

    async def test_undecodable_success_body(self, mock_session: MagicMock) -> None:
        """Test a non-JSON success body raises RelayRemoteError."""
        client = RelayHttpClient(mock_session)
        mock_session.request.return_value = create_mock_response(text_data="OK")

        with pytest.raises(RelayRemoteError) as exc_info:
            await client.send("GET", "http://api.test/api/widgets")

        assert exc_info.value.error == SERVER_ERROR

    async def test_blank_body_is_empty_object(self, mock_session: MagicMock) -> None:
        """Test a whitespace-only success body decodes to an empty dict."""
        client = RelayHttpClient(mock_session)
        mock_session.request.return_value = create_mock_response(text_data="\n  ")

        assert await client.send("POST", "http://api.test/api/Users/logout") == {}

    async def test_body_not_valid_text_translated(
        self, mock_session: MagicMock
    ) -> None:
        """Test a body that fails to decode as text raises RelayRemoteError."""
        client = RelayHttpClient(mock_session)
        response = create_mock_response()
        response.text.side_effect = UnicodeDecodeError(
            "utf-8", b"\xff\xfe", 0, 1, "invalid start byte"
        )
        mock_session.request.return_value = response

        with pytest.raises(RelayRemoteError) as exc_info:
            await client.send("GET", "http://api.test/api/widgets")

        assert exc_info.value.error == SERVER_ERROR
        assert exc_info.value.status == 200
        assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)

    async def test_not_retried(self, mock_session: MagicMock) -> None:
        """Test failed calls are not retried."""
        client = RelayHttpClient(mock_session)
        mock_session.request.return_value = create_mock_response(
            status=503, text_data=""
        )

        with pytest.raises(RelayRemoteError):
            await client.send("GET", "http://api.test/api/widgets")

        assert mock_session.request.call_count == 1
