# tests/core/test_directory_client.py
"""
Тесты для клиента справочника пользователей.
"""

from __future__ import annotations

import httpx
import pytest

from cleaning_market.common.exceptions import DirectoryUnavailable
from cleaning_market.core.directory.client import DirectoryClient, UserInfo


def _client(handler) -> DirectoryClient:
    return DirectoryClient(
        base_url="http://directory.test",
        api_key="secret",
        timeout=1.0,
        transport=httpx.MockTransport(handler),
    )


class TestDirectoryClient:
    """Тесты для DirectoryClient."""

    @pytest.mark.asyncio
    async def test_get_user_info(self) -> None:
        """ID передаются через запятую, ключ API заголовком."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json=[
                    {"user_id": "C1", "display_name": "Анна Ковальчук", "city": "Kyiv"},
                    {"user_id": "C2", "display_name": "Олег"},
                ],
            )

        client = _client(handler)
        users = await client.get_user_info(["C1", "C2"])
        await client.close()

        assert users == [
            UserInfo(user_id="C1", display_name="Анна Ковальчук", city="Kyiv"),
            UserInfo(user_id="C2", display_name="Олег"),
        ]
        assert seen[0].url.path == "/users"
        assert seen[0].url.params["ids"] == "C1,C2"
        assert seen[0].headers[DirectoryClient.API_KEY_HEADER] == "secret"

    @pytest.mark.asyncio
    async def test_empty_ids_make_no_request(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("запрос не ожидался")

        client = _client(handler)

        assert await client.get_user_info([]) == []
        await client.close()

    @pytest.mark.asyncio
    async def test_http_error_status(self) -> None:
        client = _client(lambda request: httpx.Response(503))

        with pytest.raises(DirectoryUnavailable) as exc_info:
            await client.get_user_info(["C1"])
        await client.close()

        assert exc_info.value.reason == "HTTP 503"

    @pytest.mark.asyncio
    async def test_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = _client(handler)

        with pytest.raises(DirectoryUnavailable) as exc_info:
            await client.get_user_info(["C1"])
        await client.close()

        assert exc_info.value.reason == "ConnectError"

    @pytest.mark.asyncio
    async def test_malformed_payload(self) -> None:
        client = _client(lambda request: httpx.Response(200, json=[{"display_name": "без ID"}]))

        with pytest.raises(DirectoryUnavailable):
            await client.get_user_info(["C1"])
        await client.close()

    def test_settings_are_used_by_default(self) -> None:
        from cleaning_market.config import settings

        client = DirectoryClient()

        assert str(client._client.base_url).rstrip("/") == settings.directory.DIRECTORY_BASE_URL.rstrip("/")
