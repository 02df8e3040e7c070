# cleaning_market/core/directory/client.py
"""
Клиент справочника пользователей.
Переводит внутренние ID в профили для отображения.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx
from pydantic import BaseModel, ValidationError

from cleaning_market.common.constants import TypeMsg
from cleaning_market.common.exceptions import DirectoryUnavailable
from cleaning_market.common.logger import log_error, log_info


class UserInfo(BaseModel):
    """Профиль пользователя из справочника."""

    user_id: str
    display_name: str = ""
    given_name: Optional[str] = None
    family_name: Optional[str] = None
    email: Optional[str] = None
    city: Optional[str] = None


class DirectoryClient:
    """HTTP клиент справочника пользователей."""

    API_KEY_HEADER = "X-Api-Key"

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            base_url: Адрес справочника (из конфига если None)
            api_key: Ключ API (из конфига если None)
            timeout: Таймаут запроса, секунды
            transport: Транспорт httpx (подменяется в тестах)
        """
        if base_url is None or api_key is None or timeout is None:
            from cleaning_market.config import settings
            base_url = base_url if base_url is not None else settings.directory.DIRECTORY_BASE_URL
            api_key = api_key if api_key is not None else settings.directory.DIRECTORY_API_KEY
            timeout = timeout if timeout is not None else settings.directory.DIRECTORY_TIMEOUT

        headers = {self.API_KEY_HEADER: api_key} if api_key else {}
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers=headers,
            transport=transport,
        )

    async def close(self) -> None:
        """Закрывает HTTP клиент."""
        await self._client.aclose()

    async def get_user_info(self, ids: list[str]) -> list[UserInfo]:
        """
        Профили пользователей по списку ID.

        Raises:
            DirectoryUnavailable: Справочник не ответил или вернул ошибку
        """
        if not ids:
            return []

        try:
            response = await self._client.get("/users", params={"ids": ",".join(ids)})
            response.raise_for_status()
            payload: list[dict[str, Any]] = response.json()
            users = [UserInfo.model_validate(item) for item in payload]
        except httpx.HTTPStatusError as e:
            await log_error(f"Справочник вернул {e.response.status_code} для {len(ids)} ID")
            raise DirectoryUnavailable(f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            await log_error(f"Ошибка запроса к справочнику: {e}")
            raise DirectoryUnavailable(type(e).__name__) from e
        except (ValueError, TypeError, ValidationError) as e:
            await log_error(f"Некорректный ответ справочника: {e}")
            raise DirectoryUnavailable("некорректный ответ") from e

        await log_info(f"Справочник: получено профилей {len(users)} из {len(ids)}", type_msg=TypeMsg.DEBUG)
        return users
