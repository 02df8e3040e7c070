# cleaning_market/core/clients/service.py
"""
Сервисы клиентов: профиль клиента и его рейтинг.
"""

from __future__ import annotations

from typing import Optional

from cleaning_market.common.constants import TypeMsg
from cleaning_market.common.exceptions import ClientNotFound
from cleaning_market.common.logger import log_info
from cleaning_market.core.clients.models import Client
from cleaning_market.core.clients.repository import ClientRepository
from cleaning_market.core.orders.repository import OrderRepository
from cleaning_market.core.orders.service import OrderFacade


class ClientService:
    """Рейтинг клиента по отзывам клинеров."""

    def __init__(self, order_repository: OrderRepository) -> None:
        self._orders = order_repository

    async def get_average_client_rating(self, client_id: str) -> Optional[float]:
        """
        Средняя оценка клиента по закрытым заказам.

        Returns:
            Среднее или None, если клиента ещё никто не оценил
        """
        return await self._orders.get_average_cleaners_rating(client_id)


class ClientFacade:
    """Фасад клиентов."""

    def __init__(self, repository: ClientRepository, order_facade: OrderFacade) -> None:
        """
        Args:
            repository: Репозиторий клиентов
            order_facade: Фасад заказов (удаление заказов клиента)
        """
        self._repo = repository
        self._orders = order_facade

    async def get_client(self, client_id: str) -> Client:
        """
        Raises:
            ClientNotFound: Клиента нет
        """
        client = await self._repo.get_by_id(client_id)
        if client is None:
            raise ClientNotFound(client_id)
        return client

    async def get_clients(self) -> list[Client]:
        return await self._repo.list_all()

    async def add_client(self, client: Client) -> Client:
        added = await self._repo.add(client)
        await log_info(f"Зарегистрирован клиент {client.client_id}", type_msg=TypeMsg.INFO)
        return added

    async def delete_client(self, client_id: str) -> None:
        """
        Удаляет клиента вместе с его заказами (сначала заказы).

        Raises:
            ClientNotFound: Клиента нет
        """
        client = await self.get_client(client_id)

        orders = await self._orders.list_created_orders_by(client_id)
        await self._orders.delete_orders(orders)

        await self._repo.delete(client)
        await log_info(
            f"Клиент {client_id} удалён (заказов удалено: {len(orders)})",
            type_msg=TypeMsg.INFO,
        )
