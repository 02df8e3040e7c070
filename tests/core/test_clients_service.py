# tests/core/test_clients_service.py
"""
Тесты для сервисов клиентов.
"""

from __future__ import annotations

from typing import Callable
from unittest.mock import AsyncMock, call

import pytest

from cleaning_market.common.exceptions import ClientNotFound
from cleaning_market.core.clients.models import Client
from cleaning_market.core.clients.repository import ClientRepository
from cleaning_market.core.clients.service import ClientFacade, ClientService
from cleaning_market.core.orders.models import Order


class TestClientService:
    """Тесты рейтинга клиента."""

    @pytest.mark.asyncio
    async def test_average_rating_comes_from_orders(self) -> None:
        order_repo = AsyncMock()
        order_repo.get_average_cleaners_rating = AsyncMock(return_value=4.5)

        rating = await ClientService(order_repo).get_average_client_rating("K1")

        assert rating == 4.5
        order_repo.get_average_cleaners_rating.assert_awaited_once_with("K1")

    @pytest.mark.asyncio
    async def test_no_history(self) -> None:
        order_repo = AsyncMock()
        order_repo.get_average_cleaners_rating = AsyncMock(return_value=None)

        assert await ClientService(order_repo).get_average_client_rating("K1") is None


class TestClientFacade:
    """Тесты фасада клиентов."""

    @pytest.fixture
    def client_repo(self) -> AsyncMock:
        repo = AsyncMock()
        repo.get_by_id = AsyncMock(return_value=Client(client_id="K1"))
        return repo

    @pytest.fixture
    def order_facade(self) -> AsyncMock:
        return AsyncMock()

    @pytest.fixture
    def facade(self, client_repo: AsyncMock, order_facade: AsyncMock) -> ClientFacade:
        return ClientFacade(client_repo, order_facade)

    @pytest.mark.asyncio
    async def test_get_client_missing(self, facade: ClientFacade, client_repo: AsyncMock) -> None:
        client_repo.get_by_id.return_value = None

        with pytest.raises(ClientNotFound) as exc_info:
            await facade.get_client("ghost")

        assert exc_info.value.client_id == "ghost"

    @pytest.mark.asyncio
    async def test_get_clients(self, facade: ClientFacade, client_repo: AsyncMock) -> None:
        client_repo.list_all.return_value = [Client(client_id="K1"), Client(client_id="K2")]

        clients = await facade.get_clients()

        assert [c.client_id for c in clients] == ["K1", "K2"]

    @pytest.mark.asyncio
    async def test_add_client(self, facade: ClientFacade, client_repo: AsyncMock) -> None:
        client = Client(client_id="K3")
        client_repo.add.return_value = client

        assert await facade.add_client(client) == client

    @pytest.mark.asyncio
    async def test_delete_removes_orders_first(
        self,
        facade: ClientFacade,
        client_repo: AsyncMock,
        order_facade: AsyncMock,
        make_order: Callable[..., Order],
    ) -> None:
        """Сначала удаляются заказы клиента, потом сам клиент."""
        orders = [make_order(order_id=1), make_order(order_id=2)]
        order_facade.list_created_orders_by.return_value = orders

        manager = AsyncMock()
        manager.attach_mock(order_facade.delete_orders, "delete_orders")
        manager.attach_mock(client_repo.delete, "delete_client")

        await facade.delete_client("K1")

        assert manager.mock_calls == [
            call.delete_orders(orders),
            call.delete_client(client_repo.get_by_id.return_value),
        ]

    @pytest.mark.asyncio
    async def test_delete_missing_client(
        self,
        facade: ClientFacade,
        client_repo: AsyncMock,
        order_facade: AsyncMock,
    ) -> None:
        client_repo.get_by_id.return_value = None

        with pytest.raises(ClientNotFound):
            await facade.delete_client("ghost")

        order_facade.delete_orders.assert_not_awaited()
        client_repo.delete.assert_not_awaited()


class TestClientRepository:
    """Тесты для репозитория клиентов."""

    @pytest.mark.asyncio
    async def test_get_by_id(self, mock_db: AsyncMock) -> None:
        client = Client(client_id="K1")
        mock_db.fetchrow.return_value = {"client_id": "K1", "created_at": client.created_at}

        result = await ClientRepository(mock_db).get_by_id("K1")

        assert result == client

    @pytest.mark.asyncio
    async def test_get_by_id_missing(self, mock_db: AsyncMock) -> None:
        assert await ClientRepository(mock_db).get_by_id("ghost") is None

    @pytest.mark.asyncio
    async def test_add_and_delete(self, mock_db: AsyncMock) -> None:
        repo = ClientRepository(mock_db)
        client = Client(client_id="K1")

        await repo.add(client)
        await repo.delete(client)

        assert mock_db.execute.await_count == 2
        assert mock_db.execute.call_args.args == ("DELETE FROM clients WHERE client_id = $1", "K1")
