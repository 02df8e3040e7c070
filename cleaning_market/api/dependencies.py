# cleaning_market/api/dependencies.py
"""
Зависимости HTTP API.
Инициализация ресурсов и сборка фасадов для FastAPI Depends.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends

from cleaning_market.common.constants import TypeMsg
from cleaning_market.common.logger import log_info
from cleaning_market.core.cleaners.repository import CleanerRepository
from cleaning_market.core.cleaners.service import CleanerFacade
from cleaning_market.core.clients.repository import ClientRepository
from cleaning_market.core.clients.service import ClientFacade, ClientService
from cleaning_market.core.directory.client import DirectoryClient
from cleaning_market.core.orders.repository import OrderRepository
from cleaning_market.core.orders.service import OrderFacade
from cleaning_market.infra.database import close_db, get_db, init_db
from cleaning_market.infra.redis_client import close_redis, get_redis, init_redis


_directory_client: Optional[DirectoryClient] = None


async def init_dependencies() -> None:
    """Подключает PostgreSQL, Redis и клиент справочника."""
    global _directory_client

    await init_db()
    await init_redis()
    _directory_client = DirectoryClient()

    await log_info("Зависимости API инициализированы", type_msg=TypeMsg.DEBUG)


async def close_dependencies() -> None:
    """Закрывает все ресурсы."""
    global _directory_client

    if _directory_client is not None:
        await _directory_client.close()
        _directory_client = None

    await close_redis()
    await close_db()
    await log_info("Зависимости API закрыты", type_msg=TypeMsg.DEBUG)


def get_directory_client() -> DirectoryClient:
    if _directory_client is None:
        raise RuntimeError("DirectoryClient не инициализирован")
    return _directory_client


def get_order_facade() -> OrderFacade:
    return OrderFacade(OrderRepository(get_db()), get_redis())


def get_client_service() -> ClientService:
    return ClientService(OrderRepository(get_db()))


def get_client_facade(order_facade: OrderFacade = Depends(get_order_facade)) -> ClientFacade:
    return ClientFacade(ClientRepository(get_db()), order_facade)


def get_cleaner_facade(
    order_facade: OrderFacade = Depends(get_order_facade),
    client_service: ClientService = Depends(get_client_service),
    directory_client: DirectoryClient = Depends(get_directory_client),
) -> CleanerFacade:
    return CleanerFacade(CleanerRepository(get_db()), order_facade, client_service, directory_client)
