# cleaning_market/core/clients/repository.py
"""
Репозиторий для работы с клиентами в БД.
"""

from __future__ import annotations

from typing import Optional

from cleaning_market.common.constants import TypeMsg
from cleaning_market.common.logger import log_info
from cleaning_market.core.clients.models import Client
from cleaning_market.infra.database import DatabaseManager


class ClientRepository:
    """Репозиторий клиентов."""

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    async def get_by_id(self, client_id: str) -> Optional[Client]:
        row = await self._db.fetchrow(
            "SELECT client_id, created_at FROM clients WHERE client_id = $1",
            client_id,
        )
        if row is None:
            return None
        return Client(client_id=row["client_id"], created_at=row["created_at"])

    async def list_all(self) -> list[Client]:
        rows = await self._db.fetch("SELECT client_id, created_at FROM clients ORDER BY created_at")
        return [Client(client_id=row["client_id"], created_at=row["created_at"]) for row in rows]

    async def add(self, client: Client) -> Client:
        await self._db.execute(
            "INSERT INTO clients (client_id, created_at) VALUES ($1, $2)",
            client.client_id,
            client.created_at,
        )
        await log_info(f"Клиент {client.client_id} сохранён", type_msg=TypeMsg.DEBUG)
        return client

    async def delete(self, client: Client) -> None:
        await self._db.execute("DELETE FROM clients WHERE client_id = $1", client.client_id)
