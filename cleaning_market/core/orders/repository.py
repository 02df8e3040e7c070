# cleaning_market/core/orders/repository.py
"""
Репозиторий для работы с заказами в БД.
"""

from __future__ import annotations

from typing import Any, Optional

from cleaning_market.common.constants import MessLevel, OrderStatus, TypeMsg
from cleaning_market.common.exceptions import OrderVersionConflict
from cleaning_market.common.logger import log_info
from cleaning_market.core.orders.models import Opinion, Order, OrderCreateDTO
from cleaning_market.infra.database import DatabaseManager, affected_rows


_ORDER_COLUMNS = """
    order_id, client_id, cleaner_id, status, mess_level, max_price, date, address,
    cleaners_opinion_rating, cleaners_opinion_comment,
    clients_opinion_rating, clients_opinion_comment,
    version, created_at
"""


class OrderRepository:
    """Репозиторий заказов."""

    def __init__(self, db: DatabaseManager) -> None:
        """
        Args:
            db: Менеджер базы данных (Dependency Injection)
        """
        self._db = db

    async def get_by_id(self, order_id: int) -> Optional[Order]:
        """
        Получает заказ по ID.

        Returns:
            Заказ или None
        """
        row = await self._db.fetchrow(
            f"SELECT {_ORDER_COLUMNS} FROM orders WHERE order_id = $1",
            order_id,
        )
        if row is None:
            return None
        return self._row_to_order(row)

    async def create(self, dto: OrderCreateDTO) -> Order:
        """Создаёт заказ в статусе created и возвращает его с присвоенным ID."""
        row = await self._db.fetchrow(
            f"""
            INSERT INTO orders (client_id, status, mess_level, max_price, date, address)
            VALUES ($1, $2, $3, $4, $5, $6)
            RETURNING {_ORDER_COLUMNS}
            """,
            dto.client_id,
            OrderStatus.CREATED.value,
            int(dto.mess_level),
            dto.max_price,
            dto.date,
            dto.address,
        )
        order = self._row_to_order(row)
        await log_info(f"Заказ {order.order_id} создан", type_msg=TypeMsg.DEBUG)
        return order

    async def list_by_cleaner(self, cleaner_id: str) -> list[Order]:
        """Заказы, назначенные клинеру."""
        rows = await self._db.fetch(
            f"SELECT {_ORDER_COLUMNS} FROM orders WHERE cleaner_id = $1 ORDER BY date",
            cleaner_id,
        )
        return [self._row_to_order(row) for row in rows]

    async def list_by_client(self, client_id: str) -> list[Order]:
        """Заказы, созданные клиентом."""
        rows = await self._db.fetch(
            f"SELECT {_ORDER_COLUMNS} FROM orders WHERE client_id = $1 ORDER BY date",
            client_id,
        )
        return [self._row_to_order(row) for row in rows]

    async def update(self, order: Order, expected_version: int) -> Order:
        """
        Полностью перезаписывает заказ, если его версия в БД равна expected_version.

        Returns:
            Заказ с увеличенной версией

        Raises:
            OrderVersionConflict: Заказ изменён (или удалён) после чтения
        """
        cleaners_rating, cleaners_comment = self._opinion_columns(order.cleaners_opinion)
        clients_rating, clients_comment = self._opinion_columns(order.clients_opinion)

        status = await self._db.execute(
            """
            UPDATE orders
            SET cleaner_id = $3, status = $4, mess_level = $5, max_price = $6,
                date = $7, address = $8,
                cleaners_opinion_rating = $9, cleaners_opinion_comment = $10,
                clients_opinion_rating = $11, clients_opinion_comment = $12,
                version = version + 1
            WHERE order_id = $1 AND version = $2
            """,
            order.order_id,
            expected_version,
            order.cleaner_id,
            order.status.value,
            int(order.mess_level),
            order.max_price,
            order.date,
            order.address,
            cleaners_rating,
            cleaners_comment,
            clients_rating,
            clients_comment,
        )

        if affected_rows(status) == 0:
            raise OrderVersionConflict(order.order_id, expected_version)

        return order.model_copy(update={"version": expected_version + 1})

    async def delete_many(self, order_ids: list[int]) -> int:
        """Удаляет заказы по списку ID. Возвращает количество удалённых."""
        if not order_ids:
            return 0
        status = await self._db.execute(
            "DELETE FROM orders WHERE order_id = ANY($1::bigint[])",
            order_ids,
        )
        return affected_rows(status)

    async def get_average_cleaners_rating(self, client_id: str) -> Optional[float]:
        """
        Средняя оценка, которую клинеры поставили клиенту по закрытым заказам.

        Returns:
            Среднее или None, если оценок нет
        """
        value = await self._db.fetchval(
            """
            SELECT AVG(cleaners_opinion_rating)::float8
            FROM orders
            WHERE client_id = $1
              AND status = $2
              AND cleaners_opinion_rating IS NOT NULL
            """,
            client_id,
            OrderStatus.CLOSED.value,
        )
        return float(value) if value is not None else None

    @staticmethod
    def _opinion_columns(opinion: Optional[Opinion]) -> tuple[Optional[int], Optional[str]]:
        if opinion is None:
            return None, None
        return opinion.rating, opinion.comment

    @staticmethod
    def _row_to_opinion(rating: Any, comment: Any) -> Optional[Opinion]:
        if rating is None:
            return None
        return Opinion(rating=rating, comment=comment or "")

    def _row_to_order(self, row) -> Order:
        """Конвертирует строку БД в модель Order."""
        return Order(
            order_id=row["order_id"],
            client_id=row["client_id"],
            cleaner_id=row["cleaner_id"],
            status=OrderStatus(row["status"]),
            mess_level=MessLevel(row["mess_level"]),
            max_price=row["max_price"],
            date=row["date"],
            address=row["address"],
            cleaners_opinion=self._row_to_opinion(
                row["cleaners_opinion_rating"], row["cleaners_opinion_comment"]
            ),
            clients_opinion=self._row_to_opinion(
                row["clients_opinion_rating"], row["clients_opinion_comment"]
            ),
            version=row["version"],
            created_at=row["created_at"],
        )
