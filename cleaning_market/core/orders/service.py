# cleaning_market/core/orders/service.py
"""
Фасад заказов.
Создание, чтение, смена статуса и удаление заказов; кэширование в Redis.
"""

from __future__ import annotations

from cleaning_market.common.constants import OrderStatus, TypeMsg
from cleaning_market.common.exceptions import NotCorrectOrderStatus, OrderNotFound
from cleaning_market.common.logger import log_info
from cleaning_market.core.orders.models import Order, OrderCreateDTO
from cleaning_market.core.orders.repository import OrderRepository
from cleaning_market.core.orders.state_machine import OrderEvent, OrderStateMachine
from cleaning_market.infra.redis_client import RedisClient


class OrderFacade:
    """
    Фасад заказов.
    Каждая запись в БД делается compare-and-swap по версии, прочитанной вызывающим кодом.
    """

    def __init__(self, repository: OrderRepository, redis: RedisClient) -> None:
        """
        Args:
            repository: Репозиторий заказов
            redis: Клиент Redis (кэш заказов)
        """
        self._repo = repository
        self._redis = redis

    def _order_cache_key(self, order_id: int) -> str:
        """Генерирует ключ кэша для заказа."""
        return f"order:{order_id}"

    async def _invalidate_cache(self, order_id: int) -> None:
        await self._redis.delete(self._order_cache_key(order_id))

    # =========================================================================
    # ЧТЕНИЕ
    # =========================================================================

    async def get_order(self, order_id: int) -> Order:
        """
        Получает заказ по ID (сначала из кэша).

        Raises:
            OrderNotFound: Заказа нет
        """
        cache_key = self._order_cache_key(order_id)

        cached = await self._redis.get_model(cache_key, Order)
        if cached is not None:
            return cached

        order = await self._repo.get_by_id(order_id)
        if order is None:
            raise OrderNotFound(order_id)

        from cleaning_market.config import settings
        await self._redis.set_model(cache_key, order, ttl=settings.redis_ttl.ORDER_TTL)

        return order

    async def list_assigned_orders_to(self, cleaner_id: str) -> list[Order]:
        """Заказы, назначенные клинеру."""
        return await self._repo.list_by_cleaner(cleaner_id)

    async def list_created_orders_by(self, client_id: str) -> list[Order]:
        """Заказы, созданные клиентом."""
        return await self._repo.list_by_client(client_id)

    # =========================================================================
    # ЖИЗНЕННЫЙ ЦИКЛ
    # =========================================================================

    async def create_order(self, dto: OrderCreateDTO) -> Order:
        """Создаёт заказ клиента в статусе created."""
        order = await self._repo.create(dto)
        await log_info(
            f"Заказ {order.order_id} создан клиентом {order.client_id}",
            type_msg=TypeMsg.INFO,
        )
        return order

    async def publish_order(self, order_id: int) -> Order:
        """Открывает заказ для подбора клинеров (created -> active)."""
        order = await self.get_order(order_id)
        state = OrderStateMachine.state_of(order, None)
        if not OrderStateMachine.can_transition(state, OrderEvent.PUBLISH):
            raise NotCorrectOrderStatus(order.status, OrderStatus.ACTIVE)

        published = order.model_copy(update={"status": OrderStatus.ACTIVE})
        return await self.update(published, expected_version=order.version)

    async def offer_order(self, order_id: int, cleaner_id: str) -> Order:
        """Предварительно назначает открытый заказ клинеру; ждёт его подтверждения."""
        order = await self.get_order(order_id)
        state = OrderStateMachine.state_of(order, cleaner_id)
        if not OrderStateMachine.can_transition(state, OrderEvent.OFFER):
            raise NotCorrectOrderStatus(order.status, OrderStatus.ACTIVE)

        offered = order.model_copy(update={"cleaner_id": cleaner_id})
        updated = await self.update(offered, expected_version=order.version)
        await log_info(f"Заказ {order_id} предложен клинеру {cleaner_id}", type_msg=TypeMsg.INFO)
        return updated

    async def update(self, order: Order, expected_version: int) -> Order:
        """
        Перезаписывает заказ целиком.

        Raises:
            OrderVersionConflict: Заказ изменён параллельно после чтения
        """
        try:
            updated = await self._repo.update(order, expected_version=expected_version)
        finally:
            await self._invalidate_cache(order.order_id)

        await log_info(
            f"Заказ {order.order_id} обновлён: статус {order.status.value}, клинер {order.cleaner_id}",
            type_msg=TypeMsg.DEBUG,
        )
        return updated

    async def close_order(self, order: Order) -> Order:
        """
        Закрывает выполненный заказ (in_progress -> closed) вместе с отзывом клинера.

        Raises:
            NotCorrectOrderStatus: Заказ не в работе у назначенного клинера
        """
        state = OrderStateMachine.state_of(order, order.cleaner_id)
        if not OrderStateMachine.can_transition(state, OrderEvent.CLOSE):
            raise NotCorrectOrderStatus(order.status, OrderStatus.CLOSED)

        closed = order.model_copy(update={"status": OrderStatus.CLOSED})
        updated = await self.update(closed, expected_version=order.version)
        await log_info(f"Заказ {order.order_id} закрыт", type_msg=TypeMsg.INFO)
        return updated

    async def delete_orders(self, orders: list[Order]) -> int:
        """Удаляет заказы. Возвращает количество удалённых."""
        deleted = await self._repo.delete_many([order.order_id for order in orders])
        for order in orders:
            await self._invalidate_cache(order.order_id)

        if deleted:
            await log_info(f"Удалено заказов: {deleted}", type_msg=TypeMsg.INFO)
        return deleted
