# cleaning_market/core/orders/__init__.py
"""
Домен заказов.
Модели, автомат состояний, репозиторий и фасад заказов.
"""

from cleaning_market.core.orders.models import Opinion, Order, OrderCreateDTO
from cleaning_market.core.orders.repository import OrderRepository
from cleaning_market.core.orders.service import OrderFacade
from cleaning_market.core.orders.state_machine import OrderEvent, OrderState, OrderStateMachine

__all__ = [
    "Opinion",
    "Order",
    "OrderCreateDTO",
    "OrderRepository",
    "OrderFacade",
    "OrderEvent",
    "OrderState",
    "OrderStateMachine",
]
