# cleaning_market/core/orders/state_machine.py
"""
Конечный автомат жизненного цикла заказа.

Состояние заказа вычисляется относительно клинера, который выполняет действие:
один и тот же активный заказ для приглашённого клинера находится в OFFERED,
а для любого другого в FOREIGN.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from cleaning_market.common.constants import OrderStatus
from cleaning_market.core.orders.models import Order


class OrderState(str, Enum):
    """Состояние заказа с точки зрения клинера."""
    CREATED = "created"
    OPEN = "open"                # активен, никто не назначен
    OFFERED = "offered"          # активен, предложен этому клинеру
    IN_PROGRESS = "in_progress"  # принят этим клинером
    CLOSED = "closed"
    FOREIGN = "foreign"          # назначен другому клинеру


class OrderEvent(str, Enum):
    """События жизненного цикла заказа."""
    PUBLISH = "publish"
    OFFER = "offer"
    ACCEPT = "accept"
    REJECT = "reject"
    CLOSE = "close"


class OrderStateMachine:
    TRANSITIONS: dict[tuple[OrderState, OrderEvent], OrderState] = {
        (OrderState.CREATED, OrderEvent.PUBLISH): OrderState.OPEN,
        (OrderState.OPEN, OrderEvent.OFFER): OrderState.OFFERED,
        (OrderState.OFFERED, OrderEvent.ACCEPT): OrderState.IN_PROGRESS,
        (OrderState.OFFERED, OrderEvent.REJECT): OrderState.OPEN,
        (OrderState.IN_PROGRESS, OrderEvent.CLOSE): OrderState.CLOSED,
    }

    @staticmethod
    def state_of(order: Order, cleaner_id: Optional[str]) -> OrderState:
        """Вычисляет состояние заказа относительно клинера."""
        if order.status == OrderStatus.CREATED:
            return OrderState.CREATED
        if order.status == OrderStatus.CLOSED:
            return OrderState.CLOSED
        if order.status == OrderStatus.ACTIVE:
            if order.cleaner_id is None:
                return OrderState.OPEN
            if order.cleaner_id == cleaner_id:
                return OrderState.OFFERED
        if order.status == OrderStatus.IN_PROGRESS and order.cleaner_id is not None \
                and order.cleaner_id == cleaner_id:
            return OrderState.IN_PROGRESS
        return OrderState.FOREIGN

    @staticmethod
    def event_of(submitted: Order, cleaner_id: str) -> Optional[OrderEvent]:
        """
        Определяет, что клинер сделал с присланным снимком заказа.

        in_progress + назначен на себя: принятие;
        active + без клинера: отказ. Всё остальное событием не является.
        """
        if submitted.status == OrderStatus.IN_PROGRESS and submitted.cleaner_id == cleaner_id:
            return OrderEvent.ACCEPT
        if submitted.status == OrderStatus.ACTIVE and submitted.cleaner_id is None:
            return OrderEvent.REJECT
        return None

    @classmethod
    def next_state(cls, state: OrderState, event: Optional[OrderEvent]) -> Optional[OrderState]:
        """Возвращает целевое состояние или None, если переход запрещён."""
        if event is None:
            return None
        return cls.TRANSITIONS.get((state, event))

    @classmethod
    def can_transition(cls, state: OrderState, event: Optional[OrderEvent]) -> bool:
        return cls.next_state(state, event) is not None
