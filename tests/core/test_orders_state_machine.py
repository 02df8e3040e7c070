# tests/core/test_orders_state_machine.py
"""
Тесты для автомата состояний заказа.
"""

from __future__ import annotations

from datetime import datetime

import pytest

from cleaning_market.common.constants import MessLevel, OrderStatus
from cleaning_market.core.orders.models import Order
from cleaning_market.core.orders.state_machine import OrderEvent, OrderState, OrderStateMachine


def _order(status: OrderStatus, cleaner_id: str | None = None) -> Order:
    return Order(
        order_id=1,
        client_id="K1",
        cleaner_id=cleaner_id,
        status=status,
        mess_level=MessLevel.LOW,
        max_price=10.0,
        date=datetime(2025, 6, 18, 10, 0),
    )


class TestStateOf:
    """Тесты вычисления состояния относительно клинера."""

    @pytest.mark.parametrize(
        ("status", "cleaner_id", "requester", "expected"),
        [
            (OrderStatus.CREATED, None, "C1", OrderState.CREATED),
            (OrderStatus.ACTIVE, None, "C1", OrderState.OPEN),
            (OrderStatus.ACTIVE, "C1", "C1", OrderState.OFFERED),
            (OrderStatus.ACTIVE, "C2", "C1", OrderState.FOREIGN),
            (OrderStatus.IN_PROGRESS, "C1", "C1", OrderState.IN_PROGRESS),
            (OrderStatus.IN_PROGRESS, "C2", "C1", OrderState.FOREIGN),
            (OrderStatus.IN_PROGRESS, None, None, OrderState.FOREIGN),
            (OrderStatus.CLOSED, "C1", "C1", OrderState.CLOSED),
        ],
    )
    def test_state_of(
        self,
        status: OrderStatus,
        cleaner_id: str | None,
        requester: str | None,
        expected: OrderState,
    ) -> None:
        assert OrderStateMachine.state_of(_order(status, cleaner_id), requester) == expected


class TestEventOf:
    """Тесты распознавания события по снимку."""

    def test_accept(self) -> None:
        assert OrderStateMachine.event_of(_order(OrderStatus.IN_PROGRESS, "C1"), "C1") == OrderEvent.ACCEPT

    def test_reject(self) -> None:
        assert OrderStateMachine.event_of(_order(OrderStatus.ACTIVE, None), "C1") == OrderEvent.REJECT

    @pytest.mark.parametrize(
        ("status", "cleaner_id"),
        [
            (OrderStatus.IN_PROGRESS, "C2"),
            (OrderStatus.ACTIVE, "C1"),
            (OrderStatus.CLOSED, "C1"),
            (OrderStatus.CREATED, None),
        ],
    )
    def test_no_event(self, status: OrderStatus, cleaner_id: str | None) -> None:
        assert OrderStateMachine.event_of(_order(status, cleaner_id), "C1") is None


class TestTransitions:
    """Тесты таблицы переходов."""

    def test_table_is_exhaustive(self) -> None:
        """Разрешено ровно пять переходов, остальные пары запрещены."""
        allowed = {
            (state, event)
            for state in OrderState
            for event in OrderEvent
            if OrderStateMachine.can_transition(state, event)
        }

        assert allowed == {
            (OrderState.CREATED, OrderEvent.PUBLISH),
            (OrderState.OPEN, OrderEvent.OFFER),
            (OrderState.OFFERED, OrderEvent.ACCEPT),
            (OrderState.OFFERED, OrderEvent.REJECT),
            (OrderState.IN_PROGRESS, OrderEvent.CLOSE),
        }

    def test_next_state(self) -> None:
        assert OrderStateMachine.next_state(OrderState.OFFERED, OrderEvent.ACCEPT) == OrderState.IN_PROGRESS
        assert OrderStateMachine.next_state(OrderState.OFFERED, OrderEvent.REJECT) == OrderState.OPEN
        assert OrderStateMachine.next_state(OrderState.FOREIGN, OrderEvent.ACCEPT) is None

    def test_missing_event_never_transitions(self) -> None:
        assert OrderStateMachine.can_transition(OrderState.OFFERED, None) is False
