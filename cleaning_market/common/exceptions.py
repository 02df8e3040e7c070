# cleaning_market/common/exceptions.py
"""
Доменные ошибки.

Все ошибки бизнес-правил наследуются от DomainError и несут код и контекст
(идентификаторы сущностей), чтобы транспортный слой мог перевести их
в ответ пользователю.
"""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from cleaning_market.common.constants import CleanerStatus, OrderStatus


class DomainError(Exception):
    """Базовая ошибка нарушения бизнес-правила."""

    code: str = "domain_error"

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if not self.context:
            return self.message
        context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
        return f"{self.message} ({context_str})"


# =============================================================================
# СУЩНОСТЬ НЕ НАЙДЕНА
# =============================================================================

class CleanerNotFound(DomainError):
    """Клинер с таким ID не зарегистрирован."""

    code = "cleaner_not_found"

    def __init__(self, cleaner_id: str) -> None:
        super().__init__(f"Клинер {cleaner_id} не найден", {"cleaner_id": cleaner_id})
        self.cleaner_id = cleaner_id


class ClientNotFound(DomainError):
    """Клиент с таким ID не зарегистрирован."""

    code = "client_not_found"

    def __init__(self, client_id: str) -> None:
        super().__init__(f"Клиент {client_id} не найден", {"client_id": client_id})
        self.client_id = client_id


class OrderNotFound(DomainError):
    """Заказ с таким ID не существует."""

    code = "order_not_found"

    def __init__(self, order_id: int) -> None:
        super().__init__(f"Заказ {order_id} не найден", {"order_id": order_id})
        self.order_id = order_id


# =============================================================================
# НАРУШЕНИЕ ПРАВ И СТАТУСОВ
# =============================================================================

class UserWithoutPrivileges(DomainError):
    """Клинер забанен или заказ назначен другому клинеру."""

    code = "user_without_privileges"

    def __init__(self, cleaner_id: str) -> None:
        super().__init__(
            f"У клинера {cleaner_id} нет прав на это действие",
            {"cleaner_id": cleaner_id},
        )
        self.cleaner_id = cleaner_id


class NotCorrectOrderStatus(DomainError):
    """Переданный заказ не соответствует допустимому переходу."""

    code = "not_correct_order_status"

    def __init__(self, stored_status: OrderStatus, submitted_status: OrderStatus) -> None:
        super().__init__(
            f"Недопустимый переход статуса заказа: {stored_status.value} -> {submitted_status.value}",
            {"stored_status": stored_status.value, "submitted_status": submitted_status.value},
        )
        self.stored_status = stored_status
        self.submitted_status = submitted_status


class CleanerCannotChangeBannedStatus(DomainError):
    """Попытка выйти из бана или попасть в бан через обычное обновление профиля."""

    code = "cleaner_cannot_change_banned_status"

    def __init__(self, local_status: CleanerStatus, submitted_status: CleanerStatus) -> None:
        super().__init__(
            f"Нельзя сменить статус {local_status.value} -> {submitted_status.value}",
            {"local_status": local_status.value, "submitted_status": submitted_status.value},
        )
        self.local_status = local_status
        self.submitted_status = submitted_status


class UserNotActive(DomainError):
    """Клинер не активен и не может менять фильтр или расписание."""

    code = "user_not_active"

    def __init__(self, cleaner_id: str, status: CleanerStatus) -> None:
        super().__init__(
            f"Клинер {cleaner_id} не активен (статус: {status.value})",
            {"cleaner_id": cleaner_id, "status": status.value},
        )
        self.cleaner_id = cleaner_id
        self.status = status


class OpinionAlreadyGiven(DomainError):
    """Отзыв клинера к заказу уже оставлен."""

    code = "opinion_already_given"

    def __init__(self, order_id: int) -> None:
        super().__init__(f"Отзыв к заказу {order_id} уже оставлен", {"order_id": order_id})
        self.order_id = order_id


class OrderVersionConflict(DomainError):
    """Заказ изменён параллельным запросом после чтения."""

    code = "order_version_conflict"

    def __init__(self, order_id: int, expected_version: int) -> None:
        super().__init__(
            f"Заказ {order_id} был изменён параллельно",
            {"order_id": order_id, "expected_version": expected_version},
        )
        self.order_id = order_id
        self.expected_version = expected_version


# =============================================================================
# ВНЕШНИЕ СЕРВИСЫ
# =============================================================================

class DirectoryUnavailable(DomainError):
    """Справочник пользователей не ответил или ответил ошибкой."""

    code = "directory_unavailable"

    def __init__(self, reason: str) -> None:
        super().__init__(f"Справочник пользователей недоступен: {reason}", {"reason": reason})
        self.reason = reason
