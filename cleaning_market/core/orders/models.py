# cleaning_market/core/orders/models.py
"""
Модели данных заказов.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cleaning_market.common.constants import MessLevel, OrderStatus
from cleaning_market.common.exceptions import OpinionAlreadyGiven


def to_naive_utc(value: datetime) -> datetime:
    """Дата с часовым поясом приводится к UTC без tzinfo (колонка orders.date без пояса)."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class Opinion(BaseModel):
    """Отзыв (оценка + комментарий). Неизменяемое значение."""

    model_config = ConfigDict(frozen=True)

    rating: int = Field(..., ge=1, le=5, description="Оценка от 1 до 5")
    comment: str = Field("", max_length=1000, description="Комментарий")


class Order(BaseModel):
    """Модель заказа на уборку."""

    model_config = ConfigDict(from_attributes=True, validate_assignment=True)

    order_id: int = Field(..., description="ID заказа")
    client_id: str = Field(..., description="ID клиента-владельца")
    cleaner_id: Optional[str] = Field(None, description="ID назначенного клинера (None, если не назначен)")

    status: OrderStatus = Field(OrderStatus.CREATED, description="Статус заказа")

    # Характеристики работы (используются при подборе)
    mess_level: MessLevel = Field(..., description="Степень загрязнения")
    max_price: float = Field(..., ge=0.0, description="Максимальная цена")
    date: datetime = Field(..., description="Дата и время уборки")
    address: Optional[str] = Field(None, description="Адрес")

    # Отзывы
    cleaners_opinion: Optional[Opinion] = Field(None, description="Отзыв клинера о клиенте")
    clients_opinion: Optional[Opinion] = Field(None, description="Отзыв клиента о клинере")

    # Версия для compare-and-swap при обновлении
    version: int = Field(0, ge=0, description="Версия записи")
    created_at: datetime = Field(default_factory=datetime.utcnow, description="Время создания")

    @field_validator("date")
    @classmethod
    def normalize_date(cls, v: datetime) -> datetime:
        return to_naive_utc(v)

    @property
    def is_assigned(self) -> bool:
        """Назначен ли клинер."""
        return self.cleaner_id is not None

    @property
    def is_closed(self) -> bool:
        """Закрыт ли заказ."""
        return self.status == OrderStatus.CLOSED

    def set_cleaners_opinion(self, opinion: Opinion) -> None:
        """
        Прикрепляет отзыв клинера. Отзыв оставляется один раз.

        Raises:
            OpinionAlreadyGiven: Отзыв уже есть
        """
        if self.cleaners_opinion is not None:
            raise OpinionAlreadyGiven(self.order_id)
        self.cleaners_opinion = opinion


class OrderCreateDTO(BaseModel):
    """DTO для создания заказа клиентом."""

    client_id: str
    mess_level: MessLevel
    max_price: float = Field(..., ge=0.0)
    date: datetime
    address: Optional[str] = None

    @field_validator("date")
    @classmethod
    def normalize_date(cls, v: datetime) -> datetime:
        return to_naive_utc(v)
