# cleaning_market/core/cleaners/models.py
"""
Модели данных клинеров.
"""

from __future__ import annotations

from datetime import datetime, time
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from cleaning_market.common.constants import CleanerStatus, MessLevel


class OrderFilter(BaseModel):
    """Какие заказы клинер готов брать."""

    model_config = ConfigDict(frozen=True)

    max_mess_level: MessLevel = Field(MessLevel.LOW, description="Максимальная степень загрязнения")
    min_price: float = Field(0.0, ge=0.0, description="Минимальная цена, за которую клинер работает")
    min_client_rating: float = Field(0.0, ge=0.0, le=5.0, description="Минимальный рейтинг клиента")

    def accepts(self, mess_level: MessLevel, max_price: float, client_rating: Optional[float]) -> bool:
        """Подходит ли заказ под фильтр. Клиент без рейтинга проходит проверку рейтинга."""
        if mess_level > self.max_mess_level:
            return False
        if self.min_price > max_price:
            return False
        if client_rating is not None and self.min_client_rating > client_rating:
            return False
        return True


class ScheduleEntry(BaseModel):
    """Окно доступности: день недели (пн=0) и интервал времени."""

    model_config = ConfigDict(frozen=True)

    day_of_week: int = Field(..., ge=0, le=6, description="День недели, понедельник = 0")
    start: time = Field(..., description="Начало")
    end: time = Field(..., description="Конец")

    @model_validator(mode="after")
    def check_interval(self) -> "ScheduleEntry":
        if self.start >= self.end:
            raise ValueError("Начало окна должно быть раньше конца")
        return self

    def covers(self, moment: datetime) -> bool:
        """Попадает ли момент в окно."""
        return moment.weekday() == self.day_of_week and self.start <= moment.time() <= self.end


class Cleaner(BaseModel):
    """Модель клинера."""

    model_config = ConfigDict(from_attributes=True)

    cleaner_id: str = Field(..., description="ID клинера")
    status: CleanerStatus = Field(CleanerStatus.REGISTERED, description="Статус")
    order_filter: OrderFilter = Field(default_factory=OrderFilter, description="Фильтр заказов")
    # Порядок окон значим
    schedule_entries: list[ScheduleEntry] = Field(default_factory=list, description="Расписание")

    @property
    def is_active(self) -> bool:
        return self.status == CleanerStatus.ACTIVE

    @property
    def is_banned(self) -> bool:
        return self.status == CleanerStatus.BANNED

    def set_status(self, status: CleanerStatus) -> None:
        self.status = status

    def update_order_filter(self, order_filter: OrderFilter) -> None:
        self.order_filter = order_filter

    def update_schedule(self, schedule_entries: list[ScheduleEntry]) -> None:
        self.schedule_entries = list(schedule_entries)

    def is_available_at(self, moment: datetime) -> bool:
        """Есть ли в расписании окно, покрывающее момент."""
        return any(entry.covers(moment) for entry in self.schedule_entries)


class CleanerUpdateDTO(BaseModel):
    """
    Частичное обновление профиля клинера.

    Учитываются только поля, явно переданные в запросе (model_fields_set).
    """

    status: Optional[CleanerStatus] = None
    order_filter: Optional[OrderFilter] = None
    schedule_entries: Optional[list[ScheduleEntry]] = None

    def has(self, field_name: str) -> bool:
        """Было ли поле передано и не равно None."""
        return field_name in self.model_fields_set and getattr(self, field_name) is not None

    def to_cleaner(self, cleaner_id: str) -> Cleaner:
        """Собирает нового клинера из переданных полей (первичная регистрация)."""
        return Cleaner(
            cleaner_id=cleaner_id,
            **self.model_dump(exclude_unset=True, exclude_none=True),
        )
