# cleaning_market/core/cleaners/specifications.py
"""
Спецификации для выборки клинеров.

Спецификация умеет две вещи:
- is_satisfied_by(cleaner): проверка в памяти;
- to_sql(start): фрагмент WHERE для asyncpg с плейсхолдерами $start, $start+1, ...

Таблица cleaners в запросах репозитория имеет алиас "c".
Спецификации комбинируются оператором &.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Optional

from cleaning_market.common.constants import CleanerStatus, MessLevel
from cleaning_market.core.cleaners.models import Cleaner


class Specification(ABC):
    """Базовая спецификация клинеров."""

    @abstractmethod
    def is_satisfied_by(self, cleaner: Cleaner) -> bool:
        ...

    @abstractmethod
    def to_sql(self, start: int = 1) -> tuple[str, list[Any]]:
        """
        Args:
            start: Номер первого плейсхолдера

        Returns:
            (условие, параметры)
        """
        ...

    def __and__(self, other: Specification) -> AndSpecification:
        return AndSpecification(self, other)


class AndSpecification(Specification):
    """Конъюнкция спецификаций."""

    def __init__(self, *specs: Specification) -> None:
        self.specs = list(specs)

    def is_satisfied_by(self, cleaner: Cleaner) -> bool:
        return all(spec.is_satisfied_by(cleaner) for spec in self.specs)

    def to_sql(self, start: int = 1) -> tuple[str, list[Any]]:
        if not self.specs:
            return "TRUE", []

        clauses: list[str] = []
        params: list[Any] = []
        for spec in self.specs:
            clause, spec_params = spec.to_sql(start + len(params))
            clauses.append(f"({clause})")
            params.extend(spec_params)
        return " AND ".join(clauses), params


# =============================================================================
# ПРОСТЫЕ СПЕЦИФИКАЦИИ
# =============================================================================

class CleanerWithScheduleSpecification(Specification):
    """Один клинер по ID (расписание репозиторий подгружает всегда)."""

    def __init__(self, cleaner_id: str) -> None:
        self.cleaner_id = cleaner_id

    def is_satisfied_by(self, cleaner: Cleaner) -> bool:
        return cleaner.cleaner_id == self.cleaner_id

    def to_sql(self, start: int = 1) -> tuple[str, list[Any]]:
        return f"c.cleaner_id = ${start}", [self.cleaner_id]


class CleanerStatusSpecification(Specification):
    def __init__(self, status: CleanerStatus) -> None:
        self.status = status

    def is_satisfied_by(self, cleaner: Cleaner) -> bool:
        return cleaner.status == self.status

    def to_sql(self, start: int = 1) -> tuple[str, list[Any]]:
        return f"c.status = ${start}", [self.status.value]


class CleanerAvailableAtSpecification(Specification):
    """В расписании клинера есть окно, покрывающее момент."""

    def __init__(self, moment: datetime) -> None:
        self.moment = moment

    def is_satisfied_by(self, cleaner: Cleaner) -> bool:
        return cleaner.is_available_at(self.moment)

    def to_sql(self, start: int = 1) -> tuple[str, list[Any]]:
        # День недели считается в Python (пн=0), а не через EXTRACT(DOW) (вс=0)
        clause = (
            "EXISTS ("
            "SELECT 1 FROM cleaner_schedule_entries s "
            "WHERE s.cleaner_id = c.cleaner_id "
            f"AND s.day_of_week = ${start} "
            f"AND s.start_time <= ${start + 1} "
            f"AND s.end_time >= ${start + 1})"
        )
        return clause, [self.moment.weekday(), self.moment.time()]


class CleanerAcceptsOrderSpecification(Specification):
    """Фильтр заказов клинера пропускает заказ с такими характеристиками."""

    def __init__(
        self,
        mess_level: MessLevel,
        max_price: float,
        client_rating: Optional[float] = None,
    ) -> None:
        self.mess_level = mess_level
        self.max_price = max_price
        self.client_rating = client_rating

    def is_satisfied_by(self, cleaner: Cleaner) -> bool:
        return cleaner.order_filter.accepts(self.mess_level, self.max_price, self.client_rating)

    def to_sql(self, start: int = 1) -> tuple[str, list[Any]]:
        clause = f"c.max_mess_level >= ${start} AND c.min_price <= ${start + 1}"
        params: list[Any] = [int(self.mess_level), self.max_price]

        if self.client_rating is not None:
            clause += f" AND c.min_client_rating <= ${start + 2}"
            params.append(self.client_rating)

        return clause, params


# =============================================================================
# ПОДБОР КЛИНЕРОВ ПОД ЗАКАЗ
# =============================================================================

class CleanersMatchingOrderSpecification(AndSpecification):
    """
    Клинеры, которым можно предложить заказ:
    активны, свободны в дату заказа, берут такую степень загрязнения
    за такую цену и не против клиента с таким рейтингом.

    Клиент без рейтинга (None) проходит любой порог рейтинга.
    """

    def __init__(
        self,
        date: datetime,
        mess_level: MessLevel,
        max_price: float,
        client_rating: Optional[float] = None,
    ) -> None:
        super().__init__(
            CleanerStatusSpecification(CleanerStatus.ACTIVE),
            CleanerAcceptsOrderSpecification(mess_level, max_price, client_rating),
            CleanerAvailableAtSpecification(date),
        )
        self.date = date
        self.mess_level = mess_level
        self.max_price = max_price
        self.client_rating = client_rating
