# cleaning_market/core/cleaners/__init__.py
"""
Домен клинеров.
Модели, спецификации подбора, репозиторий и фасад клинеров.
"""

from cleaning_market.core.cleaners.models import Cleaner, CleanerUpdateDTO, OrderFilter, ScheduleEntry
from cleaning_market.core.cleaners.repository import CleanerRepository
from cleaning_market.core.cleaners.service import CleanerFacade
from cleaning_market.core.cleaners.specifications import (
    CleanersMatchingOrderSpecification,
    CleanerWithScheduleSpecification,
    Specification,
)

__all__ = [
    "Cleaner",
    "CleanerUpdateDTO",
    "OrderFilter",
    "ScheduleEntry",
    "CleanerRepository",
    "CleanerFacade",
    "CleanersMatchingOrderSpecification",
    "CleanerWithScheduleSpecification",
    "Specification",
]
