# tests/conftest.py
"""
Общие фикстуры и настройки для тестов.
"""

from __future__ import annotations

import json
import os
from datetime import datetime, time
from pathlib import Path
from typing import Any, Callable
from unittest.mock import AsyncMock

import pytest

# Устанавливаем переменные окружения перед импортом модулей
os.environ.setdefault("DB_PASSWORD", "test_password")
os.environ.setdefault("REDIS_PASSWORD", "")
os.environ.setdefault("DIRECTORY_API_KEY", "test_directory_key")

from cleaning_market.common.constants import CleanerStatus, MessLevel, OrderStatus  # noqa: E402
from cleaning_market.core.cleaners.models import Cleaner, OrderFilter, ScheduleEntry  # noqa: E402
from cleaning_market.core.orders.models import Order  # noqa: E402


# Среда, 2025-06-18 10:30
ORDER_DATE = datetime(2025, 6, 18, 10, 30)
WEDNESDAY = 2


# =============================================================================
# ФИКСТУРЫ КОНФИГУРАЦИИ
# =============================================================================

@pytest.fixture(scope="session")
def project_root() -> Path:
    """Корневая директория проекта."""
    return Path(__file__).parent.parent


@pytest.fixture(scope="session")
def config_path(project_root: Path) -> Path:
    """Путь к файлу конфигурации."""
    return project_root / "config" / "config.json"


@pytest.fixture
def mock_config() -> dict[str, Any]:
    """Мок конфигурации для тестов."""
    return {
        "_comment_system": "игнорируется",
        "PROJECT_NAME": "cleaning_market_test",
        "VERSION": "1.0.0-test",
        "DEBUG": True,
        "ENVIRONMENT": "test",
        "API_HOST": "127.0.0.1",
        "API_PORT": 8081,
        "API_PREFIX": "/api/v1",
        "LOG_LEVEL": "DEBUG",
        "LOG_TO_FILE": False,
        "LOG_FILE_PATH": "logs/test.log",
        "LOG_FORMAT": "colored",
        "DB_HOST": "localhost",
        "DB_PORT": 5432,
        "DB_NAME": "cleaning_market_test",
        "DB_USER": "postgres",
        "DB_MIN_POOL_SIZE": 2,
        "DB_MAX_POOL_SIZE": 5,
        "DB_COMMAND_TIMEOUT": 30,
        "REDIS_HOST": "localhost",
        "REDIS_PORT": 6379,
        "REDIS_DB": 1,
        "REDIS_NAMESPACE": "cleaning_test",
        "REDIS_MAX_CONNECTIONS": 10,
        "ORDER_TTL": 120,
        "DIRECTORY_BASE_URL": "http://directory.test",
        "DIRECTORY_TIMEOUT": 2.5,
        "ALLOWED_ORIGINS": ["https://cleaning.example.com"],
    }


@pytest.fixture
def temp_config_file(tmp_path: Path, mock_config: dict[str, Any]) -> Path:
    """Создаёт временный файл конфигурации."""
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps(mock_config, ensure_ascii=False, indent=2))
    return config_file


# =============================================================================
# ФИКСТУРЫ ИНФРАСТРУКТУРЫ (МОКИ)
# =============================================================================

@pytest.fixture
def mock_db() -> AsyncMock:
    """Мок менеджера базы данных."""
    db = AsyncMock()
    db.fetchrow = AsyncMock(return_value=None)
    db.fetch = AsyncMock(return_value=[])
    db.execute = AsyncMock(return_value="UPDATE 1")
    db.fetchval = AsyncMock(return_value=None)
    return db


@pytest.fixture
def mock_redis() -> AsyncMock:
    """Мок клиента Redis."""
    redis = AsyncMock()
    redis.get = AsyncMock(return_value=None)
    redis.set = AsyncMock(return_value=True)
    redis.delete = AsyncMock(return_value=1)
    redis.get_model = AsyncMock(return_value=None)
    redis.set_model = AsyncMock(return_value=True)
    return redis


# =============================================================================
# ФИКСТУРЫ МОДЕЛЕЙ
# =============================================================================

@pytest.fixture
def make_cleaner() -> Callable[..., Cleaner]:
    """Фабрика клинеров (по умолчанию активный, свободен в среду 9-18)."""
    def _make(
        cleaner_id: str = "C1",
        status: CleanerStatus = CleanerStatus.ACTIVE,
        order_filter: OrderFilter | None = None,
        schedule_entries: list[ScheduleEntry] | None = None,
    ) -> Cleaner:
        return Cleaner(
            cleaner_id=cleaner_id,
            status=status,
            order_filter=order_filter or OrderFilter(
                max_mess_level=MessLevel.HIGH,
                min_price=30.0,
                min_client_rating=4.0,
            ),
            schedule_entries=schedule_entries if schedule_entries is not None else [
                ScheduleEntry(day_of_week=WEDNESDAY, start=time(9, 0), end=time(18, 0)),
            ],
        )
    return _make


@pytest.fixture
def make_order() -> Callable[..., Order]:
    """Фабрика заказов (по умолчанию активный и неназначенный)."""
    def _make(
        order_id: int = 42,
        status: OrderStatus = OrderStatus.ACTIVE,
        cleaner_id: str | None = None,
        version: int = 3,
        **overrides: Any,
    ) -> Order:
        data: dict[str, Any] = {
            "order_id": order_id,
            "client_id": "K1",
            "cleaner_id": cleaner_id,
            "status": status,
            "mess_level": MessLevel.HIGH,
            "max_price": 50.0,
            "date": ORDER_DATE,
            "address": "ул. Садовая, 5",
            "version": version,
        }
        data.update(overrides)
        return Order(**data)
    return _make


@pytest.fixture
def order_row() -> dict[str, Any]:
    """Строка таблицы orders."""
    return {
        "order_id": 42,
        "client_id": "K1",
        "cleaner_id": "C1",
        "status": "in_progress",
        "mess_level": 3,
        "max_price": 50.0,
        "date": ORDER_DATE,
        "address": "ул. Садовая, 5",
        "cleaners_opinion_rating": None,
        "cleaners_opinion_comment": None,
        "clients_opinion_rating": 5,
        "clients_opinion_comment": "Отлично",
        "version": 3,
        "created_at": datetime(2025, 6, 1, 12, 0),
    }
