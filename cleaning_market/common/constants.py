# cleaning_market/common/constants.py
"""
Общие константы и перечисления.
"""

from enum import Enum, IntEnum


class TypeMsg(str, Enum):
    """Типы сообщений для логирования."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class CleanerStatus(str, Enum):
    """Статусы клинера."""
    REGISTERED = "registered"
    ACTIVE = "active"
    BANNED = "banned"


class OrderStatus(str, Enum):
    """Статусы заказа."""
    CREATED = "created"
    ACTIVE = "active"
    IN_PROGRESS = "in_progress"
    CLOSED = "closed"


class MessLevel(IntEnum):
    """Степень загрязнения (объём работы)."""
    LOW = 1
    MODERATE = 2
    HIGH = 3
    DISASTER = 4
