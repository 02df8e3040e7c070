# cleaning_market/infra/__init__.py
"""
Инфраструктурный слой: PostgreSQL и Redis.
"""

from cleaning_market.infra.database import DatabaseManager, get_db
from cleaning_market.infra.redis_client import RedisClient, get_redis

__all__ = [
    "DatabaseManager",
    "get_db",
    "RedisClient",
    "get_redis",
]
