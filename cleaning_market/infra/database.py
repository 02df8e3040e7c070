# cleaning_market/infra/database.py
"""
Менеджер базы данных PostgreSQL.
Пул соединений asyncpg, повтор запросов при обрыве соединения, транзакции.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from functools import wraps
from typing import TYPE_CHECKING, Any, AsyncGenerator, Callable, TypeVar

import asyncpg
from asyncpg import Connection, Pool, Record

from cleaning_market.common.constants import TypeMsg
from cleaning_market.common.logger import log_error, log_info

if TYPE_CHECKING:
    from cleaning_market.config.loader import DatabaseSettings

T = TypeVar("T")

# Ошибки, после которых запрос имеет смысл повторить
CONNECTION_ERRORS: tuple[type[BaseException], ...] = (
    asyncpg.PostgresConnectionError,
    asyncpg.InterfaceError,
    OSError,
)


def _retry_options(max_attempts: int | None, delay: float | None) -> tuple[int, float]:
    """Явные значения или DB_RETRY_ATTEMPTS / DB_RETRY_DELAY из настроек."""
    if max_attempts is not None and delay is not None:
        return max_attempts, delay

    from cleaning_market.config import settings
    return (
        max_attempts if max_attempts is not None else settings.database.DB_RETRY_ATTEMPTS,
        delay if delay is not None else settings.database.DB_RETRY_DELAY,
    )


def retry_on_connection_error(
    max_attempts: int | None = None,
    delay: float | None = None,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Повторяет корутину при ошибках подключения.
    Ошибки самих запросов (ограничения, синтаксис) пробрасываются сразу.

    Args:
        max_attempts: Число попыток (None: DB_RETRY_ATTEMPTS)
        delay: Базовая пауза между попытками, секунды (None: DB_RETRY_DELAY); растёт линейно
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            attempts, base_delay = _retry_options(max_attempts, delay)
            attempt = 1
            while True:
                try:
                    return await func(*args, **kwargs)
                except CONNECTION_ERRORS as e:
                    if attempt >= attempts:
                        await log_error(f"БД недоступна, попыток: {attempts}: {e}")
                        raise
                    await log_info(
                        f"Ошибка подключения к БД (попытка {attempt}/{attempts}): {e}",
                        type_msg=TypeMsg.WARNING,
                    )
                    await asyncio.sleep(base_delay * attempt)
                    attempt += 1

        return wrapper  # type: ignore[return-value]

    return decorator


class DatabaseManager:
    """
    Пул соединений PostgreSQL, один на процесс (Singleton).

    Example:
        db = get_db()
        await db.connect()
        rows = await db.fetch("SELECT * FROM cleaners")
    """

    _instance: DatabaseManager | None = None
    _pool: Pool | None = None

    def __new__(cls) -> DatabaseManager:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._pool = None
        return cls._instance

    @property
    def pool(self) -> Pool:
        if self._pool is None:
            raise RuntimeError("Пул соединений не инициализирован. Вызовите connect() сначала.")
        return self._pool

    @property
    def is_connected(self) -> bool:
        return self._pool is not None

    @retry_on_connection_error()
    async def connect(self, config: DatabaseSettings | None = None) -> None:
        """
        Создаёт пул. Повторный вызов ничего не делает.

        Args:
            config: Секция настроек БД (None: settings.database)
        """
        if self.is_connected:
            return

        if config is None:
            from cleaning_market.config import settings
            config = settings.database

        self._pool = await asyncpg.create_pool(
            dsn=config.dsn,
            min_size=config.DB_MIN_POOL_SIZE,
            max_size=config.DB_MAX_POOL_SIZE,
            command_timeout=config.DB_COMMAND_TIMEOUT,
        )
        await log_info(
            f"PostgreSQL подключён: {config.DB_HOST}:{config.DB_PORT}/{config.DB_NAME} "
            f"(пул {config.DB_MIN_POOL_SIZE}-{config.DB_MAX_POOL_SIZE})",
            type_msg=TypeMsg.INFO,
        )

    async def disconnect(self) -> None:
        if self._pool is None:
            return
        pool, self._pool = self._pool, None
        await pool.close()
        await log_info("Пул PostgreSQL закрыт", type_msg=TypeMsg.INFO)

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[Connection, None]:
        """Соединение с открытой транзакцией: commit при выходе, rollback при исключении."""
        async with self.pool.acquire() as conn:
            async with conn.transaction():
                yield conn

    # =========================================================================
    # ЗАПРОСЫ ВНЕ ТРАНЗАКЦИИ
    # =========================================================================

    @retry_on_connection_error()
    async def _run(self, method: str, query: str, *args: Any, **kwargs: Any) -> Any:
        """Берёт соединение из пула и вызывает на нём метод asyncpg."""
        async with self.pool.acquire() as conn:
            return await getattr(conn, method)(query, *args, **kwargs)

    async def execute(self, query: str, *args: Any) -> str:
        """Статус команды, например "UPDATE 1"."""
        return await self._run("execute", query, *args)

    async def fetch(self, query: str, *args: Any) -> list[Record]:
        return await self._run("fetch", query, *args)

    async def fetchrow(self, query: str, *args: Any) -> Record | None:
        return await self._run("fetchrow", query, *args)

    async def fetchval(self, query: str, *args: Any, column: int = 0) -> Any:
        return await self._run("fetchval", query, *args, column=column)

    async def health_check(self) -> bool:
        try:
            return await self.fetchval("SELECT 1") == 1
        except (RuntimeError, asyncpg.PostgresError, *CONNECTION_ERRORS) as e:
            await log_error(f"Health check PostgreSQL failed: {e}")
            return False


def affected_rows(status: str) -> int:
    """
    Число затронутых строк из статуса команды asyncpg.

    >>> affected_rows("UPDATE 1")
    1
    """
    try:
        return int(status.rsplit(" ", 1)[-1])
    except (ValueError, AttributeError, IndexError):
        return 0


def get_db() -> DatabaseManager:
    return DatabaseManager()


async def init_db() -> None:
    """Подключается по настройкам и применяет migrations/init.sql."""
    from cleaning_market.config import settings
    from cleaning_market.config.loader import get_project_root

    db = get_db()
    await db.connect(settings.database)

    schema_path = get_project_root() / "migrations" / "init.sql"
    if not schema_path.exists():
        await log_error(f"Файл схемы БД не найден: {schema_path}")
        return

    await db.execute(schema_path.read_text(encoding="utf-8"))
    await log_info("Схема БД применена", type_msg=TypeMsg.INFO)


async def close_db() -> None:
    await get_db().disconnect()
