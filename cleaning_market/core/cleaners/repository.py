# cleaning_market/core/cleaners/repository.py
"""
Репозиторий для работы с клинерами в БД.
Клинер хранится в двух таблицах: cleaners и cleaner_schedule_entries.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timezone
from typing import Optional

from asyncpg import Connection

from cleaning_market.common.constants import CleanerStatus, MessLevel, TypeMsg
from cleaning_market.common.logger import log_info
from cleaning_market.core.cleaners.models import Cleaner, OrderFilter, ScheduleEntry
from cleaning_market.core.cleaners.specifications import (
    CleanerWithScheduleSpecification,
    Specification,
)
from cleaning_market.infra.database import DatabaseManager


class CleanerRepository:
    """Репозиторий клинеров."""

    def __init__(self, db: DatabaseManager) -> None:
        """
        Args:
            db: Менеджер базы данных (Dependency Injection)
        """
        self._db = db

    async def get_by_id(self, cleaner_id: str) -> Optional[Cleaner]:
        """
        Получает клинера вместе с расписанием.

        Returns:
            Клинер или None
        """
        cleaners = await self.list(CleanerWithScheduleSpecification(cleaner_id))
        return cleaners[0] if cleaners else None

    async def list(self, spec: Specification) -> list[Cleaner]:
        """Клинеры, удовлетворяющие спецификации, с расписаниями."""
        where, params = spec.to_sql(1)
        rows = await self._db.fetch(
            f"""
            SELECT c.cleaner_id, c.status, c.max_mess_level, c.min_price, c.min_client_rating
            FROM cleaners c
            WHERE {where}
            ORDER BY c.cleaner_id
            """,
            *params,
        )
        if not rows:
            return []

        schedules = await self._load_schedules([row["cleaner_id"] for row in rows])
        return [self._row_to_cleaner(row, schedules.get(row["cleaner_id"], [])) for row in rows]

    async def add(self, cleaner: Cleaner) -> Cleaner:
        """Сохраняет нового клинера вместе с расписанием."""
        now = datetime.now(timezone.utc)

        async with self._db.transaction() as conn:
            await conn.execute(
                """
                INSERT INTO cleaners (cleaner_id, status, max_mess_level, min_price,
                                      min_client_rating, created_at, updated_at)
                VALUES ($1, $2, $3, $4, $5, $6, $6)
                """,
                cleaner.cleaner_id,
                cleaner.status.value,
                int(cleaner.order_filter.max_mess_level),
                cleaner.order_filter.min_price,
                cleaner.order_filter.min_client_rating,
                now,
            )
            await self._write_schedule(conn, cleaner)

        await log_info(f"Клинер {cleaner.cleaner_id} сохранён", type_msg=TypeMsg.DEBUG)
        return cleaner

    async def update(self, cleaner: Cleaner) -> None:
        """Перезаписывает статус, фильтр и расписание клинера."""
        async with self._db.transaction() as conn:
            await conn.execute(
                """
                UPDATE cleaners
                SET status = $2, max_mess_level = $3, min_price = $4,
                    min_client_rating = $5, updated_at = $6
                WHERE cleaner_id = $1
                """,
                cleaner.cleaner_id,
                cleaner.status.value,
                int(cleaner.order_filter.max_mess_level),
                cleaner.order_filter.min_price,
                cleaner.order_filter.min_client_rating,
                datetime.now(timezone.utc),
            )
            await conn.execute(
                "DELETE FROM cleaner_schedule_entries WHERE cleaner_id = $1",
                cleaner.cleaner_id,
            )
            await self._write_schedule(conn, cleaner)

    async def delete(self, cleaner: Cleaner) -> None:
        """Удаляет клинера (расписание удаляется каскадно)."""
        await self._db.execute("DELETE FROM cleaners WHERE cleaner_id = $1", cleaner.cleaner_id)
        await log_info(f"Клинер {cleaner.cleaner_id} удалён", type_msg=TypeMsg.DEBUG)

    # =========================================================================
    # РАСПИСАНИЕ
    # =========================================================================

    @staticmethod
    async def _write_schedule(conn: Connection, cleaner: Cleaner) -> None:
        if not cleaner.schedule_entries:
            return
        await conn.executemany(
            """
            INSERT INTO cleaner_schedule_entries
                (cleaner_id, position, day_of_week, start_time, end_time)
            VALUES ($1, $2, $3, $4, $5)
            """,
            [
                (cleaner.cleaner_id, position, entry.day_of_week, entry.start, entry.end)
                for position, entry in enumerate(cleaner.schedule_entries)
            ],
        )

    async def _load_schedules(self, cleaner_ids: list[str]) -> dict[str, list[ScheduleEntry]]:
        rows = await self._db.fetch(
            """
            SELECT cleaner_id, day_of_week, start_time, end_time
            FROM cleaner_schedule_entries
            WHERE cleaner_id = ANY($1::text[])
            ORDER BY cleaner_id, position
            """,
            cleaner_ids,
        )

        schedules: dict[str, list[ScheduleEntry]] = defaultdict(list)
        for row in rows:
            schedules[row["cleaner_id"]].append(
                ScheduleEntry(
                    day_of_week=row["day_of_week"],
                    start=row["start_time"],
                    end=row["end_time"],
                )
            )
        return schedules

    @staticmethod
    def _row_to_cleaner(row, schedule_entries: list[ScheduleEntry]) -> Cleaner:
        """Конвертирует строку БД в модель Cleaner."""
        return Cleaner(
            cleaner_id=row["cleaner_id"],
            status=CleanerStatus(row["status"]),
            order_filter=OrderFilter(
                max_mess_level=MessLevel(row["max_mess_level"]),
                min_price=row["min_price"],
                min_client_rating=row["min_client_rating"],
            ),
            schedule_entries=schedule_entries,
        )
