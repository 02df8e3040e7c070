# cleaning_market/core/cleaners/service.py
"""
Фасад клинеров.

Проверяет личность и статус клинера, права на действия с заказом,
применяет частичные обновления профиля и подбирает клинеров под заказ.
"""

from __future__ import annotations

from cleaning_market.common.constants import CleanerStatus, TypeMsg
from cleaning_market.common.exceptions import (
    CleanerCannotChangeBannedStatus,
    CleanerNotFound,
    NotCorrectOrderStatus,
    UserNotActive,
    UserWithoutPrivileges,
)
from cleaning_market.common.logger import log_info, log_warning
from cleaning_market.core.cleaners.models import Cleaner, CleanerUpdateDTO, ScheduleEntry
from cleaning_market.core.cleaners.repository import CleanerRepository
from cleaning_market.core.cleaners.specifications import (
    CleanersMatchingOrderSpecification,
    CleanerWithScheduleSpecification,
)
from cleaning_market.core.clients.service import ClientService
from cleaning_market.core.directory.client import DirectoryClient, UserInfo
from cleaning_market.core.orders.models import Opinion, Order
from cleaning_market.core.orders.service import OrderFacade
from cleaning_market.core.orders.state_machine import OrderEvent, OrderStateMachine


class CleanerFacade:
    """Фасад клинеров."""

    def __init__(
        self,
        cleaner_repository: CleanerRepository,
        order_facade: OrderFacade,
        client_service: ClientService,
        directory_client: DirectoryClient,
    ) -> None:
        """
        Args:
            cleaner_repository: Репозиторий клинеров
            order_facade: Фасад заказов
            client_service: Сервис рейтинга клиентов
            directory_client: Клиент справочника пользователей
        """
        self._repo = cleaner_repository
        self._orders = order_facade
        self._clients = client_service
        self._directory = directory_client

    # =========================================================================
    # ЛИЧНОСТЬ И ПРАВА
    # =========================================================================

    async def get_cleaner_info(self, cleaner_id: str) -> Cleaner:
        """
        Клинер вместе с расписанием.

        Raises:
            CleanerNotFound: Клинер не зарегистрирован
        """
        cleaners = await self._repo.list(CleanerWithScheduleSpecification(cleaner_id))
        if not cleaners:
            raise CleanerNotFound(cleaner_id)
        return cleaners[0]

    @staticmethod
    def cleaner_without_privileges(cleaner: Cleaner, order: Order) -> bool:
        """
        True, если клинеру нельзя действовать с заказом:
        клинер забанен или заказ назначен другому клинеру.
        Неназначенный заказ проверку проходит.
        """
        if cleaner.is_banned:
            return True
        return order.cleaner_id is not None and order.cleaner_id != cleaner.cleaner_id

    async def _check_privileges(self, cleaner: Cleaner, order: Order) -> None:
        if self.cleaner_without_privileges(cleaner, order):
            await log_warning(
                f"Клинер {cleaner.cleaner_id} ({cleaner.status.value}) без прав на заказ "
                f"{order.order_id} (назначен: {order.cleaner_id})"
            )
            raise UserWithoutPrivileges(cleaner.cleaner_id)

    # =========================================================================
    # ЗАКАЗЫ КЛИНЕРА
    # =========================================================================

    async def get_assigned_orders(self, cleaner_id: str) -> list[Order]:
        """Заказы, назначенные клинеру."""
        await self.get_cleaner_info(cleaner_id)
        return await self._orders.list_assigned_orders_to(cleaner_id)

    async def confirm_order_completed(self, cleaner_id: str, order_id: int, opinion: Opinion) -> Order:
        """
        Клинер подтверждает выполнение заказа и оставляет отзыв о клиенте.

        Raises:
            CleanerNotFound: Клинер не зарегистрирован
            OrderNotFound: Заказа нет
            UserWithoutPrivileges: Клинер забанен или заказ чужой
            OpinionAlreadyGiven: Отзыв уже оставлен
            NotCorrectOrderStatus: Заказ не в работе у клинера
        """
        cleaner = await self.get_cleaner_info(cleaner_id)
        order = await self._orders.get_order(order_id)
        await self._check_privileges(cleaner, order)

        order.set_cleaners_opinion(opinion)
        closed = await self._orders.close_order(order)

        await log_info(
            f"Клинер {cleaner_id} завершил заказ {order_id} (оценка клиенту: {opinion.rating})",
            type_msg=TypeMsg.INFO,
        )
        return closed

    async def accept_reject_order(self, cleaner_id: str, submitted: Order) -> Order:
        """
        Принятие или отказ от предложенного заказа.

        Клинер присылает снимок заказа: in_progress с собой в качестве
        исполнителя означает принятие, active без исполнителя означает отказ.
        Исходное состояние (сохранённый заказ) должно быть active и назначено
        на этого клинера.

        Права проверяются и по снимку, и по сохранённому заказу. Поэтому отказ
        от заказа, назначенного другому клинеру, даёт UserWithoutPrivileges,
        а не NotCorrectOrderStatus.

        Снимок записывается целиком, как есть (цена, дата, адрес и отзывы
        тоже), compare-and-swap по версии сохранённого заказа.

        Raises:
            CleanerNotFound: Клинер не зарегистрирован
            OrderNotFound: Заказа нет
            UserWithoutPrivileges: Клинер забанен или заказ чужой
            NotCorrectOrderStatus: Недопустимый переход
            OrderVersionConflict: Заказ изменён параллельно
        """
        cleaner = await self.get_cleaner_info(cleaner_id)
        await self._check_privileges(cleaner, submitted)

        stored = await self._orders.get_order(submitted.order_id)
        await self._check_privileges(cleaner, stored)

        state = OrderStateMachine.state_of(stored, cleaner_id)
        event = OrderStateMachine.event_of(submitted, cleaner_id)
        if not OrderStateMachine.can_transition(state, event):
            await log_warning(
                f"Заказ {stored.order_id}: переход {state.value} -> "
                f"{event.value if event else 'нет события'} запрещён для клинера {cleaner_id}"
            )
            raise NotCorrectOrderStatus(stored.status, submitted.status)

        updated = await self._orders.update(submitted, expected_version=stored.version)

        action = "принял" if event == OrderEvent.ACCEPT else "отклонил"
        await log_info(f"Клинер {cleaner_id} {action} заказ {stored.order_id}", type_msg=TypeMsg.INFO)
        return updated

    # =========================================================================
    # ПРОФИЛЬ
    # =========================================================================

    @staticmethod
    def need_update_status(local: CleanerStatus, submitted: CleanerStatus) -> bool:
        """
        Нужно ли менять статус.
        banned -> banned ничего не меняет; вход в бан и выход из бана запрещены.

        Raises:
            CleanerCannotChangeBannedStatus: Одна из сторон banned, другая нет
        """
        if local == submitted:
            return False
        if CleanerStatus.BANNED in (local, submitted):
            raise CleanerCannotChangeBannedStatus(local, submitted)
        return True

    @staticmethod
    def schedule_differs(current: list[ScheduleEntry], submitted: list[ScheduleEntry]) -> bool:
        """Расписания сравниваются по позициям: [A, B] != [B, A]."""
        if len(current) != len(submitted):
            return True
        return any(a != b for a, b in zip(current, submitted))

    async def _ensure_active(self, cleaner: Cleaner) -> None:
        """Зарегистрированного клинера активирует, забаненного не пускает."""
        if cleaner.status == CleanerStatus.REGISTERED:
            cleaner.set_status(CleanerStatus.ACTIVE)
            await self._repo.update(cleaner)
            await log_info(f"Клинер {cleaner.cleaner_id} активирован", type_msg=TypeMsg.INFO)
        elif cleaner.status != CleanerStatus.ACTIVE:
            raise UserNotActive(cleaner.cleaner_id, cleaner.status)

    async def update_cleaner(self, cleaner_id: str, patch: CleanerUpdateDTO) -> Cleaner:
        """
        Создаёт клинера или применяет к нему частичное обновление.

        Учитываются только переданные поля. Каждое изменившееся поле
        применяется своим мутатором и записывается отдельно.

        Raises:
            CleanerCannotChangeBannedStatus: Смена статуса в бан или из бана
            UserNotActive: Забаненный клинер меняет фильтр или расписание
        """
        cleaner = await self._repo.get_by_id(cleaner_id)

        if cleaner is None:
            cleaner = await self._repo.add(patch.to_cleaner(cleaner_id))
            await log_info(
                f"Зарегистрирован клинер {cleaner_id} (статус: {cleaner.status.value})",
                type_msg=TypeMsg.INFO,
            )
            return cleaner

        if patch.has("status") and self.need_update_status(cleaner.status, patch.status):
            old_status = cleaner.status
            cleaner.set_status(patch.status)
            await self._repo.update(cleaner)
            await log_info(
                f"Клинер {cleaner_id}: статус {old_status.value} -> {cleaner.status.value}",
                type_msg=TypeMsg.INFO,
            )

        if patch.has("order_filter") and patch.order_filter != cleaner.order_filter:
            await self._ensure_active(cleaner)
            cleaner.update_order_filter(patch.order_filter)
            await self._repo.update(cleaner)
            await log_info(f"Клинер {cleaner_id}: обновлён фильтр заказов", type_msg=TypeMsg.INFO)

        if patch.has("schedule_entries") and self.schedule_differs(
            cleaner.schedule_entries, patch.schedule_entries
        ):
            await self._ensure_active(cleaner)
            cleaner.update_schedule(patch.schedule_entries)
            await self._repo.update(cleaner)
            await log_info(
                f"Клинер {cleaner_id}: обновлено расписание ({len(cleaner.schedule_entries)} окон)",
                type_msg=TypeMsg.INFO,
            )

        return cleaner

    async def ban_cleaner(self, cleaner_id: str) -> Cleaner:
        """Административный бан. Повторный бан ничего не меняет."""
        cleaner = await self.get_cleaner_info(cleaner_id)
        if cleaner.is_banned:
            return cleaner

        cleaner.set_status(CleanerStatus.BANNED)
        await self._repo.update(cleaner)
        await log_warning(f"Клинер {cleaner_id} забанен")
        return cleaner

    async def unban_cleaner(self, cleaner_id: str) -> Cleaner:
        """Снимает бан; клинер возвращается в registered и активируется заново."""
        cleaner = await self.get_cleaner_info(cleaner_id)
        if not cleaner.is_banned:
            return cleaner

        cleaner.set_status(CleanerStatus.REGISTERED)
        await self._repo.update(cleaner)
        await log_info(f"С клинера {cleaner_id} снят бан", type_msg=TypeMsg.INFO)
        return cleaner

    # =========================================================================
    # ПОДБОР
    # =========================================================================

    async def list_cleaners_matching_order(self, order_id: int) -> list[Cleaner]:
        """
        Клинеры, которым подходит заказ.
        Без ранжирования и лимита.

        Raises:
            OrderNotFound: Заказа нет
        """
        order = await self._orders.get_order(order_id)
        client_rating = await self._clients.get_average_client_rating(order.client_id)

        spec = CleanersMatchingOrderSpecification(
            date=order.date,
            mess_level=order.mess_level,
            max_price=order.max_price,
            client_rating=client_rating,
        )
        cleaners = await self._repo.list(spec)

        await log_info(
            f"Заказ {order_id}: подходящих клинеров {len(cleaners)} "
            f"(рейтинг клиента: {client_rating if client_rating is not None else 'нет'})",
            type_msg=TypeMsg.DEBUG,
        )
        return cleaners

    async def list_cleaners_matching_order_as_users(self, order_id: int) -> list[UserInfo]:
        """
        То же, что list_cleaners_matching_order, но профилями из справочника.

        Raises:
            OrderNotFound: Заказа нет
            DirectoryUnavailable: Справочник недоступен
        """
        cleaners = await self.list_cleaners_matching_order(order_id)
        return await self._directory.get_user_info([cleaner.cleaner_id for cleaner in cleaners])
