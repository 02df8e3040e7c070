# cleaning_market/api/routes.py
"""
Маршруты HTTP API.
Тонкий слой: разбор запроса и вызов фасадов. Доменные ошибки
переводятся в HTTP ответы обработчиками в app.py.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from cleaning_market.api.dependencies import get_cleaner_facade, get_client_facade, get_order_facade
from cleaning_market.api.schemas import ErrorResponse
from cleaning_market.core.cleaners.models import Cleaner, CleanerUpdateDTO
from cleaning_market.core.cleaners.service import CleanerFacade
from cleaning_market.core.clients.models import Client
from cleaning_market.core.clients.service import ClientFacade
from cleaning_market.core.directory.client import UserInfo
from cleaning_market.core.orders.models import Opinion, Order, OrderCreateDTO
from cleaning_market.core.orders.service import OrderFacade


router = APIRouter()

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Сущность не найдена"}}
_FORBIDDEN = {403: {"model": ErrorResponse, "description": "Нет прав"}}
_CONFLICT = {409: {"model": ErrorResponse, "description": "Недопустимый переход"}}


# =============================================================================
# CLEANERS
# =============================================================================

@router.get("/cleaners/{cleaner_id}", response_model=Cleaner, tags=["Cleaners"], responses=_NOT_FOUND)
async def get_cleaner(
    cleaner_id: str,
    facade: CleanerFacade = Depends(get_cleaner_facade),
) -> Cleaner:
    """Профиль клинера с расписанием."""
    return await facade.get_cleaner_info(cleaner_id)


@router.put("/cleaners/{cleaner_id}", response_model=Cleaner, tags=["Cleaners"], responses=_CONFLICT)
async def update_cleaner(
    cleaner_id: str,
    patch: CleanerUpdateDTO,
    facade: CleanerFacade = Depends(get_cleaner_facade),
) -> Cleaner:
    """Регистрация или частичное обновление профиля клинера."""
    return await facade.update_cleaner(cleaner_id, patch)


@router.post("/cleaners/{cleaner_id}/ban", response_model=Cleaner, tags=["Cleaners"], responses=_NOT_FOUND)
async def ban_cleaner(
    cleaner_id: str,
    facade: CleanerFacade = Depends(get_cleaner_facade),
) -> Cleaner:
    return await facade.ban_cleaner(cleaner_id)


@router.post("/cleaners/{cleaner_id}/unban", response_model=Cleaner, tags=["Cleaners"], responses=_NOT_FOUND)
async def unban_cleaner(
    cleaner_id: str,
    facade: CleanerFacade = Depends(get_cleaner_facade),
) -> Cleaner:
    return await facade.unban_cleaner(cleaner_id)


# =============================================================================
# CLEANER ORDERS
# =============================================================================

@router.get("/cleaners/{cleaner_id}/orders", response_model=list[Order], tags=["Cleaner orders"])
async def get_assigned_orders(
    cleaner_id: str,
    facade: CleanerFacade = Depends(get_cleaner_facade),
) -> list[Order]:
    return await facade.get_assigned_orders(cleaner_id)


@router.put(
    "/cleaners/{cleaner_id}/orders/{order_id}",
    response_model=Order,
    tags=["Cleaner orders"],
    responses={**_NOT_FOUND, **_FORBIDDEN, **_CONFLICT},
)
async def accept_reject_order(
    cleaner_id: str,
    order_id: int,
    submitted: Order,
    facade: CleanerFacade = Depends(get_cleaner_facade),
) -> Order:
    """Принятие (in_progress на себя) или отказ (active без клинера) от заказа."""
    if submitted.order_id != order_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="order_id в пути и в теле запроса не совпадают",
        )
    return await facade.accept_reject_order(cleaner_id, submitted)


@router.post(
    "/cleaners/{cleaner_id}/orders/{order_id}/complete",
    response_model=Order,
    tags=["Cleaner orders"],
    responses={**_NOT_FOUND, **_FORBIDDEN, **_CONFLICT},
)
async def confirm_order_completed(
    cleaner_id: str,
    order_id: int,
    opinion: Opinion,
    facade: CleanerFacade = Depends(get_cleaner_facade),
) -> Order:
    """Подтверждение выполнения заказа с отзывом о клиенте."""
    return await facade.confirm_order_completed(cleaner_id, order_id, opinion)


# =============================================================================
# ORDERS
# =============================================================================

@router.post(
    "/orders",
    response_model=Order,
    status_code=status.HTTP_201_CREATED,
    tags=["Orders"],
)
async def create_order(
    dto: OrderCreateDTO,
    facade: OrderFacade = Depends(get_order_facade),
) -> Order:
    """Новый заказ клиента (статус created)."""
    return await facade.create_order(dto)


@router.get("/orders/{order_id}", response_model=Order, tags=["Orders"], responses=_NOT_FOUND)
async def get_order(
    order_id: int,
    facade: OrderFacade = Depends(get_order_facade),
) -> Order:
    return await facade.get_order(order_id)


@router.post(
    "/orders/{order_id}/publish",
    response_model=Order,
    tags=["Orders"],
    responses={**_NOT_FOUND, **_CONFLICT},
)
async def publish_order(
    order_id: int,
    facade: OrderFacade = Depends(get_order_facade),
) -> Order:
    """Открывает заказ для подбора (created -> active)."""
    return await facade.publish_order(order_id)


@router.post(
    "/orders/{order_id}/offer/{cleaner_id}",
    response_model=Order,
    tags=["Orders"],
    responses={**_NOT_FOUND, **_CONFLICT},
)
async def offer_order(
    order_id: int,
    cleaner_id: str,
    facade: OrderFacade = Depends(get_order_facade),
) -> Order:
    """Предлагает открытый заказ клинеру; дальше он принимает или отказывается."""
    return await facade.offer_order(order_id, cleaner_id)


# =============================================================================
# MATCHING
# =============================================================================

@router.get(
    "/orders/{order_id}/matching-cleaners",
    response_model=list[Cleaner],
    tags=["Matching"],
    responses=_NOT_FOUND,
)
async def list_matching_cleaners(
    order_id: int,
    facade: CleanerFacade = Depends(get_cleaner_facade),
) -> list[Cleaner]:
    return await facade.list_cleaners_matching_order(order_id)


@router.get(
    "/orders/{order_id}/matching-cleaners/users",
    response_model=list[UserInfo],
    tags=["Matching"],
    responses={**_NOT_FOUND, 502: {"model": ErrorResponse, "description": "Справочник недоступен"}},
)
async def list_matching_cleaners_as_users(
    order_id: int,
    facade: CleanerFacade = Depends(get_cleaner_facade),
) -> list[UserInfo]:
    return await facade.list_cleaners_matching_order_as_users(order_id)


# =============================================================================
# CLIENTS
# =============================================================================

@router.get("/clients", response_model=list[Client], tags=["Clients"])
async def list_clients(facade: ClientFacade = Depends(get_client_facade)) -> list[Client]:
    return await facade.get_clients()


@router.post(
    "/clients",
    response_model=Client,
    status_code=status.HTTP_201_CREATED,
    tags=["Clients"],
)
async def add_client(
    client: Client,
    facade: ClientFacade = Depends(get_client_facade),
) -> Client:
    return await facade.add_client(client)


@router.get("/clients/{client_id}", response_model=Client, tags=["Clients"], responses=_NOT_FOUND)
async def get_client(
    client_id: str,
    facade: ClientFacade = Depends(get_client_facade),
) -> Client:
    return await facade.get_client(client_id)


@router.delete(
    "/clients/{client_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["Clients"],
    responses=_NOT_FOUND,
)
async def delete_client(
    client_id: str,
    facade: ClientFacade = Depends(get_client_facade),
) -> None:
    """Удаление клиента вместе с его заказами."""
    await facade.delete_client(client_id)
