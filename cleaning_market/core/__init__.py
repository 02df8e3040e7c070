# cleaning_market/core/__init__.py
"""
Доменный слой (Core Domain).
Бизнес-логика маркетплейса: клинеры, заказы, клиенты.
"""

from cleaning_market.core.cleaners import Cleaner, CleanerFacade
from cleaning_market.core.clients import Client, ClientFacade, ClientService
from cleaning_market.core.orders import Order, OrderFacade

__all__ = [
    "Cleaner",
    "CleanerFacade",
    "Client",
    "ClientFacade",
    "ClientService",
    "Order",
    "OrderFacade",
]
