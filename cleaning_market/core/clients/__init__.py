# cleaning_market/core/clients/__init__.py
"""
Домен клиентов.
"""

from cleaning_market.core.clients.models import Client
from cleaning_market.core.clients.repository import ClientRepository
from cleaning_market.core.clients.service import ClientFacade, ClientService

__all__ = [
    "Client",
    "ClientRepository",
    "ClientFacade",
    "ClientService",
]
