# cleaning_market/__init__.py
"""
Маркетплейс клининга: заказы клиентов и исполнители-клинеры.
"""

__version__ = "1.0.0"
