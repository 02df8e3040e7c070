# cleaning_market/core/directory/__init__.py
"""
Справочник пользователей (внешний сервис).
"""

from cleaning_market.core.directory.client import DirectoryClient, UserInfo

__all__ = ["DirectoryClient", "UserInfo"]
