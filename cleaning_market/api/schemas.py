# cleaning_market/api/schemas.py
"""
Модели ответов HTTP API.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Ответ с доменной ошибкой."""

    error: str
    detail: str
    context: dict[str, Any] = Field(default_factory=dict)


class HealthStatus(BaseModel):
    """Статус здоровья сервиса."""

    service: str
    status: str = "healthy"  # healthy, degraded
    version: str | None = None
    dependencies: dict[str, str] = Field(default_factory=dict)
