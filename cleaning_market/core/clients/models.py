# cleaning_market/core/clients/models.py
"""
Модели данных клиентов.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Client(BaseModel):
    """Модель клиента (заказчика уборки)."""

    model_config = ConfigDict(from_attributes=True)

    client_id: str = Field(..., description="ID клиента")
    created_at: datetime = Field(default_factory=datetime.utcnow, description="Дата регистрации")
