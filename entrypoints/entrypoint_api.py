#!/usr/bin/env python3
# entrypoints/entrypoint_api.py
"""
Точка входа для HTTP API маркетплейса клининга.
Порт: settings.deployment.API_PORT
"""

import asyncio

import uvicorn

from cleaning_market.common.constants import TypeMsg
from cleaning_market.common.logger import log_info, setup_logging
from cleaning_market.config import settings


async def main() -> None:
    """Запуск API."""
    setup_logging()
    await log_info(
        f"Запуск API на {settings.deployment.API_HOST}:{settings.deployment.API_PORT}",
        type_msg=TypeMsg.INFO,
    )

    config = uvicorn.Config(
        "cleaning_market.api.app:app",
        host=settings.deployment.API_HOST,
        port=settings.deployment.API_PORT,
        reload=settings.system.DEBUG,
        log_level="debug" if settings.system.DEBUG else "info",
    )

    server = uvicorn.Server(config)
    await server.serve()


if __name__ == "__main__":
    asyncio.run(main())
