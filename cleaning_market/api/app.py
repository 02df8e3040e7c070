# cleaning_market/api/app.py
"""
FastAPI приложение маркетплейса клининга.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cleaning_market.api.dependencies import close_dependencies, init_dependencies
from cleaning_market.api.routes import router
from cleaning_market.api.schemas import ErrorResponse, HealthStatus
from cleaning_market.common.constants import TypeMsg
from cleaning_market.common.exceptions import (
    CleanerCannotChangeBannedStatus,
    CleanerNotFound,
    ClientNotFound,
    DirectoryUnavailable,
    DomainError,
    NotCorrectOrderStatus,
    OpinionAlreadyGiven,
    OrderNotFound,
    OrderVersionConflict,
    UserNotActive,
    UserWithoutPrivileges,
)
from cleaning_market.common.logger import log_info
from cleaning_market.config import settings
from cleaning_market.infra.database import get_db
from cleaning_market.infra.redis_client import get_redis


# Доменная ошибка -> HTTP статус
ERROR_STATUS_CODES: dict[type[DomainError], int] = {
    CleanerNotFound: status.HTTP_404_NOT_FOUND,
    ClientNotFound: status.HTTP_404_NOT_FOUND,
    OrderNotFound: status.HTTP_404_NOT_FOUND,
    UserWithoutPrivileges: status.HTTP_403_FORBIDDEN,
    NotCorrectOrderStatus: status.HTTP_409_CONFLICT,
    CleanerCannotChangeBannedStatus: status.HTTP_409_CONFLICT,
    UserNotActive: status.HTTP_409_CONFLICT,
    OpinionAlreadyGiven: status.HTTP_409_CONFLICT,
    OrderVersionConflict: status.HTTP_409_CONFLICT,
    DirectoryUnavailable: status.HTTP_502_BAD_GATEWAY,
}


# =============================================================================
# LIFESPAN
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Жизненный цикл приложения."""
    await log_info(f"{settings.system.PROJECT_NAME} API запускается...", type_msg=TypeMsg.INFO)
    await init_dependencies()

    yield

    await close_dependencies()
    await log_info(f"{settings.system.PROJECT_NAME} API остановлен", type_msg=TypeMsg.INFO)


# =============================================================================
# ПРИЛОЖЕНИЕ
# =============================================================================

app = FastAPI(
    title="Cleaning Market API",
    description="Подбор клинеров под заказы и жизненный цикл заказа",
    version=settings.system.VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.system.is_development else settings.cors.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router, prefix=settings.deployment.API_PREFIX)


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Переводит доменную ошибку в JSON ответ."""
    status_code = ERROR_STATUS_CODES.get(type(exc), status.HTTP_400_BAD_REQUEST)
    await log_info(
        f"{request.method} {request.url.path} -> {status_code}: {exc}",
        type_msg=TypeMsg.WARNING if status_code < 500 else TypeMsg.ERROR,
    )
    body = ErrorResponse(error=exc.code, detail=exc.message, context=exc.context)
    return JSONResponse(status_code=status_code, content=body.model_dump())


# =============================================================================
# HEALTH CHECK
# =============================================================================

@app.get("/health", response_model=HealthStatus, tags=["Health"])
async def health_check() -> HealthStatus:
    """Проверка здоровья сервиса."""
    deps = {
        "postgres": "healthy" if await get_db().health_check() else "unhealthy",
        "redis": "healthy" if await get_redis().health_check() else "unhealthy",
    }
    overall = "healthy" if all(v == "healthy" for v in deps.values()) else "degraded"

    return HealthStatus(
        service=settings.system.PROJECT_NAME,
        status=overall,
        version=settings.system.VERSION,
        dependencies=deps,
    )
