"""Aplicação ASGI do Contact Relay.

Monta o FastAPI com CORS dinâmico, handlers de erro e lifespan que
valida settings, abre o Redis quando KV_BACKEND=redis e drena tasks de
background no shutdown.

Execução:
    uvicorn app.app:app --host 0.0.0.0 --port 8080
    contact-relay  # usa PORT de BaseSettings
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from api.middleware import DynamicCorsMiddleware
from api.routes import create_api_router
from api.routes.relay.runtime_tasks import drain_background_tasks
from app.bootstrap import (
    get_origin_pattern_provider,
    initialize_app,
    validate_runtime_settings,
)
from app.bootstrap.clients import create_async_redis_client
from config.logging import get_logger
from config.settings import get_base_settings, get_store_settings
from utils.errors import InfrastructureError

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Callable

    from app.protocols import OriginPatternProviderProtocol

# Inicializar logging e dependências ANTES de qualquer import que use logger
initialize_app()

logger = get_logger(__name__)

SERVICE = "contact-relay"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Gerencia ciclo de vida da aplicação.

    Startup:
    - Valida configurações
    - Inicializa cliente Redis (quando KV_BACKEND=redis)

    Shutdown:
    - Aguarda tasks de background (cache de migração)
    - Fecha conexões gracefully
    """
    logger.info("app_starting", extra={"service": SERVICE})
    validate_runtime_settings()
    app.state.redis_client = None

    if get_store_settings().backend == "redis":
        try:
            app.state.redis_client = create_async_redis_client()
        except Exception as exc:
            logger.warning("redis_client_not_ready", extra={"error_type": type(exc).__name__})

    yield

    logger.info("app_shutting_down", extra={"service": SERVICE})
    await drain_background_tasks(timeout_seconds=30.0)
    redis_client = getattr(app.state, "redis_client", None)
    if redis_client is not None:
        close_async = getattr(redis_client, "aclose", None)
        close_sync = getattr(redis_client, "close", None)
        if callable(close_async):
            await close_async()
        elif callable(close_sync):
            await close_sync()


async def _not_found_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(content={"status": "error", "error": "not_found"}, status_code=404)


async def _infrastructure_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "infrastructure_error",
        extra={"path": request.url.path, "error_type": type(exc).__name__},
    )
    return JSONResponse(content={"status": "error", "error": "internal_error"}, status_code=500)


def create_app(
    origin_provider_getter: Callable[[], OriginPatternProviderProtocol] = get_origin_pattern_provider,
) -> FastAPI:
    """Cria e configura a aplicação FastAPI.

    Args:
        origin_provider_getter: Fonte dos padrões de origem usada pelo CORS.

    Returns:
        Aplicação FastAPI configurada.
    """
    fastapi_app = FastAPI(
        title="Contact Relay",
        description="Relay de formulários de contato para o Telegram",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # CORS dinâmico: mesma lista de origens do pipeline de admissão
    fastapi_app.add_middleware(
        DynamicCorsMiddleware,
        provider_getter=origin_provider_getter,
    )

    fastapi_app.add_exception_handler(404, _not_found_handler)
    fastapi_app.add_exception_handler(InfrastructureError, _infrastructure_error_handler)

    # Registra todas as rotas
    fastapi_app.include_router(create_api_router())

    logger.info("app_configured", extra={"service": SERVICE})

    return fastapi_app


# Aplicação ASGI exposta para uvicorn
app = create_app()


def main() -> None:
    """Entrypoint para execução direta (desenvolvimento)."""
    import uvicorn

    logger.info("Starting Contact Relay in development mode")
    uvicorn.run(
        "app.app:app",
        host="0.0.0.0",
        port=get_base_settings().port,
        reload=True,
    )


if __name__ == "__main__":
    main()
