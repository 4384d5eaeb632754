"""Entrypoint do relay Instagram → Telegram.

Inicializa o bootstrap e expõe a aplicação ASGI (FastAPI).

Uso (produção):
    uvicorn app.app:app --host 0.0.0.0 --port 8080

Uso (desenvolvimento):
    uvicorn app.app:app --reload --host 0.0.0.0 --port 8080
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI

from api.routes import create_api_router
from api.routes.instagram.webhook_runtime import drain_background_tasks
from app.bootstrap import initialize_app, validate_runtime_settings
from app.bootstrap.dependencies import create_relay_container
from config.logging import get_logger
from config.settings import (
    get_base_settings,
    get_dedupe_settings,
    get_instagram_settings,
    get_telegram_settings,
)

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

# Inicializar logging ANTES de qualquer import que use logger
initialize_app()

logger = get_logger(__name__)

SHUTDOWN_DRAIN_TIMEOUT_SECONDS = 30.0


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Gerencia ciclo de vida da aplicação.

    Startup:
    - Valida configurações
    - Monta dispatcher, entrega Telegram e clientes HTTP/Redis (app.state)

    Shutdown:
    - Aguarda tasks de webhook pendentes
    - Fecha conexões
    """
    base = get_base_settings()
    logger.info("app_starting", extra={"environment": base.environment})
    validate_runtime_settings()

    container = create_relay_container(
        base=base,
        dedupe=get_dedupe_settings(),
        instagram=get_instagram_settings(),
        telegram=get_telegram_settings(),
    )
    app.state.dispatcher = container.dispatcher
    app.state.telegram_delivery = container.telegram_delivery
    app.state.topic_router = container.topic_router
    app.state.redis_client = container.redis_client

    yield

    logger.info("app_shutting_down")
    await drain_background_tasks(timeout_seconds=SHUTDOWN_DRAIN_TIMEOUT_SECONDS)
    await container.aclose()


def create_app() -> FastAPI:
    """Cria e configura a aplicação FastAPI.

    Returns:
        Aplicação FastAPI configurada.
    """
    fastapi_app = FastAPI(
        title="ig-telegram-relay",
        description="Relay de webhooks Instagram para notificações no Telegram",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Registra todas as rotas
    fastapi_app.include_router(create_api_router())

    logger.info("app_configured")

    return fastapi_app


# Aplicação ASGI exposta para uvicorn
app = create_app()


def main() -> None:
    """Entrypoint para execução direta (desenvolvimento)."""
    import uvicorn

    logger.info("Starting ig-telegram-relay in development mode")
    uvicorn.run(
        "app.app:app",
        host="0.0.0.0",
        port=8080,
        reload=True,
    )


if __name__ == "__main__":
    main()
