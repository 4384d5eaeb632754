"""Agregador de rotas: registra todos os routers por canal.

Uso:
    from api.routes import create_api_router

    app = FastAPI()
    app.include_router(create_api_router())
"""

from __future__ import annotations

from fastapi import APIRouter

from api.routes.health.router import router as health_router
from api.routes.instagram.router import router as instagram_router
from api.routes.telegram.router import router as telegram_router


def create_api_router() -> APIRouter:
    """Cria router principal com todos os sub-routers registrados.

    Returns:
        APIRouter configurado com todos os endpoints.
    """
    api_router = APIRouter()

    # Health checks (sem prefixo para /health e /ready na raiz)
    api_router.include_router(health_router, tags=["health"])

    # Instagram: /instagram/webhook
    api_router.include_router(instagram_router, prefix="/instagram", tags=["instagram"])

    # Telegram: /telegram/send-message
    api_router.include_router(telegram_router, prefix="/telegram", tags=["telegram"])

    return api_router
