"""Testes dos endpoints de health e readiness."""

from __future__ import annotations

import asyncio
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from starlette.requests import Request

from api.routes.health import router as health_routes
from api.routes.health.router import health_check, readiness_check


def _build_request_with_state(state: SimpleNamespace) -> Request:
    scope = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "GET",
        "path": "/ready",
        "raw_path": b"/ready",
        "query_string": b"",
        "headers": [],
        "app": SimpleNamespace(state=state),
    }

    async def _receive() -> dict[str, object]:
        return {"type": "http.request", "body": b"", "more_body": False}

    return Request(scope, _receive)


@pytest.mark.asyncio
async def test_health_reports_service_name(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        health_routes,
        "get_base_settings",
        lambda: SimpleNamespace(service_name="ig-telegram-relay"),
    )

    response = await health_check()

    assert response.status == "healthy"
    assert response.service == "ig-telegram-relay"


@pytest.mark.asyncio
async def test_readiness_not_ready_without_telegram() -> None:
    request = _build_request_with_state(SimpleNamespace(telegram_delivery=None, redis_client=None))

    response = await readiness_check(request)
    payload = json.loads(response.body.decode("utf-8"))

    assert response.status_code == 503
    assert payload["status"] == "not_ready"
    assert payload["checks"]["telegram"]["status"] == "failed"
    assert payload["checks"]["redis"]["status"] == "skipped"


@pytest.mark.asyncio
async def test_readiness_ready_with_memory_dedupe() -> None:
    request = _build_request_with_state(
        SimpleNamespace(telegram_delivery=SimpleNamespace(is_configured=True), redis_client=None)
    )

    response = await readiness_check(request)
    payload = json.loads(response.body.decode("utf-8"))

    assert response.status_code == 200
    assert payload["status"] == "ready"


@pytest.mark.asyncio
async def test_readiness_ready_when_redis_answers() -> None:
    redis_client = MagicMock()
    redis_client.ping = AsyncMock(return_value=True)
    request = _build_request_with_state(
        SimpleNamespace(
            telegram_delivery=SimpleNamespace(is_configured=True),
            redis_client=redis_client,
        )
    )

    response = await readiness_check(request)
    payload = json.loads(response.body.decode("utf-8"))

    assert response.status_code == 200
    assert payload["checks"]["redis"]["status"] == "ok"


@pytest.mark.asyncio
async def test_readiness_fails_when_redis_times_out(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(health_routes, "REDIS_PING_TIMEOUT_SECONDS", 0.01)

    async def _slow_ping() -> bool:
        await asyncio.sleep(1)
        return True

    redis_client = MagicMock()
    redis_client.ping = _slow_ping
    request = _build_request_with_state(
        SimpleNamespace(
            telegram_delivery=SimpleNamespace(is_configured=True),
            redis_client=redis_client,
        )
    )

    response = await readiness_check(request)
    payload = json.loads(response.body.decode("utf-8"))

    assert response.status_code == 503
    assert payload["checks"]["redis"] == {"status": "failed", "latency_ms": None, "error": "timeout"}


@pytest.mark.asyncio
async def test_readiness_fails_when_redis_errors() -> None:
    redis_client = MagicMock()
    redis_client.ping = AsyncMock(side_effect=ConnectionError("refused"))
    request = _build_request_with_state(
        SimpleNamespace(
            telegram_delivery=SimpleNamespace(is_configured=True),
            redis_client=redis_client,
        )
    )

    response = await readiness_check(request)
    payload = json.loads(response.body.decode("utf-8"))

    assert response.status_code == 503
    assert payload["checks"]["redis"]["error"] == "ConnectionError"
