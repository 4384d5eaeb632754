"""Testes do endpoint manual POST /telegram/send-message."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.routes.telegram import router as telegram_routes
from app.services.telegram_delivery import DeliveryResult
from tests.fakes.fake_telegram import FakeDelivery

ADMIN_TOKEN = "relay-admin"


class FailingDelivery(FakeDelivery):
    async def send(
        self,
        method: str,
        payload: dict[str, Any],
        *,
        thread_id: int | None = None,
        chat_id: str | None = None,
    ) -> DeliveryResult:
        return DeliveryResult(ok=False, description="Bad Request: chat not found", attempts=1)


def _client(monkeypatch: pytest.MonkeyPatch, delivery: object | None) -> TestClient:
    monkeypatch.setattr(
        telegram_routes,
        "get_telegram_settings",
        lambda: SimpleNamespace(admin_token=ADMIN_TOKEN),
    )
    app = FastAPI()
    app.include_router(telegram_routes.router, prefix="/telegram")
    app.state.telegram_delivery = delivery
    return TestClient(app)


def test_sends_message_to_given_chat(monkeypatch: pytest.MonkeyPatch) -> None:
    delivery = FakeDelivery()
    client = _client(monkeypatch, delivery)

    response = client.post(
        "/telegram/send-message",
        json={"chatId": "555", "message": "salom"},
        headers={"X-Relay-Token": ADMIN_TOKEN},
    )

    assert response.status_code == 200
    assert response.json() == {"status": "sent"}
    assert delivery.sent == [("sendMessage", {"text": "salom"}, None)]


def test_wrong_token_is_forbidden(monkeypatch: pytest.MonkeyPatch) -> None:
    delivery = FakeDelivery()
    client = _client(monkeypatch, delivery)

    response = client.post(
        "/telegram/send-message",
        json={"chat_id": "555", "message": "salom"},
        headers={"X-Relay-Token": "nope"},
    )

    assert response.status_code == 403
    assert delivery.sent == []


def test_missing_bot_token_returns_400(monkeypatch: pytest.MonkeyPatch) -> None:
    client = _client(monkeypatch, FakeDelivery(configured=False))

    response = client.post(
        "/telegram/send-message",
        json={"chat_id": "555", "message": "salom"},
        headers={"X-Relay-Token": ADMIN_TOKEN},
    )

    assert response.status_code == 400


def test_send_failure_returns_400_with_description(monkeypatch: pytest.MonkeyPatch) -> None:
    client = _client(monkeypatch, FailingDelivery())

    response = client.post(
        "/telegram/send-message",
        json={"chat_id": "555", "message": "salom"},
        headers={"X-Relay-Token": ADMIN_TOKEN},
    )

    assert response.status_code == 400
    assert response.json() == {"detail": "Bad Request: chat not found"}


def test_empty_message_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    client = _client(monkeypatch, FakeDelivery())

    response = client.post(
        "/telegram/send-message",
        json={"chat_id": "555", "message": ""},
        headers={"X-Relay-Token": ADMIN_TOKEN},
    )

    assert response.status_code == 422
