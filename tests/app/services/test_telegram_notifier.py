"""Testes da fachada TelegramNotifier."""

from __future__ import annotations

import pytest

from app.services.telegram_notifier import TelegramNotifier
from app.services.topic_router import TopicRouter
from tests.fakes.fake_telegram import FakeDelivery


@pytest.mark.asyncio
async def test_send_html_routes_to_topic() -> None:
    delivery = FakeDelivery()
    notifier = TelegramNotifier(delivery=delivery, topic_router=TopicRouter(delivery=delivery))

    result = await notifier.send_html("<b>oi</b>", topic_key="posts", topic_title="Posts")

    assert result.ok is True
    method, payload, thread_id = delivery.sent[-1]
    assert method == "sendMessage"
    assert payload == {
        "text": "<b>oi</b>",
        "parse_mode": "HTML",
        "disable_web_page_preview": True,
    }
    assert thread_id == 101


@pytest.mark.asyncio
async def test_unconfigured_delivery_skips_topic_creation() -> None:
    delivery = FakeDelivery(configured=False)
    notifier = TelegramNotifier(delivery=delivery, topic_router=TopicRouter(delivery=delivery))

    result = await notifier.send_html("oi", topic_key="posts")

    assert result.ok is False
    assert delivery.topic_names == []
    assert delivery.sent[-1][2] is None


@pytest.mark.asyncio
async def test_send_file_passes_options() -> None:
    delivery = FakeDelivery()
    notifier = TelegramNotifier(
        delivery=delivery,
        topic_router=TopicRouter(delivery=delivery, enabled=False),
    )

    await notifier.send_file(
        "sendPhoto",
        "photo",
        b"img",
        "media.jpg",
        "image/jpeg",
        caption="legenda",
        parse_mode="HTML",
        supports_streaming=True,
        topic_key="posts",
    )

    method, field_name, extra_fields, thread_id = delivery.sent_files[-1]
    assert (method, field_name, thread_id) == ("sendPhoto", "photo", None)
    assert extra_fields == {"caption": "legenda", "parse_mode": "HTML", "supports_streaming": True}
