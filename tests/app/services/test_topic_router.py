"""Testes do TopicRouter (criação sob demanda, cache negativo, fórum indisponível)."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import pytest

from app.infra.stores.topic_cache_store import TopicCacheStore
from app.services.telegram_delivery import DeliveryResult
from app.services.topic_router import TopicRouter, build_topic_name, is_forum_unavailable
from tests.fakes.fake_telegram import FakeDelivery


def test_build_topic_name_prefers_title_and_truncates() -> None:
    assert build_topic_name("posts", "Posts") == "IG | Posts"
    assert build_topic_name("dm.message") == "IG | dm.message"
    assert len(build_topic_name("k", "x" * 300)) == 120


@pytest.mark.parametrize(
    ("description", "expected"),
    [
        ("Bad Request: the chat is not a forum", True),
        ("Bad Request: not enough rights to create a topic", True),
        ("Bad Request: TOPIC_DELETED", True),
        ("Too Many Requests: retry after 5", False),
        (None, False),
    ],
)
def test_is_forum_unavailable(description: str | None, expected: bool) -> None:
    assert is_forum_unavailable(description) is expected


@pytest.mark.asyncio
async def test_creates_topic_once_and_caches() -> None:
    delivery = FakeDelivery([DeliveryResult(ok=True, result={"message_thread_id": 12})])
    router = TopicRouter(delivery=delivery)

    first = await router.resolve_thread("posts", "Posts")
    second = await router.resolve_thread("posts", "Posts")

    assert first == 12
    assert second == 12
    assert delivery.topic_names == ["IG | Posts"]


@pytest.mark.asyncio
async def test_concurrent_resolution_creates_single_topic() -> None:
    delivery = FakeDelivery()
    router = TopicRouter(delivery=delivery)

    results = await asyncio.gather(*(router.resolve_thread("story", "Stories") for _ in range(5)))

    assert len(set(results)) == 1
    assert delivery.topic_names == ["IG | Stories"]


@pytest.mark.asyncio
async def test_failed_creation_is_cached_negatively() -> None:
    delivery = FakeDelivery(
        [DeliveryResult(ok=False, description="Too Many Requests: retry after 30")]
    )
    router = TopicRouter(delivery=delivery)

    assert await router.resolve_thread("change.comments") is None
    assert await router.resolve_thread("change.comments") is None

    assert len(delivery.topic_names) == 1
    assert router.cached_topics == {"change.comments": 0}
    assert router.forum_available is True


@pytest.mark.asyncio
async def test_forum_unavailable_disables_all_topics(caplog: pytest.LogCaptureFixture) -> None:
    delivery = FakeDelivery(
        [DeliveryResult(ok=False, description="Bad Request: the chat is not a forum")]
    )
    router = TopicRouter(delivery=delivery)

    with caplog.at_level("WARNING"):
        assert await router.resolve_thread("posts") is None
        assert await router.resolve_thread("story") is None
        assert await router.resolve_thread("dm.message") is None

    assert router.forum_available is False
    assert delivery.topic_names == ["IG | posts"]
    assert caplog.text.count("telegram_forum_unavailable") == 1


@pytest.mark.asyncio
async def test_disabled_or_empty_key_skips_creation() -> None:
    delivery = FakeDelivery()

    assert await TopicRouter(delivery=delivery, enabled=False).resolve_thread("posts") is None
    assert await TopicRouter(delivery=delivery).resolve_thread("") is None
    assert delivery.topic_names == []


@pytest.mark.asyncio
async def test_non_positive_thread_id_counts_as_failure() -> None:
    delivery = FakeDelivery([DeliveryResult(ok=True, result={"message_thread_id": 0})])
    router = TopicRouter(delivery=delivery)

    assert await router.resolve_thread("posts") is None
    assert router.cached_topics == {"posts": 0}


@pytest.mark.asyncio
async def test_successful_creation_is_persisted(tmp_path: Path) -> None:
    path = tmp_path / "topics.json"
    store = TopicCacheStore(path)
    delivery = FakeDelivery(
        [
            DeliveryResult(ok=False, description="Internal Server Error"),
            DeliveryResult(ok=True, result={"message_thread_id": 31}),
        ]
    )
    router = TopicRouter(delivery=delivery, store=store)

    await router.resolve_thread("change.mentions")
    await router.resolve_thread("posts")

    assert json.loads(path.read_text(encoding="utf-8")) == {"change.mentions": 0, "posts": 31}
    # Nova execução: só o tópico criado volta do disco
    assert TopicRouter(delivery=FakeDelivery(), store=store).cached_topics == {"posts": 31}


@pytest.mark.asyncio
async def test_loaded_cache_avoids_creation(tmp_path: Path) -> None:
    path = tmp_path / "topics.json"
    path.write_text(json.dumps({"posts": 8}), encoding="utf-8")
    delivery = FakeDelivery()
    router = TopicRouter(delivery=delivery, store=TopicCacheStore(path))

    assert await router.resolve_thread("posts") == 8
    assert delivery.topic_names == []
