"""Testes do dispatch em background do webhook Instagram."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from api.routes.instagram import webhook_runtime
from api.routes.instagram.webhook_runtime import RelayDispatchPool
from app.observability import get_correlation_id
from utils.errors import RedisConnectionError


class RecordingDispatcher:
    def __init__(self, error: Exception | None = None, gate: asyncio.Event | None = None) -> None:
        self.calls: list[tuple[dict[str, Any], str, str]] = []
        self.started = asyncio.Event()
        self._error = error
        self._gate = gate

    async def execute(self, payload: dict[str, Any], correlation_id: str = "") -> None:
        self.calls.append((payload, correlation_id, get_correlation_id()))
        self.started.set()
        if self._gate is not None:
            await self._gate.wait()
        if self._error is not None:
            raise self._error


@pytest.fixture
def pool(monkeypatch: pytest.MonkeyPatch) -> RelayDispatchPool:
    fresh = RelayDispatchPool()
    monkeypatch.setattr(webhook_runtime, "_pool", fresh)
    return fresh


class TestRelayDispatchPool:
    @pytest.mark.asyncio
    async def test_dispatch_runs_under_request_correlation_id(self) -> None:
        pool = RelayDispatchPool()
        dispatcher = RecordingDispatcher()

        await pool.submit(dispatcher, {"entry": []}, "cid-1")  # type: ignore[arg-type]
        await asyncio.sleep(0)

        assert dispatcher.calls == [({"entry": []}, "cid-1", "cid-1")]
        assert len(pool) == 0
        assert get_correlation_id() == ""

    @pytest.mark.asyncio
    async def test_infra_error_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        pool = RelayDispatchPool()
        dispatcher = RecordingDispatcher(RedisConnectionError("redis down"))

        with caplog.at_level("ERROR"):
            await pool.submit(dispatcher, {"entry": []}, "cid-2")  # type: ignore[arg-type]

        assert "webhook_dispatch_infra_failed" in caplog.text

    @pytest.mark.asyncio
    async def test_unexpected_error_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        pool = RelayDispatchPool()
        dispatcher = RecordingDispatcher(KeyError("boom"))

        with caplog.at_level("ERROR"):
            task = pool.submit(dispatcher, {}, "cid-3")  # type: ignore[arg-type]
            await task

        assert task.exception() is None
        assert "webhook_dispatch_failed" in caplog.text

    @pytest.mark.asyncio
    async def test_concurrency_is_bounded(self) -> None:
        pool = RelayDispatchPool(max_concurrent=1)
        gate = asyncio.Event()
        first = RecordingDispatcher(gate=gate)
        second = RecordingDispatcher()

        pool.submit(first, {"n": 1}, "cid-a")  # type: ignore[arg-type]
        pool.submit(second, {"n": 2}, "cid-b")  # type: ignore[arg-type]
        await asyncio.wait_for(first.started.wait(), timeout=1.0)
        await asyncio.sleep(0.01)

        assert second.calls == []
        assert len(pool) == 2

        gate.set()
        await pool.drain(timeout_seconds=1.0)

        assert len(second.calls) == 1

    @pytest.mark.asyncio
    async def test_drain_without_tasks(self) -> None:
        assert await RelayDispatchPool().drain(timeout_seconds=0.01) == 0

    @pytest.mark.asyncio
    async def test_drain_waits_for_short_dispatches(self) -> None:
        pool = RelayDispatchPool()
        gate = asyncio.Event()
        dispatcher = RecordingDispatcher(gate=gate)
        pool.submit(dispatcher, {}, "cid-short")  # type: ignore[arg-type]
        asyncio.get_running_loop().call_later(0.02, gate.set)

        cancelled = await pool.drain(timeout_seconds=1.0)

        assert cancelled == 0
        assert len(dispatcher.calls) == 1
        assert len(pool) == 0

    @pytest.mark.asyncio
    async def test_drain_cancels_stuck_dispatches(self, caplog: pytest.LogCaptureFixture) -> None:
        pool = RelayDispatchPool()
        stuck = RecordingDispatcher(gate=asyncio.Event())
        pool.submit(stuck, {}, "cid-stuck")  # type: ignore[arg-type]
        await asyncio.wait_for(stuck.started.wait(), timeout=1.0)

        with caplog.at_level("WARNING"):
            cancelled = await pool.drain(timeout_seconds=0.01)

        assert cancelled == 1
        assert "webhook_dispatch_drain_cancelled" in caplog.text
        assert len(pool) == 0


@pytest.mark.asyncio
async def test_dispatch_in_background_submits_to_pool(pool: RelayDispatchPool) -> None:
    dispatcher = RecordingDispatcher()

    accepted = webhook_runtime.dispatch_in_background(
        payload={"entry": []},
        correlation_id="cid-4",
        dispatcher=dispatcher,  # type: ignore[arg-type]
    )
    await webhook_runtime.drain_background_tasks(timeout_seconds=1.0)

    assert accepted is True
    assert dispatcher.calls == [({"entry": []}, "cid-4", "cid-4")]


def test_dispatch_in_background_without_dispatcher(
    pool: RelayDispatchPool,
    caplog: pytest.LogCaptureFixture,
) -> None:
    with caplog.at_level("WARNING"):
        accepted = webhook_runtime.dispatch_in_background(
            payload={"entry": []},
            correlation_id="cid-5",
            dispatcher=None,
        )

    assert accepted is False
    assert len(pool) == 0
    assert "webhook_dispatcher_unavailable" in caplog.text
