"""Testes da inicialização de logging do bootstrap."""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest

import app.bootstrap as bootstrap
from config.logging import CorrelationIdFilter


@pytest.fixture(autouse=True)
def restore_root_logger() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


def test_initialize_app_reads_log_level(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "warning")

    bootstrap.initialize_app()

    assert logging.getLogger().level == logging.WARNING


def test_initialize_app_tags_records_with_service_name(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("LOG_LEVEL", raising=False)

    bootstrap.initialize_app()

    root = logging.getLogger()
    assert root.level == logging.INFO
    record = logging.LogRecord("t", logging.INFO, "", 0, "msg", (), None)
    for log_filter in root.handlers[0].filters:
        if isinstance(log_filter, CorrelationIdFilter):
            log_filter.filter(record)
    assert record.service == bootstrap.SERVICE_NAME


def test_bootstrap_exposes_only_runtime_entrypoints() -> None:
    public = {name for name in vars(bootstrap) if name.startswith(("initialize_", "validate_"))}
    assert public == {"initialize_app", "validate_runtime_settings"}
