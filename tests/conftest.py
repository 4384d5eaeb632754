"""Configuração do pytest para o relay Instagram → Telegram."""

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

# Adiciona src/ ao PYTHONPATH para permitir imports absolutos
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from config.settings import (  # noqa: E402
    get_base_settings,
    get_dedupe_settings,
    get_instagram_settings,
    get_telegram_settings,
)


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> Iterator[None]:
    """Settings são cacheadas por processo; cada teste lê o env do zero."""
    for getter in (
        get_base_settings,
        get_dedupe_settings,
        get_instagram_settings,
        get_telegram_settings,
    ):
        getter.cache_clear()
    yield
    for getter in (
        get_base_settings,
        get_dedupe_settings,
        get_instagram_settings,
        get_telegram_settings,
    ):
        getter.cache_clear()
