"""Store de dedupe em memória (backend padrão).

Janela de dedupe por processo: mapeia chave -> primeiro instante visto,
em ordem de inserção. Reinícios zeram a janela (best-effort).
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from app.protocols.dedupe import AsyncDedupeProtocol, DedupeProtocol

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 600
DEFAULT_MAX_ENTRIES = 5000
EVICTION_TARGET_RATIO = 0.8


class MemoryDedupeStore(DedupeProtocol, AsyncDedupeProtocol):
    """Cache de dedupe com TTL e limite de tamanho.

    Args:
        ttl_seconds: Idade a partir da qual a entrada pode ser removida
        max_entries: Limite rígido; excedido, poda até 80% do limite
        clock: Fonte de tempo em segundos (injetável em testes)
    """

    def __init__(
        self,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._ttl_seconds = ttl_seconds
        self._max_entries = max_entries
        self._clock = clock
        # dict preserva ordem de inserção: usada como ordem de despejo
        self._store: dict[str, float] = {}

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: object) -> bool:
        return key in self._store

    @property
    def eviction_target(self) -> int:
        """Tamanho máximo após despejo por excesso."""
        return int(self._max_entries * EVICTION_TARGET_RATIO)

    def seen(self, key: str) -> bool:
        """Verifica e marca chave (sync)."""
        if key in self._store:
            return True
        self._store[key] = self._clock()
        return False

    def cleanup(self) -> None:
        """Remove entradas vencidas e despeja as mais antigas se necessário."""
        cutoff = self._clock() - self._ttl_seconds
        expired = [key for key, first_seen in self._store.items() if first_seen < cutoff]
        for key in expired:
            del self._store[key]

        if len(self._store) <= self._max_entries:
            return

        overflow = len(self._store) - self.eviction_target
        for key in list(self._store)[:overflow]:
            del self._store[key]
        logger.warning(
            "dedupe_cache_evicted",
            extra={"evicted": overflow, "remaining": len(self._store)},
        )

    async def is_duplicate(self, key: str) -> bool:
        """Check-and-insert (async); sem await interno, logo atômico no loop."""
        return self.seen(key)

    async def cleanup_async(self) -> None:
        self.cleanup()
