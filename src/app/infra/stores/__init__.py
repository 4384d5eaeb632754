"""Stores: implementações concretas de persistência.

Módulos disponíveis:
    - memory_stores: Janela de dedupe em memória (padrão)
    - redis_dedupe_store: Janela de dedupe em Redis (várias instâncias)
    - topic_cache_store: Persistência JSON do mapa tópico -> thread id
"""

from __future__ import annotations

from app.infra.stores.memory_stores import MemoryDedupeStore
from app.infra.stores.redis_dedupe_store import RedisDedupeStore
from app.infra.stores.topic_cache_store import TopicCacheStore

__all__ = [
    "MemoryDedupeStore",
    "RedisDedupeStore",
    "TopicCacheStore",
]
