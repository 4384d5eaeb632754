"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    InfrastructureError,
    RedisConnectionError,
    TopicCacheStorageError,
)

__all__ = [
    "InfrastructureError",
    "RedisConnectionError",
    "TopicCacheStorageError",
]
