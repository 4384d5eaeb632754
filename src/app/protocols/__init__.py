"""Protocolos e contratos do core da aplicação."""

from .dedupe import AsyncDedupeProtocol, DedupeProtocol
from .instagram import InstagramGraphProtocol
from .telegram import TelegramDeliveryProtocol, TelegramNotifierProtocol

__all__ = [
    "AsyncDedupeProtocol",
    "DedupeProtocol",
    "InstagramGraphProtocol",
    "TelegramDeliveryProtocol",
    "TelegramNotifierProtocol",
]
