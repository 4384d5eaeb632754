"""Serviços de aplicação.

Entrega ao Telegram (retry), roteamento por tópico do fórum e
formatação HTML das notificações.
"""

from app.services.telegram_delivery import DeliveryResult, TelegramDeliveryService
from app.services.telegram_notifier import TelegramNotifier
from app.services.topic_router import TopicRouter

__all__ = [
    "DeliveryResult",
    "TelegramDeliveryService",
    "TelegramNotifier",
    "TopicRouter",
]
