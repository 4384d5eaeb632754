"""Use cases específicos de Instagram."""

from .dispatch_webhook_event import DispatchInstagramEventUseCase, DispatchResult

__all__ = [
    "DispatchInstagramEventUseCase",
    "DispatchResult",
]
