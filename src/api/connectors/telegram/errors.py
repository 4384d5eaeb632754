"""Erros do Telegram Bot API sem dados sensíveis (token nunca incluso)."""

from __future__ import annotations

RETRYABLE_STATUS_CODES = frozenset({429})


def is_retryable_code(error_code: int | None) -> bool:
    """Classifica código como transitório.

    Transitórios: 429 (rate limit), 5xx, ou código ausente (rede/parse).
    Demais 4xx são rejeições definitivas para esta chamada.
    """
    if error_code is None:
        return True
    return error_code in RETRYABLE_STATUS_CODES or error_code >= 500


class TelegramApiError(Exception):
    """Falha de chamada ao Bot API.

    Args:
        description: Descrição retornada pelo Telegram ou gerada localmente
        error_code: error_code do Telegram ou status HTTP (None se rede)
        retry_after: Segundos sugeridos pelo Telegram em 429 (parameters.retry_after)
    """

    def __init__(
        self,
        description: str,
        error_code: int | None = None,
        retry_after: int | None = None,
    ) -> None:
        super().__init__(description)
        self.description = description
        self.error_code = error_code
        self.retry_after = retry_after

    @property
    def is_retryable(self) -> bool:
        return is_retryable_code(self.error_code)
