"""Protocolos de domínio para stores de dedupe.

Interfaces leves (ABCs) dependidas por Application.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class DedupeProtocol(ABC):
    """Contrato mínimo síncrono para stores de deduplicação.

    Método canônico:
    - seen(key: str) -> bool
      Retorna True se a chave já foi vista (duplicado). Se não vista, marca-a
      com o instante atual e retorna False.
    """

    @abstractmethod
    def seen(self, key: str) -> bool:
        """Verifica e marca a chave de forma atômica.

        Args:
            key: Chave de idempotência (ex.: "dm:mid:<mid>")

        Returns:
            True se já foi vista (duplicado); False se foi marcada agora (novo).
        """

    @abstractmethod
    def cleanup(self) -> None:
        """Remove entradas expiradas e aplica o limite de tamanho."""


class AsyncDedupeProtocol(ABC):
    """Contrato mínimo assíncrono para stores de deduplicação.

    Método canônico:
    - is_duplicate(key: str) -> bool
      Check-and-insert atômico do ponto de vista do chamador.
    - cleanup_async() -> None
      Chamado após cada processamento não duplicado.
    """

    @abstractmethod
    async def is_duplicate(self, key: str) -> bool:
        """Verifica se a chave já foi processada e a registra se nova.

        Args:
            key: Chave de idempotência

        Returns:
            True se já foi vista (duplicado); False caso contrário.
        """

    @abstractmethod
    async def cleanup_async(self) -> None:
        """Poda a janela de dedupe (TTL + limite de tamanho)."""
