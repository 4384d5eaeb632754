"""Persistência do mapa tópico -> thread id em arquivo JSON.

Formato: objeto plano, indentado (2 espaços), UTF-8.
    {"posts": 12, "story": 14, "dm.message": 0}

0 significa "criação falhou; não tentar de novo". O arquivo é reescrito
inteiro a cada criação bem-sucedida. Dois processos escrevendo o mesmo
arquivo não são suportados (último a escrever vence).
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from utils.errors import TopicCacheStorageError

logger = logging.getLogger(__name__)


class TopicCacheStore:
    """Lê e grava o cache de tópicos do Telegram.

    Args:
        path: Caminho do arquivo JSON
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> dict[str, int]:
        """Carrega o mapa persistido.

        Arquivo ausente ou corrompido resulta em mapa vazio (nunca fatal).
        Apenas thread ids positivos são carregados; falhas registradas (0)
        valem só para a execução que as observou.
        """
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            logger.warning(
                "topic_cache_read_failed",
                extra={"path": str(self._path), "error_type": type(exc).__name__},
            )
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("topic_cache_corrupted", extra={"path": str(self._path)})
            return {}

        if not isinstance(data, dict):
            logger.warning("topic_cache_corrupted", extra={"path": str(self._path)})
            return {}

        cache: dict[str, int] = {}
        for key, value in data.items():
            if isinstance(value, int) and not isinstance(value, bool) and value > 0:
                cache[str(key)] = value
        logger.info("topic_cache_loaded", extra={"topics": len(cache)})
        return cache

    def save(self, cache: dict[str, int]) -> None:
        """Reescreve o arquivo inteiro (tmp + replace).

        Raises:
            TopicCacheStorageError: Falha de escrita em disco
        """
        tmp_path = self._path.with_name(f"{self._path.name}.tmp")
        try:
            if self._path.parent and not self._path.parent.exists():
                self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(
                json.dumps(cache, indent=2, ensure_ascii=False),
                encoding="utf-8",
            )
            os.replace(tmp_path, self._path)
        except OSError as exc:
            raise TopicCacheStorageError(
                f"Falha ao gravar cache de tópicos em {self._path}"
            ) from exc
