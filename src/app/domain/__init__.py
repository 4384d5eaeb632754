"""Domínio: classificação de eventos e chaves de idempotência (funções puras)."""
