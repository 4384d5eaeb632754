"""Connectors: adapters de borda para APIs externas.

Estrutura:
- instagram/: webhook Meta e Graph API (user/media info, download, DMs)
- telegram/: Bot API (JSON e multipart)

Cada connector isola transporte e erros do serviço que representa.
"""

__all__: list[str] = []
