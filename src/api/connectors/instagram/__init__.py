"""Connector Instagram: adapter de borda para a Graph API da Meta.

Responsabilidades:
- Webhook (assinatura e envelope do POST)
- Cliente HTTP para consultas de usuário/mídia, download e auto-resposta
"""

from .graph_client import InstagramGraphClient, MediaDownload, MediaDownloadError
from .signature import SignatureResult, verify_meta_signature

__all__ = [
    "InstagramGraphClient",
    "MediaDownload",
    "MediaDownloadError",
    "SignatureResult",
    "verify_meta_signature",
]
