"""API: camada de borda: webhooks de entrada e clientes de APIs externas.

Responsabilidades:
- Receber o webhook da Meta (challenge, assinatura, parsing)
- Falar com a Graph API do Instagram e com o Bot API do Telegram
- Expor endpoints HTTP (webhook, envio manual, health)

Subpastas:
- connectors/: adapters HTTP por serviço externo
- routes/: endpoints HTTP por canal

NÃO PODE conter: dedupe, roteamento de tópicos, formatação de notificações.
"""
