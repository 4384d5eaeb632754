"""App: coração do relay: orquestração, serviços e infraestrutura.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- domain/: classificação de eventos e chaves de idempotência
- use_cases/: despacho dos eventos do webhook
- services/: entrega Telegram, tópicos e formatação
- infra/: stores de dedupe e cache de tópicos
- protocols/: contratos entre use cases e implementações
- observability/: correlation_id e métricas via log

Padrão: app executa; api adapta; config configura; utils apoia.
"""
