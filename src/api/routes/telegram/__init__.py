"""Rotas Telegram (envio manual)."""
