"""Rotas Instagram (webhook Meta)."""
