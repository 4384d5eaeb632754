"""Use cases: orquestração por canal, dependendo apenas de protocolos."""
