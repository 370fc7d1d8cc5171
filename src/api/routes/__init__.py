"""Rotas HTTP da API: adapters de entrada.

Responsabilidades:
- Definir endpoints HTTP (relay, health, admin)
- Leitura inicial de request (headers, corpo)
- Delegação para use_cases/services
- Respostas HTTP no envelope JSON do relay

Estrutura:
- routes/relay/: POST /send e tasks de background
- routes/admin/: CRUD das origens permitidas
- routes/health/: health checks e readiness

Agregação:
- router.py: registra todos os routers no app principal
"""

from __future__ import annotations

from api.routes.router import create_api_router

__all__ = ["create_api_router"]
