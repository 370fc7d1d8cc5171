"""Rotas do relay de formulários."""

from api.routes.relay.router import router

__all__ = ["router"]
