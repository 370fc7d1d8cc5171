"""Rotas administrativas."""

from api.routes.admin.router import router

__all__ = ["router"]
