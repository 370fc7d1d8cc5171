"""Middlewares HTTP da API."""

from api.middleware.cors import DynamicCorsMiddleware

__all__ = ["DynamicCorsMiddleware"]
