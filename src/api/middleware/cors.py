"""CORS dinâmico baseado nas origens permitidas.

Para toda requisição define `Vary: Origin`. Quando o header Origin está
presente e casa com os padrões atuais, ecoa a origem e os headers de
preflight. OPTIONS é respondido com 204 sem chegar às rotas.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from app.policies import matches_origin, normalize_host

if TYPE_CHECKING:
    from collections.abc import Callable

    from starlette.requests import Request
    from starlette.types import ASGIApp

    from app.protocols import OriginPatternProviderProtocol

logger = logging.getLogger(__name__)

ALLOW_HEADERS = "Content-Type,Idempotency-Key,X-Admin-Key"
ALLOW_METHODS = "GET,POST,PUT,DELETE,OPTIONS"


class DynamicCorsMiddleware(BaseHTTPMiddleware):
    """Aplica CORS consultando o provedor de origens a cada requisição.

    Args:
        app: Aplicação ASGI
        provider_getter: Retorna o provedor de padrões de origem
    """

    def __init__(
        self,
        app: ASGIApp,
        provider_getter: Callable[[], OriginPatternProviderProtocol],
    ) -> None:
        super().__init__(app)
        self._provider_getter = provider_getter

    async def _cors_headers(self, origin: str) -> dict[str, str]:
        headers = {"Vary": "Origin"}
        if not origin:
            return headers

        patterns = await self._provider_getter().load_patterns()
        if matches_origin(normalize_host(origin), patterns):
            headers["Access-Control-Allow-Origin"] = origin
            headers["Access-Control-Allow-Headers"] = ALLOW_HEADERS
            headers["Access-Control-Allow-Methods"] = ALLOW_METHODS
        return headers

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        headers = await self._cors_headers(request.headers.get("origin", ""))

        if request.method == "OPTIONS":
            return Response(status_code=204, headers=headers)

        response = await call_next(request)
        for name, value in headers.items():
            response.headers[name] = value
        return response
