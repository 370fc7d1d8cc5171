"""Cliente HTTP base para conectores da camada API.

Chamada única por método, sem retry: a política de retry pertence ao
serviço chamador (ex.: entrega Telegram), que conhece a semântica de
cada falha.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

logger = logging.getLogger(__name__)


@dataclass
class HttpClientConfig:
    """Configuração do cliente HTTP."""

    timeout_seconds: float = 10.0
    default_headers: dict[str, str] = field(default_factory=dict)
    verify_ssl: bool = True


class HttpError(Exception):
    """Erro de transporte HTTP sem dados sensíveis."""


class HttpClient:
    """Cliente HTTP simples para chamadas externas.

    Args:
        config: Configuração de timeout/headers
        transport: Transport httpx opcional (ex.: MockTransport em testes)
    """

    def __init__(
        self,
        config: HttpClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config or HttpClientConfig()
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            verify=self._config.verify_ssl,
            transport=self._transport,
            timeout=self._config.timeout_seconds,
        )

    async def post(
        self,
        url: str,
        *,
        json: dict[str, Any] | None = None,
        data: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """POST com corpo JSON ou form-encoded.

        Raises:
            HttpError: Timeout, falha de conexão ou outro erro de transporte.
        """
        merged_headers = {**self._config.default_headers, **(headers or {})}
        try:
            async with self._client() as client:
                return await client.post(url, json=json, data=data, headers=merged_headers)
        except httpx.TimeoutException as exc:
            raise HttpError("http_timeout") from exc
        except httpx.TransportError as exc:
            raise HttpError(f"http_transport_error: {type(exc).__name__}") from exc
