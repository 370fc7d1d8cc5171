"""Verificação server-side de token Cloudflare Turnstile.

Fail-closed: token ou secret vazio, erro de transporte ou resposta
ilegível resultam em verificação negada. Sem retry.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from api.connectors.http_base import HttpClient, HttpClientConfig, HttpError
from config.settings import TURNSTILE_VERIFY_URL

if TYPE_CHECKING:
    import httpx

logger = logging.getLogger(__name__)


class TurnstileVerifier(HttpClient):
    """Troca token + secret pelo veredito do endpoint siteverify."""

    def __init__(
        self,
        verify_url: str = TURNSTILE_VERIFY_URL,
        config: HttpClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(config, transport)
        self._verify_url = verify_url

    async def verify(self, token: str, secret: str) -> bool:
        """Retorna True somente se o endpoint reportar success=true."""
        if not token or not secret:
            return False

        try:
            response = await self.post(
                self._verify_url,
                data={"secret": secret, "response": token},
            )
            result = response.json()
        except (HttpError, ValueError) as exc:
            logger.warning("captcha_verify_failed", extra={"error_type": type(exc).__name__})
            return False

        success = isinstance(result, dict) and result.get("success") is True
        if not success:
            error_codes = result.get("error-codes") if isinstance(result, dict) else None
            logger.info("captcha_rejected", extra={"error_codes": error_codes})
        return success
