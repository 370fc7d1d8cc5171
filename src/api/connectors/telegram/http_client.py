"""Cliente HTTP especializado para Telegram Bot API.

Estende HttpClient genérico com o método sendMessage:
- parse_mode=HTML e preview de links desativado
- Normalização da resposta (ok, description, migrate_to_chat_id)
- Logging estruturado sem token, chat ou texto
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from api.connectors.http_base import HttpClient, HttpClientConfig
from api.connectors.telegram.api_errors import parse_send_response

if TYPE_CHECKING:
    import httpx

    from app.protocols.models import TelegramSendResponse
    from config.settings import TelegramSettings

logger: logging.Logger = logging.getLogger(__name__)


class TelegramHttpClient(HttpClient):
    """Cliente HTTP para a Telegram Bot API.

    Uma chamada por invocação; retry e migração ficam no serviço de
    entrega.
    """

    def __init__(
        self,
        api_base_url: str,
        config: HttpClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(config, transport)
        self._api_base_url = api_base_url.rstrip("/")

    async def send_message(
        self,
        bot_token: str,
        chat_id: str,
        text: str,
    ) -> TelegramSendResponse:
        """Envia texto HTML para o chat.

        Raises:
            ValueError: Se bot_token vazio.
            HttpError: Falha de transporte.
        """
        if not bot_token or not bot_token.strip():
            raise ValueError("bot_token é obrigatório para sendMessage")

        url = f"{self._api_base_url}/bot{bot_token}/sendMessage"
        payload = {
            "chat_id": chat_id,
            "text": text,
            "parse_mode": "HTML",
            "disable_web_page_preview": True,
        }
        response = await self.post(url, json=payload)

        try:
            data = response.json()
        except ValueError:
            logger.warning(
                "telegram_response_not_json",
                extra={"status_code": response.status_code},
            )
            data = None

        result = parse_send_response(response.status_code, data)
        if result.ok:
            logger.debug("telegram_send_ok", extra={"status_code": response.status_code})
        else:
            logger.warning(
                "telegram_send_rejected",
                extra={
                    "status_code": response.status_code,
                    "migrated": result.migrate_to_chat_id is not None,
                },
            )
        return result


def create_telegram_http_client(
    settings: TelegramSettings | None = None,
) -> TelegramHttpClient:
    """Factory para criar cliente Telegram com config padrão.

    Args:
        settings: TelegramSettings opcional. Se None, carrega do ambiente.
    """
    # Import local para evitar dependência circular
    from config.settings import get_telegram_settings

    telegram = settings or get_telegram_settings()
    config = HttpClientConfig(timeout_seconds=telegram.request_timeout_seconds)
    return TelegramHttpClient(api_base_url=telegram.api_base_url, config=config)
