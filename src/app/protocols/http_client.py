"""Protocolos HTTP usados pelo app.

Evita dependência direta da camada api.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .models import TelegramSendResponse


class TelegramHttpClientProtocol(Protocol):
    """Contrato mínimo para cliente HTTP da Telegram Bot API.

    Erros de transporte são levantados como exceção; erros reportados
    pela API retornam em TelegramSendResponse com ok=False.
    """

    async def send_message(
        self,
        bot_token: str,
        chat_id: str,
        text: str,
    ) -> TelegramSendResponse: ...
