"""Entrega de mensagens ao Telegram com retry limitado.

Máquina de estados por entrega:
    Tentando(n) -> Enviado | Migrando | Falha(n+1)

- Sucesso: encerra; informa o chat efetivo se diferente do solicitado.
- Migração (grupo virou supergrupo): reenvia imediatamente para o novo
  id, sem consumir tentativa e sem backoff.
- Outra falha (API ou transporte): registra o erro e, se restar
  tentativa, aguarda backoff linear (passo x número da tentativa).
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING

from api.connectors.http_base import HttpError
from app.observability import record_delivery
from app.protocols.models import DeliveryResult

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from app.protocols.http_client import TelegramHttpClientProtocol

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BACKOFF_STEP_SECONDS = 0.4
# Limite de redirecionamentos por entrega (evita ciclo A -> B -> A)
MAX_MIGRATIONS = 3


class TelegramDeliveryService:
    """Entrega texto a um chat com retry e tratamento de migração.

    Args:
        client: Cliente da Bot API
        max_attempts: Tentativas contadas como falha
        backoff_step_seconds: Passo do backoff linear
        sleep: Função de espera (injetável em testes)
    """

    def __init__(
        self,
        client: TelegramHttpClientProtocol,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        backoff_step_seconds: float = DEFAULT_BACKOFF_STEP_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._client = client
        self._max_attempts = max_attempts
        self._backoff_step_seconds = backoff_step_seconds
        self._sleep = sleep

    async def deliver(self, bot_token: str, chat_id: str, text: str) -> DeliveryResult:
        """Envia o texto, seguindo migrações e repetindo falhas.

        Returns:
            DeliveryResult com migrated_chat_id quando o chat efetivo
            difere de chat_id.
        """
        started_at = time.perf_counter()
        current_chat_id = chat_id
        last_error = ""
        attempt = 0
        migrations = 0

        while attempt < self._max_attempts:
            try:
                response = await self._client.send_message(bot_token, current_chat_id, text)
            except HttpError as exc:
                last_error = str(exc)
            else:
                if response.ok:
                    result = DeliveryResult(
                        success=True,
                        migrated_chat_id=(
                            current_chat_id if current_chat_id != chat_id else None
                        ),
                        attempts=attempt + 1,
                    )
                    self._record(result, started_at)
                    return result

                migrate_to = response.migrate_to_chat_id
                if (
                    migrate_to
                    and migrate_to != current_chat_id
                    and migrations < MAX_MIGRATIONS
                ):
                    migrations += 1
                    logger.info("telegram_chat_migrated", extra={"attempt": attempt + 1})
                    current_chat_id = migrate_to
                    continue

                last_error = response.error_text

            attempt += 1
            logger.warning(
                "telegram_delivery_attempt_failed",
                extra={"attempt": attempt, "max_attempts": self._max_attempts},
            )
            if attempt < self._max_attempts:
                await self._sleep(self._backoff_step_seconds * attempt)

        result = DeliveryResult(success=False, error=last_error, attempts=attempt)
        self._record(result, started_at)
        return result

    @staticmethod
    def _record(result: DeliveryResult, started_at: float) -> None:
        record_delivery(
            success=result.success,
            attempts=result.attempts,
            migrated=result.migrated_chat_id is not None,
            latency_ms=(time.perf_counter() - started_at) * 1000,
        )
