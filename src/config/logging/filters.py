"""Filtros do handler raiz.

A Bot API leva o token na URL (`/bot<token>/sendMessage`) e o httpx
loga essa URL em INFO; o filtro de redação reescreve a mensagem antes
da formatação.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

_BOT_TOKEN_RE = re.compile(r"bot\d+:[A-Za-z0-9_-]+")
REDACTED_BOT_TOKEN = "bot<redacted>"


def _no_correlation_id() -> str:
    return ""


class CorrelationIdFilter(logging.Filter):
    """Preenche `service` e `correlation_id` em cada record.

    Um correlation_id passado explicitamente em `extra` tem precedência
    sobre o do contexto.
    """

    def __init__(
        self,
        service_name: str,
        correlation_id_getter: Callable[[], str] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._correlation_id_getter = correlation_id_getter or _no_correlation_id

    def filter(self, record: logging.LogRecord) -> bool:
        record.service = self._service_name
        if not getattr(record, "correlation_id", None):
            record.correlation_id = self._correlation_id_getter()
        return True


class BotTokenRedactionFilter(logging.Filter):
    """Troca `bot<id>:<segredo>` por `bot<redacted>` na mensagem final."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = _BOT_TOKEN_RE.sub(REDACTED_BOT_TOKEN, message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True
