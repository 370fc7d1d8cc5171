"""Parsing de respostas da Telegram Bot API."""

from __future__ import annotations

from typing import Any

from app.protocols.models import TelegramSendResponse


def parse_send_response(status_code: int, response_data: Any) -> TelegramSendResponse:
    """Normaliza o corpo de sendMessage.

    Formato da API:
        {"ok": true, "result": {...}}
        {"ok": false, "error_code": 400, "description": "...",
         "parameters": {"migrate_to_chat_id": -100123}}

    Args:
        status_code: Status HTTP recebido
        response_data: JSON decodificado (ou None se não-JSON)

    Returns:
        TelegramSendResponse; corpo inesperado vira ok=False.
    """
    if not isinstance(response_data, dict):
        return TelegramSendResponse(ok=False, status_code=status_code)

    if response_data.get("ok") is True:
        return TelegramSendResponse(ok=True, status_code=status_code)

    description = response_data.get("description")
    parameters = response_data.get("parameters")
    migrate_to = None
    if isinstance(parameters, dict) and parameters.get("migrate_to_chat_id"):
        migrate_to = str(parameters["migrate_to_chat_id"])

    return TelegramSendResponse(
        ok=False,
        status_code=status_code,
        description=str(description) if description else None,
        migrate_to_chat_id=migrate_to,
    )
