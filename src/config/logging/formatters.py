"""Formatters JSON (python-json-logger) e texto."""

from __future__ import annotations

import logging
from typing import Any

from pythonjsonlogger.json import JsonFormatter

# Campos padrão do record incluídos em todo log JSON
JSON_LOG_FIELDS = ("levelname", "name", "message", "correlation_id", "service")

FIELD_RENAME_MAP = {
    "levelname": "level",
    "name": "logger",
}

PLAIN_LOG_FORMAT = "%(asctime)s %(levelname)s [%(service)s] [%(correlation_id)s] %(name)s: %(message)s"


class RelayJsonFormatter(JsonFormatter):
    """JsonFormatter com timestamp ISO-8601 UTC.

    Logs fora de uma requisição (startup, tasks de background sem
    escopo) saem sem a chave correlation_id em vez de string vazia.
    """

    def add_fields(
        self,
        log_data: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_data, record, message_dict)
        if not log_data.get("correlation_id"):
            log_data.pop("correlation_id", None)


def create_json_formatter() -> RelayJsonFormatter:
    """Exemplo de saída:

        {"level": "INFO", "logger": "app.use_cases.relay.admission",
         "message": "relay_admitted", "correlation_id": "5f0c...",
         "service": "contact-relay", "timestamp": "2026-03-01T12:00:00+00:00"}
    """
    return RelayJsonFormatter(
        " ".join(f"%({field})s" for field in JSON_LOG_FIELDS),
        rename_fields=FIELD_RENAME_MAP,
        timestamp=True,
    )


def create_plain_formatter() -> logging.Formatter:
    return logging.Formatter(PLAIN_LOG_FORMAT)
