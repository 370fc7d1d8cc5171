"""Logging estruturado do Contact Relay.

`configure_logging` é chamada uma vez pelo bootstrap; módulos usam
`logging.getLogger(__name__)` e registram eventos snake_case com
contexto em `extra`. Conteúdo do formulário e tokens nunca são logados.
"""

from config.logging.config import VALID_LOG_LEVELS, configure_logging, get_logger, log_fallback
from config.logging.filters import BotTokenRedactionFilter, CorrelationIdFilter
from config.logging.formatters import (
    FIELD_RENAME_MAP,
    JSON_LOG_FIELDS,
    PLAIN_LOG_FORMAT,
    RelayJsonFormatter,
    create_json_formatter,
    create_plain_formatter,
)

__all__ = [
    "FIELD_RENAME_MAP",
    "JSON_LOG_FIELDS",
    "PLAIN_LOG_FORMAT",
    "VALID_LOG_LEVELS",
    "BotTokenRedactionFilter",
    "CorrelationIdFilter",
    "RelayJsonFormatter",
    "configure_logging",
    "create_json_formatter",
    "create_plain_formatter",
    "get_logger",
    "log_fallback",
]
