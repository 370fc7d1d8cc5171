"""Instalação do handler raiz e helpers de log compartilhados."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from config.logging.filters import BotTokenRedactionFilter, CorrelationIdFilter
from config.logging.formatters import create_json_formatter, create_plain_formatter

if TYPE_CHECKING:
    from collections.abc import Callable

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def configure_logging(
    level: str = "INFO",
    service_name: str = "contact-relay",
    correlation_id_getter: Callable[[], str] | None = None,
    json_format: bool = True,
) -> None:
    """Substitui os handlers do logger raiz por um único StreamHandler.

    O handler recebe os filtros de contexto (service, correlation_id) e
    de redação do token do bot, nessa ordem.

    Args:
        level: Nome do nível, sem distinção de caixa.
        service_name: Valor do campo `service`.
        correlation_id_getter: Lê o correlation_id da requisição atual.
        json_format: False usa texto legível (testes e execução local).

    Raises:
        ValueError: Nível desconhecido.
    """
    level_name = level.upper()
    if level_name not in VALID_LOG_LEVELS:
        raise ValueError(f"Nível de log inválido: {level}")

    handler = logging.StreamHandler()
    handler.setFormatter(create_json_formatter() if json_format else create_plain_formatter())
    handler.addFilter(CorrelationIdFilter(service_name, correlation_id_getter))
    handler.addFilter(BotTokenRedactionFilter())

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level_name)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_fallback(
    logger: logging.Logger,
    component: str,
    *,
    reason: str,
    error_type: str | None = None,
) -> None:
    """Registra que uma leitura auxiliar falhou e o valor padrão foi usado.

    Usado para padrões de origem dinâmicos e cache de migração de chat,
    onde a falha do store não deve derrubar a admissão.
    """
    extra: dict[str, object] = {
        "fallback_used": True,
        "component": component,
        "reason": reason,
    }
    if error_type:
        extra["error_type"] = error_type
    logger.warning("config_fallback_used", extra=extra)
