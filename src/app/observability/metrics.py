"""Registro de métricas via structured logging.

As métricas são registradas como logs estruturados e agregadas
posteriormente pelo backend de logs.

Métricas suportadas:
- Latência: tempo de execução por componente/operação
- Admissão: resultado terminal de cada submissão (código + status HTTP)
- Entrega: sucesso, tentativas e migração de chat
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def record_latency(
    component: str,
    operation: str,
    latency_ms: float,
) -> None:
    """Registra latência de operação.

    Args:
        component: Nome do componente (ex: "admission")
        operation: Nome da operação (ex: "execute")
        latency_ms: Latência em milissegundos
    """
    logger.info(
        "metric_latency",
        extra={
            "metric_type": "latency",
            "component": component,
            "operation": operation,
            "latency_ms": round(latency_ms, 2),
        },
    )


def record_admission(
    outcome: str,
    http_status: int,
    duplicate: bool = False,
) -> None:
    """Registra resultado terminal da admissão.

    Args:
        outcome: "ok", "honeypot" ou o código de erro estável
        http_status: Status HTTP devolvido
        duplicate: Submissão reconhecida como repetida
    """
    logger.info(
        "metric_admission",
        extra={
            "metric_type": "admission",
            "outcome": outcome,
            "http_status": http_status,
            "duplicate": duplicate,
        },
    )


def record_delivery(
    success: bool,
    attempts: int,
    migrated: bool,
    latency_ms: float,
) -> None:
    """Registra resultado de uma entrega ao Telegram."""
    logger.info(
        "metric_delivery",
        extra={
            "metric_type": "delivery",
            "success": success,
            "attempts": attempts,
            "migrated": migrated,
            "latency_ms": round(latency_ms, 2),
        },
    )
