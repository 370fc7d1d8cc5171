"""Observabilidade: correlation_id e métricas via logs estruturados.

Uso:
    from app.observability import correlation_scope, get_correlation_id
    from app.observability import record_admission, record_delivery, record_latency
"""

from app.observability.correlation import (
    correlation_scope,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)
from app.observability.metrics import (
    record_admission,
    record_delivery,
    record_latency,
)

__all__ = [
    "correlation_scope",
    "get_correlation_id",
    "record_admission",
    "record_delivery",
    "record_latency",
    "reset_correlation_id",
    "set_correlation_id",
]
