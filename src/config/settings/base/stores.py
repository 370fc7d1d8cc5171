"""Settings dos stores chave-valor com TTL.

Um único backend atende os três stores lógicos (rate limit,
idempotência e configuração), separados por namespace.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from config.settings.base.core import BaseSettings

KeyValueBackend = Literal["memory", "redis"]


@dataclass(frozen=True)
class StoreSettings:
    """Configurações dos stores chave-valor.

    Attributes:
        backend: Backend dos stores (memory|redis)
        rate_limit_namespace: Prefixo das chaves de rate limit
        idempotency_namespace: Prefixo das chaves de idempotência
        config_namespace: Prefixo das chaves de configuração/migração
        redis_timeout_seconds: Timeout de conexão e de socket do Redis
    """

    backend: KeyValueBackend = "memory"
    rate_limit_namespace: str = "relay:rate_limit:"
    idempotency_namespace: str = "relay:idempotency:"
    config_namespace: str = "relay:config:"
    redis_timeout_seconds: float = 5.0

    def validate(self, base: BaseSettings) -> list[str]:
        """Valida configurações dos stores.

        Args:
            base: BaseSettings para verificar ambiente.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if self.backend not in ("memory", "redis"):
            errors.append(f"KV_BACKEND inválido: {self.backend}")

        if self.backend == "memory" and not base.is_development:
            errors.append(
                "KV_BACKEND=memory proibido em staging/production. Use Redis."
            )

        if self.backend == "redis" and not base.redis_url:
            errors.append("KV_BACKEND=redis requer REDIS_URL configurado")

        if self.redis_timeout_seconds <= 0:
            errors.append("KV_REDIS_TIMEOUT_SECONDS deve ser positivo")

        namespaces = {
            self.rate_limit_namespace,
            self.idempotency_namespace,
            self.config_namespace,
        }
        if len(namespaces) != 3:
            errors.append("Namespaces dos stores devem ser distintos")

        return errors


def _load_stores_from_env() -> StoreSettings:
    """Carrega StoreSettings de variáveis de ambiente."""
    backend_str = os.getenv("KV_BACKEND", "memory").lower()
    backend: KeyValueBackend = backend_str if backend_str in ("memory", "redis") else "memory"
    try:
        redis_timeout = float(os.getenv("KV_REDIS_TIMEOUT_SECONDS", "5"))
    except ValueError:
        redis_timeout = 5.0
    return StoreSettings(
        backend=backend,
        rate_limit_namespace=os.getenv("KV_RATE_LIMIT_NAMESPACE", "relay:rate_limit:"),
        idempotency_namespace=os.getenv("KV_IDEMPOTENCY_NAMESPACE", "relay:idempotency:"),
        config_namespace=os.getenv("KV_CONFIG_NAMESPACE", "relay:config:"),
        redis_timeout_seconds=redis_timeout,
    )


@lru_cache(maxsize=1)
def get_store_settings() -> StoreSettings:
    """Retorna instância cacheada de StoreSettings."""
    return _load_stores_from_env()
