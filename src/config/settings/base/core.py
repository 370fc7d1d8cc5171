"""Settings base do Contact Relay.

Ambiente, identificação do serviço nos logs e parâmetros do processo
HTTP. Conexão Redis compartilhada pelos stores chave-valor.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

from config.logging import VALID_LOG_LEVELS

Environment = Literal["development", "staging", "production"]


@dataclass(frozen=True)
class BaseSettings:
    """Configurações do processo.

    Attributes:
        environment: development | staging | production
        service_name: Identificação nos logs
        log_level: Nível do logger raiz
        port: Porta HTTP do uvicorn em execução direta
        redis_url: URL Redis (obrigatória com KV_BACKEND=redis)
    """

    environment: Environment = "development"
    service_name: str = "contact-relay"
    log_level: str = "INFO"
    port: int = 8080
    redis_url: str = ""

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    def validate(self) -> list[str]:
        """Retorna lista de erros (vazia = OK)."""
        errors: list[str] = []

        if not self.service_name:
            errors.append("SERVICE_NAME não pode ser vazio")

        if self.log_level.upper() not in VALID_LOG_LEVELS:
            errors.append(f"LOG_LEVEL inválido: {self.log_level}")

        if not 0 < self.port < 65536:
            errors.append(f"PORT fora do intervalo: {self.port}")

        return errors


def _parse_environment(raw: str) -> Environment:
    value = raw.strip().lower()
    if value in ("production", "prod"):
        return "production"
    if value in ("staging", "stage"):
        return "staging"
    return "development"


def _load_base_from_env() -> BaseSettings:
    """Carrega BaseSettings de variáveis de ambiente."""
    try:
        port = int(os.getenv("PORT", "8080"))
    except ValueError:
        port = 0
    return BaseSettings(
        environment=_parse_environment(os.getenv("ENVIRONMENT", "development")),
        service_name=os.getenv("SERVICE_NAME", "contact-relay"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        port=port,
        redis_url=os.getenv("REDIS_URL", ""),
    )


@lru_cache(maxsize=1)
def get_base_settings() -> BaseSettings:
    """Retorna instância cacheada de BaseSettings."""
    return _load_base_from_env()
