"""Composition root do Contact Relay.

Configura logging, valida settings no startup e expõe getters cacheados
que ligam stores, serviços e pipeline de admissão às rotas. Os getters
servem de dependências FastAPI e podem ser trocados via
`app.dependency_overrides` em testes.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from app.observability import get_correlation_id
from config.logging import configure_logging
from config.settings import (
    get_base_settings,
    get_relay_settings,
    get_store_settings,
    get_telegram_settings,
)

STRICT_VALIDATION_ENVS = {"staging", "production"}

logger = logging.getLogger(__name__)


def initialize_app() -> None:
    """Configura logging JSON com nível e serviço vindos de BaseSettings."""
    base = get_base_settings()
    configure_logging(
        level=base.log_level,
        service_name=base.service_name,
        correlation_id_getter=get_correlation_id,
    )


def initialize_test_app(json_format: bool = False) -> None:
    """Logging DEBUG para testes; texto legível por padrão."""
    configure_logging(
        level="DEBUG",
        service_name="contact-relay-test",
        correlation_id_getter=get_correlation_id,
        json_format=json_format,
    )


def validate_runtime_settings() -> None:
    """Valida settings obrigatórias no startup.

    Em `staging`/`production` falha rápido para impedir boot inválido.
    Em `development` mantém alerta sem bloquear execução local.
    """
    base = get_base_settings()
    strict_mode = base.environment in STRICT_VALIDATION_ENVS
    errors: list[str] = []

    errors.extend(f"base: {error}" for error in base.validate())
    errors.extend(f"stores: {error}" for error in get_store_settings().validate(base))
    errors.extend(f"telegram: {error}" for error in get_telegram_settings().validate())
    errors.extend(f"relay: {error}" for error in get_relay_settings().validate())

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": base.environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": base.environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if strict_mode:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {base.environment}:\n{details}")


# ──────────────────────────────────────────────────────────────────────────────
# Getters (lazy initialization com cache)
# ──────────────────────────────────────────────────────────────────────────────


@lru_cache(maxsize=1)
def get_rate_limit_store():
    """Obtém store do rate limit (singleton)."""
    from app.bootstrap.dependencies import create_key_value_store
    return create_key_value_store(get_store_settings().rate_limit_namespace)


@lru_cache(maxsize=1)
def get_idempotency_store():
    """Obtém store de idempotência (singleton)."""
    from app.bootstrap.dependencies import create_key_value_store
    return create_key_value_store(get_store_settings().idempotency_namespace)


@lru_cache(maxsize=1)
def get_config_store():
    """Obtém store de configuração: origens e cache de migração (singleton)."""
    from app.bootstrap.dependencies import create_key_value_store
    return create_key_value_store(get_store_settings().config_namespace)


@lru_cache(maxsize=1)
def get_origin_pattern_provider():
    """Obtém provedor de origens permitidas (singleton)."""
    from app.bootstrap.dependencies import create_origin_pattern_provider
    return create_origin_pattern_provider(get_config_store())


@lru_cache(maxsize=1)
def get_admission_pipeline():
    """Obtém pipeline de admissão (singleton)."""
    from api.routes.relay.runtime_tasks import schedule_background_task
    from app.bootstrap.dependencies import create_admission_pipeline
    return create_admission_pipeline(
        rate_limit_store=get_rate_limit_store(),
        idempotency_store=get_idempotency_store(),
        config_store=get_config_store(),
        schedule_background=schedule_background_task,
    )
