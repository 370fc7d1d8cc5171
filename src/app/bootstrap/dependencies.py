"""Factories de dependências: criação de implementações concretas.

Este módulo centraliza a criação de stores, connectors e serviços
baseados nas configurações de ambiente.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from api.connectors.http_base import HttpClientConfig
from api.connectors.telegram import create_telegram_http_client
from api.connectors.turnstile import TurnstileVerifier
from app.bootstrap.clients import create_async_redis_client
from app.infra.stores import MemoryKeyValueStore, RedisKeyValueStore
from app.policies import IdempotencyGuard, SlidingWindowRateLimiter
from app.services.delivery import TelegramDeliveryService
from app.services.origin_patterns import OriginPatternProvider
from app.services.routing import ChatRouter
from app.use_cases.relay import AdmissionPipeline
from config.settings import get_relay_settings, get_store_settings, get_telegram_settings

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from app.protocols import KeyValueStoreProtocol

logger = logging.getLogger(__name__)


def create_key_value_store(namespace: str) -> KeyValueStoreProtocol:
    """Cria store chave-valor conforme KV_BACKEND.

    - "memory": MemoryKeyValueStore (dev/testes)
    - "redis": RedisKeyValueStore (staging/production)

    Args:
        namespace: Prefixo das chaves no backend
    """
    backend = get_store_settings().backend

    if backend == "redis":
        store: KeyValueStoreProtocol = RedisKeyValueStore(
            create_async_redis_client(),
            namespace=namespace,
        )
    else:
        store = MemoryKeyValueStore(namespace=namespace)

    logger.info(
        "key_value_store_created",
        extra={"backend": backend, "namespace": namespace},
    )
    return store


def create_origin_pattern_provider(config_store: KeyValueStoreProtocol) -> OriginPatternProvider:
    return OriginPatternProvider(
        config_store,
        static_patterns=get_relay_settings().allowed_origins,
    )


def create_chat_router(config_store: KeyValueStoreProtocol) -> ChatRouter:
    telegram = get_telegram_settings()
    return ChatRouter(
        config_store,
        routing_table=telegram.routing_table,
        default_bot_token=telegram.bot_token,
        default_chat_id=telegram.default_chat_id,
    )


def create_delivery_service() -> TelegramDeliveryService:
    telegram = get_telegram_settings()
    return TelegramDeliveryService(
        create_telegram_http_client(telegram),
        max_attempts=telegram.max_retries,
        backoff_step_seconds=telegram.backoff_step_seconds,
    )


def create_captcha_verifier() -> TurnstileVerifier:
    relay = get_relay_settings()
    return TurnstileVerifier(
        verify_url=relay.turnstile_verify_url,
        config=HttpClientConfig(timeout_seconds=relay.captcha_timeout_seconds),
    )


def create_admission_pipeline(
    *,
    rate_limit_store: KeyValueStoreProtocol,
    idempotency_store: KeyValueStoreProtocol,
    config_store: KeyValueStoreProtocol,
    schedule_background: Callable[[Awaitable[None]], object],
) -> AdmissionPipeline:
    """Monta o pipeline de admissão com as implementações concretas."""
    return AdmissionPipeline(
        settings=get_relay_settings(),
        origin_provider=create_origin_pattern_provider(config_store),
        rate_limiter=SlidingWindowRateLimiter(rate_limit_store),
        idempotency_guard=IdempotencyGuard(idempotency_store),
        captcha_verifier=create_captcha_verifier(),
        router=create_chat_router(config_store),
        delivery=create_delivery_service(),
        schedule_background=schedule_background,
    )
