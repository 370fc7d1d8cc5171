"""Pipeline de admissão de submissões do formulário.

Portões sequenciais; cada um encerra a requisição ao rejeitar e os
seguintes não executam:

 1. origem fora da lista            -> 403 origin_not_allowed
 2. rate limit por IP               -> 429 rate_limited
 3. honeypot preenchido             -> 200 silencioso, sem entrega
 4. enviado rápido demais (< 800ms) -> 400 too_fast
 5. mensagem, handle e email vazios -> 400 empty_payload
 6. captcha (se ativo) inválido     -> 400 captcha_failed
 7. token repetido                  -> 200 duplicate=true
 8. sem bot/chat configurado        -> 500 routing_not_configured
 9. entrega falhou                  -> 502 telegram_send_failed
10. sucesso                         -> 200 request_id=<token>
"""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from app.observability import record_admission, record_latency
from app.policies import matches_origin, normalize_host, payload_fingerprint
from app.protocols.models import AdmissionOutcome, ContactFormData
from app.services.sanitizer import (
    EMAIL_MAX_LENGTH,
    HANDLE_MAX_LENGTH,
    MESSAGE_MAX_LENGTH,
    NAME_MAX_LENGTH,
    normalize_handle,
    render_message,
    trim_and_bound,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from app.policies import IdempotencyGuard, SlidingWindowRateLimiter
    from app.protocols import (
        CaptchaVerifierProtocol,
        MessageDeliveryProtocol,
        OriginPatternProviderProtocol,
    )
    from app.services.routing import ChatRouter
    from config.settings import RelaySettings

logger = logging.getLogger(__name__)

_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")


def parse_client_timestamp(raw: str) -> int:
    """Extrai o inteiro inicial de `ts`; 0 quando ausente/ilegível."""
    match = _LEADING_INT_RE.match(raw or "")
    return int(match.group(1)) if match else 0


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True, slots=True)
class AdmissionRequest:
    """Dados da requisição HTTP consumidos pelo pipeline.

    Atributos:
        origin: Header Origin bruto
        client_ip: Identificador do cliente para rate limit
        idempotency_key: Header Idempotency-Key (opcional)
        read_form: Lê e parseia o corpo; só é chamado após origem e rate limit
    """

    origin: str
    client_ip: str
    idempotency_key: str
    read_form: Callable[[], Awaitable[ContactFormData]]


class AdmissionPipeline:
    """Orquestra validação, anti-abuso, roteamento e entrega."""

    def __init__(
        self,
        *,
        settings: RelaySettings,
        origin_provider: OriginPatternProviderProtocol,
        rate_limiter: SlidingWindowRateLimiter,
        idempotency_guard: IdempotencyGuard,
        captcha_verifier: CaptchaVerifierProtocol,
        router: ChatRouter,
        delivery: MessageDeliveryProtocol,
        schedule_background: Callable[[Awaitable[None]], object],
        clock_ms: Callable[[], int] = _now_ms,
    ) -> None:
        self._settings = settings
        self._origin_provider = origin_provider
        self._rate_limiter = rate_limiter
        self._idempotency_guard = idempotency_guard
        self._captcha_verifier = captcha_verifier
        self._router = router
        self._delivery = delivery
        self._schedule_background = schedule_background
        self._clock_ms = clock_ms

    async def execute(self, request: AdmissionRequest) -> AdmissionOutcome:
        """Executa os portões em ordem e devolve o resultado terminal."""
        started_at = time.perf_counter()
        outcome, label = await self._run(request)
        record_latency("admission", "execute", (time.perf_counter() - started_at) * 1000)
        record_admission(label, outcome.http_status, duplicate=outcome.duplicate)
        return outcome

    async def _run(self, request: AdmissionRequest) -> tuple[AdmissionOutcome, str]:
        host = normalize_host(request.origin)
        patterns = await self._origin_provider.load_patterns()
        if not matches_origin(host, patterns):
            return self._reject(
                "origin_not_allowed",
                403,
                detail=f'host "{host}" does not match allowed patterns',
            )

        limited = await self._rate_limiter.check_and_record(
            request.client_ip,
            self._settings.rate_limit_per_min,
        )
        if limited:
            return self._reject("rate_limited", 429)

        form = await request.read_form()
        if form.website.strip():
            logger.info("relay_honeypot_triggered")
            return AdmissionOutcome.ok(), "honeypot"

        client_ts = parse_client_timestamp(form.ts)
        if client_ts > 0 and self._clock_ms() - client_ts < self._settings.min_submit_interval_ms:
            return self._reject("too_fast", 400)

        name = trim_and_bound(form.name, NAME_MAX_LENGTH)
        email = trim_and_bound(form.email, EMAIL_MAX_LENGTH)
        handle = normalize_handle(form.telegram)[:HANDLE_MAX_LENGTH]
        message = trim_and_bound(form.message, MESSAGE_MAX_LENGTH)

        if not message and not handle and not email:
            return self._reject("empty_payload", 400)

        if self._settings.enable_turnstile:
            verified = await self._captcha_verifier.verify(
                form.captcha_token,
                self._settings.turnstile_secret,
            )
            if not verified:
                return self._reject("captcha_failed", 400)

        token = request.idempotency_key or payload_fingerprint(
            {"host": host, "name": name, "email": email, "telegram": handle, "message": message}
        )
        if await self._idempotency_guard.is_duplicate(token):
            return AdmissionOutcome.ok(request_id=token, duplicate=True), "duplicate"

        target = await self._router.resolve(host)
        if not target.is_configured:
            logger.error("relay_routing_not_configured", extra={"host": host})
            return self._reject("routing_not_configured", 500)

        text = render_message(name, email, handle, message, host)
        result = await self._delivery.deliver(target.bot_token, target.chat_id, text)
        if not result.success:
            return self._reject("telegram_send_failed", 502, detail=result.error)

        if result.migrated_chat_id:
            self._schedule_background(
                self._router.remember_migration(
                    target.configured_chat_id or target.chat_id,
                    result.migrated_chat_id,
                )
            )

        logger.info("relay_delivered", extra={"host": host, "attempts": result.attempts})
        return AdmissionOutcome.ok(request_id=token), "ok"

    @staticmethod
    def _reject(
        error: str,
        http_status: int,
        detail: str | None = None,
    ) -> tuple[AdmissionOutcome, str]:
        logger.info("relay_rejected", extra={"error": error, "http_status": http_status})
        return AdmissionOutcome.rejected(error, http_status, detail=detail), error
