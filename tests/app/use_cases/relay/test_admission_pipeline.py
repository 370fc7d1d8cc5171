"""Testes do pipeline de admissão do relay."""

from __future__ import annotations

import re
from unittest.mock import AsyncMock

import pytest

from app.infra.stores import MemoryKeyValueStore
from app.policies import IdempotencyGuard, SlidingWindowRateLimiter
from app.protocols.models import ContactFormData, DeliveryResult
from app.services.routing import ChatRouter
from app.use_cases.relay import AdmissionPipeline, AdmissionRequest, parse_client_timestamp
from config.settings import RelaySettings, parse_routing_json
from utils.errors import RedisConnectionError

NOW_MS = 1_700_000_000_000
ORIGIN = "https://www.example.com"


class FakeOriginProvider:
    def __init__(self, patterns: list[str]) -> None:
        self.patterns = patterns

    async def load_patterns(self) -> list[str]:
        return list(self.patterns)


class Harness:
    """Monta o pipeline com stores em memória e colaboradores falsos."""

    def __init__(
        self,
        *,
        patterns: list[str] | None = None,
        settings: RelaySettings | None = None,
        bot_token: str = "123:abc",
        chat_id: str = "-100",
        delivery_result: DeliveryResult | None = None,
        captcha_ok: bool = True,
        routing_table: dict[str, dict[str, str]] | None = None,
    ) -> None:
        self.rate_store = MemoryKeyValueStore()
        self.idem_store = MemoryKeyValueStore()
        self.config_store = MemoryKeyValueStore()
        self.captcha = AsyncMock()
        self.captcha.verify = AsyncMock(return_value=captcha_ok)
        self.delivery = AsyncMock()
        self.delivery.deliver = AsyncMock(
            return_value=delivery_result or DeliveryResult(success=True, attempts=1)
        )
        self.scheduled: list = []
        self.router = ChatRouter(
            self.config_store,
            routing_table=routing_table or {},
            default_bot_token=bot_token,
            default_chat_id=chat_id,
        )
        self.pipeline = AdmissionPipeline(
            settings=settings or RelaySettings(),
            origin_provider=FakeOriginProvider(patterns if patterns is not None else ["example.com"]),
            rate_limiter=SlidingWindowRateLimiter(self.rate_store, clock_ms=lambda: NOW_MS),
            idempotency_guard=IdempotencyGuard(self.idem_store),
            captcha_verifier=self.captcha,
            router=self.router,
            delivery=self.delivery,
            schedule_background=self.scheduled.append,
            clock_ms=lambda: NOW_MS,
        )
        self.form_reads = 0

    def request(
        self,
        form: ContactFormData | None = None,
        *,
        origin: str = ORIGIN,
        ip: str = "1.2.3.4",
        idempotency_key: str = "",
    ) -> AdmissionRequest:
        async def _read_form() -> ContactFormData:
            self.form_reads += 1
            return form or ContactFormData()

        return AdmissionRequest(
            origin=origin,
            client_ip=ip,
            idempotency_key=idempotency_key,
            read_form=_read_form,
        )


VALID_FORM = ContactFormData(
    name="Ana",
    email="ana@example.com",
    telegram="@ana",
    message="Olá <b>mundo</b>",
    ts=str(NOW_MS - 5000),
)


class TestParseClientTimestamp:
    """ts é lido como inteiro inicial; ilegível vira 0."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("1700000000000", 1_700_000_000_000), ("123abc", 123), ("  42", 42), ("abc", 0), ("", 0)],
    )
    def test_parse(self, raw: str, expected: int) -> None:
        assert parse_client_timestamp(raw) == expected


@pytest.mark.asyncio
async def test_successful_submission_delivers_and_returns_fingerprint() -> None:
    harness = Harness()

    outcome = await harness.pipeline.execute(harness.request(VALID_FORM))

    assert outcome.http_status == 200
    assert outcome.to_body()["status"] == "ok"
    assert re.fullmatch(r"[0-9a-f]{64}", outcome.request_id)
    bot_token, chat_id, text = harness.delivery.deliver.await_args.args
    assert (bot_token, chat_id) == ("123:abc", "-100")
    assert "&lt;b&gt;mundo&lt;/b&gt;" in text
    assert "https://t.me/ana" in text
    assert "example.com" in text


@pytest.mark.asyncio
async def test_explicit_idempotency_key_is_request_id() -> None:
    harness = Harness()

    outcome = await harness.pipeline.execute(
        harness.request(VALID_FORM, idempotency_key="abc-123")
    )

    assert outcome.request_id == "abc-123"


@pytest.mark.asyncio
async def test_origin_not_allowed_short_circuits() -> None:
    harness = Harness(patterns=["other.com"])

    outcome = await harness.pipeline.execute(harness.request(VALID_FORM))

    assert outcome.http_status == 403
    assert outcome.error == "origin_not_allowed"
    assert "example.com" in outcome.detail
    assert harness.form_reads == 0
    assert len(harness.rate_store) == 0
    harness.delivery.deliver.assert_not_awaited()


@pytest.mark.asyncio
async def test_empty_pattern_list_allows_any_origin() -> None:
    harness = Harness(patterns=[])

    outcome = await harness.pipeline.execute(harness.request(VALID_FORM, origin="https://x.io"))

    assert outcome.http_status == 200


@pytest.mark.asyncio
async def test_rate_limited_after_limit() -> None:
    harness = Harness(settings=RelaySettings(rate_limit_per_min=2))

    statuses = []
    for index in range(3):
        form = ContactFormData(message=f"msg {index}")
        outcome = await harness.pipeline.execute(harness.request(form))
        statuses.append(outcome.http_status)

    assert statuses == [200, 200, 429]
    assert harness.form_reads == 2


@pytest.mark.asyncio
async def test_honeypot_returns_silent_success() -> None:
    harness = Harness()
    form = ContactFormData(message="buy now", website="http://spam.io")

    outcome = await harness.pipeline.execute(harness.request(form))

    assert outcome.http_status == 200
    assert outcome.to_body() == {"status": "ok"}
    harness.delivery.deliver.assert_not_awaited()
    assert len(harness.idem_store) == 0


@pytest.mark.asyncio
async def test_honeypot_wins_over_captcha_and_missing_routing() -> None:
    settings = RelaySettings(enable_turnstile=True, turnstile_secret="s3cret")
    harness = Harness(settings=settings, captcha_ok=False, bot_token="", chat_id="")
    form = ContactFormData(message="buy now", website="http://spam.io", cf_turnstile_response="bad")

    outcome = await harness.pipeline.execute(harness.request(form))

    assert outcome.http_status == 200
    assert outcome.to_body() == {"status": "ok"}
    harness.captcha.verify.assert_not_awaited()
    harness.delivery.deliver.assert_not_awaited()


@pytest.mark.asyncio
async def test_too_fast_submission_rejected() -> None:
    harness = Harness()
    form = ContactFormData(message="oi", ts=str(NOW_MS - 100))

    outcome = await harness.pipeline.execute(harness.request(form))

    assert outcome.http_status == 400
    assert outcome.error == "too_fast"


@pytest.mark.parametrize(
    ("age_ms", "expected_status"),
    [(500, 400), (799, 400), (800, 200), (1000, 200)],
)
@pytest.mark.asyncio
async def test_timing_gate_boundary(age_ms: int, expected_status: int) -> None:
    harness = Harness()
    form = ContactFormData(message="oi", ts=str(NOW_MS - age_ms))

    outcome = await harness.pipeline.execute(harness.request(form))

    assert outcome.http_status == expected_status
    if expected_status == 400:
        assert outcome.error == "too_fast"
        harness.delivery.deliver.assert_not_awaited()


@pytest.mark.asyncio
async def test_unparseable_ts_skips_timing_gate() -> None:
    harness = Harness()
    form = ContactFormData(message="oi", ts="not-a-number")

    outcome = await harness.pipeline.execute(harness.request(form))

    assert outcome.http_status == 200


@pytest.mark.asyncio
async def test_empty_payload_rejected() -> None:
    harness = Harness()
    form = ContactFormData(name="Só o nome", message="   ", telegram="@")

    outcome = await harness.pipeline.execute(harness.request(form))

    assert outcome.http_status == 400
    assert outcome.error == "empty_payload"


@pytest.mark.asyncio
async def test_email_alone_is_enough() -> None:
    harness = Harness()

    outcome = await harness.pipeline.execute(harness.request(ContactFormData(email="a@x.io")))

    assert outcome.http_status == 200


@pytest.mark.asyncio
async def test_captcha_skipped_when_disabled() -> None:
    harness = Harness(captcha_ok=False)

    outcome = await harness.pipeline.execute(harness.request(VALID_FORM))

    assert outcome.http_status == 200
    harness.captcha.verify.assert_not_awaited()


@pytest.mark.asyncio
async def test_captcha_failure_rejected() -> None:
    settings = RelaySettings(enable_turnstile=True, turnstile_secret="s3cret")
    harness = Harness(settings=settings, captcha_ok=False)
    form = ContactFormData(message="oi", hcaptcha_response="tok")

    outcome = await harness.pipeline.execute(harness.request(form))

    assert outcome.http_status == 400
    assert outcome.error == "captcha_failed"
    harness.captcha.verify.assert_awaited_once_with("tok", "s3cret")
    harness.delivery.deliver.assert_not_awaited()


@pytest.mark.asyncio
async def test_duplicate_submission_not_delivered_twice() -> None:
    harness = Harness()

    first = await harness.pipeline.execute(harness.request(VALID_FORM))
    second = await harness.pipeline.execute(harness.request(VALID_FORM))

    assert first.http_status == 200
    assert second.http_status == 200
    assert second.duplicate is True
    assert second.to_body()["duplicate"] is True
    assert second.request_id == first.request_id
    assert harness.delivery.deliver.await_count == 1


@pytest.mark.asyncio
async def test_fingerprint_ignores_whitespace_and_handle_format() -> None:
    harness = Harness()
    variant = ContactFormData(
        name="  Ana ",
        email="ana@example.com",
        telegram="https://t.me/ana/",
        message="Olá <b>mundo</b>  ",
    )

    first = await harness.pipeline.execute(harness.request(VALID_FORM))
    second = await harness.pipeline.execute(harness.request(variant))

    assert second.duplicate is True
    assert second.request_id == first.request_id


@pytest.mark.asyncio
async def test_routing_not_configured() -> None:
    harness = Harness(bot_token="", chat_id="")

    outcome = await harness.pipeline.execute(harness.request(VALID_FORM))

    assert outcome.http_status == 500
    assert outcome.error == "routing_not_configured"
    harness.delivery.deliver.assert_not_awaited()


@pytest.mark.asyncio
async def test_blank_route_token_is_routing_not_configured() -> None:
    table = parse_routing_json('{"example.com": {"bot_token": "  ", "chat_id": "-1"}}')
    harness = Harness(routing_table=table, bot_token="", chat_id="")

    outcome = await harness.pipeline.execute(harness.request(VALID_FORM))

    assert outcome.http_status == 500
    assert outcome.error == "routing_not_configured"
    harness.delivery.deliver.assert_not_awaited()


@pytest.mark.asyncio
async def test_whitespace_default_token_is_routing_not_configured() -> None:
    harness = Harness(bot_token="   ")

    outcome = await harness.pipeline.execute(harness.request(VALID_FORM))

    assert outcome.http_status == 500
    assert outcome.error == "routing_not_configured"
    harness.delivery.deliver.assert_not_awaited()


@pytest.mark.asyncio
async def test_delivery_failure_returns_502_with_detail() -> None:
    harness = Harness(
        delivery_result=DeliveryResult(success=False, error="Forbidden: bot was kicked", attempts=3)
    )

    outcome = await harness.pipeline.execute(harness.request(VALID_FORM))

    assert outcome.http_status == 502
    assert outcome.to_body() == {
        "status": "error",
        "error": "telegram_send_failed",
        "detail": "Forbidden: bot was kicked",
    }


@pytest.mark.asyncio
async def test_migration_is_scheduled_for_configured_chat() -> None:
    harness = Harness(
        delivery_result=DeliveryResult(success=True, migrated_chat_id="-100999", attempts=1)
    )

    outcome = await harness.pipeline.execute(harness.request(VALID_FORM))

    assert outcome.http_status == 200
    assert len(harness.scheduled) == 1
    await harness.scheduled[0]
    assert await harness.config_store.get("migrated_chat:-100") == "-100999"

    # Próxima entrega já usa o chat migrado
    harness.delivery.deliver.return_value = DeliveryResult(success=True, attempts=1)
    await harness.pipeline.execute(harness.request(ContactFormData(message="outra")))
    assert harness.delivery.deliver.await_args.args[1] == "-100999"


@pytest.mark.asyncio
async def test_store_failure_propagates_as_infrastructure_error() -> None:
    harness = Harness()
    harness.rate_store.get = AsyncMock(side_effect=RedisConnectionError("down"))

    with pytest.raises(RedisConnectionError):
        await harness.pipeline.execute(harness.request(VALID_FORM))
