"""Testes da aplicação montada por create_app."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.app import create_app
from app.bootstrap import get_admission_pipeline
from app.infra.stores import MemoryKeyValueStore
from app.policies import IdempotencyGuard, SlidingWindowRateLimiter
from app.protocols.models import DeliveryResult
from app.services.origin_patterns import OriginPatternProvider
from app.services.routing import ChatRouter
from app.use_cases.relay import AdmissionPipeline
from config.settings import RelaySettings


class FakeDelivery:
    def __init__(self) -> None:
        self.texts: list[str] = []

    async def deliver(self, bot_token: str, chat_id: str, text: str) -> DeliveryResult:
        self.texts.append(text)
        return DeliveryResult(success=True, attempts=1)


class RejectingCaptcha:
    async def verify(self, token: str, secret: str) -> bool:
        return False


@pytest.fixture
def delivery() -> FakeDelivery:
    return FakeDelivery()


@pytest.fixture
def client(delivery: FakeDelivery) -> TestClient:
    config_store = MemoryKeyValueStore()
    provider = OriginPatternProvider(config_store, static_patterns=["example.com"])
    pipeline = AdmissionPipeline(
        settings=RelaySettings(),
        origin_provider=provider,
        rate_limiter=SlidingWindowRateLimiter(MemoryKeyValueStore()),
        idempotency_guard=IdempotencyGuard(MemoryKeyValueStore()),
        captcha_verifier=RejectingCaptcha(),
        router=ChatRouter(config_store, {}, "123:abc", "-100"),
        delivery=delivery,
        schedule_background=lambda coroutine: coroutine.close(),
    )

    app = create_app(origin_provider_getter=lambda: provider)
    app.dependency_overrides[get_admission_pipeline] = lambda: pipeline
    return TestClient(app)


def test_unknown_route_returns_not_found_envelope(client: TestClient) -> None:
    response = client.get("/nope")

    assert response.status_code == 404
    assert response.json() == {"status": "error", "error": "not_found"}


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["ok"] is True


def test_send_end_to_end(client: TestClient, delivery: FakeDelivery) -> None:
    headers = {"Origin": "https://example.com"}
    body = {"name": "Ana", "email": "ana@example.com", "message": "<script>&"}

    first = client.post("/send", json=body, headers=headers)
    second = client.post("/send", json=body, headers=headers)

    assert first.status_code == 200
    assert len(first.json()["request_id"]) == 64
    assert first.headers["access-control-allow-origin"] == "https://example.com"
    assert second.json()["duplicate"] is True
    assert len(delivery.texts) == 1
    assert "&lt;script&gt;&amp;" in delivery.texts[0]


def test_send_from_unlisted_origin(client: TestClient, delivery: FakeDelivery) -> None:
    response = client.post("/send", json={"message": "oi"}, headers={"Origin": "https://x.io"})

    assert response.status_code == 403
    assert response.json()["error"] == "origin_not_allowed"
    assert "access-control-allow-origin" not in response.headers
    assert delivery.texts == []
