"""Settings do relay de formulários.

Parâmetros de admissão: origens permitidas, rate limit,
verificação de captcha e chave administrativa.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

TURNSTILE_VERIFY_URL: str = "https://challenges.cloudflare.com/turnstile/v0/siteverify"


def parse_allowed_origins(raw: str | None) -> tuple[str, ...]:
    """Converte ALLOWED_ORIGINS (separado por vírgula) em padrões normalizados."""
    if not raw:
        return ()
    patterns = (part.strip().lower() for part in raw.split(","))
    return tuple(pattern for pattern in patterns if pattern)


@dataclass(frozen=True)
class RelaySettings:
    """Configurações do pipeline de admissão.

    Attributes:
        allowed_origins: Padrões estáticos de origem (vazio = permite todas)
        rate_limit_per_min: Máximo de submissões por IP por minuto
        min_submit_interval_ms: Tempo mínimo entre carga do form e envio
        enable_turnstile: Ativa verificação de captcha
        turnstile_secret: Secret do Turnstile
        turnstile_verify_url: Endpoint de verificação
        captcha_timeout_seconds: Timeout da chamada de verificação
        admin_key: Chave da API administrativa de origens
    """

    allowed_origins: tuple[str, ...] = ()
    rate_limit_per_min: int = 30
    min_submit_interval_ms: int = 800
    enable_turnstile: bool = False
    turnstile_secret: str = ""
    turnstile_verify_url: str = TURNSTILE_VERIFY_URL
    captcha_timeout_seconds: float = 10.0
    admin_key: str = ""

    def validate(self) -> list[str]:
        """Valida configurações do relay."""
        errors: list[str] = []

        if self.rate_limit_per_min < 1:
            errors.append("RATE_LIMIT_PER_MIN deve ser >= 1")

        if self.min_submit_interval_ms < 0:
            errors.append("MIN_SUBMIT_INTERVAL_MS deve ser >= 0")

        if self.enable_turnstile and not self.turnstile_secret:
            errors.append("ENABLE_TURNSTILE=true requer TURNSTILE_SECRET")

        return errors


def _parse_positive_int(raw: str | None, default: int) -> int:
    try:
        value = int(raw or "")
    except ValueError:
        return default
    return value if value > 0 else default


def _load_from_env() -> RelaySettings:
    """Carrega RelaySettings de variáveis de ambiente."""
    return RelaySettings(
        allowed_origins=parse_allowed_origins(os.getenv("ALLOWED_ORIGINS")),
        rate_limit_per_min=_parse_positive_int(os.getenv("RATE_LIMIT_PER_MIN"), 30),
        min_submit_interval_ms=int(os.getenv("MIN_SUBMIT_INTERVAL_MS", "800")),
        enable_turnstile=os.getenv("ENABLE_TURNSTILE", "").lower() == "true",
        turnstile_secret=os.getenv("TURNSTILE_SECRET", ""),
        turnstile_verify_url=os.getenv("TURNSTILE_VERIFY_URL", TURNSTILE_VERIFY_URL),
        captcha_timeout_seconds=float(os.getenv("CAPTCHA_TIMEOUT_SECONDS", "10")),
        admin_key=os.getenv("ADMIN_KEY", ""),
    )


@lru_cache(maxsize=1)
def get_relay_settings() -> RelaySettings:
    """Retorna instância cacheada de RelaySettings."""
    return _load_from_env()
