"""Settings específicas de Telegram.

Configurações do canal Telegram via Bot API: credenciais padrão,
tabela de roteamento por domínio e política de retry do envio.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from functools import lru_cache

logger = logging.getLogger(__name__)

# Constantes da Telegram Bot API
TELEGRAM_API_BASE_URL: str = "https://api.telegram.org"


def parse_routing_json(raw: str) -> dict[str, dict[str, str]]:
    """Converte ROUTING_JSON em tabela hostname -> {chat_id, bot_token}.

    JSON malformado ou com formato inesperado resulta em tabela vazia;
    entradas que não são objetos são descartadas e credenciais
    em branco são omitidas.

    Args:
        raw: Conteúdo bruto de ROUTING_JSON.

    Returns:
        Tabela de roteamento com hostnames em minúsculas.
    """
    if not raw or not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("routing_json_invalid", extra={"reason": "decode_error"})
        return {}
    if not isinstance(data, dict):
        logger.warning("routing_json_invalid", extra={"reason": "not_object"})
        return {}

    table: dict[str, dict[str, str]] = {}
    for host, rule in data.items():
        if not isinstance(rule, dict):
            continue
        values = {key: str(rule.get(key) or "").strip() for key in ("chat_id", "bot_token")}
        table[str(host).strip().lower()] = {key: value for key, value in values.items() if value}
    return table


@dataclass(frozen=True)
class TelegramSettings:
    """Configurações do canal Telegram.

    Attributes:
        bot_token: Token padrão do bot (obtido via @BotFather)
        default_chat_id: Chat de destino padrão
        routing_json: JSON com regras de roteamento por domínio
        api_base_url: URL base da API
        request_timeout_seconds: Timeout para requisições HTTP
        max_retries: Máximo de tentativas contadas como falha
        backoff_step_seconds: Passo do backoff linear entre tentativas
    """

    # Credenciais
    bot_token: str = ""
    default_chat_id: str = ""
    routing_json: str = ""

    # API
    api_base_url: str = TELEGRAM_API_BASE_URL

    # Timeouts e retries
    request_timeout_seconds: float = 10.0
    max_retries: int = 3
    backoff_step_seconds: float = 0.4

    @property
    def routing_table(self) -> dict[str, dict[str, str]]:
        """Tabela de roteamento por hostname."""
        return parse_routing_json(self.routing_json)

    def validate(self) -> list[str]:
        """Valida configurações mínimas de Telegram."""
        errors: list[str] = []
        routes = self.routing_table

        if not self.bot_token and not any(r.get("bot_token") for r in routes.values()):
            errors.append("BOT_TOKEN não configurado")

        if not self.default_chat_id and not any(r.get("chat_id") for r in routes.values()):
            errors.append("TG_DEFAULT_CHAT_ID não configurado")

        if self.routing_json.strip() and not routes:
            errors.append("ROUTING_JSON inválido ou vazio")

        if self.request_timeout_seconds <= 0:
            errors.append("TELEGRAM_REQUEST_TIMEOUT_SECONDS deve ser > 0")

        if self.max_retries < 1:
            errors.append("TELEGRAM_MAX_RETRIES deve ser >= 1")

        if self.backoff_step_seconds < 0:
            errors.append("TELEGRAM_BACKOFF_STEP_SECONDS deve ser >= 0")

        return errors


def _load_from_env() -> TelegramSettings:
    """Carrega TelegramSettings de variáveis de ambiente."""
    return TelegramSettings(
        bot_token=os.getenv("BOT_TOKEN", "").strip(),
        default_chat_id=os.getenv("TG_DEFAULT_CHAT_ID", "").strip(),
        routing_json=os.getenv("ROUTING_JSON", ""),
        api_base_url=os.getenv("TELEGRAM_API_BASE_URL", TELEGRAM_API_BASE_URL),
        request_timeout_seconds=float(
            os.getenv("TELEGRAM_REQUEST_TIMEOUT_SECONDS", "10")
        ),
        max_retries=int(os.getenv("TELEGRAM_MAX_RETRIES", "3")),
        backoff_step_seconds=float(os.getenv("TELEGRAM_BACKOFF_STEP_SECONDS", "0.4")),
    )


@lru_cache(maxsize=1)
def get_telegram_settings() -> TelegramSettings:
    """Retorna instância cacheada de TelegramSettings.

    A cache garante singleton para múltiplas injeções.
    """
    return _load_from_env()
