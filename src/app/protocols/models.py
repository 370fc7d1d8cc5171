"""Modelos de dados do relay (request-scoped, sem persistência)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping

CONTACT_FORM_FIELDS = (
    "name",
    "email",
    "telegram",
    "message",
    "website",
    "ts",
    "cf_turnstile_response",
    "hcaptcha_response",
)


@dataclass(frozen=True, slots=True)
class ContactFormData:
    """Campos brutos do formulário, antes de sanitização.

    Atributos:
        name: Nome informado
        email: Email informado
        telegram: Handle ou URL de perfil Telegram
        message: Corpo livre da mensagem
        website: Honeypot (deve vir vazio de humanos)
        ts: Timestamp (ms) de carga do formulário no cliente
        cf_turnstile_response: Token do Turnstile
        hcaptcha_response: Token alternativo de captcha
    """

    name: str = ""
    email: str = ""
    telegram: str = ""
    message: str = ""
    website: str = ""
    ts: str = ""
    cf_turnstile_response: str = ""
    hcaptcha_response: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ContactFormData:
        """Constrói a partir de JSON/form, ignorando campos desconhecidos.

        Valores não-string (ex.: ts numérico em JSON) são convertidos;
        valores falsy (None, false, 0, "") viram string vazia.
        """
        values = {}
        for field_name in CONTACT_FORM_FIELDS:
            raw = data.get(field_name)
            values[field_name] = str(raw) if raw else ""
        return cls(**values)

    @property
    def captcha_token(self) -> str:
        """Token de captcha (Turnstile tem precedência)."""
        return self.cf_turnstile_response or self.hcaptcha_response


@dataclass(frozen=True, slots=True)
class RouteTarget:
    """Destino resolvido: credencial do bot e chat.

    Atributos:
        bot_token: Token do bot
        chat_id: Chat efetivo (após cache de migração)
        configured_chat_id: Chat da configuração, chave do cache de migração
    """

    bot_token: str
    chat_id: str
    configured_chat_id: str = ""

    @property
    def is_configured(self) -> bool:
        return bool(self.bot_token.strip() and self.chat_id.strip())


@dataclass(frozen=True, slots=True)
class TelegramSendResponse:
    """Resposta normalizada de sendMessage.

    Atributos:
        ok: Sucesso reportado pela API
        status_code: Status HTTP da resposta
        description: Descrição do erro (quando ok=False)
        migrate_to_chat_id: Novo chat id quando o grupo migrou
    """

    ok: bool
    status_code: int
    description: str | None = None
    migrate_to_chat_id: str | None = None

    @property
    def error_text(self) -> str:
        return self.description or f"HTTP {self.status_code}"


@dataclass(frozen=True, slots=True)
class DeliveryResult:
    """Resultado final de uma entrega com retry.

    Atributos:
        success: Mensagem aceita pela API
        error: Último erro (quando success=False)
        migrated_chat_id: Chat efetivo quando diferente do solicitado
        attempts: Tentativas contadas como falha + a de sucesso
    """

    success: bool
    error: str | None = None
    migrated_chat_id: str | None = None
    attempts: int = 0


@dataclass(frozen=True, slots=True)
class AdmissionOutcome:
    """Resultado terminal do pipeline de admissão.

    `error` é o código estável do contrato; `detail` é apenas informativo.
    """

    http_status: int
    status: str = "ok"
    error: str | None = None
    detail: str | None = None
    request_id: str | None = None
    duplicate: bool = False

    @classmethod
    def ok(cls, request_id: str | None = None, duplicate: bool = False) -> AdmissionOutcome:
        return cls(http_status=200, request_id=request_id, duplicate=duplicate)

    @classmethod
    def rejected(cls, error: str, http_status: int, detail: str | None = None) -> AdmissionOutcome:
        return cls(http_status=http_status, status="error", error=error, detail=detail)

    def to_body(self) -> dict[str, Any]:
        """Serializa no envelope JSON `{status, error?, detail?, request_id?, duplicate?}`."""
        body: dict[str, Any] = {"status": self.status}
        if self.error is not None:
            body["error"] = self.error
        if self.detail is not None:
            body["detail"] = self.detail
        if self.request_id is not None:
            body["request_id"] = self.request_id
        if self.duplicate:
            body["duplicate"] = True
        return body
