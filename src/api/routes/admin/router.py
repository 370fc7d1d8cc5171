"""API administrativa das origens permitidas.

Endpoints (todos exigem header X-Admin-Key igual a ADMIN_KEY):
- GET /admin/origins: lista padrões dinâmicos, estáticos e updatedAt
- PUT /admin/origins: substitui os padrões dinâmicos
- POST /admin/origins: adiciona um padrão
- DELETE /admin/origins/{pattern}: remove um padrão

Sem ADMIN_KEY configurada a API responde 503; chave errada, 401.
"""

from __future__ import annotations

import hmac
import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app.bootstrap import get_origin_pattern_provider
from app.services.origin_patterns import (
    OriginPatternProvider,
    OriginsDocument,
    normalize_patterns,
)
from config.settings import RelaySettings, get_relay_settings

logger = logging.getLogger(__name__)

router = APIRouter()


def _error(error: str, status_code: int) -> JSONResponse:
    return JSONResponse(content={"status": "error", "error": error}, status_code=status_code)


def _check_admin_key(request: Request, settings: RelaySettings) -> JSONResponse | None:
    if not settings.admin_key:
        return _error("admin_not_configured", 503)

    provided = request.headers.get("x-admin-key", "")
    if not provided or not hmac.compare_digest(provided, settings.admin_key):
        logger.warning("admin_unauthorized", extra={"path": request.url.path})
        return _error("unauthorized", 401)
    return None


async def _read_json_object(request: Request) -> dict[str, Any] | None:
    try:
        body = await request.json()
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


async def _load_document(provider: OriginPatternProvider) -> OriginsDocument | None:
    try:
        return await provider.load_document()
    except ValueError:
        logger.warning("admin_origins_document_malformed")
        return None


def _clean_pattern(value: Any) -> str:
    return str(value).strip().lower()


@router.get("/origins")
async def list_origins(
    request: Request,
    settings: RelaySettings = Depends(get_relay_settings),
    provider: OriginPatternProvider = Depends(get_origin_pattern_provider),
) -> JSONResponse:
    """Lista padrões dinâmicos e estáticos."""
    denied = _check_admin_key(request, settings)
    if denied is not None:
        return denied

    document = await _load_document(provider)
    return JSONResponse(
        content={
            "status": "ok",
            "origins": {
                "dynamic": document.patterns if document else [],
                "env": provider.static_patterns,
                "updatedAt": document.updated_at if document else None,
            },
        }
    )


@router.put("/origins")
async def replace_origins(
    request: Request,
    settings: RelaySettings = Depends(get_relay_settings),
    provider: OriginPatternProvider = Depends(get_origin_pattern_provider),
) -> JSONResponse:
    """Substitui todos os padrões dinâmicos por `{"patterns": [...]}`."""
    denied = _check_admin_key(request, settings)
    if denied is not None:
        return denied

    body = await _read_json_object(request)
    if body is None or not isinstance(body.get("patterns"), list):
        return _error("invalid_payload", 400)

    document = await provider.save_patterns(normalize_patterns(body["patterns"]))
    return JSONResponse(content={"status": "ok", "origins": document.patterns})


@router.post("/origins")
async def add_origin(
    request: Request,
    settings: RelaySettings = Depends(get_relay_settings),
    provider: OriginPatternProvider = Depends(get_origin_pattern_provider),
) -> JSONResponse:
    """Adiciona `{"pattern": "..."}` aos padrões dinâmicos."""
    denied = _check_admin_key(request, settings)
    if denied is not None:
        return denied

    body = await _read_json_object(request) or {}
    pattern = _clean_pattern(body.get("pattern") or "")
    if not pattern:
        return _error("invalid_pattern", 400)

    document = await _load_document(provider)
    current = document.patterns if document else []
    if pattern in current:
        return JSONResponse(
            content={"status": "ok", "message": "already_exists", "origins": current}
        )

    updated = await provider.save_patterns([*current, pattern])
    return JSONResponse(content={"status": "ok", "origins": updated.patterns})


@router.delete("/origins/{pattern:path}")
async def remove_origin(
    pattern: str,
    request: Request,
    settings: RelaySettings = Depends(get_relay_settings),
    provider: OriginPatternProvider = Depends(get_origin_pattern_provider),
) -> JSONResponse:
    """Remove um padrão dinâmico; 404 se ausente."""
    denied = _check_admin_key(request, settings)
    if denied is not None:
        return denied

    target = _clean_pattern(pattern)
    if not target:
        return _error("invalid_pattern", 400)

    document = await _load_document(provider)
    if document is None or target not in document.patterns:
        return _error("not_found", 404)

    remaining = [item for item in document.patterns if item != target]
    updated = await provider.save_patterns(remaining)
    return JSONResponse(content={"status": "ok", "origins": updated.patterns})
