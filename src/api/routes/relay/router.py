"""Endpoint público do relay.

Endpoints:
- POST /send: recebe o formulário de contato e entrega no Telegram

A validação e o anti-abuso ficam no AdmissionPipeline; este módulo só
adapta HTTP para AdmissionRequest e AdmissionOutcome para JSON.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.routes.relay.form_parsing import read_contact_form, resolve_client_ip
from app.bootstrap import get_admission_pipeline
from app.observability import correlation_scope
from app.use_cases.relay import AdmissionPipeline, AdmissionRequest
from utils.errors import InfrastructureError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/send")
async def send_contact_form(
    request: Request,
    pipeline: AdmissionPipeline = Depends(get_admission_pipeline),
) -> JSONResponse:
    """Admite uma submissão e responde com o envelope JSON do relay."""
    with correlation_scope(request.headers.get("x-correlation-id")):
        admission_request = AdmissionRequest(
            origin=request.headers.get("origin", ""),
            client_ip=resolve_client_ip(request.headers),
            idempotency_key=request.headers.get("idempotency-key", ""),
            read_form=lambda: read_contact_form(request),
        )
        try:
            outcome = await pipeline.execute(admission_request)
        except InfrastructureError as exc:
            logger.error(
                "relay_infrastructure_error",
                extra={"error_type": type(exc).__name__},
            )
            return JSONResponse(
                content={"status": "error", "error": "internal_error"},
                status_code=500,
            )

    return JSONResponse(content=outcome.to_body(), status_code=outcome.http_status)
