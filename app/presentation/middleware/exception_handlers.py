"""
Exception handlers globais — converte exceções de domínio/aplicação
em respostas HTTP padronizadas.

Endpoints que não tratam erros localmente (ex.: cadastro de usuário)
dependem exclusivamente deste mapeamento.
"""

from __future__ import annotations

import logging
import traceback

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.domain.shared.exceptions import (
    ConstraintViolationError,
    NotFoundError,
)

logger = logging.getLogger(__name__)

_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}


def request_validation_messages(exc: RequestValidationError) -> list[str]:
    """Erros do pydantic no formato "campo: mensagem"."""
    messages = []
    for error in exc.errors():
        loc = [str(p) for p in error.get("loc", ()) if p not in _LOCATION_PREFIXES]
        field = ".".join(loc) or "request"
        messages.append(f"{field}: {error.get('msg', '')}")
    return messages


def _error_body(request: Request, error: str, detail) -> dict:
    return {
        "error": error,
        "detail": detail,
        "request_id": getattr(request.state, "request_id", None),
    }


def register_exception_handlers(app: FastAPI) -> None:
    """Registra todos os handlers de exceção na app FastAPI."""

    @app.exception_handler(NotFoundError)
    async def not_found_error_handler(request: Request, exc: NotFoundError):
        body = _error_body(request, "not_found", str(exc))
        body["resource"] = exc.resource
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=body)

    @app.exception_handler(ConstraintViolationError)
    async def constraint_violation_handler(request: Request, exc: ConstraintViolationError):
        logger.warning("Erro de validação em %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body(request, "validation_error", exc.messages()),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body(request, "validation_error", request_validation_messages(exc)),
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body(request, "bad_request", str(exc)),
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception on %s %s: %s\n%s",
            request.method,
            request.url.path,
            exc,
            traceback.format_exc(),
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(request, "internal_server_error", "Erro interno do servidor"),
        )
