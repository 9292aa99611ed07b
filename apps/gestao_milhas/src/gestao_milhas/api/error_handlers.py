"""Global API exception handlers producing the ``{ok: false}`` envelope."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any, cast

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from gestao_milhas.domain.errors import (
    DomainError,
    InvalidRequestError,
    compose_error_message,
)

logger = logging.getLogger(__name__)


def _error_payload(code: str, message: str, details: dict[str, Any]) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "ok": False,
        "error": message,
        "code": code,
    }
    if details:
        payload["details"] = details
    return payload


async def handle_domain_error(_: Request, exc: DomainError) -> JSONResponse:
    """Serialize domain error to the error envelope."""

    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(_error_payload(exc.code, exc.message, exc.details)),
    )


async def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Map request validation failures to an invalid request error."""

    error = InvalidRequestError(
        message=compose_error_message(
            cause="Request validation failed.",
            action="Fix the invalid fields and send the request again.",
        ),
        details={"errors": jsonable_encoder(exc.errors())},
    )
    return await handle_domain_error(request, error)


async def handle_integrity_error(_: Request, exc: IntegrityError) -> JSONResponse:
    """Translate persistence integrity errors to a client error."""

    logger.warning("integrity_error", extra={"error": str(exc.orig)})
    return JSONResponse(
        status_code=HTTPStatus.UNPROCESSABLE_ENTITY,
        content=_error_payload(
            code="PERSISTENCE_ERROR",
            message=compose_error_message(
                cause="A persistence constraint was violated.",
                action="Review request data consistency and retry.",
            ),
            details={},
        ),
    )


async def handle_unexpected_error(_: Request, exc: Exception) -> JSONResponse:
    """Serialize unexpected failures with generic message."""

    logger.exception("unexpected_api_error", exc_info=exc)
    return JSONResponse(
        status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
        content=_error_payload(
            code="INTERNAL_SERVER_ERROR",
            message=compose_error_message(
                cause="An unexpected internal error occurred.",
                action="Retry later or contact support if the error persists.",
            ),
            details={"error_type": type(exc).__name__},
        ),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Attach all global handlers to the FastAPI application."""

    app.add_exception_handler(DomainError, cast(Any, handle_domain_error))
    app.add_exception_handler(
        RequestValidationError, cast(Any, handle_validation_error)
    )
    app.add_exception_handler(IntegrityError, cast(Any, handle_integrity_error))
    app.add_exception_handler(Exception, handle_unexpected_error)
