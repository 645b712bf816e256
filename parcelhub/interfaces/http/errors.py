"""Translate domain errors into HTTP responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from parcelhub.modules.accounts.exceptions import AccountAlreadyExistsError
from parcelhub.modules.common.exceptions import (
    ConcurrentModification,
    CustomsUnpaid,
    DomainError,
    Forbidden,
    IllegalTransition,
    InvalidAmount,
    NotFound,
    PaymentFailed,
)
from parcelhub.modules.packages.exceptions import OrderNotShippableError, TrackingNumberTakenError

logger = logging.getLogger(__name__)

STATUS_BY_ERROR: dict[type[DomainError], int] = {
    Forbidden: status.HTTP_403_FORBIDDEN,
    IllegalTransition: status.HTTP_409_CONFLICT,
    InvalidAmount: status.HTTP_422_UNPROCESSABLE_ENTITY,
    PaymentFailed: status.HTTP_402_PAYMENT_REQUIRED,
    CustomsUnpaid: status.HTTP_409_CONFLICT,
    NotFound: status.HTTP_404_NOT_FOUND,
    ConcurrentModification: status.HTTP_409_CONFLICT,
    AccountAlreadyExistsError: status.HTTP_400_BAD_REQUEST,
    TrackingNumberTakenError: status.HTTP_409_CONFLICT,
    OrderNotShippableError: status.HTTP_409_CONFLICT,
}

RETRY_AFTER_SECONDS = "1"


def status_for(exc: DomainError) -> int:
    for cls in type(exc).__mro__:
        if cls in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[cls]
    return status.HTTP_400_BAD_REQUEST


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = status_for(exc)
    headers = None
    if getattr(exc, "retryable", False):
        headers = {"Retry-After": RETRY_AFTER_SECONDS}
    logger.info("%s %s -> %s (%s)", request.method, request.url.path, status_code, exc.code)
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "code": exc.code},
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)


__all__ = ["STATUS_BY_ERROR", "domain_error_handler", "register_exception_handlers", "status_for"]
