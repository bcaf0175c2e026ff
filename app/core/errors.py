# app/core/errors.py
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger("errors")


class ServiceError(Exception):
    """Erro de domínio com status HTTP associado."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidArgument(ServiceError):
    status_code = 400


class NotFound(ServiceError):
    status_code = 404


class PayloadTooLarge(ServiceError):
    status_code = 413


class StorageFailed(ServiceError):
    status_code = 502


class QueryExecutionFailed(ServiceError):
    status_code = 500


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        # a causa original já foi logada por quem levantou; aqui só o acesso
        logger.error(
            "%s em %s %s: %s",
            type(exc).__name__, request.method, request.url.path, exc.message,
        )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
