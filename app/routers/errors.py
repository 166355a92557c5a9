import logging
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.exceptions import (
    AuthenticationError,
    DomainError,
    InternalError,
    MappingError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

FHIR_JSON = "application/fhir+json"

# error kind -> (http status, OperationOutcome issue code)
ERROR_STATUS = {
    ValidationError: (400, "invalid"),
    AuthenticationError: (401, "login"),
    NotFoundError: (404, "not-found"),
    MappingError: (422, "processing"),
    InternalError: (500, "exception"),
}


def status_for(error: DomainError) -> tuple[int, str]:
    for kind, status in ERROR_STATUS.items():
        if isinstance(error, kind):
            return status
    return 500, "exception"


def operation_outcome(
    message: str, code: str, severity: str = "error"
) -> Dict[str, Any]:
    return {
        "resourceType": "OperationOutcome",
        "issue": [{"severity": severity, "code": code, "diagnostics": message}],
    }


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code, code = status_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected ({status_code}): {exc.message}")

    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return JSONResponse(
        status_code=status_code,
        content=operation_outcome(exc.message, code),
        media_type=FHIR_JSON,
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)  # type: ignore[arg-type]
