import json
import logging
from typing import Any, Type

from app.exceptions import (
    AuthenticationError,
    DomainError,
    InternalError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def error_kind(status_code: int) -> Type[DomainError]:
    match status_code:
        case 400 | 409:
            return ValidationError
        case 401 | 403:
            return AuthenticationError
        case 404:
            return NotFoundError
        case _ if 400 <= status_code < 500:
            return ValidationError
        case _:
            return InternalError


def extract_message(body: Any) -> str | None:
    """
    Returns the "message" or, failing that, the "error" field of a JSON error body. The body may
    be raw text or an already decoded object.
    """
    if isinstance(body, (bytes, bytearray)):
        body = body.decode("utf-8", errors="replace")

    if isinstance(body, str):
        if body.strip() == "":
            return None
        try:
            body = json.loads(body)
        except json.JSONDecodeError:
            return None

    if not isinstance(body, dict):
        return None

    for key in ("message", "error"):
        value = body.get(key)
        if isinstance(value, str) and value.strip():
            return value

    return None


def translate_backend_error(
    status_code: int, body: Any, default_message: str | None = None
) -> DomainError:
    kind = error_kind(status_code)
    message = extract_message(body) or default_message or kind.default_message
    logger.warning("Backend answered %s, raising %s: %s", status_code, kind.__name__, message)
    return kind(message)
