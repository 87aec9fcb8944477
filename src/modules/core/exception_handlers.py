"""Project-wide DRF exception handler.

Reshapes every error DRF produces on its own (authentication, permission,
parse and validation failures) into the storefront's uniform body::

    {"success": false, "message": "..."}

Domain exceptions never reach this handler: views catch them explicitly.
"""

from __future__ import annotations

from typing import Any

import structlog
from pydantic import ValidationError as PydanticValidationError
from rest_framework.views import exception_handler

logger = structlog.get_logger(__name__)


def _first_message(detail: Any) -> str:
    """Flatten a DRF ``detail`` payload (str, list or dict) into one message."""
    if isinstance(detail, dict):
        for field, value in detail.items():
            message = _first_message(value)
            if field in ("detail", "non_field_errors"):
                return message
            return f"{field}: {message}"
        return "Invalid request."
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else "Invalid request."
    return str(detail)


def pydantic_message(exc: PydanticValidationError) -> str:
    """First validation error of *exc* as a client-facing sentence."""
    errors = exc.errors()
    if not errors:
        return "Invalid request."
    return str(errors[0]["msg"]).removeprefix("Value error, ")


def api_exception_handler(exc: Exception, context: dict) -> Any:
    response = exception_handler(exc, context)
    if response is None:
        return None

    message = _first_message(response.data)
    logger.info(
        "api.request_rejected",
        status_code=response.status_code,
        error=exc.__class__.__name__,
    )
    response.data = {"success": False, "message": message}
    return response
