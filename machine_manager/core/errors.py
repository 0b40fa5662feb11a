"""Error taxonomy and the FastAPI handlers that turn it into JSON responses.

Registry and ledger functions raise the exceptions below; they never build
HTTP responses themselves. ``register_exception_handlers`` wires the mapping
onto the application so every failure leaves the service as
``{"error": "<message>"}`` with the matching status code.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class MachineManagerError(Exception):
    """Base class for errors the service reports to clients."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(MachineManagerError, ValueError):
    """Required input is missing or malformed."""

    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(MachineManagerError):
    """A uniqueness rule (the machine serial number) would be broken."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(MachineManagerError, LookupError):
    status_code = status.HTTP_404_NOT_FOUND


class ErrorEnvelope(JSONResponse):
    def __init__(self, *, status_code: int, message: str, headers: dict[str, str] | None = None) -> None:
        super().__init__({"error": message}, status_code=status_code, headers=headers)


def require_fields(data: dict, fields: dict[str, str]) -> None:
    """Raise ``ValidationError`` naming every field in ``fields`` that is absent.

    ``fields`` maps attribute names to the names clients see on the wire. A
    value counts as missing when it is ``None`` or a blank string; ``0`` is a
    legitimate price, cost or hour count.
    """

    missing = []
    for key, label in fields.items():
        value = data.get(key)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(label)
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")


async def machine_manager_error_handler(request: Request, exc: MachineManagerError):
    return ErrorEnvelope(status_code=exc.status_code, message=exc.message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    detail = exc.detail
    message = detail if isinstance(detail, str) else "Error"
    return ErrorEnvelope(status_code=exc.status_code, message=message, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    missing: list[str] = []
    invalid: list[str] = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        name = ".".join(loc) or "body"
        if error.get("type") == "missing":
            missing.append(name)
        else:
            invalid.append(f"{name} ({error.get('msg', 'invalid')})")
    if missing:
        message = f"Missing required fields: {', '.join(missing)}"
    else:
        message = f"Invalid fields: {', '.join(invalid)}"
    return ErrorEnvelope(status_code=status.HTTP_400_BAD_REQUEST, message=message)


async def unexpected_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error during %s %s", request.method, request.url.path)
    return ErrorEnvelope(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, message=str(exc) or exc.__class__.__name__)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MachineManagerError, machine_manager_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unexpected_exception_handler)
