"""Global exception handlers that map domain exceptions to HTTP responses."""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from mes_admin.errors import DomainError, ErrorKind
from mes_admin.schemas.error import ErrorResponse

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "INTERNAL_ERROR"

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.DUPLICATE_RESOURCE: status.HTTP_409_CONFLICT,
    ErrorKind.ALREADY_DELETED: status.HTTP_409_CONFLICT,
    ErrorKind.NOT_DELETED: status.HTTP_409_CONFLICT,
    ErrorKind.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
}

_unmapped = set(ErrorKind) - set(STATUS_BY_KIND)
if _unmapped:
    raise RuntimeError(f"Error kinds without an HTTP status: {sorted(k.value for k in _unmapped)}")


def _error_response(
    status_code: int, detail: str, code: str, field: str | None = None
) -> JSONResponse:
    """Return a standardized error response with detail and machine-readable code."""
    body = ErrorResponse(detail=detail, code=code, field=field)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def domain_error_handler(_request: Request, exc: DomainError) -> JSONResponse:
    return _error_response(
        STATUS_BY_KIND[exc.kind],
        str(exc),
        exc.kind.value,
        getattr(exc, "field", None),
    )


def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Unexpected store failure on %s %s", request.method, request.url.path)
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal server error",
        INTERNAL_ERROR,
    )


def register_exception_handlers(app):
    """Register domain and store exception handlers on the FastAPI app."""
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
