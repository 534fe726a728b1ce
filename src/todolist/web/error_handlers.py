import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from todolist.errors import (
    AuthenticationError,
    ConflictError,
    DataConsistencyError,
    NotFoundError,
    StoreError,
    UserError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def create_json_error_response(
    status_code: int, message: str, error_type: str | None = None, headers: dict[str, str] | None = None
) -> JSONResponse:
    """Create JSON error response with optional type for machine parsing."""
    content = {"message": message}
    if error_type:
        content["type"] = error_type
    return JSONResponse(status_code=status_code, content=content, headers=headers)


async def user_error_handler(_: Request, exc: Exception) -> Response:
    """Handle all UserError subclasses with appropriate status codes."""
    headers = None
    if isinstance(exc, AuthenticationError):
        status_code = 401
        headers = {"WWW-Authenticate": "Bearer"}
    elif isinstance(exc, NotFoundError):
        status_code = 404
    elif isinstance(exc, ConflictError):
        status_code = 409
    elif isinstance(exc, ValidationError):
        status_code = 400
    else:
        # Default for any other UserError subclass
        status_code = 400

    error_type = exc.error_type if isinstance(exc, UserError) else "bad_request"
    return create_json_error_response(status_code=status_code, message=str(exc), error_type=error_type, headers=headers)


async def request_validation_error_handler(_: Request, exc: Exception) -> Response:
    """Report malformed request bodies, queries and path parameters as 400 validation errors."""
    errors = exc.errors() if isinstance(exc, RequestValidationError) else []
    message = "Invalid request"
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first["loc"] if part not in ("body", "query", "path"))
        message = f"{field}: {first['msg']}" if field else first["msg"]
    return create_json_error_response(status_code=400, message=message, error_type="validation_error")


async def infrastructure_error_handler(request: Request, exc: Exception) -> Response:
    """Handle server-side faults (500) without exposing their details."""
    # StoreError and DataConsistencyError are logged where they are raised
    if not isinstance(exc, StoreError | DataConsistencyError):
        logger.error("Infrastructure error on %s %s: %s", request.method, request.url.path, exc)
    return create_json_error_response(
        status_code=500, message="An unexpected error occurred.", error_type="internal_server_error"
    )


async def general_exception_handler(_: Request, exc: Exception) -> Response:
    """Handle unexpected errors (500)."""
    logger.exception("Unexpected error: %s", exc)
    return create_json_error_response(
        status_code=500, message="An unexpected error occurred.", error_type="internal_server_error"
    )
