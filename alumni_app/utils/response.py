import logging

from fastapi import HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def create_response(
    message: str,
    data: dict | None = None,
    status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    """Return `{message, **data}` with the given status code."""
    content = {"message": message}
    if data:
        content.update(jsonable_encoder(data))
    return JSONResponse(status_code=status_code, content=content)


def error_response(detail: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": detail})


def handle_exception(error: Exception, fallback_message: str = "Internal server error") -> JSONResponse:
    """Coerce raised errors into the shared `{error}` payload."""
    if isinstance(error, (HTTPException, StarletteHTTPException)):
        detail = error.detail if isinstance(error.detail, str) else str(error.detail)
        if error.status_code >= 500:
            logger.error("Request failed: %s", detail)
        return error_response(detail, error.status_code)

    logger.error("Unhandled error: %s", fallback_message, exc_info=error)
    return error_response(fallback_message, status.HTTP_500_INTERNAL_SERVER_ERROR)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Errors raised from dependencies never reach the route's own try/except.
    return handle_exception(exc)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    detail = errors[0].get("msg") if errors else "Invalid request body"
    return error_response(f"Invalid request: {detail}", status.HTTP_400_BAD_REQUEST)
