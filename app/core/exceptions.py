"""
Custom exception classes and RFC 7807 error handling.
"""
from typing import Optional
from pydantic import BaseModel, ConfigDict
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger


class ErrorResponse(BaseModel):
    """RFC 7807 Problem Details response model, extended with the error kind."""
    type: str
    title: str
    status: int
    detail: str
    name: str
    instance: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class AppException(Exception):
    """Base application exception."""

    name = "AppError"

    def __init__(
        self,
        status_code: int,
        error_type: str,
        title: str,
        detail: str,
    ):
        self.status_code = status_code
        self.error_type = error_type
        self.title = title
        self.detail = detail
        super().__init__(detail)


class InvalidInputError(AppException):
    """Missing or unusable source URL, payload or freshness timestamp."""

    name = "InvalidInput"

    def __init__(self, detail: str):
        super().__init__(
            status_code=400,
            error_type="https://problems.example.com/invalid-input",
            title="Invalid Input",
            detail=detail,
        )


class ExhaustedRetriesError(AppException):
    """The backend kept failing transiently until the retry budget ran out."""

    name = "ExhaustedRetries"

    def __init__(self, detail: str, attempts: int):
        self.attempts = attempts
        super().__init__(
            status_code=503,
            error_type="https://problems.example.com/exhausted-retries",
            title="Summarization Failed",
            detail=detail,
        )


class PermanentBackendError(AppException):
    """The backend rejected the request or replied with an unusable body."""

    name = "PermanentBackendFailure"

    def __init__(self, detail: str, backend_status: Optional[int] = None):
        self.backend_status = backend_status
        super().__init__(
            status_code=502,
            error_type="https://problems.example.com/backend-failure",
            title="Bad Gateway",
            detail=detail,
        )


class PipelineTimeoutError(AppException):
    """The request ran past the pipeline deadline."""

    name = "PipelineTimeout"

    def __init__(self, timeout_seconds: float):
        super().__init__(
            status_code=504,
            error_type="https://problems.example.com/pipeline-timeout",
            title="Gateway Timeout",
            detail=f"Summarization did not finish within {timeout_seconds:g} seconds.",
        )


class InternalServerError(AppException):
    """Internal server error exception."""

    name = "InternalError"

    def __init__(self, detail: str = "An unexpected error occurred."):
        super().__init__(
            status_code=500,
            error_type="https://problems.example.com/internal-error",
            title="Internal Server Error",
            detail=detail,
        )


class CacheUnavailableError(Exception):
    """
    The summary cache store failed a read or write.

    Never rendered to the client: the pipeline logs it and carries on.
    """


def create_error_response(
    request: Request,
    status_code: int,
    error_type: str,
    title: str,
    detail: str,
    name: str,
) -> JSONResponse:
    """Create a RFC 7807 compliant JSON error response."""
    error = ErrorResponse(
        type=error_type,
        title=title,
        status=status_code,
        detail=detail,
        name=name,
        instance=str(request.url.path),
    )
    return JSONResponse(
        status_code=status_code,
        content=error.model_dump(),
        media_type="application/problem+json",
    )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handle AppException and return RFC 7807 response."""
    logger.warning(f"{exc.name}: {exc.detail}")
    return create_error_response(
        request=request,
        status_code=exc.status_code,
        error_type=exc.error_type,
        title=exc.title,
        detail=exc.detail,
        name=exc.name,
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request body validation failures as InvalidInput."""
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())[1:])
        message = error.get("msg", "invalid value")
        problems.append(f"{location}: {message}" if location else message)
    detail = "; ".join(problems) or "Request body is invalid."
    return await app_exception_handler(request, InvalidInputError(detail))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected failures and hide their internals behind a 500."""
    logger.opt(exception=exc).error(f"Unhandled error on {request.url.path}: {exc}")
    fallback = InternalServerError()
    return await app_exception_handler(request, fallback)
