from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    error: str
    detail: str | None = None
    status_code: int


class AppError(Exception):
    """Base application exception."""

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class ValidationError(AppError):
    """Malformed or incomplete submission or fulfillment payload."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=status.HTTP_422_UNPROCESSABLE_ENTITY)


class Unauthorized(AppError):
    """Authorization check failed.

    ``conceal`` marks denials on records outside the caller's company. Those are
    rendered exactly like a missing record so their existence does not leak.
    """

    def __init__(self, message: str = "Not authorized", *, conceal: bool = False) -> None:
        self.conceal = conceal
        super().__init__(message, status_code=status.HTTP_403_FORBIDDEN)


class NotFound(AppError):
    """Unknown request id or kind."""

    def __init__(self, message: str = "Request not found") -> None:
        super().__init__(message, status_code=status.HTTP_404_NOT_FOUND)


class InvalidTransition(AppError):
    """Status precondition violated."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=status.HTTP_409_CONFLICT)


class StaleState(AppError):
    """The record changed since the read that justified the action."""

    def __init__(self, message: str = "Request was modified by another reviewer; reload and retry") -> None:
        super().__init__(message, status_code=status.HTTP_409_CONFLICT)


class FulfillmentRequired(AppError):
    """Document completion attempted before a fulfillment was attached."""

    def __init__(self, message: str = "Attach a document before completing this request") -> None:
        super().__init__(message, status_code=status.HTTP_409_CONFLICT)


async def _app_exception_handler(request: Request, exc: AppError) -> JSONResponse:
    if isinstance(exc, Unauthorized) and exc.conceal:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=ErrorResponse(
                error="NotFound",
                detail="Request not available",
                status_code=status.HTTP_404_NOT_FOUND,
            ).model_dump(),
        )
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=type(exc).__name__,
            detail=exc.message,
            status_code=exc.status_code,
        ).model_dump(),
    )


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse(
            error="ValidationError",
            detail=str(exc.errors()),
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        ).model_dump(),
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers on the application."""
    app.add_exception_handler(AppError, _app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)  # type: ignore[arg-type]
