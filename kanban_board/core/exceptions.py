"""Error taxonomy shared by the service layer and the HTTP handlers.

Services raise these; ``register_exception_handlers`` renders them as
``{"error": <category>, "message": <text>}``.
"""
import math
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from kanban_board.logs import api_logger


class KanbanError(Exception):
    """Base class for every error surfaced to API callers"""

    category = "internal_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.category, "message": self.message}


class NotFoundError(KanbanError):
    """Referenced entity id does not exist"""

    category = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class InvalidReferenceError(NotFoundError):
    """Target container of a move does not exist"""

    category = "invalid_reference"


class ValidationError(KanbanError):
    """Missing or malformed required field"""

    category = "validation_error"
    status_code = status.HTTP_400_BAD_REQUEST


class PersistenceError(KanbanError):
    """The store rejected the write (FK violation, unique clash, lock timeout)"""

    category = "conflict_or_persistence"
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, message: str, retryable: bool = False):
        super().__init__(message)
        self.retryable = retryable
        if retryable:
            self.status_code = status.HTTP_503_SERVICE_UNAVAILABLE


def persistence_error(operation: str, exc: SQLAlchemyError) -> PersistenceError:
    """Wrap a raw SQLAlchemy failure with the operation that caused it"""
    orig = getattr(exc, "orig", None) or exc
    retryable = isinstance(exc, OperationalError) and "locked" in str(orig).lower()
    return PersistenceError(f"failed to {operation}: {orig}", retryable=retryable)


def require_text(value: Optional[str], field: str) -> str:
    """Reject absent or blank required text fields"""
    if value is None or not value.strip():
        raise ValidationError(f"{field} is required")
    return value.strip()


def require_position(value: Optional[float], field: str = "position") -> Optional[float]:
    """Reject NaN and infinite sort keys; ``None`` passes through"""
    if value is not None and not math.isfinite(value):
        raise ValidationError(f"{field} must be a finite number")
    return value


async def kanban_error_handler(request: Request, exc: KanbanError) -> JSONResponse:
    if exc.status_code >= 500 or isinstance(exc, PersistenceError):
        api_logger.error(f"{request.method} {request.url} failed: {exc.category}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    else:
        message = "Invalid request"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ValidationError(message).to_dict(),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(KanbanError, kanban_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
