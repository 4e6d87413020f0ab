"""
Domain error taxonomy shared by every service.

Repositories translate store failures into these variants at their boundary;
routers never see SQLAlchemy or driver exceptions. Each variant carries the HTTP
status it maps to, and `register_exception_handlers` renders all of them as
`{"error": "<message>"}`.
"""
import re
from contextlib import asynccontextmanager, contextmanager
from typing import Mapping, Optional

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.exceptions import HTTPException as StarletteHTTPException

from shared.observability.metrics import scms_transaction_rollbacks_total

logger = structlog.get_logger(__name__)

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
CHECK_VIOLATION = "23514"


class ServiceError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def public_message(self) -> str:
        return self.message[:1].upper() + self.message[1:]


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity: str, detail: Optional[str] = None):
        self.entity = entity
        super().__init__(detail or f"{entity} not found")


class DuplicateKeyError(ServiceError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, entity: str, detail: Optional[str] = None):
        self.entity = entity
        article = "An" if entity[:1].lower() in "aeiou" else "A"
        super().__init__(detail or f"{article} {entity} with this information already exists")


class InvalidTransitionError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class ValidationError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message)


class InternalFailure(ServiceError):
    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)


# --- Store error classification ---

_VIOLATED_COLUMN = re.compile(r"Key \((\w+)\)=")


def _sqlstate(exc: SQLAlchemyError) -> Optional[str]:
    orig = getattr(exc, "orig", None)
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code:
        return code
    # SQLite reports constraint kinds only in the message text
    message = str(orig)
    if "UNIQUE constraint failed" in message:
        return UNIQUE_VIOLATION
    if "FOREIGN KEY constraint failed" in message:
        return FOREIGN_KEY_VIOLATION
    if "CHECK constraint failed" in message:
        return CHECK_VIOLATION
    return None


def classify_integrity_error(
    exc: IntegrityError,
    entity: str,
    parent: Optional[str] = None,
    parents: Optional[Mapping[str, str]] = None,
    duplicate_detail: Optional[str] = None,
) -> ServiceError:
    code = _sqlstate(exc)
    if code == UNIQUE_VIOLATION:
        return DuplicateKeyError(entity, duplicate_detail)
    if code == FOREIGN_KEY_VIOLATION and (parent or parents):
        # PostgreSQL names the offending column in the detail line
        match = _VIOLATED_COLUMN.search(str(exc.orig))
        if match and parents and match.group(1) in parents:
            return NotFoundError(parents[match.group(1)])
        return NotFoundError(parent or next(iter(parents.values())))
    if code == CHECK_VIOLATION:
        return ValidationError(entity, f"invalid {entity} values")
    return InternalFailure(f"failed to write {entity}", exc)


@contextmanager
def store_errors(
    action: str,
    entity: str,
    parent: Optional[str] = None,
    parents: Optional[Mapping[str, str]] = None,
    duplicate_detail: Optional[str] = None,
):
    """Translate store exceptions raised inside the block into domain errors."""
    try:
        yield
    except IntegrityError as exc:
        raise classify_integrity_error(exc, entity, parent, parents, duplicate_detail) from exc
    except SQLAlchemyError as exc:
        raise InternalFailure(f"failed to {action}", exc) from exc


@asynccontextmanager
async def transaction(db: AsyncSession, operation: str):
    """
    Commit the session when the block succeeds, roll back on any failure.

    Store exceptions that escape classification inside the block become
    InternalFailure; domain errors propagate unchanged.
    """
    try:
        yield db
        await db.commit()
    except ServiceError:
        await db.rollback()
        scms_transaction_rollbacks_total.labels(operation=operation).inc()
        raise
    except SQLAlchemyError as exc:
        await db.rollback()
        scms_transaction_rollbacks_total.labels(operation=operation).inc()
        raise InternalFailure(f"failed to {operation}", exc) from exc
    except BaseException:
        await db.rollback()
        scms_transaction_rollbacks_total.labels(operation=operation).inc()
        raise


# --- HTTP rendering ---

async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "request_failed",
            path=request.url.path,
            error=exc.message,
            cause=repr(getattr(exc, "cause", None)),
        )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.public_message})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    else:
        message = "Invalid request payload"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
