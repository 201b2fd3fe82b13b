"""Service exceptions and their JSON rendering."""
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from outreach.utils.logger import logger

INTERNAL_ERROR_MESSAGE = "Internal server error"


class ServiceError(Exception):
    """Base error rendered as ``{"error": message}``."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = INTERNAL_ERROR_MESSAGE) -> None:
        super().__init__(message)
        self.message = message


class MissingInputError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(ServiceError):
    status_code = status.HTTP_409_CONFLICT


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:  # pragma: no cover - last resort
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": INTERNAL_ERROR_MESSAGE},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)


@contextmanager
def store_errors(
    db: Session,
    action: str,
    message: str = INTERNAL_ERROR_MESSAGE,
    *,
    catch_all: bool = False,
) -> Iterator[None]:
    """Roll back, log and re-raise store failures as a generic ServiceError.

    With ``catch_all`` any unexpected exception is reported with ``message``,
    not only SQLAlchemy errors.
    """

    try:
        yield
    except ServiceError:
        raise
    except Exception as exc:
        if not catch_all and not isinstance(exc, SQLAlchemyError):
            raise
        db.rollback()
        logger.exception("Error %s", action)
        raise ServiceError(message) from exc
