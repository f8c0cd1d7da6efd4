"""Application errors and their mapping to `{"error": ...}` JSON responses.

Handlers raise one of the `AppError` subclasses; `register_exception_handlers`
turns them into the matching status code. Anything unexpected is logged and
reported as a generic 500 so no internal detail reaches the client.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = 'Internal server error'


class AppError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = INTERNAL_ERROR_MESSAGE

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = 'Unauthorized'


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = 'Forbidden'


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = 'Not found'


class Conflict(AppError):
    # Duplicates are reported as 400 to existing clients.
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = 'Already exists'


class ValidationFailed(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = 'Invalid request'


class ServiceUnavailable(AppError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = 'Service unavailable'


class InternalFailure(AppError):
    pass


def error_response(status_code: int, message) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={'error': message})


async def app_error_handler(_request: Request, exc: AppError) -> JSONResponse:
    if isinstance(exc, InternalFailure):
        logger.error('Internal failure: %s', exc.message)
        return error_response(exc.status_code, INTERNAL_ERROR_MESSAGE)
    return error_response(exc.status_code, exc.message)


async def http_exception_handler(_request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={'error': exc.detail},
        headers=getattr(exc, 'headers', None),
    )


async def validation_exception_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.debug('Rejected request body: %s', exc.errors())
    return error_response(status.HTTP_400_BAD_REQUEST, 'Invalid request body')


async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception('Database error while handling %s %s', request.method, request.url.path)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception('Unhandled error while handling %s %s', request.method, request.url.path)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
