from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException

from ..logger import get_logger
from .errors import InternalError, LeaderboardError, ValidationError, issues_from_pydantic

logger = get_logger(__name__)


async def leaderboard_error_handler(request: Request, exc: LeaderboardError):
    return ORJSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError):
    error = ValidationError(issues_from_pydantic(exc.errors()))
    logger.debug(f"{request.method} {request.url.path} rejected: {error.issues}")
    return ORJSONResponse(status_code=error.status_code, content=error.to_dict())


async def http_exception_handler(request: Request, exc: HTTPException):
    return ORJSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc!r}")
    error = InternalError()
    return ORJSONResponse(status_code=error.status_code, content=error.to_dict())


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(LeaderboardError, leaderboard_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    # only reached by errors raised in the outer middleware layers
    app.add_exception_handler(Exception, unhandled_exception_handler)
