# app/core/errors.py
from typing import List, Union

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.utils.logger import get_logger

logger = get_logger(__name__)

Message = Union[str, List[str]]


class AppError(Exception):
    """Base error: carries the message and HTTP status sent to the client."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal Server Error"

    def __init__(self, message: Message = None, status_code: int = None):
        self.message = message if message is not None else self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class BadRequestError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Bad Request"


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not Found"


def error_body(message: Message, status_code: int) -> dict:
    return {"error": {"message": message, "status": status_code}}


def _error_response(message: Message, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=error_body(message, status_code))


def format_validation_errors(errors) -> List[str]:
    """pydantic error dicts -> ``"body.itemName: Field required"`` strings."""
    out = []
    for err in errors:
        loc = ".".join(str(part) for part in err.get("loc", ()))
        out.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return out


async def app_error_handler(request: Request, exc: AppError):
    return _error_response(exc.message, exc.status_code)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    return _error_response(format_validation_errors(exc.errors()), status.HTTP_400_BAD_REQUEST)


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return _error_response(exc.detail, exc.status_code)


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return _error_response("Internal Server Error", status.HTTP_500_INTERNAL_SERVER_ERROR)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
