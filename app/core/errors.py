from typing import Any, Dict, List, Sequence

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException


GENERIC_ERROR = "Internal server error"

# Location prefixes FastAPI adds in front of the actual field name
_LOC_PREFIXES = {"body", "query", "path", "header", "cookie"}


def _field_name(loc: Sequence[Any]) -> str:
    parts = [str(p) for p in loc if str(p) not in _LOC_PREFIXES]
    return ".".join(parts) or "body"


def format_validation_errors(errors: List[Dict[str, Any]]) -> str:
    """
    Turns pydantic error dicts into one field-identifying message.
    Only the first error is reported, mirroring how forms surface them.
    """
    if not errors:
        return "Invalid request"

    error = errors[0]
    field = _field_name(error.get("loc", ()))

    if error.get("type") == "missing":
        return f"Missing required field: {field}"
    return f"Invalid value for {field}: {error.get('msg', 'invalid')}"


def validation_http_error(exc: ValidationError) -> HTTPException:
    """Converts a pydantic ValidationError raised inside a service to a 400."""
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=format_validation_errors(exc.errors())
    )


def error_response(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message},
        headers=headers,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


async def request_validation_handler(request: Request, exc: RequestValidationError):
    message = format_validation_errors(exc.errors())
    logger.info(f"Rejected {request.method} {request.url.path}: {message}")
    return error_response(status.HTTP_400_BAD_REQUEST, message)


async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception(f"Store error on {request.method} {request.url.path}")
    orig = getattr(exc, "orig", None)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        str(orig) if orig is not None else str(exc)
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unexpected error on {request.method} {request.url.path}")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR)


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
