"""
Exception handlers translating domain and framework errors to JSON responses.

With DEBUG off, messages are generic so internals never leak to clients.
"""
from typing import Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import HTTPException, RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from invoice.config.sentry import add_breadcrumb, capture_exception
from invoice.config.settings import InvoiceConfigs
from invoice.core.constants import ErrorKeys
from invoice.core.exceptions import BadRequestAlertException, EntityNotFoundError, InvalidSortError
from invoice.logging.utils import get_app_logger
from invoice.middlewares.request_context import request_context
from invoice.utils.header_utils import create_failure_alert

logger = get_app_logger("invoice.middlewares.handlers")
configs = InvoiceConfigs()

DEBUG = configs.DEBUG

GENERIC_MESSAGES = {
    status.HTTP_404_NOT_FOUND: "Resource not found",
    status.HTTP_409_CONFLICT: f"error.{ErrorKeys.DATA_INTEGRITY}",
    status.HTTP_422_UNPROCESSABLE_ENTITY: "Invalid request data",
}


def _generic_message(status_code: int) -> str:
    if status_code in GENERIC_MESSAGES:
        return GENERIC_MESSAGES[status_code]
    return "Invalid request" if status_code < 500 else "Something went wrong"


def _respond(request: Request, event: str, status_code: int, payload: dict,
             headers: Optional[Dict[str, str]] = None, detail: str = "") -> JSONResponse:
    request_context.module_name = 'middleware_handlers'
    logger.warning(f"{event} | method={request.method} url={request.url} status_code={status_code} detail={detail}")
    return JSONResponse(status_code=status_code, content=payload, headers=headers)


def _alert_payload(title: str, entity_name: str, error_key: str) -> dict:
    return {"message": f"error.{error_key}", "title": title, "entity_name": entity_name, "error_key": error_key}


async def _validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [f"{' -> '.join(str(loc) for loc in err.get('loc', []))}: {err.get('msg', 'Invalid input')}"
              for err in exc.errors()]
    if not DEBUG:
        payload = {"message": _generic_message(status.HTTP_422_UNPROCESSABLE_ENTITY)}
    elif len(errors) == 1:
        payload = {"message": errors[0]}
    else:
        payload = {"message": "Validation errors", "errors": errors}
    return _respond(request, "validation_error", status.HTTP_422_UNPROCESSABLE_ENTITY, payload, detail="; ".join(errors))


async def _bad_request_alert_handler(request: Request, exc: BadRequestAlertException):
    """400 carrying the entity/error-key failure alert headers."""
    return _respond(
        request, "bad_request_alert", exc.status_code,
        _alert_payload(exc.detail, exc.entity_name, exc.error_key),
        headers=create_failure_alert(exc.entity_name, exc.error_key),
        detail=exc.error_key,
    )


async def _invalid_sort_handler(request: Request, exc: InvalidSortError):
    return _respond(
        request, "invalid_sort", status.HTTP_400_BAD_REQUEST,
        _alert_payload(str(exc), exc.entity_name, ErrorKeys.BAD_SORT),
        headers=create_failure_alert(exc.entity_name, ErrorKeys.BAD_SORT),
        detail=exc.prop,
    )


async def _integrity_error_handler(request: Request, exc: IntegrityError):
    """FK and NOT NULL violations surface as 409 Conflict."""
    payload = {"message": f"error.{ErrorKeys.DATA_INTEGRITY}"}
    if DEBUG:
        payload["detail"] = str(exc.orig)
    return _respond(request, "data_integrity_violation", status.HTTP_409_CONFLICT, payload, detail=str(exc.orig))


async def _entity_not_found_handler(request: Request, exc: EntityNotFoundError):
    message = str(exc) if DEBUG else _generic_message(status.HTTP_404_NOT_FOUND)
    return _respond(request, "entity_not_found", status.HTTP_404_NOT_FOUND, {"message": message}, detail=str(exc))


async def _http_exception_handler(request: Request, exc: HTTPException):
    status_code = exc.status_code
    if status_code >= 500:
        add_breadcrumb(
            message=f"HTTP {status_code} on {request.method} {request.url}",
            category="http",
            level="error",
            data={"status_code": status_code, "detail": exc.detail},
        )
        capture_exception(exc)
    message = exc.detail if DEBUG else _generic_message(status_code)
    return _respond(request, "http_exception", status_code, {"message": message},
                    headers=getattr(exc, 'headers', None), detail=exc.detail)


async def _general_exception_handler(request: Request, exc: Exception):
    request_context.module_name = 'middleware_handlers'
    logger.error(
        f"unhandled_exception | method={request.method} url={request.url} exception_type={type(exc).__name__} error={exc}",
        exc_info=exc,
    )
    add_breadcrumb(
        message=f"Unhandled {type(exc).__name__} on {request.method} {request.url}",
        category="exception",
        level="error",
        data={"exception_message": str(exc)},
    )
    capture_exception(exc)
    message = f"Internal server error: {exc}" if DEBUG else _generic_message(status.HTTP_500_INTERNAL_SERVER_ERROR)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"message": message})


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the handlers; the most specific exception class wins."""
    handlers = {
        RequestValidationError: _validation_exception_handler,
        BadRequestAlertException: _bad_request_alert_handler,
        InvalidSortError: _invalid_sort_handler,
        IntegrityError: _integrity_error_handler,
        EntityNotFoundError: _entity_not_found_handler,
        HTTPException: _http_exception_handler,
        Exception: _general_exception_handler,
    }
    for exc_class, handler in handlers.items():
        app.add_exception_handler(exc_class, handler)
