"""
Audit middleware: one structured record per API request, plus the
X-Request-ID response header.
"""
import json
import socket
import time
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from invoice.logging.config import logging_settings
from invoice.logging.utils import get_app_logger, init_audit_logger
from invoice.middlewares.request_context import clear_request_context, create_request_id, request_context

# Settings
from invoice.config.settings import InvoiceConfigs
configs = InvoiceConfigs()

REQUEST_ID_HEADER = "X-Request-ID"
MASKED_HEADERS = ("authorization",)
MAX_BODY_LOG_CHARS = 1000
DEFAULT_EXCLUDED_PATHS = ("/health", "/docs", "/redoc", "/openapi.json")


def _decode(raw: bytes, content_type: str) -> Any:
    text = raw.decode("utf-8", errors="replace")
    if "json" in content_type:
        try:
            return json.loads(text)
        except ValueError:
            pass
    return text[:MAX_BODY_LOG_CHARS]


class AuditMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, exclude_paths: Optional[Iterable[str]] = None):
        super().__init__(app)
        self.logger = get_app_logger('invoice.middlewares.audit')
        self.excluded = tuple(exclude_paths or DEFAULT_EXCLUDED_PATHS)
        self.hostname = socket.gethostname()

    def _audited(self, path: str) -> bool:
        return logging_settings.audit_enabled and not path.startswith(self.excluded)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = create_request_id()
        request_context.request_method = request.method
        request_context.request_path = request.url.path
        started = time.perf_counter()
        received_at = datetime.now(timezone.utc).isoformat()
        audited = self._audited(request.url.path)
        body = await request.body() if audited else b""

        try:
            response = await call_next(request)
        except Exception as exc:
            elapsed = (time.perf_counter() - started) * 1000
            self.logger.error(
                f"request_failed | {request.method} {request.url.path} error={type(exc).__name__} duration_ms={elapsed:.0f}",
                exc_info=exc,
            )
            if audited:
                record = self._audit_record(request, request_id, body, 500, None, elapsed, received_at)
                record["exception"] = type(exc).__name__
                init_audit_logger().info("Audit log (exception)", extra=record)
            raise
        finally:
            module_name = request_context.module_name
            clear_request_context()

        if audited:
            response = await self._buffered(response)
            elapsed = (time.perf_counter() - started) * 1000
            record = self._audit_record(request, request_id, body, response.status_code, response, elapsed, received_at)
            record["module_name"] = module_name
            init_audit_logger().info("Audit log", extra=record)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    async def _buffered(self, response: Response) -> Response:
        """Read a streamed response into memory so its body can be audited."""
        body = b"".join([chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")
                         async for chunk in response.body_iterator])
        return Response(
            content=body,
            status_code=response.status_code,
            headers=dict(response.headers),
            media_type=response.media_type,
            background=response.background,
        )

    def _mask_headers(self, headers) -> dict:
        return {name: ("****" if name.lower() in MASKED_HEADERS else value) for name, value in headers.items()}

    def _response_payload(self, status_code: int, response: Optional[Response]) -> Any:
        """Bodies of failed responses, when CAPTURE_RESPONSE_BODY is on."""
        if response is None or not logging_settings.capture_response_body or status_code < 400:
            return ""
        return _decode(response.body, response.headers.get("content-type", ""))

    def _audit_record(self, request: Request, request_id: str, body: bytes, status_code: int,
                      response: Optional[Response], elapsed_ms: float, received_at: str) -> dict:
        raw = getattr(response, "body", None) if response is not None else None
        return {
            "request_id": request_id,
            "request_method": request.method,
            "request_path": request.url.path,
            "status_code": status_code,
            "duration": round(elapsed_ms, 2),
            "size_in_bytes": len(raw) if raw is not None else 0,
            "header_referer": request.headers.get("referer", ""),
            "hostname": self.hostname,
            "app_name": configs.APP_NAME,
            "module_name": request_context.module_name,
            "version": configs.APP_VERSION,
            "received_at": received_at,
            "request": {
                "query": dict(request.query_params),
                "body": _decode(body, request.headers.get("content-type", "")) if body else {},
                "headers": self._mask_headers(request.headers),
            },
            "response": self._response_payload(status_code, response),
        }
