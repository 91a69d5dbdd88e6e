"""
Per-request context (request id, route, touched entity ids) kept in a
ContextVar so log filters can read it from anywhere in the call stack.
"""
import uuid
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Optional


@dataclass
class RequestContext:
    request_id: Optional[str] = None
    module_name: Optional[str] = None
    request_method: Optional[str] = None
    request_path: Optional[str] = None
    invoice_id: Optional[int] = None
    shipment_id: Optional[int] = None


_current: ContextVar[Optional[RequestContext]] = ContextVar("invoice_request_context", default=None)


def current_request_context() -> RequestContext:
    """The context of the running request, created on first use outside one."""
    ctx = _current.get()
    if ctx is None:
        ctx = RequestContext()
        _current.set(ctx)
    return ctx


class _RequestContextProxy:
    """Attribute access forwarded to the current RequestContext."""

    def __getattr__(self, name):
        return getattr(current_request_context(), name)

    def __setattr__(self, name, value):
        setattr(current_request_context(), name, value)


request_context = _RequestContextProxy()


def set_request_context(ctx: RequestContext) -> None:
    _current.set(ctx)


def clear_request_context() -> None:
    _current.set(RequestContext())


def create_request_id() -> str:
    """Start a fresh context for a new request and return its id."""
    ctx = RequestContext(request_id=str(uuid.uuid4()))
    set_request_context(ctx)
    return ctx.request_id
