"""
Logging filters injecting request and entity context
"""
import logging
from invoice.middlewares.request_context import request_context

REQUEST_FIELDS = ('request_id', 'request_method', 'request_path')
ENTITY_FIELDS = ('invoice_id', 'shipment_id')


def _inject(record, fields):
    # explicit extra={...} values win over the request context
    for name in fields:
        if not hasattr(record, name):
            setattr(record, name, getattr(request_context, name, None) or '')


class RequestContextFilter(logging.Filter):
    def filter(self, record):
        _inject(record, REQUEST_FIELDS)
        return True


class EntityContextFilter(logging.Filter):
    def filter(self, record):
        _inject(record, ENTITY_FIELDS)
        return True
