"""
JSON formatters for Invoice service logging

Every entry is a single JSON object per line. App entries carry the
request and entity context injected by the filters; audit entries carry the
per-request payload built by AuditMiddleware.
"""
import json
import logging
from datetime import datetime

# Settings
from invoice.config.settings import InvoiceConfigs
configs = InvoiceConfigs()

APPLICATION_ENVIRONMENT = configs.APPLICATION_ENVIRONMENT
SERVICE_NAME = f"{configs.APP_NAME}-service"


def _to_json(value) -> str:
    return json.dumps(value, ensure_ascii=False, default=str)


class BaseJSONFormatter(logging.Formatter):
    """Common entry fields; subclasses list the record attributes they copy."""

    # record attribute -> default when the record does not carry it
    extra_fields: dict = {}
    include_message = True

    def __init__(self):
        super().__init__()
        self.environment = APPLICATION_ENVIRONMENT

    def base_entry(self, record) -> dict:
        return {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'module': record.module,
            'function': record.funcName,
            'line_number': record.lineno,
            'environment': self.environment,
            'service': SERVICE_NAME,
        }

    def format(self, record):
        entry = self.base_entry(record)
        if self.include_message:
            entry['message'] = record.getMessage()
        if record.exc_info:
            entry['exception'] = str(record.exc_info[1])
            if self.include_message:
                entry['stack_trace'] = self.formatException(record.exc_info)
        for name, default in self.extra_fields.items():
            entry[name] = getattr(record, name, default)
        self.add_extra_fields(entry, record)
        return _to_json(entry)

    def add_extra_fields(self, log_entry, record):
        pass


class AppLogsJSONFormatter(BaseJSONFormatter):
    extra_fields = {
        'request_id': '',
        'request_method': '',
        'request_path': '',
        'invoice_id': '',
        'shipment_id': '',
    }


class AuditLogsJSONFormatter(BaseJSONFormatter):
    """Audit records carry their payload in extras, not in the message."""

    include_message = False
    extra_fields = {
        'request_id': '',
        'request_method': '',
        'request_path': '',
        'status_code': 0,
        'duration': 0.0,
        'size_in_bytes': 0,
        'header_referer': '',
        'hostname': '',
        'app_name': '',
        'module_name': '',
        'version': '',
    }
    # nested payloads are stored as JSON strings so the log schema stays flat
    serialized_fields = ('request', 'response')

    def add_extra_fields(self, log_entry, record):
        for name in self.serialized_fields:
            payload = getattr(record, name, None)
            log_entry[name] = _to_json(payload) if payload else ''
