"""
Logging handlers for the Invoice service

Records are written as JSON lines to LOG_DIR, or buffered and shipped to
Kinesis Firehose in batches when FIREHOSE_ENABLED is set.
"""
import logging
import os
import sys
import time
from logging.handlers import MemoryHandler
from typing import Dict, List

import boto3
from botocore.config import Config

from invoice.logging.config import FirehoseSettings, StreamSettings, logging_settings
from invoice.logging.formatters import AppLogsJSONFormatter, AuditLogsJSONFormatter

# Settings
from invoice.config.settings import InvoiceConfigs
configs = InvoiceConfigs()


def dbg(msg: str) -> None:
    """Handler diagnostics; logging from inside a handler would recurse."""
    if configs.LOG_DEBUG_PRINTS:
        print(msg, file=sys.stderr)


class FirehoseBatchClient:
    """put_record_batch with exponential backoff between attempts"""

    def __init__(self, stream_name: str, settings: FirehoseSettings):
        self.stream_name = stream_name
        self.settings = settings
        self.client = boto3.client(
            "firehose",
            region_name=settings.region_name,
            aws_access_key_id=settings.access_key_id,
            aws_secret_access_key=settings.secret_access_key,
            config=Config(connect_timeout=10, read_timeout=30, retries={"max_attempts": 2}),
        )

    def put(self, lines: List[str]) -> bool:
        if not lines:
            return True
        records = [{"Data": line + "\n"} for line in lines]
        attempts = self.settings.retry_count
        for attempt in range(1, attempts + 1):
            try:
                response = self.client.put_record_batch(DeliveryStreamName=self.stream_name, Records=records)
            except Exception as e:
                # shipping failures must never reach the code that logged
                dbg(f"[firehose:{self.stream_name}] attempt={attempt}/{attempts} error={e}")
            else:
                failed = response.get("FailedPutCount", 0)
                dbg(f"[firehose:{self.stream_name}] attempt={attempt}/{attempts} sent={len(records)} failed={failed}")
                if failed == 0:
                    return True
            if attempt < attempts:
                time.sleep(self.settings.retry_delay * 2 ** (attempt - 1))
        return False


class BufferedFirehoseHandler(MemoryHandler):
    """
    Buffers formatted records and ships them as one batch when the buffer is
    full, when it is older than the buffer timeout, or on flush at exit.
    """

    def __init__(self, stream: StreamSettings, formatter: logging.Formatter, settings: FirehoseSettings):
        super().__init__(capacity=stream.capacity, flushOnClose=True)
        self.setFormatter(formatter)
        self.client = FirehoseBatchClient(stream.name, settings)
        self.buffer_timeout = settings.buffer_timeout
        self.last_flush = time.monotonic()

    def shouldFlush(self, record):
        if len(self.buffer) >= self.capacity:
            return True
        return time.monotonic() - self.last_flush >= self.buffer_timeout

    def flush(self):
        with self.lock:
            if not self.buffer:
                return
            lines = [self.format(record) for record in self.buffer]
            self.buffer.clear()
            self.last_flush = time.monotonic()
        self.client.put(lines)


_handlers: Dict[str, logging.Handler] = {}


def _file_handler(name: str, formatter: logging.Formatter) -> logging.Handler:
    os.makedirs(logging_settings.log_dir, exist_ok=True)
    handler = logging.FileHandler(os.path.join(logging_settings.log_dir, f"{name}.log"), encoding="utf-8")
    handler.setFormatter(formatter)
    return handler


def _shared(key: str, factory) -> logging.Handler:
    if key not in _handlers:
        _handlers[key] = factory()
    return _handlers[key]


def get_console_handler() -> logging.Handler:
    def build():
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(AppLogsJSONFormatter())
        return handler
    return _shared("console", build)


def get_app_handler() -> logging.Handler:
    if logging_settings.firehose_enabled:
        return _shared("app", lambda: BufferedFirehoseHandler(
            logging_settings.firehose.app, AppLogsJSONFormatter(), logging_settings.firehose))
    return _shared("file:app", lambda: _file_handler("app", AppLogsJSONFormatter()))


def get_audit_handler() -> logging.Handler:
    if logging_settings.firehose_enabled:
        return _shared("audit", lambda: BufferedFirehoseHandler(
            logging_settings.firehose.audit, AuditLogsJSONFormatter(), logging_settings.firehose))
    return _shared("file:audit", lambda: _file_handler("audit", AuditLogsJSONFormatter()))


def flush_handlers() -> None:
    for handler in _handlers.values():
        handler.flush()
