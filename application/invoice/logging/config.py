"""
Logging settings for the Invoice service, resolved once from InvoiceConfigs.
Local JSON files by default, Firehose shipping when enabled.
"""
import logging
from dataclasses import dataclass
from typing import Tuple

# Settings
from invoice.config.settings import InvoiceConfigs
configs = InvoiceConfigs()


@dataclass(frozen=True)
class StreamSettings:
    name: str
    capacity: int


@dataclass(frozen=True)
class FirehoseSettings:
    region_name: str
    access_key_id: str
    secret_access_key: str
    retry_count: int
    retry_delay: int
    buffer_timeout: int
    app: StreamSettings
    audit: StreamSettings


@dataclass(frozen=True)
class LoggingSettings:
    level: int
    log_dir: str
    to_console: bool
    audit_enabled: bool
    capture_response_body: bool
    firehose_enabled: bool
    firehose: FirehoseSettings

    def validate(self) -> Tuple[bool, str]:
        """Firehose credentials are only required when shipping is on."""
        if self.firehose_enabled and not (self.firehose.access_key_id and self.firehose.secret_access_key):
            return False, "Firehose credentials not configured"
        return True, "Configuration is valid"


def load_logging_settings(source: InvoiceConfigs) -> LoggingSettings:
    firehose = FirehoseSettings(
        region_name=source.FIREHOSE_REGION_NAME,
        access_key_id=source.FIREHOSE_ACCESS_KEY_ID,
        secret_access_key=source.FIREHOSE_SECRET_ACCESS_KEY,
        retry_count=max(source.FIREHOSE_RETRY_COUNT, 1),
        retry_delay=source.FIREHOSE_RETRY_DELAY,
        buffer_timeout=source.LOG_BUFFER_TIMEOUT,
        app=StreamSettings(source.APP_LOGS_STREAM_NAME or f"{source.APP_NAME}-app-logs", source.APP_LOGS_CAPACITY),
        audit=StreamSettings(source.AUDIT_LOGS_STREAM_NAME or f"{source.APP_NAME}-audit-logs", source.AUDIT_LOGS_CAPACITY),
    )
    return LoggingSettings(
        level=getattr(logging, source.LOG_LEVEL, logging.INFO),
        log_dir=source.LOG_DIR,
        to_console=source.LOG_TO_CONSOLE,
        audit_enabled=source.AUDIT_LOGGING_ENABLED,
        capture_response_body=source.CAPTURE_RESPONSE_BODY,
        firehose_enabled=source.FIREHOSE_ENABLED,
        firehose=firehose,
    )


logging_settings = load_logging_settings(configs)
