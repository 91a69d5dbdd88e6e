import logging

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration

# Logger
from invoice.logging.utils import get_app_logger
logger = get_app_logger("invoice.sentry")

# Settings
from invoice.config.settings import InvoiceConfigs
configs = InvoiceConfigs()

SENSITIVE_HEADERS = ('authorization', 'cookie', 'x-api-key', 'x-auth-token')


def init_sentry():
    """Initialize Sentry SDK when SENTRY_ENABLED and a DSN are configured"""
    if not configs.SENTRY_ENABLED:
        logger.info("Sentry monitoring is disabled")
        return

    if not configs.SENTRY_DSN:
        logger.warning("SENTRY_ENABLED is true but SENTRY_DSN is not configured")
        return

    sentry_sdk.init(
        dsn=configs.SENTRY_DSN,
        environment=configs.ENVIRONMENT,
        release=configs.SENTRY_RELEASE,
        traces_sample_rate=float(configs.SENTRY_TRACES_SAMPLE_RATE),
        integrations=[
            FastApiIntegration(),
            LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
        ],
        send_default_pii=False,
        attach_stacktrace=True,
        max_breadcrumbs=50,
        before_send=before_send_filter,
    )

    logger.info(f"Sentry initialized successfully for environment: {configs.ENVIRONMENT}")


def before_send_filter(event, hint):
    """Filter sensitive headers before sending to Sentry"""
    headers = event.get('request', {}).get('headers')
    if isinstance(headers, dict):
        for key in list(headers.keys()):
            if key.lower() in SENSITIVE_HEADERS:
                headers[key] = '[Filtered]'
    return event


def capture_exception(exception, **kwargs):
    """Report to Sentry when enabled; always log locally"""
    if configs.SENTRY_ENABLED:
        sentry_sdk.capture_exception(exception, **kwargs)
    logger.error(f"Exception occurred: {exception}", exc_info=exception)


def add_breadcrumb(message, category="custom", level="info", data=None):
    if configs.SENTRY_ENABLED:
        sentry_sdk.add_breadcrumb(message=message, category=category, level=level, data=data or {})
