import logging
from datetime import datetime, timezone

import requests

from invoice.config.settings import InvoiceConfigs
configs = InvoiceConfigs()


class SlackErrorHandler(logging.Handler):
    """Sends ERROR and CRITICAL logs to Slack"""

    def __init__(self, webhook: str | None = None, environment: str | None = None):
        super().__init__(level=logging.ERROR)
        self.webhook = webhook if webhook is not None else configs.SLACK_WEBHOOK_URL
        self.environment = (environment or configs.APPLICATION_ENVIRONMENT).upper()
        self.enabled = bool(self.webhook) and self.environment == 'LOCAL'

    def build_message(self, record) -> str:
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        lines = [
            f":mag: {self.environment} invoice-service error",
            "",
            f"- :clock1: Timestamp: {ts}",
            f"- :triangular_flag_on_post: Level: *{record.levelname}*",
            f"- :warning: Logger: {record.name}",
            f"- :pushpin: Function: {record.funcName}:{record.lineno}",
            "",
            "```" + record.getMessage() + "```",
        ]
        return "\n".join(lines)

    def emit(self, record):
        if not self.enabled:
            return
        try:
            requests.post(self.webhook, json={"text": self.build_message(record)}, timeout=2)
        except requests.RequestException:
            self.handleError(record)


# Export a singleton handler instance for reuse
slack_handler = SlackErrorHandler()
