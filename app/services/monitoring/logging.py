"""
Structured JSON Logging with Correlation ID
JSON formatter that injects the request correlation id into stdlib log entries
"""

import logging
import sys

from pythonjsonlogger import jsonlogger
from asgi_correlation_id.context import correlation_id

SERVICE_NAME = "intervention-availability-matcher"


class CorrelationJsonFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter with automatic correlation ID injection.

    The correlation ID is read from the request context set by
    CorrelationIdMiddleware; outside a request it is 'none'.
    """

    def __init__(self, *args, environment: str = "development", **kwargs):
        super().__init__(*args, **kwargs)
        self.environment = environment

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)

        log_record['correlation_id'] = correlation_id.get() or 'none'
        log_record['service'] = SERVICE_NAME
        log_record['environment'] = self.environment


def setup_logging(environment: str = "development", level: int = logging.INFO):
    """
    Configure structured JSON logging to stdout on the root logger.

    Returns:
        logging.Handler: The configured handler (for testing)
    """
    handler = logging.StreamHandler(sys.stdout)

    formatter = CorrelationJsonFormatter(
        '%(timestamp)s %(level)s %(name)s %(message)s',
        rename_fields={
            'timestamp': 'asctime',
            'level': 'levelname'
        },
        environment=environment,
    )
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    return handler
