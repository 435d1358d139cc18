"""JSON logging for urly-wurly.

IMPORTANT: Call `initialize_logging()` once per process, before the first log
line: at import of each lambda function package and at server startup.

Every record is written to stdout as one JSON object, `extra` fields included:

    {"timestamp": "2026-01-05T09:30:00.125Z", "level": "INFO", "logger": "urlywurly.service",
     "service": "urly-wurly", "version": "1.0.0", "message": "Shortened URL.",
     "shortcode": "yfzne", "custom": false}

Span records from `LoggingTracer` are folded into one nested `span` object,
so span attributes can't collide with the record's own fields:

    {..., "message": "Span store.read finished (ok).",
     "span": {"name": "store.read", "outcome": "ok", "durationMs": 1.204, "shortcode": "yfzne"}}
"""

import os
import time
import json
import logging
import logging.config
from typing import Any

from urlywurly.constants import ENV, SERVICE_NAME, SERVICE_VERSION


# Attributes every LogRecord carries, anything else came in through `extra`
RECORD_ATTRIBUTES = frozenset(vars(logging.makeLogRecord({}))) | {'message', 'asctime', 'taskName'}

# boto3 and its transport log every request at DEBUG
QUIET_LOGGERS = ('boto3', 'botocore', 's3transfer', 'urllib3')


class JsonFormatter(logging.Formatter):
    """Render records as single-line JSON objects with UTC timestamps."""

    converter = time.gmtime
    default_time_format = '%Y-%m-%dT%H:%M:%S'
    default_msec_format = '%s.%03dZ'

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'logger': record.name,
            'service': SERVICE_NAME,
            'version': SERVICE_VERSION,
            'message': record.getMessage(),
        }

        extras = {key: value for key, value in vars(record).items() if key not in RECORD_ATTRIBUTES}
        span = self.pop_span(extras)
        entry.update(extras)
        if span is not None:
            entry['span'] = span

        if record.exc_info:
            entry['exception'] = self.formatException(record.exc_info)
        if record.stack_info:
            entry['stack'] = self.formatStack(record.stack_info)

        return json.dumps(entry, default=str)

    @staticmethod
    def pop_span(extras: dict[str, Any]) -> dict[str, Any] | None:
        """Remove the tracer's span fields from `extras` and nest them."""
        if 'span' not in extras:
            return None
        return {
            'name': extras.pop('span'),
            'outcome': extras.pop('outcome', None),
            'durationMs': extras.pop('duration_ms', None),
            **extras.pop('attributes', {}),
        }


def initialize_logging(level: str | None = None) -> None:
    """Send JSON logs to stdout at `level`, LOG_LEVEL or INFO

    AWS SDK loggers stay at WARNING unless the level is DEBUG.
    """
    log_level = (level or os.getenv(ENV.App.LOG_LEVEL) or 'INFO').upper()
    quiet_level = log_level if log_level == 'DEBUG' else 'WARNING'

    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'json': {'()': JsonFormatter},
            },
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                }
            },
            'loggers': {name: {'level': quiet_level} for name in QUIET_LOGGERS},
            'root': {
                'level': log_level,
                'handlers': ['stdout'],
            },
        }
    )
