"""Application-wide logging initialization

IMPORTANT: Call `initialize_logging()` from the process entry point before
any other logging is done. Library code only ever does
`logger = logging.getLogger(__name__)`.

Two output formats are supported:

text:
    2025-12-26 12:00:00,000 INFO linkshortener.services.link_registry: Link created. [event=LINK_CREATED shortcode=abc1234]

json:
    {"timestamp": "2025-12-26T12:00:00.000Z", "level": "INFO",
     "logger": "linkshortener.services.link_registry", "message": "Link created.",
     "event": "LINK_CREATED", "shortcode": "abc1234"}
"""

import json
import logging
import logging.config
from datetime import datetime, UTC
from pathlib import Path
from typing import Any


STANDARD_ATTRS = frozenset(
    {
        'args',
        'asctime',
        'created',
        'exc_info',
        'exc_text',
        'filename',
        'funcName',
        'levelname',
        'levelno',
        'lineno',
        'message',
        'module',
        'msecs',
        'msg',
        'name',
        'pathname',
        'process',
        'processName',
        'relativeCreated',
        'stack_info',
        'thread',
        'threadName',
        'taskName',
    }
)


def record_extras(record: logging.LogRecord) -> dict[str, Any]:
    """Return the `extra={...}` fields attached to a log record."""
    return {key: value for key, value in record.__dict__.items() if key not in STANDARD_ATTRS}


class JsonFormatter(logging.Formatter):
    """JSON formatter that includes LogRecord extras"""

    def format(self, record: logging.LogRecord) -> str:
        # fmt: off
        timestamp = datetime.fromtimestamp(record.created, tz=UTC) \
                            .isoformat(timespec='milliseconds') \
                            .replace('+00:00', 'Z')
        # fmt: on

        log = {
            'timestamp': timestamp,
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        log.update(record_extras(record))
        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)

        return json.dumps(log, default=str)


class TextFormatter(logging.Formatter):
    """Plain text formatter appending LogRecord extras as key=value pairs"""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = record_extras(record)
        if not extras:
            return line

        pairs = ' '.join(f'{key}={value}' for key, value in extras.items())
        first, newline, rest = line.partition('\n')
        return f'{first} [{pairs}]{newline}{rest}'


def initialize_logging(level: str = 'INFO', fmt: str = 'text', log_file: str | None = None) -> None:
    """Configure the root logger

    Args:
        level (str): root log level name
        fmt (str): 'text' or 'json'
        log_file (str | None): optional file to log to in addition to stderr
    """
    handlers: dict[str, dict[str, Any]] = {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': fmt,
            'stream': 'ext://sys.stderr',
        }
    }
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers['file'] = {
            'class': 'logging.FileHandler',
            'formatter': fmt,
            'filename': log_file,
            'encoding': 'utf-8',
        }

    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'json': {
                    '()': JsonFormatter,
                },
                'text': {
                    '()': TextFormatter,
                    'fmt': '%(asctime)s %(levelname)s %(name)s: %(message)s',
                },
            },
            'handlers': handlers,
            'root': {
                'level': level.upper(),
                'handlers': list(handlers),
            },
        }
    )
