"""
Logging setup for the API.

configure_logging() runs once from create_app(). LOG_FORMAT picks text or
single-line JSON; LOG_LEVEL defaults to INFO. Records emitted while a request
is being handled carry its method and path, plus the caller's id once
require_auth/optional_auth has resolved it.
"""
import json
import logging
import os
import sys
from datetime import datetime, timezone

from flask import g, has_request_context, request

TEXT_FORMAT = '[%(asctime)s] %(levelname)s %(name)s %(request_line)s- %(message)s'


def request_fields():
    """{method, path, userId} for the active request, or {} outside one."""
    if not has_request_context():
        return {}
    fields = {'method': request.method, 'path': request.path}
    user = g.get('user')
    if user is not None:
        fields['userId'] = user.id
    return fields


class RequestContextFilter(logging.Filter):
    """Copies request_fields() onto each record as `request_fields` and `request_line`."""

    def filter(self, record):
        fields = request_fields()
        record.request_fields = fields
        if fields:
            who = f" {fields['userId']}" if 'userId' in fields else ''
            record.request_line = f"[{fields['method']} {fields['path']}{who}] "
        else:
            record.request_line = ''
        return True


class JSONFormatter(logging.Formatter):
    """Single-line JSON, one object per record."""

    def format(self, record):
        entry = {
            'timestamp': datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        fields = getattr(record, 'request_fields', None)
        if fields is None:
            fields = request_fields()
        entry.update(fields)
        if record.exc_info and record.exc_info[0] is not None:
            entry['exception'] = self.formatException(record.exc_info)
        return json.dumps(entry)


# Chatty at INFO: HTTP clients, SQL echo, migrations, the dev server
_NOISY_LOGGERS = [
    'urllib3',
    'requests',
    'sqlalchemy.engine',
    'alembic',
    'werkzeug',
]


def _level_from_env():
    level = getattr(logging, os.getenv('LOG_LEVEL', 'INFO').upper(), logging.INFO)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(app=None):
    """
    Install one stderr handler on the root logger. Safe to call repeatedly.

    Environment variables:
        LOG_LEVEL  - level name, case-insensitive (default INFO)
        LOG_FORMAT - "text" (default) or "json"
    """
    level = _level_from_env()
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.addFilter(RequestContextFilter())
    if os.getenv('LOG_FORMAT', 'text').lower() == 'json':
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
    root.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
