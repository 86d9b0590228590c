"""Logging setup for the voucher service."""

import logging
import os
import sys

from pythonjsonlogger.json import JsonFormatter

SERVICE_NAME = 'bopercheck-vouchers'

JSON_FIELDS = '%(asctime)s %(levelname)s %(name)s %(message)s'
PLAIN_FORMAT = '%(asctime)s %(levelname)s [%(name)s] %(message)s'


def json_formatter() -> JsonFormatter:
    """Get a formatter writing one JSON object per record."""

    return JsonFormatter(JSON_FIELDS,
                         rename_fields={
                             'asctime': 'timestamp',
                             'levelname': 'level'
                         },
                         static_fields={'service': SERVICE_NAME})


def setup_logging(level: str | None = None, fmt: str | None = None) -> None:
    """
    Send every logger's records to stdout through a single root handler.

    Args:
        level (str|None): level name, defaults to LOG_LEVEL or INFO
        fmt (str|None): 'json' or 'plain', defaults to LOG_FORMAT or json
    """

    level = (level or os.environ.get('LOG_LEVEL', 'INFO')).upper()
    fmt = (fmt or os.environ.get('LOG_FORMAT', 'json')).lower()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(json_formatter() if fmt ==
                         'json' else logging.Formatter(PLAIN_FORMAT))
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers[:] = [handler]
