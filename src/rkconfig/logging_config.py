"""Shared logging configuration."""

from __future__ import annotations

import logging

from pythonjsonlogger.json import JsonFormatter

from rkconfig.config import LoggingSettings

_CONFIGURED = False

TEXT_FORMAT = "%(asctime)s %(levelname)s [%(service)s] %(name)s: %(message)s"
JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s %(service)s"


class _ServiceNameFilter(logging.Filter):
    def __init__(self, service_name: str) -> None:
        super().__init__()
        self.service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:
        record.service = self.service_name
        return True


def setup_logging(settings: LoggingSettings | None = None) -> None:
    """Configure root logging once per process."""

    global _CONFIGURED
    if _CONFIGURED:
        return

    settings = settings or LoggingSettings()

    handler = logging.StreamHandler()
    if settings.json_output:
        handler.setFormatter(JsonFormatter(JSON_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    handler.addFilter(_ServiceNameFilter(settings.service_name))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(settings.level.upper())

    # aiosqlite logs every proxied call at DEBUG
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)

    _CONFIGURED = True
