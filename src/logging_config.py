"""JSON structured logging configuration."""

import logging
import sys

from pythonjsonlogger.json import JsonFormatter

SERVICE_NAME = "company-profiler"

# Client libraries that log every outbound request at INFO.
_CHATTY_LOGGERS = ("httpx", "httpcore", "openai")


def setup_logging(log_level: str = "INFO") -> None:
    """Configure root and uvicorn loggers for JSON output on stdout."""
    level = getattr(logging, log_level.upper(), logging.INFO)

    formatter = JsonFormatter(
        fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
        rename_fields={
            "asctime": "timestamp",
            "levelname": "level",
            "name": "logger",
        },
        static_fields={"service": SERVICE_NAME},
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    root.addHandler(handler)

    for name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
        uv_logger = logging.getLogger(name)
        uv_logger.handlers.clear()
        uv_logger.addHandler(handler)
        uv_logger.propagate = False

    # Per-request client logs only when debugging the service itself
    client_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(client_level)
