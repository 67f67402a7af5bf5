"""Structured logging for AI News Hub.

Log records go to stderr; stdout is reserved for the rendered dashboard.
"""

import logging
import sys
import time
from typing import Any

import orjson
import structlog
from structlog import processors, stdlib

from .config import get_settings

# HTTP client libraries that are chatty at INFO
NOISY_LOGGERS = ("aiohttp", "httpx", "httpcore")


def _orjson_dumps(obj: Any, **kwargs: Any) -> str:
    return orjson.dumps(obj, default=str).decode("utf-8")


def setup_logging(
    log_level: str | None = None,
    json_logging: bool | None = None,
    quiet_libraries: bool = True,
) -> None:
    """Configure stdlib logging and structlog.

    Args:
        log_level: Overrides ``Settings.log_level``
        json_logging: Overrides ``Settings.json_logging``
        quiet_libraries: Keep HTTP client loggers at WARNING or above
    """
    settings = get_settings()
    log_level = (log_level or settings.log_level).upper()
    json_logging = settings.json_logging if json_logging is None else json_logging
    level = getattr(logging, log_level)

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level, force=True)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING) if quiet_libraries else level)

    shared = [
        stdlib.filter_by_level,
        stdlib.add_logger_name,
        stdlib.add_log_level,
        processors.TimeStamper(fmt="iso"),
        processors.format_exc_info,
    ]
    if json_logging:
        renderer = processors.JSONRenderer(serializer=_orjson_dumps)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[*shared, renderer],
        wrapper_class=stdlib.BoundLogger,
        logger_factory=stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def log_api_request(
    method: str,
    url: str,
    status_code: int | None = None,
    response_time: float | None = None,
    **kwargs: Any
) -> dict[str, Any]:
    """Event fields for an outbound API call; pass with ``logger.debug(**...)``."""
    event = {"event": "api_request", "method": method, "url": url, **kwargs}
    if status_code is not None:
        event["status_code"] = status_code
    if response_time is not None:
        event["response_time"] = round(response_time, 3)
    return event


def log_processing_stage(stage: str, input_count: int, output_count: int, **kwargs: Any) -> dict[str, Any]:
    """Event fields for a stage that turns ``input_count`` items into ``output_count``."""
    return {
        "event": "processing_stage",
        "stage": stage,
        "input_count": input_count,
        "output_count": output_count,
        "dropped": max(0, input_count - output_count),
        **kwargs
    }


def log_error(error: BaseException, context: str | None = None, **kwargs: Any) -> dict[str, Any]:
    """Event fields for a handled failure."""
    event = {
        "event": "error",
        "error_type": type(error).__name__,
        "error_message": str(error),
        **kwargs
    }
    if context:
        event["context"] = context
    return event


class PerformanceLogger:
    """Times a block and logs completion or failure with its duration.

    Example:
        with PerformanceLogger("fetch_news", logger) as perf:
            ...
        perf.duration
    """

    def __init__(self, operation: str, logger: structlog.stdlib.BoundLogger):
        self.operation = operation
        self.logger = logger
        self.duration: float | None = None
        self._started: float | None = None

    def __enter__(self) -> "PerformanceLogger":
        self._started = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.duration = time.perf_counter() - self._started
        if exc_type is None:
            self.logger.info("operation_completed", operation=self.operation, duration=round(self.duration, 3))
        else:
            self.logger.error(
                "operation_failed",
                operation=self.operation,
                duration=round(self.duration, 3),
                error_type=exc_type.__name__,
            )


setup_logging()
