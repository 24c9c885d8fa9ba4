"""
Observability Infrastructure

Structured logging and engine operation metrics for the scheduling engine.
"""

import functools
import logging
import sys
import time
from collections.abc import Callable
from typing import Any, TypeVar

import structlog
from prometheus_client import Counter, Histogram

from .config import settings

F = TypeVar("F", bound=Callable[..., Any])

ENGINE_OPERATIONS = Counter(
    "flux_engine_operations_total",
    "Total scheduling engine operations",
    ["operation", "status"],
)

ENGINE_DURATION = Histogram(
    "flux_engine_operation_duration_seconds",
    "Scheduling engine operation duration",
    ["operation"],
)


def setup_structured_logging() -> None:
    """Configure structured logging with JSON or console output."""

    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="ISO"),
        structlog.processors.add_log_level,
        structlog.stdlib.add_logger_name,
    ]

    if settings.LOG_FORMAT == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(colors=settings.ENVIRONMENT == "local")
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


def track_operation(operation: str) -> Callable[[F], F]:
    """Record count, outcome and duration of an engine operation."""

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            if not settings.ENABLE_METRICS:
                return func(*args, **kwargs)

            started = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception:
                ENGINE_OPERATIONS.labels(operation=operation, status="error").inc()
                raise
            finally:
                ENGINE_DURATION.labels(operation=operation).observe(
                    time.perf_counter() - started
                )
            ENGINE_OPERATIONS.labels(operation=operation, status="success").inc()
            return result

        return wrapper  # type: ignore[return-value]

    return decorator
