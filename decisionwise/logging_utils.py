"""
Centralized logging and error handling utilities for DecisionWise.

This module provides decorators and helper functions to standardize logging
across flows, the decision service and the rate limiter.

Features:
- Structured logging with contextual information
- Automatic error classification for flow failures
- Performance timing
"""

from __future__ import annotations

import functools
import json
import logging
import time
from collections.abc import Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any, ParamSpec, TypeVar

import httpx
import structlog
from pydantic import ValidationError

from decisionwise.llm.exceptions import (
    OptionValidationError,
    ProviderError,
    RateLimitError,
)

# Type variables for generic decorators
P = ParamSpec("P")
T = TypeVar("T")
AsyncCallable = Callable[P, Awaitable[T]]

logger = structlog.get_logger(__name__)


def configure_logging(level: str = "INFO", fmt: str = "console") -> None:
    """
    Configure stdlib logging and structlog together.

    Args:
        level: Root log level name
        fmt: ``console`` for coloured dev output, ``json`` for one JSON object
            per line
    """
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO),
                        format="%(message)s")

    renderer: Any
    if fmt == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class FlowErrorHandler:
    """Classifies failures for structured logs."""

    @staticmethod
    def classify_error(error: BaseException) -> str:
        """
        Classify an error into a log category.

        Args:
            error: The exception to classify (or the cause of a FlowError)

        Returns:
            Error category string
        """
        if isinstance(error, OptionValidationError | ValidationError):
            return "validation_error"
        if isinstance(error, RateLimitError):
            return "rate_limit"
        if isinstance(error, TimeoutError | httpx.TimeoutException):
            return "timeout_error"
        if isinstance(error, ConnectionError | httpx.TransportError):
            return "connection_error"
        if isinstance(error, ProviderError | httpx.HTTPStatusError):
            return "http_error"
        if isinstance(error, json.JSONDecodeError):
            return "parse_error"
        return "unknown_error"

    @staticmethod
    def root_cause(error: BaseException) -> BaseException:
        """Follow ``__cause__`` to the innermost exception."""
        while error.__cause__ is not None:
            error = error.__cause__
        return error


def log_operation(
    operation: str,
    *,
    log_args: bool = False,
    log_result: bool = False,
    log_timing: bool = True,
    context: dict[str, Any] | None = None,
) -> Callable[[AsyncCallable[P, T]], AsyncCallable[P, T]]:
    """
    Decorator for logging async operations with structured context.

    Args:
        operation: Description of the operation being performed
        log_args: Whether to log function arguments
        log_result: Whether to log function result
        log_timing: Whether to log execution timing
        context: Additional context to include in logs

    Returns:
        Decorated function with logging
    """
    def decorator(func: AsyncCallable[P, T]) -> AsyncCallable[P, T]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            operation_logger = logger.bind(
                operation=operation,
                function=func.__name__,
                **(context or {}),
            )

            log_data = {}
            if log_args:
                log_data.update({
                    "args": args[1:] if args else [],  # Skip 'self' if present
                    "kwargs": kwargs,
                })

            operation_logger.info("Operation started", **log_data)

            start_time = time.perf_counter() if log_timing else None

            try:
                result = await func(*args, **kwargs)

                end_log_data: dict[str, Any] = {}
                if log_timing and start_time is not None:
                    duration = round((time.perf_counter() - start_time) * 1000, 2)
                    end_log_data["duration_ms"] = duration
                if log_result:
                    end_log_data["result"] = result

                operation_logger.info(
                    "Operation completed successfully", **end_log_data
                )
                return result

            except Exception as e:
                error_log_data: dict[str, Any] = {
                    "error_type": type(e).__name__,
                    "error_category": FlowErrorHandler.classify_error(
                        FlowErrorHandler.root_cause(e)
                    ),
                    "error_message": str(e),
                }
                if log_timing and start_time is not None:
                    duration = round((time.perf_counter() - start_time) * 1000, 2)
                    error_log_data["duration_ms"] = duration

                operation_logger.error("Operation failed", **error_log_data)
                raise

        return wrapper
    return decorator


@asynccontextmanager
async def operation_context(
    operation: str,
    *,
    context: dict[str, Any] | None = None,
    log_timing: bool = True,
):
    """
    Async context manager for operation logging.

    Args:
        operation: Description of the operation
        context: Additional context for logging
        log_timing: Whether to log operation timing

    Yields:
        Bound logger for the operation
    """
    operation_logger = logger.bind(
        operation=operation,
        **(context or {}),
    )

    operation_logger.info("Operation started")
    start_time = time.perf_counter() if log_timing else None

    try:
        yield operation_logger

        log_data: dict[str, Any] = {}
        if log_timing and start_time is not None:
            duration = round((time.perf_counter() - start_time) * 1000, 2)
            log_data["duration_ms"] = duration

        operation_logger.info("Operation completed successfully", **log_data)

    except Exception as e:
        error_log_data: dict[str, Any] = {
            "error_type": type(e).__name__,
            "error_category": FlowErrorHandler.classify_error(
                FlowErrorHandler.root_cause(e)
            ),
            "error_message": str(e),
        }
        if log_timing and start_time is not None:
            duration = round((time.perf_counter() - start_time) * 1000, 2)
            error_log_data["duration_ms"] = duration

        operation_logger.error("Operation failed", **error_log_data)
        raise
