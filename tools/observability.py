"""Observability helpers for instrumenting service calls."""

from __future__ import annotations

import logging
import time
from functools import wraps
from typing import Callable, ParamSpec, TypeVar

from logic.errors import ServiceError, VestureError
from tools.document_store import StoreError
from vesture_app.logging_config import ensure_correlation_id, get_logger, log_event, redact_for_log

LOGGER = get_logger(__name__)
P = ParamSpec("P")
R = TypeVar("R")


def _preview_kwargs(kwargs: dict, max_keys: int = 6) -> dict:
    preview: dict = {}
    for idx, (key, value) in enumerate(kwargs.items()):
        if idx >= max_keys:
            preview["truncated"] = True
            break
        preview[key] = value
    return redact_for_log(preview)


def instrument_service(
    operation: str,
    failure_message: str = "Internal server error",
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Wrap a service method to emit structured logs and normalise store failures.

    Domain errors propagate unchanged. A ``StoreError`` escaping the call is
    re-raised as ``ServiceError(failure_message)`` with the cause chained.
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            correlation_id = ensure_correlation_id()
            start = time.perf_counter()
            log_event(
                LOGGER,
                logging.INFO,
                "service_call_started",
                operation=operation,
                correlation_id=correlation_id,
                kwargs=_preview_kwargs(kwargs),
            )
            try:
                result = func(*args, **kwargs)
            except VestureError as exc:
                log_event(
                    LOGGER,
                    logging.INFO,
                    "service_call_rejected",
                    operation=operation,
                    correlation_id=correlation_id,
                    error=type(exc).__name__,
                    status_code=exc.status_code,
                    duration_ms=round((time.perf_counter() - start) * 1000, 2),
                )
                raise
            except StoreError as exc:
                log_event(
                    LOGGER,
                    logging.ERROR,
                    "service_call_failed",
                    operation=operation,
                    correlation_id=correlation_id,
                    duration_ms=round((time.perf_counter() - start) * 1000, 2),
                    exc_info=True,
                )
                raise ServiceError(failure_message) from exc
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            log_event(
                LOGGER,
                logging.INFO,
                "service_call_completed",
                operation=operation,
                correlation_id=correlation_id,
                duration_ms=duration_ms,
            )
            return result

        return wrapper

    return decorator


__all__ = ["instrument_service"]
