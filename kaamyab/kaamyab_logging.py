"""Logging and observability utilities for Kaamyab access control.

This module provides structured logging, operation timing,
and observability hooks for strategic access decisions and the
profile updates that follow them.
"""

from __future__ import annotations

import json
import time
import logging as std_logging
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union
from functools import wraps


def setup_logging(log_level: Union[str, int] = std_logging.INFO, log_file: Optional[Path] = None) -> None:
    """Setup structured logging for Kaamyab."""

    logger = std_logging.getLogger("kaamyab")
    logger.setLevel(log_level)

    # Clear existing handlers
    logger.handlers.clear()

    detailed_formatter = std_logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(funcName)s:%(lineno)d - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    console_handler = std_logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(detailed_formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = std_logging.FileHandler(log_file)
        file_handler.setLevel(std_logging.DEBUG)
        file_handler.setFormatter(JsonFormatter())
        logger.addHandler(file_handler)

    logger.info("Kaamyab logging initialized")


class JsonFormatter(std_logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: std_logging.LogRecord) -> str:
        """Format log record as a single JSON line."""
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "extra_fields"):
            log_entry.update(record.extra_fields)

        return json.dumps(log_entry, default=str)


class PerformanceMonitor:
    """Keep timing samples for store and service operations."""

    def __init__(self):
        self.metrics: Dict[str, List[Dict[str, Any]]] = {}

    def record_metric(self, name: str, value: Any, tags: Optional[Dict[str, str]] = None) -> None:
        """Record a performance metric."""
        metric = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "name": name,
            "value": value,
            "tags": tags or {}
        }

        self.metrics.setdefault(name, []).append(metric)

        logger = std_logging.getLogger("kaamyab.performance")
        logger.debug(f"Metric recorded: {name}={value}", extra={"extra_fields": metric})

    def get_metrics(self, name: Optional[str] = None) -> Dict[str, List[Dict[str, Any]]]:
        """Get recorded metrics."""
        if name:
            return {name: self.metrics.get(name, [])}
        return self.metrics.copy()

    def clear(self) -> None:
        self.metrics.clear()


performance_monitor = PerformanceMonitor()


def log_performance(operation_name: str):
    """Decorator to log timing for an operation, successful or not."""
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.time()
            logger = std_logging.getLogger("kaamyab.performance")

            try:
                result = func(*args, **kwargs)
            except Exception as e:
                duration = time.time() - start_time
                performance_monitor.record_metric(
                    f"{operation_name}_duration",
                    duration,
                    {"status": "error", "error_type": type(e).__name__}
                )
                logger.error(
                    f"Failed operation: {operation_name} after {duration:.3f}s - {e}",
                    extra={"extra_fields": {
                        "operation": operation_name,
                        "duration": duration,
                        "status": "error",
                        "error_type": type(e).__name__,
                    }}
                )
                raise

            duration = time.time() - start_time
            performance_monitor.record_metric(
                f"{operation_name}_duration",
                duration,
                {"status": "success"}
            )
            logger.debug(
                f"Completed operation: {operation_name} in {duration:.3f}s",
                extra={"extra_fields": {
                    "operation": operation_name,
                    "duration": duration,
                    "status": "success"
                }}
            )
            return result

        return wrapper
    return decorator


@contextmanager
def log_operation(operation_name: str, **extra_fields):
    """Context manager to log operations with custom fields."""
    logger = std_logging.getLogger("kaamyab.operations")
    start_time = time.time()

    logger.info(f"Starting operation: {operation_name}", extra={"extra_fields": {
        "operation": operation_name,
        "status": "started",
        **extra_fields
    }})

    try:
        yield
    except Exception as e:
        duration = time.time() - start_time
        logger.error(f"Failed operation: {operation_name} after {duration:.3f}s - {e}", extra={"extra_fields": {
            "operation": operation_name,
            "status": "failed",
            "duration": duration,
            "error_type": type(e).__name__,
            "error_message": str(e),
            **extra_fields
        }}, exc_info=True)
        raise

    duration = time.time() - start_time
    logger.info(f"Completed operation: {operation_name} in {duration:.3f}s", extra={"extra_fields": {
        "operation": operation_name,
        "status": "completed",
        "duration": duration,
        **extra_fields
    }})


class ObservabilityHooks:
    """Callbacks subscribed to access and profile events."""

    def __init__(self):
        self.hooks: Dict[str, List[Callable[..., Any]]] = {}
        self.logger = std_logging.getLogger("kaamyab.observability")

    def register_hook(self, event_type: str, callback: Callable[..., Any]) -> None:
        """Register a callback for a specific event type."""
        self.hooks.setdefault(event_type, []).append(callback)
        self.logger.debug(f"Registered hook for event: {event_type}")

    def unregister_hook(self, event_type: str, callback: Callable[..., Any]) -> None:
        callbacks = self.hooks.get(event_type, [])
        if callback in callbacks:
            callbacks.remove(callback)

    def trigger_hooks(self, event_type: str, **data) -> None:
        """Trigger all callbacks for a specific event type.

        A failing callback is logged and skipped so that one subscriber
        cannot break the operation that emitted the event.
        """
        callbacks = self.hooks.get(event_type)
        if not callbacks:
            return
        self.logger.debug(f"Triggering {len(callbacks)} hooks for event: {event_type}")
        for hook in list(callbacks):
            try:
                hook(**data)
            except Exception as e:
                self.logger.error(f"Hook failed for event {event_type}: {e}")

    def log_event(self, event_type: str, user_id: Optional[str] = None, **data) -> None:
        """Log an access event and trigger hooks."""
        event_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "event_type": event_type,
            "user_id": user_id,
            **data
        }

        self.logger.info(f"Access event: {event_type}", extra={"extra_fields": event_data})

        hook_data = {k: v for k, v in event_data.items() if k != "event_type"}
        self.trigger_hooks(event_type, **hook_data)


observability_hooks = ObservabilityHooks()


def log_error_with_context(error: Exception, context: Dict[str, Any], **extra_fields):
    """Log an error with rich context information."""
    logger = std_logging.getLogger("kaamyab.errors")

    error_data = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "error_type": type(error).__name__,
        "error_message": str(error),
        "context": context,
        **extra_fields
    }

    logger.error(
        f"Error in {context.get('operation', 'unknown operation')}: {error}",
        extra={"extra_fields": error_data},
        exc_info=True
    )


def log_access_decision(user_id: Optional[str], level: str, reason: str, **extra_fields):
    """Log a resolved strategic access decision."""
    observability_hooks.log_event(
        "access_evaluated",
        user_id=user_id,
        level=level,
        reason=reason,
        **extra_fields
    )


def log_trial_consumed(user_id: str, **extra_fields):
    observability_hooks.log_event("strategic_trial_consumed", user_id=user_id, **extra_fields)


def log_profile_event(event_type: str, user_id: str, **extra_fields):
    """Log a profile lifecycle event (created, updated, deleted)."""
    observability_hooks.log_event(f"profile_{event_type.lower()}", user_id=user_id, **extra_fields)
