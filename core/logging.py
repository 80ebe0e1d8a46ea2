# ============================================================================
# STRUCTURED LOGGING
# ============================================================================
# EPOCH: 1 - RESOURCE GRAPH
# STATUS: Core - Structured logging with context
# PURPOSE: Consistent, queryable logging across all components
# CREATED: 19 OCT 2026
# ============================================================================
"""
Structured Logging

Provides structured, JSON-formatted logging for the resource graph service.

Features:
- Component-based loggers
- Contextual fields (cluster, node_id, task_id, request_id)
- JSON output for log aggregation
- Named checkpoints marking finished graph computations

Usage:
    from core.logging import get_logger, log_context

    logger = get_logger("graph.engine")

    with log_context(cluster="prod", node_id="i-0abc"):
        logger.info("Describing tasks", extra={"task_count": 12})
"""

import json
import logging
import os
import sys
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union
from enum import Enum


class ComponentType(str, Enum):
    """Component types for logging categorization."""
    ENGINE = "engine"
    ADAPTER = "adapter"
    CACHE = "cache"
    API = "api"
    SERVICE = "service"
    HEALTH = "health"


@dataclass
class LogContext:
    """
    Context for structured logging.

    Thread-local storage for contextual fields.
    """
    cluster: Optional[str] = None
    node_id: Optional[str] = None
    task_id: Optional[str] = None
    template_id: Optional[str] = None
    request_id: Optional[str] = None
    component: Optional[str] = None
    operation: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict, excluding None values."""
        result = {}
        for key, value in asdict(self).items():
            if value is not None and key != "extra":
                result[key] = value
        if self.extra:
            result.update(self.extra)
        return result


# Thread-local context storage
_context_stack = threading.local()


def _get_context_stack() -> list:
    """Get thread-local context stack."""
    if not hasattr(_context_stack, "stack"):
        _context_stack.stack = []
    return _context_stack.stack


def get_current_context() -> LogContext:
    """Get current logging context."""
    stack = _get_context_stack()
    if stack:
        return stack[-1]
    return LogContext()


@contextmanager
def log_context(**kwargs):
    """
    Context manager for adding logging context.

    Args:
        **kwargs: Context fields to add

    Example:
        with log_context(cluster="prod", node_id="i-0abc"):
            logger.info("Processing node")
    """
    # Merge with parent context
    parent = get_current_context()
    new_context = LogContext(
        cluster=kwargs.get("cluster", parent.cluster),
        node_id=kwargs.get("node_id", parent.node_id),
        task_id=kwargs.get("task_id", parent.task_id),
        template_id=kwargs.get("template_id", parent.template_id),
        request_id=kwargs.get("request_id", parent.request_id),
        component=kwargs.get("component", parent.component),
        operation=kwargs.get("operation", parent.operation),
        extra={**parent.extra, **kwargs.get("extra", {})},
    )

    stack = _get_context_stack()
    stack.append(new_context)
    try:
        yield new_context
    finally:
        stack.pop()


@contextmanager
def use_context(context: LogContext):
    """
    Re-enter a context captured on another thread.

    The stack is thread-local, so pool workers start empty.

    Example:
        parent = get_current_context()
        # on the worker thread
        with use_context(parent):
            logger.info("Processing node")
    """
    stack = _get_context_stack()
    stack.append(context)
    try:
        yield context
    finally:
        stack.pop()


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs log records as JSON for easy parsing by log aggregators.
    """

    def __init__(
        self,
        include_timestamp: bool = True,
        include_level: bool = True,
        include_logger: bool = True,
        include_context: bool = True,
    ):
        super().__init__()
        self.include_timestamp = include_timestamp
        self.include_level = include_level
        self.include_logger = include_logger
        self.include_context = include_context

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: Dict[str, Any] = {}

        if self.include_timestamp:
            log_data["timestamp"] = _utc_now().strftime("%Y-%m-%dT%H:%M:%S.%fZ")

        if self.include_level:
            log_data["level"] = record.levelname

        if self.include_logger:
            log_data["logger"] = record.name

        log_data["message"] = record.getMessage()

        if self.include_context:
            context = get_current_context()
            context_dict = context.to_dict()
            if context_dict:
                log_data["context"] = context_dict

        # Extra fields from ContextLogger / log_checkpoint
        if hasattr(record, "extra") and record.extra:
            log_data["data"] = record.extra

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        log_data["source"] = {
            "file": record.filename,
            "line": record.lineno,
            "function": record.funcName,
        }

        return json.dumps(log_data, default=str)


class HumanFormatter(logging.Formatter):
    """
    Human-readable formatter for development.

    Includes context fields inline for easy reading.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record for human reading."""
        timestamp = _utc_now().strftime("%Y-%m-%d %H:%M:%S")
        level = record.levelname.ljust(8)

        context = get_current_context()
        context_parts = []
        if context.cluster:
            context_parts.append(f"cluster={context.cluster}")
        if context.node_id:
            context_parts.append(f"node={context.node_id}")
        if context.task_id:
            context_parts.append(f"task={context.task_id}")

        context_str = f" [{', '.join(context_parts)}]" if context_parts else ""

        message = record.getMessage()

        extra_str = ""
        if hasattr(record, "extra") and record.extra:
            extra_str = f" {record.extra}"

        result = f"{timestamp} {level} {record.name}{context_str}: {message}{extra_str}"

        if record.exc_info:
            result += f"\n{self.formatException(record.exc_info)}"

        return result


class ContextLogger(logging.LoggerAdapter):
    """
    Logger adapter that includes context in log records.

    Automatically includes thread-local context in all log messages.
    """

    def process(self, msg, kwargs):
        """Process log record to include context."""
        context = get_current_context()

        extra = dict(kwargs.get("extra", {}))
        extra.update(context.to_dict())
        if self.extra.get("component") and "component" not in extra:
            extra["component"] = self.extra["component"]

        # Stored as a single attribute for formatter access
        kwargs["extra"] = {"extra": extra}

        return msg, kwargs


def get_logger(
    name: str,
    component: Optional[ComponentType] = None,
) -> ContextLogger:
    """
    Get a context-aware logger.

    Args:
        name: Logger name (e.g., "graph.engine")
        component: Optional component type for categorization

    Returns:
        ContextLogger instance
    """
    base_logger = logging.getLogger(name)
    value = component.value if component else None
    return ContextLogger(base_logger, {"component": value})


def configure_logging(
    level: Union[str, int] = "INFO",
    json_output: bool = False,
) -> None:
    """
    Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_output: Use JSON format (for production)
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    if json_output or os.getenv("LOG_FORMAT", "").lower() == "json":
        formatter = StructuredFormatter(include_context=True)
    else:
        formatter = HumanFormatter()

    root = logging.getLogger()
    root.setLevel(level)

    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    root.addHandler(handler)

    # botocore is chatty at INFO (credential lookups, retries)
    logging.getLogger("botocore").setLevel(max(level, logging.WARNING))


# ============================================================================
# CHECKPOINT LOGGING
# ============================================================================

def log_checkpoint(
    name: str,
    data: Optional[Dict[str, Any]] = None,
    logger: Optional[logging.Logger] = None,
) -> Dict[str, Any]:
    """
    Log a named checkpoint.

    Checkpoints are named markers that can be queried to
    follow a graph computation (e.g. "resource_graph_built").

    Args:
        name: Checkpoint name
        data: Optional checkpoint data
        logger: Optional specific logger to use

    Returns:
        The checkpoint payload that was logged
    """
    if logger is None:
        logger = logging.getLogger("checkpoint")

    checkpoint_data: Dict[str, Any] = {
        "checkpoint": name,
        "timestamp": _utc_now().strftime("%Y-%m-%dT%H:%M:%S.%fZ"),
    }

    context = get_current_context()
    if context.cluster:
        checkpoint_data["cluster"] = context.cluster
    if context.request_id:
        checkpoint_data["request_id"] = context.request_id

    if data:
        checkpoint_data["data"] = data

    logger.info(f"CHECKPOINT: {name}", extra={"extra": checkpoint_data})
    return checkpoint_data


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ComponentType",
    "LogContext",
    "StructuredFormatter",
    "HumanFormatter",
    "ContextLogger",
    "get_logger",
    "configure_logging",
    "log_context",
    "get_current_context",
    "use_context",
    "log_checkpoint",
]
