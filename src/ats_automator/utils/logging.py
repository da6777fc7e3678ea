"""Structured logging configuration using structlog."""

import logging
import sys
from contextlib import contextmanager
from typing import Any, Dict, Iterable, Iterator, Optional

import structlog
from rich.logging import RichHandler

from ats_automator.config import settings


def configure_logging(level: Optional[str] = None, json_output: Optional[bool] = None) -> None:
    """
    Configure structured logging with rich output.

    Log lines go to stderr so the CLI's result table owns stdout.

    Args:
        level: Log level name; defaults to ``settings.log_level``
        json_output: Render JSON lines; defaults to ``not settings.debug``
    """
    numeric_level = logging.getLevelName((level or settings.log_level).upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO
    if json_output is None:
        json_output = not settings.debug

    # Playwright and asyncio log through the standard library
    logging.basicConfig(
        format="%(message)s",
        level=numeric_level,
        handlers=[RichHandler(rich_tracebacks=True, markup=True, show_path=False)],
        force=True,
    )

    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="ISO"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.WriteLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


@contextmanager
def target_context(name: str, url: str) -> Iterator[None]:
    """Attach the current target to every log line emitted inside the block."""
    with structlog.contextvars.bound_contextvars(target=name, target_url=url):
        yield


def log_function_call(func_name: str, **kwargs: Any) -> Dict[str, Any]:
    """Create a log context for function calls."""
    return {
        "function": func_name,
        "parameters": {k: v for k, v in kwargs.items() if not k.startswith("_")},
    }


def log_application_result(result: Any) -> Dict[str, Any]:
    """Create a log context for an application result."""
    return {
        "result": {
            "success": result.success,
            "confirmation_id": result.confirmation_id,
            "error": result.error,
            "duration_ms": result.duration_ms,
            "has_artifact": bool(result.artifact_path),
        }
    }


def log_run_summary(outcomes: Iterable[Any]) -> Dict[str, Any]:
    """Create a log context summarizing a run over several targets."""
    outcomes = list(outcomes)
    failed = [outcome.target.name for outcome in outcomes if not outcome.result.success]
    return {
        "run": {
            "targets": len(outcomes),
            "succeeded": len(outcomes) - len(failed),
            "failed_targets": failed,
            "total_duration_ms": sum(outcome.result.duration_ms for outcome in outcomes),
        }
    }
