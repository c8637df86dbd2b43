"""
Structured logging configuration for the deal extraction engine.

Uses structlog for structured, context-aware logging with:
- JSON or console output, chosen by DEAL_LOG_JSON
- A stage field naming the pipeline module that logged the event
- Trace ID and source file propagation from the caller
- Per-stage timing for the orchestrator
"""

import logging
import sys
import time
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Generator

import structlog
from structlog.types import Processor

from .config import extraction_config

# Context variables for request-scoped data
_trace_id: ContextVar[str | None] = ContextVar('trace_id', default=None)
_source_file: ContextVar[str | None] = ContextVar('source_file', default=None)


def get_trace_id() -> str | None:
    """Get the current trace ID from context."""
    return _trace_id.get()


def get_source_file() -> str | None:
    """Get the current source file name from context."""
    return _source_file.get()


def add_context_info(
    logger: structlog.types.WrappedLogger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Processor that adds context variables to log entries."""
    trace_id = get_trace_id()
    source_file = get_source_file()

    if trace_id:
        event_dict['trace_id'] = trace_id
    if source_file:
        event_dict['source_file'] = source_file

    return event_dict


def configure_logging(
    json_output: bool | None = None,
    log_level: str | None = None,
) -> None:
    """
    Configure structlog for the engine.

    Args:
        json_output: JSON logs when True, console logs when False
                    (defaults to extraction_config.LOG_JSON)
        log_level: Override log level (defaults to extraction_config.LOG_LEVEL)
    """
    if json_output is None:
        json_output = extraction_config.LOG_JSON
    level = log_level or extraction_config.LOG_LEVEL
    level_num = getattr(logging, level.upper(), logging.INFO)

    # Standard library logging config
    logging.basicConfig(
        format='%(message)s',
        stream=sys.stdout,
        level=level_num,
    )

    # Shared processors
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        add_context_info,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt='iso'),
        structlog.processors.StackInfoRenderer(),
    ]

    if json_output:
        # Production: JSON output
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        # Development: Pretty console output
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level_num),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger that tags events with the module's stage.

    The logger stays lazy, so a later configure_logging() call still
    applies to it.

    Args:
        name: Logger name (typically __name__); its last dotted part is
              bound as ``stage``, e.g. "separator" or "deduplicator"

    Returns:
        Configured structlog logger
    """
    if not name:
        return structlog.get_logger()
    return structlog.get_logger(name, stage=name.rsplit('.', 1)[-1])


@contextmanager
def logging_context(
    trace_id: str | None = None,
    source_file: str | None = None,
) -> Generator[None, None, None]:
    """
    Context manager for setting logging context variables.

    Usage:
        with logging_context(trace_id="abc123", source_file="q3_pipeline.txt"):
            logger.info("Processing document")  # Includes trace_id and source_file
    """
    old_trace = _trace_id.get()
    old_source = _source_file.get()

    try:
        if trace_id is not None:
            _trace_id.set(trace_id)
        if source_file is not None:
            _source_file.set(source_file)
        yield
    finally:
        _trace_id.set(old_trace)
        _source_file.set(old_source)


class PipelineTimer:
    """
    Timer for tracking pipeline stage durations.

    Usage:
        timer = PipelineTimer()
        with timer.stage("separation"):
            # detect boundaries
        with timer.stage("extraction"):
            # extract fields
        print(timer.summary())
    """

    def __init__(self):
        self.stages: dict[str, float] = {}
        self.start_time: float = time.perf_counter()

    @contextmanager
    def stage(self, name: str) -> Generator[None, None, None]:
        """Time a pipeline stage; the duration is kept even if the stage raises."""
        started = time.perf_counter()
        try:
            yield
        finally:
            self.stages[name] = (time.perf_counter() - started) * 1000

    @property
    def total_ms(self) -> float:
        """Total elapsed time since timer creation in milliseconds."""
        return (time.perf_counter() - self.start_time) * 1000

    def summary(self) -> dict[str, Any]:
        """Get timing summary as a dictionary."""
        return {
            'total_ms': round(self.total_ms, 2),
            'stages': {k: round(v, 2) for k, v in self.stages.items()},
        }


# Initialize logging on module import; DEAL_LOG_JSON=true selects JSON output
configure_logging()
