"""
component_15_logging_config.py

Central logging configuration for the DPLL solver.

Provides:
- get_logger(): StructuredLogger wrapper accepting structured context via ``extra``
- setup_logging(): console + rotating file handlers (main log, error log)
- PerformanceLogger: context manager that records operation durations
- WindowsSafeRotatingFileHandler: rotation that survives locked log files

Usage:
    from component_15_logging_config import get_logger

    logger = get_logger(__name__)
    logger.info("Starting DPLL solver", extra={"num_clauses": 6})
"""

import logging
import logging.handlers
import sys
import time
import traceback
from pathlib import Path
from typing import Any, Dict, Optional, Union

LOG_DIR = Path(__file__).parent / "logs"
DEFAULT_LOG_FILE = LOG_DIR / "dpll.log"
ERROR_LOG_FILE = LOG_DIR / "dpll_errors.log"
PERFORMANCE_LOG_FILE = LOG_DIR / "dpll_performance.log"

PERFORMANCE_LOGGER_NAME = "dpll.performance"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

MAX_LOG_BYTES = 5 * 1024 * 1024
BACKUP_COUNT = 3

# Attributes every LogRecord carries; anything else on a record is user context.
_RESERVED_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
) | {"message", "asctime"}


class WindowsSafeRotatingFileHandler(logging.handlers.RotatingFileHandler):
    """
    RotatingFileHandler that keeps logging when rotation fails.

    On Windows another process holding the log file open makes the rename in
    doRollover() fail with PermissionError. Instead of losing the record the
    handler reopens the current file and continues appending.
    """

    def doRollover(self):
        try:
            super().doRollover()
        except (PermissionError, OSError):
            if self.stream is None:
                self.stream = self._open()


class StructuredFormatter(logging.Formatter):
    """Formatter that appends ``| key=value`` pairs for structured context."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        context = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_RECORD_ATTRS
        }
        if not context:
            return base
        details = ", ".join(f"{key}={value}" for key, value in context.items())
        return f"{base} | {details}"


class StructuredLogger:
    """
    Thin wrapper around logging.Logger.

    Accepts ``extra`` dictionaries whose keys would otherwise collide with
    LogRecord attributes (``name``, ``args``, ...) by prefixing them with
    ``ctx_``.
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    @staticmethod
    def _sanitize(extra: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        if not extra:
            return None
        return {
            (f"ctx_{key}" if key in _RESERVED_RECORD_ATTRS else key): value
            for key, value in extra.items()
        }

    def _log(self, level: int, message: str, extra=None, **kwargs) -> None:
        if self.logger.isEnabledFor(level):
            self.logger.log(level, message, extra=self._sanitize(extra), **kwargs)

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None, **kwargs):
        self._log(logging.DEBUG, message, extra, **kwargs)

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None, **kwargs):
        self._log(logging.INFO, message, extra, **kwargs)

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None, **kwargs):
        self._log(logging.WARNING, message, extra, **kwargs)

    def error(self, message: str, extra: Optional[Dict[str, Any]] = None, **kwargs):
        self._log(logging.ERROR, message, extra, **kwargs)

    def critical(self, message: str, extra: Optional[Dict[str, Any]] = None, **kwargs):
        self._log(logging.CRITICAL, message, extra, **kwargs)

    def log_exception(self, exception: BaseException, message: str = "", **context):
        """
        Log an exception with its full traceback and structured context.

        Args:
            exception: The exception to log
            message: Optional description of the failed operation
            **context: Additional context (operation parameters etc.)
        """
        context["exception_type"] = type(exception).__name__
        exception_context = getattr(exception, "context", None)
        if isinstance(exception_context, dict):
            for key, value in exception_context.items():
                context.setdefault(key, value)

        text = message or "Unhandled exception"
        trace = "".join(
            traceback.format_exception(
                type(exception), exception, exception.__traceback__
            )
        )
        self.error(f"{text}: {exception}\n{trace.rstrip()}", extra=context)


def get_logger(name: str) -> StructuredLogger:
    """Return a StructuredLogger for ``name`` (usually ``__name__``)."""
    return StructuredLogger(logging.getLogger(name))


class PerformanceLogger:
    """
    Context manager that measures and logs the duration of an operation.

    Durations go to the ``dpll.performance`` logger (and thereby to
    PERFORMANCE_LOG_FILE when performance logging is enabled). Exceptions
    raised inside the block are logged and re-raised.

    Usage:
        with PerformanceLogger(logger, "dpll_solve", num_clauses=6):
            ...
    """

    def __init__(
        self,
        logger: Union[StructuredLogger, logging.Logger],
        operation: str,
        **context: Any,
    ):
        if isinstance(logger, StructuredLogger):
            logger = logger.logger
        self.logger = StructuredLogger(logger)
        self.perf_logger = get_logger(PERFORMANCE_LOGGER_NAME)
        self.operation = operation
        self.context = context
        self.start_time: Optional[float] = None
        self.duration_ms: Optional[float] = None

    def __enter__(self) -> "PerformanceLogger":
        self.start_time = time.perf_counter()
        self.logger.debug(
            f"{self.operation} started", extra={"operation": self.operation}
        )
        return self

    def __exit__(self, exc_type, exc_value, exc_tb) -> bool:
        self.duration_ms = (time.perf_counter() - self.start_time) * 1000.0
        extra = dict(self.context)
        extra.update(
            {"operation": self.operation, "duration_ms": round(self.duration_ms, 3)}
        )

        if exc_type is None:
            self.perf_logger.info(f"{self.operation} completed", extra=extra)
        else:
            extra["exception_type"] = exc_type.__name__
            self.perf_logger.warning(f"{self.operation} failed", extra=extra)
            self.logger.error(
                f"{self.operation} failed after {self.duration_ms:.1f}ms: {exc_value}",
                extra={"operation": self.operation},
            )
        return False


def _remove_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def setup_logging(
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    enable_performance_logging: bool = True,
    log_dir: Optional[Union[str, Path]] = None,
) -> None:
    """
    Configure the root logger.

    Re-running replaces all handlers installed by a previous call, so the
    function can be used to apply changed settings.

    Args:
        console_level: Level of the stderr handler
        file_level: Level of the main rotating log file
        enable_performance_logging: Write PerformanceLogger output to its own file
        log_dir: Directory for log files (defaults to LOG_DIR)
    """
    directory = Path(log_dir) if log_dir is not None else LOG_DIR
    directory.mkdir(parents=True, exist_ok=True)

    formatter = StructuredFormatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    root_logger = logging.getLogger()
    _remove_handlers(root_logger)
    root_logger.setLevel(min(console_level, file_level))

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    main_handler = WindowsSafeRotatingFileHandler(
        directory / DEFAULT_LOG_FILE.name,
        maxBytes=MAX_LOG_BYTES,
        backupCount=BACKUP_COUNT,
        encoding="utf-8",
    )
    main_handler.setLevel(file_level)
    main_handler.setFormatter(formatter)
    root_logger.addHandler(main_handler)

    error_handler = WindowsSafeRotatingFileHandler(
        directory / ERROR_LOG_FILE.name,
        maxBytes=MAX_LOG_BYTES,
        backupCount=BACKUP_COUNT,
        encoding="utf-8",
    )
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(formatter)
    root_logger.addHandler(error_handler)

    perf_logger = logging.getLogger(PERFORMANCE_LOGGER_NAME)
    _remove_handlers(perf_logger)
    perf_logger.setLevel(logging.INFO)
    if enable_performance_logging:
        perf_handler = WindowsSafeRotatingFileHandler(
            directory / PERFORMANCE_LOG_FILE.name,
            maxBytes=MAX_LOG_BYTES,
            backupCount=BACKUP_COUNT,
            encoding="utf-8",
        )
        perf_handler.setFormatter(formatter)
        perf_logger.addHandler(perf_handler)
        perf_logger.propagate = False
    else:
        perf_logger.propagate = True
        perf_logger.setLevel(logging.WARNING)
