"""
Logging configuration for hatchet-resolver.

This module sets up the logging system with multiple outputs:
    - Console: Colored, tqdm-compatible messages
    - resolver_full.log: Complete log of all events (DEBUG and above)
    - resolver_errors.log: Only ERROR and CRITICAL level messages
    - failed_requests.log: One line per request that was dropped from
      the completed-ids report, with its kind and the reason

Failed requests never surface to callers as exceptions; the
failed_requests.log report is where they can be found afterwards.

Usage:
    from hatchet_resolver.core.logger import setup_logging, get_logger

    setup_logging(log_dir)  # Call once at startup
    logger = get_logger(__name__)  # Get logger for each module

    logger.info("Resolving artist")
    log_request_failure(logger, request_id, "ARTISTS", "HTTP 503")
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import TextIO

from tqdm import tqdm


LOG_FULL_FILENAME = "resolver_full"
LOG_ERRORS_FILENAME = "resolver_errors"
FAILED_REQUESTS_FILENAME = "failed_requests"

FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(threadName)s | %(name)s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class Colors:
    """ANSI color codes for terminal output."""
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"
    BOLD = "\033[1m"


class ColoredConsoleFormatter(logging.Formatter):
    """
    Formatter that colors the level name of console output.

    Colors:
        - DEBUG: Blue
        - INFO: Green
        - WARNING: Yellow
        - ERROR: Red
        - CRITICAL: Bold Red
    """

    LEVEL_COLORS = {
        logging.DEBUG: Colors.BLUE,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BOLD + Colors.RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, Colors.WHITE)
        colored_levelname = f"{color}{record.levelname}{Colors.RESET}"
        return f"{colored_levelname}: {record.getMessage()}"


class TqdmLoggingHandler(logging.Handler):
    """
    Logging handler that writes to the console without breaking tqdm bars.

    The CLI shows a spinner-style progress bar while it waits for a
    request; plain stderr writes would tear it apart. tqdm.write()
    prints above any active bar instead.
    """

    def __init__(self, stream: TextIO = sys.stderr) -> None:
        super().__init__()
        self.stream = stream

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            tqdm.write(msg, file=self.stream)
        except Exception:
            self.handleError(record)


class FailedRequestHandler(logging.Handler):
    """
    Handler that collects dropped requests into the failure report.

    The handler looks for specific extra fields in log records:
        - 'failed_request_id': Correlation id of the request
        - 'failed_request_kind': Request kind name
        - 'failed_request_reason': Short reason (error message)

    Only records containing these fields are written, one per line:

        2026-10-18 12:00:01 | 3f2a... | ARTISTS_TOPHITS | HTTP 503 for https://...

    Attributes:
        report_path: Path to the failed_requests log file.
        report_file: Open file handle, set by open().
    """

    def __init__(self, report_path: Path) -> None:
        super().__init__()
        self.report_path = report_path
        self.report_file: TextIO | None = None

    def open(self) -> None:
        """Open the report file for writing (overwrites existing content)."""
        self.report_file = open(self.report_path, "w", encoding="utf-8")

    def emit(self, record: logging.LogRecord) -> None:
        if not hasattr(record, "failed_request_id"):
            return

        if self.report_file is None:
            return

        try:
            timestamp = datetime.fromtimestamp(record.created).strftime(FILE_DATE_FORMAT)
            request_id = getattr(record, "failed_request_id", "")
            kind = getattr(record, "failed_request_kind", "UNKNOWN")
            reason = getattr(record, "failed_request_reason", "")
            # Worker threads share this handler; Handler.handle() holds self.lock
            self.report_file.write(f"{timestamp} | {request_id} | {kind} | {reason}\n")
            self.report_file.flush()
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        """
        Close the report file handle.

        Safe to call multiple times.
        """
        if self.report_file is not None:
            try:
                self.report_file.close()
            except OSError:
                pass
            self.report_file = None
        super().close()


class ErrorOnlyFilter(logging.Filter):
    """
    Filter that only allows ERROR and CRITICAL level records.

    Example:
        handler.addFilter(ErrorOnlyFilter())
    """

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.ERROR


def setup_logging(log_dir: Path, console_level: str = "INFO") -> None:
    """
    Configure the logging system for the resolver.

    This function should be called ONCE at application startup, after
    the configuration is loaded but before the executor starts.

    Args:
        log_dir: Directory for the log files. Created if missing.
        console_level: Minimum level printed on the console.

    Behavior:
        1. Create log_dir
        2. Reset the root logger to DEBUG with no handlers
        3. Console handler (tqdm-compatible, colored) at console_level
        4. Full log file handler at DEBUG
        5. Error-only log file handler
        6. Failed request report handler

    File Handling:
        Each run creates new files suffixed with a timestamp, UTF-8 encoded.

    Thread Safety:
        NOT thread-safe. Call it once from the main thread.
    """
    log_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    console_handler = TqdmLoggingHandler()
    console_handler.setLevel(getattr(logging, console_level.upper(), logging.INFO))
    console_handler.setFormatter(ColoredConsoleFormatter())
    root_logger.addHandler(console_handler)

    full_log_path = log_dir / f"{LOG_FULL_FILENAME}_{timestamp}.log"
    full_handler = logging.FileHandler(full_log_path, mode="w", encoding="utf-8")
    full_handler.setLevel(logging.DEBUG)
    full_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    root_logger.addHandler(full_handler)

    error_log_path = log_dir / f"{LOG_ERRORS_FILENAME}_{timestamp}.log"
    error_handler = logging.FileHandler(error_log_path, mode="w", encoding="utf-8")
    error_handler.setLevel(logging.DEBUG)  # Filter handles the level restriction
    error_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    error_handler.addFilter(ErrorOnlyFilter())
    root_logger.addHandler(error_handler)

    failed_path = log_dir / f"{FAILED_REQUESTS_FILENAME}_{timestamp}.log"
    failed_handler = FailedRequestHandler(failed_path)
    failed_handler.open()
    root_logger.addHandler(failed_handler)

    # urllib3 logs every connection at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: The logger name, typically __name__ of the calling module.

    Note:
        Loggers obtained before setup_logging() is called propagate to an
        unconfigured root logger and only WARNING and above reach stderr.
    """
    return logging.getLogger(name)


def log_request_failure(
    logger: logging.Logger,
    request_id: str,
    kind: str,
    reason: str,
    level: int = logging.ERROR
) -> None:
    """
    Log a request that will be omitted from the completed-ids report.

    Attaches the extra fields FailedRequestHandler picks up.

    Args:
        logger: The logger to use for the message.
        request_id: Correlation id of the request.
        kind: Request kind name (e.g. "ARTISTS_ALBUMS").
        reason: Description of why the request was dropped.
        level: Log level; identity/auth absence is logged as WARNING.

    Example:
        log_request_failure(logger, "req-1", "ARTISTS", "HTTP 503 for https://...")
    """
    logger.log(
        level,
        f"{kind} request {request_id} not done: {reason}",
        extra={
            "failed_request_id": request_id,
            "failed_request_kind": kind,
            "failed_request_reason": reason,
        }
    )


def shutdown_logging() -> None:
    """
    Flush, close and detach every root handler.

    Typically called from a finally block in the CLI.
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        try:
            handler.flush()
            handler.close()
        except OSError:
            pass
        root_logger.removeHandler(handler)
