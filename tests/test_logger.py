"""Test the logging setup"""

import logging

from hatchet_resolver.core.logger import (
    ErrorOnlyFilter,
    get_logger,
    log_request_failure,
    setup_logging,
    shutdown_logging,
)


def read_log(log_dir, prefix: str) -> str:
    (path,) = log_dir.glob(f"{prefix}_*.log")
    return path.read_text(encoding="utf-8")


class TestSetupLogging:
    """Test the log files written by setup_logging()"""

    def test_files_and_failure_report(self, temp_dir):
        """Test the log files and the failed requests report"""
        log_dir = temp_dir / "logs"
        setup_logging(log_dir, "WARNING")
        try:
            logger = get_logger("hatchet_resolver.tests")
            logger.debug("resolving X")
            log_request_failure(logger, "req-1", "ARTISTS_ALBUMS", "HTTP 503 for https://api/")
            log_request_failure(logger, "req-2", "USERS_SELF", "no user id", level=logging.WARNING)
        finally:
            shutdown_logging()

        full = read_log(log_dir, "resolver_full")
        assert "resolving X" in full
        assert "ARTISTS_ALBUMS request req-1 not done" in full

        errors = read_log(log_dir, "resolver_errors")
        assert "req-1" in errors
        assert "req-2" not in errors

        report = read_log(log_dir, "failed_requests").splitlines()
        assert len(report) == 2
        assert report[0].endswith("| req-1 | ARTISTS_ALBUMS | HTTP 503 for https://api/")
        assert report[1].endswith("| req-2 | USERS_SELF | no user id")

    def test_shutdown_detaches_handlers(self, temp_dir):
        """Test that shutdown removes every root handler"""
        setup_logging(temp_dir, "INFO")
        shutdown_logging()
        assert logging.getLogger().handlers == []


class TestErrorOnlyFilter:

    def test_levels(self):
        """Test that only ERROR and above pass"""
        error_filter = ErrorOnlyFilter()
        make = lambda level: logging.LogRecord("t", level, __file__, 1, "msg", None, None)
        assert error_filter.filter(make(logging.ERROR))
        assert error_filter.filter(make(logging.CRITICAL))
        assert not error_filter.filter(make(logging.WARNING))
