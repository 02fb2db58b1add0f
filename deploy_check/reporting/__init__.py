"""Reporting package for structured deploy check logging."""

from .poll_logging import KeyValueFormatter, PollLogRecord, PollReporter, reporting_create_logger

__all__ = ["KeyValueFormatter", "PollLogRecord", "PollReporter", "reporting_create_logger"]
