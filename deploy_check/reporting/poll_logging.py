"""Structured, leveled logging of deploy check progress.

Log lines are rendered in `key=value` form so pipeline log aggregation can
index them:

    time=2026-01-01T00:00:00+00:00 level=info msg="environment is updating" env=prod version=v41

The log level is an explicit constructor value. `reporting_create_logger`
builds a standalone logger that is not registered in the global logging
registry, so one check never changes another component's logging setup.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Final, Sequence, TextIO

from deploy_check.domain import (
    ConvergenceClassification,
    DeployTarget,
    EnvironmentSnapshot,
    PollSnapshot,
    TimeoutBudget,
)

_LOGGER_NAME: Final[str] = "deploy_check"
_REASON_CODE_LEVELS: Final[dict[str, int]] = {
    "environment_updating": logging.INFO,
    "environment_not_ready": logging.WARNING,
    "environment_unhealthy": logging.WARNING,
    "environment_deployed": logging.INFO,
    "version_processing": logging.INFO,
    "version_processed": logging.INFO,
    "version_failed": logging.ERROR,
}


class KeyValueFormatter(logging.Formatter):
    """Render records as `time=... level=... msg=...` followed by structured fields."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        parts = [
            f"time={timestamp}",
            f"level={record.levelname.lower()}",
            f"msg={_reporting_quote(record.getMessage())}",
        ]
        fields = getattr(record, "fields", None) or {}
        for key in sorted(fields):
            parts.append(f"{key}={_reporting_quote(fields[key])}")
        line = " ".join(parts)
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def _reporting_quote(value: Any) -> str:
    text = str(value)
    if text and not any(character in text for character in ' ="\n\t'):
        return text
    escaped = text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'


def reporting_create_logger(debug: bool = False, stream: TextIO | None = None) -> logging.Logger:
    """Create a standalone key=value logger with an explicit level.

    Args:
        debug: Enable debug-level per-tick trace lines.
        stream: Output stream; defaults to stderr.

    Returns:
        logging.Logger: Logger with one stream handler and no propagation.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    logger = logging.Logger(_LOGGER_NAME, level=logging.DEBUG if debug else logging.INFO)
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(KeyValueFormatter())
    logger.addHandler(handler)
    logger.propagate = False
    return logger


@dataclass(frozen=True)
class PollLogRecord:
    """Field bundle for one observed snapshot.

    Attributes:
        env: Environment name, or None for application-version snapshots.
        version: Observed version label.
        status: Lifecycle or processing status.
        health: Health color, or None for application-version snapshots.
    """

    env: str | None
    version: str
    status: str
    health: str | None

    @classmethod
    def from_snapshot(cls, snapshot: PollSnapshot) -> "PollLogRecord":
        if isinstance(snapshot, EnvironmentSnapshot):
            return cls(
                env=snapshot.environment_name,
                version=snapshot.version_label,
                status=snapshot.lifecycle_status,
                health=snapshot.health_status,
            )
        return cls(env=None, version=snapshot.version_label, status=snapshot.processing_status, health=None)

    def record_fields(self) -> dict[str, str]:
        fields = {"version": self.version, "status": self.status}
        if self.env is not None:
            fields["env"] = self.env
        if self.health is not None:
            fields["health"] = self.health
        return fields


class PollReporter:
    """Reporting collaborator used by the scheduler and the orchestrator."""

    def __init__(self, logger: logging.Logger):
        if logger is None:
            raise ValueError("logger must not be None")
        self._logger = logger

    def reporter_log_check_started(self, target: DeployTarget, budget: TimeoutBudget, policy_name: str) -> None:
        """Log check parameters once before the first wait."""

        fields: dict[str, object] = {
            "region": target.region,
            "app": target.application,
            "label": target.expected_version_label,
            "timeout": f"{budget.total_seconds:g}s",
            "tick": f"{budget.tick_seconds:g}s",
            "mode": policy_name,
        }
        if target.environment_selector:
            fields["env"] = target.environment_selector
        self._logger.info("attempting to check for a successful deploy", extra={"fields": fields})

    def reporter_log_tick(self, target: DeployTarget, poll_count: int) -> None:
        self._logger.debug(
            "ticking",
            extra={"fields": {"app": target.application, "label": target.expected_version_label, "poll": poll_count}},
        )

    def reporter_log_evaluation(self, snapshot: PollSnapshot, classification: ConvergenceClassification) -> None:
        """Log one snapshot classification at the level mapped from its reason code.

        Args:
            snapshot: Evaluated snapshot.
            classification: Snapshot classification.

        Returns:
            None: Emits one log line as side effect.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        record = PollLogRecord.from_snapshot(snapshot)
        level = _REASON_CODE_LEVELS.get(classification.reason_code, logging.INFO)
        self._logger.log(level, classification.reason, extra={"fields": record.record_fields()})

    def reporter_log_check_succeeded(self, target: DeployTarget, poll_count: int, elapsed_seconds: float) -> None:
        self._logger.info(
            "deploy check succeeded",
            extra={
                "fields": {
                    "app": target.application,
                    "label": target.expected_version_label,
                    "polls": poll_count,
                    "elapsed": f"{elapsed_seconds:.1f}s",
                }
            },
        )

    def reporter_log_check_failed(
        self,
        summary: str,
        error: BaseException,
        last_snapshots: Sequence[PollSnapshot],
    ) -> None:
        """Log one-line failure summary followed by the last known snapshot fields.

        Args:
            summary: Operator-facing summary line.
            error: Terminal error.
            last_snapshots: Snapshots from the last completed poll.

        Returns:
            None: Emits log lines as side effect.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        self._logger.error(summary, extra={"fields": {"error": str(error)}})
        for snapshot in last_snapshots:
            self._logger.error(
                "last known status",
                extra={"fields": PollLogRecord.from_snapshot(snapshot).record_fields()},
            )

    def reporter_log_stage_timeline(self, stage_timeline: Sequence[dict[str, object]]) -> None:
        """Replay stage timeline events at debug level for failure diagnostics.

        Args:
            stage_timeline: Ordered stage events recorded during the check.

        Returns:
            None: Emits log lines as side effect.
        """

        for stage_event in stage_timeline:
            fields: dict[str, object] = {
                "stage": stage_event.get("stage", ""),
                "status": stage_event.get("status", ""),
                "at": stage_event.get("at_utc", ""),
            }
            details = stage_event.get("details")
            if isinstance(details, dict):
                fields.update(details)
            self._logger.debug("stage event", extra={"fields": fields})
