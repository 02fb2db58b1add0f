"""Typed interfaces for job-layer orchestration responsibilities."""

from dataclasses import dataclass, field
from typing import Protocol

from deploy_check.domain import PollSnapshot


@dataclass(frozen=True)
class PollOutcome:
    """Successful scheduler termination payload.

    Attributes:
        poll_count: Number of queries issued, including the deciding one.
        elapsed_seconds: Monotonic time from check start to success.
        deciding_snapshot: Snapshot that classified as succeeded.
        last_snapshots: All snapshots returned by the deciding poll.
    """

    poll_count: int
    elapsed_seconds: float
    deciding_snapshot: PollSnapshot
    last_snapshots: tuple[PollSnapshot, ...]


@dataclass(frozen=True)
class DeployCheckResult:
    """Final result contract for one deploy check execution.

    Attributes:
        status: `succeeded`, `failed`, `timed_out`, `not_found`, `query_error`, or `cancelled`.
        exit_code: Process exit code for pipeline callers.
        error_code: Stable error code when not succeeded.
        error_message: Error summary when not succeeded.
        poll_count: Number of queries issued.
        last_snapshots: Last known snapshots for operator diagnostics.
        stage_timeline: Structured stage events captured during the check.
    """

    status: str
    exit_code: int
    error_code: str | None = None
    error_message: str | None = None
    poll_count: int = 0
    last_snapshots: tuple[PollSnapshot, ...] = ()
    stage_timeline: list[dict[str, object]] = field(default_factory=list)


class DeployCheckPort(Protocol):
    """Port definition for running one deploy check to a definitive result."""

    def job_execute(self) -> DeployCheckResult:
        """Run the check until success, failure, timeout, or cancellation.

        Returns:
            DeployCheckResult: Final execution payload.

        Raises:
            RuntimeError: Raised for unexpected execution failures.
        """
