"""Job-layer deploy check orchestrator with deterministic stage timeline capture."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from deploy_check.domain import DeployTarget, domain_build_stage_event, domain_describe_snapshot
from deploy_check.reporting import PollReporter

from .check_errors import (
    DeployCheckError,
    DeployCheckQueryError,
    DeploymentCancelledError,
    DeploymentFailedError,
    DeploymentTimedOutError,
    TargetNotFoundError,
)
from .interfaces import DeployCheckPort, DeployCheckResult
from .poll_scheduler import DeploymentPollScheduler

EXIT_CODE_SUCCESS: Final[int] = 0
EXIT_CODE_FAILURE: Final[int] = 1
EXIT_CODE_CONFIGURATION_ERROR: Final[int] = 2


@dataclass(frozen=True)
class DeployCheckOrchestratorConfig:
    """Configuration values for one deploy check execution.

    Attributes:
        target: Deploy target being verified.
    """

    target: DeployTarget


class DeployCheckOrchestrator(DeployCheckPort):
    """Run the poll scheduler and map its outcome to a pipeline result."""

    def __init__(
        self,
        scheduler: DeploymentPollScheduler,
        reporter: PollReporter,
        config: DeployCheckOrchestratorConfig,
    ):
        """Initialize orchestrator dependencies.

        Args:
            scheduler: Poll scheduler for the configured query mode.
            reporter: Reporting collaborator for summary lines.
            config: Deploy check configuration.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when dependencies or config values are invalid.
        """

        if scheduler is None:
            raise ValueError("scheduler must not be None")
        if reporter is None:
            raise ValueError("reporter must not be None")
        if not config.target.expected_version_label.strip():
            raise ValueError("config.target.expected_version_label must not be blank")

        self._scheduler = scheduler
        self._reporter = reporter
        self._config = config

    def job_execute(self) -> DeployCheckResult:
        """Run the deploy check to a definitive result.

        Returns:
            DeployCheckResult: Final execution payload with exit code.

        Raises:
            RuntimeError: Raised for unexpected failures outside the deploy check taxonomy.
        """

        target = self._config.target
        timeline: list[dict[str, object]] = [domain_build_stage_event(stage="check", status="started")]

        try:
            outcome = self._scheduler.scheduler_wait_for_convergence(target=target, stage_timeline=timeline)
        except DeployCheckError as error:
            status = self._job_status_for_exception(error)
            timeline.append(
                domain_build_stage_event(
                    stage="check",
                    status=status,
                    details={
                        "error_type": type(error).__name__,
                        "error_code": error.error_code,
                        "error_message": str(error),
                        "poll_count": error.poll_count,
                    },
                )
            )
            self._reporter.reporter_log_check_failed(
                summary=self._job_summary_for_status(status),
                error=error,
                last_snapshots=error.last_snapshots,
            )
            self._reporter.reporter_log_stage_timeline(timeline)
            return DeployCheckResult(
                status=status,
                exit_code=EXIT_CODE_FAILURE,
                error_code=error.error_code,
                error_message=str(error),
                poll_count=error.poll_count,
                last_snapshots=error.last_snapshots,
                stage_timeline=timeline,
            )

        timeline.append(
            domain_build_stage_event(
                stage="check",
                status="succeeded",
                details={
                    "poll_count": outcome.poll_count,
                    "elapsed_seconds": round(outcome.elapsed_seconds, 3),
                    "deciding_snapshot": domain_describe_snapshot(outcome.deciding_snapshot),
                },
            )
        )
        self._reporter.reporter_log_check_succeeded(
            target=target,
            poll_count=outcome.poll_count,
            elapsed_seconds=outcome.elapsed_seconds,
        )
        return DeployCheckResult(
            status="succeeded",
            exit_code=EXIT_CODE_SUCCESS,
            poll_count=outcome.poll_count,
            last_snapshots=outcome.last_snapshots,
            stage_timeline=timeline,
        )

    def _job_status_for_exception(self, error: DeployCheckError) -> str:
        """Map terminal exception type to deterministic result status.

        Args:
            error: Terminal deploy check exception.

        Returns:
            str: Result status value.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        if isinstance(error, DeploymentTimedOutError):
            return "timed_out"
        if isinstance(error, TargetNotFoundError):
            return "not_found"
        if isinstance(error, DeploymentFailedError):
            return "failed"
        if isinstance(error, DeployCheckQueryError):
            return "query_error"
        if isinstance(error, DeploymentCancelledError):
            return "cancelled"
        return "failed"

    def _job_summary_for_status(self, status: str) -> str:
        summaries = {
            "timed_out": "could not identify a successful deploy in time",
            "not_found": "problem retrieving environment information",
            "failed": "deployment reported a failure",
            "query_error": "problem retrieving environment information",
            "cancelled": "deploy check was cancelled",
        }
        return summaries.get(status, "deploy check failed")
