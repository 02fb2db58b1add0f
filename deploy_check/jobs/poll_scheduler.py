"""Deployment poll scheduler racing a repeating tick against a one-shot deadline."""

from __future__ import annotations

import threading
import time
from typing import Callable

from deploy_check.adapters import BeanstalkQueryError, StatusQueryPort
from deploy_check.domain import (
    ConvergenceState,
    DeployTarget,
    EvaluationPolicy,
    PollSnapshot,
    TimeoutBudget,
    domain_build_stage_event,
    domain_describe_snapshot,
)
from deploy_check.reporting import PollReporter

from .check_errors import (
    DeployCheckQueryError,
    DeploymentCancelledError,
    DeploymentFailedError,
    DeploymentTimedOutError,
    TargetNotFoundError,
)
from .interfaces import PollOutcome


class DeploymentPollScheduler:
    """Single-threaded poll loop deciding when a deployment has converged.

    The loop waits cooperatively for whichever fires first: the deadline, the
    next tick, or the cancel event. A tick runs exactly one synchronous query
    and evaluates it to completion before the loop waits again. When the tick
    and the deadline coincide, the deadline wins.
    """

    def __init__(
        self,
        status_query: StatusQueryPort,
        evaluation_policy: EvaluationPolicy,
        budget: TimeoutBudget,
        reporter: PollReporter,
        poll_immediately: bool = False,
        cancel_event: threading.Event | None = None,
        monotonic_provider: Callable[[], float] | None = None,
        wait_provider: Callable[[float], bool] | None = None,
    ):
        """Initialize scheduler dependencies and timer configuration.

        Args:
            status_query: Status query collaborator.
            evaluation_policy: Policy matching the query variant.
            budget: Total duration and tick interval.
            reporter: Reporting collaborator.
            poll_immediately: Fire the first tick on entry instead of after one interval.
            cancel_event: Optional external cancel signal.
            monotonic_provider: Clock returning monotonic seconds.
            wait_provider: Waits up to the given seconds; returns True when cancelled.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when required dependencies are missing.
        """

        if status_query is None:
            raise ValueError("status_query must not be None")
        if evaluation_policy is None:
            raise ValueError("evaluation_policy must not be None")
        if budget is None:
            raise ValueError("budget must not be None")
        if reporter is None:
            raise ValueError("reporter must not be None")

        self._status_query = status_query
        self._evaluation_policy = evaluation_policy
        self._budget = budget
        self._reporter = reporter
        self._poll_immediately = poll_immediately
        self._cancel_event = cancel_event if cancel_event is not None else threading.Event()
        self._monotonic = monotonic_provider or time.monotonic
        self._wait = wait_provider or self._cancel_event.wait

    def scheduler_wait_for_convergence(
        self,
        target: DeployTarget,
        stage_timeline: list[dict[str, object]] | None = None,
    ) -> PollOutcome:
        """Block until the target converges, fails, times out, or is cancelled.

        Args:
            target: Deploy target being verified.
            stage_timeline: Optional mutable diagnostics timeline; poll events are appended.

        Returns:
            PollOutcome: Success payload.

        Raises:
            DeploymentTimedOutError: Raised when the deadline fires first.
            DeployCheckQueryError: Raised when the status query fails.
            TargetNotFoundError: Raised when the query matched nothing.
            DeploymentFailedError: Raised when the platform reports failure.
            DeploymentCancelledError: Raised when the cancel event is set.
        """

        timeline = stage_timeline if stage_timeline is not None else []
        self._reporter.reporter_log_check_started(
            target=target,
            budget=self._budget,
            policy_name=self._evaluation_policy.policy_name,
        )

        started_at = self._monotonic()
        deadline_at = started_at + self._budget.total_seconds
        next_tick_at = started_at if self._poll_immediately else started_at + self._budget.tick_seconds
        poll_count = 0
        last_snapshots: tuple[PollSnapshot, ...] = ()

        while True:
            if self._cancel_event.is_set():
                raise DeploymentCancelledError("cancelled", poll_count=poll_count, last_snapshots=last_snapshots)

            now = self._monotonic()
            if now >= deadline_at:
                raise DeploymentTimedOutError("timed out", poll_count=poll_count, last_snapshots=last_snapshots)

            fire_at = min(next_tick_at, deadline_at)
            if fire_at > now:
                if self._wait(fire_at - now):
                    raise DeploymentCancelledError("cancelled", poll_count=poll_count, last_snapshots=last_snapshots)
                continue

            poll_count += 1
            self._reporter.reporter_log_tick(target=target, poll_count=poll_count)
            query_error: BeanstalkQueryError | None = None
            snapshots: tuple[PollSnapshot, ...] = ()
            try:
                snapshots = tuple(self._status_query.adapter_fetch_snapshots(target))
            except BeanstalkQueryError as error:
                query_error = error

            if self._monotonic() >= deadline_at:
                # The deadline fired while the query was in flight; its result is discarded.
                raise DeploymentTimedOutError("timed out", poll_count=poll_count, last_snapshots=last_snapshots)

            if query_error is not None:
                timeline.append(
                    domain_build_stage_event(
                        stage="poll",
                        status="failed",
                        details={"poll_attempt": poll_count, "error_message": str(query_error)},
                    )
                )
                raise DeployCheckQueryError(
                    f"problem retrieving deployment status from {self._status_query.adapter_source_name()}: "
                    f"{query_error}",
                    poll_count=poll_count,
                    last_snapshots=last_snapshots,
                ) from query_error

            if not snapshots:
                raise TargetNotFoundError(
                    f"{self._evaluation_policy.policy_describe_target(target)} not found",
                    poll_count=poll_count,
                    last_snapshots=last_snapshots,
                )

            last_snapshots = snapshots
            verdict = self._evaluation_policy.policy_classify_tick(snapshots)
            for evaluation in verdict.evaluations:
                self._reporter.reporter_log_evaluation(evaluation.snapshot, evaluation.classification)
            timeline.append(
                domain_build_stage_event(
                    stage="poll",
                    status=verdict.state.value,
                    details={
                        "poll_attempt": poll_count,
                        "reason": verdict.reason,
                        "reason_code": verdict.reason_code,
                        "snapshots": [domain_describe_snapshot(snapshot) for snapshot in snapshots],
                    },
                )
            )

            if verdict.state is ConvergenceState.SUCCEEDED:
                return PollOutcome(
                    poll_count=poll_count,
                    elapsed_seconds=self._monotonic() - started_at,
                    deciding_snapshot=verdict.evaluations[-1].snapshot,
                    last_snapshots=snapshots,
                )
            if verdict.state is ConvergenceState.FAILED:
                raise DeploymentFailedError(
                    f"{self._evaluation_policy.policy_describe_target(target)}: {verdict.reason}",
                    poll_count=poll_count,
                    last_snapshots=snapshots,
                )

            next_tick_at = self._scheduler_next_tick_at(fired_at=next_tick_at, now=self._monotonic())

    def _scheduler_next_tick_at(self, fired_at: float, now: float) -> float:
        """Return next tick fire time with repeating-timer semantics.

        Ticks missed while the loop was busy collapse into one immediate fire;
        the tick grid stays anchored at the first fire.

        Args:
            fired_at: Scheduled time of the tick just processed.
            now: Current monotonic time.

        Returns:
            float: Next fire time; values not after `now` fire immediately.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        tick_seconds = self._budget.tick_seconds
        candidate = fired_at + tick_seconds
        if candidate > now:
            return candidate
        missed_intervals = int((now - fired_at) // tick_seconds)
        return fired_at + missed_intervals * tick_seconds
