"""Regression tests for deployment poll scheduler timing and termination rules."""

from __future__ import annotations

import logging
import threading

import pytest

from deploy_check.adapters import BeanstalkConnectionError
from deploy_check.domain import (
    ApplicationVersionSnapshot,
    DeployTarget,
    EnvironmentPolicy,
    EnvironmentSnapshot,
    TimeoutBudget,
    VersionPolicy,
)
from deploy_check.jobs import (
    DeployCheckQueryError,
    DeploymentCancelledError,
    DeploymentFailedError,
    DeploymentPollScheduler,
    DeploymentTimedOutError,
    TargetNotFoundError,
)
from deploy_check.reporting import PollReporter

_TARGET = DeployTarget(application="orders-api", expected_version_label="v42", region="us-east-1")
_CONVERGING = (EnvironmentSnapshot("prod", "v41", "Updating", "Grey"),)
_SUCCEEDED = (EnvironmentSnapshot("prod", "v42", "Ready", "Green"),)


class _FakeClock:
    """Deterministic monotonic clock whose waits advance time instantly."""

    def __init__(self):
        self.now = 0.0
        self.waits: list[float] = []

    def clock_monotonic(self) -> float:
        return self.now

    def clock_wait(self, seconds: float) -> bool:
        self.waits.append(seconds)
        self.now += seconds
        return False


class _StatusQueryStub:
    """Status query stub replaying scripted responses and recording call times."""

    def __init__(self, clock: _FakeClock, responses: list, latencies: list[float] | None = None):
        """Initialize stub state.

        Args:
            clock: Shared fake clock.
            responses: Snapshot tuples or exceptions; the last entry repeats.
            latencies: Optional per-call latency in seconds; the last entry repeats.

        Returns:
            None: Initializer does not return values.

        Raises:
            RuntimeError: This stub does not raise runtime errors.
        """

        self._clock = clock
        self._responses = responses
        self._latencies = latencies or [0.0]
        self.call_times: list[float] = []

    def adapter_source_name(self) -> str:
        return "status_query_stub"

    def adapter_fetch_snapshots(self, target: DeployTarget):
        _ = target
        call_index = len(self.call_times)
        self.call_times.append(self._clock.now)
        self._clock.now += self._latencies[min(call_index, len(self._latencies) - 1)]
        response = self._responses[min(call_index, len(self._responses) - 1)]
        if isinstance(response, Exception):
            raise response
        return response


def _build_scheduler(
    clock: _FakeClock,
    status_query: _StatusQueryStub,
    total_seconds: float,
    tick_seconds: float = 10.0,
    policy=None,
    **kwargs,
) -> DeploymentPollScheduler:
    return DeploymentPollScheduler(
        status_query=status_query,
        evaluation_policy=policy or EnvironmentPolicy(expected_version_label="v42"),
        budget=TimeoutBudget(total_seconds=total_seconds, tick_seconds=tick_seconds),
        reporter=PollReporter(logger=logging.getLogger("test_deploy_check")),
        monotonic_provider=clock.clock_monotonic,
        wait_provider=clock.clock_wait,
        **kwargs,
    )


def test_jobs_scheduler_returns_success_after_third_query() -> None:
    """Issue exactly three queries for converging, converging, succeeded.

    Returns:
        None: Assertions validate query count and tick timing.

    Raises:
        AssertionError: Raised when the scheduler polls too often or too rarely.
    """

    clock = _FakeClock()
    status_query = _StatusQueryStub(clock, [_CONVERGING, _CONVERGING, _SUCCEEDED])
    scheduler = _build_scheduler(clock, status_query, total_seconds=100.0)
    timeline: list[dict[str, object]] = []

    outcome = scheduler.scheduler_wait_for_convergence(_TARGET, stage_timeline=timeline)

    assert outcome.poll_count == 3
    assert status_query.call_times == [10.0, 20.0, 30.0]
    assert outcome.deciding_snapshot == _SUCCEEDED[0]
    assert [event["status"] for event in timeline] == ["converging", "converging", "succeeded"]


def test_jobs_scheduler_empty_result_raises_not_found_on_first_tick() -> None:
    """Terminate with target-not-found on the first empty result.

    Returns:
        None: Assertions validate immediate not-found termination.

    Raises:
        AssertionError: Raised when scheduler waits for another tick.
    """

    clock = _FakeClock()
    status_query = _StatusQueryStub(clock, [()])
    scheduler = _build_scheduler(clock, status_query, total_seconds=100.0)

    with pytest.raises(TargetNotFoundError, match=r"application orders-api environment \[\] not found"):
        scheduler.scheduler_wait_for_convergence(_TARGET)

    assert status_query.call_times == [10.0]


def test_jobs_scheduler_version_mode_not_found_names_version() -> None:
    """Word the not-found message by version label when checking an application version.

    Returns:
        None: Assertions validate policy-specific not-found wording.

    Raises:
        AssertionError: Raised when the message names an environment selector.
    """

    clock = _FakeClock()
    status_query = _StatusQueryStub(clock, [()])
    scheduler = _build_scheduler(
        clock,
        status_query,
        total_seconds=100.0,
        policy=VersionPolicy(expected_version_label="v42"),
    )

    with pytest.raises(TargetNotFoundError, match=r"application orders-api version \[v42\] not found"):
        scheduler.scheduler_wait_for_convergence(_TARGET)


def test_jobs_scheduler_times_out_within_budget_ticks() -> None:
    """Time out after at most three ticks for a three-interval budget.

    Returns:
        None: Assertions validate deadline-bounded termination.

    Raises:
        AssertionError: Raised when scheduler polls past the deadline.
    """

    clock = _FakeClock()
    status_query = _StatusQueryStub(clock, [_CONVERGING])
    scheduler = _build_scheduler(clock, status_query, total_seconds=30.0)

    with pytest.raises(DeploymentTimedOutError, match="timed out") as error_info:
        scheduler.scheduler_wait_for_convergence(_TARGET)

    assert len(status_query.call_times) <= 3
    assert status_query.call_times == [10.0, 20.0]
    assert clock.now == 30.0
    assert error_info.value.last_snapshots == _CONVERGING


def test_jobs_scheduler_budget_smaller_than_tick_times_out_without_query() -> None:
    """Time out before the first tick when the budget is shorter than the interval.

    Returns:
        None: Assertions validate no query is issued.

    Raises:
        AssertionError: Raised when a query runs past the deadline.
    """

    clock = _FakeClock()
    status_query = _StatusQueryStub(clock, [_SUCCEEDED])
    scheduler = _build_scheduler(clock, status_query, total_seconds=5.0)

    with pytest.raises(DeploymentTimedOutError):
        scheduler.scheduler_wait_for_convergence(_TARGET)

    assert status_query.call_times == []


def test_jobs_scheduler_version_failed_stops_polling() -> None:
    """Terminate with deployment failure when version processing failed.

    Returns:
        None: Assertions validate terminal failure without further polling.

    Raises:
        AssertionError: Raised when failure is retried.
    """

    clock = _FakeClock()
    failed_version = (ApplicationVersionSnapshot("orders-api", "v42", "Failed"),)
    status_query = _StatusQueryStub(clock, [failed_version])
    scheduler = _build_scheduler(
        clock,
        status_query,
        total_seconds=100.0,
        policy=VersionPolicy(expected_version_label="v42"),
    )

    with pytest.raises(DeploymentFailedError, match="processing failed"):
        scheduler.scheduler_wait_for_convergence(_TARGET)

    assert status_query.call_times == [10.0]


def test_jobs_scheduler_query_error_is_wrapped_and_not_retried() -> None:
    """Wrap adapter failure with context and terminate immediately.

    Returns:
        None: Assertions validate error wrapping and chaining.

    Raises:
        AssertionError: Raised when query errors are retried or swallowed.
    """

    clock = _FakeClock()
    adapter_error = BeanstalkConnectionError("Beanstalk transport request failed")
    status_query = _StatusQueryStub(clock, [adapter_error, _SUCCEEDED])
    scheduler = _build_scheduler(clock, status_query, total_seconds=100.0)

    with pytest.raises(DeployCheckQueryError, match="transport request failed") as error_info:
        scheduler.scheduler_wait_for_convergence(_TARGET)

    assert error_info.value.__cause__ is adapter_error
    assert status_query.call_times == [10.0]


def test_jobs_scheduler_slow_query_collapses_missed_ticks() -> None:
    """Deliver one catch-up tick after a slow query instead of a burst.

    Returns:
        None: Assertions validate repeating-timer semantics.

    Raises:
        AssertionError: Raised when missed ticks are replayed or skipped entirely.
    """

    clock = _FakeClock()
    status_query = _StatusQueryStub(
        clock,
        [_CONVERGING, _CONVERGING, _SUCCEEDED],
        latencies=[25.0, 0.0],
    )
    scheduler = _build_scheduler(clock, status_query, total_seconds=100.0)

    outcome = scheduler.scheduler_wait_for_convergence(_TARGET)

    assert status_query.call_times == [10.0, 35.0, 40.0]
    assert outcome.poll_count == 3


def test_jobs_scheduler_discards_result_arriving_after_deadline() -> None:
    """Report timeout when a successful result completes after the deadline.

    Returns:
        None: Assertions validate in-flight result discard.

    Raises:
        AssertionError: Raised when a late result is accepted.
    """

    clock = _FakeClock()
    status_query = _StatusQueryStub(clock, [_SUCCEEDED], latencies=[10.0])
    scheduler = _build_scheduler(clock, status_query, total_seconds=15.0)

    with pytest.raises(DeploymentTimedOutError) as error_info:
        scheduler.scheduler_wait_for_convergence(_TARGET)

    assert error_info.value.poll_count == 1
    assert error_info.value.last_snapshots == ()


def test_jobs_scheduler_poll_immediately_queries_on_entry() -> None:
    """Poll on entry when immediate polling is enabled.

    Returns:
        None: Assertions validate first tick timing.

    Raises:
        AssertionError: Raised when first poll is delayed.
    """

    clock = _FakeClock()
    status_query = _StatusQueryStub(clock, [_CONVERGING, _SUCCEEDED])
    scheduler = _build_scheduler(clock, status_query, total_seconds=100.0, poll_immediately=True)

    scheduler.scheduler_wait_for_convergence(_TARGET)

    assert status_query.call_times == [0.0, 10.0]


def test_jobs_scheduler_cancel_event_terminates_loop() -> None:
    """Terminate with cancellation when the cancel event is set mid-wait.

    Returns:
        None: Assertions validate cancellation as a third racing event.

    Raises:
        AssertionError: Raised when cancellation is ignored.
    """

    clock = _FakeClock()
    cancel_event = threading.Event()
    status_query = _StatusQueryStub(clock, [_CONVERGING])

    def _wait_then_cancel(seconds: float) -> bool:
        clock.clock_wait(seconds)
        if len(status_query.call_times) == 1:
            cancel_event.set()
            return True
        return False

    scheduler = DeploymentPollScheduler(
        status_query=status_query,
        evaluation_policy=EnvironmentPolicy(expected_version_label="v42"),
        budget=TimeoutBudget(total_seconds=100.0, tick_seconds=10.0),
        reporter=PollReporter(logger=logging.getLogger("test_deploy_check")),
        cancel_event=cancel_event,
        monotonic_provider=clock.clock_monotonic,
        wait_provider=_wait_then_cancel,
    )

    with pytest.raises(DeploymentCancelledError) as error_info:
        scheduler.scheduler_wait_for_convergence(_TARGET)

    assert status_query.call_times == [10.0]
    assert error_info.value.poll_count == 1


def test_jobs_scheduler_default_wait_observes_preset_cancel_event() -> None:
    """Terminate before any query when the cancel event is already set.

    Returns:
        None: Assertions validate default event-backed waiting.

    Raises:
        AssertionError: Raised when a query is issued after cancellation.
    """

    cancel_event = threading.Event()
    cancel_event.set()
    clock = _FakeClock()
    status_query = _StatusQueryStub(clock, [_SUCCEEDED])
    scheduler = DeploymentPollScheduler(
        status_query=status_query,
        evaluation_policy=EnvironmentPolicy(expected_version_label="v42"),
        budget=TimeoutBudget(total_seconds=100.0, tick_seconds=10.0),
        reporter=PollReporter(logger=logging.getLogger("test_deploy_check")),
        cancel_event=cancel_event,
    )

    with pytest.raises(DeploymentCancelledError):
        scheduler.scheduler_wait_for_convergence(_TARGET)

    assert status_query.call_times == []
