"""Convergence evaluation rules for polled Beanstalk snapshots.

Every function in this module is pure: it classifies already-fetched snapshots
and never performs I/O. The scheduler owns all timing and query concerns.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final, Sequence, Union

from .models import ApplicationVersionSnapshot, DeployTarget, EnvironmentSnapshot

ENVIRONMENT_STATUS_READY: Final[str] = "Ready"
ENVIRONMENT_HEALTH_GREEN: Final[str] = "Green"
VERSION_STATUS_PROCESSED: Final[str] = "processed"
VERSION_STATUS_FAILED: Final[str] = "failed"


class ConvergenceState(str, Enum):
    """Classification outcome for one snapshot or one tick."""

    CONVERGING = "converging"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class LabelMatchMode(str, Enum):
    """Version label comparison mode.

    `EXACT` requires equality. `PREFIX` accepts an observed label that is a
    prefix of the expected label and must be opted into explicitly, because
    `v4` is also a prefix of `v42`.
    """

    EXACT = "exact"
    PREFIX = "prefix"


@dataclass(frozen=True)
class ConvergenceClassification:
    """Classification of one snapshot.

    Attributes:
        state: Converging, succeeded, or failed.
        reason: Human-readable reason used in log lines.
        reason_code: Stable reason token used for log-level routing.
    """

    state: ConvergenceState
    reason: str
    reason_code: str


@dataclass(frozen=True)
class SnapshotEvaluation:
    """One snapshot paired with its classification."""

    snapshot: EnvironmentSnapshot | ApplicationVersionSnapshot
    classification: ConvergenceClassification


@dataclass(frozen=True)
class TickVerdict:
    """Overall outcome of one tick.

    Attributes:
        state: Tick-level classification.
        reason: Human-readable tick reason.
        reason_code: Stable tick reason token.
        evaluations: Snapshots evaluated during the tick, in query order.
    """

    state: ConvergenceState
    reason: str
    reason_code: str
    evaluations: tuple[SnapshotEvaluation, ...]


def domain_version_label_matches(
    observed_label: str,
    expected_label: str,
    label_match: LabelMatchMode = LabelMatchMode.EXACT,
) -> bool:
    """Return whether an observed version label satisfies the expected label.

    Args:
        observed_label: Label reported by the platform.
        expected_label: Label the check waits for.
        label_match: Comparison mode.

    Returns:
        bool: True when labels match under the selected mode.

    Raises:
        ValueError: Raised when label_match is unsupported.
    """

    if label_match is LabelMatchMode.EXACT:
        return observed_label == expected_label
    if label_match is LabelMatchMode.PREFIX:
        # An empty observed label would prefix every expected label.
        return bool(observed_label) and expected_label.startswith(observed_label)
    raise ValueError(f"unsupported label_match={label_match}")


def domain_evaluate_environment_snapshot(
    snapshot: EnvironmentSnapshot,
    expected_version_label: str,
    label_match: LabelMatchMode = LabelMatchMode.EXACT,
    healthy_statuses: frozenset[str] = frozenset({ENVIRONMENT_HEALTH_GREEN}),
) -> ConvergenceClassification:
    """Classify one environment snapshot; first matching rule wins.

    Args:
        snapshot: Environment snapshot.
        expected_version_label: Expected deployed version label.
        label_match: Version label comparison mode.
        healthy_statuses: Health values considered healthy.

    Returns:
        ConvergenceClassification: Converging or succeeded; never failed.

    Raises:
        ValueError: Raised when label_match is unsupported.
    """

    if not domain_version_label_matches(snapshot.version_label, expected_version_label, label_match):
        return ConvergenceClassification(
            state=ConvergenceState.CONVERGING,
            reason="environment is updating",
            reason_code="environment_updating",
        )
    if snapshot.lifecycle_status != ENVIRONMENT_STATUS_READY:
        return ConvergenceClassification(
            state=ConvergenceState.CONVERGING,
            reason="environment is not ready",
            reason_code="environment_not_ready",
        )
    if snapshot.health_status not in healthy_statuses:
        return ConvergenceClassification(
            state=ConvergenceState.CONVERGING,
            reason="environment health is not ok",
            reason_code="environment_unhealthy",
        )
    return ConvergenceClassification(
        state=ConvergenceState.SUCCEEDED,
        reason="environment deployment was successful",
        reason_code="environment_deployed",
    )


def domain_evaluate_version_snapshot(snapshot: ApplicationVersionSnapshot) -> ConvergenceClassification:
    """Classify one application-version snapshot by processing status.

    Args:
        snapshot: Application-version snapshot.

    Returns:
        ConvergenceClassification: Classification mapped from processing status.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    normalized_status = snapshot.processing_status.strip().lower()
    if normalized_status == VERSION_STATUS_PROCESSED:
        return ConvergenceClassification(
            state=ConvergenceState.SUCCEEDED,
            reason="application version was processed",
            reason_code="version_processed",
        )
    if normalized_status == VERSION_STATUS_FAILED:
        return ConvergenceClassification(
            state=ConvergenceState.FAILED,
            reason="application version processing failed",
            reason_code="version_failed",
        )
    return ConvergenceClassification(
        state=ConvergenceState.CONVERGING,
        reason="application version is still processing",
        reason_code="version_processing",
    )


@dataclass(frozen=True)
class EnvironmentPolicy:
    """Evaluation policy for environment-status polling.

    Attributes:
        expected_version_label: Expected deployed version label.
        label_match: Version label comparison mode.
        healthy_statuses: Health values considered healthy.
    """

    expected_version_label: str
    label_match: LabelMatchMode = LabelMatchMode.EXACT
    healthy_statuses: frozenset[str] = frozenset({ENVIRONMENT_HEALTH_GREEN})

    @property
    def policy_name(self) -> str:
        return "environment"

    def policy_describe_target(self, target: DeployTarget) -> str:
        return f"application {target.application} environment [{target.environment_selector}]"

    def policy_classify_tick(self, snapshots: Sequence[EnvironmentSnapshot]) -> TickVerdict:
        """Classify one tick; the first succeeded environment ends evaluation.

        Args:
            snapshots: Environment snapshots in query order.

        Returns:
            TickVerdict: Succeeded when any member succeeded, else converging.

        Raises:
            ValueError: Raised when label_match is unsupported.
        """

        evaluations: list[SnapshotEvaluation] = []
        for snapshot in snapshots:
            classification = domain_evaluate_environment_snapshot(
                snapshot=snapshot,
                expected_version_label=self.expected_version_label,
                label_match=self.label_match,
                healthy_statuses=self.healthy_statuses,
            )
            evaluations.append(SnapshotEvaluation(snapshot=snapshot, classification=classification))
            if classification.state is ConvergenceState.SUCCEEDED:
                return TickVerdict(
                    state=ConvergenceState.SUCCEEDED,
                    reason=classification.reason,
                    reason_code=classification.reason_code,
                    evaluations=tuple(evaluations),
                )

        return TickVerdict(
            state=ConvergenceState.CONVERGING,
            reason="no environment has converged yet",
            reason_code="environment_converging",
            evaluations=tuple(evaluations),
        )


@dataclass(frozen=True)
class VersionPolicy:
    """Evaluation policy for application-version polling.

    Attributes:
        expected_version_label: Version label whose processing status decides the tick.
    """

    expected_version_label: str

    @property
    def policy_name(self) -> str:
        return "version"

    def policy_describe_target(self, target: DeployTarget) -> str:
        return f"application {target.application} version [{target.expected_version_label}]"

    def policy_classify_tick(self, snapshots: Sequence[ApplicationVersionSnapshot]) -> TickVerdict:
        """Classify one tick from the authoritative version snapshot.

        Args:
            snapshots: Application-version snapshots in query order.

        Returns:
            TickVerdict: Classification of the first snapshot matching the expected label.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        for snapshot in snapshots:
            if snapshot.version_label != self.expected_version_label:
                continue
            classification = domain_evaluate_version_snapshot(snapshot)
            return TickVerdict(
                state=classification.state,
                reason=classification.reason,
                reason_code=classification.reason_code,
                evaluations=(SnapshotEvaluation(snapshot=snapshot, classification=classification),),
            )

        return TickVerdict(
            state=ConvergenceState.CONVERGING,
            reason="expected application version is not reported yet",
            reason_code="version_not_reported",
            evaluations=(),
        )


EvaluationPolicy = Union[EnvironmentPolicy, VersionPolicy]
