"""Terminal failure types raised by the deployment poll scheduler."""

from __future__ import annotations

from typing import Sequence

from deploy_check.domain import PollSnapshot


class DeployCheckError(Exception):
    """Base exception for terminal deploy check outcomes other than success.

    Attributes:
        error_code: Stable error code used in results and diagnostics.
        poll_count: Number of queries issued before termination.
        last_snapshots: Snapshots from the last completed poll.
    """

    error_code = "DEPLOY_CHECK_ERROR"

    def __init__(
        self,
        message: str,
        poll_count: int = 0,
        last_snapshots: Sequence[PollSnapshot] = (),
    ):
        super().__init__(message)
        self.poll_count = poll_count
        self.last_snapshots = tuple(last_snapshots)


class DeployCheckQueryError(DeployCheckError):
    """Status query failed; the adapter error is chained as `__cause__`."""

    error_code = "DEPLOY_CHECK_QUERY_ERROR"


class TargetNotFoundError(DeployCheckError, LookupError):
    """Query succeeded but matched no application environment or version."""

    error_code = "DEPLOY_CHECK_TARGET_NOT_FOUND"


class DeploymentFailedError(DeployCheckError, RuntimeError):
    """Platform reported an explicit failure for the expected version."""

    error_code = "DEPLOY_CHECK_DEPLOYMENT_FAILED"


class DeploymentTimedOutError(DeployCheckError, TimeoutError):
    """Budget elapsed while the deployment was still converging."""

    error_code = "DEPLOY_CHECK_TIMED_OUT"


class DeploymentCancelledError(DeployCheckError):
    """Cancel signal arrived before the deployment outcome was known."""

    error_code = "DEPLOY_CHECK_CANCELLED"
