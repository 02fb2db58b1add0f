"""Typed interfaces for adapter-layer responsibilities."""

from typing import Protocol

from deploy_check.domain import DeployTarget, PollSnapshot


class StatusQueryPort(Protocol):
    """Port definition for fetching current deployment status snapshots."""

    def adapter_source_name(self) -> str:
        """Return adapter source identifier for diagnostics and telemetry.

        Returns:
            str: Human-readable upstream source identifier.

        Raises:
            RuntimeError: Raised when source metadata is unavailable.
        """

    def adapter_fetch_snapshots(self, target: DeployTarget) -> tuple[PollSnapshot, ...]:
        """Fetch current snapshots for the deploy target.

        An empty tuple is a valid business result meaning no target matched;
        implementations must return it rather than raise.

        Args:
            target: Deploy target being verified.

        Returns:
            tuple[PollSnapshot, ...]: Snapshots in upstream order.

        Raises:
            BeanstalkQueryError: Raised on transport, authorization, or response contract failure.
        """
