"""Shared timeline event helper utilities."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from .models import EnvironmentSnapshot, PollSnapshot


def domain_build_stage_event(
    stage: str,
    status: str,
    details: dict[str, Any] | None = None,
) -> dict[str, object]:
    """Build one structured timeline event payload.

    Args:
        stage: Stage name (`check`, `poll`, ...).
        status: Stage status marker.
        details: Optional structured details object.

    Returns:
        dict[str, object]: Structured timeline event.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    event_payload: dict[str, object] = {
        "stage": stage,
        "status": status,
        "at_utc": datetime.now(timezone.utc).isoformat(),
    }
    if details is not None:
        event_payload["details"] = details
    return event_payload


def domain_describe_snapshot(snapshot: PollSnapshot) -> dict[str, str]:
    """Flatten one poll snapshot into timeline-friendly string fields.

    Args:
        snapshot: Environment or application-version snapshot.

    Returns:
        dict[str, str]: Field mapping keyed by short diagnostic names.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    if isinstance(snapshot, EnvironmentSnapshot):
        return {
            "env": snapshot.environment_name,
            "version": snapshot.version_label,
            "status": snapshot.lifecycle_status,
            "health": snapshot.health_status,
        }
    return {
        "app": snapshot.application_name,
        "version": snapshot.version_label,
        "status": snapshot.processing_status,
    }
