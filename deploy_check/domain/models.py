"""Typed domain models shared across runtime layers.

This module provides immutable data contracts describing what a deploy check
targets, what one poll observes, and how long the check may run.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class DeployTarget:
    """Deployment target verified by one check run.

    Attributes:
        application: Beanstalk application name.
        environment_selector: Optional environment name; empty means all environments.
        expected_version_label: Version label that must be deployed.
        region: AWS region hosting the application.
    """

    application: str
    expected_version_label: str
    region: str
    environment_selector: str = ""

    def __post_init__(self) -> None:
        if not self.application.strip():
            raise ValueError("application must not be blank")


@dataclass(frozen=True)
class EnvironmentSnapshot:
    """Observed state of one Beanstalk environment at poll time.

    Attributes:
        environment_name: Environment name.
        version_label: Currently deployed version label.
        lifecycle_status: Platform lifecycle status (`Ready`, `Updating`, ...).
        health_status: Platform health color (`Green`, `Yellow`, ...).
    """

    environment_name: str
    version_label: str
    lifecycle_status: str
    health_status: str


@dataclass(frozen=True)
class ApplicationVersionSnapshot:
    """Observed state of one application version at poll time.

    Attributes:
        application_name: Owning application name.
        version_label: Application version label.
        processing_status: Platform processing status (`Processed`, `Failed`, ...).
    """

    application_name: str
    version_label: str
    processing_status: str


PollSnapshot = Union[EnvironmentSnapshot, ApplicationVersionSnapshot]


@dataclass(frozen=True)
class TimeoutBudget:
    """Total duration and tick interval bounding one check run.

    Attributes:
        total_seconds: Deadline measured from check start.
        tick_seconds: Interval between poll attempts.
    """

    total_seconds: float
    tick_seconds: float

    def __post_init__(self) -> None:
        if self.total_seconds <= 0:
            raise ValueError("total_seconds must be > 0")
        if self.tick_seconds <= 0:
            raise ValueError("tick_seconds must be > 0")
