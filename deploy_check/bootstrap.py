"""Deploy check bootstrap wiring for dependency assembly."""

import threading
from typing import TextIO

from deploy_check.adapters import (
    BeanstalkApplicationVersionAdapter,
    BeanstalkEnvironmentStatusAdapter,
    StatusQueryPort,
    adapter_create_beanstalk_client,
)
from deploy_check.config import CheckMode, CheckSettings
from deploy_check.domain import EnvironmentPolicy, EvaluationPolicy, VersionPolicy
from deploy_check.jobs import (
    DeployCheckOrchestrator,
    DeployCheckOrchestratorConfig,
    DeploymentPollScheduler,
)
from deploy_check.reporting import PollReporter, reporting_create_logger


def bootstrap_create_query_and_policy(
    settings: CheckSettings,
    client,
) -> tuple[StatusQueryPort, EvaluationPolicy]:
    """Pair the status query variant with its matching evaluation policy.

    Args:
        settings: Validated deploy check settings.
        client: Elastic Beanstalk client.

    Returns:
        tuple[StatusQueryPort, EvaluationPolicy]: Query adapter and policy.

    Raises:
        ValueError: Raised when check mode is unsupported.
    """

    if settings.check_mode is CheckMode.ENVIRONMENT:
        return (
            BeanstalkEnvironmentStatusAdapter(client=client),
            EnvironmentPolicy(
                expected_version_label=settings.version_label,
                label_match=settings.label_match,
            ),
        )
    if settings.check_mode is CheckMode.VERSION:
        return (
            BeanstalkApplicationVersionAdapter(client=client),
            VersionPolicy(expected_version_label=settings.version_label),
        )
    raise ValueError(f"unsupported check_mode={settings.check_mode}")


def bootstrap_create_deploy_check(
    settings: CheckSettings,
    cancel_event: threading.Event | None = None,
    stream: TextIO | None = None,
    client=None,
) -> DeployCheckOrchestrator:
    """Build a fully wired deploy check orchestrator.

    Args:
        settings: Validated deploy check settings.
        cancel_event: Optional cancel signal raced against the timers.
        stream: Optional log output stream.
        client: Optional pre-built Elastic Beanstalk client.

    Returns:
        DeployCheckOrchestrator: Orchestrator ready for `job_execute`.

    Raises:
        ValueError: Raised when settings cannot build a valid target, budget, or client region.
    """

    if client is None:
        client = adapter_create_beanstalk_client(
            region=settings.region,
            access_key=settings.access_key if settings.settings_use_static_credentials() else None,
            secret_key=settings.secret_key if settings.settings_use_static_credentials() else None,
            request_timeout_seconds=settings.request_timeout_seconds,
        )
    reporter = PollReporter(logger=reporting_create_logger(debug=settings.debug, stream=stream))
    status_query, evaluation_policy = bootstrap_create_query_and_policy(settings=settings, client=client)
    scheduler = DeploymentPollScheduler(
        status_query=status_query,
        evaluation_policy=evaluation_policy,
        budget=settings.settings_build_budget(),
        reporter=reporter,
        poll_immediately=settings.poll_immediately,
        cancel_event=cancel_event,
    )
    return DeployCheckOrchestrator(
        scheduler=scheduler,
        reporter=reporter,
        config=DeployCheckOrchestratorConfig(target=settings.settings_build_target()),
    )
