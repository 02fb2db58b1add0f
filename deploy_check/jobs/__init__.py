"""Job layer package for deploy check orchestration boundaries."""

from .check_errors import (
	DeployCheckError,
	DeployCheckQueryError,
	DeploymentCancelledError,
	DeploymentFailedError,
	DeploymentTimedOutError,
	TargetNotFoundError,
)
from .deploy_check_orchestrator import (
	EXIT_CODE_CONFIGURATION_ERROR,
	EXIT_CODE_FAILURE,
	EXIT_CODE_SUCCESS,
	DeployCheckOrchestrator,
	DeployCheckOrchestratorConfig,
)
from .interfaces import DeployCheckPort, DeployCheckResult, PollOutcome
from .poll_scheduler import DeploymentPollScheduler

__all__ = [
	"DeployCheckError",
	"DeployCheckOrchestrator",
	"DeployCheckOrchestratorConfig",
	"DeployCheckPort",
	"DeployCheckQueryError",
	"DeployCheckResult",
	"DeploymentCancelledError",
	"DeploymentFailedError",
	"DeploymentPollScheduler",
	"DeploymentTimedOutError",
	"EXIT_CODE_CONFIGURATION_ERROR",
	"EXIT_CODE_FAILURE",
	"EXIT_CODE_SUCCESS",
	"PollOutcome",
	"TargetNotFoundError",
]
