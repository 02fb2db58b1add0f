"""Domain models and pure convergence rules used across layer boundaries."""

from .convergence import (
	ConvergenceClassification,
	ConvergenceState,
	EnvironmentPolicy,
	EvaluationPolicy,
	LabelMatchMode,
	SnapshotEvaluation,
	TickVerdict,
	VersionPolicy,
	domain_evaluate_environment_snapshot,
	domain_evaluate_version_snapshot,
	domain_version_label_matches,
)
from .models import (
	ApplicationVersionSnapshot,
	DeployTarget,
	EnvironmentSnapshot,
	PollSnapshot,
	TimeoutBudget,
)
from .timeline import domain_build_stage_event, domain_describe_snapshot

__all__ = [
	"ApplicationVersionSnapshot",
	"ConvergenceClassification",
	"ConvergenceState",
	"DeployTarget",
	"EnvironmentPolicy",
	"EnvironmentSnapshot",
	"EvaluationPolicy",
	"LabelMatchMode",
	"PollSnapshot",
	"SnapshotEvaluation",
	"TickVerdict",
	"TimeoutBudget",
	"VersionPolicy",
	"domain_build_stage_event",
	"domain_describe_snapshot",
	"domain_evaluate_environment_snapshot",
	"domain_evaluate_version_snapshot",
	"domain_version_label_matches",
]
