"""Preview deployment reconciliation."""

from previewctl.deploy.models import (
    Deployment,
    DeploymentResult,
    DeploymentState,
    DeployAction,
    EnvVar,
    EnvVarAction,
    ReconcileConfig,
    ReconcileStep,
    RunResult,
)
from previewctl.deploy.naming import derive_target_url, deployment_name
from previewctl.deploy.reconciler import Reconciler
from previewctl.deploy.selection import select_deployment, select_env_var

__all__ = [
    "Deployment",
    "DeploymentResult",
    "DeploymentState",
    "DeployAction",
    "EnvVar",
    "EnvVarAction",
    "ReconcileConfig",
    "ReconcileStep",
    "Reconciler",
    "RunResult",
    "derive_target_url",
    "deployment_name",
    "select_deployment",
    "select_env_var",
]
