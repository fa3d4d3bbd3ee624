"""Preview deployment reconciler.

Brings the platform into agreement with a branch:

    START -> LOOKUP_DEPLOYMENT -> LOOKUP_ENV_VAR -> UPSERT_ENV_VAR
          -> {REDEPLOY | CREATE} -> DONE

Each step has its own failure policy. Lookup failures abort the run, an
upsert failure is recorded and the run continues, a failed redeploy falls
back to creating a new deployment, and a failed create aborts the run.
"""

from typing import Any, Protocol

from previewctl.core.exceptions import ReconcileError, VercelError
from previewctl.core.logging import StructuredLogger
from previewctl.deploy.models import (
    DeployAction,
    Deployment,
    DeploymentResult,
    EnvVar,
    EnvVarAction,
    ReconcileConfig,
    ReconcileStep,
    RunResult,
)
from previewctl.deploy.selection import select_deployment, select_env_var

logger = StructuredLogger(__name__)


class PlatformClient(Protocol):
    """Subset of the platform API the reconciler consumes."""

    def list_deployments(self, project_id: str, limit: int = 50) -> list[dict[str, Any]]: ...

    def list_env_vars(self, project_id: str) -> list[dict[str, Any]]: ...

    def create_env_var(self, project_id: str, payload: dict[str, Any]) -> dict[str, Any]: ...

    def update_env_var(
        self, project_id: str, env_id: str, payload: dict[str, Any]
    ) -> dict[str, Any]: ...

    def create_deployment(self, payload: dict[str, Any]) -> dict[str, Any]: ...


class Reconciler:
    """Run the preview deployment procedure for one branch."""

    def __init__(
        self,
        client: PlatformClient,
        config: ReconcileConfig,
        dry_run: bool = False,
    ):
        """Initialize reconciler.

        Args:
            client: Platform API client
            config: Validated run configuration
            dry_run: If True, perform lookups only and report planned changes
        """
        self._client = client
        self._config = config
        self._dry_run = dry_run
        self._log = logger.bind(branch=config.branch)

    def reconcile(self) -> RunResult:
        """Execute the procedure.

        Returns:
            RunResult describing what happened

        Raises:
            ReconcileError: If a lookup or the create-deployment request fails
        """
        config = self._config
        result = RunResult(branch=config.branch, target_url=config.target_url, dry_run=self._dry_run)
        result.enter(ReconcileStep.START)

        self._log.info("Starting preview deployment management")
        self._log.info(f"Target API URL: {config.target_url}")

        existing = self.find_existing_deployment(result)
        env_var = self.find_env_var(result)
        self.upsert_env_var(env_var, result)

        if existing is not None:
            self._log.info(f"Found existing deployment: {existing.uid}")
            self.redeploy(existing, result)
        else:
            self._log.info("No existing deployment found for branch")
            self.create(result)

        result.enter(ReconcileStep.DONE)
        self._log.info("Preview deployment process completed")
        return result

    def find_existing_deployment(self, result: RunResult) -> Deployment | None:
        """LOOKUP_DEPLOYMENT: first READY/BUILDING deployment for the branch."""
        result.enter(ReconcileStep.LOOKUP_DEPLOYMENT)
        self._log.info("Checking for existing deployments...")

        try:
            payload = self._client.list_deployments(
                self._config.project_id,
                limit=self._config.deployment_limit,
            )
        except VercelError as e:
            raise ReconcileError(
                f"Failed to fetch deployments: {e}",
                step=ReconcileStep.LOOKUP_DEPLOYMENT.value,
            ) from e

        deployments = [Deployment.from_api(item) for item in payload]
        match = select_deployment(deployments, self._config.branch)
        if match is not None:
            result.existing_deployment_id = match.uid
        return match

    def find_env_var(self, result: RunResult) -> EnvVar | None:
        """LOOKUP_ENV_VAR: the project variable holding the API URL."""
        result.enter(ReconcileStep.LOOKUP_ENV_VAR)
        key = self._config.env_key
        self._log.info(f"Fetching {key} environment variable ID...")

        try:
            payload = self._client.list_env_vars(self._config.project_id)
        except VercelError as e:
            raise ReconcileError(
                f"Failed to fetch environment variables: {e}",
                step=ReconcileStep.LOOKUP_ENV_VAR.value,
            ) from e

        env_var = select_env_var((EnvVar.from_api(item) for item in payload), key)
        if env_var is not None:
            result.env_var_id = env_var.id
        return env_var

    def upsert_env_var(self, env_var: EnvVar | None, result: RunResult) -> None:
        """UPSERT_ENV_VAR: create or edit the variable. Failures are not fatal."""
        result.enter(ReconcileStep.UPSERT_ENV_VAR)
        config = self._config
        body = {
            "key": config.env_key,
            "value": config.target_url,
            "type": config.env_type,
            "target": [config.target],
        }

        if self._dry_run:
            if env_var is None:
                result.env_var_action = EnvVarAction.PLANNED_CREATE
                self._log.info(f"[dry-run] Would create {config.env_key}", value=config.target_url)
            else:
                result.env_var_action = EnvVarAction.PLANNED_UPDATE
                self._log.info(
                    f"[dry-run] Would update {config.env_key}",
                    id=env_var.id,
                    value=config.target_url,
                )
            return

        try:
            if env_var is None:
                self._log.warning(f"{config.env_key} environment variable not found, creating new one...")
                created = self._client.create_env_var(config.project_id, body)
                result.env_var_id = _created_env_id(created) or result.env_var_id
                result.env_var_action = EnvVarAction.CREATED
                self._log.info(f"Created new {config.env_key} environment variable")
            else:
                self._log.info(f"Updating {config.env_key} environment variable (ID: {env_var.id})...")
                self._client.update_env_var(config.project_id, env_var.id, body)
                result.env_var_action = EnvVarAction.UPDATED
                self._log.info(f"Updated {config.env_key} to: {config.target_url}")
        except VercelError as e:
            message = f"Failed to update environment variable: {e}"
            self._log.error(message)
            result.env_var_action = EnvVarAction.FAILED
            result.errors.append(message)

    def redeploy(self, existing: Deployment, result: RunResult) -> None:
        """REDEPLOY: re-trigger an existing deployment, else fall back to CREATE."""
        result.enter(ReconcileStep.REDEPLOY)

        if self._dry_run:
            result.deploy_action = DeployAction.PLANNED_REDEPLOY
            self._log.info("[dry-run] Would redeploy existing deployment", id=existing.uid)
            return

        self._log.info(f"Redeploying existing deployment (ID: {existing.uid})...")
        try:
            response = self._client.create_deployment(
                {"deploymentId": existing.uid, "target": self._config.target}
            )
        except VercelError as e:
            self._log.warning(
                f"Failed to redeploy existing deployment ({e}), creating new one instead..."
            )
            result.fell_back = True
            self.create(result)
            return

        result.deploy_action = DeployAction.REDEPLOYED
        result.deployment = self._report(response, "Redeployment")

    def create(self, result: RunResult) -> None:
        """CREATE: build a fresh preview deployment from the branch head."""
        result.enter(ReconcileStep.CREATE)
        config = self._config

        if self._dry_run:
            result.deploy_action = DeployAction.PLANNED_CREATE
            self._log.info("[dry-run] Would create new deployment", name=config.deployment_name)
            return

        self._log.info("Creating new deployment...")
        try:
            response = self._client.create_deployment(
                {
                    "name": config.deployment_name,
                    "project": config.project_id,
                    "target": config.target,
                    "gitSource": {"type": config.git_provider, "ref": config.branch},
                }
            )
        except VercelError as e:
            raise ReconcileError(
                f"Failed to create new deployment: {e}",
                step=ReconcileStep.CREATE.value,
            ) from e

        result.deploy_action = DeployAction.CREATED
        result.deployment = self._report(response, "New deployment")

    def _report(self, response: dict[str, Any], label: str) -> DeploymentResult:
        deployment = DeploymentResult.from_api(response or {})
        if deployment.url:
            self._log.info(f"{label} triggered successfully!")
            self._log.info(f"Deployment URL: {deployment.full_url}")
            self._log.info(f"Deployment ID: {deployment.uid}")
        else:
            # No URL in the response still counts as triggered
            self._log.info(f"{label} triggered successfully")
        return deployment


def _created_env_id(response: dict[str, Any]) -> str | None:
    """Extract the new variable's ID from a create-env response."""
    if not response:
        return None
    created = response.get("created", response)
    if isinstance(created, list):
        created = created[0] if created else {}
    if isinstance(created, dict):
        return created.get("id")
    return None
