"""Deployment data models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

from previewctl.config import ProfileConfig
from previewctl.core.exceptions import ConfigError
from previewctl.deploy.naming import DEFAULT_DOMAIN, derive_target_url, deployment_name


class DeploymentState(str, Enum):
    """Vercel deployment lifecycle states."""

    QUEUED = "QUEUED"
    INITIALIZING = "INITIALIZING"
    BUILDING = "BUILDING"
    READY = "READY"
    ERROR = "ERROR"
    CANCELED = "CANCELED"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: str | None) -> "DeploymentState":
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN

    @property
    def is_active(self) -> bool:
        """Check if a deployment in this state can be redeployed."""
        return self in (DeploymentState.READY, DeploymentState.BUILDING)


class ReconcileStep(str, Enum):
    """Reconciler states, in the order they are visited."""

    START = "start"
    LOOKUP_DEPLOYMENT = "lookup_deployment"
    LOOKUP_ENV_VAR = "lookup_env_var"
    UPSERT_ENV_VAR = "upsert_env_var"
    REDEPLOY = "redeploy"
    CREATE = "create"
    DONE = "done"


class EnvVarAction(str, Enum):
    """Outcome of the environment variable upsert."""

    CREATED = "created"
    UPDATED = "updated"
    FAILED = "failed"
    PLANNED_CREATE = "planned-create"
    PLANNED_UPDATE = "planned-update"


class DeployAction(str, Enum):
    """Outcome of the deploy step."""

    REDEPLOYED = "redeployed"
    CREATED = "created"
    PLANNED_REDEPLOY = "planned-redeploy"
    PLANNED_CREATE = "planned-create"


@dataclass
class Deployment:
    """A deployment as listed by the platform."""

    uid: str
    name: str = ""
    state: DeploymentState = DeploymentState.UNKNOWN
    branch_ref: str | None = None
    url: str | None = None
    created: int | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Deployment":
        """Create from a Vercel deployment payload."""
        meta = data.get("meta") or {}
        return cls(
            uid=data.get("uid") or data.get("id") or "",
            name=data.get("name") or "",
            state=DeploymentState.parse(data.get("state") or data.get("readyState")),
            branch_ref=meta.get("githubCommitRef"),
            url=data.get("url"),
            created=data.get("created") or data.get("createdAt"),
        )

    def matches_branch(self, branch: str) -> bool:
        """Check the branch ref, or a case-insensitive match on the name."""
        return self.branch_ref == branch or branch.lower() in self.name.lower()


@dataclass
class EnvVar:
    """A project environment variable."""

    id: str
    key: str
    value: str | None = None
    type: str = "plain"
    target: list[str] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "EnvVar":
        """Create from a Vercel env payload."""
        target = data.get("target") or []
        if isinstance(target, str):
            target = [target]
        return cls(
            id=data.get("id") or "",
            key=data.get("key") or "",
            value=data.get("value"),
            type=data.get("type") or "plain",
            target=list(target),
        )


@dataclass
class DeploymentResult:
    """Deployment returned by a create or redeploy request."""

    uid: str | None = None
    url: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "DeploymentResult":
        return cls(uid=data.get("uid") or data.get("id"), url=data.get("url"))

    @property
    def full_url(self) -> str | None:
        if not self.url:
            return None
        if self.url.startswith(("http://", "https://")):
            return self.url
        return f"https://{self.url}"


@dataclass
class RunResult:
    """Summary of one reconcile run."""

    branch: str
    target_url: str
    dry_run: bool = False
    existing_deployment_id: str | None = None
    env_var_id: str | None = None
    env_var_action: EnvVarAction | None = None
    deploy_action: DeployAction | None = None
    fell_back: bool = False
    deployment: DeploymentResult | None = None
    errors: list[str] = field(default_factory=list)
    steps: list[ReconcileStep] = field(default_factory=list)

    def enter(self, step: ReconcileStep) -> None:
        self.steps.append(step)

    @property
    def completed(self) -> bool:
        """True when the run reached DONE."""
        return bool(self.steps) and self.steps[-1] == ReconcileStep.DONE

    @property
    def success(self) -> bool:
        """True when the run completed with no recorded errors."""
        return self.completed and not self.errors

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "branch": self.branch,
            "target_url": self.target_url,
            "dry_run": self.dry_run,
            "existing_deployment": self.existing_deployment_id,
            "env_var_id": self.env_var_id,
            "env_var_action": self.env_var_action.value if self.env_var_action else None,
            "deploy_action": self.deploy_action.value if self.deploy_action else None,
            "fell_back": self.fell_back,
            "deployment_id": self.deployment.uid if self.deployment else None,
            "deployment_url": self.deployment.full_url if self.deployment else None,
            "errors": list(self.errors),
        }


# Environment variable names reported when a required input is missing.
REQUIRED_INPUTS = {
    "token": "VERCEL_TOKEN",
    "project_id": "VERCEL_PROJECT_ID",
    "org_id": "VERCEL_ORG_ID",
    "branch": "FE_BRANCH",
}


class ReconcileConfig(BaseModel):
    """Immutable inputs for a single reconcile run."""

    model_config = ConfigDict(frozen=True)

    token: str
    project_id: str
    org_id: str
    branch: str
    domain: str = DEFAULT_DOMAIN
    env_key: str = "VITE_API_URL"
    env_type: str = "plain"
    target: str = "preview"
    deployment_limit: int = 50
    git_provider: str = "github"

    @classmethod
    def from_profile(
        cls,
        profile: ProfileConfig,
        branch: str | None = None,
    ) -> "ReconcileConfig":
        """Resolve and validate run inputs from a profile and the environment.

        Raises:
            ConfigError: If any required input is missing or empty
        """
        values = {
            "token": profile.vercel.get_token(),
            "project_id": profile.vercel.get_project_id(),
            "org_id": profile.vercel.get_org_id(),
            "branch": branch or profile.preview.get_branch(),
        }

        for field_name, env_name in REQUIRED_INPUTS.items():
            if not values[field_name]:
                raise ConfigError(f"Missing required environment variable: {env_name}")

        preview = profile.preview
        return cls(
            **values,
            domain=preview.domain,
            env_key=preview.env_key,
            env_type=preview.env_type,
            target=preview.target,
            deployment_limit=preview.deployment_limit,
            git_provider=preview.git_provider,
        )

    @property
    def target_url(self) -> str:
        return derive_target_url(self.branch, self.domain)

    @property
    def deployment_name(self) -> str:
        return deployment_name(self.branch)

    def redacted(self) -> dict[str, Any]:
        """Dictionary view with the token masked."""
        data = self.model_dump()
        data["token"] = "****"
        data["target_url"] = self.target_url
        return data
