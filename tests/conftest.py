"""Pytest fixtures for previewctl tests."""

import logging
from typing import Any, Generator

import pytest
from click.testing import CliRunner

from previewctl.core.exceptions import VercelError
from previewctl.deploy import ReconcileConfig


class FakeVercelClient:
    """In-memory stand-in for the Vercel API.

    Records every call; any operation named in ``fail`` raises VercelError.
    """

    def __init__(
        self,
        deployments: list[dict[str, Any]] | None = None,
        envs: list[dict[str, Any]] | None = None,
        fail: set[str] | None = None,
        deploy_response: dict[str, Any] | None = None,
    ):
        self.deployments = list(deployments or [])
        self.envs = list(envs or [])
        self.fail = set(fail or ())
        self.deploy_response = deploy_response
        self.calls: list[tuple[str, Any]] = []
        self._next_id = 1

    def _check(self, operation: str) -> None:
        if operation in self.fail:
            raise VercelError(f"{operation} failed", status_code=500)

    def list_deployments(self, project_id: str, limit: int = 50) -> list[dict[str, Any]]:
        self.calls.append(("list_deployments", {"project_id": project_id, "limit": limit}))
        self._check("list_deployments")
        return self.deployments[:limit]

    def list_env_vars(self, project_id: str) -> list[dict[str, Any]]:
        self.calls.append(("list_env_vars", {"project_id": project_id}))
        self._check("list_env_vars")
        return list(self.envs)

    def create_env_var(self, project_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(("create_env_var", payload))
        self._check("create_env_var")
        env = {"id": f"env_{self._next_id}", **payload}
        self._next_id += 1
        self.envs.append(env)
        return {"created": env}

    def update_env_var(self, project_id: str, env_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(("update_env_var", {"id": env_id, **payload}))
        self._check("update_env_var")
        for env in self.envs:
            if env["id"] == env_id:
                env.update(payload)
                return env
        raise VercelError("env not found", status_code=404)

    def create_deployment(self, payload: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(("create_deployment", payload))
        operation = "redeploy" if "deploymentId" in payload else "create_deployment"
        self._check(operation)
        if self.deploy_response is not None:
            return self.deploy_response
        return {"uid": "dpl_new", "url": "pr-feature-x-abc.vercel.app"}

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click CLI runner."""
    return CliRunner()


@pytest.fixture
def run_config() -> ReconcileConfig:
    """Validated run configuration for branch feature-x."""
    return ReconcileConfig(
        token="test-token",
        project_id="prj_123",
        org_id="team_456",
        branch="feature-x",
    )


@pytest.fixture
def deploy_env(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set all required environment variables."""
    values = {
        "VERCEL_TOKEN": "test-token",
        "VERCEL_PROJECT_ID": "prj_123",
        "VERCEL_ORG_ID": "team_456",
        "FE_BRANCH": "feature-x",
    }
    for key, value in values.items():
        monkeypatch.setenv(key, value)
    return values


@pytest.fixture(autouse=True)
def clean_env(tmp_path, monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Isolate tests from the caller's environment and config files."""
    env_vars = [
        "VERCEL_TOKEN",
        "VERCEL_PROJECT_ID",
        "VERCEL_ORG_ID",
        "FE_BRANCH",
        "PREVIEWCTL_VERCEL_TOKEN",
        "PREVIEWCTL_VERCEL_PROJECT_ID",
        "PREVIEWCTL_VERCEL_ORG_ID",
        "PREVIEWCTL_BRANCH",
        "PREVIEWCTL_PROFILE",
        "PREVIEWCTL_CONFIG",
    ]
    for k in env_vars:
        monkeypatch.delenv(k, raising=False)

    # Keep ~/.previewctl and ./previewctl.yaml lookups inside tmp_path
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    yield

    # Drop handlers bound to this test's captured streams
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)


@pytest.fixture
def temp_config_file(tmp_path):
    """Create a temporary config file."""
    config_content = """
version: "1"
global:
  output_format: json
profiles:
  default:
    vercel:
      token: file-token
      project_id: prj_file
      org_id: team_file
    preview:
      branch: from-file
  staging:
    preview:
      domain: example.dev
"""
    config_file = tmp_path / "config.yaml"
    config_file.write_text(config_content)
    return str(config_file)
