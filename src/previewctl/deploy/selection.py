"""Pure selection helpers used by the reconciler."""

from typing import Iterable

from previewctl.deploy.models import Deployment, EnvVar

DEFAULT_ENV_KEY = "VITE_API_URL"


def select_deployment(deployments: Iterable[Deployment], branch: str) -> Deployment | None:
    """Return the first active deployment matching the branch.

    Input order is preserved; the platform lists newest first.
    """
    for deployment in deployments:
        if deployment.matches_branch(branch) and deployment.state.is_active:
            return deployment
    return None


def select_env_var(envs: Iterable[EnvVar], key: str = DEFAULT_ENV_KEY) -> EnvVar | None:
    """Return the first environment variable with the given key."""
    return next((env for env in envs if env.key == key), None)
