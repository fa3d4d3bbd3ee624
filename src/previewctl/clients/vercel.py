"""Vercel REST API client using httpx."""

from typing import Any

import httpx

from previewctl.config import VercelConfig
from previewctl.core.exceptions import VercelError, AuthenticationError
from previewctl.core.logging import StructuredLogger

logger = StructuredLogger(__name__)


class VercelClient:
    """Client for the Vercel REST API.

    Only the endpoints needed to manage preview deployments are wrapped.
    Methods return the decoded JSON payloads; callers convert them into
    model objects.
    """

    def __init__(
        self,
        config: VercelConfig,
        token: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self._config = config
        self._token = token
        self._transport = transport
        self._client: httpx.Client | None = None

    @property
    def client(self) -> httpx.Client:
        """Get or create HTTP client."""
        if self._client is None:
            token = self._token or self._config.get_token()

            if not token:
                raise AuthenticationError("Vercel token not configured")

            headers = {
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
            }

            self._client = httpx.Client(
                base_url=self._config.base_url.rstrip("/"),
                headers=headers,
                timeout=self._config.timeout,
                transport=self._transport,
            )

            logger.debug("Created Vercel client", base_url=self._config.base_url)

        return self._client

    def _request(
        self,
        method: str,
        path: str,
        **kwargs: Any,
    ) -> Any:
        """Make an API request.

        Args:
            method: HTTP method
            path: API path
            **kwargs: Additional request arguments

        Returns:
            Response JSON data
        """
        try:
            response = self.client.request(method, path, **kwargs)
            response.raise_for_status()

            if not response.content:
                return None

            try:
                return response.json()
            except ValueError as e:
                raise VercelError(
                    f"Invalid JSON response: {e}",
                    status_code=response.status_code,
                )

        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            try:
                error_data = e.response.json()
                error = error_data.get("error") or {}
                message = error.get("message") or error_data.get("message") or str(e)
            except (ValueError, AttributeError):
                message = e.response.text or str(e)

            raise VercelError(message, status_code=status_code)

        except httpx.RequestError as e:
            raise VercelError(f"Request failed: {e}")

    def get(self, path: str, **kwargs: Any) -> Any:
        """Make a GET request."""
        return self._request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> Any:
        """Make a POST request."""
        return self._request("POST", path, **kwargs)

    def patch(self, path: str, **kwargs: Any) -> Any:
        """Make a PATCH request."""
        return self._request("PATCH", path, **kwargs)

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            self._client.close()
            self._client = None

    def __enter__(self) -> "VercelClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    # Deployment operations
    def list_deployments(self, project_id: str, limit: int = 50) -> list[dict[str, Any]]:
        """List recent deployments for a project.

        Vercel returns deployments newest first; callers rely on that order.
        """
        response = self.get(
            "/v6/deployments",
            params={"projectId": project_id, "limit": limit},
        )
        return (response or {}).get("deployments") or []

    def create_deployment(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Create a deployment, or redeploy one when payload has ``deploymentId``."""
        return self.post("/v13/deployments", json=payload) or {}

    # Environment variable operations
    def list_env_vars(self, project_id: str) -> list[dict[str, Any]]:
        """List environment variables for a project."""
        response = self.get(f"/v9/projects/{project_id}/env")
        return (response or {}).get("envs") or []

    def create_env_var(self, project_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Create a project environment variable."""
        return self.post(f"/v10/projects/{project_id}/env", json=payload) or {}

    def update_env_var(
        self,
        project_id: str,
        env_id: str,
        payload: dict[str, Any],
    ) -> dict[str, Any]:
        """Edit an existing project environment variable."""
        return self.patch(f"/v9/projects/{project_id}/env/{env_id}", json=payload) or {}
