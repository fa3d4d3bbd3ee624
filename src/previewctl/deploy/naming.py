"""Names and URLs derived from a feature branch."""

DEFAULT_DOMAIN = "mrdibre.com"


def derive_target_url(branch: str, domain: str = DEFAULT_DOMAIN) -> str:
    """Return the preview API base URL for a branch.

    The branch is interpolated as-is, without escaping.
    """
    return f"https://api.pr-{branch}.deploy-preview.{domain}"


def deployment_name(branch: str) -> str:
    """Return the display name used for new preview deployments."""
    return f"pr-{branch}"
