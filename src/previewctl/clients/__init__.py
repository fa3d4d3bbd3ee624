"""API clients for external services."""

from previewctl.clients.vercel import VercelClient

__all__ = ["VercelClient"]
