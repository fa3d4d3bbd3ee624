"""Core utilities and shared components for previewctl."""

# Note: Import context lazily to avoid circular imports
# Use: from previewctl.core.context import PreviewCtlContext, pass_context
from previewctl.core.exceptions import (
    PreviewCtlError,
    ConfigError,
    VercelError,
    AuthenticationError,
    ReconcileError,
)
from previewctl.core.output import OutputFormatter, console

__all__ = [
    "PreviewCtlError",
    "ConfigError",
    "VercelError",
    "AuthenticationError",
    "ReconcileError",
    "OutputFormatter",
    "console",
]
