"""Custom exceptions for previewctl."""

from typing import Any


class PreviewCtlError(Exception):
    """Base exception for all previewctl errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class ConfigError(PreviewCtlError):
    """Configuration-related errors."""

    pass


class AuthenticationError(PreviewCtlError):
    """Authentication/authorization errors."""

    pass


class VercelError(PreviewCtlError):
    """Vercel API errors."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)
        self.status_code = status_code


class ReconcileError(PreviewCtlError):
    """Fatal failure of a reconcile step."""

    def __init__(
        self,
        message: str,
        step: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)
        self.step = step
