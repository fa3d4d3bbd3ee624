"""Click context object for sharing state across commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from previewctl.config import PreviewCtlConfig, ProfileConfig, get_default_config
from previewctl.core.output import OutputFormat, OutputFormatter
from previewctl.core.logging import LogLevel, setup_logging, StructuredLogger

if TYPE_CHECKING:
    from previewctl.clients.vercel import VercelClient
    from previewctl.deploy.models import ReconcileConfig


class PreviewCtlContext:
    """Shared context object for previewctl commands.

    This object is passed through Click's context mechanism and provides
    access to configuration, the Vercel client, and output utilities.
    """

    def __init__(
        self,
        config: PreviewCtlConfig | None = None,
        profile: str | None = None,
        output_format: OutputFormat | None = None,
        verbose: int = 0,
        quiet: bool = False,
        dry_run: bool = False,
        color: bool = True,
    ):
        self._config = config or get_default_config()
        self._profile_name = profile or "default"

        # Output settings (CLI overrides config)
        self._output_format = output_format or self._config.global_settings.output_format
        self._verbose = verbose
        self._quiet = quiet
        self._dry_run = dry_run or self._config.global_settings.dry_run
        self._color = color and self._config.global_settings.color != "never"

        if verbose >= 2:
            log_level = LogLevel.DEBUG
        elif verbose >= 1:
            log_level = LogLevel.INFO
        elif quiet:
            log_level = LogLevel.ERROR
        else:
            log_level = self._config.global_settings.verbosity

        setup_logging(log_level, rich_output=self._color)
        self._logger = StructuredLogger("context")

        self._output = OutputFormatter(
            format=self._output_format,
            color=self._color,
            quiet=quiet,
        )

        # Lazy-loaded client
        self._vercel_client: VercelClient | None = None

    @property
    def config(self) -> PreviewCtlConfig:
        """Get the loaded configuration."""
        return self._config

    @property
    def profile(self) -> ProfileConfig:
        """Get the current profile configuration."""
        return self._config.get_profile(self._profile_name)

    @property
    def profile_name(self) -> str:
        """Get the current profile name."""
        return self._profile_name

    @property
    def output(self) -> OutputFormatter:
        """Get the output formatter."""
        return self._output

    @property
    def output_format(self) -> OutputFormat:
        """Get the output format."""
        return self._output_format

    @property
    def dry_run(self) -> bool:
        """Check if dry-run mode is enabled."""
        return self._dry_run

    @property
    def verbose(self) -> int:
        """Get verbosity level."""
        return self._verbose

    @property
    def quiet(self) -> bool:
        """Check if quiet mode is enabled."""
        return self._quiet

    @property
    def logger(self) -> StructuredLogger:
        """Get the context logger."""
        return self._logger

    def vercel(self, run_config: "ReconcileConfig") -> "VercelClient":
        """Get or create the Vercel client, authenticated with the run's token."""
        if self._vercel_client is None:
            from previewctl.clients.vercel import VercelClient

            self._vercel_client = VercelClient(self.profile.vercel, token=run_config.token)
        return self._vercel_client

    def close(self) -> None:
        """Release the HTTP client, if one was created."""
        if self._vercel_client is not None:
            self._vercel_client.close()
            self._vercel_client = None

    def log_dry_run(self, action: str, details: dict[str, Any] | None = None) -> None:
        """Log a dry-run action."""
        if self._dry_run:
            msg = f"[dry-run] {action}"
            if details:
                detail_str = ", ".join(f"{k}={v}" for k, v in details.items())
                msg = f"{msg} ({detail_str})"
            self._output.print(f"[dim]{msg}[/dim]")


# Click decorator for passing context
pass_context = click.make_pass_decorator(PreviewCtlContext, ensure=True)
