"""Main CLI entry point for previewctl."""

import sys
from typing import Any

import click
from rich.console import Console

from previewctl import __version__
from previewctl.config import load_config
from previewctl.core.context import PreviewCtlContext
from previewctl.core.output import OutputFormat
from previewctl.core.exceptions import PreviewCtlError, ConfigError
from previewctl.deploy.naming import derive_target_url


CONTEXT_SETTINGS = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 120,
}


class OutputFormatType(click.ParamType):
    """Custom Click parameter type for output format."""

    name = "format"

    def convert(
        self,
        value: Any,
        param: click.Parameter | None,
        ctx: click.Context | None,
    ) -> OutputFormat:
        if isinstance(value, OutputFormat):
            return value
        try:
            return OutputFormat(value.lower())
        except ValueError:
            self.fail(
                f"Invalid format '{value}'. Choose from: table, json, yaml, raw",
                param,
                ctx,
            )


OUTPUT_FORMAT = OutputFormatType()


def print_version(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    """Print version and exit."""
    if not value or ctx.resilient_parsing:
        return
    console = Console()
    console.print(f"previewctl version {__version__}")
    ctx.exit()


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option(
    "-p",
    "--profile",
    metavar="NAME",
    envvar="PREVIEWCTL_PROFILE",
    help="Configuration profile to use",
)
@click.option(
    "-o",
    "--output",
    "output_format",
    type=OUTPUT_FORMAT,
    metavar="FORMAT",
    help="Output format: table, json, yaml, raw",
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Increase verbosity (-v for info, -vv for debug)",
)
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    help="Suppress non-essential output",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Show what would happen without making changes",
)
@click.option(
    "--no-color",
    is_flag=True,
    help="Disable colored output",
)
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(exists=True),
    metavar="FILE",
    envvar="PREVIEWCTL_CONFIG",
    help="Path to config file",
)
@click.option(
    "--version",
    is_flag=True,
    callback=print_version,
    expose_value=False,
    is_eager=True,
    help="Show version and exit",
)
@click.pass_context
def cli(
    ctx: click.Context,
    profile: str | None,
    output_format: OutputFormat | None,
    verbose: int,
    quiet: bool,
    dry_run: bool,
    no_color: bool,
    config_file: str | None,
) -> None:
    """PreviewCtl - Vercel preview deployments per feature branch.

    Keeps a branch's preview deployment and its VITE_API_URL
    environment variable in step with the branch's preview API.

    \b
    Examples:
        previewctl deploy --branch feature-x
        previewctl status
        previewctl config

    \b
    Configuration:
        ~/.previewctl/config.yaml    User configuration
        ./previewctl.yaml            Project configuration
        VERCEL_TOKEN, VERCEL_PROJECT_ID, VERCEL_ORG_ID, FE_BRANCH
    """
    try:
        config = load_config(config_file)

        ctx.obj = PreviewCtlContext(
            config=config,
            profile=profile,
            output_format=output_format,
            verbose=verbose,
            quiet=quiet,
            dry_run=dry_run,
            color=not no_color,
        )

        if ctx.obj.dry_run and not quiet:
            ctx.obj.output.print_warning("Dry-run mode enabled - no changes will be made")

    except ConfigError as e:
        console = Console(stderr=True)
        console.print(f"[red]Configuration error:[/red] {e}")
        sys.exit(1)


def register_commands() -> None:
    """Register all commands."""
    from previewctl.commands.deploy import deploy, status

    cli.add_command(deploy)
    cli.add_command(status)


register_commands()


@cli.command()
@click.pass_context
def config(ctx: click.Context) -> None:
    """Show current configuration."""
    previewctl_ctx: PreviewCtlContext = ctx.obj
    profile = previewctl_ctx.profile
    branch = profile.preview.get_branch()
    config_data = {
        "profile": previewctl_ctx.profile_name,
        "output_format": previewctl_ctx.output_format.value,
        "dry_run": previewctl_ctx.dry_run,
        "verbose": previewctl_ctx.verbose,
        "vercel": {
            "base_url": profile.vercel.base_url,
            "project_id": profile.vercel.get_project_id(),
            "org_id": profile.vercel.get_org_id(),
            "has_token": bool(profile.vercel.get_token()),
            "timeout": profile.vercel.timeout,
        },
        "preview": {
            "branch": branch,
            "env_key": profile.preview.env_key,
            "target": profile.preview.target,
            "domain": profile.preview.domain,
            "target_url": derive_target_url(branch, profile.preview.domain) if branch else None,
        },
    }
    previewctl_ctx.output.print_data(config_data, title="Current Configuration")


def main(args: list[str] | None = None) -> None:
    """Main entry point."""
    try:
        cli(args=args)
    except PreviewCtlError as e:
        console = Console(stderr=True)
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        console = Console(stderr=True)
        console.print("\n[yellow]Interrupted[/yellow]")
        sys.exit(130)


def deploy_main() -> None:
    """No-argument entry point: run the reconciler from the environment."""
    main(["deploy"])


if __name__ == "__main__":
    main()
