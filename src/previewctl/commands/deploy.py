"""Preview deployment commands."""

import click

from previewctl.core.context import pass_context, PreviewCtlContext
from previewctl.core.exceptions import ConfigError, ReconcileError, VercelError, AuthenticationError
from previewctl.deploy import ReconcileConfig, Reconciler, RunResult


def _resolve_config(ctx: PreviewCtlContext, branch: str | None) -> ReconcileConfig:
    try:
        return ReconcileConfig.from_profile(ctx.profile, branch=branch)
    except ConfigError as e:
        ctx.output.print_error(str(e))
        raise click.Abort()


def _print_result(ctx: PreviewCtlContext, result: RunResult, title: str) -> None:
    ctx.output.print_data(result.to_dict(), title=title)
    for message in result.errors:
        ctx.output.print_warning(message)


@click.command("deploy")
@click.option("-b", "--branch", metavar="NAME", help="Feature branch (default: $FE_BRANCH)")
@pass_context
def deploy(ctx: PreviewCtlContext, branch: str | None) -> None:
    """Redeploy or create the preview deployment for a branch.

    Points VITE_API_URL at the branch's preview API, then redeploys the
    branch's active deployment or creates a new one.

    \b
    Examples:
        FE_BRANCH=feature-x previewctl deploy
        previewctl deploy --branch feature-x
        previewctl --dry-run deploy
    """
    run_config = _resolve_config(ctx, branch)
    ctx.logger.debug("Resolved run configuration", **run_config.redacted())

    if ctx.dry_run:
        ctx.log_dry_run("reconcile preview deployment", {"branch": run_config.branch})

    try:
        result = Reconciler(ctx.vercel(run_config), run_config, dry_run=ctx.dry_run).reconcile()
    except (ReconcileError, VercelError, AuthenticationError) as e:
        ctx.output.print_error(f"Deployment process failed: {e}")
        raise click.Abort()
    finally:
        ctx.close()

    _print_result(ctx, result, title=f"Preview Deployment: {run_config.branch}")

    if ctx.dry_run:
        ctx.output.print_info("Dry run complete - no changes made")
    elif result.success:
        ctx.output.print_success("Preview deployment process completed successfully")
    else:
        ctx.output.print_warning("Preview deployment process completed with errors")


@click.command("status")
@click.option("-b", "--branch", metavar="NAME", help="Feature branch (default: $FE_BRANCH)")
@pass_context
def status(ctx: PreviewCtlContext, branch: str | None) -> None:
    """Show what a deploy would do, without changing anything.

    \b
    Examples:
        previewctl status --branch feature-x
        previewctl -o json status
    """
    run_config = _resolve_config(ctx, branch)

    try:
        result = Reconciler(ctx.vercel(run_config), run_config, dry_run=True).reconcile()
    except (ReconcileError, VercelError, AuthenticationError) as e:
        ctx.output.print_error(str(e))
        raise click.Abort()
    finally:
        ctx.close()

    _print_result(ctx, result, title=f"Preview Status: {run_config.branch}")
