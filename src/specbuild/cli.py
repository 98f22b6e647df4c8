"""The `specbuild` command-line interface."""

import importlib.metadata
import os
from pathlib import Path

import click

from .config import load_config
from .discovery import resolve_repo_dir
from .exceptions import ConfigError
from .models import RunReport
from .orchestrator import BuildOrchestrator

try:
    __version__ = importlib.metadata.version("specbuild")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.0.0-dev"


def _print_report(report: RunReport) -> None:
    for message in report.tool_errors:
        click.secho(f"ERROR:  {message}", fg="red", err=True)

    for result in report.results:
        if result.succeeded:
            click.secho(f"✅ {result.spec_file}: {result.artifact}", fg="green")
        else:
            click.secho(f"    ERROR:  {result.error}", fg="red", err=True)
        if result.log_path:
            click.echo(f"   Build log: {result.log_path}")

    if not report.ok and report.err_msg:
        click.secho(
            f"\n    ERROR:  {report.err_msg} ... processing halted\n",
            fg="red",
            err=True,
        )


@click.command(context_settings=dict(help_option_names=["-h", "--help"]))
@click.version_option(
    __version__,
    "-V",
    "--version",
    prog_name="specbuild",
    message="%(prog)s version %(version)s",
)
@click.option(
    "--repo-dir",
    type=click.Path(exists=True, file_okay=False, resolve_path=True),
    help="Repository holding the spec files. Defaults to the current directory.",
)
@click.option(
    "--topdir",
    type=click.Path(file_okay=False, resolve_path=True),
    help="Override the rpmbuild tree location (default: $HOME/rpmbuild).",
)
@click.option("-v", "--verbose", is_flag=True, help="Log every line of build output.")
@click.pass_context
def cli(
    ctx: click.Context, repo_dir: str | None, topdir: str | None, verbose: bool
) -> None:
    """Builds binary RPMs from every spec file in the repository."""
    if verbose:
        os.environ["PYVIDER_LOG_LEVEL"] = "DEBUG"

    repo_path = resolve_repo_dir(repo_dir)
    try:
        config = load_config(repo_path, Path(topdir) if topdir else None)
    except ConfigError as e:
        click.secho(f"ERROR:  {e}", fg="red", err=True)
        ctx.exit(1)

    click.echo(f"🚀 Building RPMs from {repo_path} into {config.topdir}...")
    report = BuildOrchestrator(config).run()
    _print_report(report)
    ctx.exit(report.exit_code)


main = cli
