from __future__ import annotations

from pathlib import Path

import typer

from upstall import __version__
from upstall.cli.context import build_context
from upstall.core.config import InstallOptions
from upstall.core.errors import ErrorCode
from upstall.core.result import Err
from upstall.install.orchestrator import create_orchestrator
from upstall.install.report import Outcome
from upstall.net.http import RealHttpClient
from upstall.output.errors import install_error_exit_code, print_install_error
from upstall.platform.process import DefaultCommandRunner


app = typer.Typer(
    add_completion=False,
    rich_markup_mode="rich",
)


def _show_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.command()
def upstall(
    tag: str | None = typer.Option(
        None,
        "--tag",
        help="Release tag to install (default: latest stable).",
    ),
    out_dir: Path | None = typer.Option(
        None,
        "--out-dir",
        help="Save the artifact here and keep it.",
    ),
    keep: bool = typer.Option(False, "--keep", help="Keep the artifact downloaded to a temp dir."),
    force: bool = typer.Option(
        False,
        "--force",
        help="Reinstall even if the installed version is current.",
    ),
    uninstall: bool = typer.Option(False, "--uninstall", help="Remove the installed product."),
    skip_checksum: bool = typer.Option(
        False,
        "--skip-checksum",
        help="Skip SHA256 verification (not recommended).",
    ),
    dry_run: bool = typer.Option(False, "-n", "--dry-run", help="Print actions without modifying."),
    config: Path | None = typer.Option(
        None,
        "--config",
        help="Config file (default: $UPSTALL_CONFIG or the user config dir).",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_show_version,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Install, upgrade or uninstall a product from its published releases."""
    output_directory: Path | None = None
    if out_dir is not None:
        output_directory = out_dir.expanduser()
        if output_directory.exists() and not output_directory.is_dir():
            typer.echo(f"error: --out-dir '{output_directory}' is not a directory", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    options = InstallOptions(
        tag=tag.strip() if tag and tag.strip() else None,
        output_directory=output_directory,
        keep_artifact=keep,
        force=force,
        uninstall=uninstall,
        skip_checksum=skip_checksum,
        dry_run=dry_run,
    )

    ctx = build_context(config)
    token = ctx.config.index.token
    orchestrator = create_orchestrator(
        ctx.config,
        ctx.platform,
        ctx.console,
        http=RealHttpClient(token=token),
        probe_http=RealHttpClient(timeout=ctx.config.preflight.connect_timeout, retries=1),
        runner=DefaultCommandRunner(),
    )

    result = orchestrator.run(options)
    if isinstance(result, Err):
        print_install_error(result.error, ctx.console)
        raise typer.Exit(code=install_error_exit_code(result.error))

    report = result.value
    if report.outcome is Outcome.NOTHING_TO_UNINSTALL:
        ctx.console.print("Nothing to uninstall.")


def main() -> None:
    app()
