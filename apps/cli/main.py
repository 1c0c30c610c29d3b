"""CLI application for DepSync."""

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from core.config import (
    DEFAULT_INSTALL_COMMAND,
    DEFAULT_PACKAGES_DIR,
    DEFAULT_REPORT_NAME,
    SyncOptions,
)
from core.errors import DepSyncError, InstallCommandError
from core.installer import SubprocessInstaller
from core.models import Strategy
from core.overlap import find_overlaps
from core.report import render_summary
from core.sync import run_sync
from core.workspace import FileSystemWorkspace, read_workspace

console = Console()
logger = logging.getLogger("depsync")

LOCKFILE_HELP = """Lockfile or sub-package dependencies are out of date.
To fix:
  1. Run the install command
  2. Commit the updated lockfile
  3. Run `depsync sync` to check for sub-package version conflicts"""


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


app = typer.Typer(
    name="depsync",
    help="DepSync - Align dependency versions across a multi-package workspace",
    add_completion=False,
)


@app.command()
def sync(
    root: str = typer.Option(".", "--root", "-r", help="Workspace root containing package.json"),
    latest: bool = typer.Option(False, "--latest", help="Converge on the highest declared version"),
    fix: bool = typer.Option(True, "--fix/--no-fix", help="Rewrite manifests and reinstall"),
    install_command: str = typer.Option(
        DEFAULT_INSTALL_COMMAND,
        "--install-command",
        envvar="DEPSYNC_INSTALL_COMMAND",
        help="Command run after manifests are rewritten",
    ),
    packages_dir: str = typer.Option(
        DEFAULT_PACKAGES_DIR,
        "--packages-dir",
        envvar="DEPSYNC_PACKAGES_DIR",
        help="Directory holding the sub-packages",
    ),
    report_name: str = typer.Option(DEFAULT_REPORT_NAME, "--report-name", help="Report filename"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Detect version conflicts between workspace packages and converge them."""
    configure_logging(verbose)
    options = SyncOptions(
        strategy=Strategy.LATEST if latest else Strategy.WORKSPACE_FIRST,
        auto_fix=fix,
        install_command=install_command,
        packages_dir=packages_dir,
        report_name=report_name,
    )

    try:
        workspace = FileSystemWorkspace(root, packages_dir=options.packages_dir)
        installer = SubprocessInstaller(options.install_command)
        result = run_sync(workspace, installer, options)
    except DepSyncError as e:
        console.print(f"Error: {e}", style="red")
        raise typer.Exit(1)
    except Exception as e:
        logger.exception("Unexpected failure")
        console.print(f"Error: {e}", style="red")
        raise typer.Exit(1)

    render_summary(console, result)

    unresolved = result.unresolved_high
    if unresolved:
        names = ", ".join(conflict.dependency for conflict in unresolved)
        console.print(f"Unresolved high-severity conflicts: {names}", style="red")
    raise typer.Exit(result.exit_code)


@app.command()
def overlap(
    root: str = typer.Option(".", "--root", "-r", help="Workspace root containing package.json"),
    packages_dir: str = typer.Option(
        DEFAULT_PACKAGES_DIR,
        "--packages-dir",
        envvar="DEPSYNC_PACKAGES_DIR",
        help="Directory holding the sub-packages",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """List dependencies sub-packages re-declare from the root manifest."""
    configure_logging(verbose)

    try:
        scan = read_workspace(FileSystemWorkspace(root, packages_dir=packages_dir))
    except DepSyncError as e:
        console.print(f"Error: {e}", style="red")
        raise typer.Exit(1)

    overlaps = find_overlaps(scan)
    if not overlaps:
        console.print("No sub-package re-declares a root dependency")
        return

    table = Table(title="Overlapping declarations")
    table.add_column("Package", style="cyan")
    table.add_column("Section")
    table.add_column("Dependency")
    table.add_column("Version")
    table.add_column("Root version")
    table.add_column("Same")
    for item in overlaps:
        table.add_row(
            item.package,
            item.declaration_type.value,
            item.dependency,
            item.version,
            item.root_version,
            "[green]yes[/green]" if item.matches else "[red]no[/red]",
        )
    console.print(table)


@app.command("check-lockfile")
def check_lockfile(
    root: str = typer.Option(".", "--root", "-r", help="Workspace root containing package.json"),
    install_command: str = typer.Option(
        DEFAULT_INSTALL_COMMAND,
        "--install-command",
        envvar="DEPSYNC_INSTALL_COMMAND",
        help="Install command, run with --frozen-lockfile",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Fail if the lockfile does not match the workspace manifests."""
    configure_logging(verbose)

    installer = SubprocessInstaller(install_command)
    try:
        installer.install(FileSystemWorkspace(root).root, frozen=True)
    except InstallCommandError as e:
        console.print(LOCKFILE_HELP, style="red")
        console.print(f"Error: {e}", style="red")
        raise typer.Exit(1)

    console.print("Lockfile is up to date.", style="green")


if __name__ == "__main__":
    app()
