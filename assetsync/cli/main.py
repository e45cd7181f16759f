"""
Main CLI entry point for assetsync.
"""

# Standard library imports
import importlib.metadata
from pathlib import Path
from typing import List, Optional

# Third-party imports
import typer

# Local imports
from assetsync import __version__
from assetsync.environment import SyncSettings, configure_logging
from assetsync.errors import ConfigurationError
from assetsync.hooks import PackageEvent, PackageOperation, handle_package_event
from assetsync.utils.paths import join_paths
from assetsync.utils.rich_console import ConsoleReporter, get_console, print_table


console = get_console()


app = typer.Typer(
    help="assetsync - publish front-end assets from the dependency store into the webroot.",
    no_args_is_help=True,
)


def _settings(ctx: typer.Context) -> SyncSettings:
    return ctx.obj


def _build_engine(ctx: typer.Context):
    try:
        return _settings(ctx).build_engine(ConsoleReporter(console))
    except ConfigurationError as error:
        console.print(f"✗ {error}", style="bold red", markup=False)
        raise typer.Exit(1)


@app.callback()
def main(
    ctx: typer.Context,
    project_root: Optional[Path] = typer.Option(None, help="Project root; relative catalog paths start here"),
    webroot: Optional[str] = typer.Option(None, help="Webroot directory overriding the catalog's"),
    catalog: Optional[Path] = typer.Option(None, help="JSON catalog file replacing the built-in catalog"),
    log_file: Optional[str] = typer.Option(None, help="Log file, relative to the project root"),
    permissions: Optional[str] = typer.Option(None, help="Octal permissions for copied files, e.g. 750"),
    debug: bool = typer.Option(False, "--debug", help="Print debug logging to stderr"),
):
    """
    assetsync - publish front-end assets from the dependency store into the webroot.
    """
    try:
        settings = SyncSettings.load(
            project_root=project_root,
            webroot=webroot,
            catalog_file=catalog,
            log_file=log_file,
            permissions=permissions,
            debug=debug or None,
        )
    except ConfigurationError as error:
        # Hooks run inside a package manager and must never fail it
        if ctx.invoked_subcommand == "hook":
            console.print(f"⚠ {error}", style="bold yellow", markup=False)
            return
        console.print(f"✗ {error}", style="bold red", markup=False)
        raise typer.Exit(1)

    configure_logging(settings.console_level)
    ctx.obj = settings


@app.command()
def sync(
    ctx: typer.Context,
    packages: Optional[List[str]] = typer.Argument(None, help="Package identifiers; all supported packages if omitted"),
    strict: bool = typer.Option(False, "--strict", help="Exit with an error when any file was not copied"),
):
    """Copy the assets of the given packages into the webroot."""
    engine = _build_engine(ctx)

    if packages:
        console.print("Copying assets for specified packages...", style="cyan")
    else:
        supported = ", ".join(engine.catalog.list_supported())
        console.print("Copying assets for all supported packages", style="cyan")
        console.print(f"Supported: {supported}", style="cyan", markup=False)

    results = engine.process_packages(packages or [])

    if any(not result.ok for result in results):
        raise typer.Exit(1)
    if strict and any(not result.complete for result in results):
        raise typer.Exit(1)


@app.command("list")
def list_packages(ctx: typer.Context):
    """List the supported packages and the files they publish."""
    try:
        catalog = _settings(ctx).build_catalog()
    except ConfigurationError as error:
        console.print(f"✗ {error}", style="bold red", markup=False)
        raise typer.Exit(1)

    rows = []
    for package_id in catalog.list_supported():
        for group_name, group in catalog.get_groups(package_id).items():
            rows.append([
                package_id,
                group_name,
                group.source_dir,
                join_paths(catalog.get_webroot_path(), group.destination_dir),
                ", ".join(group.files),
            ])
    print_table(
        ["Package", "Group", "Source", "Destination", "Files"],
        rows,
        title="Supported Packages",
        console=console,
    )


@app.command()
def hook(
    ctx: typer.Context,
    operation: PackageOperation = typer.Argument(..., help="Lifecycle operation that happened"),
    package: str = typer.Argument(..., help="Package identifier that was installed or updated"),
):
    """Entry point for package manager install/update hooks. Never fails."""
    if ctx.obj is None:
        return
    try:
        engine = _settings(ctx).build_engine(ConsoleReporter(console))
    except ConfigurationError as error:
        console.print(f"⚠ {error}", style="bold yellow", markup=False)
        return
    handle_package_event(PackageEvent(operation=operation, package_id=package), engine)


@app.command()
def version():
    """Show assetsync version."""
    try:
        installed = importlib.metadata.version("assetsync")
    except importlib.metadata.PackageNotFoundError:
        installed = __version__
    typer.echo(f"assetsync version: {installed}")
