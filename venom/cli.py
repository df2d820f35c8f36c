"""[Layer: Presentation] Typer CLI Commands."""

from importlib.metadata import PackageNotFoundError, version as get_package_version
from typing import Optional

import typer

from venom.config import get_settings
from venom.core.engine import Engine
from venom.core.errors import VenomError
from venom.models import Project
from venom.tui.app import VenomApp

# Substrings marking a variable as secret in listings
SECRET_MARKERS = ("SECRET", "KEY")
MASK = "*****"


def _get_version() -> str:
    """Get version from package metadata (single source of truth: pyproject.toml)."""
    try:
        return get_package_version("venom-env")
    except PackageNotFoundError:
        return "0.0.0-dev"


def _version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"venom {_get_version()}")
        raise typer.Exit()


app = typer.Typer(
    name="venom",
    help="Manage per-project environment variables stored in a document store.",
)


def _fail(error: VenomError) -> None:
    """Report a store/export error and exit non-zero."""
    typer.echo(f"Error: {error}", err=True)
    raise typer.Exit(1)


def _connected_engine() -> Engine:
    """Engine whose store has passed its readiness wait."""
    settings = get_settings()
    engine = Engine(settings=settings)
    try:
        engine.connect(settings.connect_timeout)
    except VenomError as e:
        engine.close()
        _fail(e)
    return engine


def _launch_tui() -> None:
    """Run the interactive session; store failures at startup end with exit code 1."""
    settings = get_settings()
    engine = Engine(settings=settings)
    try:
        tui_app = VenomApp(engine, settings=settings)
        tui_app.run()
    finally:
        engine.close()
    if tui_app.return_code:
        raise typer.Exit(tui_app.return_code)


def mask_value(key: str, value: str) -> str:
    """Hide values whose key looks secret."""
    upper = key.upper()
    if any(marker in upper for marker in SECRET_MARKERS):
        return MASK
    return value


def format_project(project: Project, mask: bool = True) -> list[str]:
    """Lines describing one project for `venom list`."""
    lines = [
        f"Project Name: {project.name}",
        f"  File: {project.file_name}",
        f"  Target Folder: {project.target_folder}",
        f"  Variables ({len(project.variables)}):",
    ]
    for key, value in project.sorted_variables():
        shown = mask_value(key, value) if mask else value
        lines.append(f"    - {key}: {shown}")
    return lines


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Launch TUI by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        _launch_tui()


@app.command()
def tui() -> None:
    """Launch the interactive TUI."""
    _launch_tui()


@app.command(name="list")
def list_projects(
    show_secrets: bool = typer.Option(
        False, "--show-secrets", help="Print secret-looking values unmasked"
    ),
) -> None:
    """List all projects and their variables."""
    engine = _connected_engine()
    try:
        projects = engine.list_projects()
    except VenomError as e:
        _fail(e)
    finally:
        engine.close()

    if not projects:
        typer.echo("No projects yet. Use 'venom add <name>' to create one.")
        return
    mask = get_settings().mask_secrets and not show_secrets
    typer.echo("\nProjects:\n")
    for name in sorted(projects):
        for line in format_project(projects[name], mask=mask):
            typer.echo(line)
        typer.echo("")


@app.command()
def add(
    name: str = typer.Argument(..., help="Project name"),
    file_name: str = typer.Option("", "--file", "-f", help="Env file name"),
    target_folder: str = typer.Option("", "--target", "-t", help="Target folder"),
) -> None:
    """Add a new project (overwrites a project with the same name)."""
    engine = _connected_engine()
    try:
        engine.add_project(name, file_name=file_name, target_folder=target_folder)
    except VenomError as e:
        _fail(e)
    finally:
        engine.close()
    typer.echo(f"Added project with name: {name}")


@app.command(name="set")
def set_variable(
    name: str = typer.Argument(..., help="Project name"),
    assignment: str = typer.Argument(..., help="KEY=VALUE"),
) -> None:
    """Set a variable on a project."""
    key, sep, value = assignment.partition("=")
    if not sep or not key:
        typer.echo(f"Invalid set format: {assignment} (expected KEY=VALUE)", err=True)
        raise typer.Exit(2)
    engine = _connected_engine()
    try:
        engine.set_variable(name, key, value)
    except VenomError as e:
        _fail(e)
    finally:
        engine.close()
    typer.echo(f"Set {key} = {value} for project {name}")


@app.command()
def unset(
    name: str = typer.Argument(..., help="Project name"),
    key: str = typer.Argument(..., help="Variable key to remove"),
) -> None:
    """Remove a variable from a project."""
    engine = _connected_engine()
    try:
        engine.unset_variable(name, key)
    except VenomError as e:
        _fail(e)
    finally:
        engine.close()
    typer.echo(f"Removed key {key} from project {name}")


@app.command()
def edit(
    name: str = typer.Argument(..., help="Project name"),
    file_name: str = typer.Option(..., "--file", "-f", help="Env file name"),
    target_folder: str = typer.Option(..., "--target", "-t", help="Target folder"),
) -> None:
    """Change a project's file name and target folder."""
    engine = _connected_engine()
    try:
        engine.edit_project(name, file_name, target_folder)
    except VenomError as e:
        _fail(e)
    finally:
        engine.close()
    typer.echo(
        f"Updated project {name} with new file: {file_name} and target: {target_folder}"
    )


@app.command()
def pull(
    name: Optional[str] = typer.Option(
        None, "--name", "-n", help="Project to pull (default: all projects)"
    ),
) -> None:
    """Write project variables to their env files."""
    engine = _connected_engine()
    try:
        paths = engine.pull(name)
    except VenomError as e:
        _fail(e)
    finally:
        engine.close()
    for path in paths:
        typer.echo(f"Wrote {path}")
    if name:
        typer.echo(f"Project {name} saved successfully.")
    else:
        typer.echo(f"All projects saved successfully ({len(paths)} files).")


@app.command()
def version() -> None:
    """Show Venom version."""
    typer.echo(f"venom {_get_version()}")
