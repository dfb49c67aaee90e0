"""Command-line interface for gradlemedic."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated, Any

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from gradlemedic import __version__
from gradlemedic.config import (
    CONFIG_FILENAMES,
    GradlemedicConfig,
    find_config_file,
    generate_example_config,
    load_config,
)
from gradlemedic.core.models import Compatibility, HealthVerdict
from gradlemedic.utils.logging import configure_logging, get_logger, log_to_file

app = typer.Typer(
    name="gradlemedic",
    help="Diagnose Gradle build health and plan Gradle version migrations.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(
    name="config",
    help="Configuration management.",
    no_args_is_help=True,
)
app.add_typer(config_app, name="config")

console = Console()
logger = get_logger(__name__)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"gradlemedic version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file.",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
        ),
    ] = None,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Also write debug logs to this file.",
        ),
    ] = None,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """gradlemedic - Gradle build doctor and migration assistant."""
    log_level = "DEBUG" if verbose else "WARNING" if quiet else "INFO"
    configure_logging(level=log_level)

    if log_file:
        log_to_file(str(log_file))

    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config

    if config:
        logger.debug("Using configuration file: %s", config)


def _handle_cli_error(error: Exception) -> None:
    """Handle exceptions and display user-friendly error messages.

    Args:
        error: The exception to handle.

    Raises:
        typer.Exit: Always exits with code 1.
    """
    from gradlemedic.errors import GradlemedicError

    if isinstance(error, GradlemedicError):
        console.print(f"[bold red]Error:[/bold red] {error.message}")
        if error.hint:
            console.print(f"[yellow]Hint:[/yellow] {error.hint}")
    else:
        console.print(f"[red]Error: {error}[/red]")
        logger.exception("Command failed")

    raise typer.Exit(code=1)


def _load(ctx: typer.Context, project_dir: Path) -> GradlemedicConfig:
    """Load configuration for a command run against project_dir."""
    config_path = (ctx.obj or {}).get("config_path")
    return load_config(config_path=config_path, start_path=project_dir)


def _write_output(output: Path, content: str) -> None:
    output.write_text(content)
    console.print(f"\nReport written to: {output}")


@app.command()
def doctor(
    ctx: typer.Context,
    project_dir: Annotated[
        Path,
        typer.Argument(
            help="Gradle project directory.",
            exists=True,
            file_okay=False,
            dir_okay=True,
        ),
    ] = Path(),
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Write the JSON report to this file.",
        ),
    ] = None,
) -> None:
    """Diagnose build health across performance, caching, dependencies and structure.

    Exits with code 1 when the overall verdict is critical.
    """
    from gradlemedic.analysis.doctor import HealthDoctor
    from gradlemedic.analysis.probe import ProjectProbe
    from gradlemedic.analysis.text_service import create_text_service
    from gradlemedic.report.printer import ReportPrinter, report_to_json

    try:
        config = _load(ctx, project_dir)
        service = create_text_service(config)

        console.print(f"Diagnosing Gradle build in {project_dir}...")
        probe = ProjectProbe(project_dir, config.probe)
        health_doctor = HealthDoctor(probe, service, config.analysis)
        report = asyncio.run(health_doctor.diagnose())

        ReportPrinter(console).print_health_report(report)

        if output:
            _write_output(output, report_to_json(report))
    except Exception as e:
        _handle_cli_error(e)

    if report.overall == HealthVerdict.CRITICAL:
        console.print("\n[red]Build health is critical[/red]")
        raise typer.Exit(code=1)


@app.command()
def migrate(
    ctx: typer.Context,
    project_dir: Annotated[
        Path,
        typer.Argument(
            help="Gradle project directory.",
            exists=True,
            file_okay=False,
            dir_okay=True,
        ),
    ] = Path(),
    target: Annotated[
        str | None,
        typer.Option(
            "--target",
            "-t",
            help="Target Gradle version (default: latest known release).",
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            help="List the fixes that would be applied without modifying any file.",
        ),
    ] = False,
    apply: Annotated[
        bool,
        typer.Option(
            "--apply",
            help="Apply safe auto-fixes.",
        ),
    ] = False,
    update_wrapper: Annotated[
        bool,
        typer.Option(
            "--update-wrapper",
            help="Update the Gradle wrapper to the target version.",
        ),
    ] = False,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Write the JSON report to this file.",
        ),
    ] = None,
) -> None:
    """Analyze a Gradle version migration and optionally apply safe fixes.

    Exits with code 1 when the migration is classified as breaking.
    """
    from gradlemedic.analysis.text_service import create_text_service
    from gradlemedic.migration.applicator import FixApplicator
    from gradlemedic.migration.engine import MigrationEngine
    from gradlemedic.report.printer import ReportPrinter, report_to_json

    try:
        config = _load(ctx, project_dir)
        service = create_text_service(config)

        console.print(f"Analyzing Gradle migration for {project_dir}...")
        engine = MigrationEngine(project_dir, service, config)
        report = asyncio.run(engine.analyze(target))

        ReportPrinter(console).print_migration_report(report)

        applicator = FixApplicator(project_dir, dry_run=dry_run, console=console)
        if apply or dry_run:
            applicator.apply_fixes(report)
        if update_wrapper:
            asyncio.run(applicator.update_wrapper(report.target_version))

        if output:
            _write_output(output, report_to_json(report))
    except Exception as e:
        _handle_cli_error(e)

    if report.compatibility == Compatibility.BREAKING:
        console.print("\n[red]Migration contains breaking changes[/red]")
        raise typer.Exit(code=1)


@config_app.command("init")
def config_init(
    path: Annotated[
        Path,
        typer.Argument(
            help="Directory to create configuration file in.",
        ),
    ] = Path(),
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite existing configuration file.",
        ),
    ] = False,
) -> None:
    """Initialize a new configuration file."""
    config_path = path / CONFIG_FILENAMES[0]

    if config_path.exists() and not force:
        console.print(f"[yellow]Configuration file already exists: {config_path}[/yellow]")
        console.print("Use --force to overwrite.")
        raise typer.Exit(code=1)

    config_path.write_text(generate_example_config())
    console.print(f"[green]Created configuration file: {config_path}[/green]")


@config_app.command("validate")
def config_validate(
    config: Annotated[
        Path,
        typer.Argument(
            help="Path to configuration file to validate.",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
        ),
    ],
) -> None:
    """Validate a configuration file."""
    console.print(f"Validating configuration file: {config}...")

    try:
        data = yaml.safe_load(config.read_text()) or {}
    except yaml.YAMLError as e:
        console.print(f"[red]YAML parse error: {e}[/red]")
        raise typer.Exit(code=1)

    if not isinstance(data, dict):
        console.print("[red]Validation failed:[/red] top level must be a mapping")
        raise typer.Exit(code=1)

    warnings = []
    if "version" not in data:
        warnings.append("Missing 'version' field")
    elif data["version"] != 1:
        warnings.append(f"Unknown version: {data['version']}")
    if "api_key" in data:
        warnings.append("api_key is stored in the file; prefer ANTHROPIC_API_KEY")

    try:
        GradlemedicConfig(**data)
    except ValidationError as e:
        console.print("[red]Validation failed:[/red]")
        for error in e.errors():
            location = ".".join(str(part) for part in error["loc"])
            console.print(f"  [red]ERROR:[/red] {location}: {error['msg']}")
        raise typer.Exit(code=1)

    if warnings:
        console.print("[yellow]Warnings:[/yellow]")
        for warning in warnings:
            console.print(f"  [yellow]WARNING:[/yellow] {warning}")

    console.print("[green]Configuration is valid.[/green]")


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Show the effective configuration."""
    config_path = (ctx.obj or {}).get("config_path") or find_config_file()

    if config_path is None:
        console.print("[dim]No configuration file found, showing defaults.[/dim]")
        console.print("Run 'gradlemedic config init' to create one.\n")
    else:
        console.print(f"Configuration file: {config_path}\n")

    try:
        config = load_config(config_path=config_path)
    except (yaml.YAMLError, ValidationError) as e:
        console.print(f"[red]Invalid configuration: {e}[/red]")
        raise typer.Exit(code=1)

    table = Table(title="Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    def flatten_dict(d: dict[str, Any], prefix: str = "") -> list[tuple[str, str]]:
        items = []
        for key, value in d.items():
            full_key = f"{prefix}.{key}" if prefix else key
            if isinstance(value, dict):
                items.extend(flatten_dict(value, full_key))
            else:
                items.append((full_key, str(value)))
        return items

    settings = config.model_dump(exclude={"api_key"})
    for key, value in flatten_dict(settings):
        table.add_row(key, value)
    table.add_row("api_key", "(set)" if config.api_key else "(not set)")

    console.print(table)


if __name__ == "__main__":
    app()
