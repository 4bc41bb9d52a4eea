"""Command-line interface for inspecting a single archive.

Human-readable output goes to *stderr* via Rich; ``--json`` writes the
resolved metadata to *stdout* so that it can be piped into other tools.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from jar_discovery.config import load_settings
from jar_discovery.errors import ArchiveReadError
from jar_discovery.jar_file import JarFile, load_jar_file
from jar_discovery.logging_config import configure_logging
from jar_discovery.process import StaticJvmProcess

app = typer.Typer(
    name="jar-discovery",
    help="Resolve identifying metadata from packaged Java applications.",
    no_args_is_help=True,
)
console = Console(stderr=True)


@app.callback()
def _global_options() -> None:
    """Global options applied to every command."""


def _summary(jar: JarFile, process: StaticJvmProcess) -> dict[str, Any]:
    return {
        "location": jar.get_location(),
        "checksum": jar.get_checksum(),
        "size": jar.get_size(),
        "last_modified": jar.get_last_modified_time().isoformat(),
        "app_type": jar.get_app_type().value,
        "artifact_name": jar.get_artifact_name(),
        "version": jar.get_version(),
        "app_name": jar.get_app_name(process),
        "app_port": jar.get_app_port(process),
        "build_jdk_version": jar.get_build_jdk_version(),
        "spring_boot_version": jar.get_spring_boot_version(),
        "dependencies": jar.get_dependencies(),
        "application_configurations": sorted(jar.get_application_configurations()),
        "logging_files": sorted(jar.get_logging_files()),
        "certificates": jar.get_certificates(),
        "static_files": jar.get_static_files(),
        "warnings": [issue.message for issue in jar.issues],
    }


def _display_summary(summary: dict[str, Any]) -> None:
    table = Table(title=summary["location"], show_header=True)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    for key, value in summary.items():
        if key == "location":
            continue
        if isinstance(value, list):
            value = f"{len(value)} item(s)" if value else "-"
        table.add_row(key, str(value) if value != "" else "-")
    console.print(table)
    for warning in summary["warnings"]:
        console.print(f"[yellow]warning:[/yellow] {warning}")


@app.command("inspect")
def inspect_command(
    path: Path = typer.Argument(..., help="Path to the JAR or WAR file."),
    jvm_options: list[str] = typer.Option(
        [],
        "--jvm-option",
        "-o",
        help="Runtime option of the running process, e.g. -Dserver.port=9090. Repeatable.",
    ),
    json_output: bool = typer.Option(False, "--json", help="Emit JSON to stdout."),
) -> None:
    """Resolve and print metadata for the archive at PATH."""
    settings = load_settings()
    configure_logging(settings)

    try:
        jar = load_jar_file(path, settings)
    except ArchiveReadError as exc:
        console.print(f"[red]error:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    summary = _summary(jar, StaticJvmProcess(jvm_options))
    if json_output:
        typer.echo(json.dumps(summary, indent=2))
    else:
        _display_summary(summary)
