#!/usr/bin/env python3
"""
VRT CLI - Visual Regression Tracker client

Usage:
    vrt track <image.png>... [OPTIONS]
    vrt config [--config vrt.json]
    vrt validate <vrt.json>
    vrt --version
"""

import asyncio
import logging
from enum import Enum
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import __version__
from .config import Config, load_config, load_config_file
from .errors import (
    ConfigurationError,
    TestRunAssertionError,
    VisualRegressionTrackerError,
)
from .results import TestRunStatus
from .tracker import VisualRegressionTracker

app = typer.Typer(
    name="vrt",
    help="📸 VRT - Visual Regression Tracker client",
    add_completion=False,
)
console = Console()


class OutputFormat(str, Enum):
    TEXT = "text"
    JSON = "json"


STATUS_STYLES = {
    TestRunStatus.OK.value: "green",
    TestRunStatus.NEW.value: "yellow",
    TestRunStatus.UNRESOLVED.value: "red",
    TestRunStatus.FAILED.value: "red",
    TestRunStatus.APPROVED.value: "cyan",
    TestRunStatus.AUTO_APPROVED.value: "cyan",
    "error": "red",
}


def version_callback(value: bool):
    if value:
        console.print(f"📸 VRT v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True,
        help="Show version and exit"
    ),
    log_level: Optional[str] = typer.Option(
        None, "--log-level",
        help="Enable logging at this level (e.g. INFO, DEBUG)"
    ),
):
    """
    📸 VRT - Visual Regression Tracker client

    Submit screenshots to a Visual Regression Tracker service.
    """
    if log_level:
        logging.basicConfig(
            level=log_level.upper(),
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


def _resolve_config(config_file: Optional[Path], **overrides) -> Config:
    """Load config or exit with a readable error."""
    try:
        config = load_config(config_file, **overrides)
        config.check_complete()
    except FileNotFoundError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(code=1)
    except ConfigurationError as e:
        console.print(f"[red]❌ Configuration error:[/red] {e}")
        raise typer.Exit(code=1)
    return config


async def track_images_async(
    config: Config,
    images: list[Path],
    name: str | None = None,
    options: dict | None = None,
    quiet: bool = False,
) -> list[dict]:
    """Start a build, submit every image, stop the build and return one record per image."""
    options = options or {}
    records: list[dict] = []

    async with VisualRegressionTracker(config) as tracker:
        if not quiet:
            console.print(f"🚀 Starting build for [bold]{config.project}[/bold] ({config.branch_name})")

        async with await tracker.start():
            if not quiet:
                console.print(f"   Build: {tracker.build_id}\n")

            for image in images:
                test_name = name if name and len(images) == 1 else image.stem
                record = {"name": test_name, "file": str(image)}
                try:
                    result = await tracker.track_file(test_name, image, **options)
                    record.update(result.to_dict())
                except TestRunAssertionError as e:
                    record.update(e.result.to_dict())
                    record["error"] = e.message
                except VisualRegressionTrackerError as e:
                    record["status"] = "error"
                    record["error"] = f"{e.kind.value}: {e.message}"
                records.append(record)

                if not quiet:
                    style = STATUS_STYLES.get(record["status"], "white")
                    console.print(f"▶ {test_name}: [{style}]{record['status']}[/{style}]")

        if not quiet:
            console.print("\n👋 Build stopped")

    return records


def _results_table(records: list[dict]) -> Table:
    table = Table(title="Test Runs")
    table.add_column("Name", style="cyan")
    table.add_column("Status")
    table.add_column("URL")
    table.add_column("Details")

    for record in records:
        style = STATUS_STYLES.get(record["status"], "white")
        details = record.get("error") or record.get("diffUrl") or ""
        table.add_row(
            record["name"],
            f"[{style}]{record['status']}[/{style}]",
            record.get("url") or "",
            details,
        )
    return table


@app.command()
def track(
    images: List[Path] = typer.Argument(
        ...,
        help="Screenshot files to submit",
        exists=True,
        readable=True,
        dir_okay=False,
    ),
    name: Optional[str] = typer.Option(
        None, "--name", "-n",
        help="Test run name (single image only; defaults to the file name)"
    ),
    os_name: Optional[str] = typer.Option(None, "--os", help="Operating system tag"),
    browser: Optional[str] = typer.Option(None, "--browser", help="Browser tag"),
    viewport: Optional[str] = typer.Option(None, "--viewport", help="Viewport tag, e.g. 1920x1080"),
    device: Optional[str] = typer.Option(None, "--device", help="Device tag"),
    custom_tags: Optional[str] = typer.Option(None, "--custom-tags", help="Custom tags"),
    diff_tolerance: float = typer.Option(
        0, "--diff-tolerance",
        help="Allowed difference in percent"
    ),
    comment: Optional[str] = typer.Option(None, "--comment", help="Comment stored with the run"),
    soft: Optional[bool] = typer.Option(
        None, "--soft/--strict",
        help="Override enableSoftAssert"
    ),
    config_file: Optional[Path] = typer.Option(
        None, "--config", "-c",
        help="Configuration file (defaults to ./vrt.json)"
    ),
    output: OutputFormat = typer.Option(
        OutputFormat.TEXT, "--output", "-o",
        case_sensitive=False,
        help="Output format"
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q",
        help="Only show the final results"
    ),
):
    """
    Submit screenshots to a new build.

    Starts a build, tracks every image, stops the build and exits with
    code 0 only when every test run is ok.
    """
    config = _resolve_config(config_file, enable_soft_assert=soft)
    quiet = quiet or output == OutputFormat.JSON

    options = {
        "os": os_name,
        "browser": browser,
        "viewport": viewport,
        "device": device,
        "custom_tags": custom_tags,
        "diff_tolerance_percent": diff_tolerance,
        "comment": comment,
    }

    try:
        records = asyncio.run(track_images_async(config, images, name, options, quiet))
    except VisualRegressionTrackerError as e:
        console.print(f"\n[red]❌ {e.kind.value} error:[/red] {e.message}")
        raise typer.Exit(code=1)

    if output == OutputFormat.JSON:
        console.print_json(data={"project": config.project, "results": records})
    else:
        console.print()
        console.print(_results_table(records))

    if all(record["status"] == TestRunStatus.OK.value for record in records):
        raise typer.Exit(code=0)
    raise typer.Exit(code=1)


@app.command("config")
def show_config(
    config_file: Optional[Path] = typer.Option(
        None, "--config", "-c",
        help="Configuration file (defaults to ./vrt.json)"
    ),
):
    """
    Show the resolved configuration.

    Merges the configuration file, VRT_* environment variables and
    defaults, and checks that every required field is present.
    """
    config = _resolve_config(config_file)

    table = Table(title="Configuration")
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    values = config.to_dict()
    values["apiKey"] = config.masked_api_key
    for key, value in values.items():
        table.add_row(key, "" if value is None else str(value))

    console.print(table)


@app.command()
def validate(
    config_file: Path = typer.Argument(
        ...,
        help="Path to the configuration file",
        exists=True,
        readable=True,
    ),
):
    """
    Validate a configuration file.

    Check field names and types without contacting the service.
    """
    console.print(f"\n📄 Validating: {config_file}")

    data, validation = load_config_file(config_file)

    if validation.is_valid:
        console.print(f"\n[green]✅ Valid configuration[/green] ({len(data)} field(s))")
        raise typer.Exit(code=0)
    else:
        console.print(f"\n[red]❌ Validation failed:[/red]")
        console.print(str(validation))
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
