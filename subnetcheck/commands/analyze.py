"""
Subnet compatibility analysis commands.
"""
import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer

from subnetcheck.config import get_settings
from subnetcheck.exceptions import EmptyInput, IngestError, InvalidCIDR
from subnetcheck.logging import setup_logger
from subnetcheck.modules.analyzer import analyze
from subnetcheck.modules.ingest import load_paths
from subnetcheck.modules.report import export_report, render_json, render_text

app = typer.Typer(help="Analyze collected interface data")


def _load(paths: List[Path]):
    try:
        return load_paths(paths)
    except IngestError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(2)


@app.command("run")
def run_analysis(
    ctx: typer.Context,
    paths: List[Path] = typer.Argument(
        ...,
        exists=True,
        help="Collected `ip -br -4 addr` output, YAML/JSON record files, or directories of them",
    ),
    fmt: str = typer.Option("text", "--format", "-f", help="Report format: text | json"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the report to this file"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Settings YAML file"),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", min=1, help="Threads for group classification"),
    strict: bool = typer.Option(False, "--strict", help="Abort on the first invalid record instead of skipping it"),
):
    """Check that interfaces across the cluster have compatible subnets.

    Exits 0 when every interface group is compatible, 1 otherwise.
    """
    if fmt not in ("text", "json"):
        raise typer.BadParameter(f"Unsupported format: {fmt}", param_hint="--format")

    settings = get_settings(config)
    if strict:
        settings = settings.model_copy(update={"skip_invalid_records": False})
    debug = bool(ctx.obj and ctx.obj.get("debug"))
    # --debug wins; otherwise the level and log file come from the settings
    setup_logger("subnetcheck", level=logging.DEBUG if debug else None,
                 settings=settings.logging, stream=sys.stderr)

    records = _load(paths)

    try:
        report = analyze(records, settings=settings, workers=workers)
    except EmptyInput as e:
        report = e.report
    except InvalidCIDR as e:
        typer.echo(f"❌ Invalid record: {e}", err=True)
        raise typer.Exit(2)

    if output:
        export_report(report, str(output), fmt=fmt)
    elif fmt == "json":
        typer.echo(render_json(report))
    else:
        typer.echo(render_text(report), nl=False)

    if not report.passed:
        raise typer.Exit(1)


@app.command("records")
def show_records(
    paths: List[Path] = typer.Argument(..., exists=True, help="Files or directories to parse"),
):
    """Print the interface records parsed from collected output."""
    records = _load(paths)
    if not records:
        typer.echo("⚠️  No interface records found", err=True)
        raise typer.Exit(1)
    for record in records:
        typer.echo(f"{record.node}\t{record.interface}\t{record.status.value}\t{record.cidr}")
