import typer
import yaml
from pathlib import Path
from typing import Optional

from subnetcheck.config import get_settings

app = typer.Typer(help="Inspect analyzer settings")

@app.command("show")
def show_settings(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Settings YAML file"),
):
    """Print the effective settings after file and environment overrides."""
    settings = get_settings(config)
    typer.echo(yaml.safe_dump(settings.model_dump(), default_flow_style=False, sort_keys=False), nl=False)
