import logging
import sys

import typer

from subnetcheck.commands import analyze, settings
from subnetcheck.logging import setup_logger

app = typer.Typer(help="Cluster-wide IPv4 subnet compatibility checks.")

# Configure logging
def setup_logging(debug: bool = False):
    """Configure logging based on debug mode."""
    level = logging.DEBUG if debug else None
    # Reports go to stdout; log lines go to stderr
    setup_logger("subnetcheck", level=level, stream=sys.stderr)

# Add all command groups
app.add_typer(analyze.app, name="analyze")
app.add_typer(settings.app, name="config")

# Global options callback
@app.callback()
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug logging"),
):
    """subnetcheck - verify interface subnets across a cluster before trusting the cabling."""
    ctx.ensure_object(dict)["debug"] = debug
    setup_logging(debug)
    if debug:
        logging.getLogger("subnetcheck").debug("Debug mode enabled")
