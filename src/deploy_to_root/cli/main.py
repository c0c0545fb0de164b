"""deploy-to-root CLI - Main entry point.

Provides the ``deploy-to-root`` command-line interface.

Usage:
    deploy-to-root deploy --source my-app/build --dest .
    deploy-to-root clean
    deploy-to-root manifest show --format json
    deploy-to-root manifest scan my-app/build
"""

from typing import Optional

import typer
from pydantic import ValidationError

from deploy_to_root.cli.commands import deploy as deploy_commands
from deploy_to_root.cli.commands.manifest import app as manifest_app
from deploy_to_root.config import get_settings
from deploy_to_root.logging_config import LOG_LEVELS, configure_logging

# ---------------------------------------------------------------------------
# Root Typer app
# ---------------------------------------------------------------------------

app = typer.Typer(
    name="deploy-to-root",
    help="Promote a build output directory into a repository root, replacing the previous deployment.",
    add_completion=False,
)

app.command(name="deploy")(deploy_commands.deploy)
app.command(name="clean")(deploy_commands.clean)
app.add_typer(manifest_app, name="manifest")


@app.callback()
def setup(
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help=f"Logging level ({', '.join(LOG_LEVELS)})"
    ),
    log_format: Optional[str] = typer.Option(None, "--log-format", help="console or json"),
):
    """Configure logging before any command runs."""
    try:
        settings = get_settings()
    except ValidationError as e:
        typer.echo(f"Error: invalid DEPLOY_* configuration: {e}", err=True)
        raise typer.Exit(1)

    try:
        configure_logging(
            level=log_level or settings.log_level,
            log_format=(log_format or settings.log_format).lower(),
        )
    except ValueError as e:
        raise typer.BadParameter(str(e))


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
