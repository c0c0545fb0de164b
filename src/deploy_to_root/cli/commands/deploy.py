"""Deployment commands for deploy-to-root.

Commands:
    deploy  Replace the previous deployment with the current build output
    clean   Remove the previous deployment and empty the manifest
"""

from pathlib import Path
from typing import Optional

import typer

from deploy_to_root.cli._shared import manifest_name_callback
from deploy_to_root.config import get_settings
from deploy_to_root.errors import DeployError
from deploy_to_root.pipeline import clean as clean_deployment
from deploy_to_root.pipeline import deploy as run_deployment


def deploy(
    source: Optional[Path] = typer.Option(
        None, "--source", "-s", help="Build output directory (default: DEPLOY_SOURCE_DIR)"
    ),
    dest: Optional[Path] = typer.Option(
        None, "--dest", "-d", help="Destination root (default: DEPLOY_DEST_ROOT)"
    ),
    manifest_name: Optional[str] = typer.Option(
        None,
        "--manifest-name",
        callback=manifest_name_callback,
        help="Manifest file name inside the destination root",
    ),
):
    """Copy the build output into the destination root.

    Paths recorded by the previous deployment are removed first.

    Examples:

        deploy-to-root deploy

        deploy-to-root deploy --source dist --dest ../site
    """
    config = get_settings().to_deploy_config(source, dest, manifest_name)

    try:
        result = run_deployment(config)
    except DeployError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"Deployed build output to {config.dest_root}.")
    typer.echo(
        f"  removed {len(result.removed)} previous path(s), "
        f"copied {len(result.copied)} top-level entr{'y' if len(result.copied) == 1 else 'ies'}, "
        f"recorded {len(result.items)} item(s) in {result.manifest_path.name}"
    )


def clean(
    source: Optional[Path] = typer.Option(
        None, "--source", "-s", help="Build output directory, never deleted"
    ),
    dest: Optional[Path] = typer.Option(
        None, "--dest", "-d", help="Destination root (default: DEPLOY_DEST_ROOT)"
    ),
    manifest_name: Optional[str] = typer.Option(
        None,
        "--manifest-name",
        callback=manifest_name_callback,
        help="Manifest file name inside the destination root",
    ),
):
    """Remove everything the previous deployment placed in the destination root.

    Examples:

        deploy-to-root clean
    """
    config = get_settings().to_deploy_config(source, dest, manifest_name)

    try:
        removed = clean_deployment(config)
    except DeployError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if not removed:
        typer.echo("Nothing to remove.")
        return
    typer.echo(f"Removed {len(removed)} path(s) from {config.dest_root}.")
