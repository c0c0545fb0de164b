"""Manifest inspection commands for deploy-to-root.

Commands:
    show  Print the manifest of the last deployment
    scan  Print the items a deployment of a directory would record
"""

import json
from pathlib import Path
from typing import Optional

import typer

from deploy_to_root.cli._shared import OutputFormat, format_items_text, manifest_name_callback
from deploy_to_root.config import get_settings
from deploy_to_root.errors import DeployError
from deploy_to_root.manifest import ManifestStore
from deploy_to_root.scanner import scan as scan_tree

app = typer.Typer(help="Inspect deployment manifests")


@app.command()
def show(
    dest: Optional[Path] = typer.Option(
        None, "--dest", "-d", help="Destination root (default: DEPLOY_DEST_ROOT)"
    ),
    manifest_name: Optional[str] = typer.Option(
        None,
        "--manifest-name",
        callback=manifest_name_callback,
        help="Manifest file name inside the destination root",
    ),
    format: OutputFormat = typer.Option(OutputFormat.text, "--format", "-f", help="Output format"),
):
    """Show the manifest written by the last deployment.

    Examples:

        deploy-to-root manifest show --format json
    """
    config = get_settings().to_deploy_config(dest_root=dest, manifest_name=manifest_name)
    store = ManifestStore(config.manifest_path)

    try:
        manifest = store.read()
    except DeployError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if manifest is None:
        typer.echo(f"No manifest at {config.manifest_path}.")
        return

    if format == OutputFormat.json:
        typer.echo(manifest.model_dump_json(by_alias=True, indent=2))
        return

    typer.echo(f"Manifest: {config.manifest_path}")
    typer.echo(f"Generated at: {manifest.generated_at.isoformat()}")
    typer.echo(f"Items: {len(manifest.items)}")
    if manifest.items:
        typer.echo(format_items_text(manifest.items))


@app.command()
def scan(
    path: Path = typer.Argument(..., help="Directory to scan"),
    format: OutputFormat = typer.Option(OutputFormat.text, "--format", "-f", help="Output format"),
):
    """List the entries a deployment of PATH would record.

    Examples:

        deploy-to-root manifest scan my-app/build
    """
    try:
        items = scan_tree(path)
    except DeployError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if format == OutputFormat.json:
        typer.echo(json.dumps([item.model_dump(mode="json") for item in items], indent=2))
        return

    if not items:
        typer.echo(f"No files or directories under {path}.")
        return
    typer.echo(f"Found {len(items)} entries under {path}:")
    typer.echo(format_items_text(items))
