"""Deployment pipeline.

A run is a single linear sequence::

    START -> VALIDATE_SOURCE -> LOAD_MANIFEST -> DELETE_PREVIOUS
          -> COPY_NEW -> SCAN_NEW -> SAVE_MANIFEST -> DONE

Any failure moves the run to FAILED and the error propagates unchanged.
There is no retry and no rollback: a run that fails after DELETE_PREVIOUS
leaves the destination partially updated and the old manifest in place.

Example:
    >>> config = DeployConfig(source_dir=Path("my-app/build"), dest_root=Path("."))
    >>> result = deploy(config)
    >>> result.copied
    ['assets', 'index.html']
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from deploy_to_root.errors import DeployError, FilesystemFailure, SourceMissing, UnsafePath
from deploy_to_root.logging_config import get_logger
from deploy_to_root.manifest import ManifestStore
from deploy_to_root.models import ManifestEntry
from deploy_to_root.reconciler import copy_all, remove_previous
from deploy_to_root.scanner import scan

logger = get_logger(__name__)

DEFAULT_MANIFEST_NAME = ".deploy-manifest.json"


class DeployStage(str, Enum):
    """Stages of a deployment run."""

    START = "start"
    VALIDATE_SOURCE = "validate_source"
    LOAD_MANIFEST = "load_manifest"
    DELETE_PREVIOUS = "delete_previous"
    COPY_NEW = "copy_new"
    SCAN_NEW = "scan_new"
    SAVE_MANIFEST = "save_manifest"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class DeployConfig:
    """Resolved inputs for one deployment.

    Attributes:
        source_dir: Build output directory whose entries are promoted
        dest_root: Directory receiving the entries (the safety boundary)
        manifest_name: Manifest file name inside ``dest_root``
        build_command: Command named in the hint when the build is missing
    """

    source_dir: Path
    dest_root: Path
    manifest_name: str = DEFAULT_MANIFEST_NAME
    build_command: str = "npm run build:app"

    @property
    def manifest_path(self) -> Path:
        return Path(self.dest_root) / self.manifest_name


@dataclass
class DeployResult:
    """Outcome of a successful run."""

    manifest_path: Path
    removed: list[str] = field(default_factory=list)
    copied: list[str] = field(default_factory=list)
    items: list[ManifestEntry] = field(default_factory=list)
    stage: DeployStage = DeployStage.DONE


def validate_source(config: DeployConfig) -> None:
    """Check the build output and destination root exist as directories.

    Raises:
        SourceMissing: If the build output directory is absent or not a directory
        FilesystemFailure: If the destination root is absent or not a directory
        UnsafePath: If the build output directory is the destination root
    """
    source = Path(config.source_dir)
    if not source.exists():
        raise SourceMissing(
            f"Build folder not found: {source}. "
            f"Make sure `{config.build_command}` completed successfully."
        )
    if not source.is_dir():
        raise SourceMissing(f"Expected {source} to be a directory.")

    dest = Path(config.dest_root)
    if not dest.is_dir():
        raise FilesystemFailure(f"Destination root not found or not a directory: {dest}")
    if source.resolve() == dest.resolve():
        raise UnsafePath(f"Build folder and destination root are the same directory: {dest}")


def deploy(config: DeployConfig) -> DeployResult:
    """Replace the previous deployment in ``dest_root`` with the current build.

    Args:
        config: Source, destination and manifest settings

    Returns:
        DeployResult with removed paths, copied names and the new manifest items

    Raises:
        DeployError: Any fatal error, unchanged from the failing stage
    """
    stage = DeployStage.START
    store = ManifestStore(config.manifest_path)
    protected = [Path(config.source_dir)]

    def advance(next_stage: DeployStage) -> DeployStage:
        logger.debug("deploy_stage", stage=next_stage.value)
        return next_stage

    try:
        stage = advance(DeployStage.VALIDATE_SOURCE)
        validate_source(config)

        stage = advance(DeployStage.LOAD_MANIFEST)
        previous = store.load()

        stage = advance(DeployStage.DELETE_PREVIOUS)
        removed = remove_previous(previous, config.dest_root, protected=protected)

        stage = advance(DeployStage.COPY_NEW)
        copied = copy_all(config.source_dir, config.dest_root, protected=protected)

        stage = advance(DeployStage.SCAN_NEW)
        items = scan(config.dest_root, include=copied)

        stage = advance(DeployStage.SAVE_MANIFEST)
        manifest_path = store.save(items)
    except DeployError as e:
        failed_at, stage = stage, DeployStage.FAILED
        logger.error("deploy_failed", stage=stage.value, failed_at=failed_at.value, error=str(e))
        raise

    stage = advance(DeployStage.DONE)
    logger.info(
        "deploy_completed",
        dest_root=str(config.dest_root),
        removed=len(removed),
        copied=len(copied),
        items=len(items),
    )
    return DeployResult(
        manifest_path=manifest_path,
        removed=removed,
        copied=copied,
        items=items,
        stage=stage,
    )


def clean(config: DeployConfig) -> list[str]:
    """Remove the previous deployment and record an empty manifest.

    Returns:
        Relative paths that were removed
    """
    if not Path(config.dest_root).is_dir():
        raise FilesystemFailure(
            f"Destination root not found or not a directory: {config.dest_root}"
        )

    store = ManifestStore(config.manifest_path)
    previous = store.load()
    removed = remove_previous(previous, config.dest_root, protected=[Path(config.source_dir)])
    store.save([])
    logger.info("deploy_cleaned", dest_root=str(config.dest_root), removed=len(removed))
    return removed
